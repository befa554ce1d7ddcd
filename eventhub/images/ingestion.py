"""Per-request orchestration of image upload, processing and commit.

A request that carries an image moves through::

    IDLE -> UPLOADING -> VALIDATING -> PROCESSING -> COMMITTING -> DONE

and may end in ABORTED from any state. Files written for an aborted attempt
are removed; old image files are only removed after the replacing entity
state has been committed.

Usage::

    async with ImageIngestion(store, "eventImage") as ingestion:
        data = await ingestion.receive(form, EventForm)
        await ingestion.process(data.quality)
        event = await ingestion.commit(event, service.persist, service.reload)
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.datastructures import FormData, UploadFile

from eventhub.core.exceptions import CodecError, FormValidationError, PersistenceError
from eventhub.images.cleanup import remove_files
from eventhub.images.paths import ImageRef, ImageVariant, derive_path
from eventhub.images.storage import StoredUpload
from eventhub.images.store import ImageStore

FormT = TypeVar("FormT", bound=BaseModel)
EntityT = TypeVar("EntityT")

# Strong references to fire-and-forget cleanup tasks
_background_tasks: set[asyncio.Task] = set()


class IngestionState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    VALIDATING = "validating"
    PROCESSING = "processing"
    COMMITTING = "committing"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class UploadResult:
    """What one upload attempt produced; consumed once by the commit step."""

    path_to_save: str | None = None
    new_file_paths: list[Path] = field(default_factory=list)
    compression_done: bool = False


def schedule_cleanup(paths: list[Path]) -> asyncio.Task | None:
    """Remove files in a background thread without waiting for it."""
    if not paths:
        return None
    task = asyncio.get_running_loop().create_task(asyncio.to_thread(remove_files, paths))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


def form_fields(form: FormData) -> dict[str, str]:
    """Non-file form values, with empty strings treated as absent."""
    return {
        name: value
        for name, value in form.multi_items()
        if not isinstance(value, UploadFile) and value != ""
    }


class ImageIngestion:
    """Coordinates one image-carrying create or update request."""

    def __init__(self, store: ImageStore, file_prefix: str, attribute: str = "cover_image_url"):
        self.store = store
        self.file_prefix = file_prefix
        self.attribute = attribute
        self.state = IngestionState.IDLE
        self.upload: StoredUpload | None = None
        self.result: UploadResult | None = None

    async def __aenter__(self) -> "ImageIngestion":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None or self.state in (IngestionState.DONE, IngestionState.ABORTED):
            return False
        self.abort(background=issubclass(exc_type, asyncio.CancelledError))
        return False

    def _enter(self, state: IngestionState) -> None:
        logger.debug(f"{self.file_prefix} ingestion: {self.state.value} -> {state.value}")
        self.state = state

    def _attempt_paths(self) -> list[Path]:
        paths: list[Path] = []
        if self.upload is not None:
            original = self.upload.path
            paths.append(original)
            paths.extend(
                Path(derive_path(original, variant))
                for variant in (ImageVariant.COMPRESSED, ImageVariant.MINIATURE)
            )
        if self.result is not None:
            paths.extend(p for p in self.result.new_file_paths if p not in paths)
        return paths

    def abort(self, background: bool = False) -> None:
        """Give up on this attempt and remove every file it wrote."""
        if self.state == IngestionState.DONE:
            return
        paths = self._attempt_paths()
        self._enter(IngestionState.ABORTED)
        if background:
            schedule_cleanup(paths)
        else:
            remove_files(paths)

    async def receive(self, form: FormData, schema: type[FormT]) -> FormT:
        """Store the uploaded file (if any) and validate the other form fields."""
        self._enter(IngestionState.UPLOADING)
        try:
            self.upload = await self.store.storage.save_from_form(form, self.file_prefix)
        except Exception:
            self.abort()
            raise

        self._enter(IngestionState.VALIDATING)
        try:
            return schema.model_validate(form_fields(form))
        except PydanticValidationError as e:
            self.abort()
            details = [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in e.errors()
            ]
            raise FormValidationError(details=details) from e

    async def process(self, quality: int | None = None) -> UploadResult | None:
        """Generate derivatives of the stored upload; None when no file was sent."""
        if self.upload is None:
            return None

        self._enter(IngestionState.PROCESSING)
        if quality is None:
            quality = self.store.policy.compress_quality
        try:
            derived = await self.store.generator.generate(self.upload.path, quality)
        finally:
            # Raw uploads are never kept
            self.store.remove_file(self.upload.path)

        reference = None
        if derived.success:
            mime_type = derived.mime_type or self.upload.content_type or "application/octet-stream"
            reference = str(ImageRef(mime_type, derived.compressed_path.as_posix()))

        self.result = UploadResult(
            path_to_save=reference,
            new_file_paths=derived.written_paths,
            compression_done=derived.success,
        )
        if not derived.success:
            self.abort()
            raise CodecError(details={"errors": derived.errors})
        return self.result

    def _restore(self, entity: Any, previous: str | None, replacing: bool) -> None:
        if replacing:
            setattr(entity, self.attribute, previous)

    def _committed(self, previous: str | None, replacing: bool) -> None:
        # From here on the new files are referenced by stored state
        self._enter(IngestionState.DONE)
        if replacing and previous and previous != self.result.path_to_save:
            self.store.remove_all(previous)

    async def commit(
        self,
        entity: EntityT,
        persist: Callable[[EntityT], Awaitable[Any]],
        reload: Callable[[EntityT], Awaitable[Any]] | None = None,
    ) -> Any:
        """Point the entity at the new image and persist it.

        ``persist`` must only write the entity; the attempt counts as done
        once it returns. A cancellation that arrives while it runs waits for
        the write to settle, so files are never removed under a committed
        reference. The previous image files are removed right after the
        write, before the optional ``reload``.
        """
        self._enter(IngestionState.COMMITTING)
        previous = getattr(entity, self.attribute, None)
        replacing = self.result is not None and self.result.path_to_save is not None
        if replacing:
            setattr(entity, self.attribute, self.result.path_to_save)

        persisting = asyncio.ensure_future(persist(entity))
        try:
            await asyncio.shield(persisting)
        except asyncio.CancelledError:
            await asyncio.wait({persisting})
            if not persisting.cancelled() and persisting.exception() is None:
                self._committed(previous, replacing)
            else:
                self._restore(entity, previous, replacing)
            raise
        except Exception as e:
            self._restore(entity, previous, replacing)
            self.abort()
            if isinstance(e, SQLAlchemyError):
                raise PersistenceError(details={"error": str(e)}) from e
            raise

        self._committed(previous, replacing)
        if reload is None:
            return entity
        return await reload(entity)
