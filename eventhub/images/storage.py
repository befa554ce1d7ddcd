"""Storage of raw uploads in the ``original`` area."""

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from loguru import logger
from starlette.datastructures import FormData, UploadFile

from eventhub.core.exceptions import ImageValidationError
from eventhub.images.paths import ImageVariant, derive_path

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredUpload:
    """Handle to a raw upload written to disk."""

    path: Path
    filename: str
    content_type: str | None = None


class UploadStorage:
    """Accepts a single image file per request and writes it to disk.

    Files are named ``<prefix>-<millisecond timestamp>.<ext>`` where ``ext``
    keeps the case used by the client.
    """

    def __init__(
        self,
        directory: Path,
        accepted_extensions: tuple[str, ...],
        max_bytes: int,
        field_name: str = "image",
    ):
        self.directory = Path(directory)
        self.accepted_extensions = tuple(ext.lower() for ext in accepted_extensions)
        self.max_bytes = max_bytes
        self.field_name = field_name

    def _rejection(self, message: str, **details) -> ImageValidationError:
        return ImageValidationError(
            message,
            details={"acceptedExtensions": list(self.accepted_extensions), **details},
        )

    def extension_of(self, filename: str) -> str:
        """Return the file extension if it is accepted, raise otherwise."""
        stem, dot, ext = filename.rpartition(".")
        if not dot or not stem or ext.lower() not in self.accepted_extensions:
            raise self._rejection(
                f"Only {', '.join(self.accepted_extensions)} files are allowed!",
                filename=filename,
            )
        return ext

    def pick_file(self, form: FormData) -> UploadFile | None:
        """Return the single uploaded image from a parsed form, if any."""
        files = [
            (name, value)
            for name, value in form.multi_items()
            if isinstance(value, UploadFile) and value.filename
        ]
        if not files:
            return None
        if len(files) > 1:
            raise self._rejection(
                "Only one file can be uploaded per request",
                fields=[name for name, _ in files],
            )
        name, upload = files[0]
        if name != self.field_name:
            raise self._rejection(
                f"Unexpected file field {name!r}, expected {self.field_name!r}",
                field=name,
            )
        return upload

    def _taken(self, path: Path) -> bool:
        """Whether the name is in use by any variant of an earlier upload."""
        return any(Path(derive_path(path, variant)).exists() for variant in ImageVariant)

    def _claim(self, prefix: str, ext: str) -> tuple[Path, BinaryIO]:
        """Create the target file exclusively so concurrent uploads never share a name."""
        self.directory.mkdir(parents=True, exist_ok=True)
        stamp = int(time.time() * 1000)
        while True:
            path = self.directory / f"{prefix}-{stamp}.{ext}"
            if not self._taken(path):
                try:
                    return path, open(path, "xb")
                except FileExistsError:
                    logger.debug(f"Upload name {path.name} already claimed, trying the next one")
            stamp += 1

    def _copy(self, source: BinaryIO, prefix: str, ext: str) -> tuple[Path, int]:
        target, out = self._claim(prefix, ext)
        written = 0
        try:
            with out:
                while chunk := source.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise self._rejection(
                            "File too large",
                            maxBytes=self.max_bytes,
                        )
                    out.write(chunk)
        except BaseException:
            target.unlink(missing_ok=True)
            raise
        return target, written

    async def save(self, upload: UploadFile, prefix: str) -> StoredUpload:
        """Validate and write one upload to the original area."""
        filename = upload.filename or ""
        ext = self.extension_of(filename)

        if upload.size is not None and upload.size > self.max_bytes:
            raise self._rejection("File too large", maxBytes=self.max_bytes)

        await upload.seek(0)
        target, size = await asyncio.to_thread(self._copy, upload.file, prefix, ext)
        logger.debug(f"Stored upload {filename!r} ({size} bytes) at {target}")

        return StoredUpload(path=target, filename=filename, content_type=upload.content_type)

    async def save_from_form(self, form: FormData, prefix: str) -> StoredUpload | None:
        """Pick the image from a form and store it; None when no file was sent."""
        upload = self.pick_file(form)
        if upload is None:
            return None
        return await self.save(upload, prefix)
