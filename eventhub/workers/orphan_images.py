"""Orphan image sweeper.

Removes image files no entity points at: raw uploads left behind in the
``original`` area and compressed/miniature files whose reference is gone
(for example after a concurrent update). Only files older than the grace
period are touched so in-flight requests are never affected.
"""

import asyncio
import time
from pathlib import Path

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from eventhub.core.config import get_settings
from eventhub.core.exceptions import InvalidImageReference
from eventhub.db.session import async_session_maker
from eventhub.images import ImageRef, ImageStore, ImageVariant
from eventhub.images.cleanup import remove_files
from eventhub.models.activity import Activity
from eventhub.models.event import Event
from eventhub.models.user import User

settings = get_settings()


class OrphanImageSweeper:
    """Worker for deleting unreferenced image files."""

    def __init__(
        self,
        store: ImageStore,
        session_maker: async_sessionmaker[AsyncSession] = async_session_maker,
        grace_minutes: int | None = None,
    ):
        self.store = store
        self.session_maker = session_maker
        self.grace_minutes = (
            settings.orphan_grace_minutes if grace_minutes is None else grace_minutes
        )

    async def referenced_paths(self) -> set[Path]:
        """Resolved paths of every derivative an entity still points at."""
        async with self.session_maker() as db:
            references: list[str | None] = []
            for column in (Event.cover_image_url, Activity.cover_image_url, User.profile_image_url):
                result = await db.execute(select(column).where(column.is_not(None)))
                references.extend(result.scalars().all())

        paths: set[Path] = set()
        for reference in references:
            try:
                ref = ImageRef.parse(reference)
            except InvalidImageReference as e:
                logger.warning(f"Skipping malformed image reference: {e}")
                continue
            for variant in (ImageVariant.COMPRESSED, ImageVariant.MINIATURE):
                paths.add(Path(ref.derive(variant).path).resolve())
        return paths

    def find_orphans(self, referenced: set[Path], now: float | None = None) -> list[Path]:
        cutoff = (now if now is not None else time.time()) - self.grace_minutes * 60
        orphans: list[Path] = []
        for variant in ImageVariant:
            directory = self.store.policy.directory(variant)
            if not directory.is_dir():
                continue
            for path in directory.iterdir():
                if not path.is_file() or path.stat().st_mtime > cutoff:
                    continue
                if variant == ImageVariant.ORIGINAL or path.resolve() not in referenced:
                    orphans.append(path)
        return orphans

    async def run(self) -> int:
        """Run one sweep, returning how many files were removed."""
        logger.info(f"Running orphan image sweep (grace {self.grace_minutes} min)")
        try:
            referenced = await self.referenced_paths()
            orphans = await asyncio.to_thread(self.find_orphans, referenced)
            removed = await asyncio.to_thread(remove_files, orphans)
        except Exception as e:
            logger.error(f"Orphan image sweep error: {e}")
            return 0

        logger.info(f"Orphan image sweep: removed {removed} of {len(orphans)} files")
        return removed
