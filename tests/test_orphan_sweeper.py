"""Tests for the orphan image sweeper."""

import os
import time
from pathlib import Path

import pytest

from eventhub.images import ImageStore, ImageVariant
from eventhub.models.company import Company
from eventhub.models.event import Event
from eventhub.workers.orphan_images import OrphanImageSweeper


def put(store: ImageStore, variant: ImageVariant, name: str, age_minutes: float) -> Path:
    path = store.policy.directory(variant) / name
    path.write_bytes(b"img")
    stamp = time.time() - age_minutes * 60
    os.utime(path, (stamp, stamp))
    return path


@pytest.mark.asyncio
async def test_sweep_removes_only_old_unreferenced_files(
    db_session, session_maker, image_store: ImageStore, company: Company
):
    db_session.add(
        Event(
            title="Kept",
            company_id=company.id,
            cover_image_url="image/jpeg:public/compressed/eventImage-1.jpg",
        )
    )
    await db_session.commit()

    kept = [
        put(image_store, ImageVariant.COMPRESSED, "eventImage-1.jpg", 120),
        put(image_store, ImageVariant.MINIATURE, "eventImage-1.jpg", 120),
        # Too young to be swept
        put(image_store, ImageVariant.ORIGINAL, "eventImage-3.jpg", 1),
        put(image_store, ImageVariant.COMPRESSED, "eventImage-4.jpg", 1),
    ]
    swept = [
        put(image_store, ImageVariant.ORIGINAL, "eventImage-2.jpg", 120),
        put(image_store, ImageVariant.COMPRESSED, "eventImage-5.jpg", 120),
        put(image_store, ImageVariant.MINIATURE, "eventImage-5.jpg", 120),
    ]

    sweeper = OrphanImageSweeper(image_store, session_maker=session_maker, grace_minutes=60)
    removed = await sweeper.run()

    assert removed == len(swept)
    assert all(path.exists() for path in kept)
    assert not any(path.exists() for path in swept)


@pytest.mark.asyncio
async def test_sweep_with_empty_store(session_maker, image_store: ImageStore):
    sweeper = OrphanImageSweeper(image_store, session_maker=session_maker, grace_minutes=0)

    assert await sweeper.run() == 0
