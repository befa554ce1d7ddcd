"""Background workers for scheduled tasks."""

from eventhub.workers.orphan_images import OrphanImageSweeper

__all__ = [
    "OrphanImageSweeper",
]
