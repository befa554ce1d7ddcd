"""Best-effort removal of stored image files.

Deletion never fails a request: missing files are ignored and any other
filesystem error is logged and swallowed.
"""

from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from eventhub.core.exceptions import InvalidImageReference
from eventhub.images.paths import ImageRef, ImageVariant, derive_path


def remove_file(path: str | Path | None) -> bool:
    """Delete one file. Returns True when a file was actually removed."""
    if not path:
        return False
    try:
        Path(path).unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Could not remove file {path}: {e}")
        return False
    logger.debug(f"Removed {path}")
    return True


def remove_files(paths: Iterable[str | Path]) -> int:
    """Delete several files, returning how many were removed."""
    return sum(1 for path in paths if remove_file(path))


def remove_all_variants(reference: str | Path | None) -> int:
    """Delete the original, compressed and miniature files of one image.

    Accepts either a full ``"<mime>:<path>"`` reference or a bare path of any
    variant.
    """
    if not reference:
        return 0

    text = str(reference)
    try:
        if ":" in text and "/" in text.split(":", 1)[0]:
            base_path = ImageRef.parse(text).path
        else:
            base_path = text
        paths = [derive_path(base_path, variant) for variant in ImageVariant]
    except InvalidImageReference as e:
        logger.warning(f"Not removing image files for malformed reference: {e}")
        return 0

    return remove_files(paths)
