"""Inline (data URL) rendering of stored images."""

import base64
from pathlib import Path

from eventhub.core.exceptions import ImageFileMissingError
from eventhub.images.paths import ImageRef, ImageVariant


def to_data_url(reference: str | None, variant: ImageVariant | None = None) -> str | None:
    """Read the referenced image and return ``data:<mime>;base64,<payload>``.

    Empty references are returned unchanged. A reference whose file is gone
    raises ``ImageFileMissingError``.
    """
    if not reference:
        return reference

    ref = ImageRef.parse(reference)
    if variant is not None:
        ref = ref.derive(variant)

    try:
        payload = Path(ref.path).read_bytes()
    except FileNotFoundError as e:
        raise ImageFileMissingError(
            f"Image file missing for {ref.variant.value} variant",
            details={"path": ref.path},
        ) from e

    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{ref.mime_type};base64,{encoded}"
