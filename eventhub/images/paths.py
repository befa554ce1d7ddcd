"""Variant addressing for stored images.

An image lives in three sibling directories that differ only in one path
segment: ``original``, ``compressed`` and ``miniature``. A persisted image
reference is ``"<mime type>:<path>"`` where the path points at one of them.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from eventhub.core.exceptions import InvalidImageReference

REFERENCE_SEPARATOR = ":"


class ImageVariant(str, Enum):
    """Physical variants of an uploaded image."""

    ORIGINAL = "original"
    COMPRESSED = "compressed"
    MINIATURE = "miniature"


_TOKENS = {variant.value for variant in ImageVariant}


def _to_posix(path: str | Path) -> PurePosixPath:
    return PurePosixPath(str(path).replace("\\", "/"))


def _token_index(path: PurePosixPath) -> int:
    """Index of the single variant segment among the directory parts."""
    directories = path.parts[:-1]
    hits = [i for i, part in enumerate(directories) if part in _TOKENS]
    if len(hits) != 1:
        raise InvalidImageReference(
            f"Expected exactly one variant directory in {path.as_posix()!r}, found {len(hits)}"
        )
    return hits[0]


def variant_of(path: str | Path) -> ImageVariant:
    """Return the variant a path belongs to."""
    posix = _to_posix(path)
    return ImageVariant(posix.parts[_token_index(posix)])


def derive_path(path: str | Path, variant: ImageVariant) -> str:
    """Swap the variant segment of ``path`` for ``variant``."""
    posix = _to_posix(path)
    parts = list(posix.parts)
    parts[_token_index(posix)] = ImageVariant(variant).value
    return PurePosixPath(*parts).as_posix()


@dataclass(frozen=True)
class ImageRef:
    """Parsed image reference."""

    mime_type: str
    path: str

    @classmethod
    def parse(cls, reference: str) -> "ImageRef":
        mime_type, sep, path = reference.partition(REFERENCE_SEPARATOR)
        if not sep or "/" not in mime_type or not path:
            raise InvalidImageReference(f"Malformed image reference {reference!r}")
        # Validates the variant segment
        _token_index(_to_posix(path))
        return cls(mime_type=mime_type, path=_to_posix(path).as_posix())

    @property
    def variant(self) -> ImageVariant:
        return variant_of(self.path)

    def derive(self, variant: ImageVariant) -> "ImageRef":
        return ImageRef(mime_type=self.mime_type, path=derive_path(self.path, variant))

    def variants(self) -> list["ImageRef"]:
        """All three sibling references, original first."""
        return [self.derive(variant) for variant in ImageVariant]

    def __str__(self) -> str:
        return f"{self.mime_type}{REFERENCE_SEPARATOR}{self.path}"


def derive(reference: str, variant: ImageVariant) -> str:
    """Derive a sibling reference string for ``variant``."""
    return str(ImageRef.parse(reference).derive(variant))
