"""Image store configuration.

The store is created once during application startup (see ``eventhub.main``)
and handed to endpoints through the ``get_image_store`` dependency.
"""

from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from eventhub.core.config import Settings
from eventhub.images.cleanup import remove_all_variants, remove_file
from eventhub.images.data_url import to_data_url
from eventhub.images.derivatives import DerivativeGenerator
from eventhub.images.paths import ImageVariant
from eventhub.images.storage import UploadStorage


@dataclass(frozen=True)
class ImagePolicy:
    """Upload limits and codec parameters."""

    root: Path
    accepted_extensions: tuple[str, ...] = ("jpg", "jpeg", "png", "heic")
    max_upload_bytes: int = 5 * 1024 * 1024
    field_name: str = "image"
    compress_quality: int = 50
    miniature_width: int = 200
    miniature_quality: int = 60
    png_quality: tuple[float, float] = (0.5, 0.6)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImagePolicy":
        return cls(
            root=Path(settings.image_root),
            accepted_extensions=tuple(settings.image_accepted_extensions),
            max_upload_bytes=settings.image_max_upload_bytes,
            compress_quality=settings.image_compress_quality,
            miniature_width=settings.image_miniature_width,
            miniature_quality=settings.image_miniature_quality,
            png_quality=settings.image_png_quality,
        )

    def directory(self, variant: ImageVariant) -> Path:
        return self.root / ImageVariant(variant).value


@dataclass
class ImageStore:
    """Upload storage, derivative generation and file access for one image root."""

    policy: ImagePolicy
    storage: UploadStorage = field(init=False)
    generator: DerivativeGenerator = field(init=False)

    def __post_init__(self) -> None:
        self.storage = UploadStorage(
            directory=self.policy.directory(ImageVariant.ORIGINAL),
            accepted_extensions=self.policy.accepted_extensions,
            max_bytes=self.policy.max_upload_bytes,
            field_name=self.policy.field_name,
        )
        self.generator = DerivativeGenerator(
            miniature_width=self.policy.miniature_width,
            miniature_quality=self.policy.miniature_quality,
            png_quality=self.policy.png_quality,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageStore":
        return cls(ImagePolicy.from_settings(settings))

    def ensure_directories(self) -> None:
        """Create the three variant directories."""
        for variant in ImageVariant:
            self.policy.directory(variant).mkdir(parents=True, exist_ok=True)
        logger.info(f"Image store ready at {self.policy.root}")

    def to_data_url(self, reference: str | None, variant: ImageVariant | None = None) -> str | None:
        return to_data_url(reference, variant)

    def remove_file(self, path: str | Path | None) -> None:
        remove_file(path)

    def remove_all(self, reference: str | None) -> None:
        remove_all_variants(reference)
