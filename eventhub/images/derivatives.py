"""Compressed and miniature variants of an uploaded image.

Two independent chains run concurrently in worker threads:

* original -> compress at ``quality`` -> compressed variant
* original -> resize to ``miniature_width`` -> compress at
  ``miniature_quality`` in place -> miniature variant

The codec is chosen from the image content, not from the file extension.
JPEG takes a 0-100 quality scalar. PNG takes a (min, max) quality range in
0..1 which is mapped to a palette size. Other formats (HEIC) have no
compressor and are copied unchanged; their miniature is only resized when
Pillow has an encoder for the format.

Known limitation: PNG miniatures are resized from the full-colour original
and then quantised, so a miniature can end up larger than the compressed
variant of a small or flat image.
"""

import asyncio
import shutil
from dataclasses import dataclass, field
from pathlib import Path

import pi_heif
from loguru import logger
from PIL import Image, UnidentifiedImageError

from eventhub.core.exceptions import CodecError
from eventhub.images.paths import ImageVariant, derive_path

# Multi-picture JPEGs written by phone cameras
JPEG_ALIASES = {"MPO": "JPEG"}

# Formats whose plugin may not register a mime type
EXTRA_MIME_TYPES = {"HEIF": "image/heif"}


def codec_of(fmt: str | None) -> str:
    return JPEG_ALIASES.get(fmt or "", fmt or "")


@dataclass
class DerivativeResult:
    """Outcome of one generation run."""

    compressed_path: Path
    miniature_path: Path
    mime_type: str | None = None
    success: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def written_paths(self) -> list[Path]:
        """Derivative files currently on disk for this run."""
        return [p for p in (self.compressed_path, self.miniature_path) if p.exists()]


def png_palette_size(quality: tuple[float, float]) -> int:
    """Map a pngquant-style (min, max) quality range to a palette size.

    Only ``max`` is used. Pillow quantisation gives no quality feedback, so
    there is nothing to hold against ``min``; the range itself is checked
    when settings are loaded.
    """
    _, high = quality
    return max(2, min(256, round(256 * high)))


def sniff_format(path: Path) -> str:
    """Return the Pillow format name of an image file."""
    try:
        with Image.open(path) as img:
            return img.format or ""
    except (UnidentifiedImageError, OSError) as e:
        raise CodecError(f"Unsupported or corrupt image: {path.name}") from e


class DerivativeGenerator:
    """Produces the compressed and miniature variants of an original upload."""

    def __init__(
        self,
        miniature_width: int = 200,
        miniature_quality: int = 60,
        png_quality: tuple[float, float] = (0.5, 0.6),
    ):
        self.miniature_width = miniature_width
        self.miniature_quality = miniature_quality
        self.png_quality = png_quality
        pi_heif.register_heif_opener()

    def compress(self, source: Path, target: Path, quality: int) -> str:
        """Compress ``source`` into ``target``; both may be the same file."""
        target.parent.mkdir(parents=True, exist_ok=True)
        with Image.open(source) as img:
            img.load()
            fmt = codec_of(img.format)
            if fmt == "JPEG":
                img.save(
                    target,
                    "JPEG",
                    quality=max(1, min(100, quality)),
                    optimize=True,
                    progressive=True,
                )
            elif fmt == "PNG":
                mode = "RGBA" if "A" in img.getbands() or "transparency" in img.info else "RGB"
                quantized = img.convert(mode).quantize(
                    colors=png_palette_size(self.png_quality),
                    method=Image.Quantize.FASTOCTREE,
                )
                quantized.save(target, "PNG", optimize=True)
            elif source != target:
                shutil.copyfile(source, target)
        return fmt

    def resize(self, source: Path, target: Path) -> None:
        """Scale ``source`` to the miniature width, keeping the aspect ratio."""
        target.parent.mkdir(parents=True, exist_ok=True)
        with Image.open(source) as img:
            fmt = codec_of(img.format)
            if fmt not in Image.SAVE:
                logger.warning(f"No encoder for {fmt}, miniature of {source.name} is not resized")
                shutil.copyfile(source, target)
                return
            width, height = img.size
            new_height = max(1, round(height * self.miniature_width / width))
            resized = img.resize((self.miniature_width, new_height), Image.Resampling.LANCZOS)
            resized.save(target, fmt)

    def _make_miniature(self, source: Path, target: Path) -> None:
        self.resize(source, target)
        self.compress(target, target, self.miniature_quality)

    async def generate(self, original: Path, quality: int) -> DerivativeResult:
        """Write both derivatives of ``original``.

        Never raises for codec problems; ``success`` is False instead and
        partially written files are left for the caller to clean up.
        """
        original = Path(original)
        result = DerivativeResult(
            compressed_path=Path(derive_path(original, ImageVariant.COMPRESSED)),
            miniature_path=Path(derive_path(original, ImageVariant.MINIATURE)),
        )

        try:
            fmt = await asyncio.to_thread(sniff_format, original)
        except CodecError as e:
            result.errors.append(str(e))
            logger.error(f"Derivative generation failed for {original}: {e}")
            return result
        codec = codec_of(fmt)
        result.mime_type = Image.MIME.get(codec) or EXTRA_MIME_TYPES.get(codec)

        outcomes = await asyncio.gather(
            asyncio.to_thread(self.compress, original, result.compressed_path, quality),
            asyncio.to_thread(self._make_miniature, original, result.miniature_path),
            return_exceptions=True,
        )
        for stage, outcome in zip(("compress", "miniature"), outcomes):
            if isinstance(outcome, Exception):
                result.errors.append(f"{stage}: {outcome}")
                logger.error(f"Error during {stage} of {original}: {outcome}")

        result.success = not result.errors
        return result
