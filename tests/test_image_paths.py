"""Tests for image variant paths and references."""

import pytest

from eventhub.core.exceptions import InvalidImageReference
from eventhub.images import ImageRef, ImageVariant, derive, derive_path, variant_of


@pytest.mark.parametrize("source", list(ImageVariant))
@pytest.mark.parametrize("target", list(ImageVariant))
def test_derive_swaps_only_the_variant_segment(source: ImageVariant, target: ImageVariant):
    reference = f"image/jpeg:public/{source.value}/eventImage-1700000000000.JPG"

    derived = derive(derive(reference, source), target)

    assert derived == f"image/jpeg:public/{target.value}/eventImage-1700000000000.JPG"
    assert ImageRef.parse(derived).variant == target


def test_derive_path_keeps_filename_with_variant_word():
    path = "public/original/miniature-party.png"

    assert derive_path(path, ImageVariant.COMPRESSED) == "public/compressed/miniature-party.png"


def test_backslashes_are_normalised():
    assert derive_path("public\\original\\a.jpg", ImageVariant.MINIATURE) == "public/miniature/a.jpg"


def test_variant_of_absolute_path():
    assert variant_of("/srv/app/public/compressed/a.png") == ImageVariant.COMPRESSED


@pytest.mark.parametrize(
    "path",
    [
        "public/images/a.jpg",
        "public/original/compressed/a.jpg",
    ],
)
def test_path_without_exactly_one_variant_is_rejected(path: str):
    with pytest.raises(InvalidImageReference):
        derive_path(path, ImageVariant.COMPRESSED)


def test_parse_reference():
    ref = ImageRef.parse("image/png:public/compressed/activityImage-1.png")

    assert ref.mime_type == "image/png"
    assert ref.path == "public/compressed/activityImage-1.png"
    assert str(ref) == "image/png:public/compressed/activityImage-1.png"
    assert [r.variant for r in ref.variants()] == list(ImageVariant)


@pytest.mark.parametrize(
    "reference",
    ["public/compressed/a.png", "image/png:", "png:public/compressed/a.png", "image/png:a.png"],
)
def test_malformed_reference_is_rejected(reference: str):
    with pytest.raises(InvalidImageReference):
        ImageRef.parse(reference)
