"""Tests for best-effort cleanup and data URL rendering."""

import base64
from pathlib import Path

import pytest

from eventhub.core.exceptions import ImageFileMissingError
from eventhub.images import ImageStore, ImageVariant, to_data_url
from eventhub.images.cleanup import remove_all_variants, remove_file


def write_variants(store: ImageStore, name: str, data: bytes = b"img") -> str:
    for variant in ImageVariant:
        (store.policy.directory(variant) / name).write_bytes(data)
    return f"image/jpeg:{(store.policy.directory(ImageVariant.COMPRESSED) / name).as_posix()}"


def test_remove_file_missing_is_not_an_error(tmp_path: Path):
    assert remove_file(tmp_path / "missing.jpg") is False
    assert remove_file(None) is False


def test_remove_file_on_directory_is_logged_not_raised(tmp_path: Path):
    directory = tmp_path / "dir.jpg"
    directory.mkdir()

    assert remove_file(directory) is False
    assert directory.exists()


def test_remove_all_variants(image_store: ImageStore, stored_files):
    reference = write_variants(image_store, "eventImage-1.jpg")

    assert remove_all_variants(reference) == 3
    for variant in ImageVariant:
        assert stored_files(variant) == []

    # Second removal is a no-op
    assert remove_all_variants(reference) == 0


def test_remove_all_variants_from_bare_path(image_store: ImageStore, stored_files):
    write_variants(image_store, "eventImage-2.jpg")

    removed = remove_all_variants("public/miniature/eventImage-2.jpg")

    assert removed == 3


@pytest.mark.parametrize("reference", [None, "", "image/jpeg:public/elsewhere/a.jpg"])
def test_remove_all_variants_tolerates_bad_input(reference):
    assert remove_all_variants(reference) == 0


def test_data_url_of_compressed_variant(image_store: ImageStore):
    reference = write_variants(image_store, "eventImage-3.jpg", b"\xff\xd8payload")

    data_url = to_data_url(reference)

    assert data_url == "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8payload").decode()


def test_data_url_of_requested_variant(image_store: ImageStore):
    reference = write_variants(image_store, "eventImage-4.jpg")
    (image_store.policy.directory(ImageVariant.MINIATURE) / "eventImage-4.jpg").write_bytes(b"mini")

    data_url = image_store.to_data_url(reference, ImageVariant.MINIATURE)

    assert data_url == "data:image/jpeg;base64," + base64.b64encode(b"mini").decode()


@pytest.mark.parametrize("reference", [None, ""])
def test_data_url_of_empty_reference(reference):
    assert to_data_url(reference) == reference


def test_data_url_missing_file_raises(image_store: ImageStore):
    with pytest.raises(ImageFileMissingError) as exc_info:
        to_data_url("image/png:public/compressed/gone.png", ImageVariant.MINIATURE)

    assert exc_info.value.status_code == 404
    assert exc_info.value.details == {"path": "public/miniature/gone.png"}
