"""Unit tests for cms.images — ImageStore."""

import os

import pytest

from cms.errors import NotFound, UnsupportedExtension
from cms.images import ImageStore

SVG = b'<svg xmlns="http://www.w3.org/2000/svg" width="1" height="1"></svg>'


@pytest.fixture
def store(tmp_path):
    return ImageStore(str(tmp_path / "images"))


class TestImageStore:
    def test_upload_and_list(self, store, png_bytes):
        assert store.upload("pic.png", png_bytes) == "pic.png"
        store.upload("logo.svg", SVG)
        assert set(store.list_images()) == {"pic.png", "logo.svg"}

    def test_upload_overwrites(self, store, png_bytes):
        store.upload("logo.svg", SVG)
        store.upload("logo.svg", SVG.replace(b'width="1"', b'width="2"'))
        with open(store.path_for("logo.svg"), "rb") as f:
            assert b'width="2"' in f.read()
        assert store.list_images() == ["logo.svg"]

    @pytest.mark.parametrize("filename", ["notes.txt", "archive.gif", "noext", ""])
    def test_unsupported_extension(self, store, filename, png_bytes):
        with pytest.raises(UnsupportedExtension):
            store.upload(filename, png_bytes)
        assert store.list_images() == []

    def test_raster_content_is_checked(self, store):
        with pytest.raises(UnsupportedExtension) as exc:
            store.upload("fake.png", b"definitely not a png")
        assert "not a valid image" in exc.value.message
        assert not os.path.exists(os.path.join(store.root, "fake.png"))

    def test_filename_is_sanitized(self, store, png_bytes):
        assert store.upload("../../etc/pic.png", png_bytes) == "etc_pic.png"
        assert store.list_images() == ["etc_pic.png"]

    def test_delete(self, store, png_bytes):
        store.upload("pic.png", png_bytes)
        store.delete("pic.png")
        assert store.list_images() == []

    def test_delete_missing(self, store):
        with pytest.raises(NotFound):
            store.delete("nothing.png")

    def test_path_for_rejects_traversal(self, store):
        with pytest.raises(NotFound):
            store.path_for("../users.yml")
