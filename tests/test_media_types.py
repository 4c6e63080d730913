"""Tests for manifest media type detection."""
import shutil

import pytest

from opfbinder.epub.media_types import detect_media_type, get_extension_media_type


class TestDetectMediaType:
    """Tests for detect_media_type."""

    def test_png(self, png_file):
        assert detect_media_type(png_file) == "image/png"

    def test_jpeg(self, jpeg_file):
        assert detect_media_type(jpeg_file) == "image/jpeg"

    def test_content_wins_over_extension(self, png_file, tmp_path):
        renamed = tmp_path / "picture.dat"
        shutil.copyfile(png_file, renamed)
        assert detect_media_type(renamed) == "image/png"

    def test_font_by_extension(self, font_file):
        assert detect_media_type(font_file) == "font/ttf"

    def test_stylesheet(self, css_file):
        assert detect_media_type(css_file) == "text/css"

    def test_unknown(self, tmp_path):
        path = tmp_path / "blob.zzz"
        path.write_bytes(b"\x01\x02\x03")
        assert detect_media_type(path) == "application/octet-stream"


class TestGetExtensionMediaType:
    """Tests for get_extension_media_type."""

    @pytest.mark.parametrize("filename,expected", [
        ("image.SVG", "image/svg+xml"),
        ("font.otf", "font/otf"),
        ("font.woff2", "font/woff2"),
        ("page.xhtml", "application/xhtml+xml"),
        ("page.html", "application/xhtml+xml"),
        ("photo.gif", "image/gif"),
        ("noextension", "application/octet-stream"),
    ])
    def test_mapping(self, filename, expected):
        assert get_extension_media_type(filename) == expected
