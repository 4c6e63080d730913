"""
Pytest configuration and fixtures for the test suite.
"""
import zipfile
from pathlib import Path

import pytest
from lxml import etree
from PIL import Image

from opfbinder.core.config import DC_NS, NCX_NS, OPF_NS
from opfbinder.epub.publication import Publication

NS = {"opf": OPF_NS, "dc": DC_NS, "ncx": NCX_NS}


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Base directory in which publications create their workspaces."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def publication(work_dir: Path):
    """An empty publication whose workspace is removed after the test."""
    with Publication(work_dir) as pub:
        yield pub


@pytest.fixture
def png_file(tmp_path: Path) -> Path:
    path = tmp_path / "pic.png"
    Image.new("RGB", (4, 4), "red").save(path)
    return path


@pytest.fixture
def jpeg_file(tmp_path: Path) -> Path:
    path = tmp_path / "cover.jpg"
    Image.new("RGB", (8, 12), "blue").save(path, format="JPEG")
    return path


@pytest.fixture
def css_file(tmp_path: Path) -> Path:
    path = tmp_path / "main.css"
    path.write_text("body { margin: 0; }\n", encoding="utf-8")
    return path


@pytest.fixture
def font_file(tmp_path: Path) -> Path:
    path = tmp_path / "serif.ttf"
    path.write_bytes(b"\x00\x01\x00\x00\x00\x0a\x00\x80")
    return path


@pytest.fixture
def epub_xml():
    """Return a function that parses an XML entry of a built EPUB."""
    def _read(epub_path: Path, name: str) -> etree._Element:
        with zipfile.ZipFile(epub_path) as archive:
            return etree.fromstring(archive.read(name))
    return _read


@pytest.fixture
def epub_text():
    """Return a function that reads a text entry of a built EPUB."""
    def _read(epub_path: Path, name: str) -> str:
        with zipfile.ZipFile(epub_path) as archive:
            return archive.read(name).decode("utf-8")
    return _read
