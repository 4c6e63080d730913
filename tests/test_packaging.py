"""Tests for the EPUB archiver."""
import zipfile

import pytest

from opfbinder.core.exceptions import PackagingError
from opfbinder.epub.packaging import package_epub
from opfbinder.epub.workspace import create_workspace, oebps_dir, text_dir


@pytest.fixture
def workspace(work_dir):
    path = create_workspace(work_dir)
    (text_dir(path) / "b.html").write_text("<p>b</p>", encoding="utf-8")
    (text_dir(path) / "a.html").write_text("<p>a</p>", encoding="utf-8")
    (oebps_dir(path) / "content.opf").write_text("<package/>", encoding="utf-8")
    return path


class TestPackageEpub:
    """Tests for package_epub."""

    def test_mimetype_first_and_stored(self, workspace, tmp_path):
        output = package_epub(workspace, tmp_path / "out.epub")
        with zipfile.ZipFile(output) as archive:
            first = archive.infolist()[0]
            assert first.filename == "mimetype"
            assert first.compress_type == zipfile.ZIP_STORED
            assert archive.read("mimetype") == b"application/epub+zip"

    def test_other_entries_deflated_and_sorted(self, workspace, tmp_path):
        output = package_epub(workspace, tmp_path / "out.epub")
        with zipfile.ZipFile(output) as archive:
            rest = archive.infolist()[1:]
        assert [i.filename for i in rest] == [
            "META-INF/container.xml",
            "OEBPS/Text/a.html",
            "OEBPS/Text/b.html",
            "OEBPS/content.opf",
        ]
        assert all(i.compress_type == zipfile.ZIP_DEFLATED for i in rest)

    def test_entry_names_are_relative(self, workspace, tmp_path):
        output = package_epub(workspace, tmp_path / "out.epub")
        with zipfile.ZipFile(output) as archive:
            for name in archive.namelist():
                assert not name.startswith("/")
                assert "\\" not in name
                assert str(workspace.name) not in name

    def test_empty_directories_not_stored(self, workspace, tmp_path):
        output = package_epub(workspace, tmp_path / "out.epub")
        with zipfile.ZipFile(output) as archive:
            assert not any(name.endswith("/") for name in archive.namelist())

    def test_overwrites_existing_output(self, workspace, tmp_path):
        output = tmp_path / "out.epub"
        output.write_bytes(b"old content")
        package_epub(workspace, output)
        assert zipfile.is_zipfile(output)

    def test_unwritable_destination(self, workspace, tmp_path):
        output = tmp_path / "missing" / "out.epub"
        with pytest.raises(PackagingError) as exc_info:
            package_epub(workspace, output)
        assert exc_info.value.output_file == str(output)

    def test_partial_output_removed(self, workspace, tmp_path):
        (workspace / "mimetype").unlink()
        output = tmp_path / "out.epub"
        with pytest.raises(PackagingError):
            package_epub(workspace, output)
        assert not output.exists()
