"""Tests for workspace creation, staging helpers and disposal."""
import gc

import pytest
from lxml import etree

from opfbinder.core.config import CONTAINER_NS
from opfbinder.core.exceptions import InputError, StagingError, UnsupportedConfigurationError
from opfbinder.epub.publication import Publication
from opfbinder.epub.workspace import (
    create_workspace,
    destroy_workspace,
    oebps_dir,
    read_staged_text,
    text_dir,
    write_staged_file,
)


class TestCreateWorkspace:
    """Tests for create_workspace."""

    def test_skeleton(self, work_dir):
        workspace = create_workspace(work_dir)
        assert workspace.parent == work_dir
        for folder in ("META-INF", "OEBPS/Fonts", "OEBPS/Images", "OEBPS/Styles", "OEBPS/Text"):
            assert (workspace / folder).is_dir()
        assert oebps_dir(workspace) == workspace / "OEBPS"
        assert text_dir(workspace) == workspace / "OEBPS" / "Text"

    def test_mimetype_has_no_trailing_newline(self, work_dir):
        workspace = create_workspace(work_dir)
        assert (workspace / "mimetype").read_bytes() == b"application/epub+zip"

    def test_container_points_at_package_document(self, work_dir):
        workspace = create_workspace(work_dir)
        root = etree.parse(str(workspace / "META-INF" / "container.xml")).getroot()
        rootfile = root.find(f"{{{CONTAINER_NS}}}rootfiles/{{{CONTAINER_NS}}}rootfile")
        assert root.get("version") == "1.0"
        assert rootfile.get("full-path") == "OEBPS/content.opf"
        assert rootfile.get("media-type") == "application/oebps-package+xml"

    def test_unique_per_call(self, work_dir):
        assert create_workspace(work_dir) != create_workspace(work_dir)

    def test_missing_base_dir(self, tmp_path):
        with pytest.raises(InputError):
            create_workspace(tmp_path / "does-not-exist")

    def test_base_is_a_file(self, tmp_path):
        base = tmp_path / "file.txt"
        base.write_text("x")
        with pytest.raises(InputError):
            create_workspace(base)


class TestDestroyWorkspace:
    """Tests for destroy_workspace and Publication disposal."""

    def test_removes_tree(self, work_dir):
        workspace = create_workspace(work_dir)
        destroy_workspace(workspace)
        assert not workspace.exists()

    def test_idempotent(self, work_dir):
        workspace = create_workspace(work_dir)
        destroy_workspace(workspace)
        destroy_workspace(workspace)
        assert not workspace.exists()

    def test_context_manager_disposes(self, work_dir):
        with Publication(work_dir) as publication:
            workspace = publication.workspace
            assert workspace.is_dir()
        assert not workspace.exists()

    def test_dispose_after_failed_build(self, work_dir, tmp_path):
        publication = Publication(work_dir)
        publication.place_content("Contents", at_begin=True)
        with pytest.raises(UnsupportedConfigurationError):
            publication.build(tmp_path / "out.epub")
        publication.dispose()
        assert not publication.workspace.exists()

    def test_removed_when_collected(self, work_dir):
        publication = Publication(work_dir)
        workspace = publication.workspace
        del publication
        gc.collect()
        assert not workspace.exists()

    def test_dispose_twice(self, work_dir):
        publication = Publication(work_dir)
        publication.dispose()
        publication.dispose()
        assert list(work_dir.iterdir()) == []


class TestStagingHelpers:
    """Tests for staged file read and write helpers."""

    def test_write_and_read_text(self, work_dir):
        path = text_dir(create_workspace(work_dir)) / "a.html"
        write_staged_file(path, "<p>é</p>")
        assert path.read_bytes() == "<p>é</p>".encode("utf-8")
        assert read_staged_text(path) == "<p>é</p>"

    def test_write_failure(self, tmp_path):
        with pytest.raises(StagingError) as exc_info:
            write_staged_file(tmp_path / "missing" / "a.html", "x")
        assert exc_info.value.file_path == str(tmp_path / "missing" / "a.html")

    def test_read_failure(self, tmp_path):
        with pytest.raises(StagingError):
            read_staged_text(tmp_path / "missing.html")

    def test_read_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.html"
        path.write_bytes(b"caf\xe9")
        with pytest.raises(StagingError):
            read_staged_text(path)
