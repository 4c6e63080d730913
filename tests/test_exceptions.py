"""Tests for the exception hierarchy."""
import pytest

from opfbinder.core.exceptions import (
    DuplicateChapterError,
    EpubGenerationError,
    InputError,
    NoContentError,
    PackagingError,
    SourceParsingError,
    StagingError,
    UnsupportedConfigurationError,
)


class TestHierarchy:
    """All errors share one base class."""

    @pytest.mark.parametrize("error", [
        InputError("a.html", "Chapter"),
        DuplicateChapterError("a.html"),
        StagingError("cannot write", file_path="a.html"),
        SourceParsingError("cannot parse", source_file="a.html"),
        PackagingError("cannot pack", output_file="out.epub"),
        UnsupportedConfigurationError("nope"),
        NoContentError("empty"),
    ])
    def test_is_epub_generation_error(self, error):
        assert isinstance(error, EpubGenerationError)

    def test_duplicate_chapter_is_input_error(self):
        assert issubclass(DuplicateChapterError, InputError)


class TestInputError:
    """Tests for InputError."""

    def test_default_message_includes_path(self):
        error = InputError("missing/file.css", "Stylesheet")
        assert error.file_path == "missing/file.css"
        assert error.file_type == "Stylesheet"
        assert "missing/file.css" in str(error)

    def test_custom_message(self):
        error = InputError("x", message="custom")
        assert str(error) == "custom"

    def test_duplicate_message_includes_path(self):
        error = DuplicateChapterError("/tmp/Text/b01c001.html")
        assert error.file_path == "/tmp/Text/b01c001.html"
        assert "/tmp/Text/b01c001.html" in str(error)


class TestPathAttributes:
    """Path-carrying errors keep the path as a string."""

    def test_staging_error(self, tmp_path):
        error = StagingError("cannot write", file_path=tmp_path / "a")
        assert error.file_path == str(tmp_path / "a")

    def test_source_parsing_error(self):
        assert SourceParsingError("bad", source_file="c.html").source_file == "c.html"

    def test_packaging_error(self):
        assert PackagingError("bad", output_file="o.epub").output_file == "o.epub"
