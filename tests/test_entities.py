"""Tests for chapter ingestion and publication registration."""
import dataclasses

import pytest

from opfbinder.core.exceptions import DuplicateChapterError, InputError
from opfbinder.epub.entities import Creator
from opfbinder.epub.workspace import oebps_dir, text_dir


class TestChapterNaming:
    """Tests for staged chapter file names."""

    def test_auto_names(self, publication):
        book1 = publication.add_book("One")
        book2 = publication.add_book("Two")
        names = [
            book1.add_chapter_html("<p>a</p>").file_name,
            book1.add_chapter_html("<p>b</p>").file_name,
            book2.add_chapter_html("<p>c</p>").file_name,
        ]
        assert names == ["b01c001.html", "b01c002.html", "b02c001.html"]

    def test_explicit_name(self, publication):
        chapter = publication.add_book("One").add_chapter_html("<p>a</p>", "intro.xhtml")
        assert chapter.file_name == "intro.xhtml"
        assert chapter.path == text_dir(publication.workspace) / "intro.xhtml"

    def test_book_numbers(self, publication):
        assert [publication.add_book(str(i)).number for i in range(3)] == [1, 2, 3]

    def test_chapters_keep_insertion_order(self, publication):
        book = publication.add_book("One")
        book.add_chapter_html("<p>z</p>", "z.html")
        book.add_chapter_html("<p>a</p>", "a.html")
        assert [c.file_name for c in book.chapters] == ["z.html", "a.html"]
        assert book.get_chapter("a.html") is book.chapters[1]
        assert book.get_chapter("missing.html") is None


class TestDuplicateRejection:
    """Tests for rejecting duplicate or reserved chapter names."""

    def test_duplicate_across_books(self, publication):
        publication.add_book("One").add_chapter_html("<p>first</p>", "same.html")
        book2 = publication.add_book("Two")
        with pytest.raises(DuplicateChapterError):
            book2.add_chapter_html("<p>second</p>", "same.html")
        assert (text_dir(publication.workspace) / "same.html").read_text(encoding="utf-8") == "<p>first</p>"
        assert book2.chapters == []

    def test_duplicate_file(self, publication, tmp_path):
        source = tmp_path / "ch.html"
        source.write_text("<p>x</p>", encoding="utf-8")
        book = publication.add_book("One")
        book.add_chapter_file(source, "ch.html")
        with pytest.raises(DuplicateChapterError):
            book.add_chapter_file(source, "ch.html")

    def test_cover_page_name_reserved(self, publication):
        with pytest.raises(DuplicateChapterError):
            publication.add_book("One").add_chapter_html("<p>x</p>", "cover.xhtml")

    def test_name_with_directory_rejected(self, publication):
        with pytest.raises(InputError) as exc_info:
            publication.add_book("One").add_chapter_html("<p>x</p>", "sub/x.html")
        assert not isinstance(exc_info.value, DuplicateChapterError)


class TestChapterIngestion:
    """Tests for staging chapter content."""

    def test_html_written_verbatim(self, publication):
        html = "<p>caf&eacute; – ü</p>\n"
        chapter = publication.add_book("One").add_chapter_html(html)
        assert chapter.path.read_bytes() == html.encode("utf-8")

    def test_file_copied_byte_for_byte(self, publication, tmp_path):
        source = tmp_path / "source.html"
        source.write_bytes(b"<p>\xe3\x81\x82</p>\r\n")
        chapter = publication.add_book("One").add_chapter_file(source)
        assert chapter.path.read_bytes() == source.read_bytes()

    def test_missing_file(self, publication, tmp_path):
        with pytest.raises(InputError):
            publication.add_book("One").add_chapter_file(tmp_path / "missing.html")

    def test_directory_is_not_a_chapter(self, publication, tmp_path):
        with pytest.raises(InputError):
            publication.add_book("One").add_chapter_file(tmp_path)

    def test_image_references_in_document_order(self, publication):
        html = '<img src="../Images/a.png"/><p><img src="../Images/b.jpg"></p><img alt="no source"/>'
        chapter = publication.add_book("One").add_chapter_html(html)
        assert chapter.images == ["../Images/a.png", "../Images/b.jpg"]

    def test_defaults(self, publication):
        chapter = publication.add_book("One").add_chapter_html("<p>x</p>")
        assert chapter.title == "Chapter"
        assert chapter.wrap is True
        assert chapter.styles == []
        assert chapter.before_build is None

    def test_declared_references(self, publication):
        chapter = publication.add_book("One").add_chapter_html("<p>x</p>")
        chapter.add_style("../Styles/main.css").add_image("../Images/extra.png")
        assert chapter.styles == ["../Styles/main.css"]
        assert chapter.images == ["../Images/extra.png"]


class TestPublicationRegistration:
    """Tests for registering creators, subjects and asset files."""

    def test_creators(self, publication):
        creator = publication.add_creator("aut", "Jane Doe", "Doe, Jane")
        publication.add_creator("ill", "John Roe")
        assert creator == Creator("aut", "Jane Doe", "Doe, Jane")
        assert [c.role for c in publication.creators] == ["aut", "ill"]
        with pytest.raises(dataclasses.FrozenInstanceError):
            creator.name = "Other"

    def test_subjects(self, publication):
        publication.add_subject("Fiction")
        publication.add_subject("History")
        assert publication.subjects == ["Fiction", "History"]

    def test_assets_are_copied(self, publication, css_file, font_file, png_file):
        assert publication.add_style(css_file) == "Styles/main.css"
        assert publication.add_font(font_file) == "Fonts/serif.ttf"
        assert publication.add_image(png_file) == "Images/pic.png"
        oebps = oebps_dir(publication.workspace)
        assert (oebps / "Styles" / "main.css").read_bytes() == css_file.read_bytes()
        assert (oebps / "Fonts" / "serif.ttf").read_bytes() == font_file.read_bytes()
        assert (oebps / "Images" / "pic.png").read_bytes() == png_file.read_bytes()
        assert publication.styles == ["Styles/main.css"]
        assert publication.fonts == ["Fonts/serif.ttf"]
        assert publication.images == ["Images/pic.png"]

    def test_missing_asset(self, publication, tmp_path):
        with pytest.raises(InputError):
            publication.add_style(tmp_path / "missing.css")
        assert publication.styles == []

    def test_duplicate_asset_basename(self, publication, css_file, tmp_path):
        other = tmp_path / "other"
        other.mkdir()
        (other / "main.css").write_text("p {}", encoding="utf-8")
        publication.add_style(css_file)
        with pytest.raises(InputError):
            publication.add_style(other / "main.css")
        assert publication.styles == ["Styles/main.css"]

    def test_image_clashing_with_cover(self, publication, png_file):
        publication.add_cover(png_file)
        with pytest.raises(InputError):
            publication.add_image(png_file)

    def test_cover(self, publication, jpeg_file):
        assert publication.cover is None
        assert publication.add_cover(jpeg_file, "Front") == "Images/cover.jpg"
        assert publication.cover == "Images/cover.jpg"
        assert publication.cover_title == "Front"

    def test_cover_replaced(self, publication, jpeg_file, png_file):
        publication.add_cover(jpeg_file)
        publication.add_cover(png_file)
        images = oebps_dir(publication.workspace) / "Images"
        assert publication.cover == "Images/pic.png"
        assert publication.cover_title == "Cover"
        assert not (images / "cover.jpg").exists()
        assert (images / "pic.png").exists()

    def test_same_cover_twice(self, publication, jpeg_file):
        publication.add_cover(jpeg_file)
        publication.add_cover(jpeg_file, "Again")
        assert publication.cover == "Images/cover.jpg"
        assert (oebps_dir(publication.workspace) / "Images" / "cover.jpg").exists()


class TestChapterTemplates:
    """Tests for header and footer configuration."""

    def test_set_from_text(self, publication):
        publication.set_chapter_header("<H>")
        publication.set_chapter_footer("<F>")
        assert publication.chapter_header == "<H>"
        assert publication.chapter_footer == "<F>"

    def test_set_from_file(self, publication, tmp_path):
        header = tmp_path / "header.html"
        header.write_text("<html><head>", encoding="utf-8")
        publication.set_chapter_header_file(header)
        assert publication.chapter_header == "<html><head>"

    def test_missing_header_file(self, publication, tmp_path):
        with pytest.raises(InputError):
            publication.set_chapter_header_file(tmp_path / "missing.html")

    def test_missing_footer_file(self, publication, tmp_path):
        with pytest.raises(InputError):
            publication.set_chapter_footer_file(tmp_path / "missing.html")

    def test_default_header_opens_head(self, publication):
        assert publication.chapter_header.rstrip().endswith("<head>")
        assert publication.chapter_footer.strip().endswith("</html>")
