"""
EPUB生成モジュール。

出版物モデル、作業フォルダ管理、ビルドパイプライン、
パッケージング、テンプレート生成を提供する。
"""
from opfbinder.epub.entities import Book, Chapter, Creator
from opfbinder.epub.publication import Publication
from opfbinder.epub.builder import build_publication
from opfbinder.epub.packaging import package_epub
from opfbinder.epub.identifier import new_identifier
from opfbinder.epub.workspace import create_workspace, destroy_workspace
from opfbinder.epub.templates import (
    generate_container_xml,
    generate_content_page_html,
    generate_cover_xhtml,
    generate_ncx,
    generate_opf,
)

__all__ = [
    "Book",
    "Chapter",
    "Creator",
    "Publication",
    "build_publication",
    "package_epub",
    "new_identifier",
    "create_workspace",
    "destroy_workspace",
    "generate_container_xml",
    "generate_content_page_html",
    "generate_cover_xhtml",
    "generate_ncx",
    "generate_opf",
]
