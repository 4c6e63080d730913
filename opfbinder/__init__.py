"""
opfbinder - EPUB Package Builder

HTMLチャプター・画像・フォント・スタイルと書誌情報から
EPUB 2（OPF 2.0 / NCX）パッケージを生成する。
"""
from opfbinder.core.exceptions import (
    EpubGenerationError,
    InputError,
    DuplicateChapterError,
    StagingError,
    SourceParsingError,
    PackagingError,
    UnsupportedConfigurationError,
    NoContentError,
)
from opfbinder.epub import Book, Chapter, Creator, Publication

__version__ = "1.0.0"

__all__ = [
    "Publication",
    "Book",
    "Chapter",
    "Creator",
    "EpubGenerationError",
    "InputError",
    "DuplicateChapterError",
    "StagingError",
    "SourceParsingError",
    "PackagingError",
    "UnsupportedConfigurationError",
    "NoContentError",
]
