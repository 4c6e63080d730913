"""
入力パースモジュール。

チャプターHTMLの解析を提供する。
"""
from opfbinder.parsers.html import (
    load_html,
    extract_image_sources,
    extract_title,
    find_elements,
    is_complete_document,
    rewrite_image_sources,
)

__all__ = [
    "load_html",
    "extract_image_sources",
    "extract_title",
    "find_elements",
    "is_complete_document",
    "rewrite_image_sources",
]
