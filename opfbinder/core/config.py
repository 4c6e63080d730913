"""
EPUBパッケージ生成ツールの設定定数モジュール。

プロジェクト全体で使用される設定値を一元管理します。
"""
from dataclasses import dataclass


# --- 言語設定 ---
@dataclass
class LanguageConfig:
    """言語ごとの設定を保持するデータクラス。"""
    code: str                    # 言語コード（例: "ja_JP", "en_US"）
    display_name: str            # 表示名
    epub_lang: str               # dc:language / NCXのxml:lang に使う言語タグ


# 対応言語の設定
LANGUAGE_CONFIGS: dict[str, LanguageConfig] = {
    "ja_JP": LanguageConfig(code="ja_JP", display_name="日本語", epub_lang="ja"),
    "en_US": LanguageConfig(code="en_US", display_name="English (US)", epub_lang="en"),
    "cs_CZ": LanguageConfig(code="cs_CZ", display_name="Čeština", epub_lang="cs"),
    "de_DE": LanguageConfig(code="de_DE", display_name="Deutsch", epub_lang="de"),
}

# EPUBドキュメントのデフォルト言語（dc:language 未設定時のNCX用）
LANG = "en"

# --- パッケージ構造 ---
MIMETYPE_FILENAME = "mimetype"
EPUB_MIMETYPE = "application/epub+zip"
META_INF = "META-INF"
CONTAINER_FILENAME = "container.xml"
OEBPS = "OEBPS"
FONTS = "Fonts"
IMAGES = "Images"
STYLES = "Styles"
TEXTS = "Text"
OPF_FILENAME = "content.opf"
NCX_FILENAME = "toc.ncx"

# 予約済みファイル名（Text フォルダ内）
COVER_FILENAME = "cover.xhtml"
CONTENT_FILENAME = "content.html"

# 作業フォルダ名のプレフィックス
WORKSPACE_PREFIX = "epub_"

# --- 名前空間 ---
CONTAINER_NS = "urn:oasis:names:tc:opendocument:xmlns:container"
OPF_NS = "http://www.idpf.org/2007/opf"
DC_NS = "http://purl.org/dc/elements/1.1/"
DCTERMS_NS = "http://purl.org/dc/terms/"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
NCX_NS = "http://www.daisy.org/z3986/2005/ncx/"
XHTML_NS = "http://www.w3.org/1999/xhtml"

# --- メディアタイプ ---
XHTML_MEDIA_TYPE = "application/xhtml+xml"
CSS_MEDIA_TYPE = "text/css"
NCX_MEDIA_TYPE = "application/x-dtbncx+xml"
OPF_MEDIA_TYPE = "application/oebps-package+xml"
DEFAULT_MEDIA_TYPE = "application/octet-stream"

# --- XML出力 ---
XML_PRETTY_PRINT = True  # content.opf / toc.ncx / container.xml をインデント付きで出力
NCX_GENERATOR = "opfbinder EPUB package builder"

# --- チャプターのデフォルトヘッダー・フッター ---
# チャプターHTML側で <title> と </head><body> を記述する前提
DEFAULT_CHAPTER_HEADER = """<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" "http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops" xml:lang="en">
    <head>
"""

DEFAULT_CHAPTER_FOOTER = """
    </body>
</html>
"""

DEFAULT_CHAPTER_TITLE = "Chapter"
DEFAULT_COVER_TITLE = "Cover"

# --- コマンドライン ---
CHAPTER_SUFFIXES = (".html", ".htm", ".xhtml")
STYLE_SUFFIXES = (".css",)
FONT_SUFFIXES = (".ttf", ".otf", ".woff", ".woff2")
METADATA_SUFFIX = "_metadata.txt"


def get_language_config(lang_code: str) -> LanguageConfig:
    """言語コードから設定を取得する。

    Parameters
    ----------
    lang_code : str
        言語コード（例: "ja_JP", "en_US"）

    Returns
    -------
    LanguageConfig
        言語設定

    Raises
    ------
    ValueError
        未対応の言語コードの場合
    """
    if lang_code not in LANGUAGE_CONFIGS:
        available = ", ".join(LANGUAGE_CONFIGS.keys())
        raise ValueError(f"Unsupported language code: {lang_code} (available: {available})")
    return LANGUAGE_CONFIGS[lang_code]
