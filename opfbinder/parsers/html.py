"""
チャプターHTMLの解析モジュール。

BeautifulSoupで配置済みチャプターを解析し、画像参照やタイトルを抽出します。
"""
import re
import warnings
from html import escape, unescape
from pathlib import Path

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from opfbinder.core.exceptions import SourceParsingError
from opfbinder.core.messages import msg

# XHTMLをHTMLパーサーで読む際の警告を抑制
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

# <img ... src="..."> の src 属性値
_IMG_SRC_PATTERN = re.compile(
    r"""(?P<prefix><img\b[^>]*?\ssrc\s*=\s*)(?P<quote>["'])(?P<src>.*?)(?P=quote)""",
    re.IGNORECASE | re.DOTALL,
)


def load_html(path: str | Path) -> BeautifulSoup:
    """
    HTMLファイルを寛容なHTMLパーサーで読み込む。

    Raises
    ------
    SourceParsingError
        ファイルが読めない、またはパースできない場合。
    """
    path = Path(path)
    try:
        markup = path.read_bytes()
        return BeautifulSoup(markup, "html.parser")
    except (OSError, ValueError, AssertionError) as e:
        raise SourceParsingError(msg("exception_parse", path=path), source_file=path) from e


def extract_image_sources(path: str | Path) -> list[str]:
    """
    HTMLファイル中の ``<img>`` 要素の ``src`` 属性を文書順に抽出する。

    Parameters
    ----------
    path : str | Path
        解析するHTMLファイルのパス。

    Returns
    -------
    list[str]
        src 属性値のリスト（重複を含む文書順）。src を持たない img は無視します。
    """
    soup = load_html(path)
    return [img["src"] for img in soup.find_all("img") if img.get("src")]


def extract_title(path: str | Path) -> str | None:
    """HTMLの ``<title>`` または最初の見出しのテキストを返す。どちらも無ければ None。"""
    soup = load_html(path)
    if soup.title and soup.title.get_text(strip=True):
        return soup.title.get_text(strip=True)
    heading = soup.find(["h1", "h2", "h3"])
    if heading and heading.get_text(strip=True):
        return heading.get_text(strip=True)
    return None


def find_elements(path: str | Path, names: tuple[str, ...]) -> set[str]:
    """指定した要素名のうち、文書中に存在するものを返す。"""
    soup = load_html(path)
    return {name for name in names if soup.find(name) is not None}


def is_complete_document(path: str | Path) -> bool:
    """``<html>`` 要素を持つ完全なHTML文書かどうか（ヘッダー・フッターの付加が不要か）。"""
    return "html" in find_elements(path, ("html",))


def rewrite_image_sources(markup: str, replacements: dict[str, str]) -> str:
    """
    ``<img>`` 要素の src 属性値を置き換える。

    マークアップのそれ以外の部分は一切変更しません（チャプター断片は
    ``</head>`` のような対応の無いタグを含むため、パーサーで再構築しない）。

    Parameters
    ----------
    markup : str
        チャプターのHTMLテキスト。
    replacements : dict[str, str]
        元の src 値（文字実体参照をデコードした値）から新しい src 値への対応。

    Returns
    -------
    str
        置き換え後のHTMLテキスト。引用符で囲まれていない src は対象外です。
    """
    def replace(match: re.Match) -> str:
        new_src = replacements.get(unescape(match.group("src")))
        if new_src is None:
            return match.group(0)
        quote = match.group("quote")
        return f"{match.group('prefix')}{quote}{escape(new_src, quote=True)}{quote}"

    return _IMG_SRC_PATTERN.sub(replace, markup)
