"""
EPUB用テンプレート生成モジュール。

container.xml、content.opf、toc.ncx、表紙XHTML、目次ページHTMLの
生成を共通化します。
"""
import itertools
from html import escape
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from lxml import etree
from lxml.builder import ElementMaker

from opfbinder.core.config import (
    CONTAINER_NS,
    CONTENT_FILENAME,
    COVER_FILENAME,
    CSS_MEDIA_TYPE,
    DC_NS,
    DCTERMS_NS,
    LANG,
    NCX_FILENAME,
    NCX_GENERATOR,
    NCX_MEDIA_TYPE,
    NCX_NS,
    OEBPS,
    OPF_FILENAME,
    OPF_MEDIA_TYPE,
    OPF_NS,
    TEXTS,
    XHTML_MEDIA_TYPE,
    XHTML_NS,
    XML_PRETTY_PRINT,
    XSI_NS,
)
from opfbinder.epub.media_types import detect_media_type

if TYPE_CHECKING:
    from opfbinder.epub.entities import Book, Chapter
    from opfbinder.epub.publication import Publication


_OPF = f"{{{OPF_NS}}}"
_DC = f"{{{DC_NS}}}"
_XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"

IDENTIFIER_ID = "uuid_id"
NCX_ITEM_ID = "ncx"


def _serialize(root: etree._Element, standalone: bool | None = None) -> bytes:
    """XML宣言付きのUTF-8バイト列にシリアライズする。"""
    return etree.tostring(
        root,
        encoding="UTF-8",
        xml_declaration=True,
        pretty_print=XML_PRETTY_PRINT,
        standalone=standalone,
    )


# --- マニフェストID・参照パス ---

def chapter_href(chapter: "Chapter") -> str:
    """OEBPSからのチャプターの相対パス。"""
    return f"{TEXTS}/{chapter.file_name}"


def chapter_item_id(chapter: "Chapter") -> str:
    return f"txt{chapter.file_name}"


def asset_item_id(prefix: str, asset_path: str) -> str:
    """登録ファイルのマニフェストID（プレフィックス + ファイル名）。"""
    return f"{prefix}{PurePosixPath(asset_path).name}"


def cover_page_href() -> str:
    return f"{TEXTS}/{COVER_FILENAME}"


# --- container.xml ---

def generate_container_xml() -> bytes:
    """
    META-INF/container.xml を生成する。

    Returns
    -------
    bytes
        OEBPS/content.opf をルートファイルとして参照するcontainer.xml。
    """
    ocf = ElementMaker(namespace=CONTAINER_NS, nsmap={None: CONTAINER_NS})
    container = ocf.container(
        ocf.rootfiles(
            ocf.rootfile({
                "full-path": f"{OEBPS}/{OPF_FILENAME}",
                "media-type": OPF_MEDIA_TYPE,
            })),
        version="1.0")
    return _serialize(container)


# --- 表紙・目次ページ ---

def generate_cover_xhtml(image_path: str, title: str) -> str:
    """
    表紙画像を全面表示するXHTMLページを生成する。

    Parameters
    ----------
    image_path : str
        Text フォルダから見た表紙画像の相対パス（例: "../Images/cover.jpg"）。
    title : str
        ページタイトルおよび画像の代替テキスト。

    Returns
    -------
    str
        生成されたXHTMLドキュメント。
    """
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" "http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">
<html xmlns="{XHTML_NS}">
<head>
    <title>{escape(title)}</title>
    <style type="text/css">
        body {{ margin: 0; padding: 0; text-align: center; }}
        div.cover {{ height: 100%; }}
        img {{ max-width: 100%; max-height: 100%; }}
    </style>
</head>
<body>
    <div class="cover">
        <img src="{escape(image_path)}" alt="{escape(title)}"/>
    </div>
</body>
</html>
'''


def generate_content_page_html(title: str, chapters: list["Chapter"]) -> str:
    """
    チャプターへのリンク一覧からなる目次ページ本文を生成する。

    リストの末尾には目次ページ自身へのリンクを含めます。
    """
    lines = [f"<h3>{escape(title)}</h3>", "<ul>"]
    for chapter in chapters:
        lines.append(f'<li><a href="{escape(chapter.file_name)}">{escape(chapter.title or "")}</a></li>')
    lines.append(f'<li><a href="{CONTENT_FILENAME}">{escape(title)}</a></li>')
    lines.append("</ul>")
    return "\n".join(lines) + "\n"


# --- toc.ncx ---

def _nav_point(
    ncx: ElementMaker,
    point_id: str,
    css_class: str,
    play_order: int,
    label: str,
    src: str
) -> etree._Element:
    """navPoint要素（ラベルと参照先付き）を生成する。"""
    return ncx.navPoint(
        {"class": css_class, "id": point_id, "playOrder": str(play_order)},
        ncx.navLabel(ncx.text(label)),
        ncx.content(src=src),
    )


def _chapter_nav_point(ncx: ElementMaker, chapter: "Chapter", play_order: int) -> etree._Element:
    return _nav_point(ncx, chapter.file_name, "chapter", play_order, chapter.title or "", chapter_href(chapter))


def _book_nav_point(ncx: ElementMaker, book: "Book", play_orders: "itertools.count") -> etree._Element:
    """
    ブックのnavPointと、その下のチャプターのnavPointを生成する。

    ブック自身は参照先を持たないため、最初のチャプターと同じ再生順を
    共有します。チャプターの無いブックは単独で番号を1つ消費します。
    """
    chapters = book.chapters
    if not chapters:
        return _nav_point(ncx, f"book{book.number}", "book", next(play_orders), book.title or "", "")

    chapter_points = [_chapter_nav_point(ncx, chapter, next(play_orders)) for chapter in chapters]
    book_point = _nav_point(
        ncx, f"book{book.number}", "book", int(chapter_points[0].get("playOrder")), book.title or "", ""
    )
    book_point.extend(chapter_points)
    return book_point


def generate_ncx(publication: "Publication") -> bytes:
    """
    toc.ncx（ナビゲーションマップ）を生成する。

    Parameters
    ----------
    publication : Publication
        出版物。

    Returns
    -------
    bytes
        生成されたtoc.ncxドキュメント。

    Notes
    -----
    ブックが1冊の場合はチャプターを平坦に並べ、複数の場合はブックごとに
    2階層のツリーにします。playOrder はツリー全体で共有し、
    ブック→チャプターの順に1から増加します。
    """
    ncx = ElementMaker(namespace=NCX_NS, nsmap={None: NCX_NS})
    books = publication.books
    play_orders = itertools.count(1)

    nav_map = ncx.navMap()
    if len(books) == 1:
        for chapter in books[0].chapters:
            nav_map.append(_chapter_nav_point(ncx, chapter, next(play_orders)))
    else:
        for book in books:
            nav_map.append(_book_nav_point(ncx, book, play_orders))

    depth = 1 if len(books) <= 1 else 2
    root = ncx.ncx(
        {"version": "2005-1", _XML_LANG: publication.language or LANG},
        ncx.head(
            ncx.meta(name="dtb:uid", content=publication.identifier),
            ncx.meta(name="dtb:depth", content=str(depth)),
            ncx.meta(name="dtb:generator", content=NCX_GENERATOR),
            ncx.meta(name="dtb:totalPageCount", content="0"),
            ncx.meta(name="dtb:maxPageNumber", content="0"),
        ),
        ncx.docTitle(ncx.text(publication.title or "")),
        nav_map,
    )
    return _serialize(root, standalone=False)


# --- content.opf ---

def _sub(parent: etree._Element, tag: str, text: str | None = None, attrib: dict | None = None) -> etree._Element:
    element = etree.SubElement(parent, tag, attrib or {})
    if text is not None:
        element.text = text
    return element


def _build_metadata(package: etree._Element, publication: "Publication", cover_id: str | None) -> None:
    """metadata要素を生成する。値の無い項目は出力しない。"""
    metadata = _sub(package, _OPF + "metadata")

    for creator in publication.creators:
        attrib = {_OPF + "role": creator.role}
        if creator.file_as:
            attrib[_OPF + "file-as"] = creator.file_as
        _sub(metadata, _DC + "creator", creator.name, attrib)
    if publication.title:
        _sub(metadata, _DC + "title", publication.title)
    if publication.description:
        _sub(metadata, _DC + "description", publication.description)
    if publication.language:
        _sub(metadata, _DC + "language", publication.language)
    if publication.publisher:
        _sub(metadata, _DC + "publisher", publication.publisher)
    if cover_id:
        _sub(metadata, _OPF + "meta", attrib={"name": "cover", "content": cover_id})
    _sub(metadata, _DC + "identifier", publication.identifier,
         {"id": IDENTIFIER_ID, _OPF + "scheme": "uuid"})
    for subject in publication.subjects:
        _sub(metadata, _DC + "subject", subject)


def _manifest_item(manifest: etree._Element, href: str, item_id: str, media_type: str) -> None:
    _sub(manifest, _OPF + "item", attrib={"href": href, "id": item_id, "media-type": media_type})


def generate_opf(publication: "Publication", oebps: Path) -> bytes:
    """
    content.opf（パッケージ文書）を生成する。

    Parameters
    ----------
    publication : Publication
        出版物。
    oebps : Path
        作業フォルダのOEBPSフォルダ。バイナリファイルのメディアタイプ判定に使用します。

    Returns
    -------
    bytes
        生成されたcontent.opfドキュメント。

    Notes
    -----
    マニフェストの順序: 表紙画像・表紙ページ、チャプター、スタイル、
    フォント、画像、toc.ncx。

    スパインでは表紙ページを最初のブックのチャプターの前に1回だけ
    参照します（ブックごとに表紙を繰り返すことはしません）。
    """
    package = etree.Element(
        _OPF + "package",
        {"unique-identifier": IDENTIFIER_ID, "version": "2.0"},
        nsmap={None: OPF_NS, "opf": OPF_NS, "dc": DC_NS, "dcterms": DCTERMS_NS, "xsi": XSI_NS},
    )

    cover = publication.cover
    cover_id = asset_item_id("img", cover) if cover else None
    _build_metadata(package, publication, cover_id)

    # マニフェスト
    manifest = _sub(package, _OPF + "manifest")
    if cover:
        _manifest_item(manifest, cover, cover_id, detect_media_type(oebps / cover))
        _manifest_item(manifest, cover_page_href(), COVER_FILENAME, XHTML_MEDIA_TYPE)
    for book in publication.books:
        for chapter in book.chapters:
            _manifest_item(manifest, chapter_href(chapter), chapter_item_id(chapter), XHTML_MEDIA_TYPE)
    for style in publication.styles:
        _manifest_item(manifest, style, asset_item_id("css", style), CSS_MEDIA_TYPE)
    for font in publication.fonts:
        _manifest_item(manifest, font, asset_item_id("fnt", font), detect_media_type(oebps / font))
    for image in publication.images:
        _manifest_item(manifest, image, asset_item_id("img", image), detect_media_type(oebps / image))
    _manifest_item(manifest, NCX_FILENAME, NCX_ITEM_ID, NCX_MEDIA_TYPE)

    # スパイン
    spine = _sub(package, _OPF + "spine", attrib={"toc": NCX_ITEM_ID})
    if cover:
        _sub(spine, _OPF + "itemref", attrib={"idref": COVER_FILENAME})
    for book in publication.books:
        for chapter in book.chapters:
            _sub(spine, _OPF + "itemref", attrib={"idref": chapter_item_id(chapter)})

    # ガイド
    if cover:
        guide = _sub(package, _OPF + "guide")
        _sub(guide, _OPF + "reference", attrib={
            "type": "cover",
            "title": publication.cover_title,
            "href": cover_page_href(),
        })

    return _serialize(package, standalone=True)
