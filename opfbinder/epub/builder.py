"""
EPUBビルドパイプラインモジュール。

出版物の作業フォルダに対して以下の段階を順に実行し、EPUBファイルを生成します。
いずれかの段階が失敗した時点で例外を送出し、以降の段階は実行しません。

1. 文字実体参照のデコード
2. チャプターへのヘッダー・フッター付加
3. ビルド前処理（フック）の呼び出し
4. 目次ページの生成
5. 表紙ページの生成
6. toc.ncx の生成
7. content.opf の生成
8. ZIPパッケージング
"""
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterator

from opfbinder.core import logger
from opfbinder.core.config import CONTENT_FILENAME, NCX_FILENAME, OPF_FILENAME
from opfbinder.core.exceptions import UnsupportedConfigurationError
from opfbinder.core.messages import msg
from opfbinder.epub.packaging import package_epub
from opfbinder.epub.templates import (
    cover_page_href,
    generate_content_page_html,
    generate_cover_xhtml,
    generate_ncx,
    generate_opf,
)
from opfbinder.epub.workspace import oebps_dir, read_staged_text, write_staged_file
from opfbinder.text.entities import decode_entities

if TYPE_CHECKING:
    from opfbinder.epub.entities import Chapter
    from opfbinder.epub.publication import Publication


# ビルド段階の数（ログの「[n/8]」表示に使用）
BUILD_STAGE_COUNT = 8


def _all_chapters(publication: "Publication") -> Iterator["Chapter"]:
    for book in publication.books:
        yield from book.chapters


def decode_chapter_entities(publication: "Publication") -> None:
    """全チャプターの文字実体参照をデコードする。"""
    logger.stage(1, BUILD_STAGE_COUNT, msg("stage_decode"))
    for chapter in _all_chapters(publication):
        logger.debug(msg("processing_file", name=chapter.file_name))
        write_staged_file(chapter.path, decode_entities(read_staged_text(chapter.path)))


def wrap_chapters(publication: "Publication") -> None:
    """
    wrap が有効なチャプターにヘッダーとフッターを付加する。

    wrap が無効なチャプターのファイルには一切触れません。
    """
    header = publication.chapter_header or ""
    footer = publication.chapter_footer or ""
    logger.stage(2, BUILD_STAGE_COUNT, msg("stage_wrap"))
    for chapter in _all_chapters(publication):
        if not chapter.wrap:
            continue
        logger.debug(msg("processing_file", name=chapter.file_name))
        write_staged_file(chapter.path, header + read_staged_text(chapter.path) + footer)


def _hooks(publication: "Publication") -> Iterator[tuple[Callable, object]]:
    """出版物 → ブック → チャプターの順にフックと引数を列挙する。"""
    yield publication.before_build, publication
    for book in publication.books:
        yield book.before_build, book
        for chapter in book.chapters:
            yield chapter.before_build, chapter


def run_before_build_hooks(publication: "Publication") -> None:
    """
    ビルド前処理を呼び出す。

    出版物、各ブック、そのブックの各チャプターの順に、設定されている
    関数をそれぞれのエンティティを引数として呼び出します。
    関数が送出した例外はそのまま伝播します。
    """
    logger.stage(3, BUILD_STAGE_COUNT, msg("stage_hooks"))
    for hook, target in _hooks(publication):
        if hook is not None:
            hook(target)


def create_content_page(publication: "Publication") -> None:
    """
    単一ブックの末尾に目次ページ（content.html）を追加する。

    Raises
    ------
    UnsupportedConfigurationError
        先頭への配置が指定されている場合、またはブックが1冊でない場合。
    """
    title = publication.content_title
    if publication.content_at_begin:
        raise UnsupportedConfigurationError(msg("exception_content_at_begin"))
    books = publication.books
    if len(books) != 1:
        raise UnsupportedConfigurationError(msg("exception_content_multi_book", count=len(books)))

    logger.stage(4, BUILD_STAGE_COUNT, msg("stage_content", title=title))
    book = books[0]
    chapter = book.stage_html(generate_content_page_html(title, book.chapters), CONTENT_FILENAME)
    chapter.title = title
    chapter.wrap = False


def write_cover_page(publication: "Publication") -> None:
    """表紙ページを生成する。既に存在する場合は上書きしない。"""
    cover_page = oebps_dir(publication.workspace) / cover_page_href()
    if cover_page.exists():
        logger.debug(msg("stage_cover_exists", name=cover_page.name))
        return
    logger.stage(5, BUILD_STAGE_COUNT, msg("stage_cover"))
    write_staged_file(cover_page, generate_cover_xhtml("../" + publication.cover, publication.cover_title))


def build_publication(publication: "Publication", output_path: str | Path) -> Path:
    """
    出版物からEPUBファイルを生成する。

    Parameters
    ----------
    publication : Publication
        ビルド対象の出版物。
    output_path : str | Path
        出力EPUBファイルのパス。

    Returns
    -------
    Path
        出力したEPUBファイルのパス。
    """
    logger.section(msg("build_start", title=publication.title or ""))
    oebps = oebps_dir(publication.workspace)

    # 1. 文字実体参照のデコード
    if publication.decode_entities:
        decode_chapter_entities(publication)

    # 2. ヘッダー・フッターの付加
    if publication.chapter_header or publication.chapter_footer:
        wrap_chapters(publication)

    # 3. ビルド前処理
    run_before_build_hooks(publication)

    # 4. 目次ページ
    if publication.content_title:
        create_content_page(publication)

    # 5. 表紙ページ
    if publication.cover:
        write_cover_page(publication)

    # 6. toc.ncx
    logger.stage(6, BUILD_STAGE_COUNT, msg("stage_toc"))
    write_staged_file(oebps / NCX_FILENAME, generate_ncx(publication))

    # 7. content.opf
    logger.stage(7, BUILD_STAGE_COUNT, msg("stage_opf"))
    write_staged_file(oebps / OPF_FILENAME, generate_opf(publication, oebps))

    # 8. パッケージング (ZIP)
    logger.stage(8, BUILD_STAGE_COUNT, msg("stage_package"))
    output = package_epub(publication.workspace, output_path)

    books = publication.books
    logger.info(msg("build_summary", books=len(books), chapters=sum(len(b.chapters) for b in books)))
    logger.success(msg("epub_saved", file=output))
    return output
