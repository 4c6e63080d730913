"""
EPUB生成ツールのメインモジュール。

HTMLチャプターを格納したフォルダと書誌情報ファイルからEPUBを生成する。

フォルダ構成::

    bar_metadata.txt        書誌情報（必須）
    bar/
    ├── style.css           スタイルシート（任意）
    ├── font.otf            フォント（任意）
    ├── 01.html             チャプター（サブフォルダが無い場合は1冊のブック）
    └── part1/              サブフォルダがある場合はサブフォルダごとに1冊のブック
        ├── 01.html
        └── 02.html

チャプターファイルの形式:

- ``<html>`` 要素を持つ完全な文書はそのまま収録します。
- それ以外は断片として扱い、デフォルトのヘッダー（``<head>`` の開始まで）と
  フッター（``</body></html>``）で囲みます。断片は
  ``<title>…</title></head><body>`` から本文を書き始める形を想定しています。
  ``<body>`` を持たない断片（本文のみ）には ``<title>`` と
  ``</head><body>`` を補います。
- ``<img>`` の src はチャプターファイルからの相対パスで解決し、
  画像を Images フォルダに登録して参照先を書き換えます。
"""
import argparse
import html
import re
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from opfbinder.core import logger
from opfbinder.core.config import (
    CHAPTER_SUFFIXES,
    FONT_SUFFIXES,
    LANGUAGE_CONFIGS,
    STYLE_SUFFIXES,
    get_language_config,
)
from opfbinder.core.exceptions import EpubGenerationError, NoContentError
from opfbinder.core.messages import msg, set_ui_language
from opfbinder.core.metadata_reader import (
    BookMetadata,
    MetadataFileNotFoundError,
    MetadataTitleMissingError,
    get_metadata_path_for_folder,
    load_metadata_for_folder,
)
from opfbinder.epub.entities import Book, Chapter
from opfbinder.epub.publication import Publication
from opfbinder.epub.workspace import read_staged_text, write_staged_file
from opfbinder.parsers.html import extract_title, find_elements, rewrite_image_sources


# =============================================================================
# データクラス
# =============================================================================

@dataclass
class ProcessingContext:
    """処理コンテキストを保持するデータクラス。"""
    start_time: datetime
    timestamp_str: str
    output_dir: Path
    output_epub: str

    @classmethod
    def create(cls, source_path: Path, output_epub: str | None = None) -> "ProcessingContext":
        """処理コンテキストを生成する。出力先の指定が無ければフォルダ名から派生させる。"""
        start_time = datetime.now()
        timestamp_str = start_time.strftime("%Y%m%d%H%M%S")

        if output_epub is None:
            output_dir = source_path.parent
            output_epub = str(output_dir / f"{source_path.name}_{timestamp_str}.epub")
        else:
            output_dir = Path(output_epub).parent

        return cls(
            start_time=start_time,
            timestamp_str=timestamp_str,
            output_dir=output_dir,
            output_epub=output_epub,
        )


@dataclass
class BookSource:
    """1冊のブックの元になるフォルダとチャプターファイル。"""
    title: str
    folder: Path
    chapter_files: list[Path]


# =============================================================================
# ユーティリティ関数
# =============================================================================

def natural_sort_key(path: Path) -> list:
    """
    自然順ソートのためのキー関数。

    ファイル名内の数字を数値として扱い、人間が期待する順序でソートする。
    例: file1, file2, file10 → file1, file2, file10 (文字列だと file1, file10, file2)
    """
    def convert(text: str):
        return int(text) if text.isdigit() else text.lower()
    return [convert(c) for c in re.split(r'(\d+)', path.name)]


def _list_files(folder: Path, suffixes: tuple[str, ...]) -> list[Path]:
    """指定拡張子のファイルを自然順で返す（隠しファイルは除く）。"""
    files = [
        p for p in folder.iterdir()
        if p.is_file() and p.suffix.lower() in suffixes and not p.name.startswith(".")
    ]
    return sorted(files, key=natural_sort_key)


def _list_subfolders(folder: Path) -> list[Path]:
    folders = [p for p in folder.iterdir() if p.is_dir() and not p.name.startswith(".")]
    return sorted(folders, key=natural_sort_key)


def _is_external_reference(src: str) -> bool:
    """URLやdata URIなど、ファイルとして解決しない参照かどうか。"""
    return "://" in src or src.startswith(("data:", "mailto:", "#"))


def _log_processing_start(start_time: datetime) -> None:
    """処理開始ログを出力する。"""
    logger.info(msg("processing_start", time=start_time.strftime('%Y-%m-%d %H:%M:%S')))


def _log_processing_end(ctx: ProcessingContext) -> None:
    """処理終了ログを出力する。"""
    end_time = datetime.now()
    elapsed_time = end_time - ctx.start_time
    logger.separator()
    logger.info(msg("processing_end", time=end_time.strftime('%Y-%m-%d %H:%M:%S')))
    logger.info(msg("elapsed_time", time=elapsed_time))
    logger.info(msg("output_file", path=ctx.output_epub))


# =============================================================================
# バリデーション関数
# =============================================================================

def _validate_folder_exists(folder_path: Path) -> None:
    """フォルダの存在をチェックする。"""
    if not folder_path.exists() or not folder_path.is_dir():
        raise EpubGenerationError(msg("folder_not_found", path=folder_path))


# =============================================================================
# 出版物の組み立て
# =============================================================================

def collect_book_sources(folder_path: Path, default_title: str) -> list[BookSource]:
    """
    フォルダからブックの構成を決める。

    チャプターを含むサブフォルダがあればサブフォルダごとに1冊
    （タイトルはフォルダ名）、無ければフォルダ自身を1冊のブックとします。
    """
    books = []
    for subfolder in _list_subfolders(folder_path):
        chapter_files = _list_files(subfolder, CHAPTER_SUFFIXES)
        if chapter_files:
            books.append(BookSource(subfolder.name, subfolder, chapter_files))
    if books:
        return books
    return [BookSource(default_title, folder_path, _list_files(folder_path, CHAPTER_SUFFIXES))]


def _apply_metadata(publication: Publication, metadata: BookMetadata, epub_lang: str | None) -> None:
    """書誌情報を出版物に設定する。"""
    publication.title = metadata.title
    publication.language = metadata.language or epub_lang
    publication.publisher = metadata.publisher
    publication.description = metadata.description
    for creator in metadata.creators:
        publication.add_creator(creator.role, creator.name, creator.file_as)
    for subject in metadata.subjects:
        publication.add_subject(subject)
    if metadata.content_title:
        publication.place_content(metadata.content_title)


class _ImageRegistry:
    """チャプターが参照する画像を、同じファイルにつき1回だけ出版物に登録する。"""

    def __init__(self, publication: Publication):
        self._publication = publication
        self._registered: dict[Path, str] = {}

    def mark_registered(self, image_path: Path, relative: str) -> None:
        """登録済みの画像（表紙など）を記録する。"""
        self._registered[image_path.resolve()] = relative

    def register_chapter_images(self, chapter: Chapter, source_file: Path) -> None:
        """
        チャプターが参照する画像を登録し、配置済みチャプターの src を
        ``../Images/<ファイル名>`` に書き換える。

        元のチャプターファイルからの相対パスで解決できない画像は
        警告を出して src をそのまま残します。
        """
        replacements: dict[str, str] = {}
        for src in chapter.images:
            if _is_external_reference(src) or src in replacements:
                continue
            image_path = (source_file.parent / src.split("#")[0].split("?")[0]).resolve()
            if image_path not in self._registered:
                if not image_path.is_file():
                    logger.warning(msg("image_missing", path=image_path))
                    continue
                self._registered[image_path] = self._publication.add_image(image_path)
            replacements[src] = "../" + self._registered[image_path]

        if replacements:
            markup = read_staged_text(chapter.path)
            write_staged_file(chapter.path, rewrite_image_sources(markup, replacements))
            chapter.images = [replacements.get(src, src) for src in chapter.images]


def _open_body(chapter: Chapter, with_title: bool) -> None:
    """``<body>`` を持たない断片の先頭に ``</head><body>`` （と ``<title>``）を補う。"""
    head = f"<title>{html.escape(chapter.title)}</title>\n" if with_title else ""
    body = read_staged_text(chapter.path)
    write_staged_file(chapter.path, f"{head}</head>\n<body>\n{body}")


def _add_chapters(book: Book, source: BookSource, styles: list[str], images: _ImageRegistry) -> None:
    """ブックのフォルダのチャプターファイルを取り込む。"""
    for chapter_file in source.chapter_files:
        logger.debug(msg("processing_file", name=chapter_file.name))
        chapter = book.add_chapter_file(chapter_file)
        chapter.title = extract_title(chapter.path) or chapter_file.stem
        present = find_elements(chapter.path, ("html", "title", "body"))
        # 完全なHTML文書にはヘッダー・フッターを付加しない
        chapter.wrap = "html" not in present
        if chapter.wrap and "body" not in present:
            _open_body(chapter, "title" not in present)
        for style in styles:
            chapter.add_style(style)
        images.register_chapter_images(chapter, chapter_file)


def process_folder(
    source_folder: str | Path,
    output_epub: str | None = None,
    work_dir: str | Path | None = None,
    decode_entities: bool = True,
    epub_lang: str | None = None
) -> str:
    """
    フォルダ内のHTMLチャプターからEPUBを生成する。

    Parameters
    ----------
    source_folder : str | Path
        チャプターファイルが格納されたフォルダ。
        同じ階層に ``<フォルダ名>_metadata.txt`` が必要です。
    output_epub : str | None
        出力EPUBファイルのパス。省略時はフォルダ名とタイムスタンプから決めます。
    work_dir : str | Path | None
        作業フォルダを作成する場所。省略時はシステムの一時フォルダ。
    decode_entities : bool
        チャプターの文字実体参照をデコードするかどうか。
    epub_lang : str | None
        書誌情報に言語が無い場合に使用するEPUBの言語コード。

    Returns
    -------
    str
        出力したEPUBファイルのパス。

    Raises
    ------
    MetadataFileNotFoundError
        書誌情報ファイルが無い場合。
    MetadataTitleMissingError
        書誌情報にタイトルが無い場合。
    NoContentError
        チャプターファイルが1つも無い場合。
    EpubGenerationError
        EPUBの生成に失敗した場合。
    """
    folder_path = Path(source_folder)

    # バリデーション
    _validate_folder_exists(folder_path)

    # コンテキスト生成
    ctx = ProcessingContext.create(folder_path, output_epub)
    _log_processing_start(ctx.start_time)

    # メタデータ
    metadata = load_metadata_for_folder(folder_path)

    # ソースファイル収集
    book_sources = collect_book_sources(folder_path, metadata.title)
    chapter_count = sum(len(b.chapter_files) for b in book_sources)
    if chapter_count == 0:
        raise NoContentError(msg("no_chapters_in_folder", folder=folder_path))
    logger.info(msg("file_count", count=chapter_count))

    with Publication(work_dir) as publication:
        _apply_metadata(publication, metadata, epub_lang)
        publication.decode_entities = decode_entities

        styles = [publication.add_style(p) for p in _list_files(folder_path, STYLE_SUFFIXES)]
        for font_file in _list_files(folder_path, FONT_SUFFIXES):
            publication.add_font(font_file)
        images = _ImageRegistry(publication)
        if metadata.cover:
            cover_path = get_metadata_path_for_folder(folder_path).parent / metadata.cover
            images.mark_registered(cover_path, publication.add_cover(cover_path, metadata.cover_title))

        for source in book_sources:
            book = publication.add_book(source.title)
            logger.info(msg("processing_book", number=book.number, title=source.title))
            _add_chapters(book, source, styles, images)

        publication.build(ctx.output_epub)

    _log_processing_end(ctx)
    return ctx.output_epub


# =============================================================================
# メイン関数
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    """コマンドライン引数のパーサーを生成する。"""
    parser = argparse.ArgumentParser(prog="opfbinder", description=msg("cli_description"))
    parser.add_argument("source", help=msg("arg_source"))
    parser.add_argument("-o", "--output", default=None, help=msg("arg_output"))
    parser.add_argument("--work-dir", default=None, help=msg("arg_work_dir"))
    parser.add_argument("--no-decode", action="store_true", help=msg("arg_no_decode"))
    parser.add_argument("--lang", choices=sorted(LANGUAGE_CONFIGS), default=None, help=msg("arg_lang"))
    parser.add_argument("-v", "--verbose", action="store_true", help=msg("arg_verbose"))
    return parser


def main(argv: list[str] | None = None) -> None:
    """EPUB生成ツールのメイン処理。"""
    args = build_parser().parse_args(argv)

    epub_lang = None
    if args.lang:
        lang_config = get_language_config(args.lang)
        set_ui_language(lang_config.code)
        epub_lang = lang_config.epub_lang
    if args.verbose:
        logger.set_log_level(logger.LogLevel.DEBUG)

    logger.separator()
    logger.info(msg("tool_title"))
    logger.separator()

    # 引用符付き入力への対応: "path" や 'path' をトリム
    source = args.source.strip().strip('"').strip("'")

    try:
        process_folder(
            source,
            output_epub=args.output,
            work_dir=args.work_dir,
            decode_entities=not args.no_decode,
            epub_lang=epub_lang,
        )
    except (MetadataFileNotFoundError, MetadataTitleMissingError) as e:
        logger.error(str(e))
        sys.exit(1)
    except EpubGenerationError as e:
        logger.error(str(e))
        logger.info(msg("processing_aborted"))
        sys.exit(1)


if __name__ == "__main__":
    main()
