"""
出版物（EPUBパッケージ全体）のモジュール。

出版物は識別子・書誌情報・ブック・登録ファイルを保持し、
専用の作業フォルダを所有します。
"""
import tempfile
import weakref
from pathlib import Path
from typing import Callable

from opfbinder.core import logger
from opfbinder.core.config import (
    DEFAULT_CHAPTER_FOOTER,
    DEFAULT_CHAPTER_HEADER,
    DEFAULT_COVER_TITLE,
    FONTS,
    IMAGES,
    STYLES,
)
from opfbinder.core.exceptions import InputError, UnsupportedConfigurationError
from opfbinder.core.messages import msg
from opfbinder.epub.entities import Book, Creator
from opfbinder.epub.identifier import new_identifier
from opfbinder.epub.workspace import (
    copy_staged_file,
    create_workspace,
    destroy_workspace,
    is_readable_file,
    oebps_dir,
)


class Publication:
    """
    EPUB出版物。

    生成時に識別子を1回だけ生成し、``base_dir`` の下に作業フォルダを
    作成します。作業フォルダは :meth:`dispose` で（``with`` 文を使う場合は
    ブロックを抜けた時点で）ビルドの成否にかかわらず削除されます。
    どちらも呼ばれなかった場合は、出版物が回収された時点で削除されます。

    ビルドは1つの出版物につき1回だけ実行できます。作り直す場合は
    新しい出版物を生成してください。

    Parameters
    ----------
    base_dir : str | Path | None
        作業フォルダを作成する既存の書き込み可能なフォルダ。
        省略時はシステムの一時フォルダ。

    Examples
    --------
    >>> with Publication() as publication:
    ...     publication.title = "T"
    ...     book = publication.add_book("Book1")
    ...     book.add_chapter_html("<p>Hi</p>")
    ...     publication.build("out.epub")
    """

    def __init__(self, base_dir: str | Path | None = None):
        self._identifier = new_identifier()
        self._workspace = create_workspace(base_dir if base_dir is not None else tempfile.gettempdir())
        self._finalizer = weakref.finalize(self, destroy_workspace, self._workspace)

        # 書誌情報
        self.title: str | None = None
        self.language: str | None = None
        self.publisher: str | None = None
        self.description: str | None = None
        self._subjects: list[str] = []
        self._creators: list[Creator] = []

        # 構成
        self._books: list[Book] = []
        self._styles: list[str] = []
        self._fonts: list[str] = []
        self._images: list[str] = []
        self._cover: str | None = None
        self.cover_title: str = DEFAULT_COVER_TITLE

        # ビルド設定
        self.chapter_header: str = DEFAULT_CHAPTER_HEADER
        self.chapter_footer: str = DEFAULT_CHAPTER_FOOTER
        self.decode_entities: bool = True
        self.content_title: str | None = None
        self.content_at_begin: bool = False
        self.before_build: Callable[["Publication"], None] | None = None

        self._building = False
        self._built = False

    def __enter__(self) -> "Publication":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return f"Publication({self.title!r}, books={len(self._books)}, workspace={str(self._workspace)!r})"

    # --- 読み取り専用プロパティ ---

    @property
    def identifier(self) -> str:
        """生成済みの識別子（変更不可）。"""
        return self._identifier

    @property
    def workspace(self) -> Path:
        """作業フォルダのパス。"""
        return self._workspace

    @property
    def is_building(self) -> bool:
        return self._building

    @property
    def is_built(self) -> bool:
        """ビルドが実行済みかどうか（成否を問わない）。"""
        return self._built

    @property
    def books(self) -> list[Book]:
        return list(self._books)

    @property
    def creators(self) -> list[Creator]:
        return list(self._creators)

    @property
    def subjects(self) -> list[str]:
        return list(self._subjects)

    @property
    def styles(self) -> list[str]:
        """登録済みスタイルシート（OEBPSからの相対パス）。"""
        return list(self._styles)

    @property
    def fonts(self) -> list[str]:
        return list(self._fonts)

    @property
    def images(self) -> list[str]:
        return list(self._images)

    @property
    def cover(self) -> str | None:
        """表紙画像（OEBPSからの相対パス）。未登録なら None。"""
        return self._cover

    # --- 書誌情報 ---

    def add_creator(self, role: str, name: str, file_as: str | None = None) -> Creator:
        """制作者を追加する。role はMARCリレーターコード（"aut", "ill" など）。"""
        creator = Creator(role, name, file_as)
        self._creators.append(creator)
        return creator

    def add_subject(self, subject: str) -> None:
        self._subjects.append(subject)

    # --- 構成 ---

    def add_book(self, title: str) -> Book:
        """ブックを追加する。番号は現在のブック数 + 1。"""
        book = Book(self, len(self._books) + 1, title)
        self._books.append(book)
        return book

    def add_style(self, file_name: str | Path) -> str:
        """CSSファイルを Styles にコピーして登録し、OEBPSからの相対パスを返す。"""
        relative = self._add_file(file_name, STYLES, msg("file_type_style"))
        self._styles.append(relative)
        return relative

    def add_font(self, file_name: str | Path) -> str:
        """フォントファイルを Fonts にコピーして登録する。"""
        relative = self._add_file(file_name, FONTS, msg("file_type_font"))
        self._fonts.append(relative)
        return relative

    def add_image(self, file_name: str | Path) -> str:
        """画像ファイルを Images にコピーして登録する。"""
        relative = self._add_file(file_name, IMAGES, msg("file_type_image"))
        self._images.append(relative)
        return relative

    def add_cover(self, file_name: str | Path, cover_title: str | None = None) -> str:
        """
        表紙画像を Images にコピーして登録する。

        既に表紙が登録されている場合は置き換えます。

        Parameters
        ----------
        file_name : str | Path
            表紙画像ファイル。
        cover_title : str | None
            表紙ページのタイトル（ガイドおよび代替テキスト）。省略時は変更しない。
        """
        previous = self._cover
        relative = self._add_file(file_name, IMAGES, msg("file_type_cover"), replacing=previous)
        if previous and previous != relative:
            (oebps_dir(self._workspace) / previous).unlink(missing_ok=True)
        self._cover = relative
        if cover_title:
            self.cover_title = cover_title
        return relative

    def has_asset(self, relative: str) -> bool:
        """OEBPSからの相対パスが登録済みファイル（表紙を含む）かどうか。"""
        return relative == self._cover or relative in self._styles + self._fonts + self._images

    def _add_file(self, file_name: str | Path, directory: str, file_type: str, replacing: str | None = None) -> str:
        """ファイルを作業フォルダにコピーし、OEBPSからの相対パスを返す。"""
        source = Path(file_name)
        if not is_readable_file(source):
            raise InputError(str(source), file_type)
        relative = f"{directory}/{source.name}"
        if relative != replacing and self.has_asset(relative):
            raise InputError(relative, message=msg("exception_duplicate_asset", file_path=relative))
        copy_staged_file(source, oebps_dir(self._workspace) / directory / source.name)
        logger.debug(msg("asset_staged", name=relative))
        return relative

    # --- ビルド設定 ---

    def set_chapter_header(self, html: str) -> None:
        self.chapter_header = html

    def set_chapter_header_file(self, file_name: str | Path) -> None:
        """チャプターヘッダーをファイルから読み込む。読めない場合は InputError。"""
        self.chapter_header = self._read_template(file_name, msg("file_type_header"))

    def set_chapter_footer(self, html: str) -> None:
        self.chapter_footer = html

    def set_chapter_footer_file(self, file_name: str | Path) -> None:
        """チャプターフッターをファイルから読み込む。読めない場合は InputError。"""
        self.chapter_footer = self._read_template(file_name, msg("file_type_footer"))

    @staticmethod
    def _read_template(file_name: str | Path, file_type: str) -> str:
        path = Path(file_name)
        if not is_readable_file(path):
            raise InputError(str(path), file_type)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(str(path), file_type) from e

    def place_content(self, title: str, at_begin: bool = False) -> None:
        """
        目次ページの生成を要求する。

        目次ページは単一ブックの出版物で、末尾に配置する場合のみ
        生成できます。それ以外の指定はビルド時に
        UnsupportedConfigurationError になります。
        """
        self.content_title = title
        self.content_at_begin = at_begin

    def run_before_build(self, func: Callable[["Publication"], None] | None) -> None:
        """ビルド前に呼び出す関数を設定する（None で解除）。"""
        self.before_build = func

    # --- ビルド・破棄 ---

    def build(self, output_path: str | Path) -> Path:
        """
        EPUBファイルを生成する。

        Parameters
        ----------
        output_path : str | Path
            出力EPUBファイルのパス。既存ファイルは上書きされます。

        Returns
        -------
        Path
            出力したEPUBファイルのパス。

        Raises
        ------
        UnsupportedConfigurationError
            ビルド中、または既にビルドを実行した出版物の場合。
        EpubGenerationError
            いずれかの段階が失敗した場合（作業フォルダは途中の状態のまま残ります）。
        """
        from opfbinder.epub.builder import build_publication

        if self._building:
            raise UnsupportedConfigurationError(msg("exception_build_running"))
        if self._built:
            raise UnsupportedConfigurationError(msg("exception_already_built"))
        self._building = True
        self._built = True
        try:
            return build_publication(self, output_path)
        finally:
            self._building = False

    def dispose(self) -> None:
        """作業フォルダを削除する。何度呼び出しても安全。"""
        self._finalizer()
