"""
出版物を構成するエンティティ（制作者・チャプター・ブック）のモジュール。

チャプターはブックの取り込み操作によってのみ生成され、生成と同時に
作業フォルダの OEBPS/Text に配置されます。
"""
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from opfbinder.core import logger
from opfbinder.core.config import COVER_FILENAME, DEFAULT_CHAPTER_TITLE
from opfbinder.core.exceptions import (
    DuplicateChapterError,
    InputError,
    SourceParsingError,
    UnsupportedConfigurationError,
)
from opfbinder.core.messages import msg
from opfbinder.epub.workspace import (
    copy_staged_file,
    is_readable_file,
    text_dir,
    write_staged_file,
)
from opfbinder.parsers.html import extract_image_sources

if TYPE_CHECKING:
    from opfbinder.epub.publication import Publication


@dataclass(frozen=True)
class Creator:
    """出版物の制作者（著者・挿絵画家など）。"""
    role: str                   # MARCリレーターコード（例: "aut", "ill"）
    name: str                   # 表示名（名 姓）
    file_as: str | None = None  # ソート用の名前（姓, 名）


class Chapter:
    """
    配置済みのチャプターファイル1件。

    生成時に配置済みHTMLを解析し、``<img>`` の src を文書順に
    ``images`` へ記録します。
    """

    def __init__(self, file_name: str, path: Path):
        self._file_name = file_name
        self._path = path
        self.title: str = DEFAULT_CHAPTER_TITLE
        self.wrap: bool = True
        self.styles: list[str] = []
        self.images: list[str] = extract_image_sources(path)
        self.before_build: Callable[["Chapter"], None] | None = None

    def __repr__(self) -> str:
        return f"Chapter({self._file_name!r}, title={self.title!r})"

    @property
    def file_name(self) -> str:
        """作業フォルダ内のファイル名（変更不可）。"""
        return self._file_name

    @property
    def path(self) -> Path:
        """配置済みファイルのパス。"""
        return self._path

    def add_style(self, style: str) -> "Chapter":
        """チャプターが参照するスタイルシートを追加する。"""
        self.styles.append(style)
        return self

    def add_image(self, image: str) -> "Chapter":
        """チャプターが参照する画像を追加する。"""
        self.images.append(image)
        return self

    def run_before_build(self, func: Callable[["Chapter"], None] | None) -> "Chapter":
        """ビルド前に呼び出す関数を設定する（None で解除）。"""
        self.before_build = func
        return self


class Book:
    """
    出版物中の1冊のブック。

    番号は出版物への追加順に1から振られ、変更できません。
    チャプターはファイル名をキーとして追加順に保持します。
    """

    def __init__(self, publication: "Publication", number: int, title: str):
        self._publication = publication
        self._number = number
        self.title = title
        self._chapters: dict[str, Chapter] = {}
        self.before_build: Callable[["Book"], None] | None = None

    def __repr__(self) -> str:
        return f"Book({self._number}, {self.title!r}, chapters={len(self._chapters)})"

    @property
    def number(self) -> int:
        return self._number

    @property
    def publication(self) -> "Publication":
        return self._publication

    @property
    def chapters(self) -> list[Chapter]:
        """チャプターのリスト（追加順）。"""
        return list(self._chapters.values())

    def get_chapter(self, file_name: str) -> Chapter | None:
        return self._chapters.get(file_name)

    def run_before_build(self, func: Callable[["Book"], None] | None) -> "Book":
        """ビルド前に呼び出す関数を設定する（None で解除）。"""
        self.before_build = func
        return self

    def add_chapter_html(self, html: str, name: str | None = None) -> Chapter:
        """
        HTMLテキストからチャプターを追加する。

        Parameters
        ----------
        html : str
            チャプターの内容。そのまま作業フォルダに書き込まれます。
        name : str | None
            作業フォルダ内のファイル名。省略時は ``b01c001.html`` 形式で自動命名。

        Returns
        -------
        Chapter
            追加したチャプター。

        Raises
        ------
        DuplicateChapterError
            同名のチャプターファイルが既に存在する場合。
        StagingError
            書き込みに失敗した場合。
        SourceParsingError
            配置したHTMLを解析できない場合。
        """
        self._ensure_not_building(name)
        return self.stage_html(html, name)

    def add_chapter_file(self, file_name: str | Path, name: str | None = None) -> Chapter:
        """
        既存のHTMLファイルをコピーしてチャプターを追加する。

        Parameters
        ----------
        file_name : str | Path
            コピー元のファイル。存在し読み込み可能な通常ファイルである必要があります。
        name : str | None
            作業フォルダ内のファイル名。省略時は自動命名。

        Raises
        ------
        InputError
            コピー元がファイルでないか読み込めない場合。
        DuplicateChapterError
            同名のチャプターファイルが既に存在する場合。
        StagingError
            コピーに失敗した場合。
        SourceParsingError
            配置したHTMLを解析できない場合。
        """
        self._ensure_not_building(name)
        source = Path(file_name)
        if not is_readable_file(source):
            raise InputError(str(source), msg("file_type_chapter"))
        chapter_name = self._chapter_name(name)
        destination = self._destination(chapter_name)
        copy_staged_file(source, destination)
        return self._register(chapter_name, destination)

    def stage_html(self, html: str, name: str | None = None) -> Chapter:
        """
        HTMLを作業フォルダに書き込んでチャプターとして登録する。

        ビルド中かどうかを確認しないため、ビルド処理自身が生成する
        チャプター（目次ページ）の配置にのみ使用します。
        """
        chapter_name = self._chapter_name(name)
        destination = self._destination(chapter_name)
        write_staged_file(destination, html)
        return self._register(chapter_name, destination)

    def _ensure_not_building(self, name: str | None) -> None:
        if self._publication.is_building:
            raise UnsupportedConfigurationError(msg("exception_late_chapter", name=name or ""))

    def _chapter_name(self, name: str | None) -> str:
        """チャプターのファイル名を決める（未指定なら b<ブック番号>c<連番>.html）。"""
        if name:
            return name
        return f"b{self._number:02d}c{len(self._chapters) + 1:03d}.html"

    def _destination(self, chapter_name: str) -> Path:
        """配置先のパスを返す。既存ファイル・予約名・パス区切りを含む名前は拒否する。"""
        directory = text_dir(self._publication.workspace)
        destination = directory / chapter_name
        if Path(chapter_name).name != chapter_name or chapter_name in (".", ".."):
            raise InputError(chapter_name, msg("file_type_chapter"))
        if chapter_name == COVER_FILENAME or destination.exists():
            raise DuplicateChapterError(str(destination))
        return destination

    def _register(self, chapter_name: str, destination: Path) -> Chapter:
        try:
            chapter = Chapter(chapter_name, destination)
        except SourceParsingError:
            destination.unlink(missing_ok=True)
            raise
        self._chapters[chapter_name] = chapter
        logger.debug(msg("chapter_staged", name=chapter_name))
        return chapter
