"""
書誌情報ファイル読み取りモジュール。

メタデータファイルから書籍のメタ情報を読み取り、EPUB生成に使用します。
"""
from dataclasses import dataclass, field
from pathlib import Path

from opfbinder.core.config import METADATA_SUFFIX
from opfbinder.core.messages import msg


class MetadataFileNotFoundError(Exception):
    """書誌情報ファイルが見つからない場合の例外。"""

    def __init__(self, metadata_path: str):
        self.metadata_path = metadata_path
        super().__init__(msg("metadata_not_found", path=metadata_path))


class MetadataTitleMissingError(Exception):
    """書誌情報にタイトルがない場合の例外。"""

    def __init__(self):
        super().__init__(msg("metadata_no_title"))


@dataclass
class CreatorEntry:
    """書誌情報ファイルの制作者1件分。"""
    role: str
    name: str
    file_as: str | None = None


@dataclass
class BookMetadata:
    """書籍のメタデータを保持するデータクラス。"""

    title: str  # タイトル（必須）
    creators: list[CreatorEntry] = field(default_factory=list)
    publisher: str | None = None
    description: str | None = None
    language: str | None = None
    subjects: list[str] = field(default_factory=list)
    cover: str | None = None  # 表紙画像（メタデータファイルからの相対パス）
    cover_title: str | None = None
    content_title: str | None = None  # 目次ページのタイトル


# 単一値フィールド
_FIELD_MAPPING: dict[str, str] = {
    "title": "title",
    "publisher": "publisher",
    "description": "description",
    "language": "language",
    "cover": "cover",
    "cover_title": "cover_title",
    "content_title": "content_title",
}

# 制作者キーとMARCリレーターコードの対応（同一キーの複数値をサポート）
_CREATOR_ROLES: dict[str, str] = {
    "author": "aut",
    "illustrator": "ill",
    "editor": "edt",
    "translator": "trl",
}


def get_metadata_path_for_folder(source_folder: str | Path) -> Path:
    """
    フォルダ処理用のメタデータファイルパスを取得する。

    Parameters
    ----------
    source_folder : str | Path
        チャプターファイルが格納されたフォルダのパス（例：/path/to/bar）

    Returns
    -------
    Path
        メタデータファイルのパス（例：/path/to/bar_metadata.txt）
    """
    folder_path = Path(source_folder)
    return folder_path.parent / f"{folder_path.name}{METADATA_SUFFIX}"


def _parse_creator(role: str, value: str) -> CreatorEntry:
    """「名前 | ソート用名前」形式の値を制作者に変換する。"""
    name, _, file_as = value.partition("|")
    return CreatorEntry(role=role, name=name.strip(), file_as=file_as.strip() or None)


def parse_metadata_file(metadata_path: Path) -> tuple[dict[str, str], list[CreatorEntry], list[str]]:
    """
    メタデータファイルをパースする。

    Parameters
    ----------
    metadata_path : Path
        メタデータファイルのパス

    Returns
    -------
    tuple[dict[str, str], list[CreatorEntry], list[str]]
        単一値フィールドの辞書、制作者リスト、キーワードリスト

    Notes
    -----
    ファイルフォーマット:
        title: 〇〇
        author: 名前 | 姓, 名
        illustrator: 〇〇
        publisher: 〇〇
        description: 〇〇
        language: ja
        subject: 〇〇
        cover: images/cover.jpg
        cover_title: 表紙
        content_title: 目次
    """
    result: dict[str, str] = {}
    creators: list[CreatorEntry] = []
    subjects: list[str] = []

    with open(metadata_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            # 「:」または「：」で分割（半角コロン優先）
            if ":" in line:
                key, _, value = line.partition(":")
            elif "：" in line:
                key, _, value = line.partition("：")
            else:
                continue

            key = key.strip()
            value = value.strip()

            if not value:
                continue

            if key in _CREATOR_ROLES:
                creators.append(_parse_creator(_CREATOR_ROLES[key], value))
            elif key == "subject":
                subjects.append(value)
            elif key in _FIELD_MAPPING:
                result[_FIELD_MAPPING[key]] = value

    return result, creators, subjects


def load_metadata(metadata_path: str | Path) -> BookMetadata:
    """
    メタデータファイルを読み込む。

    Parameters
    ----------
    metadata_path : str | Path
        メタデータファイルのパス

    Returns
    -------
    BookMetadata
        読み込んだメタデータ

    Raises
    ------
    MetadataFileNotFoundError
        メタデータファイルが見つからない場合
    MetadataTitleMissingError
        タイトルが記載されていない場合
    """
    metadata_path = Path(metadata_path)
    if not metadata_path.is_file():
        raise MetadataFileNotFoundError(str(metadata_path))

    fields, creators, subjects = parse_metadata_file(metadata_path)

    if "title" not in fields:
        raise MetadataTitleMissingError()

    return BookMetadata(
        title=fields["title"],
        creators=creators,
        publisher=fields.get("publisher"),
        description=fields.get("description"),
        language=fields.get("language"),
        subjects=subjects,
        cover=fields.get("cover"),
        cover_title=fields.get("cover_title"),
        content_title=fields.get("content_title"),
    )


def load_metadata_for_folder(source_folder: str | Path) -> BookMetadata:
    """
    フォルダ処理用のメタデータを読み込む。

    Parameters
    ----------
    source_folder : str | Path
        チャプターファイルが格納されたフォルダのパス

    Returns
    -------
    BookMetadata
        読み込んだメタデータ
    """
    return load_metadata(get_metadata_path_for_folder(source_folder))
