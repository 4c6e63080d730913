"""
EPUB作業フォルダ（ステージングツリー）管理モジュール。

出版物ごとの作業フォルダの作成・削除と、作業フォルダへの
ファイル書き込み・コピーを提供します。
"""
import os
import shutil
import tempfile
from pathlib import Path

from opfbinder.core import logger
from opfbinder.core.config import (
    EPUB_MIMETYPE,
    CONTAINER_FILENAME,
    FONTS,
    IMAGES,
    META_INF,
    MIMETYPE_FILENAME,
    OEBPS,
    STYLES,
    TEXTS,
    WORKSPACE_PREFIX,
)
from opfbinder.core.exceptions import InputError, StagingError
from opfbinder.core.messages import msg
from opfbinder.epub.templates import generate_container_xml

# 作業フォルダの骨格（フォルダ名 → サブフォルダ構造）
SKELETON: dict[str, dict | None] = {
    META_INF: None,
    OEBPS: {
        FONTS: None,
        IMAGES: None,
        STYLES: None,
        TEXTS: None,
    },
}


def oebps_dir(workspace: Path) -> Path:
    """OEBPSフォルダのパスを返す。"""
    return workspace / OEBPS


def text_dir(workspace: Path) -> Path:
    """チャプターを配置する OEBPS/Text フォルダのパスを返す。"""
    return workspace / OEBPS / TEXTS


def write_staged_file(path: Path, content: str | bytes) -> None:
    """
    作業フォルダ内のファイルを書き込む（既存ファイルは上書き）。

    Parameters
    ----------
    path : Path
        書き込み先のパス。
    content : str | bytes
        書き込む内容。str の場合はUTF-8で書き込みます。

    Raises
    ------
    StagingError
        書き込みに失敗した場合。
    """
    data = content.encode("utf-8") if isinstance(content, str) else content
    try:
        path.write_bytes(data)
    except OSError as e:
        raise StagingError(msg("exception_write", path=path), file_path=path) from e


def read_staged_text(path: Path) -> str:
    """作業フォルダ内のテキストファイルをUTF-8で読み込む。失敗時は StagingError。"""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StagingError(msg("exception_read", path=path), file_path=path) from e


def copy_staged_file(source: Path, destination: Path) -> None:
    """ファイルをバイト単位で作業フォルダにコピーする。失敗時は StagingError。"""
    try:
        shutil.copyfile(source, destination)
    except OSError as e:
        raise StagingError(msg("exception_copy", path=source), file_path=source) from e


def is_readable_file(path: Path) -> bool:
    """通常ファイルであり、かつ読み込み可能かどうか。"""
    return path.is_file() and os.access(path, os.R_OK)


def _create_dirs(root: Path, structure: dict[str, dict | None]) -> None:
    """構造定義に従ってフォルダを再帰的に作成する。"""
    for name, children in structure.items():
        directory = root / name
        try:
            directory.mkdir()
        except OSError as e:
            raise StagingError(msg("exception_mkdir", path=directory), file_path=directory) from e
        if children:
            _create_dirs(directory, children)


def create_workspace(base_dir: str | Path) -> Path:
    """
    作業フォルダとEPUBの必須骨格を作成する。

    Parameters
    ----------
    base_dir : str | Path
        作業フォルダを作成する既存の書き込み可能なフォルダ。

    Returns
    -------
    Path
        作成した作業フォルダのパス。

    Raises
    ------
    InputError
        base_dir がフォルダでないか書き込めない場合。
    StagingError
        フォルダ作成またはファイル書き込みに失敗した場合（途中までの
        作成物は削除しません）。

    Notes
    -----
    作成される構造::

        <作業フォルダ>/
        ├── mimetype
        ├── META-INF/
        │   └── container.xml
        └── OEBPS/
            ├── Fonts/
            ├── Images/
            ├── Styles/
            └── Text/
    """
    base = Path(base_dir)
    if not base.is_dir() or not os.access(base, os.W_OK):
        raise InputError(str(base), message=msg("exception_workspace_base", file_path=base))

    try:
        workspace = Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=base))
    except OSError as e:
        raise StagingError(msg("exception_mkdir", path=base), file_path=base) from e

    _create_dirs(workspace, SKELETON)
    write_staged_file(workspace / MIMETYPE_FILENAME, EPUB_MIMETYPE)
    write_staged_file(workspace / META_INF / CONTAINER_FILENAME, generate_container_xml())

    logger.debug(msg("workspace_created", path=workspace))
    return workspace


def destroy_workspace(workspace: str | Path) -> None:
    """作業フォルダを再帰的に削除する。存在しない場合は何もしない。"""
    path = Path(workspace)
    if not path.exists():
        return
    shutil.rmtree(path)
    logger.debug(msg("workspace_destroyed", path=path))
