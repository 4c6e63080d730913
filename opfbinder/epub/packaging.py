"""
EPUBパッケージングモジュール。

作業フォルダの内容をEPUB仕様に従ったZIPアーカイブにまとめます。
"""
import zipfile
from pathlib import Path

from opfbinder.core import logger
from opfbinder.core.config import MIMETYPE_FILENAME
from opfbinder.core.exceptions import PackagingError
from opfbinder.core.messages import msg


def _archive_entries(workspace: Path) -> list[Path]:
    """mimetype以外の格納対象ファイルを、ルートからの相対パス順に並べて返す。"""
    return sorted(
        (p for p in workspace.rglob("*") if p.is_file() and p.relative_to(workspace).as_posix() != MIMETYPE_FILENAME),
        key=lambda p: p.relative_to(workspace).as_posix(),
    )


def package_epub(workspace: Path, output_path: str | Path) -> Path:
    """
    作業フォルダをEPUB形式でZIPパッケージングする。

    EPUB仕様に従い、mimetypeファイルを無圧縮で先頭に配置し、
    それ以外のファイルを圧縮して格納します。

    Parameters
    ----------
    workspace : Path
        作業フォルダのパス。
    output_path : str | Path
        出力EPUBファイルのパス。既存ファイルは置き換えられます。

    Returns
    -------
    Path
        出力したEPUBファイルのパス。

    Raises
    ------
    PackagingError
        アーカイブの作成・書き込みに失敗した場合。書きかけの出力ファイルは削除されます。

    Notes
    -----
    エントリ名は作業フォルダのルートからの相対パス（区切りは "/"）です。
    作業フォルダの外のパスがエントリ名に含まれることはありません。
    """
    output = Path(output_path)
    try:
        archive = zipfile.ZipFile(output, "w")
    except OSError as e:
        raise PackagingError(msg("exception_archive_open", path=output), output_file=output) from e

    try:
        with archive:
            # mimetypeは無圧縮で先頭に
            archive.write(workspace / MIMETYPE_FILENAME, MIMETYPE_FILENAME, compress_type=zipfile.ZIP_STORED)
            for path in _archive_entries(workspace):
                archive.write(path, path.relative_to(workspace).as_posix(), compress_type=zipfile.ZIP_DEFLATED)
    except (OSError, zipfile.BadZipFile) as e:
        output.unlink(missing_ok=True)
        raise PackagingError(msg("exception_archive_write", path=output), output_file=output) from e

    logger.debug(msg("epub_saved", file=output))
    return output
