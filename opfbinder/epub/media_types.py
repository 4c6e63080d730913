"""
マニフェスト用メディアタイプ判定モジュール。

ラスター画像はファイル内容から判定し、それ以外は拡張子から判定します。
"""
import mimetypes
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from opfbinder.core.config import CSS_MEDIA_TYPE, DEFAULT_MEDIA_TYPE, XHTML_MEDIA_TYPE

# 拡張子からMIMEタイプへのマッピング（mimetypes より優先）
EXTENSION_MEDIA_TYPES = {
    '.svg': 'image/svg+xml',
    '.ttf': 'font/ttf',
    '.otf': 'font/otf',
    '.woff': 'font/woff',
    '.woff2': 'font/woff2',
    '.css': CSS_MEDIA_TYPE,
    '.html': XHTML_MEDIA_TYPE,
    '.htm': XHTML_MEDIA_TYPE,
    '.xhtml': XHTML_MEDIA_TYPE,
}


def _sniff_image(path: Path) -> str | None:
    """Pillowで画像形式を判定する。画像でなければ None。"""
    try:
        with Image.open(path) as img:
            image_format = img.format
    except (UnidentifiedImageError, OSError):
        return None
    if not image_format:
        return None
    return Image.MIME.get(image_format.upper())


def get_extension_media_type(filename: str) -> str:
    """
    ファイル名の拡張子からMIMEタイプを取得する。

    Parameters
    ----------
    filename : str
        ファイル名（拡張子付き）。

    Returns
    -------
    str
        MIMEタイプ。未知の拡張子の場合は'application/octet-stream'。
    """
    ext = Path(filename).suffix.lower()
    if ext in EXTENSION_MEDIA_TYPES:
        return EXTENSION_MEDIA_TYPES[ext]
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or DEFAULT_MEDIA_TYPE


def detect_media_type(path: str | Path) -> str:
    """
    ファイルのメディアタイプを推定する。

    画像として読めるファイルは内容（Pillowの形式判定）を優先し、
    それ以外は拡張子から判定します。

    Parameters
    ----------
    path : str | Path
        判定するファイルのパス。

    Returns
    -------
    str
        推定したMIMEタイプ。
    """
    path = Path(path)
    sniffed = _sniff_image(path)
    if sniffed:
        return sniffed
    return get_extension_media_type(path.name)
