"""
出版物識別子の生成モジュール。

RFC 4122 バージョン4形式のランダムな識別子を生成します。
"""
import secrets

# 16進文字列を分割するグループ長（第3・第4グループの先頭1文字は固定値で補う）
_GROUP_LENGTHS = (8, 4, 3, 3, 12)
_VARIANT_CHARS = "89AB"


def _split_groups(text: str, lengths: tuple[int, ...]) -> list[str]:
    """文字列を指定長のグループに分割する。"""
    groups: list[str] = []
    start = 0
    for length in lengths:
        groups.append(text[start:start + length])
        start += length
    return groups


def new_identifier() -> str:
    """
    ランダムなUUID形式の識別子を生成する。

    16バイトの暗号論的乱数を大文字16進に変換し、8-4-3-3-12 に分割します。
    第3グループの先頭にバージョン番号 ``4``、第4グループの先頭に
    バリアント文字（``8``/``9``/``A``/``B`` のいずれか）を付加します。

    Returns
    -------
    str
        ``XXXXXXXX-XXXX-4XXX-[89AB]XXX-XXXXXXXXXXXX`` 形式の識別子。
    """
    hex_str = secrets.token_hex(16).upper()
    g1, g2, g3, g4, g5 = _split_groups(hex_str, _GROUP_LENGTHS)
    variant = secrets.choice(_VARIANT_CHARS)
    return f"{g1}-{g2}-4{g3}-{variant}{g4}-{g5}"
