"""
HTML文字実体参照の処理モジュール。
"""
from html import unescape


def decode_entities(text: str) -> str:
    """
    HTML文字実体参照（``&eacute;``、``&#233;`` など）を文字に変換する。

    HTML5の実体参照セットを使用します。``&amp;`` や ``&lt;`` も
    デコードされる点に注意してください。
    """
    return unescape(text)
