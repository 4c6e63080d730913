"""
テキスト処理モジュール。

HTML文字実体参照のデコードを提供する。
"""
from opfbinder.text.entities import decode_entities

__all__ = [
    "decode_entities",
]
