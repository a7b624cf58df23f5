#!/usr/bin/env python3
"""
键生成模块 - 根据图层名或文本内容生成建议的翻译键
"""

import re

from i18n_sync.config import KEY_MAX_LENGTH, LAYER_NAME_MAX_LENGTH, FALLBACK_KEY

# 图层名看起来像翻译键：字母开头，后跟字母、数字、点或下划线
KEY_LIKE_LAYER_NAME = re.compile(r'^[a-z][a-z0-9._]+$', re.IGNORECASE | re.ASCII)
NON_KEY_CHARS = re.compile(r'[^a-z0-9\s]', re.IGNORECASE)
WHITESPACE = re.compile(r'\s+')


def is_key_like(layer_name: str) -> bool:
    """判断图层名是否可以直接作为翻译键"""
    return bool(layer_name) and len(layer_name) < LAYER_NAME_MAX_LENGTH \
        and KEY_LIKE_LAYER_NAME.fullmatch(layer_name) is not None


def suggest_key(layer_name: str, text: str) -> str:
    """根据图层名或文本内容生成建议的翻译键

    设计师手动命名的、形如标识符的图层名优先；否则从文本派生，
    结果只包含小写字母、数字和下划线，最长 KEY_MAX_LENGTH 个字符。
    """
    layer_name = layer_name or ""
    if is_key_like(layer_name):
        return WHITESPACE.sub('_', layer_name.lower())

    key = (text or "").lower()
    # str.lower() 之后仍可能残留非ASCII字母，这里只保留ASCII
    key = ''.join(ch for ch in key if ch.isascii())
    key = NON_KEY_CHARS.sub('', key).strip()
    key = WHITESPACE.sub('_', key)[:KEY_MAX_LENGTH]

    return key or FALLBACK_KEY
