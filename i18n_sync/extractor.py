#!/usr/bin/env python3
"""
文本提取模块 - 遍历节点树，收集可翻译的文本单元
"""

import re
from typing import Any, Iterable, List, Optional

from i18n_sync.config import TextUnit
from i18n_sync.key_generator import suggest_key

TEXT_NODE_TYPE = "TEXT"
DIGITS_ONLY = re.compile(r"[0-9]+")


def node_attr(node: Any, name: str, default: Any = None) -> Any:
    """节点可以是字典，也可以是带属性的对象"""
    if isinstance(node, dict):
        return node.get(name, default)
    return getattr(node, name, default)


def _text_content(node: Any) -> Optional[str]:
    """返回文本节点的字符内容；非文本节点返回None"""
    if node_attr(node, 'type') != TEXT_NODE_TYPE:
        return None
    characters = node_attr(node, 'characters')
    return characters if isinstance(characters, str) else None


def is_translatable(text: str) -> bool:
    """跳过空文本和纯数字"""
    return bool(text) and DIGITS_ONLY.fullmatch(text) is None


def iter_nodes(root_nodes: Iterable[Any]):
    """按文档顺序深度优先遍历节点森林

    使用显式栈，避免深层嵌套触发递归上限。
    """
    stack = list(reversed(list(root_nodes or [])))
    while stack:
        node = stack.pop()
        yield node
        children = node_attr(node, 'children')
        if children:
            stack.extend(reversed(list(children)))


def extract_text_units(root_nodes: Iterable[Any]) -> List[TextUnit]:
    """从选中的节点中提取文本单元，输出顺序与遍历顺序一致"""
    results: List[TextUnit] = []

    for node in iter_nodes(root_nodes):
        content = _text_content(node)
        if content is None:
            continue

        text = content.strip()
        if not is_translatable(text):
            continue

        layer_name = node_attr(node, 'name') or ""
        results.append(TextUnit(
            id=str(node_attr(node, 'id', "")),
            text=text,
            layer_name=layer_name,
            suggested_key=suggest_key(layer_name, text)
        ))

    return results
