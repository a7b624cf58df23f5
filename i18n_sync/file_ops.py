#!/usr/bin/env python3
"""
文件操作模块 - 包含翻译表的YAML解析、序列化与合并，以及本地JSON文件读写
"""

import os
import json
from typing import Any, Dict, Optional

import yaml

from i18n_sync.errors import MalformedContentError
from i18n_sync.logging import log_progress


class _TranslationDumper(yaml.SafeDumper):
    """需要加引号时使用双引号而非单引号"""

    def choose_scalar_style(self):
        style = super().choose_scalar_style()
        if style == "'":
            return '"'
        return style


def parse_yaml(content: str) -> Dict[str, str]:
    """将YAML文本解析为 键 -> 字符串 的扁平映射

    标量一律按原文读取为字符串（Yes、off、12:30 等不做类型转换），
    空内容或非映射的文档视为空表；语法错误抛出 MalformedContentError。
    """
    if not content or not content.strip():
        return {}

    try:
        parsed = yaml.load(content, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise MalformedContentError(f"YAML解析错误: {e}") from e

    if not isinstance(parsed, dict):
        return {}

    result: Dict[str, str] = {}
    for key, value in parsed.items():
        result[str(key)] = "" if value is None else str(value)
    return result


def to_yaml(translations: Dict[str, str]) -> str:
    """序列化翻译表，键按字典序排序，不自动折行"""
    ordered = {key: translations[key] for key in sorted(translations)}
    return yaml.dump(
        ordered,
        Dumper=_TranslationDumper,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
        width=float('inf'),
    )


def merge_translations(current: Dict[str, str], candidate: Dict[str, str]) -> Dict[str, str]:
    """浅合并：保留远程已有的键，candidate 中的键覆盖同名旧值"""
    return {**current, **candidate}


def load_json_file(file_path: str, missing_ok: bool = False) -> Optional[Any]:
    """读取本地JSON文件；文件缺失或无法解析时返回 None"""
    if not os.path.exists(file_path):
        log_progress(f"文件不存在: {file_path}", "debug" if missing_ok else "warning")
        return None
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log_progress(f"无法读取JSON文件 {file_path}: {e}", "error")
        return None


def save_json_file(file_path: str, data: Any) -> bool:
    """写入本地JSON文件（UTF-8，保留非ASCII字符），按需创建上级目录"""
    parent = os.path.dirname(file_path)
    try:
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
    except (OSError, TypeError) as e:
        log_progress(f"保存文件失败 {file_path}: {e}", "error")
        return False
    return True
