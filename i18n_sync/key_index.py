#!/usr/bin/env python3
"""
键索引模块 - 汇总所有语言的已发布翻译，支持按键和值的子串搜索
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from i18n_sync.config import SEARCH_LIMIT, PREVIEW_WIDTH

KEY_SLOT = "key"


@dataclass
class SearchMatch:
    """搜索结果：键、各语言翻译，以及命中的位置（'key' 和/或语言代码）"""
    key: str
    translations: Dict[str, str]
    matched_in: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'key': self.key,
            'translations': dict(self.translations),
            'matched_in': list(self.matched_in),
        }


class KeyIndex:
    """键 -> {语言代码 -> 翻译} 的内存索引

    每次拉取时整体重建；推送成功后把推送的值合并进来。
    """

    def __init__(self):
        self._keys: Dict[str, Dict[str, str]] = {}

    @classmethod
    def build(cls, tables_by_language: Dict[str, Dict[str, str]]) -> 'KeyIndex':
        index = cls()
        for language, table in tables_by_language.items():
            index.merge_table(language, table)
        return index

    def merge_table(self, language: str, table: Dict[str, str]):
        """把一种语言的翻译表按键合并进索引"""
        for key, value in table.items():
            self.update(language, key, value)

    def update(self, language: str, key: str, value: str):
        self._keys.setdefault(key, {})[language] = value

    def lookup(self, key: str) -> Dict[str, str]:
        return dict(self._keys.get(key, {}))

    def clear(self):
        self._keys = {}

    def __contains__(self, key: str) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {key: dict(values) for key, values in self._keys.items()}

    def search(self, query: str, limit: int = SEARCH_LIMIT) -> List[SearchMatch]:
        """不区分大小写的子串搜索，匹配键本身及每种语言的值

        结果保持索引的迭代顺序，只截取前 limit 个，不做相关性排序。
        """
        if not query:
            return []

        lower_query = query.lower()
        results: List[SearchMatch] = []

        for key, translations in self._keys.items():
            matched_in = []
            if lower_query in key.lower():
                matched_in.append(KEY_SLOT)
            for lang, value in translations.items():
                if lower_query in value.lower():
                    matched_in.append(lang)

            if matched_in:
                results.append(SearchMatch(key=key, translations=dict(translations), matched_in=matched_in))
                if len(results) >= limit:
                    break

        return results


def preview(match: SearchMatch, languages: List[str], width: int = PREVIEW_WIDTH) -> Dict[str, str]:
    """为搜索结果生成各语言的截断预览"""
    previews = {}
    for lang in languages:
        value = match.translations.get(lang, "")
        previews[lang] = value[:width] + '...' if len(value) > width else value
    return previews


def lookup_entry_values(index: Optional[KeyIndex], key: str, languages: List[str]) -> Dict[str, str]:
    """返回索引中某个键在给定语言下已有的非空翻译"""
    if index is None:
        return {}
    known = index.lookup(key)
    return {lang: known[lang] for lang in languages if known.get(lang)}
