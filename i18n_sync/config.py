#!/usr/bin/env python3
"""
配置模块 - 包含同步脚本的常量、数据类和设置解析函数
"""

import os
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field, asdict
from enum import Enum

# 检测是否在GitHub Actions环境中运行
IS_GITHUB_ACTIONS = os.getenv('GITHUB_ACTIONS') == 'true'
# 调试模式：记录每个HTTP请求
DEBUG_MODE = os.getenv('I18N_DEBUG', 'false').lower() == 'true'

# 配置
GITHUB_API_URL = "https://api.github.com"
API_TIMEOUT = 30
LOG_FILE = os.getenv('I18N_LOG_FILE', 'i18n_sync.log')
SETTINGS_KEY = "i18n-github-settings"

# 键生成与搜索相关常量
KEY_MAX_LENGTH = 30
LAYER_NAME_MAX_LENGTH = 50
FALLBACK_KEY = "text"
SEARCH_LIMIT = 10
PREVIEW_WIDTH = 25

# 默认设置（当宿主未保存任何设置时使用）
DEFAULT_BRANCH = "main"
DEFAULT_TRANSLATIONS_FOLDER = "src"
DEFAULT_TRANSLATIONS_FILENAME = "translations.yaml"
DEFAULT_LANGUAGES = "en_US,de_DE,fr_FR"

# 环境变量到设置字段的映射（命令行模式使用）
ENV_OVERRIDES = {
    'GITHUB_TOKEN': 'token',
    'I18N_REPO': 'repo',
    'I18N_BRANCH': 'branch',
    'I18N_FOLDER': 'translations_folder',
    'I18N_FILENAME': 'translations_filename',
    'I18N_LANGUAGES': 'languages',
}


def parse_languages(value: str) -> List[str]:
    """将逗号分隔的语言配置解析为有序、去重的语言代码列表"""
    languages = []
    for part in (value or "").split(','):
        code = part.strip()
        if code and code not in languages:
            languages.append(code)
    return languages


@dataclass
class TextUnit:
    """从设计文档中发现的一段可翻译文本"""
    id: str
    text: str
    layer_name: str
    suggested_key: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class TranslationEntry:
    """操作员编辑的一行：翻译键及各语言的值"""
    key: str
    values: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_text_unit(cls, unit: TextUnit, languages: List[str]) -> 'TranslationEntry':
        """以建议键为默认键，源语言（第一种语言）填入原始文本"""
        values = {lang: "" for lang in languages}
        if languages:
            values[languages[0]] = unit.text
        return cls(key=unit.suggested_key, values=values)

    @classmethod
    def from_dict(cls, data: Dict) -> 'TranslationEntry':
        values = data.get('values')
        if values is None:
            # 兼容扁平格式：{"key": "...", "en_US": "...", "de_DE": "..."}
            values = {k: v for k, v in data.items() if k != 'key'}
        return cls(
            key=str(data.get('key') or ""),
            values={str(k): "" if v is None else str(v) for k, v in values.items()}
        )


@dataclass
class SyncSettings:
    """同步设置，由编排器持有，通过宿主持久化"""
    token: str = ""
    repo: str = ""
    branch: str = DEFAULT_BRANCH
    translations_folder: str = DEFAULT_TRANSLATIONS_FOLDER
    translations_filename: str = DEFAULT_TRANSLATIONS_FILENAME
    languages: str = DEFAULT_LANGUAGES

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'SyncSettings':
        """从持久化数据构建设置，缺失或空值字段使用默认值"""
        settings = cls()
        if not data:
            return settings
        # 兼容宿主保存的驼峰命名
        aliases = {
            'translationsFolder': 'translations_folder',
            'translationsFilename': 'translations_filename',
        }
        for raw_key, value in data.items():
            name = aliases.get(raw_key, raw_key)
            if name in settings.__dataclass_fields__ and value not in (None, ""):
                setattr(settings, name, str(value))
        return settings

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    def with_env_overrides(self, environ: Optional[Dict[str, str]] = None) -> 'SyncSettings':
        """返回应用环境变量覆盖后的新设置对象"""
        environ = os.environ if environ is None else environ
        data = self.to_dict()
        for env_name, field_name in ENV_OVERRIDES.items():
            value = environ.get(env_name)
            if value:
                data[field_name] = value
        return SyncSettings.from_dict(data)

    def languages_list(self) -> List[str]:
        return parse_languages(self.languages)

    def is_configured(self) -> bool:
        return bool(self.token and self.repo)

    def owner_and_repo(self) -> Tuple[str, str]:
        """拆分 owner/name 格式的仓库配置"""
        parts = [p for p in self.repo.strip().strip('/').split('/') if p]
        if len(parts) != 2:
            raise ValueError(f"仓库格式无效（应为 owner/name）: {self.repo!r}")
        return parts[0], parts[1]

    def file_path(self, language: str) -> str:
        """组合某种语言的翻译文件路径：{folder}/{language}/{filename}"""
        folder = self.translations_folder.strip('/')
        filename = self.translations_filename or DEFAULT_TRANSLATIONS_FILENAME
        if folder:
            return f"{folder}/{language}/{filename}"
        return f"{language}/{filename}"

    def connection_key(self) -> Tuple[str, str, str, str, str]:
        """影响已加载键索引有效性的字段"""
        return (self.token, self.repo, self.branch, self.translations_folder, self.translations_filename)


class FetchState(Enum):
    """拉取状态枚举"""
    IDLE = "idle"
    FETCHING = "fetching"
    LOADED = "loaded"
    FETCH_FAILED = "fetch_failed"


class PushState(Enum):
    """推送状态枚举"""
    IDLE = "idle"
    PUSHING = "pushing"
    PUSHED = "pushed"
    PUSH_FAILED = "push_failed"


class MessageType(Enum):
    """编排器与展示层之间的消息类型"""
    # 入站
    GET_SELECTION = "get-selection"
    SAVE_SETTINGS = "save-settings"
    LOAD_SETTINGS = "load-settings"
    FETCH_KEYS = "fetch-keys"
    PUSH = "push"
    SEARCH_KEYS = "search-keys"
    SELECT_KEY = "select-key"
    RENAME_LAYERS = "rename-layers"
    NOTIFY = "notify"
    # 出站
    SELECTION_RESULT = "selection-result"
    SELECTION_CHANGED = "selection-changed"
    SETTINGS_LOADED = "settings-loaded"
    SETTINGS_SAVED = "settings-saved"
    KEYS_LOADED = "keys-loaded"
    SEARCH_RESULT = "search-result"
    PUSH_RESULT = "push-result"
    ENTRY_UPDATED = "entry-updated"
    STATUS = "status"
