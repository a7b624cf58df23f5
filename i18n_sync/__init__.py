"""
翻译同步模块包
包含文本提取、键索引和GitHub原子提交等组件
"""

from .config import *
from .errors import *
from .logging import *
from .key_generator import suggest_key
from .extractor import extract_text_units
from .file_ops import *
from .key_index import KeyIndex, SearchMatch
from .github_client import GitHubClient, CommitTransaction, RemoteFile
from .host import Host, LocalHost
from .sync_flow import *

__all__ = [
    'SyncOrchestrator',
    'SyncSettings',
    'TextUnit',
    'TranslationEntry',
    'FetchState',
    'PushState',
    'MessageType',
    'FetchResult',
    'PushResult',
    'KeyIndex',
    'SearchMatch',
    'GitHubClient',
    'CommitTransaction',
    'RemoteFile',
    'Host',
    'LocalHost',
    'SyncError',
    'ConfigurationError',
    'OperationInProgressError',
    'NothingToPushError',
    'MalformedContentError',
    'RemoteError',
    'NotFoundError',
    'UnauthorizedError',
    'ConflictError',
    'NetworkError',
    'suggest_key',
    'extract_text_units',
    'parse_languages',
    'parse_yaml',
    'to_yaml',
    'merge_translations',
    'log_progress',
    'log_section',
    'log_section_end',
    'ProgressTracker',
    'flush_logs',
    'close_logs',
    'main',
]
