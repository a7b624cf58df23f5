#!/usr/bin/env python3
"""
同步流程模块 - 包含同步编排器（拉取、推送、设置、选择）和命令行入口
"""

import argparse
import json
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .config import (
    SyncSettings,
    TextUnit,
    TranslationEntry,
    FetchState,
    PushState,
    MessageType,
    SEARCH_LIMIT,
)
from .errors import (
    ConfigurationError,
    MalformedContentError,
    NotFoundError,
    NothingToPushError,
    OperationInProgressError,
    RemoteError,
    SyncError,
    UnauthorizedError,
)
from .extractor import extract_text_units
from .file_ops import parse_yaml, to_yaml, merge_translations, load_json_file
from .github_client import GitHubClient
from .host import Host, LocalHost
from .key_index import KeyIndex, SearchMatch, preview, lookup_entry_values
from .logging import log_progress, log_section, log_section_end, ProgressTracker, flush_logs, close_logs


@dataclass
class FetchResult:
    """一次拉取的结果"""
    key_count: int
    counts: Dict[str, int] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)


@dataclass
class PushResult:
    """一次推送的结果"""
    commit_sha: str
    files: List[str] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)


def group_by_language(entries: List[TranslationEntry], languages: List[str]) -> Dict[str, Dict[str, str]]:
    """按语言分组操作员的编辑，跳过空键和空值；同一键重复时后者覆盖前者"""
    grouped: Dict[str, Dict[str, str]] = {lang: {} for lang in languages}
    for entry in entries:
        key = (entry.key or "").strip()
        if not key:
            continue
        for lang in languages:
            value = (entry.values.get(lang) or "").strip()
            if value:
                grouped[lang][key] = value
    return grouped


def build_commit_message(candidates: Dict[str, Dict[str, str]]) -> str:
    parts = [f"{lang}: {len(table)} keys" for lang, table in candidates.items() if table]
    return f"Update translations from Figma ({', '.join(parts)})"


def default_client_factory(settings: SyncSettings) -> GitHubClient:
    owner, repo = settings.owner_and_repo()
    return GitHubClient(settings.token, owner, repo)


class SyncOrchestrator:
    """同步编排器

    持有设置、键索引和最近一次提取的文本单元：
    设置在启动时加载、保存时整体替换；索引在拉取时整体重建；
    文本单元在每次选择变更时整体替换。
    """

    def __init__(self, host: Host,
                 client_factory: Callable[[SyncSettings], GitHubClient] = default_client_factory,
                 emit: Optional[Callable[[Dict[str, Any]], None]] = None):
        self.host = host
        self.client_factory = client_factory
        self.emit = emit or (lambda message: None)

        self.settings = SyncSettings()
        self.key_index = KeyIndex()
        self.keys_loaded = False
        self.text_units: List[TextUnit] = []
        self.entries: List[TranslationEntry] = []
        self.fetch_state = FetchState.IDLE
        self.push_state = PushState.IDLE
        self.diagnostics: List[str] = []

        self._client: Optional[GitHubClient] = None
        self._client_key = None

        self.host.on_selection_changed(self._on_selection_changed)

        self._handlers = {
            MessageType.GET_SELECTION.value: lambda msg: self.refresh_selection(),
            MessageType.SAVE_SETTINGS.value: lambda msg: self.save_settings(SyncSettings.from_dict(msg.get('settings'))),
            MessageType.LOAD_SETTINGS.value: lambda msg: self.load_settings(),
            MessageType.FETCH_KEYS.value: self._handle_fetch,
            MessageType.PUSH.value: self._handle_push,
            MessageType.SEARCH_KEYS.value: self._handle_search,
            MessageType.SELECT_KEY.value: self._handle_select_key,
            MessageType.RENAME_LAYERS.value: lambda msg: self.rename_layers_to_keys(),
            MessageType.NOTIFY.value: lambda msg: self.host.notify(str(msg.get('message', ""))),
        }

    # 生命周期

    def start(self):
        """初始加载：发送当前选择和已保存的设置"""
        self.load_settings()
        self.refresh_selection()

    @property
    def languages(self) -> List[str]:
        return self.settings.languages_list()

    def _set_status(self, message: str, status_type: str = "info"):
        level = "error" if status_type == "error" else "info"
        log_progress(message, level)
        self.emit({'type': MessageType.STATUS.value, 'message': message, 'status': status_type})

    def _record(self, message: str):
        self.diagnostics.append(message)
        log_progress(message, "warning")

    def _require_configured(self):
        if not self.settings.is_configured():
            raise ConfigurationError("请先配置GitHub设置（令牌和仓库）")

    def _get_client(self) -> GitHubClient:
        key = self.settings.connection_key()
        if self._client is None or self._client_key != key:
            try:
                self._client = self.client_factory(self.settings)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
            self._client_key = key
        return self._client

    # 设置

    def load_settings(self) -> SyncSettings:
        try:
            blob = self.host.load_settings()
        except (OSError, ValueError) as e:
            log_progress(f"加载设置失败，使用默认设置: {e}", "warning")
            blob = None

        self.settings = SyncSettings.from_dict(blob)
        self.emit({
            'type': MessageType.SETTINGS_LOADED.value,
            'settings': self.settings.to_dict() if blob else None,
        })
        return self.settings

    def save_settings(self, settings: SyncSettings) -> bool:
        """整体替换设置并持久化；已加载的键索引随之失效"""
        self.settings = settings
        success = self.host.persist_settings(settings.to_dict())
        self.invalidate_keys()
        # 语言列表可能已变化，重新生成编辑行
        self.entries = [TranslationEntry.from_text_unit(unit, self.languages) for unit in self.text_units]
        self.emit({'type': MessageType.SETTINGS_SAVED.value, 'success': success})
        if success:
            self._set_status("Settings saved!", "success")
        else:
            self._set_status("Failed to save settings", "error")
        return success

    def invalidate_keys(self):
        self.key_index.clear()
        self.keys_loaded = False
        self.fetch_state = FetchState.IDLE
        self._client = None
        self._client_key = None

    # 选择

    def refresh_selection(self, event: MessageType = MessageType.SELECTION_RESULT) -> List[TextUnit]:
        units = extract_text_units(self.host.current_selection())
        self.text_units = units
        self.entries = [TranslationEntry.from_text_unit(unit, self.languages) for unit in units]
        self.emit({
            'type': event.value,
            'nodes': [unit.to_dict() for unit in units],
            'count': len(units),
        })
        return units

    def _on_selection_changed(self):
        self.refresh_selection(MessageType.SELECTION_CHANGED)

    def rename_layers_to_keys(self) -> int:
        """把每个文本节点的图层名改为其翻译键，便于下次提取时沿用"""
        renamed = 0
        for unit, entry in zip(self.text_units, self.entries):
            key = (entry.key or "").strip()
            if key and key != unit.layer_name and self.host.rename_node(unit.id, key):
                unit.layer_name = key
                renamed += 1
        log_progress(f"已重命名 {renamed} 个图层")
        return renamed

    # 拉取

    def _read_table(self, client: GitHubClient, language: str, strict: bool) -> Dict[str, str]:
        """读取一种语言的翻译表

        文件不存在视为空表；YAML无法解析时记录诊断并视为空表。
        strict 为真时（推送），其他读取错误直接抛出。
        """
        path = self.settings.file_path(language)
        try:
            remote = client.get_file(path, self.settings.branch)
        except NotFoundError:
            log_progress(f"文件不存在: {path}")
            return {}
        except UnauthorizedError:
            raise
        except (RemoteError, MalformedContentError) as e:
            if strict:
                raise
            self._record(f"{language}: 读取 {path} 失败: {e}")
            return {}

        try:
            table = parse_yaml(remote.content)
        except MalformedContentError as e:
            self._record(f"{language}: {path} 解析失败，按空表处理: {e}")
            return {}

        log_progress(f"从 {language} 加载了 {len(table)} 个键")
        return table

    def fetch_keys(self) -> FetchResult:
        """拉取所有语言的已有翻译并重建键索引

        单个语言失败不会中止整批；鉴权失败对所有语言都一样，直接中止。
        """
        self._require_configured()
        if self.fetch_state == FetchState.FETCHING:
            raise OperationInProgressError("正在加载键，请稍候")

        self.fetch_state = FetchState.FETCHING
        self.diagnostics = []
        languages = self.languages
        log_section("加载已有翻译键")
        log_progress(f"仓库: {self.settings.repo} 分支: {self.settings.branch} "
                     f"目录: {self.settings.translations_folder} 语言: {', '.join(languages)}")

        tables: Dict[str, Dict[str, str]] = {}
        failures: Dict[str, str] = {}
        try:
            client = self._get_client()
            tracker = ProgressTracker(len(languages), "拉取")
            for lang in languages:
                tracker.start_language(lang, self.settings.file_path(lang))
                before = len(self.diagnostics)
                tables[lang] = self._read_table(client, lang, strict=False)
                if len(self.diagnostics) > before:
                    failures[lang] = self.diagnostics[-1]
            log_progress(tracker.get_total_progress())
        except Exception:
            self.fetch_state = FetchState.FETCH_FAILED
            raise
        finally:
            log_section_end()

        self.key_index = KeyIndex.build(tables)
        self.keys_loaded = True
        self.fetch_state = FetchState.LOADED

        return FetchResult(
            key_count=len(self.key_index),
            counts={lang: len(table) for lang, table in tables.items()},
            failures=failures,
        )

    def search_keys(self, query: str, limit: int = SEARCH_LIMIT) -> List[SearchMatch]:
        """在已加载的索引中搜索；不会触发远程请求"""
        if not self.keys_loaded:
            return []
        return self.key_index.search(query, limit)

    def select_key(self, row: int, key: str) -> TranslationEntry:
        """把搜索结果的键应用到某一行，并填入索引中已有的翻译"""
        if not 0 <= row < len(self.entries):
            raise ValueError(f"行号超出范围: {row}")
        entry = self.entries[row]
        entry.key = key
        entry.values.update(lookup_entry_values(self.key_index, key, self.languages))
        return entry

    # 推送

    def push(self, entries: Optional[List[TranslationEntry]] = None) -> PushResult:
        """合并各语言已有内容后，以一次原子提交写入所有变更文件"""
        self._require_configured()
        if self.push_state == PushState.PUSHING:
            raise OperationInProgressError("正在推送，请稍候")

        entries = self.entries if entries is None else entries
        languages = self.languages
        grouped = group_by_language(entries, languages)
        candidates = {lang: table for lang, table in grouped.items() if table}
        if not candidates:
            raise NothingToPushError("No translations to push")

        self.push_state = PushState.PUSHING
        log_section("推送翻译到GitHub")
        try:
            client = self._get_client()
            tracker = ProgressTracker(len(candidates), "推送")
            files: Dict[str, str] = {}
            for lang, candidate in candidates.items():
                path = self.settings.file_path(lang)
                tracker.start_language(lang, path)
                current = self._read_table(client, lang, strict=True)
                files[path] = to_yaml(merge_translations(current, candidate))

            commit_sha = client.commit_files(self.settings.branch, files, build_commit_message(candidates))
        except Exception as e:
            self.push_state = PushState.PUSH_FAILED
            log_progress(f"推送失败: {e}", "error")
            raise
        finally:
            log_section_end()

        for lang, candidate in candidates.items():
            for key, value in candidate.items():
                self.key_index.update(lang, key, value)

        self.push_state = PushState.PUSHED
        self.host.notify("Translations pushed to GitHub!")
        return PushResult(
            commit_sha=commit_sha,
            files=list(files),
            counts={lang: len(table) for lang, table in candidates.items()},
        )

    # 消息

    def handle_message(self, msg: Dict[str, Any]):
        """处理展示层发来的消息；同步错误转为 status 消息原样显示"""
        handler = self._handlers.get(msg.get('type'))
        if handler is None:
            log_progress(f"未知消息类型: {msg.get('type')}", "warning")
            return None
        try:
            return handler(msg)
        except (SyncError, ValueError) as e:
            self._set_status(f"Error: {e}", "error")
            return None

    def _handle_fetch(self, msg: Dict[str, Any]) -> FetchResult:
        result = self.fetch_keys()
        self.emit({
            'type': MessageType.KEYS_LOADED.value,
            'count': result.key_count,
            'counts': result.counts,
            'failures': result.failures,
        })
        if result.key_count:
            self._set_status(f"Loaded {result.key_count} existing keys", "success")
        else:
            self._set_status("No existing keys found", "success")
        return result

    def _handle_push(self, msg: Dict[str, Any]) -> PushResult:
        raw_entries = msg.get('entries')
        entries = None
        if raw_entries is not None:
            entries = [TranslationEntry.from_dict(item) for item in raw_entries]
        result = self.push(entries)
        self.emit({
            'type': MessageType.PUSH_RESULT.value,
            'commit': result.commit_sha,
            'files': result.files,
            'counts': result.counts,
        })
        self._set_status("✓ Pushed translations to GitHub!", "success")
        return result

    def _handle_search(self, msg: Dict[str, Any]) -> List[SearchMatch]:
        matches = self.search_keys(str(msg.get('query') or ""))
        results = []
        for match in matches:
            item = match.to_dict()
            item['preview'] = preview(match, self.languages)
            results.append(item)
        self.emit({
            'type': MessageType.SEARCH_RESULT.value,
            'row': msg.get('row'),
            'query': msg.get('query'),
            'results': results,
        })
        return matches

    def _handle_select_key(self, msg: Dict[str, Any]) -> TranslationEntry:
        row = int(msg.get('row', -1))
        entry = self.select_key(row, str(msg.get('key') or ""))
        self.emit({
            'type': MessageType.ENTRY_UPDATED.value,
            'row': row,
            'key': entry.key,
            'values': dict(entry.values),
        })
        return entry


def load_entries(file_path: str) -> List[TranslationEntry]:
    """从JSON文件读取编辑行"""
    data = load_json_file(file_path)
    if not isinstance(data, list):
        raise ConfigurationError(f"编辑文件格式无效（应为列表）: {file_path}")
    return [TranslationEntry.from_dict(item) for item in data]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i18n-sync",
        description="从设计文档提取文本，并把翻译同步到GitHub仓库",
    )
    parser.add_argument("--settings", default=".i18n-sync.json", help="设置文件路径")
    parser.add_argument("--document", help="节点文档（JSON）路径")

    subparsers = parser.add_subparsers(dest="command", help="要执行的命令")
    subparsers.add_parser("extract", help="提取文本单元并输出建议键")
    subparsers.add_parser("fetch", help="加载已有翻译键")

    search_parser = subparsers.add_parser("search", help="在已有键中搜索")
    search_parser.add_argument("query", help="搜索内容")

    push_parser = subparsers.add_parser("push", help="推送翻译")
    push_parser.add_argument("--entries", help="编辑行（JSON）路径；缺省时使用提取结果")

    settings_parser = subparsers.add_parser("settings", help="显示或保存设置")
    settings_parser.add_argument("--save", action="store_true", help="把环境变量中的设置保存下来")

    return parser


def run_command(args: argparse.Namespace, orchestrator: SyncOrchestrator) -> int:
    if args.command == "extract":
        units = orchestrator.text_units
        print(json.dumps([unit.to_dict() for unit in units], ensure_ascii=False, indent=2))
        return 0

    if args.command == "settings":
        if args.save:
            orchestrator.save_settings(orchestrator.settings)
        shown = orchestrator.settings.to_dict()
        shown['token'] = '***' if shown['token'] else ''
        print(json.dumps(shown, ensure_ascii=False, indent=2))
        return 0

    if args.command == "fetch":
        result = orchestrator.fetch_keys()
        log_progress(f"✓ 已加载 {result.key_count} 个键 {result.counts}")
        return 0

    if args.command == "search":
        orchestrator.fetch_keys()
        matches = orchestrator.search_keys(args.query)
        print(json.dumps([m.to_dict() for m in matches], ensure_ascii=False, indent=2))
        return 0

    if args.command == "push":
        entries = load_entries(args.entries) if args.entries else None
        result = orchestrator.push(entries)
        log_progress(f"✓ 已推送 {len(result.files)} 个文件，提交 {result.commit_sha[:7]}")
        return 0

    return 2


def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 2

    log_section(f"i18n-sync {args.command}")
    host = LocalHost(args.document, args.settings)
    orchestrator = SyncOrchestrator(host)
    orchestrator.start()
    # 环境变量覆盖已保存的设置（不自动持久化）
    orchestrator.settings = orchestrator.settings.with_env_overrides()
    orchestrator.entries = [TranslationEntry.from_text_unit(unit, orchestrator.languages)
                            for unit in orchestrator.text_units]

    try:
        return run_command(args, orchestrator)
    except SyncError as e:
        log_progress(f"错误：{e}", "error")
        return 1
    finally:
        log_section_end()
        flush_logs()


def cli():
    try:
        sys.exit(main())
    finally:
        close_logs()
