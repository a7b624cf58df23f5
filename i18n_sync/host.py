#!/usr/bin/env python3
"""
宿主模块 - 设计工具宿主的能力接口，以及基于本地文件的实现
"""

from typing import Any, Callable, Dict, List, Optional

from i18n_sync.config import SETTINGS_KEY
from i18n_sync.extractor import iter_nodes, node_attr
from i18n_sync.file_ops import load_json_file, save_json_file
from i18n_sync.logging import log_progress


class Host:
    """设计工具提供给同步引擎的能力"""

    def current_selection(self) -> List[Any]:
        raise NotImplementedError

    def on_selection_changed(self, callback: Callable[[], None]):
        raise NotImplementedError

    def load_settings(self) -> Optional[Dict]:
        raise NotImplementedError

    def persist_settings(self, blob: Dict) -> bool:
        raise NotImplementedError

    def rename_node(self, node_id: str, new_name: str) -> bool:
        raise NotImplementedError

    def notify(self, message: str):
        raise NotImplementedError


class LocalHost(Host):
    """从JSON文档读取节点，把设置保存到本地JSON文件

    文档可以是节点列表，也可以是 {"selection": [...]} 形式。
    """

    def __init__(self, document_path: Optional[str] = None, settings_path: str = ".i18n-sync.json"):
        self.document_path = document_path
        self.settings_path = settings_path
        self._document: Any = None
        self._listeners: List[Callable[[], None]] = []
        if document_path:
            self.reload()

    def reload(self):
        """重新读取文档并通知选择变更监听者"""
        self._document = load_json_file(self.document_path) if self.document_path else None
        for callback in self._listeners:
            callback()

    def current_selection(self) -> List[Any]:
        document = self._document
        if isinstance(document, dict):
            return list(document.get('selection') or [])
        if isinstance(document, list):
            return list(document)
        return []

    def on_selection_changed(self, callback: Callable[[], None]):
        self._listeners.append(callback)

    def load_settings(self) -> Optional[Dict]:
        data = load_json_file(self.settings_path, missing_ok=True)
        if not isinstance(data, dict):
            return None
        settings = data.get(SETTINGS_KEY)
        return settings if isinstance(settings, dict) else None

    def persist_settings(self, blob: Dict) -> bool:
        data = load_json_file(self.settings_path, missing_ok=True)
        if not isinstance(data, dict):
            data = {}
        data[SETTINGS_KEY] = blob
        return save_json_file(self.settings_path, data)

    def rename_node(self, node_id: str, new_name: str) -> bool:
        for node in iter_nodes(self.current_selection()):
            if isinstance(node, dict) and str(node_attr(node, 'id')) == node_id:
                node['name'] = new_name
                if self.document_path:
                    return save_json_file(self.document_path, self._document)
                return True
        log_progress(f"未找到节点: {node_id}", "warning")
        return False

    def notify(self, message: str):
        log_progress(f"🔔 {message}")
