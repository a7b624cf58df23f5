#!/usr/bin/env python3
"""
异常模块 - 同步过程中可能出现的错误类型
"""

from typing import Optional


class SyncError(Exception):
    """同步错误基类"""
    pass


class ConfigurationError(SyncError):
    """设置缺失或无效（令牌、仓库等）"""
    pass


class OperationInProgressError(SyncError):
    """同一操作正在进行中，拒绝重入"""
    pass


class NothingToPushError(SyncError):
    """没有可推送的翻译"""
    pass


class MalformedContentError(SyncError):
    """远程内容无法解码，或翻译文件无法解析"""
    pass


class RemoteError(SyncError):
    """GitHub API 返回错误"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(RemoteError):
    """文件或引用不存在"""
    pass


class UnauthorizedError(RemoteError):
    """令牌无效或权限不足"""
    pass


class ConflictError(RemoteError):
    """提交期间分支已被移动"""
    pass


class NetworkError(RemoteError):
    """网络请求失败"""
    pass
