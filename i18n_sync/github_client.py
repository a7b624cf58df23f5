#!/usr/bin/env python3
"""
GitHub客户端模块 - 读取仓库文件，并通过 blob/tree/commit/ref 原子提交多个文件
"""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from i18n_sync.config import GITHUB_API_URL, API_TIMEOUT, DEBUG_MODE
from i18n_sync.errors import (
    ConflictError,
    MalformedContentError,
    NetworkError,
    NotFoundError,
    RemoteError,
    UnauthorizedError,
)
from i18n_sync.logging import log_progress

FILE_MODE = "100644"
HTTP_NOT_FOUND = 404
HTTP_UNAUTHORIZED = (401, 403)
HTTP_REF_CONFLICT = (409, 422)


@dataclass
class RemoteFile:
    """远程文件内容及其blob sha"""
    path: str
    content: str
    sha: str


def decode_content(encoded: str) -> str:
    """解码GitHub返回的base64内容，严格按UTF-8解码

    无法解码时抛出 MalformedContentError，不做替换字符的容错。
    """
    cleaned = (encoded or "").replace('\n', '').replace('\r', '')
    try:
        raw = base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedContentError(f"base64解码失败: {e}") from e
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError as e:
        raise MalformedContentError(f"UTF-8解码失败: {e}") from e


def extract_error_message(response: requests.Response) -> str:
    """从响应中提取GitHub的错误信息，包括校验错误详情"""
    try:
        error_data = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"

    if not isinstance(error_data, dict):
        return f"HTTP {response.status_code}"

    message = error_data.get("message") or f"HTTP {response.status_code}"
    details = []
    for err in error_data.get("errors") or []:
        if isinstance(err, dict):
            details.append(f"{err.get('resource', 'unknown')}.{err.get('field', 'unknown')}: "
                           f"{err.get('code', 'unknown')}")
        else:
            details.append(str(err))
    if details:
        message = f"{message} ({', '.join(details)})"
    return message


class GitHubClient:
    def __init__(self, token: str, owner: str, repo: str,
                 session: Optional[requests.Session] = None,
                 api_url: str = GITHUB_API_URL, timeout: float = API_TIMEOUT):
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github.v3+json",
        }

    def _url(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/{path}"

    def _request(self, method: str, path: str, conflict_statuses: Tuple[int, ...] = (), **kwargs) -> Dict:
        """发送请求并将HTTP错误映射为同步异常"""
        url = self._url(path)
        if DEBUG_MODE:
            log_progress(f"请求: {method} {url}", "debug")

        try:
            response = self.session.request(method, url, headers=self.headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise NetworkError(f"网络错误 {method} {path}: {e}") from e

        if DEBUG_MODE:
            log_progress(f"响应: {response.status_code} {method} {path}", "debug")

        status = response.status_code
        if status >= 400:
            message = extract_error_message(response)
            if status == HTTP_NOT_FOUND:
                raise NotFoundError(message, status)
            if status in HTTP_UNAUTHORIZED:
                raise UnauthorizedError(message, status)
            if status in conflict_statuses:
                raise ConflictError(message, status)
            raise RemoteError(f"{method} {path} 失败: {message}", status)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedContentError(f"响应不是有效的JSON {method} {path}: {e}") from e

    # 读取

    def get_file(self, path: str, ref: str) -> RemoteFile:
        """读取某个引用下的文件；文件不存在时抛出 NotFoundError"""
        data = self._request("GET", f"contents/{quote(path)}", params={"ref": ref})
        if not isinstance(data, dict) or "content" not in data:
            raise MalformedContentError(f"{path} 不是文件")
        return RemoteFile(path=path, content=decode_content(data["content"]), sha=data.get("sha", ""))

    def get_ref(self, branch: str) -> str:
        """返回分支当前指向的提交sha"""
        data = self._request("GET", f"git/ref/heads/{quote(branch)}")
        return data["object"]["sha"]

    def get_commit(self, sha: str) -> Dict:
        return self._request("GET", f"git/commits/{sha}")

    # 写入

    def create_blob(self, content: str) -> str:
        """上传文本内容，直接以utf-8编码标记发送，无需base64"""
        data = self._request("POST", "git/blobs", json={"content": content, "encoding": "utf-8"})
        return data["sha"]

    def create_tree(self, base_tree: str, blobs: Dict[str, str]) -> str:
        """在基础树上覆盖变更的 路径 -> blob，未变更的文件由基础树继承"""
        tree = [
            {"path": path, "mode": FILE_MODE, "type": "blob", "sha": blob_sha}
            for path, blob_sha in blobs.items()
        ]
        data = self._request("POST", "git/trees", json={"base_tree": base_tree, "tree": tree})
        return data["sha"]

    def create_commit(self, message: str, tree: str, parents: List[str]) -> str:
        data = self._request("POST", "git/commits", json={"message": message, "tree": tree, "parents": parents})
        return data["sha"]

    def update_ref(self, branch: str, sha: str) -> str:
        """仅在快进时移动分支；分支已被他人移动时抛出 ConflictError"""
        data = self._request(
            "PATCH", f"git/refs/heads/{quote(branch)}",
            conflict_statuses=HTTP_REF_CONFLICT,
            json={"sha": sha, "force": False}
        )
        return data["object"]["sha"]

    def commit_files(self, branch: str, files: Dict[str, str], message: str) -> str:
        """在一次提交中写入所有文件，返回新提交的sha"""
        return CommitTransaction(self, branch, files, message).run()


@dataclass
class CommitTransaction:
    """多文件原子提交

    步骤：解析分支 -> 解析树 -> 创建blob -> 基于基础树建树 -> 创建提交 -> 条件更新引用。
    任何一步失败都会中止；只有最后一步会移动分支，之前创建的对象不会变得可达。
    """
    client: GitHubClient
    branch: str
    files: Dict[str, str]
    message: str
    base_commit: Optional[str] = None
    base_tree: Optional[str] = None
    blobs: Dict[str, str] = field(default_factory=dict)
    tree: Optional[str] = None
    commit: Optional[str] = None
    step: str = "pending"

    def run(self) -> str:
        if not self.files:
            raise ValueError("没有需要提交的文件")

        try:
            self.step = "resolve-ref"
            self.base_commit = self.client.get_ref(self.branch)

            self.step = "resolve-tree"
            self.base_tree = self.client.get_commit(self.base_commit)["tree"]["sha"]

            self.step = "create-blobs"
            for path, content in self.files.items():
                self.blobs[path] = self.client.create_blob(content)
                log_progress(f"    已上传 {path} -> {self.blobs[path][:7]}")

            self.step = "create-tree"
            self.tree = self.client.create_tree(self.base_tree, self.blobs)

            self.step = "create-commit"
            self.commit = self.client.create_commit(self.message, self.tree, [self.base_commit])

            self.step = "update-ref"
            self.client.update_ref(self.branch, self.commit)
        except Exception as e:
            log_progress(f"提交在步骤 {self.step} 中止: {e}", "error")
            raise

        self.step = "done"
        log_progress(f"✓ {self.branch}: {self.base_commit[:7]} -> {self.commit[:7]} ({len(self.files)} 个文件)")
        return self.commit
