#!/usr/bin/env python3
"""
翻译同步脚本 - 从设计文档提取文本，并把翻译原子地提交到GitHub

模块结构：
- i18n_sync/config.py: 配置常量、数据类
- i18n_sync/errors.py: 同步错误类型
- i18n_sync/logging.py: 日志函数、进度跟踪器
- i18n_sync/key_generator.py / extractor.py: 建议键与文本提取
- i18n_sync/file_ops.py: YAML翻译表与本地JSON文件
- i18n_sync/key_index.py: 已有键的索引与搜索
- i18n_sync/github_client.py: GitHub客户端与原子提交
- i18n_sync/host.py: 宿主接口与本地文件宿主
- i18n_sync/sync_flow.py: 同步编排器与主流程
"""

import sys

from i18n_sync.sync_flow import main
from i18n_sync.logging import flush_logs, close_logs

if __name__ == "__main__":
    try:
        sys.exit(main())
    finally:
        # 确保日志文件被正确关闭
        flush_logs()
        close_logs()
