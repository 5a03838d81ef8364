"""
配置层 - 加载运行期配置与作品集内容

职责：
- 加载 config/runtime.yaml（运行期参数）
- 加载 data/content.yaml（作品集内容）
- 提供类型安全的配置访问接口
"""

from .content_loader import ContentLoader, load_content
from .runtime_config import MailSettings, RuntimeConfig, get_config, reload_config

__all__ = [
    "ContentLoader",
    "load_content",
    "MailSettings",
    "RuntimeConfig",
    "get_config",
    "reload_config",
]
