"""
内容加载器 - 读取作品集内容 YAML（默认 portfolio_cv/data/content.yaml）

职责：
- 解析YAML为 ContentModel
- 不做严格模式校验：格式错误的分区降级为空
- 缓存加载结果（避免重复解析）

使用方式：
    content = ContentLoader.load("data/content.yaml")
    content.projects[0].title
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

import yaml

from ..models import ContentModel

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_PATH = Path(__file__).resolve().parent.parent / "data" / "content.yaml"


class ContentLoader:
    """内容加载器（按路径缓存）"""

    @staticmethod
    @lru_cache(maxsize=8)
    def load(content_path: str | Path = DEFAULT_CONTENT_PATH) -> ContentModel:
        """加载并缓存内容"""
        path = Path(content_path)
        if not path.exists():
            raise FileNotFoundError(f"内容文件不存在: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            logger.warning(f"内容文件顶层不是映射，按空内容处理: {path}")
            return ContentModel()

        return ContentModel(**data)

    @staticmethod
    def reload(content_path: str | Path = DEFAULT_CONTENT_PATH) -> ContentModel:
        """强制重新加载（清除缓存）"""
        ContentLoader.load.cache_clear()
        return ContentLoader.load(content_path)


# 便捷函数
def load_content(content_path: str | Path | None = None) -> ContentModel:
    """加载作品集内容"""
    return ContentLoader.load(content_path or DEFAULT_CONTENT_PATH)
