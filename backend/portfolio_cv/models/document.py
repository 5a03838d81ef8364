"""
文档模型 - 排版引擎的输出结构

Document 由若干 Page 组成，每页是一串按阅读顺序排列的绘制指令。
坐标单位mm，原点在页面左上角；文本的 y 为基线。
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator

from pydantic import BaseModel, Field


class DrawKind(str, Enum):
    """绘制指令类型"""
    RECT = "rect"
    TEXT = "text"
    CIRCLE = "circle"
    LINE = "line"


class Layer(str, Enum):
    """图层：页面装饰（背景/页框）与正文内容"""
    CHROME = "chrome"
    CONTENT = "content"


class DrawOp(BaseModel):
    """单条绘制指令"""
    kind: DrawKind
    page: int
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    radius: float = 0.0

    # 样式
    fill: str | None = None
    stroke: str | None = None
    line_width: float = 0.0

    # 文本
    text: str | None = None
    font: str = "regular"
    size: float = 0.0
    align: str = "left"

    # 标记（用于测试与调试）
    layer: Layer = Layer.CONTENT
    section: str | None = None
    role: str | None = None

    @property
    def bottom(self) -> float:
        return self.y + self.height


class Page(BaseModel):
    """单页"""
    index: int
    ops: list[DrawOp] = Field(default_factory=list)


class Document(BaseModel):
    """分页文档"""
    width: float
    height: float
    margin: float
    title: str = ""
    author: str = ""
    pages: list[Page] = Field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def iter_ops(self) -> Iterator[DrawOp]:
        for page in self.pages:
            yield from page.ops

    def ops_with_role(self, role: str) -> list[DrawOp]:
        return [op for op in self.iter_ops() if op.role == role]

    def section_sequence(self) -> list[str]:
        """按首次出现顺序返回各分区名"""
        seen: list[str] = []
        for op in self.iter_ops():
            if op.section and op.section not in seen:
                seen.append(op.section)
        return seen
