"""
排版模块 - 测量与分页绘制

子模块：
- engine: 排版引擎（游标/分页/绘制原语）
- measure: 基于 reportlab 字体度量的文本测量（由能力加载器按需导入）
"""

from .engine import PT_TO_MM, Cursor, LayoutEngine, flow_rows

__all__ = [
    "PT_TO_MM",
    "Cursor",
    "LayoutEngine",
    "flow_rows",
]
