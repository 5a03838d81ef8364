"""
分区模块 - 内容切片 → 绘制指令

子模块：
- renderers: 各分区渲染器
- stages: 固定顺序的分区流水线
"""

from .stages import CV_SECTIONS, SectionEnum, SectionStage, build_cv_document

__all__ = [
    "CV_SECTIONS",
    "SectionEnum",
    "SectionStage",
    "build_cv_document",
]
