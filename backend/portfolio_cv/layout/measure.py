"""
文本测量 - 基于 reportlab 字体度量

换行算法依赖真实字宽：同一字体同一字号下，测量结果与最终写入PDF时完全一致。
"""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.pdfbase import pdfmetrics

from ..interfaces import ITextMeasurer
from .engine import PT_TO_MM


@dataclass(frozen=True)
class FontFamily:
    """已注册的字体族（常规+粗体）"""
    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"

    def resolve(self, weight: str) -> str:
        return self.bold if weight == "bold" else self.regular


class ReportLabMeasurer(ITextMeasurer):
    """reportlab 字宽测量器"""

    def __init__(self, fonts: FontFamily | None = None):
        self.fonts = fonts or FontFamily()

    def width(self, text: str, size: float, weight: str = "regular") -> float:
        return pdfmetrics.stringWidth(text, self.fonts.resolve(weight), size) * PT_TO_MM
