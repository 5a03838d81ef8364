"""
PDF写出器 - 把 Document 的绘制指令回放到 reportlab 画布

职责：
1. 坐标换算（mm → pt，左上原点 → 左下原点）
2. 逐页回放矩形/文本/圆/线
3. 写出后核对PDF页数与文档页数一致

依赖：
- reportlab: PDF画布

测试要点：
- test_render_page_count: 输出页数与文档页数一致
- test_render_invariant_bytes: invariant模式下字节稳定
"""

from __future__ import annotations

from io import BytesIO

from reportlab.lib.colors import HexColor
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from ..interfaces import ExportError, IDocumentWriter
from ..layout.measure import FontFamily
from ..models import Document, DrawKind, DrawOp


class PdfWriter(IDocumentWriter):
    """PDF写出器实现"""

    def __init__(self, fonts: FontFamily | None = None, invariant: bool = True):
        self.fonts = fonts or FontFamily()
        self.invariant = invariant

    def render(self, document: Document) -> bytes:
        """渲染为PDF字节"""
        buffer = BytesIO()
        c = canvas.Canvas(
            buffer,
            pagesize=(document.width * mm, document.height * mm),
            invariant=1 if self.invariant else 0,
        )
        if document.title:
            c.setTitle(document.title)
        if document.author:
            c.setAuthor(document.author)

        for page in document.pages:
            for op in page.ops:
                self._draw(c, op, document.height)
            c.showPage()

        c.save()
        data = buffer.getvalue()

        written = count_pdf_pages(data)
        if written != document.page_count:
            raise ExportError(f"PDF页数不一致: 文档 {document.page_count} 页, 写出 {written} 页")
        return data

    def _draw(self, c: canvas.Canvas, op: DrawOp, page_height: float) -> None:
        """回放单条指令"""
        if op.kind == DrawKind.RECT:
            self._apply_style(c, op)
            x = op.x * mm
            y = (page_height - op.y - op.height) * mm
            fill = 1 if op.fill else 0
            stroke = 1 if op.stroke else 0
            if op.radius:
                c.roundRect(x, y, op.width * mm, op.height * mm, op.radius * mm,
                            stroke=stroke, fill=fill)
            else:
                c.rect(x, y, op.width * mm, op.height * mm, stroke=stroke, fill=fill)

        elif op.kind == DrawKind.TEXT:
            c.setFillColor(HexColor(op.fill or "#000000"))
            c.setFont(self.fonts.resolve(op.font), op.size)
            x = op.x * mm
            y = (page_height - op.y) * mm
            if op.align == "center":
                c.drawCentredString(x, y, op.text or "")
            elif op.align == "right":
                c.drawRightString(x, y, op.text or "")
            else:
                c.drawString(x, y, op.text or "")

        elif op.kind == DrawKind.CIRCLE:
            self._apply_style(c, op)
            c.circle(op.x * mm, (page_height - op.y) * mm, op.radius * mm,
                     stroke=1 if op.stroke else 0, fill=1 if op.fill else 0)

        elif op.kind == DrawKind.LINE:
            self._apply_style(c, op)
            y = (page_height - op.y) * mm
            c.line(op.x * mm, y, (op.x + op.width) * mm, y)

    @staticmethod
    def _apply_style(c: canvas.Canvas, op: DrawOp) -> None:
        if op.fill:
            c.setFillColor(HexColor(op.fill))
        if op.stroke:
            c.setStrokeColor(HexColor(op.stroke))
            c.setLineWidth(op.line_width * mm)


def count_pdf_pages(data: bytes) -> int:
    """统计页对象数（“/Type /Page”，排除“/Type /Pages”）"""
    needle = b"/Type /Page"
    count = 0
    i = 0
    while True:
        j = data.find(needle, i)
        if j < 0:
            break
        k = j + len(needle)
        if data[k:k + 1] != b"s":
            count += 1
        i = k
    return count
