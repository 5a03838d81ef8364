"""
排版引擎 - 带游标的分页绘制面

职责：
1. 维护游标（当前页/当前纵向偏移）
2. 唯一的分页决策点 need_space
3. 提供绘制原语：卡片/分区标题/自动换行文本/徽标/标签
4. 把所有绘制记录为 Document 中的指令，供写出器回放

约定：
- 单位mm，原点左上角，文本 y 为基线
- 分区渲染器只能通过引擎方法推进游标
- 单个元素高于整页可用高度时，放到新页顶部（紧随页首标题）并允许越过下边距（不死循环）

测试要点：
- test_need_space_breaks_page: 空间不足时换页
- test_oversized_block_no_loop: 超高元素不死循环
- test_wrap_measure_agrees: 预测量高度与实际绘制一致
- test_flow_rows_boundary: 标签恰好填满剩余空间时不换行
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config.runtime_config import PageConfig, ThemeConfig
from ..interfaces import ITextMeasurer, LayoutError
from ..models import Document, DrawKind, DrawOp, Layer, Page

logger = logging.getLogger(__name__)

PT_TO_MM = 25.4 / 72
EPSILON = 1e-6
ELLIPSIS = "…"


@dataclass
class Cursor:
    """游标"""
    page: int = 0
    y: float = 0.0


def flow_rows(widths: list[float], inner_width: float, gutter: float) -> list[list[int]]:
    """
    流式排布：从左到右放置，放不下时换行

    当 当前x + 宽度 > 可用宽度 时换行；恰好等于剩余空间时不换行。

    Returns:
        每行包含的元素下标
    """
    rows: list[list[int]] = []
    x = 0.0
    for i, w in enumerate(widths):
        if not rows or (rows[-1] and x + w > inner_width + EPSILON):
            rows.append([])
            x = 0.0
        rows[-1].append(i)
        x += w + gutter
    return rows


class LayoutEngine:
    """排版引擎"""

    TITLE_HEIGHT = 10.0
    TITLE_SIZE = 11.0
    BADGE_PAD_X = 2.5
    BADGE_HEIGHT = 5.0
    CHIP_PAD_X = 4.0
    CHIP_HEIGHT = 7.0
    CARD_RADIUS = 2.5

    def __init__(
        self,
        measurer: ITextMeasurer,
        page: PageConfig | None = None,
        theme: ThemeConfig | None = None,
        title: str = "",
        author: str = "",
    ):
        self.measurer = measurer
        self.page_cfg = page or PageConfig()
        self.theme = theme or ThemeConfig()
        self.document = Document(
            width=self.page_cfg.width,
            height=self.page_cfg.height,
            margin=self.page_cfg.margin,
            title=title,
            author=author,
        )
        if self.inner_width <= 0 or self.usable_height <= 0:
            raise LayoutError(
                f"版面无可用区域: 宽 {self.inner_width:.1f}mm, 高 {self.usable_height:.1f}mm"
            )
        self._cursor = Cursor()
        self._fresh_y = 0.0
        self._section: str | None = None
        self._start_page()

    # -------------------------------------------------------------------------
    # 几何
    # -------------------------------------------------------------------------

    @property
    def left(self) -> float:
        return self.page_cfg.margin + self.page_cfg.padding

    @property
    def right(self) -> float:
        return self.page_cfg.width - self.page_cfg.margin - self.page_cfg.padding

    @property
    def inner_width(self) -> float:
        return self.right - self.left

    @property
    def center(self) -> float:
        return self.page_cfg.width / 2

    @property
    def top(self) -> float:
        """新页正文起点"""
        return self.page_cfg.margin + self.page_cfg.top_padding

    @property
    def bottom(self) -> float:
        return self.page_cfg.height - self.page_cfg.margin

    @property
    def usable_height(self) -> float:
        return self.bottom - self.top

    @property
    def gutter(self) -> float:
        return self.page_cfg.gutter

    @property
    def cursor(self) -> Cursor:
        """游标快照（只读）"""
        return Cursor(self._cursor.page, self._cursor.y)

    def column_width(self, columns: int) -> float:
        return (self.inner_width - self.gutter * (columns - 1)) / columns

    def line_height(self, size: float) -> float:
        return size * self.page_cfg.line_height_factor

    def baseline(self, y: float, size: float) -> float:
        """行顶 → 基线"""
        return y + self.line_height(size) * 0.75

    # -------------------------------------------------------------------------
    # 分页
    # -------------------------------------------------------------------------

    def page_background(self) -> None:
        """整页铺底色（每页一次，含新建页）"""
        self._emit(
            DrawKind.RECT, 0.0, 0.0,
            width=self.page_cfg.width, height=self.page_cfg.height,
            fill=self.theme.background, layer=Layer.CHROME, role="background",
        )

    def need_space(self, height: float) -> bool:
        """
        预留纵向空间，不足时换页

        调用方在任何定高块之前调用；返回后当前页保证有 height 的空间，
        除非当前页尚无正文块（页首，或只有页首的分区标题）：此时不再换页，
        超高的块在此处绘制并允许越过下边距。

        Returns:
            是否发生了换页
        """
        if self._cursor.y + height <= self.bottom + EPSILON:
            return False
        if self._cursor.y <= self._fresh_y + EPSILON:
            logger.debug(f"元素高度 {height:.1f}mm 超过整页可用高度，允许溢出")
            return False
        self.new_page()
        return True

    def new_page(self) -> None:
        """提交新页：背景+页框+渐变条，游标回到正文起点"""
        self._start_page()
        logger.debug(f"换页 → 第 {self._cursor.page + 1} 页")

    def advance(self, dy: float) -> None:
        """推进游标"""
        self._cursor.y += dy

    def begin_section(self, name: str) -> None:
        """标记后续指令所属分区"""
        self._section = name

    def _start_page(self) -> None:
        page = Page(index=len(self.document.pages))
        self.document.pages.append(page)
        self._cursor.page = page.index
        self._cursor.y = self.top
        self._fresh_y = self.top
        self.page_background()
        self._page_frame()

    def _page_frame(self) -> None:
        """页框卡片与顶部三色渐变条"""
        m = self.page_cfg.margin
        w = self.page_cfg.width - 2 * m
        h = self.page_cfg.height - 2 * m
        self._emit(
            DrawKind.RECT, m, m, width=w, height=h, radius=3.0,
            fill=self.theme.panel, stroke=self.theme.border, line_width=0.3,
            layer=Layer.CHROME, role="page-frame",
        )
        segment = w / 3
        for i, color in enumerate(self.theme.accents):
            self._emit(
                DrawKind.RECT, m + i * segment, m, width=segment, height=1.2,
                fill=color, layer=Layer.CHROME, role="accent-bar",
            )

    # -------------------------------------------------------------------------
    # 测量与换行
    # -------------------------------------------------------------------------

    def measure(self, text: str, size: float, weight: str = "regular") -> float:
        return self.measurer.width(text, size, weight)

    def wrap_lines(
        self, text: str, size: float, weight: str = "regular", max_width: float | None = None
    ) -> list[str]:
        """
        按字宽折行（在词间断行，单词超宽时才在词内断开）

        空文本返回空列表；显式换行视为段落分隔。
        """
        if max_width is None:
            max_width = self.inner_width
        if not text or not text.strip():
            return []

        lines: list[str] = []
        for paragraph in text.strip().splitlines():
            words = paragraph.split()
            if not words:
                lines.append("")
                continue
            current = ""
            for word in words:
                candidate = f"{current} {word}" if current else word
                if self.measure(candidate, size, weight) <= max_width + EPSILON:
                    current = candidate
                    continue
                if current:
                    lines.append(current)
                if self.measure(word, size, weight) <= max_width + EPSILON:
                    current = word
                else:
                    pieces = self._split_word(word, size, weight, max_width)
                    lines.extend(pieces[:-1])
                    current = pieces[-1]
            lines.append(current)
        return lines

    def _split_word(self, word: str, size: float, weight: str, max_width: float) -> list[str]:
        """词内断开（每段至少一个字符）"""
        pieces: list[str] = []
        current = ""
        for ch in word:
            if current and self.measure(current + ch, size, weight) > max_width + EPSILON:
                pieces.append(current)
                current = ch
            else:
                current += ch
        pieces.append(current)
        return pieces

    def measure_wrapped(
        self, text: str, size: float, weight: str = "regular", max_width: float | None = None
    ) -> float:
        """折行后的总高度（与 wrapped_text 的推进量一致）"""
        return len(self.wrap_lines(text, size, weight, max_width)) * self.line_height(size)

    def fit_text(self, text: str, size: float, weight: str, max_width: float) -> str:
        """单行截断，超宽时以省略号结尾"""
        if self.measure(text, size, weight) <= max_width + EPSILON:
            return text
        trimmed = text
        while trimmed and self.measure(trimmed.rstrip() + ELLIPSIS, size, weight) > max_width:
            trimmed = trimmed[:-1]
        return trimmed.rstrip() + ELLIPSIS

    # -------------------------------------------------------------------------
    # 绘制原语
    # -------------------------------------------------------------------------

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: str | None,
        *,
        stroke: str | None = None,
        radius: float = 0.0,
        role: str | None = None,
    ) -> None:
        self._emit(
            DrawKind.RECT, x, y, width=width, height=height, radius=radius,
            fill=fill, stroke=stroke, line_width=0.3 if stroke else 0.0, role=role,
        )

    def card(self, x: float, y: float, width: float, height: float, role: str = "card") -> None:
        """带边框的填充矩形（不含文字）"""
        self.rect(
            x, y, width, height, self.theme.card,
            stroke=self.theme.border, radius=self.CARD_RADIUS, role=role,
        )

    def text(
        self,
        text: str,
        x: float,
        y: float,
        size: float,
        color: str,
        weight: str = "regular",
        align: str = "left",
        role: str | None = None,
    ) -> None:
        """在基线 y 处绘制单行文本"""
        self._emit(
            DrawKind.TEXT, x, y, text=text, size=size, font=weight,
            fill=color, align=align, role=role,
        )

    def text_lines(
        self,
        lines: list[str],
        x: float,
        y: float,
        size: float,
        color: str,
        weight: str = "regular",
        role: str | None = None,
    ) -> float:
        """
        在已预留空间内逐行绘制（不做分页判断）

        Returns:
            最后一行之后的 y
        """
        lh = self.line_height(size)
        for line in lines:
            if line:
                self.text(line, x, self.baseline(y, size), size, color, weight, role=role)
            y += lh
        return y

    def rule(self, x1: float, x2: float, y: float, color: str, width: float = 0.3,
             role: str | None = None) -> None:
        self._emit(DrawKind.LINE, x1, y, width=x2 - x1, stroke=color, line_width=width, role=role)

    def circle(self, cx: float, cy: float, r: float, color: str, role: str | None = None) -> None:
        self._emit(DrawKind.CIRCLE, cx, cy, radius=r, fill=color, role=role)

    def section_title(self, text: str, keep_with: float = 0.0) -> None:
        """
        分区标题：大写文字+强调下划线

        keep_with 为紧随其后的首个块高度，避免标题孤零零留在页底；
        超过整页时按整页计，标题与该块同处新页。
        """
        keep_with = min(keep_with, self.usable_height - self.TITLE_HEIGHT)
        self.need_space(self.TITLE_HEIGHT + keep_with)
        y = self._cursor.y
        at_page_start = y <= self._fresh_y + EPSILON
        self.text(text.upper(), self.left, y + 5.5, self.TITLE_SIZE, self.theme.cyan,
                  "bold", role="section-title")
        self.rect(self.left, y + 7.2, 18.0, 0.8, self.theme.purple, role="title-underline")
        self._cursor.y += self.TITLE_HEIGHT
        if at_page_start:
            self._fresh_y = self._cursor.y

    def wrapped_text(
        self,
        text: str,
        x: float,
        font_size: float,
        color: str,
        weight: str = "regular",
        max_width: float | None = None,
        role: str | None = "paragraph",
    ) -> int:
        """
        自动换行文本：每行先 need_space 再绘制，游标按行高推进

        Returns:
            行数
        """
        if max_width is None:
            max_width = self.right - x
        lines = self.wrap_lines(text, font_size, weight, max_width)
        lh = self.line_height(font_size)
        for line in lines:
            self.need_space(lh)
            if line:
                self.text(line, x, self.baseline(self._cursor.y, font_size), font_size,
                          color, weight, role=role)
            self._cursor.y += lh
        return len(lines)

    def badge_width(self, text: str, size: float) -> float:
        return self.measure(text, size, "bold") + 2 * self.BADGE_PAD_X

    def badge(self, text: str, right: float, y: float, size: float, color: str,
              role: str = "badge") -> float:
        """
        右对齐徽标：宽度 = 文本实测宽度 + 固定内边距

        Returns:
            徽标宽度
        """
        width = self.badge_width(text, size)
        x = right - width
        self.rect(x, y, width, self.BADGE_HEIGHT, self.theme.background,
                  stroke=color, radius=self.BADGE_HEIGHT / 2, role=role)
        self.text(text, x + width / 2, y + self.BADGE_HEIGHT / 2 + size * PT_TO_MM * 0.35,
                  size, color, "bold", align="center", role=f"{role}-text")
        return width

    def chip_width(self, text: str, size: float) -> float:
        return self.measure(text, size) + 2 * self.CHIP_PAD_X

    def chip(self, text: str, x: float, y: float, size: float) -> float:
        """圆角标签"""
        width = self.chip_width(text, size)
        self.rect(x, y, width, self.CHIP_HEIGHT, self.theme.card,
                  stroke=self.theme.purple, radius=self.CHIP_HEIGHT / 2, role="chip")
        self.text(text, x + width / 2, y + self.CHIP_HEIGHT / 2 + size * PT_TO_MM * 0.35,
                  size, self.theme.text, align="center", role="chip-text")
        return width

    # -------------------------------------------------------------------------
    # 指令记录
    # -------------------------------------------------------------------------

    def _emit(self, kind: DrawKind, x: float, y: float, layer: Layer = Layer.CONTENT,
              **fields) -> None:
        op = DrawOp(
            kind=kind,
            page=self._cursor.page,
            x=x,
            y=y,
            layer=layer,
            section=self._section if layer == Layer.CONTENT else None,
            **fields,
        )
        self.document.pages[self._cursor.page].ops.append(op)
