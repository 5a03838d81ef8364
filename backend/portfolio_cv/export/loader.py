"""
渲染能力加载器 - 按需获取PDF绘制库与字体

职责：
1. 按需导入 reportlab（测量器+写出器）
2. 依次尝试配置的字体来源，最后兜底内置 Helvetica
3. 超时控制；结果按加载器实例缓存

测试要点：
- test_ensure_available_builtin: 无字体来源时使用内置字体
- test_missing_font_source_falls_back: 字体文件缺失时降级
- test_no_source_raises: 全部来源失败时报错
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config.runtime_config import FontSource, RuntimeConfig, get_config
from ..interfaces import CapabilityLoadError, IDocumentWriter, IRendererLoader, ITextMeasurer

if TYPE_CHECKING:
    from ..layout.measure import FontFamily

logger = logging.getLogger(__name__)


@dataclass
class RenderCapability:
    """渲染能力：字体族+测量器+写出器"""
    fonts: FontFamily
    measurer: ITextMeasurer
    writer: IDocumentWriter


class ReportLabLoader(IRendererLoader):
    """reportlab 能力加载器"""

    BUILTIN_REGULAR = "Helvetica"
    BUILTIN_BOLD = "Helvetica-Bold"

    def __init__(self, config: RuntimeConfig | None = None):
        config = config or get_config()
        self.sources: list[FontSource] = list(config.export.font_sources)
        self.builtin_fallback = config.export.builtin_fallback
        self.invariant = config.export.invariant
        self.timeout = config.timeouts.capability_load_sec
        self._capability: RenderCapability | None = None

    async def ensure_available(self) -> RenderCapability:
        """确保渲染能力可用（首次调用时加载）"""
        if self._capability is not None:
            return self._capability
        try:
            self._capability = await asyncio.wait_for(
                asyncio.to_thread(self._load), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise CapabilityLoadError(f"渲染能力加载超时: {self.timeout}s") from e
        return self._capability

    def _load(self) -> RenderCapability:
        """导入 reportlab 并注册字体"""
        try:
            from ..layout.measure import FontFamily, ReportLabMeasurer
            from .pdf_writer import PdfWriter
        except ImportError as e:
            raise CapabilityLoadError(f"reportlab 不可用: {e}") from e

        regular, bold = self._register_fonts()
        fonts = FontFamily(regular=regular, bold=bold)
        logger.info(f"渲染能力就绪: {fonts.regular}/{fonts.bold}")
        return RenderCapability(
            fonts=fonts,
            measurer=ReportLabMeasurer(fonts),
            writer=PdfWriter(fonts, invariant=self.invariant),
        )

    def _register_fonts(self) -> tuple[str, str]:
        """依次尝试字体来源，返回 (常规, 粗体) 字体名"""
        from reportlab.pdfbase import pdfmetrics
        from reportlab.pdfbase.ttfonts import TTFont

        for source in self.sources:
            bold_name = f"{source.name}-Bold"
            try:
                pdfmetrics.registerFont(TTFont(source.name, source.regular))
                pdfmetrics.registerFont(TTFont(bold_name, source.bold))
                return source.name, bold_name
            except Exception as e:
                logger.warning(f"字体来源不可用，尝试下一个: {source.name}: {e}")

        if self.builtin_fallback:
            return self.BUILTIN_REGULAR, self.BUILTIN_BOLD
        raise CapabilityLoadError("所有字体来源均不可用")
