"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from portfolio_cv.interfaces import ITextMeasurer

    class MyMeasurer(ITextMeasurer):
        def width(self, text: str, size: float, weight: str = "regular") -> float:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import ContactMessage, Document, ToastLevel


# ============================================================================
# 排版模块接口
# ============================================================================

class ITextMeasurer(ABC):
    """文本测量接口 - 换行依据真实字宽，而不是字符数"""

    @abstractmethod
    def width(self, text: str, size: float, weight: str = "regular") -> float:
        """
        测量文本宽度

        Args:
            text: 单行文本
            size: 字号（pt）
            weight: 字重（regular/bold）

        Returns:
            宽度（mm）
        """
        ...


# ============================================================================
# 导出模块接口
# ============================================================================

class IDocumentWriter(ABC):
    """文档写出器接口 - 把绘制指令序列落成文件字节"""

    @abstractmethod
    def render(self, document: Document) -> bytes:
        """渲染文档为字节"""
        ...


class IRendererLoader(ABC):
    """渲染能力加载器接口"""

    @abstractmethod
    async def ensure_available(self) -> Any:
        """
        确保渲染能力可用

        Returns:
            渲染能力对象（含测量器与写出器）

        Raises:
            CapabilityLoadError: 所有来源均加载失败
        """
        ...


class IArtifactSaver(ABC):
    """产物保存接口"""

    @abstractmethod
    async def save(self, filename: str, data: bytes) -> Path:
        """
        保存产物（要么完整落盘，要么不留任何文件）

        Returns:
            保存后的路径
        """
        ...


class IExportNotifier(ABC):
    """界面提示接口 - 加载状态与toast"""

    @abstractmethod
    def set_loading(self, loading: bool) -> None:
        """切换加载状态"""
        ...

    @abstractmethod
    def toast(self, message: str, level: ToastLevel) -> None:
        """显示一条toast"""
        ...


# ============================================================================
# 联系表单接口
# ============================================================================

class IMailTransport(ABC):
    """邮件发送接口"""

    @abstractmethod
    def send(self, message: ContactMessage) -> None:
        """
        发送联系表单邮件

        Raises:
            TransportError: 发送失败
        """
        ...


# ============================================================================
# 异常定义
# ============================================================================

class PortfolioError(Exception):
    """基础异常"""
    pass


class ConfigurationError(PortfolioError):
    """配置错误"""
    pass


class CapabilityLoadError(PortfolioError):
    """渲染能力加载错误"""
    pass


class LayoutError(PortfolioError):
    """排版错误"""
    pass


class ExportError(PortfolioError):
    """导出错误"""
    pass


class ContactValidationError(PortfolioError):
    """联系表单校验错误"""

    def __init__(self, reasons: list[str]):
        self.reasons = reasons
        super().__init__(". ".join(reasons))


class TransportError(PortfolioError):
    """邮件发送错误"""
    pass
