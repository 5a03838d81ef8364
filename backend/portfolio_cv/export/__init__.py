"""
导出模块 - 能力加载/PDF写出/保存/提示/编排

子模块：
- loader: 渲染能力加载器（reportlab + 字体）
- pdf_writer: Document → PDF 字节
- saver: 原子保存
- notifier: 加载状态与toast
- orchestrator: 导出编排器
"""

from .loader import RenderCapability, ReportLabLoader
from .notifier import ToastNotifier
from .orchestrator import CVExporter
from .saver import FileArtifactSaver

__all__ = [
    "RenderCapability",
    "ReportLabLoader",
    "ToastNotifier",
    "CVExporter",
    "FileArtifactSaver",
]
