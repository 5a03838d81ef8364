"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- ContentModel: 作品集内容（只读）
- Document/Page/DrawOp: 排版输出
- ExportSession: 单次导出的状态与生命周期
- ContactMessage: 联系表单消息
"""

from .content import ContentModel, Education, ExposureGroup, Project
from .document import Document, DrawKind, DrawOp, Layer, Page
from .session import ContactMessage, ExportSession, ExportStatus, Toast, ToastLevel

__all__ = [
    "ContentModel",
    "Education",
    "ExposureGroup",
    "Project",
    "Document",
    "DrawKind",
    "DrawOp",
    "Layer",
    "Page",
    "ExportSession",
    "ExportStatus",
    "Toast",
    "ToastLevel",
    "ContactMessage",
]
