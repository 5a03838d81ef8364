"""
导出会话模型 - 单次导出的状态与生命周期

对应一次按钮触发；同一时刻只允许一个会话在运行
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class ExportStatus(str, Enum):
    """导出状态枚举"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"   # 已有导出在进行中


class ToastLevel(str, Enum):
    """toast级别"""
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class Toast(BaseModel):
    """一条界面提示"""
    level: ToastLevel
    message: str
    expires_at: float | None = None


class ExportSession(BaseModel):
    """导出会话"""
    filename: str
    status: ExportStatus = ExportStatus.QUEUED

    # 结果
    artifact_path: Path | None = None
    page_count: int = 0
    errors: list[str] = Field(default_factory=list, description="错误信息")

    # 时间戳
    created_at: datetime = Field(default_factory=datetime.now)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    def mark_running(self) -> None:
        """标记为运行中"""
        self.status = ExportStatus.RUNNING
        self.started_at = datetime.now()

    def mark_succeeded(self, artifact_path: Path, page_count: int) -> None:
        """标记为成功"""
        self.status = ExportStatus.SUCCEEDED
        self.finished_at = datetime.now()
        self.artifact_path = artifact_path
        self.page_count = page_count

    def mark_failed(self, error: str) -> None:
        """标记为失败"""
        self.status = ExportStatus.FAILED
        self.finished_at = datetime.now()
        self.errors.append(error)

    @property
    def succeeded(self) -> bool:
        return self.status == ExportStatus.SUCCEEDED


class ContactMessage(BaseModel):
    """联系表单消息（已去除首尾空白）"""
    name: str
    email: str
    message: str
