"""
导出编排器 - 一次CV导出的完整流程

职责：
1. 忙碌标志防重入（导出进行中再次触发直接忽略）
2. 按需获取渲染能力
3. 按固定顺序渲染各分区并写出PDF
4. 保存产物并通过toast反馈
5. 所有异常在此边界捕获；任何退出路径都复位忙碌标志与加载状态

测试要点：
- test_export_success: 成功导出并保存
- test_concurrent_trigger_ignored: 导出中再次触发不产生第二份文档
- test_capability_failure: 渲染库加载失败时提示打印兜底
- test_layout_failure: 排版异常时不留半成品
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config.runtime_config import RuntimeConfig, get_config
from ..interfaces import (
    CapabilityLoadError,
    IArtifactSaver,
    IExportNotifier,
    IRendererLoader,
)
from ..models import ContentModel, ExportSession, ExportStatus, ToastLevel
from ..sections import build_cv_document

logger = logging.getLogger(__name__)

MSG_PROGRESS = "Generating PDF…"
MSG_SUCCESS = "CV downloaded successfully!"
MSG_CAPABILITY_FAILED = "PDF library failed to load. Try the Print option instead."
MSG_FAILED = "PDF export failed. Try the Print option instead."


class CVExporter:
    """CV导出编排器"""

    def __init__(
        self,
        content: ContentModel,
        loader: IRendererLoader,
        saver: IArtifactSaver,
        notifier: IExportNotifier,
        config: RuntimeConfig | None = None,
    ):
        self.content = content
        self.loader = loader
        self.saver = saver
        self.notifier = notifier
        self.config = config or get_config()
        self.busy = False

    async def export(self) -> ExportSession:
        """执行一次导出；从不向调用方抛出异常"""
        session = ExportSession(filename=self.content.cv_filename)
        if self.busy:
            logger.info("已有导出在进行中，忽略本次触发")
            session.status = ExportStatus.SKIPPED
            return session

        self.busy = True
        try:
            session.mark_running()
            self._set_loading(True)
            self._toast(MSG_PROGRESS, ToastLevel.INFO)
            await self._run(session)
        except CapabilityLoadError as e:
            logger.error(f"渲染能力加载失败: {e}")
            session.mark_failed(str(e))
            self._toast(MSG_CAPABILITY_FAILED, ToastLevel.ERROR)
        except Exception as e:
            logger.exception(f"CV导出失败: {session.filename}")
            session.mark_failed(str(e))
            self._toast(MSG_FAILED, ToastLevel.ERROR)
        finally:
            self.busy = False
            self._set_loading(False)

        if session.succeeded:
            self._toast(MSG_SUCCESS, ToastLevel.SUCCESS)
        return session

    async def _run(self, session: ExportSession) -> None:
        capability = await self.loader.ensure_available()

        document = build_cv_document(self.content, capability.measurer, self.config)
        data = capability.writer.render(document)
        logger.info(f"CV排版完成: {document.page_count} 页, {len(data)} bytes")

        path: Path = await self.saver.save(session.filename, data)
        session.mark_succeeded(path, document.page_count)

    def _set_loading(self, loading: bool) -> None:
        try:
            self.notifier.set_loading(loading)
        except Exception:
            logger.exception(f"加载状态更新失败: {loading}")

    def _toast(self, message: str, level: ToastLevel) -> None:
        """提示失败只记日志，不改变导出结果"""
        try:
            self.notifier.toast(message, level)
        except Exception:
            logger.exception(f"toast 提示失败: {message}")
