"""
界面提示 - 加载状态与toast

加载标志、当前toast及其过期时间都是实例字段；新toast替换旧toast并重置计时。
"""

from __future__ import annotations

import time
from typing import Callable

from ..interfaces import IExportNotifier
from ..models import Toast, ToastLevel


class ToastNotifier(IExportNotifier):
    """toast提示实现"""

    def __init__(
        self,
        dismiss_after_sec: float = 4.5,
        on_toast: Callable[[Toast], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.dismiss_after_sec = dismiss_after_sec
        self.on_toast = on_toast
        self._clock = clock

        self.loading = False
        self.current: Toast | None = None
        self.history: list[Toast] = []

    def set_loading(self, loading: bool) -> None:
        self.loading = loading

    def toast(self, message: str, level: ToastLevel) -> None:
        toast = Toast(level=level, message=message,
                      expires_at=self._clock() + self.dismiss_after_sec)
        self.current = toast
        self.history.append(toast)
        if self.on_toast:
            self.on_toast(toast)

    def visible_toast(self) -> Toast | None:
        """当前仍在显示的toast（过期自动消失）"""
        if self.current and self.current.expires_at is not None:
            if self._clock() >= self.current.expires_at:
                self.current = None
        return self.current
