"""
产物保存 - 原子写入目标目录

先写同目录临时文件再重命名；任何失败都会删除临时文件，不留半成品。
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from ..config.runtime_config import get_config
from ..interfaces import ExportError, IArtifactSaver

logger = logging.getLogger(__name__)


class FileArtifactSaver(IArtifactSaver):
    """文件保存器实现"""

    def __init__(self, output_dir: Path | None = None):
        self.output_dir = Path(output_dir) if output_dir else get_config().export.output_dir

    async def save(self, filename: str, data: bytes) -> Path:
        """保存产物"""
        return await asyncio.to_thread(self._write, filename, data)

    def _write(self, filename: str, data: bytes) -> Path:
        name = Path(filename).name
        if not name:
            raise ExportError(f"无效的文件名: {filename!r}")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        target = self.output_dir / name

        fd, tmp_name = tempfile.mkstemp(dir=self.output_dir, prefix=f".{name}.", suffix=".part")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, target)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.info(f"产物已保存: {target} ({len(data)} bytes)")
        return target
