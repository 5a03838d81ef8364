"""
日志配置 - 控制台+可选滚动文件

使用方式：
    from portfolio_cv.config.logging_config import setup_logging
    setup_logging(get_config().logging)
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from .runtime_config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_MAX_SIZE_MB = 5
LOG_BACKUP_COUNT = 3

ROOT_LOGGER = "portfolio_cv"


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """配置包级日志器（重复调用不会叠加handler）"""
    config = config or LoggingConfig()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=LOG_MAX_SIZE_MB * 1024 * 1024,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger
