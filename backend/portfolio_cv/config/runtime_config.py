"""
运行期配置 - 读取 config/runtime.yaml

职责：
- 加载页面尺寸/主题色/导出/超时等运行参数
- 提供环境变量覆盖机制
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class PageConfig(BaseModel):
    """页面配置（单位mm，A4纵向）"""

    width: float = 210.0
    height: float = 297.0
    margin: float = 12.0
    padding: float = 6.0          # 页框内左右留白
    top_padding: float = 10.0     # 页框顶部到正文的距离
    line_height_factor: float = 0.42  # 每pt字号对应的行高（mm）
    gutter: float = 4.0


class ThemeConfig(BaseModel):
    """主题色（深色）"""

    background: str = "#0b0f17"
    panel: str = "#111827"
    card: str = "#1a2234"
    border: str = "#273449"
    text: str = "#e9f1ff"
    muted: str = "#9ca3af"
    cyan: str = "#00d4ff"
    purple: str = "#a855f7"
    pink: str = "#ec4899"

    @property
    def accents(self) -> tuple[str, str, str]:
        return self.cyan, self.purple, self.pink


class FontSource(BaseModel):
    """字体来源（TTF常规+粗体）"""

    name: str
    regular: str
    bold: str


class ExportConfig(BaseModel):
    """导出配置"""

    output_dir: Path = Path("dist")
    invariant: bool = True
    font_sources: list[FontSource] = Field(default_factory=list)
    builtin_fallback: bool = True
    toast_dismiss_sec: float = 4.5


class TimeoutConfig(BaseModel):
    """超时配置"""

    capability_load_sec: float = 15.0
    smtp_sec: float = 20.0


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_file: str | None = None


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    content_path: Path | None = None

    # 各子配置
    page: PageConfig = Field(default_factory=PageConfig)
    theme: ThemeConfig = Field(default_factory=ThemeConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "FOLIO_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        config = cls(
            content_path=runtime_opts.get("content_path"),
            page=PageConfig(**cls._extract(runtime_opts, "page")),
            theme=ThemeConfig(**cls._extract(runtime_opts, "theme")),
            export=ExportConfig(**cls._extract(runtime_opts, "export")),
            timeouts=TimeoutConfig(**cls._extract(runtime_opts, "timeouts")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            else:
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if self.content_path and not self.content_path.is_absolute():
            self.content_path = (base_dir / self.content_path).resolve()
        for source in self.export.font_sources:
            for attr in ("regular", "bold"):
                font_path = Path(getattr(source, attr))
                if not font_path.is_absolute():
                    setattr(source, attr, str((base_dir / font_path).resolve()))

    def ensure_dirs(self) -> None:
        """确保输出目录存在"""
        self.export.output_dir.mkdir(parents=True, exist_ok=True)


class MailSettings(BaseSettings):
    """邮件发送配置（GMAIL_USER / GMAIL_APP_PASSWORD）"""

    user: str | None = None
    app_password: str | None = None
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465

    model_config = {"env_prefix": "GMAIL_"}

    @property
    def configured(self) -> bool:
        return bool(self.user and self.app_password)


# 全局配置实例
_config: RuntimeConfig | None = None

DEFAULT_CONFIG_PATH = Path("config/runtime.yaml")


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    _config = RuntimeConfig.from_yaml(yaml_path or DEFAULT_CONFIG_PATH)
    return _config
