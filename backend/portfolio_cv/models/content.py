"""
内容模型 - 作品集的静态结构化数据

排版与渲染只读取这些结构，从不修改。
加载宽松：单条记录不合法时丢弃并告警，对应分区降级为空，不中断导出。
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class Project(BaseModel):
    """项目记录"""
    title: str
    subtitle: str = ""
    status: str = ""
    stack: list[str] = Field(default_factory=list)
    bullets: list[str] = Field(default_factory=list)


class ExposureGroup(BaseModel):
    """工程领域（Engineering Exposure 分区的一组要点）"""
    title: str
    points: list[str] = Field(default_factory=list)


class Education(BaseModel):
    """教育经历"""
    degree: str = ""
    institution: str = ""
    track: str = ""
    status: str = ""
    expected_graduation: str = ""


class ContentModel(BaseModel):
    """作品集内容"""

    # === 个人信息 ===
    name: str = ""
    handles: dict[str, str] = Field(default_factory=dict)
    title: str = ""
    tagline: str = ""
    summary: str = ""
    email: str = ""
    links: dict[str, str] = Field(default_factory=dict)
    cv_filename: str = "CV.pdf"

    # === 各分区数据 ===
    skills: dict[str, dict[str, int]] = Field(default_factory=dict)
    projects: list[Project] = Field(default_factory=list)
    exposure: list[ExposureGroup] = Field(default_factory=list)
    education: Education | None = None
    interests: list[str] = Field(default_factory=list)

    @field_validator("name", "title", "tagline", "summary", "email", mode="before")
    @classmethod
    def _lenient_str(cls, value: Any, info) -> str:
        if value is None:
            return ""
        if isinstance(value, (str, int, float)):
            return str(value).strip()
        logger.warning(f"内容字段 {info.field_name} 不是文本，已忽略")
        return ""

    @field_validator("cv_filename", mode="before")
    @classmethod
    def _lenient_filename(cls, value: Any) -> str:
        if isinstance(value, (str, int, float)) and str(value).strip():
            return str(value).strip()
        if value is not None:
            logger.warning(f"cv_filename 无效，使用默认值: {value!r}")
        return "CV.pdf"

    @field_validator("handles", "links", mode="before")
    @classmethod
    def _lenient_str_map(cls, value: Any, info) -> dict[str, str]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            logger.warning(f"内容字段 {info.field_name} 不是映射，已忽略")
            return {}
        return {str(k): str(v) for k, v in value.items() if v}

    @field_validator("skills", mode="before")
    @classmethod
    def _lenient_skills(cls, value: Any) -> dict[str, dict[str, int]]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            logger.warning("skills 不是 分类→{技能→百分比} 映射，已忽略")
            return {}

        result: dict[str, dict[str, int]] = {}
        for category, items in value.items():
            if not isinstance(items, dict):
                logger.warning(f"技能分类 {category} 格式错误，已跳过")
                continue
            clean: dict[str, int] = {}
            for skill, percent in items.items():
                try:
                    clean[str(skill)] = max(0, min(100, int(percent)))
                except (TypeError, ValueError):
                    logger.warning(f"技能 {category}/{skill} 百分比无效: {percent!r}")
            result[str(category)] = clean
        return result

    @field_validator("projects", mode="before")
    @classmethod
    def _lenient_projects(cls, value: Any) -> list[Project]:
        return _lenient_records(value, Project, "projects")

    @field_validator("exposure", mode="before")
    @classmethod
    def _lenient_exposure(cls, value: Any) -> list[ExposureGroup]:
        return _lenient_records(value, ExposureGroup, "exposure")

    @field_validator("education", mode="before")
    @classmethod
    def _lenient_education(cls, value: Any) -> Education | None:
        if value is None or isinstance(value, Education):
            return value
        if not isinstance(value, dict):
            logger.warning("education 格式错误，已忽略")
            return None
        try:
            return Education.model_validate(value)
        except ValidationError as e:
            logger.warning(f"education 校验失败，已忽略: {e.error_count()} 处错误")
            return None

    @field_validator("interests", mode="before")
    @classmethod
    def _lenient_interests(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            if value is not None:
                logger.warning("interests 不是列表，已忽略")
            return []
        return [str(v) for v in value if isinstance(v, (str, int, float)) and str(v).strip()]

    @property
    def handle_line(self) -> str:
        return " · ".join(v for v in self.handles.values() if v)

    @property
    def summary_text(self) -> str:
        return self.summary or self.tagline


def _lenient_records(value: Any, model: type[BaseModel], field: str) -> list:
    """逐条校验列表记录，丢弃不合法的条目"""
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning(f"{field} 不是列表，已忽略")
        return []

    records = []
    for i, raw in enumerate(value):
        if isinstance(raw, model):
            records.append(raw)
            continue
        try:
            records.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"{field}[{i}] 校验失败，已跳过: {e.error_count()} 处错误")
    return records
