"""
分区流水线 - 固定顺序调用各分区渲染器

顺序：页眉 → 简介 → 技能 → 项目 → 工程领域 → 教育 → 兴趣 → 页脚
所有分区共享同一个排版引擎/文档实例，单遍、无回溯。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..config.runtime_config import RuntimeConfig
from ..interfaces import ITextMeasurer
from ..layout import LayoutEngine
from ..models import ContentModel, Document
from . import renderers

logger = logging.getLogger(__name__)


class SectionEnum(str, Enum):
    """CV分区枚举"""
    HEADER = "header"
    SUMMARY = "summary"
    SKILLS = "skills"
    PROJECTS = "projects"
    EXPOSURE = "exposure"
    EDUCATION = "education"
    INTERESTS = "interests"
    FOOTER = "footer"


@dataclass
class SectionStage:
    """单个分区"""
    name: str
    renderer: Callable[[LayoutEngine, ContentModel], None]

    def execute(self, engine: LayoutEngine, content: ContentModel) -> None:
        """执行分区渲染"""
        engine.begin_section(self.name)
        self.renderer(engine, content)


CV_SECTIONS: list[SectionStage] = [
    SectionStage(SectionEnum.HEADER.value, renderers.render_header),
    SectionStage(SectionEnum.SUMMARY.value, renderers.render_summary),
    SectionStage(SectionEnum.SKILLS.value, renderers.render_skills),
    SectionStage(SectionEnum.PROJECTS.value, renderers.render_projects),
    SectionStage(SectionEnum.EXPOSURE.value, renderers.render_exposure),
    SectionStage(SectionEnum.EDUCATION.value, renderers.render_education),
    SectionStage(SectionEnum.INTERESTS.value, renderers.render_interests),
    SectionStage(SectionEnum.FOOTER.value, renderers.render_footer),
]


def build_cv_document(
    content: ContentModel,
    measurer: ITextMeasurer,
    config: RuntimeConfig | None = None,
) -> Document:
    """按固定顺序渲染全部分区，返回分页文档"""
    config = config or RuntimeConfig()
    engine = LayoutEngine(
        measurer,
        page=config.page,
        theme=config.theme,
        title=f"{content.name} CV".strip(),
        author=content.name,
    )
    for stage in CV_SECTIONS:
        stage.execute(engine, content)
        logger.debug(f"分区完成: {stage.name} (第 {engine.cursor.page + 1} 页)")
    return engine.document
