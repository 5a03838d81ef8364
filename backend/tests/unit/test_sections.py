"""
分区渲染单元测试

端到端场景：3个技能分类、4个项目、1条教育、6个兴趣标签，
通过绘制指令的分区标记与角色验证顺序与数量。
"""

import pytest

from portfolio_cv.config import RuntimeConfig
from portfolio_cv.layout import LayoutEngine
from portfolio_cv.models import ContentModel, Document, Layer, Project
from portfolio_cv.sections import CV_SECTIONS, SectionEnum, build_cv_document
from portfolio_cv.sections.renderers import (
    PROJECT_PAD,
    grid_columns,
    measure_project,
    render_interests,
)

EPS = 1e-6


@pytest.fixture
def document(sample_content: ContentModel, measurer, runtime_config: RuntimeConfig) -> Document:
    return build_cv_document(sample_content, measurer, runtime_config)


def _chip_rows(document: Document) -> set[tuple[int, float]]:
    return {(op.page, round(op.y, 3)) for op in document.ops_with_role("chip")}


class TestPipeline:
    """分区流水线测试"""

    def test_fixed_section_order(self):
        assert [s.name for s in CV_SECTIONS] == [e.value for e in SectionEnum]

    def test_section_sequence(self, document: Document):
        """分区按固定顺序出现，页脚收尾"""
        assert document.section_sequence() == [
            "header", "summary", "skills", "projects", "exposure", "education", "interests",
            "footer",
        ]
        titles = [op.text for op in document.ops_with_role("section-title")]
        assert titles == [
            "SUMMARY", "SKILLS", "PROJECTS", "ENGINEERING EXPOSURE", "EDUCATION", "INTERESTS",
        ]

        content_ops = [op for op in document.iter_ops() if op.layer == Layer.CONTENT]
        assert content_ops[-1].section == "footer"
        assert content_ops[-1].role == "attribution"

    def test_section_counts(self, document: Document):
        """3张技能卡、4张项目卡(各带徽标)、2张工程领域卡、1张教育卡(带状态徽标)"""
        assert len(document.ops_with_role("skill-card")) == 3
        assert len(document.ops_with_role("project-card")) == 4
        assert len(document.ops_with_role("tech-badge")) == 4
        assert len(document.ops_with_role("exposure-card")) == 2
        assert len(document.ops_with_role("education-card")) == 1
        assert len(document.ops_with_role("status-badge")) == 1
        assert len(document.ops_with_role("footer-bar")) == 3

    def test_interests_wrap_rows(self, document: Document):
        """6个标签至少排成2行"""
        assert len(document.ops_with_role("chip")) == 6
        assert len(_chip_rows(document)) >= 2

    def test_build_is_idempotent(self, sample_content, measurer, runtime_config):
        """同一内容两次构建得到相同指令序列"""
        first = build_cv_document(sample_content, measurer, runtime_config)
        second = build_cv_document(sample_content, measurer, runtime_config)
        assert first.model_dump() == second.model_dump()

    def test_document_metadata(self, document: Document):
        assert document.title == "Ada Example CV"
        assert document.author == "Ada Example"

    def test_empty_content_degrades(self, measurer, runtime_config):
        """空内容：只有页眉和页脚"""
        document = build_cv_document(ContentModel(), measurer, runtime_config)
        assert document.section_sequence() == ["header", "footer"]
        assert document.page_count == 1


class TestHeader:
    """页眉测试"""

    def test_header_texts(self, document: Document):
        assert document.ops_with_role("name")[0].text == "Ada Example"
        assert document.ops_with_role("handle")[0].text == "@adaexample · Cipher"
        contact = document.ops_with_role("contact")[0].text
        assert contact.startswith("ada@example.com")
        assert "github.com/adaexample" in contact
        assert "https://" not in contact


class TestCardPlacement:
    """卡片不跨页"""

    CARD_ROLES = (
        "skill-card", "project-card", "exposure-card", "education-card", "chip",
    )

    def _assert_cards_unsplit(self, document: Document, engine: LayoutEngine):
        for role in self.CARD_ROLES:
            for op in document.ops_with_role(role):
                assert op.y >= engine.top - EPS
                assert op.bottom <= engine.bottom + EPS or op.y == pytest.approx(engine.top)

    def test_cards_never_split(self, document, measurer, runtime_config):
        engine = LayoutEngine(measurer, page=runtime_config.page)
        self._assert_cards_unsplit(document, engine)

    def test_many_projects_paginate(self, sample_content, measurer, runtime_config):
        """项目很多时跨多页，每张卡片完整位于一页内"""
        content = sample_content.model_copy(
            update={"projects": sample_content.projects * 4}
        )
        document = build_cv_document(content, measurer, runtime_config)
        engine = LayoutEngine(measurer, page=runtime_config.page)

        assert document.page_count >= 2
        assert len(document.ops_with_role("project-card")) == 16
        self._assert_cards_unsplit(document, engine)
        pages = {op.page for op in document.ops_with_role("project-card")}
        assert len(pages) >= 2

    def test_title_not_orphaned_by_oversized_card(self, sample_content, measurer, runtime_config):
        """项目卡片超过整页：分区标题与卡片同页"""
        content = sample_content.model_copy(
            update={"projects": [Project(title="Huge", bullets=["word " * 3000])]}
        )
        document = build_cv_document(content, measurer, runtime_config)
        engine = LayoutEngine(measurer, page=runtime_config.page)

        title = next(op for op in document.ops_with_role("section-title")
                     if op.text == "PROJECTS")
        card = document.ops_with_role("project-card")[0]
        assert card.height > engine.usable_height
        assert card.page == title.page
        assert card.y == pytest.approx(engine.top + engine.TITLE_HEIGHT)

    def test_every_page_has_chrome(self, sample_content, measurer, runtime_config):
        content = sample_content.model_copy(
            update={"projects": sample_content.projects * 4}
        )
        document = build_cv_document(content, measurer, runtime_config)
        for page in document.pages:
            assert page.ops[0].role == "background"
            assert page.ops[1].role == "page-frame"


class TestSkills:
    """技能网格测试"""

    @pytest.mark.parametrize("count,columns", [
        (1, 2), (2, 2), (3, 3), (4, 2), (5, 3), (6, 3), (7, 4), (9, 4),
    ])
    def test_skill_grid_columns(self, count: int, columns: int):
        assert grid_columns(count) == columns

    def test_three_cards_single_row(self, document: Document):
        cards = document.ops_with_role("skill-card")
        assert len({(c.page, c.y) for c in cards}) == 1
        assert len({c.height for c in cards}) == 1


class TestExposure:
    """工程领域网格测试"""

    def test_exposure_grid_two_columns(self, document: Document, measurer, runtime_config):
        """2个领域：同一行两列，位于项目之后、教育之前"""
        engine = LayoutEngine(measurer, page=runtime_config.page)
        cards = document.ops_with_role("exposure-card")

        assert len({(c.page, c.y) for c in cards}) == 1
        assert cards[0].x == pytest.approx(engine.left)
        assert cards[0].width == pytest.approx(engine.column_width(2))

        last_project = document.ops_with_role("project-card")[-1]
        education = document.ops_with_role("education-card")[0]
        assert (last_project.page, last_project.y) < (cards[0].page, cards[0].y)
        assert (cards[0].page, cards[0].y) < (education.page, education.y)


class TestProjects:
    """项目卡片测试"""

    def test_tech_badge_right_aligned(self, document: Document, measurer, runtime_config):
        engine = LayoutEngine(measurer, page=runtime_config.page)
        for badge in document.ops_with_role("tech-badge"):
            assert badge.x + badge.width == pytest.approx(engine.right - PROJECT_PAD)

    def test_badge_text_joined_stack(self, document: Document):
        texts = [op.text for op in document.ops_with_role("tech-badge-text")]
        assert texts[0] == "Python / Kafka / ClickHouse"

    def test_project_card_height_matches_content(self, document: Document):
        """卡片高度包住全部要点文字"""
        for card in document.ops_with_role("project-card"):
            bullets = [
                op for op in document.ops_with_role("bullet")
                if op.page == card.page and card.y < op.y < card.bottom
            ]
            assert bullets
            assert max(op.y for op in bullets) < card.bottom - PROJECT_PAD + EPS

    def test_long_bullets_grow_card(self, engine: LayoutEngine):
        short = Project(title="T", bullets=["one line"])
        long = Project(title="T", bullets=["many words " * 60])
        assert measure_project(engine, long).height > measure_project(engine, short).height

    def test_project_without_stack(self, engine: LayoutEngine):
        layout = measure_project(engine, Project(title="Solo"))
        assert layout.badge_text == ""
        assert layout.badge_width == 0.0


class TestEducationAndInterests:
    """教育与兴趣测试"""

    def test_status_badge_text(self, document: Document):
        texts = [op.text for op in document.ops_with_role("status-badge-text")]
        assert texts == ["In Progress"]

    def test_interest_rows_left_aligned(self, engine: LayoutEngine):
        content = ContentModel(interests=["alpha beta gamma delta"] * 8)
        render_interests(engine, content)

        chips = engine.document.ops_with_role("chip")
        rows: dict[tuple[int, float], list] = {}
        for chip in chips:
            rows.setdefault((chip.page, chip.y), []).append(chip)
        assert len(rows) >= 2
        for row in rows.values():
            assert row[0].x == pytest.approx(engine.left)
            assert row[-1].x + row[-1].width <= engine.right + EPS
