"""
分区渲染器 - 把内容模型的一个切片变成绘制指令

每个渲染器：
1. 先用与绘制相同的折行计算得出整个块的高度
2. 以该高度调用 need_space，再画卡片底
3. 只通过排版引擎原语绘制内部元素

测试要点：
- test_skill_grid_columns: 技能网格列数
- test_project_card_height_matches_content: 项目卡片预测量高度
- test_education_badge_width: 状态徽标宽度取自实测
- test_interests_wrap_rows: 兴趣标签换行
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..layout import LayoutEngine, flow_rows
from ..models import ContentModel, Education, Project

SECTION_GAP = 5.0


# ============================================================================
# 页眉
# ============================================================================

HEADER_HEIGHT = 34.0


def _display_link(url: str) -> str:
    for prefix in ("https://", "http://", "www."):
        if url.startswith(prefix):
            url = url[len(prefix):]
    return url.rstrip("/")


def render_header(engine: LayoutEngine, content: ContentModel) -> None:
    """居中姓名/代号/头衔/联系方式 + 分隔线（定高）"""
    t = engine.theme
    engine.need_space(HEADER_HEIGHT)
    y = engine.cursor.y
    cx = engine.center
    width = engine.inner_width

    engine.text(engine.fit_text(content.name or "Curriculum Vitae", 20, "bold", width),
                cx, y + 7.0, 20, t.text, "bold", align="center", role="name")
    if content.handle_line:
        engine.text(content.handle_line, cx, y + 13.0, 10, t.cyan, "bold",
                    align="center", role="handle")
    if content.title:
        engine.text(engine.fit_text(content.title, 9.5, "regular", width),
                    cx, y + 19.0, 9.5, t.muted, align="center", role="subtitle")

    parts = [content.email] if content.email else []
    parts += [_display_link(url) for url in content.links.values()]
    contact = " · ".join(parts)
    if contact:
        engine.text(engine.fit_text(contact, 8.5, "regular", width),
                    cx, y + 25.0, 8.5, t.text, align="center", role="contact")

    engine.rule(engine.left, engine.right, y + 30.0, t.border, 0.4, role="separator")
    engine.advance(HEADER_HEIGHT)


# ============================================================================
# 简介
# ============================================================================

SUMMARY_SIZE = 9.5


def render_summary(engine: LayoutEngine, content: ContentModel) -> None:
    """纯段落"""
    text = content.summary_text
    if not text.strip():
        return
    engine.section_title("Summary", keep_with=engine.line_height(SUMMARY_SIZE))
    engine.wrapped_text(text, engine.left, SUMMARY_SIZE, engine.theme.text,
                        max_width=engine.inner_width)
    engine.advance(SECTION_GAP)


# ============================================================================
# 网格卡片（技能/工程领域共用）
# ============================================================================

GRID_PAD = 3.5
GRID_HEAD_SIZE = 9.0
GRID_BODY_SIZE = 8.0
GRID_HEAD_GAP = 1.5


def grid_columns(count: int) -> int:
    """按内容密度选列数：≤2或恰好4个用2列，3/5/6个用3列，更多用4列"""
    if count <= 2 or count == 4:
        return 2
    if count <= 6:
        return 3
    return 4


@dataclass
class GridCard:
    """已测量的网格卡片"""
    head_lines: list[str]
    body_lines: list[str]
    height: float


def measure_grid_cards(
    engine: LayoutEngine, cards: list[tuple[str, str]], columns: int
) -> list[GridCard]:
    text_width = engine.column_width(columns) - 2 * GRID_PAD
    measured = []
    for heading, body in cards:
        head_lines = engine.wrap_lines(heading, GRID_HEAD_SIZE, "bold", text_width)
        body_lines = engine.wrap_lines(body, GRID_BODY_SIZE, "regular", text_width)
        height = (
            2 * GRID_PAD
            + len(head_lines) * engine.line_height(GRID_HEAD_SIZE)
            + GRID_HEAD_GAP
            + len(body_lines) * engine.line_height(GRID_BODY_SIZE)
        )
        measured.append(GridCard(head_lines, body_lines, height))
    return measured


def grid_rows(measured: list[GridCard], columns: int) -> list[list[GridCard]]:
    return [measured[i:i + columns] for i in range(0, len(measured), columns)]


def _render_card_grid(
    engine: LayoutEngine, title: str, cards: list[tuple[str, str]], role: str
) -> None:
    if not cards:
        return
    t = engine.theme
    columns = grid_columns(len(cards))
    col_width = engine.column_width(columns)
    rows = grid_rows(measure_grid_cards(engine, cards, columns), columns)

    engine.section_title(title, keep_with=max(c.height for c in rows[0]))
    for row in rows:
        row_height = max(c.height for c in row)
        engine.need_space(row_height)
        y = engine.cursor.y
        for col, card in enumerate(row):
            x = engine.left + col * (col_width + engine.gutter)
            engine.card(x, y, col_width, row_height, role=role)
            ty = engine.text_lines(card.head_lines, x + GRID_PAD, y + GRID_PAD,
                                   GRID_HEAD_SIZE, t.cyan, "bold")
            engine.text_lines(card.body_lines, x + GRID_PAD, ty + GRID_HEAD_GAP,
                              GRID_BODY_SIZE, t.text)
        engine.advance(row_height + engine.gutter)
    engine.advance(SECTION_GAP - engine.gutter)


def render_skills(engine: LayoutEngine, content: ContentModel) -> None:
    """技能分类网格：分类名 + 间隔号连接的技能列表"""
    cards = [(category, " · ".join(items)) for category, items in content.skills.items()]
    _render_card_grid(engine, "Skills", cards, role="skill-card")


def render_exposure(engine: LayoutEngine, content: ContentModel) -> None:
    """工程领域网格"""
    cards = [(group.title, " · ".join(group.points)) for group in content.exposure]
    _render_card_grid(engine, "Engineering Exposure", cards, role="exposure-card")


# ============================================================================
# 项目
# ============================================================================

PROJECT_PAD = 4.0
PROJECT_TITLE_SIZE = 10.5
PROJECT_META_SIZE = 7.5
PROJECT_BADGE_SIZE = 7.0
PROJECT_BULLET_SIZE = 8.5
PROJECT_BULLET_INDENT = 4.0
PROJECT_BULLET_GAP = 1.0
PROJECT_HEADER_GAP = 2.0


@dataclass
class ProjectLayout:
    """已测量的项目卡片"""
    title_lines: list[str]
    badge_text: str
    badge_width: float
    header_height: float
    meta_lines: list[str]
    bullets: list[list[str]] = field(default_factory=list)
    height: float = 0.0


def measure_project(engine: LayoutEngine, project: Project) -> ProjectLayout:
    """预测量项目卡片：标题/徽标/元信息/要点逐条折行"""
    inner = engine.inner_width - 2 * PROJECT_PAD

    badge_text = ""
    badge_width = 0.0
    if project.stack:
        limit = inner * 0.45 - 2 * engine.BADGE_PAD_X
        badge_text = engine.fit_text(" / ".join(project.stack), PROJECT_BADGE_SIZE, "bold", limit)
        badge_width = engine.badge_width(badge_text, PROJECT_BADGE_SIZE)

    title_width = inner - badge_width - (3.0 if badge_width else 0.0)
    title_lines = engine.wrap_lines(project.title, PROJECT_TITLE_SIZE, "bold", title_width)
    header_height = max(
        len(title_lines) * engine.line_height(PROJECT_TITLE_SIZE),
        engine.BADGE_HEIGHT if badge_text else 0.0,
    )

    meta = " · ".join(part for part in (project.subtitle, project.status) if part)
    meta_lines = engine.wrap_lines(meta, PROJECT_META_SIZE, "regular", inner)

    bullet_width = inner - PROJECT_BULLET_INDENT
    bullets = [
        engine.wrap_lines(b, PROJECT_BULLET_SIZE, "regular", bullet_width) for b in project.bullets
    ]
    bullets = [lines for lines in bullets if lines]

    height = 2 * PROJECT_PAD + header_height
    height += len(meta_lines) * engine.line_height(PROJECT_META_SIZE)
    if bullets:
        height += PROJECT_HEADER_GAP
        height += sum(len(lines) for lines in bullets) * engine.line_height(PROJECT_BULLET_SIZE)
        height += PROJECT_BULLET_GAP * (len(bullets) - 1)

    return ProjectLayout(
        title_lines=title_lines,
        badge_text=badge_text,
        badge_width=badge_width,
        header_height=header_height,
        meta_lines=meta_lines,
        bullets=bullets,
        height=height,
    )


def render_projects(engine: LayoutEngine, content: ContentModel) -> None:
    """项目卡片：标题 + 右对齐技术栈徽标 + 要点列表"""
    if not content.projects:
        return
    t = engine.theme
    layouts = [measure_project(engine, p) for p in content.projects]

    engine.section_title("Projects", keep_with=layouts[0].height)
    for layout in layouts:
        engine.need_space(layout.height)
        y0 = engine.cursor.y
        engine.card(engine.left, y0, engine.inner_width, layout.height, role="project-card")

        x = engine.left + PROJECT_PAD
        y = y0 + PROJECT_PAD
        engine.text_lines(layout.title_lines, x, y, PROJECT_TITLE_SIZE, t.text, "bold",
                          role="project-title")
        if layout.badge_text:
            engine.badge(layout.badge_text, engine.right - PROJECT_PAD, y,
                         PROJECT_BADGE_SIZE, t.cyan, role="tech-badge")
        y += layout.header_height
        y = engine.text_lines(layout.meta_lines, x, y, PROJECT_META_SIZE, t.muted)

        if layout.bullets:
            y += PROJECT_HEADER_GAP
        for i, lines in enumerate(layout.bullets):
            if i:
                y += PROJECT_BULLET_GAP
            marker_y = engine.baseline(y, PROJECT_BULLET_SIZE) - engine.line_height(
                PROJECT_BULLET_SIZE) * 0.22
            engine.circle(x + 1.2, marker_y, 0.6, t.purple, role="bullet-marker")
            y = engine.text_lines(lines, x + PROJECT_BULLET_INDENT, y, PROJECT_BULLET_SIZE,
                                  t.text, role="bullet")

        engine.advance(layout.height + engine.gutter)
    engine.advance(SECTION_GAP - engine.gutter)


# ============================================================================
# 教育
# ============================================================================

EDUCATION_HEIGHT = 24.0
EDUCATION_PAD = 4.0
EDUCATION_BADGE_SIZE = 7.0


def render_education(engine: LayoutEngine, content: ContentModel) -> None:
    """单张定高卡片 + 状态徽标（宽度取自实测）"""
    edu: Education | None = content.education
    if edu is None or not (edu.degree or edu.institution):
        return
    t = engine.theme

    engine.section_title("Education", keep_with=EDUCATION_HEIGHT)
    engine.need_space(EDUCATION_HEIGHT)
    y0 = engine.cursor.y
    engine.card(engine.left, y0, engine.inner_width, EDUCATION_HEIGHT, role="education-card")

    x = engine.left + EDUCATION_PAD
    inner = engine.inner_width - 2 * EDUCATION_PAD
    y = y0 + EDUCATION_PAD

    badge_width = 0.0
    if edu.status:
        badge_width = engine.badge(edu.status, engine.right - EDUCATION_PAD, y,
                                   EDUCATION_BADGE_SIZE, t.pink, role="status-badge")
    degree_width = inner - badge_width - (3.0 if badge_width else 0.0)

    rows = [
        (edu.degree, 10.5, "bold", t.text, degree_width),
        (edu.institution, 9.0, "regular", t.text, inner),
        (" · ".join(p for p in (edu.track, edu.expected_graduation) if p), 8.5, "regular",
         t.muted, inner),
    ]
    for text, size, weight, color, width in rows:
        if text:
            engine.text(engine.fit_text(text, size, weight, width), x,
                        engine.baseline(y, size), size, color, weight)
        y += engine.line_height(size)

    engine.advance(EDUCATION_HEIGHT + SECTION_GAP)


# ============================================================================
# 兴趣
# ============================================================================

CHIP_SIZE = 8.0
CHIP_GAP = 3.0


def render_interests(engine: LayoutEngine, content: ContentModel) -> None:
    """标签流式排布，每行单独 need_space"""
    if not content.interests:
        return
    max_text = engine.inner_width - 2 * engine.CHIP_PAD_X
    tags = [engine.fit_text(tag, CHIP_SIZE, "regular", max_text) for tag in content.interests]
    widths = [engine.chip_width(tag, CHIP_SIZE) for tag in tags]
    rows = flow_rows(widths, engine.inner_width, CHIP_GAP)

    engine.section_title("Interests", keep_with=engine.CHIP_HEIGHT)
    for r, row in enumerate(rows):
        if r:
            engine.advance(engine.CHIP_HEIGHT + CHIP_GAP)
        engine.need_space(engine.CHIP_HEIGHT)
        y = engine.cursor.y
        x = engine.left
        for i in row:
            engine.chip(tags[i], x, y, CHIP_SIZE)
            x += widths[i] + CHIP_GAP
    engine.advance(engine.CHIP_HEIGHT + SECTION_GAP)


# ============================================================================
# 页脚
# ============================================================================

FOOTER_HEIGHT = 12.0


def render_footer(engine: LayoutEngine, content: ContentModel) -> None:
    """三色条 + 居中署名（定高）"""
    t = engine.theme
    engine.need_space(FOOTER_HEIGHT)
    y = engine.cursor.y
    segment = engine.inner_width / 3
    for i, color in enumerate(t.accents):
        engine.rect(engine.left + i * segment, y + 2.0, segment, 1.5, color, role="footer-bar")

    owner = content.name or "Portfolio"
    engine.text(f"{owner} · Generated from portfolio", engine.center, y + 8.5, 7.5, t.muted,
                align="center", role="attribution")
    engine.advance(FOOTER_HEIGHT)
