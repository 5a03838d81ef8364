"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(sample_content, measurer):
        document = build_cv_document(sample_content, measurer, RuntimeConfig())
"""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from portfolio_cv.config import RuntimeConfig
from portfolio_cv.export import RenderCapability
from portfolio_cv.interfaces import (
    CapabilityLoadError,
    IArtifactSaver,
    IDocumentWriter,
    IRendererLoader,
    ITextMeasurer,
)
from portfolio_cv.layout import PT_TO_MM, LayoutEngine
from portfolio_cv.models import ContentModel, Document, Education, ExposureGroup, Project


# ============================================================================
# 测量与渲染 Fakes
# ============================================================================

class FixedWidthMeasurer(ITextMeasurer):
    """等宽测量器：每个字符宽 0.5em，粗体再加宽10%"""

    def __init__(self, em_ratio: float = 0.5):
        self.em_ratio = em_ratio

    def width(self, text: str, size: float, weight: str = "regular") -> float:
        w = len(text) * size * self.em_ratio * PT_TO_MM
        return w * 1.1 if weight == "bold" else w


class ExplodingMeasurer(ITextMeasurer):
    """测量即失败（模拟排版阶段异常）"""

    def width(self, text: str, size: float, weight: str = "regular") -> float:
        raise RuntimeError("measure failed")


class FakeWriter(IDocumentWriter):
    """记录写出次数，返回伪PDF字节"""

    def __init__(self):
        self.documents: list[Document] = []

    def render(self, document: Document) -> bytes:
        self.documents.append(document)
        return f"%PDF-fake pages={document.page_count}".encode()


class FakeLoader(IRendererLoader):
    """立即可用的渲染能力"""

    def __init__(self, measurer: ITextMeasurer | None = None):
        self.writer = FakeWriter()
        self.capability = RenderCapability(
            fonts=None, measurer=measurer or FixedWidthMeasurer(), writer=self.writer
        )
        self.calls = 0

    async def ensure_available(self) -> RenderCapability:
        self.calls += 1
        return self.capability


class GatedLoader(FakeLoader):
    """在 release 事件触发前挂起（模拟慢速加载）"""

    def __init__(self, measurer: ITextMeasurer | None = None):
        super().__init__(measurer)
        self.release: asyncio.Event | None = None

    async def ensure_available(self) -> RenderCapability:
        self.calls += 1
        if self.release is None:
            self.release = asyncio.Event()
        await self.release.wait()
        return self.capability


class FailingLoader(IRendererLoader):
    """加载失败"""

    async def ensure_available(self) -> RenderCapability:
        raise CapabilityLoadError("reportlab 不可用")


class RecordingSaver(IArtifactSaver):
    """内存保存器"""

    def __init__(self):
        self.saved: dict[str, bytes] = {}

    async def save(self, filename: str, data: bytes) -> Path:
        self.saved[filename] = data
        return Path("memory") / filename


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置（默认值）"""
    return RuntimeConfig()


@pytest.fixture
def measurer() -> FixedWidthMeasurer:
    return FixedWidthMeasurer()


@pytest.fixture
def engine(measurer: FixedWidthMeasurer, runtime_config: RuntimeConfig) -> LayoutEngine:
    """A4默认版式的排版引擎"""
    return LayoutEngine(measurer, page=runtime_config.page, theme=runtime_config.theme)


# ============================================================================
# Fake Fixtures
# ============================================================================

@pytest.fixture
def fake_loader() -> FakeLoader:
    return FakeLoader()


@pytest.fixture
def gated_loader() -> GatedLoader:
    return GatedLoader()


@pytest.fixture
def failing_loader() -> FailingLoader:
    return FailingLoader()


@pytest.fixture
def exploding_loader() -> FakeLoader:
    """测量器抛异常的渲染能力"""
    return FakeLoader(ExplodingMeasurer())


@pytest.fixture
def recording_saver() -> RecordingSaver:
    return RecordingSaver()


# ============================================================================
# 内容 Fixtures
# ============================================================================

@pytest.fixture
def sample_content() -> ContentModel:
    """3个技能分类(3/4/3项)、4个项目、2个工程领域、1条教育、6个兴趣标签"""
    return ContentModel(
        name="Ada Example",
        handles={"primary": "@adaexample", "secondary": "Cipher"},
        title="Software Engineer · Systems & Security",
        summary=(
            "Engineer focused on building reliable backend systems, secure network "
            "services and practical developer tooling. Enjoys taking ideas from a "
            "rough sketch to a tested, documented release."
        ),
        email="ada@example.com",
        links={"github": "https://github.com/adaexample", "linkedin": "https://linkedin.com/in/ada"},
        cv_filename="Ada_Example_CV.pdf",
        skills={
            "Languages": {"Python": 90, "Go": 70, "TypeScript": 75},
            "Infrastructure": {"Docker": 85, "Kubernetes": 65, "Terraform": 60, "Linux": 88},
            "Security": {"Threat Modeling": 70, "OWASP": 80, "Burp Suite": 62},
        },
        projects=[
            Project(
                title="Distributed Log Pipeline",
                subtitle="Streaming ingestion",
                status="Completed",
                stack=["Python", "Kafka", "ClickHouse"],
                bullets=[
                    "Ingested two million events per minute with exactly-once delivery.",
                    "Cut query latency by moving hot aggregates into materialized views.",
                ],
            ),
            Project(
                title="Zero-Trust Access Gateway",
                subtitle="Identity-aware proxy",
                status="In Progress",
                stack=["Go", "OIDC"],
                bullets=[
                    "Replaced VPN access with per-request identity checks.",
                    "Added device posture signals to access decisions.",
                    "Wrote an audit trail exporter for compliance reviews.",
                ],
            ),
            Project(
                title="Portfolio Site",
                subtitle="Personal website",
                status="Live",
                stack=["React", "Vite"],
                bullets=[
                    "Designed a dark theme with gradient accents.",
                    "Built a programmatic CV export that mirrors the site content.",
                ],
            ),
            Project(
                title="Home Lab Automation",
                subtitle="Infrastructure as code",
                status="Ongoing",
                stack=["Ansible", "Proxmox"],
                bullets=[
                    "Provisioned every service from version-controlled playbooks.",
                    "Automated nightly backups with restore drills.",
                ],
            ),
        ],
        education=Education(
            degree="BSc Computer Science",
            institution="Example University",
            track="Systems track",
            status="In Progress",
            expected_graduation="2027",
        ),
        exposure=[
            ExposureGroup(title="Networking", points=["TCP/IP", "Routing", "Packet analysis"]),
            ExposureGroup(title="Embedded Systems", points=["Microcontrollers", "Sensor interfacing"]),
        ],
        interests=[
            "Open source security tooling",
            "Distributed systems research",
            "Capture the flag competitions",
            "Home lab infrastructure",
            "Technical writing and mentoring",
            "Embedded hardware tinkering",
        ],
    )


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
