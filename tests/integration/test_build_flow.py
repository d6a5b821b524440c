"""
test_build_flow.py - 빌드 흐름 통합 테스트

검증 포인트:
- 워크스페이스 편집 → 빌드 → 출력 (서버 재시작 없이 수정 반영)
- 헬퍼 모듈을 import 하는 템플릿의 핫 리로드
- 배치 빌드 항목 격리 + 이후 단일 빌드 정상 동작
"""

import shutil
from pathlib import Path

import pytest

from src.core.batch import BatchOrchestrator
from src.core.build import BuildOrchestrator
from src.domain.errors import TemplateLoadError
from src.domain.schemas import DataSourceSpec, StorageType
from src.templates.manager import WorkspaceManager

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def workspace(roots) -> WorkspaceManager:
    return WorkspaceManager(roots)


def read_output(output_root: Path, relative_path: str) -> str:
    return (output_root / relative_path).read_text(encoding="utf-8")


# =============================================================================
# Hot Reload
# =============================================================================


class TestHotReload:
    """템플릿 수정이 다음 빌드에 반영."""

    def test_edit_between_builds(self, workspace, orchestrator, roots):
        workspace.write(StorageType.DATA, "page.json", {"title": "Hi"})
        workspace.write(
            StorageType.TEMPLATES,
            "page.py",
            "def App(props):\n    return f\"<h1>V1 {props['title']}</h1>\"\n",
        )
        first = orchestrator.build("page.py", [DataSourceSpec("page.json")], "page")
        assert read_output(roots.output, first.path) == "<h1>V1 Hi</h1>"

        workspace.write(
            StorageType.TEMPLATES,
            "page.py",
            "def App(props):\n    return f\"<h1>V2 {props['title']}</h1>\"\n",
        )
        second = orchestrator.build("page.py", [DataSourceSpec("page.json")], "page")

        assert second.path == first.path
        assert read_output(roots.output, second.path) == "<h1>V2 Hi</h1>"

    def test_helper_edit_between_builds(self, workspace, orchestrator, roots):
        workspace.write(StorageType.TEMPLATES, "forge_flow_layout.py", "def wrap(body):\n    return f'<main>{body}</main>'\n")
        workspace.write(
            StorageType.TEMPLATES,
            "home.py",
            "from forge_flow_layout import wrap\n\n"
            "def App(props):\n"
            "    return wrap('home')\n",
        )
        orchestrator.build("home.py", [], "home.html")
        assert read_output(roots.output, "home.html") == "<main>home</main>"

        workspace.write(StorageType.TEMPLATES, "forge_flow_layout.py", "def wrap(body):\n    return f'<article>{body}</article>'\n")
        orchestrator.build("home.py", [], "home.html")

        assert read_output(roots.output, "home.html") == "<article>home</article>"

    def test_broken_template_then_fixed(self, workspace, orchestrator, roots):
        workspace.write(StorageType.TEMPLATES, "page.py", "def App(props):\n    return '<p>ok</p>'\n")
        orchestrator.build("page.py", [], "page.html")

        workspace.write(StorageType.TEMPLATES, "page.py", "def App(props)\n")
        with pytest.raises(TemplateLoadError):
            orchestrator.build("page.py", [], "page.html")
        # 실패한 빌드는 이전 출력을 건드리지 않음
        assert read_output(roots.output, "page.html") == "<p>ok</p>"

        workspace.write(StorageType.TEMPLATES, "page.py", "def App(props):\n    return '<p>fixed</p>'\n")
        orchestrator.build("page.py", [], "page.html")

        assert read_output(roots.output, "page.html") == "<p>fixed</p>"

    def test_deleted_template_not_served_from_cache(self, workspace, orchestrator):
        workspace.write(StorageType.TEMPLATES, "gone.py", "def App(props):\n    return ''\n")
        orchestrator.build("gone.py", [], "gone.html")

        workspace.delete(StorageType.TEMPLATES, "gone.py")

        with pytest.raises(TemplateLoadError):
            orchestrator.build("gone.py", [], "gone.html")


# =============================================================================
# Batch
# =============================================================================


class TestBatchFlow:
    """배치 빌드 흐름."""

    def test_batch_then_single(self, workspace, roots):
        orchestrator = BuildOrchestrator(roots, lock_timeout=2.0)
        batch = BatchOrchestrator(orchestrator)

        workspace.write(
            StorageType.TEMPLATES,
            "cards/profile.jinja",
            "<section><h2>{{ name }}</h2><p>{{ role }}</p></section>",
        )
        workspace.write(StorageType.DATA, "team/alice.json", {"name": "Alice", "role": "Lead"})
        workspace.write(StorageType.DATA, "team/bob.json", "{ broken")
        workspace.write(StorageType.DATA, "team/carol.json", {"name": "Carol", "role": "Dev"})

        results = batch.build_all("cards/profile.jinja", "team", "team")

        assert [(r.file, r.ok) for r in results] == [
            ("alice.json", True),
            ("bob.json", False),
            ("carol.json", True),
        ]
        assert read_output(roots.output, "team/carol/index.html") == (
            "<section><h2>Carol</h2><p>Dev</p></section>"
        )

        single = orchestrator.build(
            "cards/profile.jinja",
            [DataSourceSpec("team/alice.json"), DataSourceSpec("team/carol.json")],
            "team/merged.html",
        )
        assert read_output(roots.output, single.path) == "<section><h2>Carol</h2><p>Dev</p></section>"


# =============================================================================
# Shipped Example
# =============================================================================

REPO_STORAGE = Path(__file__).resolve().parents[2] / "storage"


class TestShippedExample:
    """저장소에 포함된 예제 템플릿/데이터 배치 빌드."""

    def test_example_cards_build(self, roots):
        shutil.copytree(REPO_STORAGE / "templates" / "example", roots.templates / "example")
        shutil.copytree(REPO_STORAGE / "data" / "example", roots.data / "example")
        batch = BatchOrchestrator(BuildOrchestrator(roots, lock_timeout=2.0))

        results = batch.build_all("example/card.py", "example/team", "team")

        assert [(r.file, r.ok) for r in results] == [("alice.json", True), ("bob.json", True)]
        html = read_output(roots.output, "team/alice/index.html")
        assert "<h1>Alice</h1>" in html
        assert "<li>fastapi</li>" in html
