"""
Pytest fixtures for the build engine tests.

구성:
- storage/ 구조를 tmp_path 아래에 생성 (templates/, data/, output/, .locks/)
- 템플릿/데이터 파일 작성 헬퍼
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from src.core.batch import BatchOrchestrator
from src.core.build import BuildOrchestrator
from src.core.settings import StorageRoots

# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    """테스트용 storage/ 루트."""
    return tmp_path / "storage"


@pytest.fixture
def roots(storage_root: Path) -> StorageRoots:
    """디렉터리가 생성된 StorageRoots."""
    roots = StorageRoots.from_base(storage_root)
    roots.ensure()
    return roots


@pytest.fixture
def write_template(roots: StorageRoots) -> Callable[[str, str], Path]:
    """templates/ 아래 템플릿 파일 작성."""

    def _write(relative_path: str, source: str) -> Path:
        path = roots.templates / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_data(roots: StorageRoots) -> Callable[[str, Any], Path]:
    """data/ 아래 JSON 파일 작성 (문자열이면 그대로 기록)."""

    def _write(relative_path: str, content: Any) -> Path:
        path = roots.data / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# =============================================================================
# Engine Fixtures
# =============================================================================

@pytest.fixture
def orchestrator(roots: StorageRoots) -> BuildOrchestrator:
    """BuildOrchestrator (락 대기 짧게)."""
    return BuildOrchestrator(roots, lock_timeout=2.0)


@pytest.fixture
def batch(orchestrator: BuildOrchestrator) -> BatchOrchestrator:
    return BatchOrchestrator(orchestrator)


@pytest.fixture
def title_template(write_template: Callable[[str, str], Path]) -> str:
    """props.title 을 <div> 로 감싸는 템플릿."""
    write_template(
        "title.py",
        "def App(props):\n"
        "    return f\"<div>{props['title']}</div>\"\n",
    )
    return "title.py"
