"""
설정 로드 + 저장소 루트 구성.

default.yaml (프로젝트 루트) → StorageRoots.
환경 변수 FORGE_STORAGE_ROOT 가 있으면 storage.root 를 덮어씀.

모든 컴포넌트는 생성 시 StorageRoots 를 주입받음 (전역 경로 상수 없음).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from src.domain.constants import (
    BUILD_LOCK_FILENAME,
    DEFAULT_DATA_DIR,
    DEFAULT_LOCK_DIR,
    DEFAULT_LOCK_TIMEOUT,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_STORAGE_DIR,
    DEFAULT_TEMPLATES_DIR,
)
from src.domain.schemas import StorageType

PROJECT_ROOT = Path(__file__).parent.parent.parent
STORAGE_ROOT_ENV = "FORGE_STORAGE_ROOT"


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드 (없으면 빈 설정)."""
    if config_path is None:
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] | None = yaml.safe_load(f)
        return data or {}


@dataclass(frozen=True)
class StorageRoots:
    """
    샌드박스 루트 묶음.

    Attributes:
        templates: 템플릿 루트
        data: JSON 데이터 루트
        output: 빌드 결과 루트
        locks: 전역 빌드 락 디렉터리 (세 루트 바깥)
    """
    templates: Path
    data: Path
    output: Path
    locks: Path

    @classmethod
    def from_base(cls, base: Path) -> "StorageRoots":
        """base/ 아래 기본 구조로 구성 (테스트용)."""
        base = Path(base).resolve()
        return cls(
            templates=base / DEFAULT_TEMPLATES_DIR,
            data=base / DEFAULT_DATA_DIR,
            output=base / DEFAULT_OUTPUT_DIR,
            locks=base / DEFAULT_LOCK_DIR,
        )

    @classmethod
    def from_config(
        cls,
        config: dict,
        project_root: Path = PROJECT_ROOT,
    ) -> "StorageRoots":
        """
        설정에서 루트 구성.

        상대 경로 해석:
        - storage.root → project_root 기준
        - templates/data/output/lock_dir → storage.root 기준
        """
        storage = config.get("storage", {}) or {}
        base = Path(
            os.environ.get(STORAGE_ROOT_ENV)
            or storage.get("root", DEFAULT_STORAGE_DIR)
        )
        if not base.is_absolute():
            base = project_root / base
        base = base.resolve()

        return cls(
            templates=(base / storage.get("templates", DEFAULT_TEMPLATES_DIR)).resolve(),
            data=(base / storage.get("data", DEFAULT_DATA_DIR)).resolve(),
            output=(base / storage.get("output", DEFAULT_OUTPUT_DIR)).resolve(),
            locks=(base / storage.get("lock_dir", DEFAULT_LOCK_DIR)).resolve(),
        )

    @property
    def build_lock_path(self) -> Path:
        return self.locks / BUILD_LOCK_FILENAME

    def root_for(self, storage_type: StorageType) -> Path:
        """파일 관리용 루트 선택 (templates 또는 data)."""
        if storage_type == StorageType.DATA:
            return self.data
        return self.templates

    def ensure(self) -> None:
        """루트 디렉터리 생성 (시작 시 1회)."""
        for path in (self.templates, self.data, self.output, self.locks):
            path.mkdir(parents=True, exist_ok=True)


def get_lock_timeout(config: dict) -> float:
    """build.lock_timeout (초)."""
    build = config.get("build", {}) or {}
    return float(build.get("lock_timeout", DEFAULT_LOCK_TIMEOUT))
