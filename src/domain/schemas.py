"""
Data schemas for the build engine.

규칙:
- 모든 경로 필드는 상대 경로 (절대 경로는 엔진 내부 전용)
- 배치 결과: 발견된 데이터 파일 1개당 결과 1개 (len(report) == len(files))
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# =============================================================================
# Storage Type
# =============================================================================

class StorageType(str, Enum):
    """
    파일 관리 대상 루트 구분자.

    내용으로 추론하지 않고 호출자가 명시적으로 지정.
    """
    TEMPLATES = "templates"
    DATA = "data"

    @classmethod
    def parse(cls, value: str | None) -> "StorageType":
        """요청 값 → StorageType ('data' 외에는 templates)."""
        return cls.DATA if value == cls.DATA.value else cls.TEMPLATES


# =============================================================================
# Build Schemas
# =============================================================================

@dataclass
class DataSourceSpec:
    """입력 데이터 파일 1개 + 선택적 하위 키."""
    filename: str | None = None
    key: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DataSourceSpec":
        return cls(
            filename=data.get("filename") or None,
            key=data.get("key") or None,
        )


@dataclass
class BuildRequest:
    """단일 빌드 파라미터."""
    template_path: str
    output_name: str
    data_sources: list[DataSourceSpec] = field(default_factory=list)


@dataclass
class BatchBuildRequest:
    """배치 빌드 파라미터: data_folder 내 JSON 파일마다 BuildRequest 1개."""
    template_path: str
    data_folder: str
    output_base: str


@dataclass
class BuildResult:
    """빌드 결과 (output 루트 기준 상대 경로)."""
    path: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path}


class BatchItemStatus(str, Enum):
    """배치 항목 처리 상태."""
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class BatchItemResult:
    """배치 항목 1개의 처리 결과."""
    file: str
    status: BatchItemStatus
    path: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == BatchItemStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용 (None 필드 제외)."""
        result: dict[str, Any] = {
            "file": self.file,
            "status": self.status.value,
        }
        if self.path is not None:
            result["path"] = self.path
        if self.error is not None:
            result["error"] = self.error
        return result
