"""
Build Routes: 단일/배치 빌드 요청.

- POST /api/build/single → 템플릿 1개 + 데이터 소스 N개 → HTML 1개
- POST /api/build/batch  → 폴더 내 JSON 파일마다 HTML 1개

에러 처리:
- 단일 빌드: ForgeError → main.py 의 예외 핸들러가 {error, code} 로 변환
- 배치 빌드: 항목별 에러는 results 에 기록, 폴더 에러만 요청 실패
"""

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict, Field

from src.core.batch import BatchOrchestrator
from src.core.build import BuildOrchestrator
from src.domain.schemas import BatchBuildRequest, BuildRequest, DataSourceSpec

api_router = APIRouter()


# =============================================================================
# Request Bodies
# =============================================================================

class DataSourceBody(BaseModel):
    filename: str | None = None
    key: str | None = None


class SingleBuildBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    template_path: str = Field(alias="templatePath")
    data_sources: list[DataSourceBody] = Field(default_factory=list, alias="dataSources")
    output_name: str = Field(alias="outputName")

    def to_request(self) -> BuildRequest:
        return BuildRequest(
            template_path=self.template_path,
            output_name=self.output_name,
            data_sources=[DataSourceSpec(filename=s.filename, key=s.key) for s in self.data_sources],
        )


class BatchBuildBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    template_path: str = Field(alias="templatePath")
    data_folder: str = Field(alias="dataFolder")
    output_base: str = Field(alias="outputBase")

    def to_request(self) -> BatchBuildRequest:
        return BatchBuildRequest(self.template_path, self.data_folder, self.output_base)


# =============================================================================
# API Routes
# =============================================================================

@api_router.post("/single")
async def build_single(request: Request, body: SingleBuildBody) -> dict[str, Any]:
    """
    단일 빌드.

    Returns:
        {"success": True, "path": "reports/index.html"}
    """
    orchestrator: BuildOrchestrator = request.app.state.orchestrator

    result = orchestrator.execute(body.to_request())
    return {"success": True, "path": result.path}


@api_router.post("/batch")
async def build_batch(request: Request, body: BatchBuildBody) -> dict[str, Any]:
    """
    배치 빌드.

    Returns:
        {"success": True, "results": [{file, status, path | error}, ...]}
    """
    batch: BatchOrchestrator = request.app.state.batch

    results = batch.execute(body.to_request())
    return {"success": True, "results": [r.to_dict() for r in results]}
