"""
Batch orchestrator: 폴더 내 JSON 파일마다 단일 빌드 실행.

규칙:
- 대상: data_folder 바로 아래(비재귀)의 *.json 파일, 이름 순
- 항목별 출력 경로: output_base/<파일명에서 .json 제거>
- 항목 실패는 결과 레코드로 기록, 다음 항목 계속 (격리)
- 배치 호출 자체의 실패는 폴더 해석/목록 조회 실패뿐
- 순차 처리 (워커 풀/팬아웃 없음)
"""

import logging
import posixpath
from pathlib import Path
from typing import Any

from src.core.build import BuildOrchestrator
from src.core.sandbox import resolve_safe_path
from src.domain.constants import JSON_SUFFIX
from src.domain.errors import ErrorCodes, ForgeError, NotFound
from src.domain.schemas import (
    BatchBuildRequest,
    BatchItemResult,
    BatchItemStatus,
    BuildRequest,
    DataSourceSpec,
)

logger = logging.getLogger(__name__)


def discover_data_files(data_root: Path, data_folder: str) -> list[str]:
    """
    data_folder 의 JSON 파일 이름 목록 (이름 순).

    Raises:
        SecurityViolation: 루트 밖 경로
        NotFound: 폴더 없음 / 목록 조회 실패
    """
    folder = resolve_safe_path(data_root, data_folder)
    try:
        entries = list(folder.iterdir())
    except OSError as e:
        raise NotFound(
            ErrorCodes.FOLDER_NOT_FOUND,
            f"Cannot list data folder {data_folder}: {e}",
            folder=data_folder,
        ) from e

    return sorted(
        entry.name
        for entry in entries
        if entry.name.endswith(JSON_SUFFIX) and entry.is_file()
    )


def plan_batch(data_root: Path, request: BatchBuildRequest) -> list[BuildRequest]:
    """
    BatchBuildRequest → 데이터 파일별 BuildRequest 목록 (이름 순).

    data/<data_folder>/alice.json → output/<output_base>/alice/index.html

    Raises:
        SecurityViolation: 루트 밖 경로
        NotFound: 폴더 없음 / 목록 조회 실패
    """
    return [
        BuildRequest(
            template_path=request.template_path,
            output_name=posixpath.join(request.output_base, filename[: -len(JSON_SUFFIX)]),
            data_sources=[DataSourceSpec(filename=posixpath.join(request.data_folder, filename))],
        )
        for filename in discover_data_files(data_root, request.data_folder)
    ]


class BatchOrchestrator:
    """
    배치 빌드 실행기.

    Usage:
        batch = BatchOrchestrator(orchestrator)
        results = batch.build_all("cards/profile.py", "team", "team")
    """

    def __init__(self, orchestrator: BuildOrchestrator):
        self.orchestrator = orchestrator

    def build_all(
        self,
        template_path: str,
        data_folder: str,
        output_base: str,
    ) -> list[BatchItemResult]:
        """
        폴더 내 모든 JSON 파일에 대해 빌드.

        Args:
            template_path: templates/ 기준 템플릿 경로
            data_folder: data/ 기준 폴더 경로
            output_base: output/ 기준 출력 폴더

        Returns:
            파일별 결과 (발견 순서, 파일 수와 동일한 길이)
        """
        return self.execute(BatchBuildRequest(template_path, data_folder, output_base))

    def execute(self, request: BatchBuildRequest) -> list[BatchItemResult]:
        """BatchBuildRequest 실행."""
        requests = plan_batch(self.orchestrator.roots.data, request)
        logger.info(f"Batch build: {len(requests)} data file(s) in {request.data_folder or '.'}")

        results: list[BatchItemResult] = []
        for item in requests:
            filename = posixpath.basename(item.data_sources[0].filename)

            try:
                built = self.orchestrator.execute(item)
            except Exception as e:
                message = e.message if isinstance(e, ForgeError) else str(e)
                logger.warning(f"Batch item {filename} failed: {e}")
                results.append(
                    BatchItemResult(
                        file=filename,
                        status=BatchItemStatus.ERROR,
                        error=message,
                    )
                )
                continue

            results.append(
                BatchItemResult(
                    file=filename,
                    status=BatchItemStatus.SUCCESS,
                    path=built.path,
                )
            )

        failed = sum(1 for r in results if not r.ok)
        logger.info(f"Batch done: {len(results) - failed} succeeded, {failed} failed")
        return results


def run_batch_build(
    batch: BatchOrchestrator,
    template_path: str,
    data_folder: str,
    output_base: str,
) -> dict[str, Any]:
    """
    RunBatchBuild: {results} 또는 {error}.

    run_build 와 같이 ForgeError 외의 예외도 error 로 변환.
    """
    try:
        results = batch.execute(BatchBuildRequest(template_path, data_folder, output_base))
    except ForgeError as e:
        logger.error(f"Batch build failed: {e}")
        return {"error": e.message, "code": e.code}
    except Exception as e:
        logger.error(f"Batch build failed: {e}", exc_info=True)
        return {"error": str(e)}
    return {"results": [r.to_dict() for r in results]}
