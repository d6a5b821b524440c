"""
Build orchestrator: 단일 빌드 파이프라인.

순서 (각 단계 실패 시 즉시 중단, 재시도 없음):
1. 템플릿 캐시 무효화 (핫 리로드)
2. 데이터 소스 로드 + 병합
3. 템플릿 로드 + export 해석
4. 렌더 + minify
5. 출력 경로 정규화 + 저장

저장이 마지막 단계이므로 실패 시 부분 출력이 남지 않음.

동시성:
- 템플릿 레지스트리/sys.modules 는 프로세스 전역 공유 상태
- 빌드 전체를 전역 빌드 락(FileLock)으로 감싸 동시 빌드 간 경합 차단
  (스레드, 워커 프로세스 모두)
"""

import logging
from collections.abc import Generator, Iterable, Mapping
from contextlib import contextmanager
from typing import Any

from filelock import FileLock, Timeout

from src.core.datasource import DataSourceResolver
from src.core.settings import StorageRoots
from src.domain.constants import DEFAULT_LOCK_TIMEOUT
from src.domain.errors import BuildLockTimeout, ErrorCodes, ForgeError
from src.domain.schemas import BuildRequest, BuildResult, DataSourceSpec
from src.render.html import HtmlRenderer
from src.render.output import OutputWriter
from src.templates.registry import TemplateRegistry

logger = logging.getLogger(__name__)


def coerce_data_sources(
    data_sources: Iterable[DataSourceSpec | Mapping[str, Any]] | None,
) -> list[DataSourceSpec]:
    """요청 dict 또는 DataSourceSpec 목록 → DataSourceSpec 목록."""
    specs: list[DataSourceSpec] = []
    for source in data_sources or []:
        if isinstance(source, DataSourceSpec):
            specs.append(source)
        else:
            specs.append(DataSourceSpec.from_dict(dict(source)))
    return specs


class BuildOrchestrator:
    """
    단일 빌드 실행기.

    Usage:
        orchestrator = BuildOrchestrator(roots)
        result = orchestrator.build("cards/profile.py", [DataSourceSpec("team/alice.json")], "team/alice")
    """

    def __init__(
        self,
        roots: StorageRoots,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
        renderer: HtmlRenderer | None = None,
    ):
        """
        Args:
            roots: 샌드박스 루트 (templates/data/output/locks)
            lock_timeout: 전역 빌드 락 대기 시간 (초)
            renderer: HTML 렌더러 (기본: HtmlRenderer())
        """
        self.roots = roots
        self.lock_timeout = lock_timeout
        self.data_resolver = DataSourceResolver(roots.data)
        self.registry = TemplateRegistry(roots.templates)
        self.renderer = renderer or HtmlRenderer()
        self.writer = OutputWriter(roots.output)

    @contextmanager
    def build_lock(self) -> Generator[None, None, None]:
        """
        전역 빌드 락 획득.

        Raises:
            BuildLockTimeout: lock_timeout 내 획득 실패
        """
        lock_path = self.roots.build_lock_path
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(lock_path, timeout=self.lock_timeout)

        try:
            lock.acquire()
        except Timeout:
            raise BuildLockTimeout(
                ErrorCodes.BUILD_LOCK_TIMEOUT,
                "Another build is in progress",
                timeout=self.lock_timeout,
            ) from None

        try:
            yield
        finally:
            lock.release()

    def build(
        self,
        template_path: str,
        data_sources: Iterable[DataSourceSpec | Mapping[str, Any]] | None,
        output_name: str,
    ) -> BuildResult:
        """
        단일 빌드 실행.

        Args:
            template_path: templates/ 기준 템플릿 경로
            data_sources: 병합할 데이터 소스 (순서대로, 뒤가 우선)
            output_name: output/ 기준 출력 경로 (.html 파일 또는 디렉터리)

        Returns:
            BuildResult (output/ 기준 상대 경로)

        Raises:
            ForgeError: 각 단계의 에러 그대로 전파
        """
        specs = coerce_data_sources(data_sources)
        logger.info(f"Building {template_path} -> {output_name} ({len(specs)} data source(s))")

        with self.build_lock():
            self.registry.invalidate()
            props = self.data_resolver.resolve(specs)
            resolved = self.registry.load(template_path)
            html = self.renderer.render(resolved, props)
            final_path = self.writer.write(output_name, html)

        logger.info(f"Built {final_path}")
        return BuildResult(path=final_path)

    def execute(self, request: BuildRequest) -> BuildResult:
        """BuildRequest 실행 (API/CLI/배치 공통 진입점)."""
        return self.build(request.template_path, request.data_sources, request.output_name)


# =============================================================================
# Caller Contracts
# =============================================================================

def run_build(
    orchestrator: BuildOrchestrator,
    template_path: str,
    data_sources: Iterable[DataSourceSpec | Mapping[str, Any]] | None,
    output_name: str,
) -> dict[str, Any]:
    """
    RunBuild: {path} 또는 {error}.

    ForgeError 외의 예외(예: minify 실패)도 error 로 변환.
    """
    try:
        result = orchestrator.execute(
            BuildRequest(template_path, output_name, coerce_data_sources(data_sources))
        )
    except ForgeError as e:
        logger.error(f"Build failed: {e}")
        return {"error": e.message, "code": e.code}
    except Exception as e:
        logger.error(f"Build failed: {e}", exc_info=True)
        return {"error": str(e)}
    return result.to_dict()
