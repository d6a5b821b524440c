"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app

저장소 위치: default.yaml 의 storage.* (FORGE_STORAGE_ROOT 로 덮어쓰기 가능)
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.app.routes import build, files
from src.core.batch import BatchOrchestrator
from src.core.build import BuildOrchestrator
from src.core.settings import StorageRoots, get_lock_timeout, load_config
from src.domain.errors import (
    BuildLockTimeout,
    ForgeError,
    NotFound,
    ParseError,
    SecurityViolation,
)
from src.templates.manager import WorkspaceManager

logger = logging.getLogger(__name__)

# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 저장소 디렉터리 생성, 빌드 엔진 구성
    """
    app.state.config = load_config()
    roots = StorageRoots.from_config(app.state.config)
    roots.ensure()

    app.state.roots = roots
    app.state.orchestrator = BuildOrchestrator(
        roots,
        lock_timeout=get_lock_timeout(app.state.config),
    )
    app.state.batch = BatchOrchestrator(app.state.orchestrator)
    app.state.workspace = WorkspaceManager(roots)
    logger.info(f"Storage: templates={roots.templates} data={roots.data} output={roots.output}")

    yield


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Template Forge",
    description="JSON 데이터 + 템플릿 → 정적 HTML 빌드",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# Error Handling
# =============================================================================

def error_status(error: ForgeError) -> int:
    """ForgeError → HTTP 상태 코드."""
    if isinstance(error, SecurityViolation):
        return 403
    if isinstance(error, NotFound):
        return 404
    if isinstance(error, ParseError):
        return 422
    if isinstance(error, BuildLockTimeout):
        return 409
    return 500


@app.exception_handler(ForgeError)
async def forge_error_handler(request: Request, exc: ForgeError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=error_status(exc),
        content={"error": exc.message, "code": exc.code},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": str(exc)})


# =============================================================================
# Routes
# =============================================================================

app.include_router(build.api_router, prefix="/api/build", tags=["Build API"])
app.include_router(files.meta_router, prefix="/api/meta", tags=["Meta API"])
app.include_router(files.fs_router, prefix="/api/fs", tags=["Files API"])
app.include_router(files.preview_router, prefix="/preview", tags=["Preview"])


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, Any]:
    return {
        "message": "Template Forge",
        "endpoints": {
            "build": "/api/build",
            "meta": "/api/meta",
            "files": "/api/fs",
            "preview": "/preview",
        },
    }


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    server = load_config().get("server", {}) or {}
    uvicorn.run(
        "src.app.main:app",
        host=server.get("host", "127.0.0.1"),
        port=int(os.environ.get("PORT", server.get("port", 3000))),
        reload=True,
    )
