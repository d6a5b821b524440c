"""
Files Routes: 템플릿/데이터 트리 관리 + 미리보기.

- GET  /api/meta         → templates/, data/ 트리
- POST /api/meta/schema  → 템플릿 스키마 사이드카
- POST /api/fs/read      → 파일 읽기 (.json 은 파싱)
- POST /api/fs/write     → 파일 쓰기 / 폴더 생성
- POST /api/fs/delete    → 파일/폴더 삭제
- GET  /preview/{path}   → output/ 정적 파일 (디렉터리는 index.html)
"""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse
from pydantic import BaseModel, ConfigDict, Field

from src.core.sandbox import resolve_safe_path
from src.domain.constants import INDEX_FILENAME
from src.domain.errors import ErrorCodes, NotFound
from src.domain.schemas import StorageType
from src.templates.manager import WorkspaceManager

meta_router = APIRouter()
fs_router = APIRouter()
preview_router = APIRouter()


# =============================================================================
# Request Bodies
# =============================================================================

class SchemaBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    template_path: str = Field(alias="templatePath")


class FileBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str | None = None
    file_path: str = Field(alias="filePath")

    @property
    def storage_type(self) -> StorageType:
        return StorageType.parse(self.type)


class WriteBody(FileBody):
    content: Any = None
    is_folder: bool = Field(default=False, alias="isFolder")


# =============================================================================
# Meta
# =============================================================================

@meta_router.get("")
async def get_meta(request: Request) -> dict[str, Any]:
    """templates/, data/ 트리."""
    workspace: WorkspaceManager = request.app.state.workspace
    return {
        "templates": workspace.tree(StorageType.TEMPLATES),
        "dataFiles": workspace.tree(StorageType.DATA),
    }


@meta_router.post("/schema")
async def get_schema(request: Request, body: SchemaBody) -> dict[str, Any]:
    """스키마 사이드카 (없으면 null)."""
    workspace: WorkspaceManager = request.app.state.workspace
    return {"schema": workspace.find_schema(body.template_path)}


# =============================================================================
# File System
# =============================================================================

@fs_router.post("/read")
async def read_file(request: Request, body: FileBody) -> dict[str, Any]:
    workspace: WorkspaceManager = request.app.state.workspace
    return {"content": workspace.read(body.storage_type, body.file_path)}


@fs_router.post("/write")
async def write_file(request: Request, body: WriteBody) -> dict[str, Any]:
    workspace: WorkspaceManager = request.app.state.workspace
    workspace.write(body.storage_type, body.file_path, body.content, body.is_folder)
    return {"success": True}


@fs_router.post("/delete")
async def delete_file(request: Request, body: FileBody) -> dict[str, Any]:
    workspace: WorkspaceManager = request.app.state.workspace
    workspace.delete(body.storage_type, body.file_path)
    return {"success": True}


# =============================================================================
# Preview
# =============================================================================

@preview_router.get("/{file_path:path}")
async def preview(request: Request, file_path: str) -> FileResponse:
    """빌드 결과 미리보기."""
    output_root = request.app.state.roots.output
    full_path = resolve_safe_path(output_root, file_path)
    if full_path.is_dir():
        full_path = full_path / INDEX_FILENAME

    if not full_path.is_file():
        raise NotFound(
            ErrorCodes.FILE_NOT_FOUND,
            f"Preview not found: {file_path}",
            path=file_path,
        )
    return FileResponse(full_path)
