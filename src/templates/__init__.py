"""
Templates layer: 템플릿 로드 + 워크스페이스 파일 관리.

역할:
- 템플릿 레지스트리, export 해석, 핫 리로드 (registry.py)
- templates/, data/ 트리 CRUD + 스키마 사이드카 (manager.py)

주의: 폴더 구분
- src/templates/ → 코드 (이 모듈)
- storage/templates/ → 사용자 템플릿 저장소
"""

from .manager import WorkspaceManager
from .registry import (
    ExportShape,
    ResolvedTemplate,
    TemplateNotFound,
    TemplateRegistry,
    resolve_export,
)

__all__ = [
    # manager
    "WorkspaceManager",
    # registry
    "TemplateRegistry",
    "TemplateNotFound",
    "ResolvedTemplate",
    "ExportShape",
    "resolve_export",
]
