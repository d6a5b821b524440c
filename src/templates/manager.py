"""
워크스페이스 관리자: templates/, data/ 트리 파일 CRUD.

규칙:
- 모든 경로는 StorageType 으로 선택한 루트 기준 (내용으로 추론 금지)
- 모든 접근은 resolve_safe_path 통과
- 루트 자체 삭제 금지
- JSON 파일: 읽을 때 파싱, dict/list 쓰기 시 4칸 들여쓰기 직렬화
"""

import json
import logging
import re
import shutil
from pathlib import Path
from typing import Any

from src.core.fileio import atomic_write_json, atomic_write_text, read_json
from src.core.sandbox import resolve_safe_path
from src.core.settings import StorageRoots
from src.domain.constants import JSON_SUFFIX, JSON_WRITE_INDENT, SCHEMA_SUFFIX, TEMPLATE_SUFFIXES
from src.domain.errors import ErrorCodes, NotFound, ParseError, SecurityViolation
from src.domain.schemas import StorageType

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX_PATTERN = re.compile(
    "(" + "|".join(re.escape(s) for s in TEMPLATE_SUFFIXES) + ")$"
)


class WorkspaceManager:
    """
    템플릿/데이터 파일 관리자.

    구조:
    storage/
    ├── templates/   # *.py, *.jinja, *.html + *.schema.json 사이드카
    └── data/        # *.json
    """

    def __init__(self, roots: StorageRoots):
        self.roots = roots

    def _resolve(self, storage_type: StorageType, file_path: str) -> Path:
        return resolve_safe_path(self.roots.root_for(storage_type), file_path)

    # =========================================================================
    # Tree
    # =========================================================================

    def tree(self, storage_type: StorageType) -> list[dict[str, Any]]:
        """루트 전체 트리 (폴더 먼저, 이름 순)."""
        root = self.roots.root_for(storage_type)
        if not root.exists():
            return []
        return self._walk(root, "")

    def _walk(self, directory: Path, relative: str) -> list[dict[str, Any]]:
        entries = sorted(directory.iterdir(), key=lambda p: (not p.is_dir(), p.name))
        structure: list[dict[str, Any]] = []
        for entry in entries:
            item_path = f"{relative}/{entry.name}" if relative else entry.name
            if entry.is_dir():
                structure.append({
                    "name": entry.name,
                    "path": item_path,
                    "type": "folder",
                    "children": self._walk(entry, item_path),
                })
            else:
                structure.append({
                    "name": entry.name,
                    "path": item_path,
                    "type": "file",
                })
        return structure

    # =========================================================================
    # CRUD
    # =========================================================================

    def read(self, storage_type: StorageType, file_path: str) -> Any:
        """
        파일 읽기.

        Returns:
            .json → 파싱된 값, 그 외 → 문자열

        Raises:
            NotFound: 파일 없음
            ParseError: JSON 파싱 실패
        """
        full_path = self._resolve(storage_type, file_path)
        try:
            if file_path.endswith(JSON_SUFFIX):
                return read_json(full_path)
            return full_path.read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFound(
                ErrorCodes.FILE_NOT_FOUND,
                f"File not found: {file_path}",
                type=storage_type.value,
                path=file_path,
            ) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(
                ErrorCodes.DATA_PARSE_ERROR,
                f"Cannot decode {file_path}: {e}",
                type=storage_type.value,
                path=file_path,
            ) from e

    def write(
        self,
        storage_type: StorageType,
        file_path: str,
        content: Any = None,
        is_folder: bool = False,
    ) -> Path:
        """
        파일 쓰기 또는 폴더 생성.

        - .json + dict/list → JSON 직렬화 (다른 확장자에 dict/list → ParseError)
        - 내용 없음 → .json 은 "{}", 그 외 ""

        Returns:
            저장된 절대 경로
        """
        full_path = self._resolve(storage_type, file_path)

        if is_folder:
            full_path.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created folder {storage_type.value}/{file_path}")
            return full_path

        is_json = file_path.endswith(JSON_SUFFIX)
        if isinstance(content, (dict, list)):
            if not is_json:
                raise ParseError(
                    ErrorCodes.CONTENT_NOT_TEXT,
                    f"Structured content can only be written to a .json file: {file_path}",
                    type=storage_type.value,
                    path=file_path,
                )
            atomic_write_json(full_path, content, indent=JSON_WRITE_INDENT)
        elif content:
            atomic_write_text(full_path, str(content))
        else:
            atomic_write_text(full_path, "{}" if is_json else "")

        logger.info(f"Wrote {storage_type.value}/{file_path}")
        return full_path

    def delete(self, storage_type: StorageType, file_path: str) -> bool:
        """
        파일 또는 폴더(하위 전체) 삭제.

        Returns:
            True if 삭제됨, False if 원래 없음

        Raises:
            SecurityViolation: 루트 자체 삭제 시도
        """
        root = self.roots.root_for(storage_type).resolve()
        full_path = self._resolve(storage_type, file_path)
        if full_path == root:
            raise SecurityViolation(
                ErrorCodes.SECURITY_VIOLATION,
                "Refusing to delete storage root",
                type=storage_type.value,
                path=file_path,
            )

        if full_path.is_dir() and not full_path.is_symlink():
            shutil.rmtree(full_path)
        elif full_path.exists() or full_path.is_symlink():
            full_path.unlink()
        else:
            return False

        logger.info(f"Deleted {storage_type.value}/{file_path}")
        return True

    # =========================================================================
    # Schema Sidecar
    # =========================================================================

    def find_schema(self, template_path: str) -> Any | None:
        """
        템플릿 옆 스키마 사이드카 로드.

        cards/profile.py → cards/profile.schema.json

        Returns:
            스키마 (없으면 None)
        """
        schema_path = TEMPLATE_SUFFIX_PATTERN.sub(SCHEMA_SUFFIX, template_path)
        if schema_path == template_path:
            return None

        full_path = self._resolve(StorageType.TEMPLATES, schema_path)
        if not full_path.is_file():
            return None
        return self.read(StorageType.TEMPLATES, schema_path)
