"""
템플릿 레지스트리: 템플릿 로드 + export 해석 + 핫 리로드.

핫 리로드 규칙:
- 매 빌드 시작 시 invalidate(template_root) → 이전 로드 결과 전부 폐기
- 템플릿 파일 수정이 재시작 없이 다음 빌드에 반영됨
- 빌드 간 캐시 없음 (매번 다시 로드/초기화)

Export 해석 우선순위 (닫힌 집합 ExportShape):
1. DEFAULT: 모듈 속성 `default`
2. APP: 모듈 속성 `App`
3. MODULE: 로드된 값 자체 (Python 모듈 또는 jinja2.Template)

⚠️ 동시성: invalidate() 와 load() 는 sys.modules / sys.path 를 건드리므로
동시 빌드에서 안전하지 않음. 호출자(BuildOrchestrator)가 전역 빌드 락을
잡은 상태에서만 호출할 것.
"""

import importlib
import importlib.util
import logging
import re
import sys
import threading
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import ModuleType
from typing import Any

import jinja2

from src.core.sandbox import is_within, resolve_safe_path, to_relative
from src.domain.constants import (
    APP_EXPORT_NAME,
    DEFAULT_EXPORT_NAME,
    JINJA_TEMPLATE_SUFFIXES,
    PYTHON_TEMPLATE_SUFFIXES,
)
from src.domain.errors import ErrorCodes, NotFound, TemplateLoadError

logger = logging.getLogger(__name__)

TEMPLATE_MODULE_PREFIX = "forge_template_"


class TemplateNotFound(NotFound, TemplateLoadError):
    """템플릿 파일 없음 (NotFound 이면서 로드 실패)."""


# =============================================================================
# Export Resolution
# =============================================================================

class ExportShape(str, Enum):
    """로드된 템플릿이 가질 수 있는 형태 (우선순위 순)."""
    DEFAULT = "default"
    APP = "App"
    MODULE = "module"


@dataclass(frozen=True)
class ResolvedTemplate:
    """
    해석된 템플릿.

    Attributes:
        path: 템플릿 파일 절대 경로
        shape: 선택된 export 형태
        component: 렌더 대상 (callable, 모듈, jinja2.Template)
    """
    path: Path
    shape: ExportShape
    component: Any


def resolve_export(loaded: Any) -> tuple[ExportShape, Any]:
    """
    로드된 값에서 렌더 대상 선택.

    모듈 네임스페이스에 직접 정의된 이름만 인정 (None 은 없는 것으로 취급).
    """
    namespace = vars(loaded) if isinstance(loaded, ModuleType) else {}

    if namespace.get(DEFAULT_EXPORT_NAME) is not None:
        return ExportShape.DEFAULT, namespace[DEFAULT_EXPORT_NAME]
    if namespace.get(APP_EXPORT_NAME) is not None:
        return ExportShape.APP, namespace[APP_EXPORT_NAME]
    return ExportShape.MODULE, loaded


# =============================================================================
# Loading
# =============================================================================

def _module_name(relative_path: str) -> str:
    """템플릿 상대 경로 → 고유 모듈 이름."""
    stem = relative_path.rsplit(".", 1)[0]
    return TEMPLATE_MODULE_PREFIX + re.sub(r"\W", "_", stem)


@contextmanager
def _template_import_context(template_root: Path) -> Generator[None, None, None]:
    """
    템플릿 실행 동안만 적용되는 import 환경.

    - template_root 를 sys.path 앞에 추가 (형제 헬퍼 모듈 import 용)
    - 바이트코드 캐시 쓰기 금지 (같은 초에 덮어쓴 파일도 다시 컴파일)
    """
    root_str = str(template_root)
    previous = sys.dont_write_bytecode
    sys.dont_write_bytecode = True
    sys.path.insert(0, root_str)
    try:
        yield
    finally:
        try:
            sys.path.remove(root_str)
        except ValueError:
            pass
        sys.dont_write_bytecode = previous


class TemplateRegistry:
    """
    경로별 로드 결과 레지스트리.

    Usage:
        registry = TemplateRegistry(roots.templates)
        registry.invalidate()
        resolved = registry.load("cards/profile.py")
    """

    def __init__(self, template_root: Path):
        self.template_root = Path(template_root).resolve()
        self._entries: dict[Path, ResolvedTemplate] = {}
        self._lock = threading.Lock()

    def __contains__(self, template_path: str) -> bool:
        return self.get(template_path) is not None

    def get(self, template_path: str) -> ResolvedTemplate | None:
        """이미 로드된 템플릿 조회 (없으면 None)."""
        path = resolve_safe_path(self.template_root, template_path)
        with self._lock:
            return self._entries.get(path)

    def invalidate(self, path_prefix: Path | None = None) -> int:
        """
        path_prefix 아래의 모든 로드 결과 폐기.

        레지스트리 항목과 함께 sys.modules 에 남은 템플릿/헬퍼 모듈도 제거.

        Args:
            path_prefix: 폐기 범위 (기본: template_root 전체)

        Returns:
            폐기된 레지스트리 항목 수
        """
        prefix = Path(path_prefix).resolve() if path_prefix else self.template_root

        with self._lock:
            stale = [p for p in self._entries if is_within(prefix, p)]
            for p in stale:
                del self._entries[p]

        purged = 0
        for name, module in list(sys.modules.items()):
            module_file = getattr(module, "__file__", None)
            if not module_file:
                continue
            try:
                if is_within(prefix, Path(module_file).resolve()):
                    del sys.modules[name]
                    purged += 1
            except (OSError, RuntimeError, KeyError):
                continue

        importlib.invalidate_caches()
        logger.debug(
            f"Invalidated {len(stale)} template(s), {purged} module(s) under {prefix}"
        )
        return len(stale)

    def load(self, template_path: str) -> ResolvedTemplate:
        """
        템플릿 로드 + export 해석.

        Args:
            template_path: template_root 기준 상대 경로

        Returns:
            ResolvedTemplate

        Raises:
            SecurityViolation: 루트 밖 경로
            TemplateNotFound: 파일 없음
            TemplateLoadError: 초기화 실패, 지원하지 않는 확장자
        """
        path = resolve_safe_path(self.template_root, template_path)
        if not path.is_file():
            raise TemplateNotFound(
                ErrorCodes.TEMPLATE_NOT_FOUND,
                f"Template not found: {template_path}",
                template=template_path,
            )

        suffix = path.suffix.lower()
        if suffix in PYTHON_TEMPLATE_SUFFIXES:
            loaded = self._load_python(path)
        elif suffix in JINJA_TEMPLATE_SUFFIXES:
            loaded = self._load_jinja(path)
        else:
            raise TemplateLoadError(
                ErrorCodes.TEMPLATE_UNSUPPORTED,
                f"Unsupported template type: {template_path}",
                template=template_path,
                suffix=suffix,
            )

        shape, component = resolve_export(loaded)
        resolved = ResolvedTemplate(path=path, shape=shape, component=component)
        with self._lock:
            self._entries[path] = resolved

        logger.debug(f"Loaded template {template_path} (export={shape.value})")
        return resolved

    def _load_python(self, path: Path) -> ModuleType:
        """Python 템플릿 모듈 실행."""
        relative = to_relative(self.template_root, path)
        name = _module_name(relative)

        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            raise TemplateLoadError(
                ErrorCodes.TEMPLATE_LOAD_FAILED,
                f"Cannot load template module: {relative}",
                template=relative,
            )

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        # 템플릿 안의 sys.exit() 도 초기화 실패로 기록
        try:
            with _template_import_context(self.template_root):
                spec.loader.exec_module(module)
        except (Exception, SystemExit) as e:
            sys.modules.pop(name, None)
            raise TemplateLoadError(
                ErrorCodes.TEMPLATE_LOAD_FAILED,
                f"Template {relative} failed to initialize: {type(e).__name__}: {e}",
                template=relative,
            ) from e
        return module

    def _load_jinja(self, path: Path) -> jinja2.Template:
        """Jinja2 템플릿 컴파일 (include/extends 는 template_root 기준)."""
        relative = to_relative(self.template_root, path)
        environment = jinja2.Environment(
            loader=jinja2.FileSystemLoader(self.template_root),
            autoescape=True,
            cache_size=0,
        )
        try:
            return environment.get_template(relative)
        except jinja2.TemplateError as e:
            raise TemplateLoadError(
                ErrorCodes.TEMPLATE_LOAD_FAILED,
                f"Template {relative} failed to compile: {e}",
                template=relative,
            ) from e
