"""
Error definitions for the build engine.

규칙:
- 조용한 실패 금지 → 모든 실패는 ForgeError 하위 타입으로 명시적 전달
- 단일 빌드: 첫 에러에서 즉시 중단 (재시도 없음)
- 배치 빌드: 항목별 에러는 결과 레코드로 변환 (BatchOrchestrator)
"""

from typing import Any


class ForgeError(Exception):
    """
    빌드 엔진 에러의 공통 베이스.

    Usage:
        raise NotFound(ErrorCodes.DATA_NOT_FOUND, "Data file not found", path=rel)
    """

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


class SecurityViolation(ForgeError):
    """샌드박스 루트 밖으로 벗어나는 경로."""


class NotFound(ForgeError):
    """템플릿/데이터 파일 또는 디렉터리 없음."""


class ParseError(ForgeError):
    """JSON 파싱 실패 또는 JSON object가 아닌 데이터."""


class TemplateLoadError(ForgeError):
    """템플릿 모듈 초기화 실패."""


class RenderError(ForgeError):
    """컴포넌트 렌더링 중 예외."""


class WriteError(ForgeError):
    """출력 파일 저장 실패."""


class BuildLockTimeout(ForgeError):
    """전역 빌드 락 획득 실패."""


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Sandbox ===
    SECURITY_VIOLATION = "SECURITY_VIOLATION"

    # === Data ===
    DATA_NOT_FOUND = "DATA_NOT_FOUND"
    DATA_PARSE_ERROR = "DATA_PARSE_ERROR"
    DATA_NOT_OBJECT = "DATA_NOT_OBJECT"
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"

    # === Template ===
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    TEMPLATE_LOAD_FAILED = "TEMPLATE_LOAD_FAILED"
    TEMPLATE_UNSUPPORTED = "TEMPLATE_UNSUPPORTED"

    # === Render ===
    RENDER_FAILED = "RENDER_FAILED"
    NOT_RENDERABLE = "NOT_RENDERABLE"

    # === Output ===
    WRITE_FAILED = "WRITE_FAILED"

    # === Concurrency ===
    BUILD_LOCK_TIMEOUT = "BUILD_LOCK_TIMEOUT"

    # === File management ===
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    CONTENT_NOT_TEXT = "CONTENT_NOT_TEXT"
