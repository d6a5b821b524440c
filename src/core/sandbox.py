"""
Path sandbox: 호출자 입력 경로를 고정 루트 안으로 제한.

규칙:
- 읽기/쓰기/삭제/동적 로드 전 반드시 resolve_safe_path 통과
- 포함 여부는 경로 구성요소 경계 기준으로 판단
  (문자열 prefix 비교 금지: /data 루트가 /data-other를 허용하면 안 됨)
"""

from pathlib import Path

from src.domain.errors import ErrorCodes, SecurityViolation


def is_within(root: Path, candidate: Path) -> bool:
    """
    candidate가 root와 같거나 root의 하위 경로인지 확인.

    두 경로 모두 정규화(resolve)된 상태여야 함.
    """
    return candidate == root or root in candidate.parents


def resolve_safe_path(root: Path, user_input: str | Path) -> Path:
    """
    상대 경로를 루트 기준 절대 경로로 변환.

    Args:
        root: 샌드박스 루트 (templates/, data/, output/ 중 하나)
        user_input: 호출자가 넘긴 상대 경로

    Returns:
        정규화된 절대 경로 (root 내부)

    Raises:
        SecurityViolation: 루트 밖으로 벗어나는 경로
    """
    safe_root = Path(root).resolve()
    try:
        resolved = (safe_root / user_input).resolve()
    except (ValueError, OSError) as e:
        # embedded null byte, 너무 긴 경로 등
        raise SecurityViolation(
            ErrorCodes.SECURITY_VIOLATION,
            f"Invalid path: {user_input!s}",
            path=str(user_input),
            error=str(e),
        ) from e

    if not is_within(safe_root, resolved):
        raise SecurityViolation(
            ErrorCodes.SECURITY_VIOLATION,
            f"Access denied: {user_input!s}",
            path=str(user_input),
        )
    return resolved


def to_relative(root: Path, absolute: Path) -> str:
    """루트 기준 상대 경로 (POSIX 구분자)."""
    return absolute.relative_to(Path(root).resolve()).as_posix()
