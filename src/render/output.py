"""
Output writer: 출력 경로 정규화 + 저장.

경로 규칙:
- .html 로 끝나면 그대로: reports/page.html
- 아니면 디렉터리로 취급: reports → reports/index.html
- 기존 파일은 무조건 덮어씀 (충돌 감지/버전 관리 없음)
"""

import logging
import posixpath
from pathlib import Path

from src.core.fileio import atomic_write_text
from src.core.sandbox import resolve_safe_path
from src.domain.constants import HTML_SUFFIX, INDEX_FILENAME
from src.domain.errors import ErrorCodes, WriteError

logger = logging.getLogger(__name__)


def normalize_output_path(relative_path: str) -> str:
    """출력 상대 경로 정규화."""
    if relative_path.endswith(HTML_SUFFIX):
        return relative_path
    return posixpath.normpath(posixpath.join(relative_path, INDEX_FILENAME))


class OutputWriter:
    """output/ 루트 아래 HTML 저장."""

    def __init__(self, output_root: Path):
        self.output_root = output_root

    def write(self, relative_path: str, content: str) -> str:
        """
        HTML 저장.

        Args:
            relative_path: output 루트 기준 경로 (파일 또는 디렉터리)
            content: HTML 문자열

        Returns:
            정규화된 상대 경로 (결과 보고용)

        Raises:
            SecurityViolation: 루트 밖 경로
            WriteError: 저장 실패
        """
        final_path = normalize_output_path(relative_path)
        full_path = resolve_safe_path(self.output_root, final_path)

        try:
            atomic_write_text(full_path, content)
        except OSError as e:
            raise WriteError(
                ErrorCodes.WRITE_FAILED,
                f"Cannot write output {final_path}: {e}",
                path=final_path,
            ) from e

        logger.debug(f"Wrote {len(content)} chars to {final_path}")
        return final_path
