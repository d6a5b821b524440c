"""
파일 입출력 헬퍼: 원자적 쓰기 + JSON 로드.

동작:
- 원자적 쓰기: temp → rename (중간 상태 없음, 기존 파일은 통째로 교체)
- 가능한 환경에서 fsync (실패 시 경고만 남기고 계속)
- JSON 로드: UTF-8 (BOM 허용)
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _fsync_dir(dir_path: Path) -> None:
    """
    디렉토리 fsync (가능한 환경에서).

    Args:
        dir_path: fsync할 디렉토리 경로
    """
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        # O_DIRECTORY 미지원 (Windows), 권한 문제 등
        logger.debug(f"Directory fsync skipped for {dir_path}: {e}")


def atomic_write_text(path: Path, text: str) -> None:
    """
    원자적 텍스트 쓰기 (UTF-8).

    - 부모 디렉터리 자동 생성
    - 실패 시 temp 파일 정리 후 예외 전파

    Args:
        path: 저장할 파일 경로
        text: 파일 내용
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="",
        ) as f:
            temp_path = Path(f.name)
            f.write(text)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(f"File fsync failed for {path}: {e}")

        os.replace(temp_path, path)
        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


def atomic_write_json(path: Path, data: Any, indent: int = 4) -> None:
    """원자적 JSON 쓰기."""
    atomic_write_text(path, json.dumps(data, indent=indent, ensure_ascii=False))


def read_json(path: Path) -> Any:
    """
    JSON 파일 로드.

    Raises:
        FileNotFoundError / IsADirectoryError: 파일 없음
        json.JSONDecodeError: 파싱 실패
    """
    return json.loads(path.read_text(encoding="utf-8-sig"))
