"""
FastAPI Routes.

API 라우트 (JSON) + 미리보기 (output/ 정적 파일)
"""

from . import build, files

__all__ = ["build", "files"]
