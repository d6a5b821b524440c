"""
Render layer: 정적 HTML 출력 생성.

역할:
- 템플릿 컴포넌트 + props → 마크업 → minify (minify-html)
- 출력 경로 정규화 + 원자적 저장
"""

from .html import HtmlRenderer
from .output import OutputWriter, normalize_output_path

__all__ = [
    "HtmlRenderer",
    "OutputWriter",
    "normalize_output_path",
]
