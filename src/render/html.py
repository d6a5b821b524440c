"""
HTML 렌더러: 컴포넌트 → 정적 마크업 → minify.

- 한 번에 렌더 (스트리밍/하이드레이션 메타데이터 없음)
- 렌더 중 예외 → RenderError (원인 메시지 포함)
- minify 실패는 별도 처리 없이 그대로 전파
"""

import logging
from collections.abc import Callable, Mapping
from types import ModuleType
from typing import Any

import jinja2
import minify_html

from src.domain.constants import MODULE_RENDER_FUNCTION
from src.domain.errors import ErrorCodes, RenderError
from src.templates.registry import ResolvedTemplate

logger = logging.getLogger(__name__)

# 공백 정리 + 인라인 script/style minify.
# 닫는 태그, <html>/<head> 시작 태그, 주석은 유지.
DEFAULT_MINIFY_OPTIONS: dict[str, bool] = {
    "minify_js": True,
    "minify_css": True,
    "keep_closing_tags": True,
    "keep_html_and_head_opening_tags": True,
    "keep_comments": True,
}


class HtmlRenderer:
    """
    해석된 템플릿을 props로 렌더링.

    Usage:
        renderer = HtmlRenderer()
        html = renderer.render(resolved, {"title": "Hi"})
    """

    def __init__(self, minify_options: Mapping[str, bool] | None = None):
        self.minify_options = dict(DEFAULT_MINIFY_OPTIONS)
        if minify_options:
            self.minify_options.update(minify_options)

    def render(self, resolved: ResolvedTemplate, props: Mapping[str, Any]) -> str:
        """렌더 + minify."""
        markup = self.render_markup(resolved, props)
        return self.minify(markup)

    def render_markup(self, resolved: ResolvedTemplate, props: Mapping[str, Any]) -> str:
        """
        컴포넌트 호출 → 정적 마크업.

        Raises:
            RenderError: NOT_RENDERABLE, RENDER_FAILED
        """
        render_fn = self._render_function(resolved)
        try:
            markup = render_fn(props)
        except (Exception, SystemExit) as e:
            raise RenderError(
                ErrorCodes.RENDER_FAILED,
                f"Render failed for {resolved.path.name}: {type(e).__name__}: {e}",
                template=str(resolved.path),
                error=str(e),
            ) from e

        if not isinstance(markup, str):
            raise RenderError(
                ErrorCodes.RENDER_FAILED,
                f"Template {resolved.path.name} returned {type(markup).__name__}, expected str",
                template=str(resolved.path),
            )
        return markup

    def minify(self, markup: str) -> str:
        """공백 정리 + 인라인 JS/CSS minify."""
        return minify_html.minify(markup, **self.minify_options)

    def _render_function(self, resolved: ResolvedTemplate) -> Callable[[Any], Any]:
        """export 값 → props 하나를 받는 렌더 함수."""
        component = resolved.component

        if isinstance(component, jinja2.Template):
            return component.render

        if isinstance(component, ModuleType):
            module_render = vars(component).get(MODULE_RENDER_FUNCTION)
            if callable(module_render):
                return module_render
            raise RenderError(
                ErrorCodes.NOT_RENDERABLE,
                f"Template {resolved.path.name} exports no default, App or "
                f"{MODULE_RENDER_FUNCTION}()",
                template=str(resolved.path),
            )

        if callable(component):
            return component

        raise RenderError(
            ErrorCodes.NOT_RENDERABLE,
            f"Template {resolved.path.name} export ({resolved.shape.value}) is not renderable: "
            f"{type(component).__name__}",
            template=str(resolved.path),
        )
