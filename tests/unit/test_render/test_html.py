"""
test_html.py - HTML 렌더러 테스트

테스트 케이스:
- TC1: export 형태별 렌더 (callable, 모듈 render(), jinja2.Template)
- TC2: 렌더 예외 → RenderError (원인 메시지 포함)
- TC3: 렌더 불가 export → RenderError(NOT_RENDERABLE)
- TC4: minify (공백 정리, 인라인 CSS)
"""

import types
from pathlib import Path

import jinja2
import pytest

from src.domain.errors import ErrorCodes, RenderError
from src.render.html import HtmlRenderer
from src.templates.registry import ExportShape, ResolvedTemplate


def _resolved(component, shape: ExportShape = ExportShape.APP) -> ResolvedTemplate:
    return ResolvedTemplate(path=Path("/templates/card.py"), shape=shape, component=component)


@pytest.fixture
def renderer() -> HtmlRenderer:
    return HtmlRenderer()


class TestRenderDispatch:
    def test_callable(self, renderer):
        html = renderer.render_markup(_resolved(lambda props: f"<b>{props['x']}</b>"), {"x": 1})

        assert html == "<b>1</b>"

    def test_class_component(self, renderer):
        class Card:
            def __init__(self, props):
                self.props = props

            def __str__(self):
                return "card"

        # 클래스 호출 결과가 str 이 아니면 실패
        with pytest.raises(RenderError):
            renderer.render_markup(_resolved(Card), {})

    def test_module_render_function(self, renderer):
        module = types.ModuleType("page")
        module.render = lambda props: "<p>module</p>"

        html = renderer.render_markup(_resolved(module, ExportShape.MODULE), {})

        assert html == "<p>module</p>"

    def test_module_without_render(self, renderer):
        module = types.ModuleType("page")
        module.helper = lambda props: ""

        with pytest.raises(RenderError) as exc_info:
            renderer.render_markup(_resolved(module, ExportShape.MODULE), {})

        assert exc_info.value.code == ErrorCodes.NOT_RENDERABLE

    def test_jinja_template(self, renderer):
        template = jinja2.Template("<h1>{{ title }}</h1>")

        html = renderer.render_markup(_resolved(template, ExportShape.MODULE), {"title": "T"})

        assert html == "<h1>T</h1>"

    def test_non_callable_export(self, renderer):
        with pytest.raises(RenderError) as exc_info:
            renderer.render_markup(_resolved("just a string", ExportShape.DEFAULT), {})

        assert exc_info.value.code == ErrorCodes.NOT_RENDERABLE


class TestRenderErrors:
    def test_exception_wrapped(self, renderer):
        def _boom(props):
            raise ValueError("bad props")

        with pytest.raises(RenderError) as exc_info:
            renderer.render_markup(_resolved(_boom), {})

        assert exc_info.value.code == ErrorCodes.RENDER_FAILED
        assert "ValueError: bad props" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_sys_exit_wrapped(self, renderer):
        def _exit(props):
            raise SystemExit(1)

        with pytest.raises(RenderError) as exc_info:
            renderer.render_markup(_resolved(_exit), {})

        assert exc_info.value.code == ErrorCodes.RENDER_FAILED
        assert "SystemExit" in exc_info.value.message

    def test_non_string_result(self, renderer):
        with pytest.raises(RenderError) as exc_info:
            renderer.render_markup(_resolved(lambda props: None), {})

        assert "NoneType" in exc_info.value.message

    def test_jinja_undefined_attribute(self, renderer):
        template = jinja2.Template("{{ user.name.first }}")

        with pytest.raises(RenderError):
            renderer.render_markup(_resolved(template, ExportShape.MODULE), {})


class TestMinify:
    def test_whitespace_collapsed(self, renderer):
        html = renderer.render(_resolved(lambda props: "<div>\n  Hi\n</div>"), {})

        assert html == "<div>Hi</div>"

    def test_inline_css_minified(self, renderer):
        html = renderer.minify("<style>\n  p {\n    color: red;\n  }\n</style><p>x</p>")

        assert "\n" not in html
        assert "color:red" in html

    def test_closing_tags_kept(self, renderer):
        html = renderer.minify("<ul><li>a</li><li>b</li></ul>")

        assert html == "<ul><li>a</li><li>b</li></ul>"

    def test_custom_options_override_defaults(self):
        renderer = HtmlRenderer({"keep_comments": False})

        assert renderer.minify_options["keep_comments"] is False
        assert renderer.minify_options["minify_css"] is True
