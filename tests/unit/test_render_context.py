"""Unit tests for RenderContext buffer/engine discipline, layouts and partials."""

from pathlib import Path, PurePosixPath
from types import MappingProxyType

import pytest

from folio.contexts.rendering import RenderContext, RenderError, TemplateNotFound
from folio.contexts.sitemap import SourceFile

PAGE = {"index.html.jinja": "page"}


def make_context(app, current_path="index.html", engine="jinja"):
    context = RenderContext(app, {"current_path": current_path})
    context.current_engine = engine
    return context


# Buffer and engine scopes


@pytest.mark.unit
def test_save_and_restore_buffer(make_app):
    """Test swapping the output buffer out and back in."""
    context = make_context(make_app(PAGE))
    context.concat("before")
    original = context.buffer

    saved = context.save_buffer()
    assert saved is original
    assert context.buffer == []

    context.restore_buffer(saved)
    assert context.buffer is original
    assert context.buffer_contents() == "before"


@pytest.mark.unit
def test_buffer_preserved_restores_on_error(make_app):
    """Test buffer restoration when the block raises."""
    context = make_context(make_app(PAGE))
    original = context.buffer

    with pytest.raises(RuntimeError):
        with context.buffer_preserved():
            context.concat("lost")
            raise RuntimeError("boom")

    assert context.buffer is original
    assert context.buffer_contents() == ""


@pytest.mark.unit
def test_engine_preserved_restores_on_error(make_app):
    """Test engine restoration when the block raises."""
    context = make_context(make_app(PAGE))

    with pytest.raises(RuntimeError):
        with context.engine_preserved():
            context.current_engine = "jtex"
            raise RuntimeError("boom")

    assert context.current_engine == "jinja"


@pytest.mark.unit
def test_capture_html_joins_buffer_and_result(make_app):
    """Test that captured output is buffer text followed by the return value."""
    context = make_context(make_app(PAGE))

    def block():
        context.concat("written ")
        return "returned"

    assert context.capture_html(block) == "written returned"
    assert context.buffer_contents() == ""


# wrap_layout


@pytest.mark.unit
def test_wrap_layout_returns_wrapped_output(make_app):
    """Test that wrap_layout returns the wrapped body and leaves the buffer alone."""
    app = make_app({**PAGE, "layouts/layout.jinja": "<html>{{ yield_content() }}</html>"})
    context = make_context(app)
    original = context.buffer

    assert context.wrap_layout("layout", lambda: "body") == "<html>body</html>"

    assert context.buffer is original
    assert context.buffer_contents() == ""
    assert context.current_engine == "jinja"


@pytest.mark.unit
def test_wrap_layout_without_body(make_app):
    """Test wrapping with no body block."""
    app = make_app({**PAGE, "layouts/layout.jinja": "[{{ yield_content() }}]"})
    context = make_context(app)

    assert context.wrap_layout("layout") == "[]"
    assert context.buffer_contents() == ""


@pytest.mark.unit
def test_wrap_layout_body_sees_layout_engine(make_app):
    """Test that the body runs under the layout's engine."""
    app = make_app({**PAGE, "layouts/print.jtex": "<<< yield_content() >>>"})
    context = make_context(app)
    seen = []

    def body():
        seen.append(context.current_engine)
        return "x"

    assert context.wrap_layout("print", body) == "x"

    assert seen == ["jtex"]
    assert context.current_engine == "jinja"
    assert context.buffer_contents() == ""


@pytest.mark.unit
def test_wrap_layout_restores_state_when_body_raises(make_app):
    """Test buffer and engine restoration when the body raises."""
    app = make_app({**PAGE, "layouts/layout.jinja": "{{ yield_content() }}"})
    context = make_context(app)
    context.concat("kept")
    original = context.buffer

    def body():
        context.concat("partial output")
        raise ValueError("body failed")

    with pytest.raises(ValueError):
        context.wrap_layout("layout", body)

    assert context.current_engine == "jinja"
    assert context.buffer is original
    assert context.buffer_contents() == "kept"


@pytest.mark.unit
def test_wrap_layout_missing_layout(make_app):
    """Test that a missing layout raises and restores state."""
    context = make_context(make_app(PAGE))
    original = context.buffer

    with pytest.raises(TemplateNotFound, match="Could not locate layout: nope"):
        context.wrap_layout("nope", lambda: "body")

    assert context.current_engine == "jinja"
    assert context.buffer is original


@pytest.mark.unit
def test_wrap_layout_restores_state_when_layout_fails(make_app):
    """Test buffer and engine restoration when the layout fails."""
    app = make_app({**PAGE, "layouts/layout.jinja": "{{ yield_content() }}{{ 1 // 0 }}"})
    context = make_context(app)
    original = context.buffer

    with pytest.raises(RenderError) as excinfo:
        context.wrap_layout("layout", lambda: "body")

    assert isinstance(excinfo.value.original_error, ZeroDivisionError)
    assert context.current_engine == "jinja"
    assert context.buffer is original
    assert context.buffer_contents() == ""


@pytest.mark.unit
def test_wrap_layout_prefers_current_engine(make_app):
    """Test that the layout for the active engine is chosen."""
    app = make_app(
        {
            **PAGE,
            "layouts/layout.jinja": "html:{{ yield_content() }}",
            "layouts/layout.jtex": "tex:<<< yield_content() >>>",
        }
    )

    jinja_context = make_context(app, engine="jinja")
    tex_context = make_context(app, engine="jtex")

    assert jinja_context.wrap_layout("layout", lambda: "x") == "html:x"
    assert tex_context.wrap_layout("layout", lambda: "x") == "tex:x"


# render


@pytest.mark.unit
def test_render_partial(make_app):
    """Test rendering a partial from the page directory."""
    app = make_app({**PAGE, "_nav.jinja": "<nav>{{ current_path }}</nav>"})
    context = make_context(app)

    assert context.render("nav") == "<nav>index.html</nav>"
    assert context.current_engine == "jinja"


@pytest.mark.unit
def test_render_partial_locals_split_and_frozen(make_app, monkeypatch):
    """Test that partial locals are split from options and frozen."""
    app = make_app({**PAGE, "_card.jinja": "{{ title }}{{ secret }}"})
    context = RenderContext(app, {"current_path": "index.html", "secret": "page only"})
    captured = {}
    original_render_file = RenderContext.render_file

    def spy(self, file, locals, options, block=None):
        captured["locals"], captured["options"] = locals, options
        return original_render_file(self, file, locals, options, block)

    monkeypatch.setattr(RenderContext, "render_file", spy)

    # Page locals do not leak into the partial
    assert context.render("card", {"locals": {"title": "Hello"}, "flag": True}) == "Hello"

    assert isinstance(captured["locals"], MappingProxyType)
    assert isinstance(captured["options"], MappingProxyType)
    assert dict(captured["options"]) == {"flag": True}


@pytest.mark.unit
def test_render_keyword_options_merge(make_app):
    """Test passing render options as keywords."""
    app = make_app({**PAGE, "_card.jinja": "{{ title }}"})
    context = make_context(app)

    assert context.render("card", locals={"title": "Hello"}) == "Hello"


@pytest.mark.unit
def test_render_partial_with_block(make_app):
    """Test forwarding a block to a partial."""
    app = make_app({**PAGE, "_panel.jinja": "<div>{{ yield_content() }}</div>"})
    context = make_context(app)

    assert context.render("panel", caller=lambda: "inner") == "<div>inner</div>"


@pytest.mark.unit
def test_render_partial_runs_under_its_own_engine(make_app):
    """Test that a partial runs under its own engine."""
    app = make_app({**PAGE, "_engine_name.jtex": "<<< record_engine() >>>"})
    context = make_context(app)
    seen = []

    def record_engine():
        seen.append(context.current_engine)
        return "ok"

    assert context.render("engine_name", locals={"record_engine": record_engine}) == "ok"
    assert seen == ["jtex"]
    assert context.current_engine == "jinja"


@pytest.mark.unit
def test_render_static_partial_verbatim(make_app):
    """Test that static partials are returned unevaluated."""
    app = make_app({**PAGE, "snippet.txt": "{{ never_evaluated }}"})
    context = make_context(app)

    assert context.render("snippet.txt") == "{{ never_evaluated }}"


@pytest.mark.unit
def test_render_binary_static_partial(make_app, tmp_path):
    """Test that a binary static partial comes back byte for byte."""
    png = b"\x89PNG\r\n\x1a\n\xff\xfe"
    app = make_app(PAGE)
    (tmp_path / "source" / "logo.png").write_bytes(png)
    context = RenderContext(app, {"current_path": "index.html"})

    assert context.render("logo.png").encode("utf-8", "surrogateescape") == png


@pytest.mark.unit
def test_render_missing_partial_raises(make_app):
    """Test that a missing partial raises and restores state."""
    context = make_context(make_app(PAGE))
    context.concat("kept")
    original = context.buffer

    with pytest.raises(TemplateNotFound) as excinfo:
        context.render("missing_partial")

    assert excinfo.value.name == "missing_partial"
    assert "missing_partial" in excinfo.value.candidates
    assert context.current_engine == "jinja"
    assert context.buffer is original
    assert context.buffer_contents() == "kept"


@pytest.mark.unit
def test_render_soft_miss_without_page_context(make_app):
    """Test that a miss with no page context renders nothing."""
    context = RenderContext(make_app(PAGE))

    assert context.render("missing_partial") == ""


@pytest.mark.unit
def test_render_without_page_context_uses_root(make_app):
    """Test root lookup when there is no page context."""
    context = RenderContext(make_app({**PAGE, "_nav.jinja": "nav"}))

    assert context.render("nav") == "nav"


@pytest.mark.unit
def test_render_syntax_error_raises_render_error(make_app):
    """Test that template syntax errors become RenderError."""
    app = make_app({**PAGE, "_broken.jinja": "{% if %}"})
    context = make_context(app)
    original = context.buffer

    with pytest.raises(RenderError) as excinfo:
        context.render("broken")

    assert excinfo.value.template_path.name == "_broken.jinja"
    assert excinfo.value.engine == "jinja"
    assert context.current_engine == "jinja"
    assert context.buffer is original


@pytest.mark.unit
def test_nested_render_error_keeps_innermost_path(make_app):
    """Test that RenderError keeps the innermost failing file."""
    app = make_app(
        {**PAGE, "_outer.jinja": "outer {{ render('inner') }}", "_inner.jinja": "{{ 1 // 0 }}"}
    )
    context = make_context(app)

    with pytest.raises(RenderError) as excinfo:
        context.render("outer")

    assert excinfo.value.template_path.name == "_inner.jinja"


@pytest.mark.unit
def test_render_file_missing(make_app, tmp_path):
    """Test render_file on a file that does not exist."""
    context = make_context(make_app(PAGE))
    ghost = SourceFile(PurePosixPath("ghost.jinja"), Path(tmp_path) / "source" / "ghost.jinja")

    with pytest.raises(TemplateNotFound):
        context.render_file(ghost, {}, {})


@pytest.mark.unit
def test_render_is_idempotent(make_app):
    """Test that rendering a partial twice gives the same output."""
    app = make_app({**PAGE, "_card.jinja": "{{ title }}-{{ current_path }}"})
    context = make_context(app)

    first = context.render("card", locals={"title": "t"})
    second = context.render("card", locals={"title": "t"})

    assert first == second == "t-index.html"


# Accessors


@pytest.mark.unit
def test_delegated_accessors(make_app):
    """Test the read-only accessors delegated to the application."""
    app = make_app(PAGE, project_files={"data/site.yml": "title: Folio\n"}, mode="server")
    context = make_context(app)

    assert context.app is app
    assert context.config is app.config
    assert context.sitemap is app.sitemap
    assert context.logger is app.logger
    assert context.extensions is app.extensions
    assert context.root == app.root
    assert context.source_dir == app.source_dir
    assert context.data.site.title == "Folio"
    assert context.is_server() is True
    assert context.is_build() is False
    assert context.current_page.destination_path == "index.html"
    assert context.current_resource == context.current_page
