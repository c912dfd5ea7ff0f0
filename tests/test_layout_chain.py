"""Layout directives and layout chains."""

from __future__ import annotations

from pathlib import Path

import pytest

from hbview import LayoutCycleError, ViewEngine
from hbview.template import declared_layout

from .conftest import write_views

CHAIN_VIEWS = {
    "home.hbs": "<p>{{title}}</p>",
    "declared.hbs": "{{!< page}}<p>{{title}}</p>",
    "admin/dashboard.hbs": "{{!< ./frame}}<p>dash</p>",
    "admin/frame.hbs": "<nav>admin</nav>{{{body}}}",
    "layouts/main.hbs": "<main>{{{body}}}</main>",
    "layouts/page.hbs": "{{!< site}}<article>{{{body}}}</article>",
    "layouts/site.hbs": "<html>{{{body}}}</html>",
    "layouts/loop-a.hbs": "{{!< loop-b}}a{{{body}}}",
    "layouts/loop-b.hbs": "{{!< loop-a}}b{{{body}}}",
    "layouts/self.hbs": "{{!< self}}{{{body}}}",
}


@pytest.fixture
def chain_views(tmp_path: Path) -> Path:
    return write_views(tmp_path / "views", CHAIN_VIEWS)


@pytest.fixture
def chain_engine(chain_views: Path) -> ViewEngine:
    return ViewEngine(chain_views, partials_folder=())


class TestDeclaredLayout:
    """Parsing ``{{!< name}}``."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("{{!< site}}<p>x</p>", "site"),
            ("{{!<   site.hbs }}", "site.hbs"),
            ("{{!< ./frame}}", "./frame"),
            ("{{!< shared/base}}", "shared/base"),
            ("<p>{{! a comment }}</p>", None),
            ("no directive", None),
        ],
    )
    def test_parses_directive(self, source: str, expected: str | None) -> None:
        assert declared_layout(source) == expected

    def test_directive_renders_as_nothing(self, chain_engine: ViewEngine) -> None:
        # A Handlebars comment, so it leaves no output of its own
        template = chain_engine.cache.compile(chain_engine.resolve_view("declared"))
        assert template.render({"title": "x"}) == "<p>x</p>"


class TestLayoutChain:
    """Nested layouts wrap innermost first."""

    @pytest.mark.asyncio
    async def test_layout_with_parent(self, chain_engine: ViewEngine) -> None:
        html = await chain_engine.render("home", {"title": "Hi", "layout": "page"})
        assert html == "<html><article><p>Hi</p></article></html>"

    @pytest.mark.asyncio
    async def test_view_declares_its_layout(self, chain_engine: ViewEngine) -> None:
        html = await chain_engine.render("declared", {"title": "Hi"})
        assert html == "<html><article><p>Hi</p></article></html>"

    @pytest.mark.asyncio
    async def test_context_layout_beats_directive(self, chain_engine: ViewEngine) -> None:
        html = await chain_engine.render("declared", {"title": "Hi", "layout": "main"})
        assert html == "<main><p>Hi</p></main>"

    @pytest.mark.asyncio
    async def test_context_can_suppress_directive(self, chain_engine: ViewEngine) -> None:
        assert await chain_engine.render("declared", {"title": "Hi", "layout": None}) == "<p>Hi</p>"

    @pytest.mark.asyncio
    async def test_relative_layout(self, chain_engine: ViewEngine) -> None:
        html = await chain_engine.render("admin/dashboard")
        assert html == "<nav>admin</nav><p>dash</p>"

    def test_relative_layout_path(self, chain_engine: ViewEngine, chain_views: Path) -> None:
        resolved = chain_engine.resolve_layout("./frame", chain_views / "admin" / "dashboard.hbs")
        assert resolved == chain_views / "admin" / "frame.hbs"

    @pytest.mark.asyncio
    async def test_directives_can_be_disabled(self, chain_views: Path) -> None:
        engine = ViewEngine(chain_views, partials_folder=(), layout_directives=False)
        assert await engine.render("declared", {"title": "Hi"}) == "<main><p>Hi</p></main>"
        assert await engine.render("home", {"title": "Hi", "layout": "page"}) == (
            "<article><p>Hi</p></article>"
        )


class TestLayoutCycles:
    """Chains that loop are errors, not hangs."""

    @pytest.mark.asyncio
    async def test_two_layout_cycle(self, chain_engine: ViewEngine, chain_views: Path) -> None:
        with pytest.raises(LayoutCycleError) as exc_info:
            await chain_engine.render("home", {"layout": "loop-a"})

        error = exc_info.value
        assert "loop-a.hbs -> loop-b.hbs -> loop-a.hbs" in error.message
        assert error.template_stack == [
            chain_views / "layouts" / "loop-a.hbs",
            chain_views / "layouts" / "loop-b.hbs",
        ]

    @pytest.mark.asyncio
    async def test_self_cycle(self, chain_engine: ViewEngine) -> None:
        with pytest.raises(LayoutCycleError):
            await chain_engine.render("home", {"layout": "self"})
