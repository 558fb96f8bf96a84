"""Tests for storefront.rendering.document: render invocation and injection."""

import json

import pytest

from storefront.errors import RenderFailure
from storefront.rendering.document import (
    BODY_PLACEHOLDER,
    HEAD_PLACEHOLDER,
    RenderResult,
    initial_data_script,
    inject_rendered,
    render_document,
    strip_initial_data,
)

TEMPLATE = (
    "<html><head><!--app-head--></head>"
    '<body><div id="root"><!--app-html--></div></body></html>'
)


def _payload(document: str) -> object:
    start = document.index("window.__INITIAL_DATA__ = ") + len("window.__INITIAL_DATA__ = ")
    end = document.index(";</script>", start)
    return json.loads(document[start:end])


class TestInjectRendered:
    def test_head_and_body(self) -> None:
        result = RenderResult(html="<p>hi</p>", head="<title>T</title>")
        document = inject_rendered(TEMPLATE, result)

        assert "<head><title>T</title></head>" in document
        assert '<div id="root"><p>hi</p></div>' in document
        assert HEAD_PLACEHOLDER not in document
        assert BODY_PLACEHOLDER not in document

    def test_data_block_follows_head(self) -> None:
        result = RenderResult(html="", head="<title>T</title>", data={"a": 1})
        document = inject_rendered(TEMPLATE, result)

        assert (
            '<title>T</title> <script>window.__INITIAL_DATA__ = {"a":1};</script>'
            in document
        )

    def test_no_data_no_script(self) -> None:
        document = inject_rendered(TEMPLATE, RenderResult(html="x", head="h"))
        assert "__INITIAL_DATA__" not in document

    def test_falsy_data_still_injected(self) -> None:
        document = inject_rendered(TEMPLATE, RenderResult(data=[]))
        assert _payload(document) == []

    def test_missing_head_placeholder(self) -> None:
        template = "<body><!--app-html--></body>"
        document = inject_rendered(template, RenderResult(html="<p>x</p>", head="<title>T</title>"))

        assert document == "<body><p>x</p></body>"

    def test_missing_both_placeholders(self) -> None:
        template = "<html><body></body></html>"
        assert inject_rendered(template, RenderResult(html="x", head="y")) == template

    def test_only_first_body_placeholder_replaced(self) -> None:
        template = "<!--app-html--><!--app-html-->"
        assert inject_rendered(template, RenderResult(html="x")) == "x<!--app-html-->"

    def test_stale_block_stripped_newest_wins(self) -> None:
        template = (
            "<head><!--app-head-->"
            "<SCRIPT type='module'>window.__INITIAL_DATA__ = {\"old\":true};</SCRIPT>"
            "</head><!--app-html-->"
        )
        document = inject_rendered(template, RenderResult(data={"new": True}))

        assert document.count("__INITIAL_DATA__") == 1
        assert _payload(document) == {"new": True}

    def test_same_template_reused(self) -> None:
        result = RenderResult(html="a", head="h", data={"n": 1})
        first = inject_rendered(TEMPLATE, result)
        second = inject_rendered(TEMPLATE, result)

        assert first == second
        assert first.count("__INITIAL_DATA__") == 1

    def test_reinjection_keeps_one_block_with_newest_data(self) -> None:
        first = inject_rendered(TEMPLATE, RenderResult(html="a", data={"n": 1}))
        second = inject_rendered(first, RenderResult(html="b", data={"n": 2}))
        third = inject_rendered(second, RenderResult(html="c", data={"n": 3}))

        assert third.count("__INITIAL_DATA__") == 1
        assert _payload(third) == {"n": 3}
        assert '<div id="root">a</div>' in third

    def test_reinjection_without_data_drops_block(self) -> None:
        first = inject_rendered(TEMPLATE, RenderResult(data={"n": 1}))
        assert "__INITIAL_DATA__" not in inject_rendered(first, RenderResult())

    def test_stripping_already_stripped_is_noop(self) -> None:
        once = strip_initial_data(TEMPLATE)
        assert strip_initial_data(once) == once == TEMPLATE


class TestInitialDataScript:
    def test_escapes_less_than(self) -> None:
        script = initial_data_script({"title": "</script><b>"})

        assert "</script><b>" not in script
        assert "\\u003c/script>" in script
        assert script.endswith(";</script>")

    def test_escaped_payload_round_trips(self) -> None:
        data = {"title": "a < b", "nested": ["<i>"]}
        document = inject_rendered(TEMPLATE, RenderResult(data=data))

        assert _payload(document) == data

    def test_escaped_block_is_stripped_whole(self) -> None:
        script = initial_data_script({"x": "<script>"})
        assert strip_initial_data(f"before{script}after") == "beforeafter"

    def test_non_ascii_kept(self) -> None:
        assert "커피" in initial_data_script({"title": "커피"})


class TestRenderResultFromValue:
    def test_mapping(self) -> None:
        result = RenderResult.from_value({"html": "x", "head": "h", "data": {"a": 1}})
        assert result == RenderResult(html="x", head="h", data={"a": 1})

    def test_missing_keys_default(self) -> None:
        assert RenderResult.from_value({}) == RenderResult()

    def test_instance_passthrough(self) -> None:
        result = RenderResult(html="x")
        assert RenderResult.from_value(result) is result

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(RenderFailure):
            RenderResult.from_value("<p>x</p>")  # type: ignore[arg-type]

    def test_non_string_html_rejected(self) -> None:
        with pytest.raises(RenderFailure, match="html"):
            RenderResult.from_value({"html": 42})


class TestRenderDocument:
    @pytest.mark.asyncio
    async def test_sync_render(self) -> None:
        calls: list[tuple[str, dict[str, str]]] = []

        def render(url: str, query: dict[str, str]) -> dict[str, str]:
            calls.append((url, query))
            return {"html": f"<p>{url}</p>"}

        document = await render_document(TEMPLATE, "/product/1/", {"q": "mug"}, render)

        assert calls == [("/product/1/", {"q": "mug"})]
        assert "<p>/product/1/</p>" in document

    @pytest.mark.asyncio
    async def test_async_render(self) -> None:
        async def render(url: str, query: dict[str, str]) -> RenderResult:
            return RenderResult(html="async", data={"url": url})

        document = await render_document(TEMPLATE, "/", {}, render)

        assert '<div id="root">async</div>' in document
        assert _payload(document) == {"url": "/"}

    @pytest.mark.asyncio
    async def test_render_error_propagates(self) -> None:
        def render(url: str, query: dict[str, str]) -> dict[str, str]:
            raise LookupError("backend down")

        with pytest.raises(LookupError, match="backend down"):
            await render_document(TEMPLATE, "/", {}, render)

    @pytest.mark.asyncio
    async def test_malformed_result(self) -> None:
        async def render(url: str, query: dict[str, str]) -> None:
            return None

        with pytest.raises(RenderFailure):
            await render_document(TEMPLATE, "/", {}, render)
