"""Tests for HtmlRenderer and AssetState.

Covers entity markup with tooltips, escaping, expand/collapse toggles keyed
off ``expanded_by_default``, object sections and badges, and the
"assets emitted once" lifecycle (claim, reset, thread safety).
"""

from __future__ import annotations

import threading

import pytest

from value_inspector.config import InspectorConfig
from value_inspector.render.assets import ASSET_MARKUP, ASSETS, AssetState
from value_inspector.render.html import HtmlRenderer
from value_inspector.render.protocols import Renderer
from value_inspector.tree.inspector import ValueInspector
from value_inspector.tree.nodes import Node

# ---------------------------------------------------------------------------
# Fixtures and helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def renderer() -> HtmlRenderer:
    """An HtmlRenderer whose assets were already emitted."""
    assets = AssetState()
    assets.claim()
    return HtmlRenderer(assets=assets)


def _tree(value: object) -> Node:
    return ValueInspector().inspect(value)


class Gauge:
    """Measures pressure."""

    def __init__(self) -> None:
        self.level = 3

    def read(self, unit: str = "bar") -> int:
        """Read the gauge.

        @param string $unit Unit of measurement
        """
        return self.level


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------


class TestMarkup:
    def test_conforms(self, renderer: HtmlRenderer) -> None:
        assert isinstance(renderer, Renderer)

    def test_wrapped_in_ref_div(self, renderer: HtmlRenderer) -> None:
        output = renderer.render(_tree(1))
        assert output.startswith('<div class="ref">')
        assert output.endswith("</div>")

    def test_scalar_entity_with_type_tip(self, renderer: HtmlRenderer) -> None:
        output = renderer.render(_tree(42))
        assert output == '<div class="ref"><span class="rInt rHasTip">42<code>int</code></span></div>'

    def test_string_escaped(self, renderer: HtmlRenderer) -> None:
        output = renderer.render(_tree("<b>"))
        assert "&lt;b&gt;" in output
        assert "<b>" not in output

    def test_null_has_no_tip(self, renderer: HtmlRenderer) -> None:
        assert '<span class="rNull">None</span>' in renderer.render(_tree(None))

    def test_escape_quotes(self, renderer: HtmlRenderer) -> None:
        assert renderer.escape('"x"') == "&quot;x&quot;"

    def test_empty_composite(self, renderer: HtmlRenderer) -> None:
        output = renderer.render(_tree([]))
        assert "rToggle" not in output
        assert "list (0)" in output


class TestToggles:
    def test_root_expanded_rest_collapsed(self, renderer: HtmlRenderer) -> None:
        output = renderer.render(_tree([1, [2, [3]]]))
        assert output.count('class="rToggle exp"') == 1
        assert output.count('class="rToggle col"') == 2

    def test_toggle_precedes_members(self, renderer: HtmlRenderer) -> None:
        output = renderer.render(_tree([1]))
        assert '<a class="rToggle exp"></a><div><dl>' in output


class TestObjects:
    def test_sections(self, renderer: HtmlRenderer) -> None:
        output = renderer.render(_tree(Gauge()))
        assert "<h4>Properties:</h4>" in output
        assert "<h4>Methods:</h4>" in output
        assert "<h4>Constants:</h4>" not in output

    def test_class_tooltip(self, renderer: HtmlRenderer) -> None:
        output = renderer.render(_tree(Gauge()))
        assert '<span class="rClass rHasTip">Gauge<code>Measures pressure.</code></span>' in output

    def test_param_tooltip_and_default(self, renderer: HtmlRenderer) -> None:
        output = renderer.render(_tree(Gauge()))
        assert '<span class="rParamOpt rHasTip">unit<code>Unit of measurement</code></span>' in output
        assert "bar" in output

    def test_inherited_badge(self, renderer: HtmlRenderer) -> None:
        class Barometer(Gauge):
            pass

        output = renderer.render(_tree(Barometer()))
        assert "rMethodInherited" in output
        assert "Inherited from Gauge" in output
        assert '<span class="rMod rHasTip">I<code>' in output

    def test_recursion(self, renderer: HtmlRenderer) -> None:
        items: list[object] = []
        items.append(items)
        assert "<b>*RECURSION*</b>" in renderer.render(_tree(items))

    def test_truncated_composite(self, renderer: HtmlRenderer) -> None:
        node = ValueInspector(InspectorConfig(max_depth=1)).inspect([[1]])
        assert '<span class="rArray rHasTip">list<code>list (1)</code></span>(<b>...</b>)' in (
            renderer.render(node)
        )

    def test_truncated_object(self, renderer: HtmlRenderer) -> None:
        class Plain:
            pass

        node = ValueInspector(InspectorConfig(max_depth=1)).inspect([Plain()])
        assert "Plain</span></span> <b>...</b>" in renderer.render(node)


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------


class TestAssets:
    def test_emitted_once(self) -> None:
        renderer = HtmlRenderer(assets=AssetState())
        first = renderer.render(_tree(1))
        second = renderer.render(_tree(1))
        assert first.startswith(ASSET_MARKUP)
        assert not second.startswith(ASSET_MARKUP)
        assert ASSET_MARKUP not in second

    def test_reset_emits_again(self) -> None:
        assets = AssetState()
        renderer = HtmlRenderer(assets=assets)
        renderer.render(_tree(1))
        assets.reset()
        assert renderer.render(_tree(1)).startswith(ASSET_MARKUP)

    def test_state_shared_between_renderers(self) -> None:
        assets = AssetState()
        HtmlRenderer(assets=assets).render(_tree(1))
        assert not HtmlRenderer(assets=assets).render(_tree(1)).startswith(ASSET_MARKUP)

    def test_claim_once_across_threads(self) -> None:
        assets = AssetState()
        results: list[bool] = []
        lock = threading.Lock()

        def claim() -> None:
            won = assets.claim()
            with lock:
                results.append(won)

        threads = [threading.Thread(target=claim) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert results.count(True) == 1
        assert assets.emitted

    def test_default_is_process_wide_state(self) -> None:
        ASSETS.reset()
        try:
            assert HtmlRenderer().render(_tree(1)).startswith(ASSET_MARKUP)
            assert not HtmlRenderer().render(_tree(1)).startswith(ASSET_MARKUP)
        finally:
            ASSETS.reset()
