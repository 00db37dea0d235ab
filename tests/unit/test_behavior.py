"""Tests for the shared widget behaviour and reference formatting."""

from __future__ import annotations

from typing import Any

import pytest

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.options import CodeGenOptions
from tuidesigner.core.ir import Design, Position, Size, Theme, Widget, WidgetStyle, WidgetType


def make_widget(widget_type: str, data_source: str | None = None, **properties: Any) -> Widget:
    return Widget(
        id="w",
        type=widget_type,
        position=Position(x=0, y=0),
        size=Size(width=30, height=10),
        data_source=data_source,
        properties=properties,
    )


MOCK = CodeGenOptions()
NO_MOCK = CodeGenOptions(use_mock_data=False)


class TestFormatting:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (512, "512.0 B"),
            (1536, "1.5 KB"),
            (1048576, "1.0 MB"),
            (1073741824, "1.0 GB"),
            (1024**4 * 2, "2.0 TB"),
        ],
    )
    def test_format_bytes(self, value: float, expected: str) -> None:
        assert bh.format_bytes(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(42, "42.0"), (1500, "1.5K"), (2_500_000, "2.5M"), (999, "999.0")],
    )
    def test_format_number(self, value: float, expected: str) -> None:
        assert bh.format_number(value) == expected

    def test_format_percentage(self) -> None:
        assert bh.format_percentage(42.5) == "42.5%"

    def test_format_metric_value(self) -> None:
        assert bh.format_metric_value(2048, "bytes") == "2.0 KB"
        assert bh.format_metric_value(12.5, "percentage") == "12.5%"
        assert bh.format_metric_value(1500) == "1.5K"

    def test_trend_indicator(self) -> None:
        assert bh.trend_indicator(10, None) == "→ No change"
        assert bh.trend_indicator(10, 10) == "→ No change"
        assert bh.trend_indicator(12, 10) == "↗ +2.0"
        assert bh.trend_indicator(8, 10) == "↘ -2.0"


class TestSparklineGlyphs:
    def test_empty(self) -> None:
        assert bh.sparkline_glyphs([]) == ""

    def test_flat_line_style(self) -> None:
        assert bh.sparkline_glyphs([3, 3, 3]) == "───"

    def test_flat_bar_style_uses_mid_glyph(self) -> None:
        assert bh.sparkline_glyphs([3, 3], "bar") == "▅▅"

    def test_extremes(self) -> None:
        assert bh.sparkline_glyphs([0, 8]) == "_█"
        assert bh.sparkline_glyphs([0, 7], "bar") == "▁█"

    def test_one_glyph_per_value(self) -> None:
        assert len(bh.sparkline_glyphs(bh.SPARKLINE_SAMPLE)) == len(bh.SPARKLINE_SAMPLE)


class TestGauge:
    def test_half(self) -> None:
        assert bh.gauge_glyph(50) == ("◑", "█" * 10 + "░" * 10)

    def test_clamped(self) -> None:
        assert bh.gauge_glyph(150) == ("●", "█" * 20)
        assert bh.gauge_glyph(-5) == ("○", "░" * 20)

    def test_custom_range(self) -> None:
        assert bh.gauge_glyph(15, 10, 20)[0] == "◑"

    def test_normalize_empty_range(self) -> None:
        assert bh.normalize(5, 10, 10) == 0.0


class TestBarsAndProgress:
    def test_bar_bands(self) -> None:
        assert bh.bar_bands([25, 40, 15, 30]) == [40, 35, 30, 25, 20, 15, 10, 5]

    def test_bar_bands_round_up(self) -> None:
        assert bh.bar_bands([12]) == [15, 10, 5]

    def test_bar_bands_empty(self) -> None:
        assert bh.bar_bands([]) == []
        assert bh.bar_bands([-3]) == []

    def test_progress_wraps_past_100(self) -> None:
        assert bh.advance_progress(98) == 100
        assert bh.advance_progress(99) == 0.0


class TestWidgetBehavior:
    def test_bound_widgets_do_not_simulate(self) -> None:
        b = bh.widget_behavior(make_widget("sparkline", data_source="cpu"), MOCK)
        assert b.bound
        assert not b.simulate
        assert b.tick_ms is None
        assert b.state["values"] == []

    def test_simulated_widgets_tick_every_second(self) -> None:
        for widget_type in ("sparkline", "metric_card", "log_viewer"):
            b = bh.widget_behavior(make_widget(widget_type), MOCK)
            assert b.tick_ms == bh.SIMULATION_TICK_MS

    def test_mock_data_disabled(self) -> None:
        b = bh.widget_behavior(make_widget("sparkline"), NO_MOCK)
        assert not b.simulate
        assert b.tick_ms is None

    def test_static_widgets_never_tick(self) -> None:
        for widget_type in ("text", "line_chart", "bar_chart", "table", "gauge"):
            assert bh.widget_behavior(make_widget(widget_type), MOCK).tick_ms is None

    def test_animated_progress_bar(self) -> None:
        b = bh.widget_behavior(make_widget("progress_bar", animated=True), NO_MOCK)
        assert b.tick_ms == bh.ANIMATION_TICK_MS
        assert b.state["percent"] == 0

    def test_bound_progress_bar_does_not_animate(self) -> None:
        b = bh.widget_behavior(make_widget("progress_bar", data_source="x", animated=True), MOCK)
        assert b.tick_ms is None

    def test_static_progress_bar_sample(self) -> None:
        b = bh.widget_behavior(make_widget("progress_bar"), MOCK)
        assert b.state["percent"] == bh.PROGRESS_SAMPLE

    def test_bar_chart_sample_capped(self) -> None:
        b = bh.widget_behavior(make_widget("bar_chart", maxBars=2), MOCK)
        assert b.state["bars"] == [["A", 25], ["B", 40]]

    def test_metric_card_bound_state(self) -> None:
        b = bh.widget_behavior(make_widget("metric_card", data_source="cpu"), MOCK)
        assert b.state == {"value": 0.0, "previous": None, "history": []}

    def test_metric_card_sample_state(self) -> None:
        b = bh.widget_behavior(make_widget("metric_card"), MOCK)
        assert b.state["value"] == bh.METRIC_CARD_SAMPLE
        assert b.state["previous"] == bh.METRIC_CARD_PREVIOUS

    def test_log_viewer_seeded_only_when_unbound(self) -> None:
        assert bh.widget_behavior(make_widget("log_viewer"), MOCK).state["seed"]
        assert bh.widget_behavior(make_widget("log_viewer", data_source="x"), MOCK).state["seed"] == []

    def test_unknown_type(self) -> None:
        b = bh.widget_behavior(make_widget("pie_chart"), MOCK)
        assert b.kind is None
        assert not b.simulate
        assert b.tick_ms is None

    def test_inner_size(self) -> None:
        b = bh.widget_behavior(make_widget("text"), MOCK)
        assert (b.inner_width, b.inner_height) == (28, 8)
        assert b.kind is WidgetType.TEXT


class TestColors:
    def test_theme_defaults(self) -> None:
        assert bh.widget_colors(make_widget("text"), Theme.DARK) == ("blue", "white")

    def test_progress_bar_text_color(self) -> None:
        widget = make_widget("progress_bar", color="red")
        assert bh.widget_colors(widget, Theme.NORD) == ("cyan", "red")

    def test_style_overrides(self) -> None:
        widget = make_widget("text").model_copy(
            update={"style": WidgetStyle(border_color="#ff0000", text_color="yellow")}
        )
        assert bh.widget_colors(widget, Theme.DARK) == ("#ff0000", "yellow")

    def test_ansi_color(self) -> None:
        assert bh.ansi_color("blue") == "4"
        assert bh.ansi_color("#00ff00") == "#00ff00"
        assert bh.ansi_color("chartreuse") == "7"

    def test_every_theme_has_a_palette(self) -> None:
        assert set(bh.THEME_PALETTES) == set(Theme)


def test_dashboard_behaviors(dashboard: Design) -> None:
    behaviors = [bh.widget_behavior(w, MOCK) for w in dashboard.widgets]
    ticking = {b.widget.id for b in behaviors if b.tick_ms is not None}
    # cpu-card and events are bound; spark simulates; build animates
    assert ticking == {"spark", "build"}
