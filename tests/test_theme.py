"""
Tests for theme resolution and CSS rendering.
"""

import pytest

import theme


class TestPresets:
    """Test preset palettes."""

    @pytest.mark.parametrize("name,primary", [("girls", "#ec4899"), ("boys", "#3b82f6"), ("professional", "#0ea5e9")])
    def test_preset_primary(self, name, primary):
        assert theme.preset_theme(name)["primary"] == primary

    def test_unknown_preset_falls_back_to_default(self):
        assert theme.preset_theme("neon") == theme.DEFAULT_THEME

    def test_every_preset_is_complete(self):
        keys = {key for key, _ in theme.CSS_VARIABLES}
        for name in theme.PRESETS:
            assert set(theme.preset_theme(name)) == keys


class TestResolveTheme:
    """Test resolving a stored theme document."""

    def test_empty_document(self):
        assert theme.resolve_theme(None) == theme.DEFAULT_THEME
        assert theme.resolve_theme({}) == theme.DEFAULT_THEME

    def test_preset_wins_over_colours(self):
        resolved = theme.resolve_theme({"preset": "boys", "primary": "#000000"})
        assert resolved["primary"] == "#3b82f6"

    def test_custom_overrides_defaults(self):
        resolved = theme.resolve_theme({"preset": "custom", "primary": "#111111", "accent": "#222222"})
        assert resolved["primary"] == "#111111"
        assert resolved["accent"] == "#222222"
        assert resolved["card_bg"] == theme.DEFAULT_THEME["card_bg"]

    def test_derived_colours_follow_primary(self):
        resolved = theme.resolve_theme({"primary": "#111111", "primary_hover": "#000000"})
        assert resolved["button_bg"] == "#111111"
        assert resolved["button_hover_bg"] == "#000000"
        assert resolved["sidebar_active_text"] == "#111111"
        assert resolved["sidebar_hover_text"] == "#111111"

    def test_explicit_derived_colour_kept(self):
        resolved = theme.resolve_theme({"primary": "#111111", "button_bg": "#333333"})
        assert resolved["button_bg"] == "#333333"

    def test_unknown_keys_ignored(self):
        assert "font" not in theme.resolve_theme({"font": "serif"})


class TestCss:
    """Test CSS variable output."""

    def test_css_variables(self):
        variables = theme.css_variables(theme.DEFAULT_THEME)
        assert variables["--brand-primary"] == "#4F46E5"
        assert variables["--bg-sidebar"] == "#FFFFFF"
        assert len(variables) == len(theme.CSS_VARIABLES)

    def test_render_css(self):
        css = theme.render_css(theme.DEFAULT_THEME)
        assert css.startswith(":root {\n")
        assert "  --brand-primary: #4F46E5;\n" in css
        assert css.endswith("}\n")
