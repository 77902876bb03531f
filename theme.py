"""
Site theme: preset palettes, resolution of a stored theme document, and the
CSS custom properties the public site reads from :root.
"""

from typing import Any, Dict, Optional

PRESETS = ("girls", "boys", "professional", "custom")

BASE_LIGHT = {
    "heading_h1": "#111827",
    "heading_h2": "#1F2937",
    "text_body": "#374151",
    "card_bg": "#FFFFFF",
    "card_border": "#E5E7EB",
    "sidebar_bg": "#FFFFFF",
    "sidebar_text": "#374151",
}

DEFAULT_THEME = {
    **BASE_LIGHT,
    "primary": "#4F46E5",
    "secondary": "#9333EA",
    "primary_hover": "#4338CA",
    "accent": "#10B981",
    "button_bg": "#4F46E5",
    "button_text": "#FFFFFF",
    "button_hover_bg": "#4338CA",
    "sidebar_active_bg": "#E0E7FF",
    "sidebar_active_text": "#4F46E5",
    "sidebar_hover_bg": "#F3F4F6",
    "sidebar_hover_text": "#4F46E5",
}

# theme key -> CSS custom property
CSS_VARIABLES = (
    ("primary", "--brand-primary"),
    ("secondary", "--brand-secondary"),
    ("heading_h1", "--heading-h1"),
    ("heading_h2", "--heading-h2"),
    ("text_body", "--text-body"),
    ("primary_hover", "--brand-primary-hover"),
    ("accent", "--brand-accent"),
    ("button_bg", "--button-bg"),
    ("button_text", "--button-text"),
    ("button_hover_bg", "--button-hover-bg"),
    ("card_bg", "--card-bg"),
    ("card_border", "--card-border"),
    ("sidebar_bg", "--bg-sidebar"),
    ("sidebar_text", "--sidebar-text"),
    ("sidebar_active_bg", "--sidebar-active-bg"),
    ("sidebar_active_text", "--sidebar-active-text"),
    ("sidebar_hover_bg", "--sidebar-hover-bg"),
    ("sidebar_hover_text", "--sidebar-hover-text"),
)


def _accented(primary, secondary, primary_hover, accent, **overrides):
    theme = {
        **BASE_LIGHT,
        "primary": primary,
        "secondary": secondary,
        "primary_hover": primary_hover,
        "accent": accent,
        "button_bg": primary,
        "button_text": "#FFFFFF",
        "button_hover_bg": primary_hover,
        "sidebar_active_text": primary,
        "sidebar_hover_text": primary,
    }
    theme.update(overrides)
    return theme


def preset_theme(name: Optional[str]) -> Dict[str, str]:
    if name == "girls":
        return _accented(
            "#ec4899", "#a78bfa", "#d946ef", "#f472b6",
            sidebar_active_bg="#FCE7F3", sidebar_hover_bg="#F9A8D4",
        )
    if name == "boys":
        return _accented(
            "#3b82f6", "#06b6d4", "#2563eb", "#10b981",
            sidebar_active_bg="#DBEAFE", sidebar_hover_bg="#BFDBFE",
        )
    if name == "professional":
        return _accented(
            "#0ea5e9", "#64748b", "#0284c7", "#22d3ee",
            button_bg="#111827", button_hover_bg="#0F172A",
            sidebar_active_bg="#F1F5F9", sidebar_active_text="#0F172A",
            sidebar_hover_bg="#E5E7EB",
        )
    return dict(DEFAULT_THEME)


def resolve_theme(doc: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Turn a stored theme document into a complete palette.

    A non-custom preset wins outright. Otherwise stored colours override the
    defaults, with derived colours following primary/primary_hover when unset.
    """
    doc = {k: v for k, v in (doc or {}).items() if v}
    preset = doc.get("preset") or "custom"
    if preset != "custom":
        return preset_theme(preset)

    theme = dict(DEFAULT_THEME)
    theme.update({k: v for k, v in doc.items() if k in DEFAULT_THEME})
    theme["button_bg"] = doc.get("button_bg") or theme["primary"]
    theme["button_hover_bg"] = doc.get("button_hover_bg") or theme["primary_hover"]
    theme["sidebar_active_text"] = doc.get("sidebar_active_text") or theme["primary"]
    theme["sidebar_hover_text"] = doc.get("sidebar_hover_text") or theme["primary"]
    return theme


def css_variables(theme: Dict[str, str]) -> Dict[str, str]:
    return {var: theme[key] for key, var in CSS_VARIABLES}


def render_css(theme: Dict[str, str]) -> str:
    lines = [f"  {var}: {value};" for var, value in css_variables(theme).items()]
    return ":root {\n" + "\n".join(lines) + "\n}\n"
