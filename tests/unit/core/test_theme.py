"""Unit tests for theme module.

Tests for theme loading, validation, and Rich/prompt_toolkit style
generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path

import blobctl.core.theme as theme_module
import pytest
from blobctl.core.theme import (
    ThemeColors,
    _load_toml_colors,
    get_prompt_style,
    get_rich_theme,
    get_theme,
    load_theme,
    reload_theme,
)
from prompt_toolkit.styles import Style
from rich.theme import Theme


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has sensible defaults."""
        colors = ThemeColors()
        assert colors.text == "#ffffff"
        assert colors.header == "#69B9A1"
        assert colors.selection == "#0e8ac8"

    def test_short_hex_accepted(self) -> None:
        """#RGB colors are valid."""
        assert ThemeColors(muted="#abc").muted == "#abc"

    def test_invalid_hex_no_hash(self) -> None:
        """ThemeColors rejects colors without # prefix."""
        with pytest.raises(ValueError, match="must start with '#'"):
            ThemeColors(text="ffffff")

    def test_invalid_hex_wrong_length(self) -> None:
        """ThemeColors rejects colors with wrong length."""
        with pytest.raises(ValueError, match="must be #RGB or #RRGGBB"):
            ThemeColors(text="#ff")

    def test_invalid_hex_chars(self) -> None:
        """ThemeColors rejects invalid hex characters."""
        with pytest.raises(ValueError, match="invalid hex color"):
            ThemeColors(footer="#gggggg")

    def test_extra_fields_forbidden(self) -> None:
        """ThemeColors rejects unknown fields."""
        with pytest.raises(ValueError):
            ThemeColors(unknown_field="#ffffff")  # type: ignore[call-arg]


class TestLoadTheme:
    """Tests for loading bundled and user themes."""

    def test_load_toml_colors(self, tmp_path: Path) -> None:
        """Loads string colors from the [colors] section."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ntext = "#000000"\nborder = 3\n')

        assert _load_toml_colors(theme_file) == {"text": "#000000"}

    def test_load_toml_missing_file(self, tmp_path: Path) -> None:
        """A missing file yields None."""
        assert _load_toml_colors(tmp_path / "nope.toml") is None

    def test_load_toml_invalid(self, tmp_path: Path) -> None:
        """Invalid TOML yields None."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("[colors\n")

        assert _load_toml_colors(theme_file) is None

    def test_bundled_theme_loads(self, tmp_path: Path) -> None:
        """Without user overrides the bundled colors apply."""
        colors = load_theme(tmp_path / "missing.toml")

        assert colors == ThemeColors()

    def test_user_theme_partial_override(self, tmp_path: Path) -> None:
        """User colors override only the keys they set."""
        user = tmp_path / "theme.toml"
        user.write_text('[colors]\nselection = "#112233"\n')

        colors = load_theme(user)

        assert colors.selection == "#112233"
        assert colors.text == ThemeColors().text

    def test_invalid_user_theme_falls_back(self, tmp_path: Path) -> None:
        """Invalid user colors fall back to defaults."""
        user = tmp_path / "theme.toml"
        user.write_text('[colors]\ntext = "white"\n')

        assert load_theme(user) == ThemeColors()


class TestStyles:
    """Tests for Rich and prompt_toolkit styles."""

    def test_rich_theme_has_console_styles(self) -> None:
        """The Rich theme defines the styles used by output helpers."""
        theme = get_rich_theme(ThemeColors())

        assert isinstance(theme, Theme)
        for name in ("info", "warning", "error", "success", "bold_header", "item.removed"):
            assert name in theme.styles

    def test_prompt_style_has_browser_classes(self) -> None:
        """The browser style covers rows, modal lines and the footer."""
        style = get_prompt_style(ThemeColors())

        assert isinstance(style, Style)
        class_names = {rule[0] for rule in style.style_rules}
        assert {"row.selected", "modal.line.selected", "footer.error"} <= class_names

    def test_get_theme_is_cached(self) -> None:
        """get_theme returns the cached instance until reload."""
        first = get_theme()

        assert get_theme() is first
        reloaded = reload_theme()
        assert theme_module._cached_theme is reloaded
