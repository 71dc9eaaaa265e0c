"""Tests for Rich Console factory and theme."""

from io import StringIO

from scopectl.output.console import SCOPE_THEME, create_console, get_output, style_for_mode


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        console = create_console()
        assert isinstance(console.file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[scope.error]boom[/scope.error]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "boom" in output

    def test_custom_width(self) -> None:
        assert create_console(width=80).width == 80

    def test_default_width(self) -> None:
        assert create_console().width == 120


class TestGetOutput:
    def test_extracts_printed_text(self) -> None:
        console = create_console(no_color=True)
        console.print("hello world")
        assert "hello world" in get_output(console)

    def test_empty_console(self) -> None:
        assert get_output(create_console()) == ""


class TestStyleForMode:
    def test_known_modes(self) -> None:
        for mode in ("include", "exclude", "full"):
            style = style_for_mode(mode)
            assert style == f"scope.mode.{mode}"
            assert style in SCOPE_THEME.styles

    def test_unknown_mode(self) -> None:
        assert style_for_mode("partial") == ""
