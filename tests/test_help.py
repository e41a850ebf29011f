"""Unit tests for help page selection."""

import pytest

from cogs.help import render_page, resolve_page


@pytest.mark.parametrize(
    "section, page",
    [
        (None, "home"),
        ("", "home"),
        ("dice", "dice"),
        (" Roll ", "dice"),
        ("dnd", "dice"),
        ("all", "all"),
        ("logs", "home"),
        ("admin", "home"),
    ],
)
def test_resolve_page(section, page) -> None:
    assert resolve_page(section) == page


def test_render_page_uses_prefix() -> None:
    embed = render_page("dice", "!")
    assert embed.title == "🎲 骰式語法"
    assert any("!roll 4x3d8-5" in field.value for field in embed.fields)


def test_render_unknown_page_falls_back_home() -> None:
    assert render_page("logs", "rpg!").title == "📖 指令總覽"
