"""
Tests for in-memory filtering and display formatting.
Pure Python; entities are stand-ins with the attributes the filters read.
"""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from vgc_manager.core.filtering import filter_accessories, filter_consoles, filter_games
from vgc_manager.core.formatting import condition_to_stars, format_list, format_value, to_form_text


def _game(title, console_name="", genre_name=""):
    return SimpleNamespace(title=title, console_name=console_name, genre_name=genre_name)


GAMES = [
    _game("Zelda", "Nintendo 64", "Adventure"),
    _game("Mario Kart", "Nintendo 64", "Racing"),
    _game("mario party", "Nintendo 64", "Party"),
]


class TestFilterGames:

    def test_empty_text_is_identity(self):
        assert filter_games(GAMES, "") == GAMES
        assert filter_games(GAMES, None) == GAMES

    def test_whitespace_is_matched_literally(self):
        assert filter_games(GAMES, "kart ") == []
        assert [g.title for g in filter_games(GAMES, " kart")] == ["Mario Kart"]
        assert filter_games(GAMES, "   ") == []

    def test_case_insensitive_substring(self):
        result = filter_games(GAMES, "mario")
        assert [g.title for g in result] == ["Mario Kart", "mario party"]
        assert filter_games(GAMES, "MARIO") == result

    def test_matches_console_and_genre(self):
        assert [g.title for g in filter_games(GAMES, "racing")] == ["Mario Kart"]
        assert len(filter_games(GAMES, "nintendo 64")) == 3

    def test_no_match(self):
        assert filter_games(GAMES, "sonic") == []

    def test_missing_names_do_not_match(self):
        games = [_game("Tetris")]
        assert filter_games(games, "none") == []


class TestFilterConsolesAndAccessories:

    def test_console_by_manufacturer(self):
        consoles = [
            SimpleNamespace(name="PlayStation", manufacturer_name="Sony"),
            SimpleNamespace(name="Saturn", manufacturer_name="Sega"),
        ]
        assert [c.name for c in filter_consoles(consoles, "sony")] == ["PlayStation"]

    def test_console_ignores_other_fields(self):
        consoles = [SimpleNamespace(name="Saturn", manufacturer_name="Sega", generation=5)]
        assert filter_consoles(consoles, "5") == []

    def test_accessory_by_color_and_type(self):
        accessories = [
            SimpleNamespace(name="DualShock", type_name="Controller",
                            manufacturer_name="Sony", color="Black"),
            SimpleNamespace(name="Memory Card", type_name="Storage",
                            manufacturer_name="Sony", color="Grey"),
        ]
        assert [a.name for a in filter_accessories(accessories, "grey")] == ["Memory Card"]
        assert [a.name for a in filter_accessories(accessories, "control")] == ["DualShock"]


class TestFormatting:

    def test_condition_to_stars(self):
        assert condition_to_stars(3) == "★★★☆☆"
        assert condition_to_stars(5) == "★★★★★"
        assert condition_to_stars(None) == ""

    def test_format_list(self):
        assert format_list([]) == "None selected"
        assert format_list(["Koji Kondo", "Kazumi Totaka"]) == "Koji Kondo, Kazumi Totaka"

    @pytest.mark.parametrize("value, expected", [
        (None, ""),
        (True, "Yes"),
        (False, "No"),
        (date(1996, 6, 23), "1996-06-23"),
        (Decimal("24.9"), "24.90"),
        (["A", "B"], "A, B"),
        ([], ""),
        (5, "5"),
    ])
    def test_format_value(self, value, expected):
        assert format_value(value) == expected

    def test_to_form_text(self):
        assert to_form_text(None) == ""
        assert to_form_text(date(2001, 3, 15)) == "2001-03-15"
        assert to_form_text(11910000) == "11910000"
