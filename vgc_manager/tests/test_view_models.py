"""
Tests for the toolkit-independent view models.
No display needed; they run against the seeded in-memory database.
"""

import pytest

from vgc_manager.core.entities import GAME
from vgc_manager.core.exceptions import PersistenceError, ValidationError
from vgc_manager.gui.view_models import (
    EntityFormViewModel,
    EntityListViewModel,
    HomeViewModel,
    Observable,
    detail_rows,
)


@pytest.fixture
def games(controller, game_form, seeded):
    """Three saved games: Zelda, Mario Kart 64, Mario Party (ids in insert order)."""
    return [
        controller.save_game(game_form(title="Zelda", developers=[], genre_id=None)),
        controller.save_game(game_form(title="Mario Kart 64", genre_id=seeded.racing)),
        controller.save_game(game_form(title="mario party", console_id=seeded.ps1)),
    ]


class _Recorder:
    def __init__(self, observable: Observable):
        self.calls = 0
        self.unsubscribe = observable.subscribe(self)

    def __call__(self):
        self.calls += 1


# ---------------------------------------------------------------------------
# Observable
# ---------------------------------------------------------------------------

class TestObservable:

    def test_notify_and_unsubscribe(self):
        obs = Observable()
        rec = _Recorder(obs)
        obs.notify()
        rec.unsubscribe()
        obs.notify()
        assert rec.calls == 1


# ---------------------------------------------------------------------------
# EntityListViewModel
# ---------------------------------------------------------------------------

class TestEntityListViewModel:

    def test_refresh_loads_sorted_rows(self, controller, games):
        vm = EntityListViewModel(controller, "game")
        assert vm.refresh() is True
        assert [row[1] for row in vm.rows()] == ["Mario Kart 64", "mario party", "Zelda"]
        assert vm.headers == ["ID", "Title", "Platform", "Genre", "Condition"]

    def test_row_cells_use_display_values(self, controller, games):
        vm = EntityListViewModel(controller, "game")
        vm.refresh()
        row = vm.rows()[0]
        assert row == [str(games[1]), "Mario Kart 64", "Nintendo 64", "Racing", "★★★★☆"]

    def test_no_selection_disables_commands(self, controller, games):
        vm = EntityListViewModel(controller, "game")
        vm.refresh()
        assert vm.selected_id is None
        assert not vm.can_edit
        assert not vm.can_delete
        assert not vm.can_view_details

    def test_selecting_row_enables_commands(self, controller, games):
        vm = EntityListViewModel(controller, "game")
        vm.refresh()
        rec = _Recorder(vm)
        vm.select_row(2)
        assert vm.selected_id == games[0]
        assert vm.title_of_selected() == "Zelda"
        assert vm.can_edit and vm.can_delete and vm.can_view_details
        assert rec.calls == 1

    def test_deselect(self, controller, games):
        vm = EntityListViewModel(controller, "game")
        vm.refresh()
        vm.select(games[0])
        vm.select_row(None)
        assert not vm.can_edit

    def test_out_of_range_row_clears_selection(self, controller, games):
        vm = EntityListViewModel(controller, "game")
        vm.refresh()
        vm.select_row(0)
        vm.select_row(10)
        assert vm.selected_id is None

    def test_filter_resets_selection(self, controller, games):
        vm = EntityListViewModel(controller, "game")
        vm.refresh()
        vm.select(games[1])
        vm.set_search_text("mario")
        assert vm.selected_id is None
        assert not vm.can_delete
        assert [item.title for item in vm.items] == ["Mario Kart 64", "mario party"]
        assert len(vm.all_items) == 3

    def test_cannot_select_hidden_entity(self, controller, games):
        vm = EntityListViewModel(controller, "game")
        vm.refresh()
        vm.set_search_text("mario")
        vm.select(games[0])
        assert vm.selected_id is None

    def test_refresh_keeps_visible_selection(self, controller, games):
        vm = EntityListViewModel(controller, "game")
        vm.refresh()
        vm.select(games[1])
        vm.refresh()
        assert vm.selected_id == games[1]

    def test_delete_selected(self, controller, games):
        vm = EntityListViewModel(controller, "game")
        vm.refresh()
        vm.select(games[0])
        vm.delete_selected()
        assert vm.selected_id is None
        assert [item.title for item in vm.items] == ["Mario Kart 64", "mario party"]

    def test_edit_target_fetches_selected(self, controller, games):
        vm = EntityListViewModel(controller, "game")
        vm.refresh()
        assert vm.edit_target() is None
        vm.select(games[1])
        assert vm.edit_target().title == "Mario Kart 64"

    def test_failed_refresh_keeps_stale_list(self, controller, games, monkeypatch):
        vm = EntityListViewModel(controller, "game")
        vm.refresh()

        def fail(kind):
            raise PersistenceError("connection lost")

        monkeypatch.setattr(controller, "list_entities", fail)
        assert vm.refresh() is False
        assert vm.load_error == "connection lost"
        assert len(vm.items) == 3

    def test_first_load_failure_leaves_empty_list(self, controller, monkeypatch):
        def fail(kind):
            raise PersistenceError("connection lost")

        monkeypatch.setattr(controller, "list_entities", fail)
        vm = EntityListViewModel(controller, "console")
        assert vm.refresh() is False
        assert vm.items == []


# ---------------------------------------------------------------------------
# EntityFormViewModel
# ---------------------------------------------------------------------------

class TestEntityFormViewModel:

    def test_add_form_defaults(self, controller, seeded):
        vm = EntityFormViewModel(controller, "accessory")
        assert not vm.is_edit
        assert vm.title == "Add Accessory"
        assert vm.values["quantity"] == "1"
        assert vm.values["owned"] is False
        assert vm.values["consoles"] == []
        assert vm.values["condition"] == 0
        assert vm.condition_text() == "Condition: -"

    def test_edit_form_prefilled(self, controller, games, seeded):
        game = controller.get_game(games[1])
        vm = EntityFormViewModel(controller, "game", game)
        assert vm.is_edit
        assert vm.title == "Edit Game"
        assert vm.values["title"] == "Mario Kart 64"
        assert vm.values["jp_release_date"] == "1996-06-23"
        assert vm.values["purchase_price"] == "24.99"
        assert vm.values["genre_id"] == seeded.racing
        assert sorted(vm.values["developers"]) == sorted([seeded.ead, seeded.miyamoto])
        assert vm.condition_text() == "Condition: ★★★★☆"

    def test_rating_options_filtered_by_region(self, controller, seeded):
        vm = EntityFormViewModel(controller, "game")
        vm.load_options()
        spec = vm.descriptor.get_field("us_rating_id")
        assert vm.options_for(spec) == [(seeded.esrb_e, "ESRB E - US")]
        assert vm.option_label(spec, seeded.esrb_e) == "ESRB E - US"

    def test_staged_relations(self, controller, seeded):
        vm = EntityFormViewModel(controller, "game")
        vm.load_options()
        rec = _Recorder(vm)
        assert vm.related_text("developers") == "None selected"

        assert vm.add_related("developers", seeded.miyamoto) is True
        assert vm.add_related("developers", seeded.miyamoto) is False
        assert vm.add_related("developers", None) is False
        vm.add_related("developers", seeded.ead)
        assert vm.related_text("developers") == "Shigeru Miyamoto, Nintendo EAD"
        assert rec.calls == 2

        vm.clear_related("developers")
        assert vm.related_text("developers") == "None selected"

    def test_create_lookup_refreshes_options(self, controller, seeded):
        vm = EntityFormViewModel(controller, "game")
        vm.load_options()
        rec = _Recorder(vm)
        genre = vm.create_lookup("genres", "Puzzle")
        labels = [label for _, label in vm.options_for(vm.descriptor.get_field("genre_id"))]
        assert "Puzzle" in labels
        assert genre.name == "Puzzle"
        assert rec.calls == 1

    def test_create_rating(self, controller, seeded):
        vm = EntityFormViewModel(controller, "game")
        vm.load_options()
        rating = vm.create_rating("EU", "PEGI 7")
        spec = vm.descriptor.get_field("eu_rating_id")
        assert (rating.id, "PEGI 7 - EU") in vm.options_for(spec)

    def test_failed_save_keeps_values(self, controller, seeded):
        vm = EntityFormViewModel(controller, "game")
        vm.set_value("title", "")
        vm.set_value("units_sold", "123")
        vm.add_related("developers", seeded.ead)
        with pytest.raises(ValidationError):
            vm.save()
        assert vm.values["units_sold"] == "123"
        assert vm.values["developers"] == [seeded.ead]
        assert vm.entity_id == 0

    def test_save_new_then_edit(self, controller, seeded):
        vm = EntityFormViewModel(controller, "console")
        vm.set_value("name", "Saturn")
        vm.set_value("type_id", seeded.home)
        vm.set_value("manufacturer_id", seeded.sony)
        saved_id = vm.save()
        assert saved_id > 0
        assert vm.entity_id == saved_id

        vm.set_value("name", "Sega Saturn")
        assert vm.save() == saved_id
        assert controller.get_console(saved_id).name == "Sega Saturn"


# ---------------------------------------------------------------------------
# Details and dashboard
# ---------------------------------------------------------------------------

class TestDetailRows:

    def test_rows_include_joined_names(self, controller, games):
        game = controller.get_game(games[1])
        rows = {label: text for _, label, text in detail_rows(GAME, game)}
        assert rows["ID"] == str(games[1])
        assert rows["Console"] == "Nintendo 64"
        assert rows["Developers"] == "Nintendo EAD, Shigeru Miyamoto"
        assert rows["Producers"] == ""
        assert rows["Condition"] == "★★★★☆"
        assert rows["Owned"] == "Yes"
        assert rows["Japan Rating"] == "CERO A"

    def test_sections_follow_form(self, controller, games):
        game = controller.get_game(games[1])
        rows = detail_rows(GAME, game)
        assert rows[0] == ("", "ID", str(games[1]))
        assert ("Credits", "Composers", "Koji Kondo") in rows


class TestHomeViewModel:

    def test_lines(self, controller, games):
        vm = HomeViewModel(controller)
        assert vm.refresh() is True
        assert vm.lines() == [
            "Games: 3  (3 owned)",
            "Consoles: 2  (0 owned)",
            "Accessories: 0  (0 owned)",
        ]

    def test_failure_sets_error(self, controller, monkeypatch):
        def fail():
            raise PersistenceError("db down")

        monkeypatch.setattr(controller, "collection_summary", fail)
        vm = HomeViewModel(controller)
        assert vm.refresh() is False
        assert vm.load_error == "db down"
