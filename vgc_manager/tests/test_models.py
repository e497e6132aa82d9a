"""
Tests for ORM models: schema creation, display properties and the
database-level constraints (condition range, cascades, SET NULL).
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, inspect, select
from sqlalchemy.exc import IntegrityError

from vgc_manager.data.models import (
    Accessory,
    Console,
    Developer,
    Game,
    Genre,
    RatingSystem,
    accessory_consoles,
    game_developers,
)


class TestSchema:

    def test_all_tables_created(self, db_engine):
        tables = set(inspect(db_engine).get_table_names())
        expected = {
            "games", "consoles", "accessories",
            "genres", "developers", "composers", "publishers", "producers",
            "manufacturers", "console_types", "accessory_types", "rating_systems",
            "game_developers", "game_composers", "game_publishers", "game_producers",
            "accessory_consoles",
        }
        assert expected <= tables

    def test_primary_key_columns_keep_schema_names(self, db_engine):
        columns = {c["name"] for c in inspect(db_engine).get_columns("games")}
        assert "game_id" in columns
        assert "id" not in columns


class TestGameModel:

    def test_create_game_with_relations(self, db_session, seeded):
        game = Game(
            title="Super Mario 64",
            console_id=seeded.n64,
            genre_id=seeded.action,
            jp_release_date=date(1996, 6, 23),
            purchase_price=Decimal("24.99"),
            owned=True,
        )
        game.developers = [db_session.get(Developer, seeded.miyamoto)]
        db_session.add(game)
        db_session.commit()

        fetched = db_session.get(Game, game.id)
        assert fetched.console_name == "Nintendo 64"
        assert fetched.genre_name == "Action"
        assert fetched.developer_names == ["Shigeru Miyamoto"]
        assert fetched.composer_names == []
        assert fetched.purchase_price == Decimal("24.99")

    def test_display_names_empty_without_relations(self):
        game = Game(title="Loose cartridge")
        assert game.console_name == ""
        assert game.genre_name == ""
        assert game.jp_rating_name == ""

    def test_condition_out_of_range_rejected(self, db_session, seeded):
        db_session.add(Game(title="Broken", console_id=seeded.n64, owned=False, condition=6))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_delete_game_removes_join_rows(self, db_session, seeded):
        game = Game(title="Zelda", console_id=seeded.n64, owned=False)
        game.developers = [db_session.get(Developer, seeded.ead)]
        db_session.add(game)
        db_session.commit()

        db_session.delete(game)
        db_session.commit()
        count = db_session.scalar(select(func.count()).select_from(game_developers))
        assert count == 0
        # The developer itself survives
        assert db_session.get(Developer, seeded.ead) is not None

    def test_deleting_console_nulls_game_platform(self, db_session, seeded):
        game = Game(title="Wipeout", console_id=seeded.ps1, owned=False)
        db_session.add(game)
        db_session.commit()

        db_session.delete(db_session.get(Console, seeded.ps1))
        db_session.commit()
        db_session.expire_all()
        assert db_session.get(Game, game.id).console_id is None


class TestLookupModels:

    def test_genre_name_unique(self, db_session, seeded):
        db_session.add(Genre(name="Action"))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_rating_label_combines_code_and_region(self, db_session, seeded):
        rating = db_session.get(RatingSystem, seeded.pegi_3)
        assert rating.name == "PEGI 3 - EU"
        assert rating.description == "Ages 3 and over"


class TestAccessoryModel:

    def test_quantity_defaults_to_one(self, db_session, seeded):
        acc = Accessory(name="Controller Pak", type_id=seeded.controller_type)
        db_session.add(acc)
        db_session.commit()
        assert acc.quantity == 1
        assert acc.owned is False

    def test_deleting_console_drops_compatibility_rows(self, db_session, seeded):
        acc = Accessory(name="Rumble Pak", type_id=seeded.controller_type)
        acc.consoles = [db_session.get(Console, seeded.n64)]
        db_session.add(acc)
        db_session.commit()
        assert acc.console_names == ["Nintendo 64"]

        db_session.delete(db_session.get(Console, seeded.n64))
        db_session.commit()
        count = db_session.scalar(select(func.count()).select_from(accessory_consoles))
        assert count == 0
