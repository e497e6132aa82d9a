"""
pytest fixtures shared across all tests.

Uses an in-memory SQLite database for fast, isolated test runs.
Each test function gets a fresh database; ``seeded`` adds one small set of
reference rows (genres, credits, ratings, consoles) and returns their ids.
"""

import os
from types import SimpleNamespace

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from sqlalchemy.orm import sessionmaker

from vgc_manager.config.settings import Settings
from vgc_manager.core.collection_controller import CollectionController
from vgc_manager.core.validation_engine import ValidationEngine
from vgc_manager.data.database import create_db_engine, init_db, make_session_factory
from vgc_manager.data.models import (
    AccessoryType,
    Base,
    Composer,
    Console,
    ConsoleType,
    Developer,
    Genre,
    Manufacturer,
    Producer,
    Publisher,
    RatingSystem,
)


@pytest.fixture(scope="function")
def sqlite_settings():
    return Settings(database_url="sqlite:///:memory:", _env_file=None)


@pytest.fixture(scope="function")
def db_engine(sqlite_settings):
    """In-memory SQLite engine with foreign keys enforced, fresh per test function."""
    engine = create_db_engine(sqlite_settings)
    init_db(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Plain session; rolls back after each test."""
    SessionFactory = sessionmaker(bind=db_engine)
    session = SessionFactory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return make_session_factory(db_engine)


@pytest.fixture(scope="function")
def controller(session_factory):
    return CollectionController(session_factory, ValidationEngine())


@pytest.fixture(scope="function")
def seeded(db_engine):
    """Reference rows used by most controller and view-model tests."""
    session = sessionmaker(bind=db_engine)()
    rows = dict(
        action=Genre(name="Action"),
        racing=Genre(name="Racing"),
        nintendo=Manufacturer(name="Nintendo"),
        sony=Manufacturer(name="Sony"),
        home=ConsoleType(name="Home"),
        handheld=ConsoleType(name="Handheld"),
        controller_type=AccessoryType(name="Controller"),
        miyamoto=Developer(name="Shigeru Miyamoto"),
        ead=Developer(name="Nintendo EAD"),
        kondo=Composer(name="Koji Kondo"),
        nintendo_pub=Publisher(name="Nintendo"),
        tezuka=Producer(name="Takashi Tezuka"),
        cero_a=RatingSystem(region="JP", code="CERO A"),
        esrb_e=RatingSystem(region="US", code="ESRB E"),
        pegi_3=RatingSystem(region="EU", code="PEGI 3", description="Ages 3 and over"),
    )
    session.add_all(rows.values())
    session.flush()
    rows["n64"] = Console(
        name="Nintendo 64", type_id=rows["home"].id,
        manufacturer_id=rows["nintendo"].id, generation=5,
    )
    rows["ps1"] = Console(
        name="PlayStation", type_id=rows["home"].id,
        manufacturer_id=rows["sony"].id, generation=5,
    )
    session.add_all([rows["n64"], rows["ps1"]])
    session.commit()
    ids = SimpleNamespace(**{key: row.id for key, row in rows.items()})
    session.close()
    return ids


@pytest.fixture(scope="function")
def game_form(seeded):
    """Builder for raw form values of a valid game, as the form view model collects them."""

    def build(**overrides) -> dict:
        data = {
            "title": "Super Mario 64",
            "console_id": seeded.n64,
            "genre_id": seeded.action,
            "jp_release_date": "1996-06-23",
            "us_release_date": "1996-09-29",
            "eu_release_date": "",
            "jp_rating_id": seeded.cero_a,
            "us_rating_id": None,
            "eu_rating_id": None,
            "units_sold": "11910000",
            "developers": [seeded.ead, seeded.miyamoto],
            "composers": [seeded.kondo],
            "publishers": [seeded.nintendo_pub],
            "producers": [],
            "owned": True,
            "box_owned": False,
            "collector": False,
            "condition": 4,
            "purchase_date": "2001-03-15",
            "purchase_price": "24.99",
            "notes": "  Cartridge only  ",
        }
        data.update(overrides)
        return data

    return build
