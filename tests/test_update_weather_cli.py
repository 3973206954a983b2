import argparse
import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import app.db_models  # noqa: F401 - registers the table
from app.db import Base
from app.services.vector_store import DocumentChunk, WeatherDocumentStore
from scripts import update_weather


@pytest.fixture
def session_factory(tmp_path, monkeypatch):
    engine = create_engine(f"sqlite:///{tmp_path}/cli.db")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine)
    monkeypatch.setattr(update_weather, "_get_session", factory)
    yield factory
    engine.dispose()


def test_parse_site():
    site = update_weather.parse_site("Mission Peak=37.5126,-121.8805")

    assert site.name == "Mission Peak"
    assert site.latitude == 37.5126
    assert site.longitude == -121.8805


@pytest.mark.parametrize("raw", ["Mission Peak", "Peak=37.5", "Peak=north,west"])
def test_parse_site_rejects_bad_input(raw):
    with pytest.raises(argparse.ArgumentTypeError):
        update_weather.parse_site(raw)


def test_update_defaults():
    args = update_weather.build_parser().parse_args(["update"])

    assert args.provider == "open-meteo"
    assert args.site is None
    assert args.reset is False


def test_stats_json(session_factory, capsys):
    session = session_factory()
    WeatherDocumentStore(session).add_documents(
        [DocumentChunk("one"), DocumentChunk("two")], [[1.0, 0.0], [0.0, 1.0]]
    )
    session.close()

    update_weather.main(["stats", "--json"])

    assert json.loads(capsys.readouterr().out) == {"documents": 2, "dimension": 2}


def test_reset_with_confirmation_flag(session_factory, capsys):
    session = session_factory()
    WeatherDocumentStore(session).add_documents([DocumentChunk("one")], [[1.0]])
    session.close()

    update_weather.main(["reset", "--yes"])

    assert "Removed 1 documents." in capsys.readouterr().out
    check = session_factory()
    assert WeatherDocumentStore(check).count() == 0
    check.close()


def test_update_requires_openai_key(monkeypatch):
    monkeypatch.setattr(update_weather.settings, "openai_api_key", "")

    with pytest.raises(SystemExit):
        update_weather.main(["update"])
