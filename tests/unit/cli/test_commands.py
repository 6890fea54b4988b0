"""Tests for CLI commands run in-process against the demo provider set."""

import pytest

from cityhealth.cli.commands import search, server, suggest
from cityhealth.infrastructure.persistence.adapter.local_state import JsonFileLocalState
from cityhealth.infrastructure.persistence.seed import DEMO_PROVIDERS


@pytest.fixture
def state_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("CITYHEALTH_STATE__DIR", str(tmp_path / "state"))
    monkeypatch.setenv("CITYHEALTH_STORAGE__IMAGES_DIR", str(tmp_path / "images"))
    monkeypatch.delenv("CITYHEALTH_CONFIG_FILE", raising=False)
    return tmp_path / "state"


class TestSearchCommand:
    def test_search_saves_history(self, state_dir, capsys):
        search.search(type="lab")

        assert "labo-pasteur" in capsys.readouterr().out
        history = JsonFileLocalState(state_dir).read_list("searchHistory")
        assert [h["service_type"] for h in history] == ["lab"]

    def test_history_clear(self, state_dir, capsys):
        search.search(type="lab")
        search.history(clear=True)

        assert JsonFileLocalState(state_dir).read("searchHistory") is None
        assert "Search history cleared" in capsys.readouterr().out

    def test_invalid_type_exits(self, state_dir, capsys):
        with pytest.raises(SystemExit):
            search.search(type="veterinarian")

        assert "Invalid search" in capsys.readouterr().err


class TestSuggestCommands:
    def test_dismiss_persists(self, state_dir, capsys):
        suggest.dismiss("dr-benali")
        suggest.dismiss("dr-benali")

        dismissed = JsonFileLocalState(state_dir).read_list("dismissedSuggestions")
        assert [d["id"] for d in dismissed] == ["dr-benali"]
        assert "already dismissed" in capsys.readouterr().out

    def test_reset(self, state_dir):
        suggest.dismiss("dr-benali")
        suggest.reset()

        assert JsonFileLocalState(state_dir).read("dismissedSuggestions") is None


class TestSeedCommand:
    def test_seed_requires_database(self, state_dir, monkeypatch, capsys):
        monkeypatch.delenv("CITYHEALTH_DATABASE__URL", raising=False)

        with pytest.raises(SystemExit):
            server.seed()

        assert "No database configured" in capsys.readouterr().err

    def test_seed_loads_demo_providers(self, state_dir, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("CITYHEALTH_DATABASE__URL", f"sqlite+aiosqlite:///{tmp_path}/demo.db")

        server.seed()

        assert f"Seeded {len(DEMO_PROVIDERS)} providers" in capsys.readouterr().out
