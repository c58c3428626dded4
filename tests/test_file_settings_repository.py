"""Tests for the local JSON settings file."""

import json

from diet_planner.adapters.file_settings_repository import JsonFileSettingsRepository


def test_missing_file_loads_nothing(tmp_path) -> None:
    repository = JsonFileSettingsRepository(tmp_path / "settings.json")

    assert repository.load("diet_planner.profile") is None


def test_save_creates_parent_and_keeps_other_keys(tmp_path) -> None:
    path = tmp_path / "nested" / "settings.json"
    repository = JsonFileSettingsRepository(path)

    repository.save("first", {"a": 1})
    repository.save("second", {"b": "鸡胸肉"})

    assert repository.load("first") == {"a": 1}
    assert repository.load("second") == {"b": "鸡胸肉"}
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "first": {"a": 1},
        "second": {"b": "鸡胸肉"},
    }
    assert not path.with_suffix(".json.tmp").exists()


def test_empty_file_is_treated_as_empty(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("", encoding="utf-8")

    assert JsonFileSettingsRepository(path).load("first") is None


def test_corrupt_file_is_treated_as_empty(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"first": {"a": 1', encoding="utf-8")
    repository = JsonFileSettingsRepository(path)

    assert repository.load("first") is None

    repository.save("first", {"a": 2})

    assert repository.load("first") == {"a": 2}
