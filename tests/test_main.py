"""Tests for the command-line entry point."""

import json

from diet_planner.main import NO_PROFILE_NOTE, main


def test_main_without_command_prints_banner(capsys) -> None:
    assert main([]) == 0
    captured = capsys.readouterr()
    assert "Diet Planner" in captured.out


def test_metrics_for_default_profile(capsys, settings) -> None:
    assert main(["metrics"], settings=settings) == 0

    out = capsys.readouterr().out
    assert "BMI: 22.5 (normal)" in out
    assert "Target: 1611 kcal/day" in out


def test_profile_update_is_persisted(capsys, settings) -> None:
    argv = [
        "profile",
        "--age",
        "30",
        "--weight",
        "70",
        "--height",
        "175",
        "--goal",
        "LOSE_WEIGHT",
    ]
    assert main(argv, settings=settings) == 0
    capsys.readouterr()

    assert main(["metrics"], settings=settings) == 0

    assert "Target: 1479 kcal/day" in capsys.readouterr().out


def test_invalid_profile_value_is_rejected(capsys, settings) -> None:
    assert main(["profile", "--age", "0"], settings=settings) == 2
    assert "Invalid input" in capsys.readouterr().err


def test_provider_configuration(capsys, settings, tmp_path) -> None:
    code = main(
        ["provider", "--set-key", "openai", "sk-1", "--select", "openai"],
        settings=settings,
    )

    assert code == 0
    out = capsys.readouterr().out
    assert "Selected provider: openai" in out
    assert "- openai: key set" in out
    stored = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
    assert stored["diet_planner.provider_settings"]["builtinApiKeys"] == {
        "openai": "sk-1"
    }


def test_add_custom_provider(capsys, settings) -> None:
    code = main(
        [
            "provider",
            "--add-custom",
            "deepseek",
            "--name",
            "DeepSeek",
            "--base-url",
            "https://api.deepseek.com",
            "--model",
            "deepseek-chat",
        ],
        settings=settings,
    )

    assert code == 0
    assert "- deepseek (DeepSeek): https://api.deepseek.com [incomplete]" in (
        capsys.readouterr().out
    )


def test_prompt_command_prints_prompt(capsys, settings) -> None:
    assert main(["prompt", "--max-ingredients", "8"], settings=settings) == 0

    assert "shoppingList must contain at most 8 entries" in capsys.readouterr().out


def test_test_connection_without_key_fails(capsys, settings) -> None:
    assert main(["test-connection"], settings=settings) == 1

    assert "No Gemini API key is configured" in capsys.readouterr().err


def test_metrics_notes_default_profile_until_saved(capsys, settings) -> None:
    assert main(["metrics"], settings=settings) == 0
    assert NO_PROFILE_NOTE in capsys.readouterr().err

    assert main(["profile", "--age", "40"], settings=settings) == 0
    capsys.readouterr()

    assert main(["metrics"], settings=settings) == 0
    assert NO_PROFILE_NOTE not in capsys.readouterr().err
