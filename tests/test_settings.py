import json

import pytest

from autocap_engine.settings import (
    DEFAULT_ABBREVIATIONS,
    CorrectionConfig,
    CorrectionSettings,
    SettingsStore,
    parse_word_list,
)


def test_defaults() -> None:
    settings = CorrectionSettings()

    assert settings.exclusion_list == ()
    assert settings.abbreviations == DEFAULT_ABBREVIATIONS
    assert not settings.capitalize_list_items
    assert not settings.capitalize_sentences


def test_from_mapping_defaults_each_bad_field_independently() -> None:
    settings = CorrectionSettings.from_mapping(
        {
            "exclusionList": ["iPhone", 3, "  ", "macOS"],
            "abbreviations": 42,
            "capitalizeListItem": "yes",
            "capitalizeSentences": True,
        }
    )

    assert settings.exclusion_list == ("iPhone", "macOS")
    assert settings.abbreviations == DEFAULT_ABBREVIATIONS
    assert settings.capitalize_list_items is False
    assert settings.capitalize_sentences is True


def test_from_mapping_accepts_comma_separated_strings() -> None:
    settings = CorrectionSettings.from_mapping({"exclusionList": "iPhone, macOS,,"})

    assert settings.exclusion_list == ("iPhone", "macOS")


def test_from_mapping_handles_non_mapping() -> None:
    assert CorrectionSettings.from_mapping(None) == CorrectionSettings()
    assert CorrectionSettings.from_mapping(["not", "a", "dict"]) == CorrectionSettings()


def test_parse_word_list() -> None:
    assert parse_word_list(" a, b ,, c ") == ("a", "b", "c")
    assert parse_word_list("") == ()


def test_config_lookups_are_case_insensitive() -> None:
    config = CorrectionConfig.from_settings(
        CorrectionSettings(exclusion_list=("HAllo",), abbreviations=("E.g.", "..."))
    )

    assert config.is_excluded("hallo")
    assert config.is_excluded("HALLO")
    assert config.is_abbreviation("e.g.")
    assert config.is_abbreviation("E.G")
    assert config.abbreviations == frozenset({"e.g"})


def test_store_persists_updates_and_notifies(tmp_path) -> None:
    path = tmp_path / "settings.json"
    store = SettingsStore(path)
    seen = []
    store.subscribe(seen.append)

    store.update(capitalize_sentences=True, exclusion_list=("iPhone",))

    assert json.loads(path.read_text(encoding="utf-8"))["capitalizeSentences"] is True
    assert seen and seen[-1].capitalize_sentences
    reloaded = SettingsStore(path).load()
    assert reloaded == store.settings


def test_store_falls_back_to_defaults_on_malformed_file(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    assert SettingsStore(path).load() == CorrectionSettings()


def test_store_missing_file_uses_defaults(tmp_path) -> None:
    store = SettingsStore(tmp_path / "absent.json")

    assert store.load() == CorrectionSettings()
    assert not (tmp_path / "absent.json").exists()


def test_store_update_coerces_like_stored_data() -> None:
    store = SettingsStore()

    settings = store.update(exclusion_list="iPhone, macOS", capitalize_sentences="yes")

    assert settings.exclusion_list == ("iPhone", "macOS")
    assert settings.capitalize_sentences is False
    assert CorrectionConfig.from_settings(settings).exclusions == frozenset(
        {"iphone", "macos"}
    )


def test_with_changes_rejects_unknown_fields() -> None:
    with pytest.raises(TypeError):
        CorrectionSettings().with_changes(capitalise=True)
