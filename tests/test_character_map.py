"""Tests for character map maintenance helpers."""

import sys
from pathlib import Path

import pytest

# Add the parent directory to path to import novelgender
sys.path.insert(0, str(Path(__file__).parent.parent))

from novelgender.character_map import (
    SUMMARY_HEADER,
    clear_manual_gender,
    create_character_summary,
    determine_character_genders,
    merge_character,
    merge_character_maps,
    needs_detection,
    set_manual_gender,
)
from novelgender.gender_inference import GenderInferenceEngine
from novelgender.results import Character, normalize_character_map


@pytest.fixture(scope="session")
def engine():
    return GenderInferenceEngine()


def test_needs_detection():
    assert needs_detection(Character("Tom"))
    assert needs_detection(Character("Tom", "male", 0.5, 3))
    assert not needs_detection(Character("Tom", "male", 0.8, 3))
    assert not needs_detection(Character("Tom", "unknown", 0.0, 3, provenance="manual"))


def test_determine_character_genders(engine):
    characters = {
        "Mary": {"gender": "female", "confidence": 0.9, "appearances": 5},
        "Tom": {"appearances": 2},
    }
    updated = determine_character_genders(characters, "Tom is Mary's brother.", engine)

    assert updated["Tom"].gender == "male"
    assert updated["Tom"].confidence == pytest.approx(0.8)
    assert updated["Tom"].appearances == 2
    assert updated["Mary"].confidence == 0.9
    assert characters["Tom"] == {"appearances": 2}


def test_determine_character_genders_keeps_manual_entries(engine):
    characters = {"Tom": {"gender": "female", "manual_override": True, "appearances": 2}}
    updated = determine_character_genders(characters, "Tom said he would come.", engine)

    assert updated["Tom"].gender == "female"
    assert updated["Tom"].is_manual


def test_set_and_clear_manual_gender():
    characters = {"Tom": {"gender": "female", "confidence": 0.6, "appearances": 4}}

    pinned = set_manual_gender(characters, "Tom", "m")
    assert pinned["Tom"].gender == "male"
    assert pinned["Tom"].confidence == 1.0
    assert pinned["Tom"].is_manual
    assert pinned["Tom"].appearances == 4

    cleared = set_manual_gender(pinned, "Tom", "auto")
    assert cleared["Tom"].gender == "unknown"
    assert not cleared["Tom"].is_manual
    assert needs_detection(cleared["Tom"])


def test_clear_unknown_character_is_a_no_op(caplog):
    assert clear_manual_gender({}, "Nobody") == {}
    assert "Nobody" in caplog.text


def test_merge_character():
    stored = Character("Lin", "male", 0.7, 3, ("title: Gege",))
    stronger = Character("Lin", "female", 0.9, 2, ("pronoun: direct female pronoun",))
    tied = Character("Lin", "female", 0.7, 1, ("a", "b"))

    merged = merge_character(stored, stronger)
    assert (merged.gender, merged.confidence, merged.appearances) == ("female", 0.9, 5)

    merged = merge_character(stored, tied)
    assert (merged.gender, merged.appearances) == ("female", 4)

    merged = merge_character(tied, stored)
    assert (merged.gender, merged.appearances) == ("female", 4)


def test_merge_keeps_manual_override():
    manual = Character("Lin", "female", 1.0, 3, ("manual override",), provenance="manual")
    detected = Character("Lin", "male", 0.95, 2, ("title: Gege",))

    assert merge_character(manual, detected).gender == "female"
    assert merge_character(detected, manual).is_manual
    assert merge_character(detected, manual).appearances == 5


def test_merge_character_maps():
    stored = {"Lin": {"gender": "male", "confidence": 0.8, "appearances": 3}}
    chapter = {
        "Lin": {"gender": "male", "confidence": 0.6, "appearances": 2},
        "Mei": {"gender": "f", "confidence": 0.7, "appearances": 1},
    }
    merged = merge_character_maps(stored, chapter)

    assert list(merged) == ["Lin", "Mei"]
    assert (merged["Lin"].confidence, merged["Lin"].appearances) == (0.8, 5)
    assert merged["Mei"].gender == "female"


def test_normalize_character_map_handles_malformed_entries():
    characters = normalize_character_map({"Lin": "male", "Mei": {"gender": "f", "confidence": 3}})
    assert characters["Lin"] == Character("Lin")
    assert characters["Mei"].confidence == 1.0


def test_character_summary():
    characters = [
        Character("Mei", "female", 0.8, 3),
        Character("Extra", "unknown", 0.0, 1),
        Character("Lin", "male", 0.9, 5),
    ]
    expected = (
        SUMMARY_HEADER
        + "\n- Lin: male (he/him/his), appeared 5 times"
        + "\n- Mei: female (she/her/her), appeared 3 times\n"
    )
    assert create_character_summary(characters) == expected


def test_character_summary_falls_back_to_everyone():
    summary = create_character_summary([Character("Extra", "unknown", 0.0, 1)])
    assert summary.endswith("- Extra: unknown (unknown pronouns), appeared 1 times\n")


def test_character_summary_limit():
    characters = [Character(f"Char{i}", "male", 0.9, 20 - i) for i in range(15)]
    assert len(create_character_summary(characters).splitlines()) == 11
    assert create_character_summary([]) == ""
