"""
Character map maintenance across chapters.

The engine only reads a snapshot of the map. These helpers apply its verdicts back to the
map, keep manual overrides authoritative, merge per-chapter records, and render the
summary consumed by prose-rewriting prompts.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, Mapping, Optional

from novelgender.gender_inference import GenderInferenceEngine
from novelgender.results import (
    FEMALE,
    MALE,
    PROVENANCE_DETECTED,
    PROVENANCE_MANUAL,
    UNKNOWN,
    Character,
    normalize_character_map,
    normalize_gender,
)

logger = logging.getLogger(__name__)

AUTO = "auto"

_PRONOUN_SETS = {
    MALE: "he/him/his",
    FEMALE: "she/her/her",
    UNKNOWN: "unknown pronouns",
}


def needs_detection(character: Character, redetect_below: float = 0.7) -> bool:
    """Manual entries are never re-detected; weak or unknown verdicts always are."""
    if character.is_manual:
        return False
    return character.gender == UNKNOWN or character.confidence < redetect_below


def determine_character_genders(
    character_map: Mapping[str, Any], text: str, engine: Optional[GenderInferenceEngine] = None
) -> Dict[str, Character]:
    """
    Detect genders for every character that still needs it.

    Characters are processed in map order and each new verdict is visible to the ones
    after it, so a character confirmed early can anchor relationship inference later.
    Returns a new map; the input is left untouched.
    """
    engine = engine or GenderInferenceEngine()
    threshold = engine.config.redetect_below_confidence
    updated = normalize_character_map(character_map)

    for name in list(updated):
        character = updated[name]
        if not needs_detection(character, threshold):
            continue
        updated[name] = character.with_result(engine.guess_gender(name, text, updated))
    return updated


def set_manual_gender(character_map: Mapping[str, Any], name: str, gender: str) -> Dict[str, Character]:
    """
    Pin `name` to `gender` with confidence 1.0. Passing "auto" clears the override instead.
    """
    updated = normalize_character_map(character_map)
    if gender == AUTO:
        return clear_manual_gender(updated, name)

    existing = updated.get(name) or Character(name=name)
    updated[name] = replace(
        existing,
        gender=normalize_gender(gender),
        confidence=1.0,
        evidence=("manual override",),
        provenance=PROVENANCE_MANUAL,
    )
    return updated


def clear_manual_gender(character_map: Mapping[str, Any], name: str) -> Dict[str, Character]:
    """Return `name` to automatic detection; the next detection pass re-evaluates it."""
    updated = normalize_character_map(character_map)
    existing = updated.get(name)
    if existing is None:
        logger.warning(f"Cannot clear manual gender for unknown character {name!r}")
        return updated
    updated[name] = replace(existing, gender=UNKNOWN, confidence=0.0, evidence=(), provenance=PROVENANCE_DETECTED)
    return updated


def merge_character(existing: Character, incoming: Character) -> Character:
    """
    Merge a new chapter's record into the stored one.

    Appearance counts accumulate. A manual override always survives; otherwise the higher
    confidence verdict wins, and equal confidence favors the record with more evidence.
    """
    appearances = existing.appearances + incoming.appearances
    if existing.is_manual:
        return replace(existing, appearances=appearances)
    if incoming.is_manual:
        return replace(incoming, appearances=appearances)

    if incoming.confidence > existing.confidence:
        winner = incoming
    elif incoming.confidence == existing.confidence and len(incoming.evidence) > len(existing.evidence):
        winner = incoming
    else:
        winner = existing
    return replace(winner, name=existing.name, appearances=appearances)


def merge_character_maps(stored: Mapping[str, Any], chapter: Mapping[str, Any]) -> Dict[str, Character]:
    merged = normalize_character_map(stored)
    for name, character in normalize_character_map(chapter).items():
        merged[name] = merge_character(merged[name], character) if name in merged else character
    return merged


SUMMARY_HEADER = "CHARACTER INFORMATION (to help maintain proper pronouns and gender references):"
_SUMMARY_LIMIT = 10


def create_character_summary(characters: Iterable[Character], limit: int = _SUMMARY_LIMIT) -> str:
    """
    Character block for prose-rewriting prompts: name, gender, pronouns, appearance count.

    Characters seen more than once are preferred; when there are none, everyone qualifies.
    Listed most frequent first, at most `limit` lines. An empty roster gives "".
    """
    ordered = sorted(characters, key=lambda character: -character.appearances)
    if not ordered:
        return ""
    significant = [character for character in ordered if character.appearances > 1]
    lines = [SUMMARY_HEADER]
    for character in (significant or ordered)[:limit]:
        pronouns = _PRONOUN_SETS[character.gender]
        lines.append(f"- {character.name}: {character.gender} ({pronouns}), appeared {character.appearances} times")
    return "\n".join(lines) + "\n"
