"""
Result and record types shared across the analyzers.

All types are frozen dataclasses returned by value. Analyzers build `ScoreResult`s, the
engine turns them into a `GenderResult`, and callers merge results into `Character`
records of a character map.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

MALE = "male"
FEMALE = "female"
UNKNOWN = "unknown"
GENDERS = (MALE, FEMALE, UNKNOWN)

PROVENANCE_DETECTED = "detected"
PROVENANCE_MANUAL = "manual"

_GENDER_CODES = {MALE: "m", FEMALE: "f", UNKNOWN: "u"}
_CODE_GENDERS = {code: gender for gender, code in _GENDER_CODES.items()}


def compress_gender(gender: Optional[str]) -> str:
    """Single-letter storage code: male -> "m", female -> "f", anything else -> "u"."""
    if not isinstance(gender, str):
        return "u"
    return _GENDER_CODES.get(gender.lower(), "u")


def expand_gender(code: Optional[str]) -> str:
    """Inverse of `compress_gender`; unknown codes expand to "unknown"."""
    if not isinstance(code, str):
        return UNKNOWN
    return _CODE_GENDERS.get(code, UNKNOWN)


def normalize_gender(value: Optional[str]) -> str:
    """Accept either a full gender string or a storage code."""
    if not isinstance(value, str):
        return UNKNOWN
    lowered = value.lower()
    if lowered in GENDERS:
        return lowered
    return expand_gender(lowered)


def clamp_confidence(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:  # NaN
        return 0.0
    return max(0.0, min(1.0, number))


# ════════════════════════════════════════════════════════════════════════════════
# ANALYZER OUTPUT
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ScoreResult:
    """Male/female evidence weights from a single signal source."""

    male_score: float = 0.0
    female_score: float = 0.0
    evidence: Optional[str] = None

    @classmethod
    def neutral(cls, evidence: Optional[str] = None) -> "ScoreResult":
        return cls(0.0, 0.0, evidence)

    @classmethod
    def create(cls, male_score: float, female_score: float, evidence: Optional[str] = None) -> "ScoreResult":
        return cls(max(0.0, male_score or 0.0), max(0.0, female_score or 0.0), evidence or None)

    @property
    def has_signal(self) -> bool:
        return self.male_score > 0 or self.female_score > 0

    @property
    def leaning(self) -> str:
        if self.male_score > self.female_score:
            return MALE
        if self.female_score > self.male_score:
            return FEMALE
        return "neutral"

    @property
    def margin(self) -> float:
        return abs(self.male_score - self.female_score)

    def scaled(self, factor: float) -> "ScoreResult":
        return ScoreResult(self.male_score * factor, self.female_score * factor, self.evidence)

    def combine(self, other: "ScoreResult") -> "ScoreResult":
        evidence = "; ".join(e for e in (self.evidence, other.evidence) if e)
        return ScoreResult(self.male_score + other.male_score, self.female_score + other.female_score, evidence or None)


@dataclass(frozen=True)
class GenderResult:
    """Engine verdict for one character name."""

    gender: str
    confidence: float
    evidence: Tuple[str, ...]

    @classmethod
    def create(cls, gender: str, confidence: float, evidence, max_evidence: int = 5) -> "GenderResult":
        items = tuple(e for e in evidence if e and e.strip())[:max_evidence]
        return cls(normalize_gender(gender), clamp_confidence(confidence), items or ("no evidence",))

    @classmethod
    def invalid(cls) -> "GenderResult":
        return cls(UNKNOWN, 0.0, ("invalid input",))

    @classmethod
    def no_evidence(cls) -> "GenderResult":
        return cls(UNKNOWN, 0.0, ("no evidence",))

    def to_dict(self) -> Dict[str, Any]:
        return {"gender": self.gender, "confidence": self.confidence, "evidence": list(self.evidence)}


# ════════════════════════════════════════════════════════════════════════════════
# CHARACTER MAP RECORDS
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Character:
    """One character-map entry. Confidence is clamped to [0, 1] on construction."""

    name: str
    gender: str = UNKNOWN
    confidence: float = 0.0
    appearances: int = 0
    evidence: Tuple[str, ...] = field(default_factory=tuple)
    provenance: str = PROVENANCE_DETECTED

    def __post_init__(self):
        object.__setattr__(self, "gender", normalize_gender(self.gender))
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))
        object.__setattr__(self, "appearances", max(0, int(self.appearances or 0)))
        object.__setattr__(self, "evidence", tuple(self.evidence or ())[:5])

    @property
    def is_manual(self) -> bool:
        return self.provenance == PROVENANCE_MANUAL

    def is_anchor(self, min_confidence: float = 0.7, min_appearances: int = 3) -> bool:
        """Trusted as gender ground truth when inferring other characters."""
        return (
            self.gender != UNKNOWN and self.confidence >= min_confidence and self.appearances >= min_appearances
        )

    def with_result(self, result: GenderResult) -> "Character":
        return replace(
            self,
            gender=result.gender,
            confidence=result.confidence,
            evidence=result.evidence,
            provenance=PROVENANCE_DETECTED,
        )

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "Character":
        """Build from a persisted entry; gender may be a full string or a storage code."""
        manual = bool(data.get("manual_override") or data.get("manualOverride"))
        if data.get("provenance") == PROVENANCE_MANUAL:
            manual = True
        evidence = data.get("evidence") or ()
        if isinstance(evidence, str):
            evidence = (evidence,)
        return cls(
            name=name,
            gender=normalize_gender(data.get("gender")),
            confidence=1.0 if manual else data.get("confidence", 0.0),
            appearances=data.get("appearances", 0) or 0,
            evidence=tuple(evidence),
            provenance=PROVENANCE_MANUAL if manual else PROVENANCE_DETECTED,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "gender": self.gender,
            "confidence": self.confidence,
            "appearances": self.appearances,
            "evidence": list(self.evidence),
            "manual_override": self.is_manual,
        }


def as_character(name: str, value: Any) -> Character:
    if isinstance(value, Character):
        return value
    if isinstance(value, Mapping):
        return Character.from_dict(name, value)
    logger.warning(f"Ignoring malformed character entry for {name!r}: {type(value).__name__}")
    return Character(name=name)


def normalize_character_map(character_map: Optional[Mapping[str, Any]]) -> Dict[str, Character]:
    """Character map with every value coerced to a `Character`, insertion order preserved."""
    if not character_map:
        return {}
    return {name: as_character(name, value) for name, value in character_map.items() if isinstance(name, str)}
