"""
Character Gender Inference Module

This module infers the gender of characters in machine-translated web novels from chapter
text, with special handling for the pronoun swaps and honorific conventions typical of
Chinese, Japanese and Korean source material.

## Overview

The core functionality is provided by the `GenderInferenceEngine` class, which runs a
one-way pipeline for each (name, text, character map) triple:

1. **Cultural Origin**: Classifies the name as western, chinese, japanese or korean
2. **Multi-Character Context**: Resolves pronouns against the roster of known characters
3. **Single-Signal Analysis**: Titles, name structure, cultural markers, pronouns,
   relationships, roles and appearance, each producing male/female scores
4. **Cross-Validation**: Reconciles disagreement between the roster-aware and single-signal
   views, then corrects known machine-translation pronoun swaps
5. **Verdict**: Applies a culture-dependent threshold and computes a bounded confidence

## Architecture

### Service Composition
- **CulturalOriginDetector**: Script, name-structure and context-clue culture detection
- **NameAnalyzer**: Titles, honorifics, name endings and short names
- **PronounAnalyzer**: Pronoun proximity scoring and inconsistency correction
- **RelationshipAnalyzer**: Relationship phrases, roles and anchor-based inference
- **AppearanceAnalyzer**: Three-tier physical description matching
- **MultiCharacterContextAnalyzer**: Roster-aware pronoun resolution with bounded caches
- **GenderInferenceEngine**: Orchestrator with dependency injection

Every analyzer returns an immutable `ScoreResult`. Analyzers never mutate the character map;
callers persist verdicts themselves (see `novelgender.character_map`).

## Usage Examples

```python
from novelgender.gender_inference import GenderInferenceEngine

engine = GenderInferenceEngine()

engine.guess_gender("Wang Li", "Young Master Wang Li cultivated his qi.")
# Returns: GenderResult(gender="male", confidence=0.855, evidence=(..., "title: Young Master (chinese)", ...))

characters = {"Mary": {"gender": "female", "confidence": 0.9, "appearances": 5}}
engine.guess_gender("Tom", "Tom is Mary's brother.", characters)
# Returns: GenderResult(gender="male", ...)

engine.guess_gender("X", "text")
# Returns: GenderResult(gender="unknown", confidence=0.0, evidence=("invalid input",))
```

## Error Handling

`guess_gender` never raises for bad input. Names shorter than two characters or empty text
yield `GenderResult.invalid()`; text without any usable signal yields
`GenderResult.no_evidence()`.

## Determinism

Identical inputs always produce identical results. Internal caches are keyed on every input
a cached value depends on, so cache state and call order never change a verdict.

## Thread Safety

The engine holds no global state. Caches and counters are guarded by locks, so one engine
may serve several worker threads analyzing different names of the same chapter.
"""

from __future__ import annotations
import logging
import math
import threading
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from novelgender.appearance_analyzer import AppearanceAnalyzer
from novelgender.config import GenderInferenceConfig
from novelgender.cultural_origin import CulturalOriginDetector
from novelgender.multi_character import AmbiguityResult, MultiCharacterContextAnalyzer
from novelgender.name_analyzer import NameAnalyzer, NameVerdict
from novelgender.pronoun_analyzer import InconsistencyResult, PronounAnalyzer
from novelgender.relationship_analyzer import RelationshipAnalyzer
from novelgender.results import (
    FEMALE,
    MALE,
    UNKNOWN,
    Character,
    GenderResult,
    ScoreResult,
    normalize_character_map,
)
from novelgender.text_windowing import roster_hash

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ════════════════════════════════════════════════════════════════════════════════
# RESULT TYPES
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AnalysisReport:
    """Full breakdown of one inference; `result` is what `guess_gender` returns."""

    name: str
    culture: str
    advanced: bool
    multi_character: ScoreResult
    traditional: ScoreResult
    cross_validated: bool
    correction: InconsistencyResult
    male_score: float
    female_score: float
    result: GenderResult
    ambiguity: Optional[AmbiguityResult] = None
    consensus: Optional[ScoreResult] = None
    cross_validation_adjusted: bool = False

    @classmethod
    def short_circuit(cls, name: Any, result: GenderResult) -> "AnalysisReport":
        return cls(
            name=name if isinstance(name, str) else "",
            culture="western",
            advanced=False,
            multi_character=ScoreResult.neutral(),
            traditional=ScoreResult.neutral(),
            cross_validated=False,
            correction=InconsistencyResult.none(),
            male_score=0.0,
            female_score=0.0,
            result=result,
        )


@dataclass(frozen=True)
class EngineStats:
    """Immutable snapshot of engine counters."""

    male_count: int
    female_count: int
    unknown_count: int
    multi_character_validations: int
    cross_validation_adjustments: int
    cultural_origins: Dict[str, int]
    cache_efficiency: float

    @property
    def total(self) -> int:
        return self.male_count + self.female_count + self.unknown_count


# ════════════════════════════════════════════════════════════════════════════════
# MAIN ENGINE
# ════════════════════════════════════════════════════════════════════════════════


class GenderInferenceEngine:
    """Main gender inference service."""

    def __init__(
        self,
        config: Optional[GenderInferenceConfig] = None,
        origin_detector: Optional[CulturalOriginDetector] = None,
        name_analyzer: Optional[NameAnalyzer] = None,
        pronoun_analyzer: Optional[PronounAnalyzer] = None,
        relationship_analyzer: Optional[RelationshipAnalyzer] = None,
        appearance_analyzer: Optional[AppearanceAnalyzer] = None,
        multi_character_analyzer: Optional[MultiCharacterContextAnalyzer] = None,
    ):
        self._config = config or GenderInferenceConfig.create_default()
        self._origin_detector = origin_detector or CulturalOriginDetector(self._config)
        self._name_analyzer = name_analyzer or NameAnalyzer(self._config)
        self._pronoun_analyzer = pronoun_analyzer or PronounAnalyzer(self._config)
        self._relationship_analyzer = relationship_analyzer or RelationshipAnalyzer(self._config)
        self._appearance_analyzer = appearance_analyzer or AppearanceAnalyzer(self._config)
        self._multi_character = multi_character_analyzer or MultiCharacterContextAnalyzer(self._config)

        self._stats_lock = threading.Lock()
        self._gender_counts: Counter = Counter()
        self._culture_counts: Counter = Counter()
        self._multi_character_validations = 0
        self._cross_validation_adjustments = 0
        self._last_roster_hash: Optional[str] = None

    @property
    def config(self) -> GenderInferenceConfig:
        return self._config

    @property
    def multi_character_analyzer(self) -> MultiCharacterContextAnalyzer:
        return self._multi_character

    @property
    def last_roster_hash(self) -> Optional[str]:
        return self._last_roster_hash

    # Public API methods

    def guess_gender(
        self, name: str, text: str, character_map: Optional[Mapping[str, Any]] = None
    ) -> GenderResult:
        """
        Main API method: infer the gender of `name` from `text`.

        `character_map` maps known character names to `Character` records or plain dicts
        (``{"gender": ..., "confidence": ..., "appearances": ...}``). It is only read.
        """
        return self.analyze(name, text, character_map).result

    def analyze(self, name: str, text: str, character_map: Optional[Mapping[str, Any]] = None) -> AnalysisReport:
        """Like `guess_gender`, but returns every intermediate score."""
        if not self._is_valid_input(name, text):
            logger.warning(f"Invalid input for gender inference: name={name!r}")
            return AnalysisReport.short_circuit(name, GenderResult.invalid())

        characters = normalize_character_map(character_map)
        existing = characters.get(name)
        if existing is not None and existing.is_manual:
            return AnalysisReport.short_circuit(
                name, GenderResult(existing.gender, 1.0, ("manual override",))
            )

        culture = self._origin_detector.detect(name, text)
        others = {other: character for other, character in characters.items() if other != name}
        advanced = len(others) >= self._config.advanced_min_characters

        multi, multi_evidence = self._multi_character_analysis(name, text, others, advanced)
        traditional, traditional_evidence = self._traditional_analysis(name, text, culture, characters)

        male_score = multi.male_score + traditional.male_score
        female_score = multi.female_score + traditional.female_score
        evidence = multi_evidence + traditional_evidence

        # Cross-validation runs in every advanced analysis; it only adjusts scores on disagreement.
        cross_validated = advanced
        adjusted = False
        if advanced:
            male_score, female_score, note = self._cross_validate(traditional, multi, male_score, female_score)
            if note:
                adjusted = True
                evidence.append(note)

        correction = self._pronoun_analyzer.detect_pronoun_inconsistencies(name, text)
        if correction.corrected_gender in (MALE, FEMALE):
            weight, penalty = self._config.correction_weight, self._config.correction_penalty
            if correction.corrected_gender == MALE:
                male_score += weight
                female_score = max(0.0, female_score - penalty)
            else:
                female_score += weight
                male_score = max(0.0, male_score - penalty)
            evidence.append(correction.correction)

        result = self._verdict(culture, male_score, female_score, evidence, advanced, cross_validated)

        ambiguity = None
        consensus = None
        if advanced:
            all_names = list(others) + [name]
            ambiguity = self._multi_character.resolve_character_ambiguities(name, text, all_names)
            consensus = self._multi_character.cross_validate_analysis(name, text, others, traditional)

        self._record(result, culture, advanced, adjusted)
        self._last_roster_hash = roster_hash(list(characters))

        return AnalysisReport(
            name=name,
            culture=culture,
            advanced=advanced,
            multi_character=multi,
            traditional=traditional,
            cross_validated=cross_validated,
            cross_validation_adjusted=adjusted,
            correction=correction,
            male_score=male_score,
            female_score=female_score,
            result=result,
            ambiguity=ambiguity,
            consensus=consensus,
        )

    def clear_caches(self) -> None:
        """Drop every cached intermediate result. Verdicts are unaffected."""
        self._multi_character.clear_caches()
        self._last_roster_hash = None
        logger.debug("Cleared gender inference caches")

    def get_stats(self) -> EngineStats:
        metrics = self._multi_character.get_analysis_metrics()
        with self._stats_lock:
            return EngineStats(
                male_count=self._gender_counts[MALE],
                female_count=self._gender_counts[FEMALE],
                unknown_count=self._gender_counts[UNKNOWN],
                multi_character_validations=self._multi_character_validations,
                cross_validation_adjustments=self._cross_validation_adjustments,
                cultural_origins=dict(self._culture_counts),
                cache_efficiency=metrics.cache_efficiency,
            )

    def reset_stats(self) -> None:
        with self._stats_lock:
            self._gender_counts.clear()
            self._culture_counts.clear()
            self._multi_character_validations = 0
            self._cross_validation_adjustments = 0

    # ════════════════════════════════════════════════════════════════════════════════
    # PIPELINE STAGES
    # ════════════════════════════════════════════════════════════════════════════════

    @staticmethod
    def _is_valid_input(name: Any, text: Any) -> bool:
        if not isinstance(name, str) or len(name.strip()) <= 1:
            return False
        return isinstance(text, str) and bool(text.strip())

    def _multi_character_analysis(
        self, name: str, text: str, others: Dict[str, Character], advanced: bool
    ) -> Tuple[ScoreResult, List[str]]:
        analyzer = self._multi_character
        if not advanced:
            context = analyzer.analyze_with_multi_character_context(name, text, others)
            return context, [f"context: {context.evidence}"] if context.evidence else []

        all_names = list(others) + [name]
        views = (
            ("context", analyzer.analyze_with_multi_character_context(name, text, others), self._config.context_weight),
            ("dialogue", analyzer.analyze_dialogue_attribution(name, text, all_names), self._config.dialogue_weight),
            (
                "interaction",
                analyzer.analyze_character_interactions(name, text, others),
                self._config.interaction_weight,
            ),
            (
                "pronoun",
                analyzer.analyze_complex_pronoun_references(name, text, others).score,
                self._config.pronoun_disambiguation_weight,
            ),
        )

        combined = ScoreResult.neutral()
        notes = []
        for label, view, weight in views:
            combined = combined.combine(view.scaled(weight))
            if view.evidence:
                notes.append(f"{label}: {view.evidence}")

        roster_weight = self._config.roster_weight(len(others))
        combined = ScoreResult.create(combined.male_score * roster_weight, combined.female_score * roster_weight)
        return combined, [f"multi-char: {'; '.join(notes)}"] if notes else []

    def _traditional_analysis(
        self, name: str, text: str, culture: str, characters: Dict[str, Character]
    ) -> Tuple[ScoreResult, List[str]]:
        multiplier = self._config.bonus_multiplier(culture)
        bonus = round_half_up(self._config.signal_bonus * multiplier)

        signals: List[Tuple[str, ScoreResult]] = []

        title = self._name_analyzer.check_titles_and_honorifics(name, culture, text)
        if title.is_known:
            points = round_half_up(self._config.title_score * multiplier)
            signals.append(("title", self._verdict_score(title, points, f"{title.evidence} ({culture})")))

        pattern = self._name_analyzer.check_name_patterns(name, culture)
        if pattern.is_known:
            points = round_half_up(self._config.name_pattern_score * multiplier)
            signals.append(("name pattern", self._verdict_score(pattern, points, pattern.evidence)))

        relationships = self._relationship_analyzer
        cultural = self._origin_detector.check_cultural_specific_indicators(name, text, culture)
        signals.append(("cultural", self._with_bonus(cultural, bonus)))
        signals.append(("pronoun", self._pronoun_analyzer.analyze(name, text)))
        signals.append(("relationship", self._with_bonus(relationships.check_relationships(name, text), bonus)))
        signals.append(("role", self._with_bonus(relationships.analyze_character_role(name, text, culture), bonus)))
        signals.append(("related", relationships.infer_gender_from_related(name, text, characters)))
        signals.append(("appearance", self._appearance_analyzer.analyze(name, text, culture)))

        total = ScoreResult.neutral()
        evidence = []
        for label, signal in signals:
            if not signal.has_signal:
                continue
            total = ScoreResult(total.male_score + signal.male_score, total.female_score + signal.female_score)
            if signal.evidence:
                evidence.append(f"{label}: {signal.evidence}")
        return total, evidence

    @staticmethod
    def _verdict_score(verdict: NameVerdict, points: float, evidence: Optional[str]) -> ScoreResult:
        if verdict.gender == MALE:
            return ScoreResult.create(points, 0.0, evidence)
        return ScoreResult.create(0.0, points, evidence)

    @staticmethod
    def _with_bonus(result: ScoreResult, bonus: float) -> ScoreResult:
        if not result.has_signal:
            return result
        return ScoreResult(
            result.male_score + bonus if result.male_score > 0 else 0.0,
            result.female_score + bonus if result.female_score > 0 else 0.0,
            result.evidence,
        )

    def _cross_validate(
        self, traditional: ScoreResult, multi: ScoreResult, male_score: float, female_score: float
    ) -> Tuple[float, float, Optional[str]]:
        """Let a much more confident multi-character view override a disagreeing traditional one."""
        multi_leaning, traditional_leaning = multi.leaning, traditional.leaning
        if "neutral" in (multi_leaning, traditional_leaning) or multi_leaning == traditional_leaning:
            return male_score, female_score, None
        required = traditional.margin * self._config.cross_validation_margin
        if multi.margin < required and not math.isclose(multi.margin, required):
            return male_score, female_score, None

        shift = multi.margin * self._config.cross_validation_shift
        penalty = shift * self._config.cross_validation_penalty
        if multi_leaning == MALE:
            male_score += shift
            female_score = max(0.0, female_score - penalty)
        else:
            female_score += shift
            male_score = max(0.0, male_score - penalty)
        return male_score, female_score, f"cross-validated with multi-char analysis ({multi_leaning})"

    def _verdict(
        self,
        culture: str,
        male_score: float,
        female_score: float,
        evidence: List[str],
        advanced: bool,
        cross_validated: bool,
    ) -> GenderResult:
        threshold = self._config.threshold_for(culture)
        if male_score > female_score and male_score >= threshold:
            gender, margin = MALE, male_score - female_score
        elif female_score > male_score and female_score >= threshold:
            gender, margin = FEMALE, female_score - male_score
        else:
            if not any(evidence):
                return GenderResult.no_evidence()
            return GenderResult.create(UNKNOWN, 0.0, evidence, self._config.max_evidence)

        base = min(self._config.max_base_confidence, 0.5 + self._config.confidence_per_point * margin)
        confidence = base * self._config.confidence_modifier(culture)
        if advanced:
            confidence += self._config.multi_character_confidence_bonus
        if cross_validated:
            confidence += self._config.cross_validation_confidence_bonus
        return GenderResult.create(gender, confidence, evidence, self._config.max_evidence)

    def _record(self, result: GenderResult, culture: str, advanced: bool, adjusted: bool) -> None:
        with self._stats_lock:
            self._gender_counts[result.gender] += 1
            self._culture_counts[culture] += 1
            if advanced:
                self._multi_character_validations += 1
            if adjusted:
                self._cross_validation_adjustments += 1


# ════════════════════════════════════════════════════════════════════════════════
# CONVENIENCE FUNCTIONS
# ════════════════════════════════════════════════════════════════════════════════


def guess_gender(
    name: str,
    text: str,
    character_map: Optional[Mapping[str, Any]] = None,
    config: Optional[GenderInferenceConfig] = None,
) -> GenderResult:
    """
    One-off inference with a fresh engine.

    Nothing is shared between calls. Build a `GenderInferenceEngine` and reuse it when
    analyzing many names of the same chapter so the caches can help.
    """
    return GenderInferenceEngine(config).guess_gender(name, text, character_map)
