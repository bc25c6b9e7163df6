"""Immutable tuning parameters for gender inference."""

from __future__ import annotations
import re
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Mapping, Tuple

from novelgender.gender_patterns_data import EAST_ASIAN_CULTURES, SCRIPT_RANGES


@dataclass(frozen=True)
class GenderInferenceConfig:
    """Immutable configuration holding every threshold, weight and cache limit."""

    # Anchors: known characters trusted as ground truth for relationship inference
    anchor_min_confidence: float
    anchor_min_appearances: int

    # Verdict
    max_evidence: int
    base_threshold: float
    translation_adjustment: float
    east_asian_cultures: frozenset
    max_base_confidence: float
    confidence_per_point: float
    multi_character_confidence_bonus: float
    cross_validation_confidence_bonus: float
    cultural_bonus_multipliers: Mapping[str, float]
    confidence_modifiers: Mapping[str, float]

    # Base scores before the cultural bonus multiplier
    title_score: float
    name_pattern_score: float
    signal_bonus: float

    # Multi-character analysis
    advanced_min_characters: int
    context_weight: float
    dialogue_weight: float
    interaction_weight: float
    pronoun_disambiguation_weight: float
    roster_weights: Tuple[Tuple[int, float], ...]
    romantic_interaction_weight: float
    kinship_interaction_weight: float
    complex_pronoun_max_sentences: int
    complex_pronoun_threshold: float
    complex_pronoun_boost: float

    # Cross-validation and inconsistency correction
    cross_validation_margin: float
    cross_validation_shift: float
    cross_validation_penalty: float
    correction_weight: float
    correction_penalty: float
    min_inconsistencies: int
    inconsistency_ratio: float

    # Cultural origin detection
    origin_min_score: float
    origin_window_radius: int
    origin_name_weight: float
    origin_context_weight: float
    origin_linguistic_weight: float
    script_patterns: Tuple[Tuple[str, re.Pattern[str]], ...]

    # Caches
    cache_max_entries: int
    cache_retain_ratio: float

    # Batch detection
    redetect_below_confidence: float

    @classmethod
    def create_default(cls) -> "GenderInferenceConfig":
        """Factory method for the default configuration."""
        return cls(
            anchor_min_confidence=0.7,
            anchor_min_appearances=3,
            max_evidence=5,
            base_threshold=3.0,
            translation_adjustment=1.0,
            east_asian_cultures=EAST_ASIAN_CULTURES,
            max_base_confidence=0.9,
            confidence_per_point=0.05,
            multi_character_confidence_bonus=0.15,
            cross_validation_confidence_bonus=0.10,
            cultural_bonus_multipliers=MappingProxyType(
                {"chinese": 1.2, "japanese": 1.15, "korean": 1.10, "western": 1.0}
            ),
            confidence_modifiers=MappingProxyType({"chinese": 0.95, "japanese": 0.96, "korean": 0.97, "western": 1.0}),
            title_score=5.0,
            name_pattern_score=2.0,
            signal_bonus=1.0,
            advanced_min_characters=2,
            context_weight=1.5,
            dialogue_weight=1.3,
            interaction_weight=1.2,
            pronoun_disambiguation_weight=1.4,
            roster_weights=((10, 2.0), (5, 1.7), (3, 1.4), (2, 1.2)),
            romantic_interaction_weight=3.0,
            kinship_interaction_weight=4.0,
            complex_pronoun_max_sentences=20,
            complex_pronoun_threshold=0.7,
            complex_pronoun_boost=1.5,
            cross_validation_margin=1.2,
            cross_validation_shift=0.3,
            cross_validation_penalty=0.5,
            correction_weight=2.0,
            correction_penalty=1.0,
            min_inconsistencies=2,
            inconsistency_ratio=3.0,
            origin_min_score=2.0,
            origin_window_radius=200,
            origin_name_weight=3.0,
            origin_context_weight=2.0,
            origin_linguistic_weight=1.0,
            script_patterns=tuple((culture, re.compile(pattern)) for culture, pattern in SCRIPT_RANGES),
            cache_max_entries=150,
            cache_retain_ratio=0.8,
            redetect_below_confidence=0.7,
        )

    def with_anchor_thresholds(self, min_confidence: float, min_appearances: int) -> "GenderInferenceConfig":
        """Immutable update method for anchor eligibility."""
        return replace(self, anchor_min_confidence=min_confidence, anchor_min_appearances=min_appearances)

    def with_cache_limits(self, max_entries: int, retain_ratio: float = 0.8) -> "GenderInferenceConfig":
        return replace(self, cache_max_entries=max_entries, cache_retain_ratio=retain_ratio)

    def with_verdict_threshold(self, base_threshold: float, translation_adjustment: float) -> "GenderInferenceConfig":
        return replace(self, base_threshold=base_threshold, translation_adjustment=translation_adjustment)

    def threshold_for(self, culture: str) -> float:
        """Score margin needed for a verdict; East-Asian text needs more to offset mistranslation."""
        if culture in self.east_asian_cultures:
            return self.base_threshold + self.translation_adjustment
        return self.base_threshold

    def bonus_multiplier(self, culture: str) -> float:
        return self.cultural_bonus_multipliers.get(culture, 1.0)

    def confidence_modifier(self, culture: str) -> float:
        return self.confidence_modifiers.get(culture, 1.0)

    def roster_weight(self, character_count: int) -> float:
        """Weight applied to multi-character analysis for a roster of the given size."""
        for minimum, weight in self.roster_weights:
            if character_count >= minimum:
                return weight
        return 1.0
