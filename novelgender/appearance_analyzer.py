"""
Physical-description evidence.

Three tiers, each consulted only when the previous one found nothing:

1. Generic descriptor words next to the name ("handsome", "beautiful"), weight 2.
2. Appearance indicators inside sentences that mention the name together with an
   appearance trigger ("wore", "hair", "face"), weight 2; the same indicators found only in
   a short unscoped window around the name weigh 1.
3. Culture-specific idioms ("willow waist", "hakama") near the name, weight 1.
"""

from __future__ import annotations
from typing import Optional, Tuple

from novelgender.config import GenderInferenceConfig
from novelgender.gender_patterns_data import (
    APPEARANCE_INDICATORS,
    APPEARANCE_TRIGGERS,
    CULTURAL_APPEARANCE_IDIOMS,
    DESCRIPTORS,
)
from novelgender.results import FEMALE, MALE, ScoreResult
from novelgender.text_windowing import (
    first_matching_term,
    first_term_in_windows,
    proximity_window,
    sentences_containing,
)

_DESCRIPTOR_SCORE = 2.0
_TRIGGER_SCORE = 2.0
_NEARBY_SCORE = 1.0
_IDIOM_SCORE = 1.0
_DESCRIPTOR_RADIUS = 100
_NEARBY_RADIUS = 30


def _score(gender: str, points: float, evidence: str) -> ScoreResult:
    if gender == MALE:
        return ScoreResult.create(points, 0.0, evidence)
    return ScoreResult.create(0.0, points, evidence)


class AppearanceAnalyzer:
    def __init__(self, config: Optional[GenderInferenceConfig] = None):
        self._config = config or GenderInferenceConfig.create_default()

    def analyze(self, name: str, text: str, culture: str = "western") -> ScoreResult:
        """First tier that produces a signal wins."""
        descriptions = self.analyze_descriptions(name, text)
        if descriptions.has_signal:
            return descriptions
        return self.analyze_appearance_descriptions(name, text, culture)

    def analyze_descriptions(self, name: str, text: str) -> ScoreResult:
        # Each window holds one occurrence of the name and no sentence terminator.
        windows = proximity_window(name, text, _DESCRIPTOR_RADIUS)
        if not windows:
            return ScoreResult.neutral()

        result = ScoreResult.neutral()
        for gender in (MALE, FEMALE):
            word = first_term_in_windows(windows, DESCRIPTORS[gender])
            if word:
                result = result.combine(_score(gender, _DESCRIPTOR_SCORE, f"described as {word}"))
        return result

    def analyze_appearance_descriptions(self, name: str, text: str, culture: str = "western") -> ScoreResult:
        mentions = sentences_containing(name, text)
        trigger_sentences = " ".join(s for s in mentions if first_matching_term(s, APPEARANCE_TRIGGERS))
        if trigger_sentences:
            result = self._match_indicators(trigger_sentences, _TRIGGER_SCORE)
            if result.has_signal:
                return result

        nearby = " ".join(proximity_window(name, text, _NEARBY_RADIUS))
        if not nearby:
            return ScoreResult.neutral()
        result = self._match_indicators(nearby, _NEARBY_SCORE)
        if result.has_signal:
            return result

        return self._match_cultural_idioms(nearby, culture)

    @staticmethod
    def _match_indicators(scope: str, points: float) -> ScoreResult:
        result = ScoreResult.neutral()
        for gender in (MALE, FEMALE):
            indicator = first_matching_term(scope, APPEARANCE_INDICATORS[gender])
            if indicator:
                result = result.combine(_score(gender, points, indicator))
        return result

    @staticmethod
    def _match_cultural_idioms(scope: str, culture: str) -> ScoreResult:
        cultures: Tuple[str, ...] = tuple(CULTURAL_APPEARANCE_IDIOMS)
        if culture in CULTURAL_APPEARANCE_IDIOMS:
            cultures = (culture,)
        for idiom_culture in cultures:
            result = ScoreResult.neutral()
            for gender in (MALE, FEMALE):
                idiom = first_matching_term(scope, CULTURAL_APPEARANCE_IDIOMS[idiom_culture][gender])
                if idiom:
                    result = result.combine(_score(gender, _IDIOM_SCORE, f"{idiom_culture} style: {idiom}"))
            if result.has_signal:
                return result
        return ScoreResult.neutral()
