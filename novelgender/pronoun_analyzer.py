"""
Pronoun-based gender evidence and machine-translation inconsistency detection.

Machine-translated web novels frequently swap "he" and "she" for the same character. The
analyzer scores pronouns attached to a name and counts windows where both genders occur;
`detect_pronoun_inconsistencies` turns a high count into a single corrected verdict.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from novelgender.config import GenderInferenceConfig
from novelgender.gender_patterns_data import (
    ARCHETYPES,
    DIALOGUE_ATTRIBUTION_VERBS,
    MISTRANSLATION_PATTERNS,
    POSSESSIVE_PARTNERS,
    PRONOUNS,
)
from novelgender.results import FEMALE, MALE, ScoreResult
from novelgender.text_windowing import compile_pattern, count_pronouns, interpolate_name, name_pattern

_DIRECT_RADIUS = 15
_PROXIMATE_RADIUS = 40
_SENTENCE_RADIUS = 50
_FOLLOWING_CHARS = 100
_PROXIMITY_TAIL = 80

_DIRECT_SCORE = 3.0
_PROXIMATE_SCORE = 1.0
_POSSESSIVE_SCORE = 3.0
_DIALOGUE_SCORE = 2.0
_ARCHETYPE_SCORE = 3.0
_ISOLATED_CAP = 1.0
_ISOLATED_PER_PRONOUN = 0.3

_CAPITALIZED_NAME_PATTERN = re.compile(
    r"\b[A-Z][a-z]+\s+[A-Z][a-z]+\b"
    r"|\b(?:Master|Elder|Young|Lord|Lady|Miss|Mr|Mrs|Ms|Sir)\.?\s+[A-Z][a-z]+\b"
    r"|\b[A-Z][a-z]{2,}\b"
)
_SENTENCE_STARTERS = frozenset(
    {
        "The",
        "Then",
        "When",
        "But",
        "And",
        "After",
        "Before",
        "While",
        "Later",
        "Now",
        "This",
        "That",
        "There",
        "Here",
        "With",
        "His",
        "Her",
        "She",
        "Its",
        "They",
        "Their",
        "What",
        "Why",
        "How",
        "Yes",
        "Still",
        "Even",
        "Suddenly",
        "Meanwhile",
    }
)


@dataclass(frozen=True)
class PronounContextResult:
    male_score: float
    female_score: float
    inconsistencies: int
    contexts: Tuple[str, ...]
    evidence: Tuple[str, ...] = ()

    def to_score_result(self) -> ScoreResult:
        return ScoreResult.create(self.male_score, self.female_score, ", ".join(self.evidence[:2]))


@dataclass(frozen=True)
class InconsistencyResult:
    """A corrected gender when pronoun usage around a name is contradictory, else None."""

    corrected_gender: Optional[str]
    correction: Optional[str]
    inconsistencies: int

    @classmethod
    def none(cls, inconsistencies: int = 0) -> "InconsistencyResult":
        return cls(None, None, inconsistencies)


class PronounAnalyzer:
    def __init__(self, config: Optional[GenderInferenceConfig] = None):
        self._config = config or GenderInferenceConfig.create_default()

    def analyze(self, name: str, text: str) -> ScoreResult:
        return self.analyze_pronoun_context(name, text).to_score_result()

    def analyze_pronoun_context(self, name: str, text: str) -> PronounContextResult:
        """
        Score pronouns near each occurrence of `name`.

        For every sentence mentioning the name, a pronoun within 15 characters after it is a
        direct connection (+3); within 40 characters it is proximate (+1). The window after
        the name may run into the next sentence but never into quoted speech. A window holding
        both genders counts as one inconsistency. Possessive partners, dialogue attribution,
        isolated pronoun counts and archetype phrases are scored separately.
        """
        if not name or not text:
            return PronounContextResult(0.0, 0.0, 0, ())

        bounded = name_pattern(name)
        male_score = 0.0
        female_score = 0.0
        inconsistencies = 0
        contexts: List[str] = []
        evidence: List[str] = []

        sentence_pattern = compile_pattern(
            rf"[^.!?]{{0,{_SENTENCE_RADIUS}}}{bounded}[^.!?]{{0,{_SENTENCE_RADIUS}}}[.!?]"
        )
        for match in sentence_pattern.finditer(text):
            following = text[match.start() : match.start() + len(match.group(0)) + _FOLLOWING_CHARS]
            contexts.append(following)

            found = {}
            for gender in (MALE, FEMALE):
                found[gender] = self._pronoun_connection(bounded, following, PRONOUNS[gender])

            for gender, (count, direct) in found.items():
                if count == 0:
                    continue
                points = _DIRECT_SCORE if direct else _PROXIMATE_SCORE
                if gender == MALE:
                    male_score += points
                else:
                    female_score += points
                evidence.append(f"{'direct' if direct else 'nearby'} {gender} pronoun")

            if found[MALE][0] > 0 and found[FEMALE][0] > 0:
                inconsistencies += 1

        proximity_pattern = compile_pattern(rf"[^.!?]*{bounded}[^.!?]{{0,{_PROXIMITY_TAIL}}}")
        for match in proximity_pattern.finditer(text):
            window = match.group(0)
            scores, notes = self._score_proximity_window(name, bounded, window)
            male_score += scores[0]
            female_score += scores[1]
            evidence.extend(notes)

        for gender in (MALE, FEMALE):
            archetypes = "|".join(re.escape(term) for term in ARCHETYPES[gender])
            for pattern in (rf"{bounded}[^.!?]*\b(?:{archetypes})\b", rf"\b(?:{archetypes})\b[^.!?]*{bounded}"):
                archetype_match = compile_pattern(pattern).search(text)
                if archetype_match:
                    if gender == MALE:
                        male_score += _ARCHETYPE_SCORE
                    else:
                        female_score += _ARCHETYPE_SCORE
                    evidence.append(f"{gender} archetype")

        return PronounContextResult(male_score, female_score, inconsistencies, tuple(contexts), tuple(evidence))

    @staticmethod
    def _pronoun_connection(bounded: str, following: str, pronouns) -> Tuple[int, bool]:
        count = 0
        direct = False
        for pronoun in pronouns:
            if compile_pattern(rf"{bounded}[^\"\n]{{0,{_DIRECT_RADIUS}}}\b{pronoun}\b").search(following):
                count += 1
                direct = True
            elif compile_pattern(rf"{bounded}[^\"\n]{{0,{_PROXIMATE_RADIUS}}}\b{pronoun}\b").search(following):
                count += 1
        return count, direct

    def _score_proximity_window(self, name: str, bounded: str, window: str) -> Tuple[Tuple[float, float], List[str]]:
        male_score = 0.0
        female_score = 0.0
        notes = []

        for gender in (MALE, FEMALE):
            partners = "|".join(POSSESSIVE_PARTNERS[gender])
            possessive = compile_pattern(rf"{bounded}['\u2019]s\b[^.!?]*\b(?:{partners})\b")
            if possessive.search(window):
                if gender == MALE:
                    male_score += _POSSESSIVE_SCORE
                else:
                    female_score += _POSSESSIVE_SCORE
                notes.append(f"possessive ({gender})")

        verbs = "|".join(DIALOGUE_ATTRIBUTION_VERBS)
        for gender in (MALE, FEMALE):
            subject, possessive_pronoun = PRONOUNS[gender][0], PRONOUNS[gender][2]
            dialogue = compile_pattern(
                rf"\"[^\"]*\"\s*,?\s*{bounded}\s+(?:{verbs})[^.!?]{{0,20}}\b(?:{subject}|{possessive_pronoun})\b"
            )
            if dialogue.search(window):
                if gender == MALE:
                    male_score += _DIALOGUE_SCORE
                else:
                    female_score += _DIALOGUE_SCORE
                notes.append(f"dialogue attribution ({gender})")

        if not self._contains_other_names(name, window):
            male_count, female_count = count_pronouns(window)
            if male_count > female_count:
                male_score += min(_ISOLATED_CAP, male_count * _ISOLATED_PER_PRONOUN)
            elif female_count > male_count:
                female_score += min(_ISOLATED_CAP, female_count * _ISOLATED_PER_PRONOUN)

        return (male_score, female_score), notes

    @staticmethod
    def _contains_other_names(name: str, window: str) -> bool:
        name_tokens = set(name.split())
        for match in _CAPITALIZED_NAME_PATTERN.finditer(window):
            candidate = match.group(0)
            if candidate == name or candidate in _SENTENCE_STARTERS:
                continue
            if set(candidate.split()) <= name_tokens:
                continue
            if candidate.split()[-1] in name_tokens and len(candidate.split()) > 1:
                continue
            return True
        return False

    # ════════════════════════════════════════════════════════════════════════════════
    # INCONSISTENCY DETECTION
    # ════════════════════════════════════════════════════════════════════════════════

    def detect_pronoun_inconsistencies(self, name: str, text: str) -> InconsistencyResult:
        """
        Correct contradictory pronoun usage around `name`.

        Needs at least two inconsistent windows. Known mistranslation patterns decide first;
        otherwise a 3:1 aggregate pronoun ratio, then a 3:1 ratio of male-first versus
        female-first windows, picks the corrected gender.
        """
        context = self.analyze_pronoun_context(name, text)
        if context.inconsistencies < self._config.min_inconsistencies:
            return InconsistencyResult.none(context.inconsistencies)

        for template, gender, error_type in MISTRANSLATION_PATTERNS:
            if compile_pattern(interpolate_name(template, name)).search(text):
                return InconsistencyResult(
                    gender, f"detected {error_type} error - corrected to {gender}", context.inconsistencies
                )

        ratio = self._config.inconsistency_ratio
        total_male = 0
        total_female = 0
        male_first = 0
        female_first = 0
        male_then_female = compile_pattern(r"\b(?:he|him|his)\b.*\b(?:she|her|hers)\b", re.IGNORECASE | re.DOTALL)
        female_then_male = compile_pattern(r"\b(?:she|her|hers)\b.*\b(?:he|him|his)\b", re.IGNORECASE | re.DOTALL)
        for window in context.contexts:
            male_count, female_count = count_pronouns(window)
            total_male += male_count
            total_female += female_count
            if male_then_female.search(window):
                male_first += 1
            if female_then_male.search(window):
                female_first += 1

        if total_male > total_female * ratio:
            return InconsistencyResult(
                MALE,
                f"inconsistent pronouns detected ({total_male} male vs {total_female} female) - corrected to male",
                context.inconsistencies,
            )
        if total_female > total_male * ratio:
            return InconsistencyResult(
                FEMALE,
                f"inconsistent pronouns detected ({total_female} female vs {total_male} male) - corrected to female",
                context.inconsistencies,
            )
        if male_first > female_first * ratio:
            return InconsistencyResult(
                MALE,
                "detected translation error pattern (male→female) - corrected to male",
                context.inconsistencies,
            )
        if female_first > male_first * ratio:
            return InconsistencyResult(
                FEMALE,
                "detected translation error pattern (female→male) - corrected to female",
                context.inconsistencies,
            )
        return InconsistencyResult.none(context.inconsistencies)
