"""
Cultural origin detection for character names.

A name is classified as one of ``western``, ``chinese``, ``japanese`` or ``korean``. The
culture selects which title, name-ending and idiom tables apply to the rest of the analysis.

Detection order:

1. **Script**: kana means Japanese, Hangul means Korean, Han characters mean Chinese.
2. **Romanized name structure**: surname and given-name regexes, weighted x3.
3. **Context clues**: place names, honorifics and genre vocabulary counted in a wide
   window around the name, weighted x2.
4. **Linguistic domain**: one broad vocabulary hit per culture, weighted x1.

Western is the fallback when no East-Asian culture scores at least `origin_min_score`.
"""

from __future__ import annotations
import logging
import re
from typing import Dict, List, Optional, Tuple

from novelgender.config import GenderInferenceConfig
from novelgender.gender_patterns_data import (
    CULTURAL_PROXIMITY_TERMS,
    DIALOGUE_ADDRESS_TERMS,
    EAST_ASIAN_CULTURES,
    EAST_ASIAN_IDIOM_PATTERNS,
    EXACT_CULTURAL_PHRASES,
    LINGUISTIC_DOMAIN_PATTERNS,
    NAME_PLACEHOLDER,
    ORIGIN_CONTEXT_CLUES,
    ORIGIN_NAME_PATTERNS,
)
from novelgender.results import ScoreResult
from novelgender.text_windowing import (
    compile_pattern,
    first_matching_term,
    interpolate_name,
    name_pattern,
    phrase_pattern,
    proximity_window,
)

logger = logging.getLogger(__name__)

_SCORED_CULTURES = ("chinese", "japanese", "korean")
_PHRASE_SCORE = 3.0
_PROXIMITY_SCORE = 2.0
_IDIOM_SCORE = 2.0
_ADDRESS_SCORE = 2.0
_INDICATOR_RADIUS = 50


def _readable(template: str, name: str) -> str:
    return template.replace(r"\b", "").replace(NAME_PLACEHOLDER, name)


class CulturalOriginDetector:
    """Classifies names by culture and scores culture-specific gender indicators."""

    def __init__(self, config: Optional[GenderInferenceConfig] = None):
        self._config = config or GenderInferenceConfig.create_default()
        self._name_patterns = {
            culture: tuple(re.compile(pattern, re.IGNORECASE) for pattern in ORIGIN_NAME_PATTERNS[culture])
            for culture in _SCORED_CULTURES
        }
        self._context_clues = {
            culture: tuple(re.compile(pattern, re.IGNORECASE) for pattern in ORIGIN_CONTEXT_CLUES[culture])
            for culture in _SCORED_CULTURES
        }
        self._linguistic = {
            culture: re.compile(LINGUISTIC_DOMAIN_PATTERNS[culture], re.IGNORECASE) for culture in _SCORED_CULTURES
        }

    def detect(self, name: str, text: str) -> str:
        """Most likely culture of `name` given the surrounding `text`."""
        script_culture = self.detect_script(name)
        if script_culture:
            return script_culture

        scores = self.score_origins(name, text)
        best_culture, best_score = "western", 0.0
        for culture in _SCORED_CULTURES:
            if scores[culture] > best_score:
                best_culture, best_score = culture, scores[culture]

        if best_score < self._config.origin_min_score:
            logger.debug(f"No cultural markers for {name!r} (best {best_score}); using western")
            return "western"
        return best_culture

    def detect_script(self, name: str) -> Optional[str]:
        for culture, pattern in self._config.script_patterns:
            if pattern.search(name):
                return culture
        return None

    def score_origins(self, name: str, text: str) -> Dict[str, float]:
        """Weighted origin score per East-Asian culture."""
        window = " ".join(proximity_window(name, text or "", self._config.origin_window_radius))
        scores = {}
        for culture in _SCORED_CULTURES:
            name_score = sum(2.0 for pattern in self._name_patterns[culture] if pattern.search(name))
            context_score = sum(2.0 * len(pattern.findall(window)) for pattern in self._context_clues[culture])
            linguistic_score = 3.0 if self._linguistic[culture].search(window) else 0.0
            scores[culture] = (
                name_score * self._config.origin_name_weight
                + context_score * self._config.origin_context_weight
                + linguistic_score * self._config.origin_linguistic_weight
            )
        return scores

    def check_cultural_specific_indicators(self, name: str, text: str, culture: str) -> ScoreResult:
        """
        Score culture-specific gender markers around `name`.

        Checks, in order: exact phrases attached to the name, gendered terms in a short
        window, East-Asian narrative idioms, and address terms inside quoted dialogue that
        mentions the name.
        """
        male_score = 0.0
        female_score = 0.0
        evidence: List[str] = []

        phrases = EXACT_CULTURAL_PHRASES.get(culture, EXACT_CULTURAL_PHRASES["western"])
        for gender in ("male", "female"):
            for template in phrases[gender]:
                if compile_pattern(phrase_pattern(template, name)).search(text):
                    if gender == "male":
                        male_score += _PHRASE_SCORE
                    else:
                        female_score += _PHRASE_SCORE
                    evidence.append(f"'{template.replace(NAME_PLACEHOLDER, name)}'")
                    break

        window = " ".join(proximity_window(name, text, _INDICATOR_RADIUS))
        if window:
            terms = CULTURAL_PROXIMITY_TERMS.get(culture, CULTURAL_PROXIMITY_TERMS["western"])
            for gender in ("male", "female"):
                term = first_matching_term(window, terms[gender])
                if term:
                    if gender == "male":
                        male_score += _PROXIMITY_SCORE
                    else:
                        female_score += _PROXIMITY_SCORE
                    evidence.append(f"near '{term}'")

            if culture in EAST_ASIAN_CULTURES:
                male_idiom, female_idiom = self._match_idioms(name, window)
                if male_idiom:
                    male_score += _IDIOM_SCORE
                    evidence.append(f"pattern '{male_idiom}'")
                if female_idiom:
                    female_score += _IDIOM_SCORE
                    evidence.append(f"pattern '{female_idiom}'")

        if culture in DIALOGUE_ADDRESS_TERMS:
            male_term, female_term = self._match_address_terms(name, text, culture)
            if male_term:
                male_score += _ADDRESS_SCORE
                evidence.append(f"addressed as '{male_term}'")
            if female_term:
                female_score += _ADDRESS_SCORE
                evidence.append(f"addressed as '{female_term}'")

        return ScoreResult.create(male_score, female_score, ", ".join(evidence))

    def _match_idioms(self, name: str, window: str) -> Tuple[Optional[str], Optional[str]]:
        matched = []
        for gender in ("male", "female"):
            found = None
            for template in EAST_ASIAN_IDIOM_PATTERNS[gender]:
                if compile_pattern(interpolate_name(template, name)).search(window):
                    found = _readable(template, name)
                    break
            matched.append(found)
        return matched[0], matched[1]

    def _match_address_terms(self, name: str, text: str, culture: str) -> Tuple[Optional[str], Optional[str]]:
        quote_pattern = compile_pattern(r'"[^"]*' + name_pattern(name) + r'[^"]*"')
        quotes = " ".join(match.group(0) for match in quote_pattern.finditer(text))
        if not quotes:
            return None, None
        terms = DIALOGUE_ADDRESS_TERMS[culture]
        return first_matching_term(quotes, terms["male"]), first_matching_term(quotes, terms["female"])
