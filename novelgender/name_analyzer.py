"""Gender signals carried by a name itself: titles, honorifics, endings and short names."""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pypinyin

from novelgender.config import GenderInferenceConfig
from novelgender.gender_patterns_data import (
    EAST_ASIAN_CULTURES,
    NAME_ENDINGS,
    NAME_STRUCTURE_PATTERNS,
    SHORT_NAMES,
    TITLES,
)
from novelgender.results import UNKNOWN
from novelgender.text_windowing import compile_pattern, escape_for_pattern, name_pattern

_HAN_PATTERN = re.compile(r"[\u4e00-\u9fff]")
_SHORT_NAME_MAX_LENGTH = 3


@dataclass(frozen=True)
class NameVerdict:
    """Categorical outcome of a name check."""

    gender: str = UNKNOWN
    evidence: Optional[str] = None

    @classmethod
    def unknown(cls) -> "NameVerdict":
        return cls()

    @property
    def is_known(self) -> bool:
        return self.gender != UNKNOWN


@dataclass(frozen=True)
class _TitleRule:
    gender: str
    title: str
    attached: bool
    prefix: re.Pattern[str]
    suffix: re.Pattern[str]
    embedded: re.Pattern[str]


def romanize_han(text: str) -> List[str]:
    """Toneless pinyin syllables for the Han characters of `text`, capitalized."""
    syllables = pypinyin.lazy_pinyin(text, style=pypinyin.Style.NORMAL)
    return [syllable.strip().capitalize() for syllable in syllables if syllable.strip()]


class NameAnalyzer:
    """Title/honorific and name-structure checks, scoped to one culture's tables."""

    def __init__(self, config: Optional[GenderInferenceConfig] = None):
        self._config = config or GenderInferenceConfig.create_default()
        self._title_rules = {culture: self._compile_title_rules(culture) for culture in TITLES}
        self._structure_patterns = {
            culture: tuple((gender, re.compile(pattern, re.IGNORECASE)) for gender, pattern in patterns)
            for culture, patterns in NAME_STRUCTURE_PATTERNS.items()
        }

    @staticmethod
    def _compile_title_rules(culture: str) -> Tuple[_TitleRule, ...]:
        rules = []
        for gender in ("male", "female"):
            for title in TITLES[culture][gender]:
                escaped = escape_for_pattern(title)
                rules.append(
                    _TitleRule(
                        gender=gender,
                        title=title,
                        attached=title.startswith("-"),
                        prefix=re.compile(rf"^{escaped}(?:\s+|$)", re.IGNORECASE),
                        suffix=re.compile(rf"\s+{escaped}$", re.IGNORECASE),
                        embedded=re.compile(rf"\s+{escaped}\s+", re.IGNORECASE),
                    )
                )
        return tuple(rules)

    # ════════════════════════════════════════════════════════════════════════════════
    # TITLES AND HONORIFICS
    # ════════════════════════════════════════════════════════════════════════════════

    def check_titles_and_honorifics(self, name: str, culture: str, text: Optional[str] = None) -> NameVerdict:
        """
        Match the culture's title table against the name, then against the text around it.

        Within the name, prefix titles are tried first, then suffixes ("Taro-kun",
        "Wei Gege"), then titles embedded between tokens; male before female at each stage.
        When `text` is given, a title written immediately before the name ("Young Master
        Wang Li") or attached after it ("Wang Li gege") also counts. Western has no table.
        """
        rules = self._title_rules.get(culture)
        if not rules or not name:
            return NameVerdict.unknown()

        stripped = name.strip()
        for rule in rules:
            if not rule.attached and rule.prefix.search(stripped):
                return NameVerdict(rule.gender, rule.title)
        for rule in rules:
            if rule.attached:
                if stripped.lower().endswith(rule.title.lower()) and len(stripped) > len(rule.title):
                    return NameVerdict(rule.gender, rule.title)
            elif rule.suffix.search(stripped):
                return NameVerdict(rule.gender, rule.title)
        for rule in rules:
            if not rule.attached and rule.embedded.search(stripped):
                return NameVerdict(rule.gender, rule.title)

        if text:
            return self._check_adjacent_titles(name, text, rules)
        return NameVerdict.unknown()

    @staticmethod
    def _check_adjacent_titles(name: str, text: str, rules: Tuple[_TitleRule, ...]) -> NameVerdict:
        bounded = name_pattern(name)
        for rule in rules:
            escaped = escape_for_pattern(rule.title)
            if rule.attached:
                pattern = bounded + escaped + r"(?!\w)"
            else:
                pattern = rf"(?<!\w){escaped}\s+{bounded}|{bounded}[\s-]{escaped}(?!\w)"
            if compile_pattern(pattern).search(text):
                return NameVerdict(rule.gender, rule.title)
        return NameVerdict.unknown()

    # ════════════════════════════════════════════════════════════════════════════════
    # NAME STRUCTURE
    # ════════════════════════════════════════════════════════════════════════════════

    def check_name_patterns(self, name: str, culture: str) -> NameVerdict:
        """
        Culture-specific name-structure checks. Western names return unknown.

        Tests, in order: the structure regexes against the full name, the culture's endings
        against the first token (female endings first), and for names of at most three
        characters a curated short-name lookup. Han-script names are romanized with pypinyin
        before any of these checks.
        """
        if culture not in EAST_ASIAN_CULTURES or not name or not name.strip():
            return NameVerdict.unknown()

        stripped = name.strip()
        romanized = stripped
        if _HAN_PATTERN.search(stripped):
            romanized = " ".join(romanize_han(stripped))

        for gender, pattern in self._structure_patterns.get(culture, ()):
            if pattern.search(romanized):
                return NameVerdict(gender, f"{culture} name structure")

        tokens = romanized.split()
        first_token = tokens[0].lower() if tokens else ""
        endings = NAME_ENDINGS.get(culture, {})
        for gender in ("female", "male"):
            for ending in endings.get(gender, ()):
                if first_token.endswith(ending):
                    return NameVerdict(gender, f"{culture} name ending '-{ending}'")

        if len(stripped) <= _SHORT_NAME_MAX_LENGTH:
            return self._check_short_name(stripped, culture)
        return NameVerdict.unknown()

    @staticmethod
    def _check_short_name(name: str, culture: str) -> NameVerdict:
        candidates = [name.capitalize()]
        if _HAN_PATTERN.search(name):
            syllables = romanize_han(name)
            candidates = ["".join(syllables).capitalize()] + syllables[:1]

        table = SHORT_NAMES.get(culture, {})
        for candidate in candidates:
            for gender in ("male", "female"):
                if candidate in table.get(gender, ()):
                    return NameVerdict(gender, f"{culture} short name '{candidate}'")
        return NameVerdict.unknown()
