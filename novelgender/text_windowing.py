"""
Text windowing helpers shared by every analyzer.

Every name that reaches a regular expression passes through `escape_for_pattern` and is
bounded by word-character lookarounds, so names such as ``"A.J. (the 2nd)"`` or ``"*Kai*"``
neither break pattern compilation nor match inside longer words.
"""

from __future__ import annotations
import hashlib
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

from novelgender.gender_patterns_data import NAME_PLACEHOLDER, PRONOUNS

OTHER_PLACEHOLDER = "<OTHER>"

_TERMINATORS = ".!?"
_SENTENCE_PATTERN = re.compile(r"[^.!?]+(?:[.!?]+|$)")
_WORD_CHAR_PATTERN = re.compile(r"\w")

MALE_PRONOUN_PATTERN = re.compile(r"\b(?:" + "|".join(PRONOUNS["male"]) + r")\b", re.IGNORECASE)
FEMALE_PRONOUN_PATTERN = re.compile(r"\b(?:" + "|".join(PRONOUNS["female"]) + r")\b", re.IGNORECASE)


# ════════════════════════════════════════════════════════════════════════════════
# PATTERN CONSTRUCTION
# ════════════════════════════════════════════════════════════════════════════════


def escape_for_pattern(value: str) -> str:
    """Escape every regex metacharacter in `value`."""
    return re.escape(value)


def name_pattern(name: str) -> str:
    """Escaped name that only matches as a whole word (punctuation at the edges allowed)."""
    return rf"(?<!\w){escape_for_pattern(name)}(?!\w)"


def interpolate_name(template: str, name: str, other: Optional[str] = None) -> str:
    """Substitute the <NAME> (and optional <OTHER>) placeholders of a regex template."""
    pattern = template.replace(NAME_PLACEHOLDER, name_pattern(name))
    if other is not None:
        pattern = pattern.replace(OTHER_PLACEHOLDER, name_pattern(other))
    return pattern


def phrase_pattern(template: str, name: str) -> str:
    """Regex for a literal phrase template such as ``"<NAME>'s wife"``."""
    pieces = [escape_for_pattern(piece) for piece in template.split(NAME_PLACEHOLDER)]
    pattern = name_pattern(name).join(pieces)
    if not template.startswith(NAME_PLACEHOLDER) and _WORD_CHAR_PATTERN.match(template[0]):
        pattern = r"(?<!\w)" + pattern
    if not template.endswith(NAME_PLACEHOLDER) and _WORD_CHAR_PATTERN.match(template[-1]):
        pattern = pattern + r"(?!\w)"
    return pattern


def term_pattern(term: str) -> str:
    return rf"(?<!\w){escape_for_pattern(term)}(?!\w)"


@lru_cache(maxsize=8192)
def compile_pattern(pattern: str, flags: int = re.IGNORECASE) -> re.Pattern[str]:
    return re.compile(pattern, flags)


def name_regex(name: str) -> re.Pattern[str]:
    return compile_pattern(name_pattern(name))


def contains_name(name: str, text: str) -> bool:
    return name_regex(name).search(text) is not None


def first_matching_term(text: str, terms: Iterable[str]) -> Optional[str]:
    """First term (in table order) that occurs in `text` as a whole word, case-insensitive."""
    for term in terms:
        if compile_pattern(term_pattern(term)).search(text):
            return term
    return None


def first_term_in_windows(windows: Sequence[str], terms: Iterable[str]) -> Optional[str]:
    """
    First term (in table order) found inside any single window.

    Windows are searched one at a time, never joined, so the cost stays linear in the total
    window length and a term cannot be assembled across two windows.
    """
    for term in terms:
        pattern = compile_pattern(term_pattern(term))
        if any(pattern.search(window) for window in windows):
            return term
    return None


# ════════════════════════════════════════════════════════════════════════════════
# WINDOWS AND SENTENCES
# ════════════════════════════════════════════════════════════════════════════════


def proximity_window(name: str, text: str, radius: int = 100) -> List[str]:
    """
    Local context around every occurrence of `name`.

    Each window holds up to `radius` characters on either side of one occurrence without
    crossing a sentence terminator. Windows are returned in text order and may overlap
    when two occurrences are close together.
    """
    windows = []
    for match in name_regex(name).finditer(text):
        left = text[max(0, match.start() - radius) : match.start()]
        cut = max(left.rfind(terminator) for terminator in _TERMINATORS)
        if cut >= 0:
            left = left[cut + 1 :]

        right = text[match.end() : match.end() + radius]
        stops = [right.find(terminator) for terminator in _TERMINATORS if terminator in right]
        if stops:
            right = right[: min(stops)]

        windows.append(left + match.group(0) + right)
    return windows


def split_sentences(text: str) -> List[str]:
    """Split on . ! ? keeping the terminator; a trailing unterminated fragment is kept too."""
    sentences = []
    for match in _SENTENCE_PATTERN.finditer(text):
        sentence = match.group(0).strip()
        if sentence:
            sentences.append(sentence)
    return sentences


def sentences_containing(name: str, text: str) -> List[str]:
    regex = name_regex(name)
    return [sentence for sentence in split_sentences(text) if regex.search(sentence)]


# ════════════════════════════════════════════════════════════════════════════════
# PRONOUNS
# ════════════════════════════════════════════════════════════════════════════════


def count_pronouns(text: str) -> Tuple[int, int]:
    """(male, female) pronoun counts."""
    return len(MALE_PRONOUN_PATTERN.findall(text)), len(FEMALE_PRONOUN_PATTERN.findall(text))


def find_pronouns(text: str) -> List[Tuple[str, int, str]]:
    """(pronoun, position, gender) triples sorted by position."""
    found = [(m.group(0), m.start(), "male") for m in MALE_PRONOUN_PATTERN.finditer(text)]
    found.extend((m.group(0), m.start(), "female") for m in FEMALE_PRONOUN_PATTERN.finditer(text))
    return sorted(found, key=lambda item: item[1])


# ════════════════════════════════════════════════════════════════════════════════
# HASHING
# ════════════════════════════════════════════════════════════════════════════════


def content_hash(text: str) -> str:
    return hashlib.blake2b(text.encode("utf-8"), digest_size=16).hexdigest()


def roster_hash(names: Sequence[str]) -> str:
    """Order-independent hash of a set of character names."""
    return content_hash("|".join(sorted(set(names))))
