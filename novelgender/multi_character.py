"""
Multi-character context analysis.

When several characters share a scene, a pronoun is only evidence for the character it
refers to. This module resolves pronoun references against the full roster of known
names, attributes dialogue to its speaker, and links characters to trusted anchors through
romantic and kinship relations. It is the only analyzer that needs the whole roster and it
arbitrates disagreements during cross-validation.

## Caching

Sentence extraction, dialogue attribution and interaction analysis are memoized in bounded
`AnalysisCache` instances. Cache keys cover every input a result depends on, so a cached
answer is always identical to a recomputed one; the caches only save time.

## Thread Safety

Each cache guards its read-modify-write operations with a lock, and the metrics counters
share another. One analyzer instance may be used from several threads.
"""

from __future__ import annotations
import itertools
import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple

from rapidfuzz.distance import Levenshtein

from novelgender.config import GenderInferenceConfig
from novelgender.gender_patterns_data import (
    KINSHIP_TEMPLATES,
    POSSESSIVE_PARTNERS,
    REFERENCE_SPEECH_VERBS,
    ROMANTIC_TEMPLATES,
    SPEAKER_CLAUSE_VERBS,
)
from novelgender.relationship_analyzer import find_anchor_relationships
from novelgender.results import FEMALE, MALE, UNKNOWN, Character, ScoreResult
from novelgender.text_windowing import (
    compile_pattern,
    contains_name,
    content_hash,
    count_pronouns,
    find_pronouns,
    name_pattern,
    name_regex,
    roster_hash,
    sentences_containing,
    split_sentences,
)

logger = logging.getLogger(__name__)

_PRONOUN_WEIGHT = 2.0
_POSSESSIVE_SCORE = 3.0
_DIALOGUE_DIRECT_WEIGHT = 3.0
_DIALOGUE_ISOLATED_WEIGHT = 1.5
_SIMILARITY_THRESHOLD = 0.7
_COMPLEX_CONTEXT_MIN_CHARACTERS = 3
_CONSENSUS_WEIGHTS = (0.4, 0.3, 0.2, 0.1)

_SPEECH_VERB_PATTERN = compile_pattern(r"\b(?:" + "|".join(REFERENCE_SPEECH_VERBS) + r")\s*$")


# ════════════════════════════════════════════════════════════════════════════════
# BOUNDED CACHE
# ════════════════════════════════════════════════════════════════════════════════


@dataclass
class CacheEntry:
    value: Any
    last_access: Optional[int]


@dataclass(frozen=True)
class CacheInfo:
    """Immutable cache information structure."""

    name: str
    size: int
    max_entries: int
    hits: int
    misses: int


class AnalysisCache:
    """
    Bounded memo table with most-recently-accessed retention.

    When a write pushes the size past `max_entries`, entries are ranked by their last access
    stamp and only the newest ``floor(max_entries * retain_ratio)`` survive. Entries whose stamp
    is missing or corrupt rank as oldest, ordered among themselves by insertion.
    """

    def __init__(self, name: str, max_entries: int = 150, retain_ratio: float = 0.8):
        self.name = name
        self._max_entries = max_entries
        self._retain = max(1, int(math.floor(max_entries * retain_ratio)))
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._clock = itertools.count(1)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            entry.last_access = next(self._clock)
            self._hits += 1
            return entry.value

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value, next(self._clock))
            if len(self._entries) > self._max_entries:
                self._evict_locked()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
        logger.debug(f"Cleared {self.name} cache")

    def info(self) -> CacheInfo:
        return CacheInfo(self.name, len(self._entries), self._max_entries, self._hits, self._misses)

    def _evict_locked(self) -> None:
        ranked = []
        for insertion_index, (key, entry) in enumerate(self._entries.items()):
            stamp = entry.last_access
            if not isinstance(stamp, int) or isinstance(stamp, bool):
                logger.warning(f"{self.name} cache entry {key!r} has no access stamp; treating as oldest")
                ranked.append(((0, 0, insertion_index), key))
            else:
                ranked.append(((1, stamp, insertion_index), key))
        ranked.sort(key=lambda item: item[0], reverse=True)
        keep = {key for _, key in ranked[: self._retain]}
        before = len(self._entries)
        self._entries = {key: entry for key, entry in self._entries.items() if key in keep}
        logger.debug(f"Evicted {before - len(self._entries)} entries from {self.name} cache")


# ════════════════════════════════════════════════════════════════════════════════
# RESULT TYPES
# ════════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AmbiguityResult:
    """Diagnostic metadata about names easily confused with the target."""

    evidence: str
    ambiguity_score: int
    resolution_confidence: float
    similar_names: Tuple[str, ...]
    unique_contexts: int


@dataclass(frozen=True)
class ComplexPronounResult:
    score: ScoreResult
    sentences_analyzed: int
    high_confidence_matches: int

    @property
    def confidence_ratio(self) -> float:
        return self.high_confidence_matches / max(1, self.sentences_analyzed)


@dataclass(frozen=True)
class AnalysisMetrics:
    total_analyses: int
    cache_hits: int
    complex_context_analyses: int
    cross_validations: int
    cache_efficiency: float
    cache_sizes: Dict[str, int] = field(default_factory=dict)


# ════════════════════════════════════════════════════════════════════════════════
# ANALYZER
# ════════════════════════════════════════════════════════════════════════════════


class MultiCharacterContextAnalyzer:
    """Roster-aware pronoun resolution, dialogue attribution and anchor interactions."""

    def __init__(self, config: Optional[GenderInferenceConfig] = None):
        self._config = config or GenderInferenceConfig.create_default()
        limit, ratio = self._config.cache_max_entries, self._config.cache_retain_ratio
        self.sentence_cache = AnalysisCache("sentence", limit, ratio)
        self.dialogue_cache = AnalysisCache("dialogue", limit, ratio)
        self.interaction_cache = AnalysisCache("interaction", limit, ratio)
        self._metrics_lock = threading.Lock()
        self._total_analyses = 0
        self._cache_hits = 0
        self._complex_context_analyses = 0
        self._cross_validations = 0

    def _count_hit(self) -> None:
        with self._metrics_lock:
            self._cache_hits += 1

    # Entry point

    def analyze_with_multi_character_context(
        self, name: str, text: str, known_characters: Mapping[str, Character]
    ) -> ScoreResult:
        """Sentence-level pronoun resolution plus dialogue attribution and anchor interactions."""
        if not name or not text:
            return ScoreResult.neutral()

        with self._metrics_lock:
            self._total_analyses += 1
            if len(known_characters) >= _COMPLEX_CONTEXT_MIN_CHARACTERS:
                self._complex_context_analyses += 1

        all_names = self._roster(name, known_characters)
        result = ScoreResult.neutral()
        for sentence in self.extract_relevant_sentences(name, text):
            result = result.combine(self.analyze_sentence_context(name, sentence, all_names))
        result = result.combine(self.analyze_dialogue_attribution(name, text, all_names))
        result = result.combine(self.analyze_character_interactions(name, text, known_characters))
        return result

    @staticmethod
    def _roster(name: str, known_characters: Mapping[str, Character]) -> List[str]:
        return [other for other in known_characters if other != name] + [name]

    def extract_relevant_sentences(self, name: str, text: str) -> Tuple[str, ...]:
        key = (name, content_hash(text))
        cached = self.sentence_cache.get(key)
        if cached is not None:
            self._count_hit()
            return cached
        sentences = tuple(sentences_containing(name, text))
        self.sentence_cache.put(key, sentences)
        return sentences

    # ════════════════════════════════════════════════════════════════════════════════
    # SENTENCE CONTEXT AND PRONOUN RESOLUTION
    # ════════════════════════════════════════════════════════════════════════════════

    def analyze_sentence_context(self, name: str, sentence: str, all_names: Sequence[str]) -> ScoreResult:
        """
        Score one sentence for `name`.

        Without other known characters every pronoun counts for the target. With others
        present, each pronoun is attributed to a single candidate first and only the target's
        pronouns count. Possessive partner nouns ("<name>'s wife") add 3 either way.
        """
        target = name_regex(name).search(sentence)
        if target is None:
            return ScoreResult.neutral()

        others = self.find_other_characters(name, sentence, all_names)
        if others:
            result = self.analyze_isolated_pronoun_reference(name, target.start(), others, sentence)
        else:
            result = self.analyze_direct_pronoun_reference(sentence)

        bounded = name_pattern(name)
        for gender in (MALE, FEMALE):
            partners = "|".join(POSSESSIVE_PARTNERS[gender])
            match = compile_pattern(rf"{bounded}['\u2019]s\s+(?:[\w-]+\s+)?({partners})\b").search(sentence)
            if match:
                points = (_POSSESSIVE_SCORE, 0.0) if gender == MALE else (0.0, _POSSESSIVE_SCORE)
                result = result.combine(ScoreResult.create(*points, f"possessive: {name}'s {match.group(1).lower()}"))
                break
        return result

    @staticmethod
    def analyze_direct_pronoun_reference(sentence: str, weight: float = _PRONOUN_WEIGHT) -> ScoreResult:
        male_count, female_count = count_pronouns(sentence)
        if male_count == 0 and female_count == 0:
            return ScoreResult.neutral()
        notes = []
        if male_count:
            notes.append(f"direct pronoun reference: {male_count} male pronouns")
        if female_count:
            notes.append(f"direct pronoun reference: {female_count} female pronouns")
        return ScoreResult.create(male_count * weight, female_count * weight, ", ".join(notes))

    @staticmethod
    def find_other_characters(name: str, sentence: str, all_names: Sequence[str]) -> List[Tuple[str, int]]:
        """(name, position) of other roster names in `sentence`, ignoring overlaps with the target."""
        target_spans = [match.span() for match in name_regex(name).finditer(sentence)]
        found = []
        for other in all_names:
            if other == name:
                continue
            for match in name_regex(other).finditer(sentence):
                start, end = match.span()
                if any(start < span_end and span_start < end for span_start, span_end in target_spans):
                    continue
                found.append((other, start))
                break
        return sorted(found, key=lambda item: item[1])

    def analyze_isolated_pronoun_reference(
        self,
        name: str,
        target_position: int,
        others: Sequence[Tuple[str, int]],
        sentence: str,
        weight: float = _PRONOUN_WEIGHT,
    ) -> ScoreResult:
        male_count = 0
        female_count = 0
        for _, position, gender in find_pronouns(sentence):
            if self.determine_pronoun_reference(name, target_position, others, position, sentence) != name:
                continue
            if gender == MALE:
                male_count += 1
            else:
                female_count += 1

        if male_count == 0 and female_count == 0:
            return ScoreResult.neutral()
        notes = []
        if male_count:
            notes.append(f"isolated pronoun reference: {male_count} male pronouns")
        if female_count:
            notes.append(f"isolated pronoun reference: {female_count} female pronouns")
        return ScoreResult.create(male_count * weight, female_count * weight, ", ".join(notes))

    @staticmethod
    def determine_pronoun_reference(
        name: str,
        target_position: int,
        others: Sequence[Tuple[str, int]],
        pronoun_position: int,
        sentence: str,
    ) -> str:
        """
        Candidate a pronoun most likely refers to.

        A pronoun right after a speech verb ("Lin said he") belongs to the closest name
        before that verb. Otherwise the positionally nearest candidate wins, the target
        winning ties.
        """
        candidates = [(name, target_position)] + list(others)
        verb = _SPEECH_VERB_PATTERN.search(sentence[:pronoun_position])
        if verb:
            before_verb = [candidate for candidate in candidates if candidate[1] < verb.start()]
            if before_verb:
                return max(before_verb, key=lambda candidate: candidate[1])[0]

        best_name, best_distance = name, abs(pronoun_position - target_position)
        for candidate_name, position in others:
            distance = abs(pronoun_position - position)
            if distance < best_distance:
                best_name, best_distance = candidate_name, distance
        return best_name

    # ════════════════════════════════════════════════════════════════════════════════
    # DIALOGUE ATTRIBUTION
    # ════════════════════════════════════════════════════════════════════════════════

    def analyze_dialogue_attribution(self, name: str, text: str, all_names: Sequence[str]) -> ScoreResult:
        """
        Pronouns in the attribution clause of quoted speech spoken by `name`.

        Handles both `"quote," <speaker> said ...` and `<speaker> said, "quote"`. A clause
        naming only the target counts its pronouns at weight 3; a clause naming other
        characters too falls back to reference resolution at weight 1.5.
        """
        key = (name, content_hash(text), roster_hash(all_names))
        cached = self.dialogue_cache.get(key)
        if cached is not None:
            self._count_hit()
            return cached

        verbs = "|".join(SPEAKER_CLAUSE_VERBS)
        patterns = (
            rf"\"[^\"]+\"\s*,?\s*([^.!?\"]*?\b(?:{verbs})\b[^.!?\"]*)",
            rf"([^.!?\"]+?)\s+(?:{verbs})\b,?\s*\"[^\"]+\"",
        )
        male_score = 0.0
        female_score = 0.0
        name_check = name_regex(name)
        for pattern in patterns:
            for match in compile_pattern(pattern).finditer(text):
                clause = match.group(1)
                target = name_check.search(clause)
                if target is None:
                    continue
                others = self.find_other_characters(name, clause, all_names)
                if others:
                    resolved = self.analyze_isolated_pronoun_reference(
                        name, target.start(), others, clause, _DIALOGUE_ISOLATED_WEIGHT
                    )
                else:
                    resolved = self.analyze_direct_pronoun_reference(clause, _DIALOGUE_DIRECT_WEIGHT)
                male_score += resolved.male_score
                female_score += resolved.female_score

        notes = []
        if male_score:
            notes.append(f"dialogue attribution: {male_score:g} male weight")
        if female_score:
            notes.append(f"dialogue attribution: {female_score:g} female weight")
        result = ScoreResult.create(male_score, female_score, ", ".join(notes))
        self.dialogue_cache.put(key, result)
        return result

    # ════════════════════════════════════════════════════════════════════════════════
    # INTERACTIONS WITH ANCHORS
    # ════════════════════════════════════════════════════════════════════════════════

    def analyze_character_interactions(
        self, name: str, text: str, known_characters: Mapping[str, Character]
    ) -> ScoreResult:
        """Romantic (weight 3) and kinship (weight 4) links between `name` and anchor characters."""
        anchors = [
            character
            for other, character in known_characters.items()
            if other != name
            and character.gender != UNKNOWN
            and character.is_anchor(self._config.anchor_min_confidence, self._config.anchor_min_appearances)
        ]
        if not anchors:
            return ScoreResult.neutral()

        anchor_signature = tuple(sorted((anchor.name, anchor.gender) for anchor in anchors))
        key = (name, content_hash(text), anchor_signature)
        cached = self.interaction_cache.get(key)
        if cached is not None:
            self._count_hit()
            return cached

        male_score = 0.0
        female_score = 0.0
        notes = []
        groups = (
            (ROMANTIC_TEMPLATES, self._config.romantic_interaction_weight),
            (KINSHIP_TEMPLATES, self._config.kinship_interaction_weight),
        )
        for anchor in anchors:
            for templates, weight in groups:
                for relationship, inferred in find_anchor_relationships(name, text, anchor, templates):
                    if inferred == MALE:
                        male_score += weight
                    else:
                        female_score += weight
                    notes.append(f"relationship inference: {relationship} with {anchor.gender} {anchor.name}")

        result = ScoreResult.create(male_score, female_score, ", ".join(notes[:3]))
        self.interaction_cache.put(key, result)
        return result

    # ════════════════════════════════════════════════════════════════════════════════
    # DIAGNOSTICS AND SECONDARY ANALYSES
    # ════════════════════════════════════════════════════════════════════════════════

    @staticmethod
    def find_similar_names(name: str, all_names: Sequence[str]) -> List[str]:
        """Roster names that contain, are contained in, or closely resemble `name`."""
        similar = []
        lowered = name.lower()
        for other in all_names:
            if other == name:
                continue
            other_lowered = other.lower()
            if lowered in other_lowered or other_lowered in lowered:
                similar.append(other)
            elif Levenshtein.normalized_similarity(name, other) > _SIMILARITY_THRESHOLD:
                similar.append(other)
        return similar

    def resolve_character_ambiguities(self, name: str, text: str, all_names: Sequence[str]) -> AmbiguityResult:
        similar = self.find_similar_names(name, all_names)
        if not similar:
            return AmbiguityResult("no name ambiguities detected", 0, 1.0, (), 0)

        ambiguity_score = 0
        for other in similar:
            either = f"(?:{name_pattern(name)}|{name_pattern(other)})"
            ambiguity_score += len(compile_pattern(rf"{either}[^.!?]*{either}").findall(text))

        unique_contexts = sum(
            1
            for sentence in sentences_containing(name, text)
            if not any(other.lower() in sentence.lower() for other in similar)
        )
        resolution = unique_contexts / max(1, ambiguity_score + unique_contexts)
        return AmbiguityResult(
            f"similar names: {', '.join(similar)}; resolution confidence {resolution:.2f}",
            ambiguity_score,
            resolution,
            tuple(similar),
            unique_contexts,
        )

    def analyze_complex_pronoun_references(
        self, name: str, text: str, known_characters: Mapping[str, Character]
    ) -> ComplexPronounResult:
        """
        Sentence-by-sentence pronoun disambiguation.

        Up to `complex_pronoun_max_sentences` sentences mentioning the name are scored; a
        sentence whose score margin reaches `complex_pronoun_threshold` is boosted by
        `complex_pronoun_boost`.
        """
        all_names = self._roster(name, known_characters)
        sentences = [s for s in split_sentences(text) if contains_name(name, s)]
        sentences = sentences[: self._config.complex_pronoun_max_sentences]

        male_score = 0.0
        female_score = 0.0
        decisive = 0
        notes = []
        for sentence in sentences:
            result = self.analyze_sentence_context(name, sentence, all_names)
            if not result.has_signal:
                continue
            if result.margin >= self._config.complex_pronoun_threshold:
                result = result.scaled(self._config.complex_pronoun_boost)
                decisive += 1
            male_score += result.male_score
            female_score += result.female_score
            if result.evidence:
                notes.append(result.evidence)

        evidence = f"pronoun analysis: {'; '.join(notes[:3])}" if notes else None
        return ComplexPronounResult(ScoreResult.create(male_score, female_score, evidence), len(sentences), decisive)

    def cross_validate_analysis(
        self, name: str, text: str, known_characters: Mapping[str, Character], preliminary: ScoreResult
    ) -> ScoreResult:
        """
        Weighted consensus of independent views on the same character.

        Combines the caller's preliminary scores (0.4) with sentence context (0.3), dialogue
        (0.2) and interactions (0.1).
        """
        with self._metrics_lock:
            self._cross_validations += 1

        all_names = self._roster(name, known_characters)
        context = ScoreResult.neutral()
        for sentence in self.extract_relevant_sentences(name, text):
            context = context.combine(self.analyze_sentence_context(name, sentence, all_names))
        views = (
            preliminary,
            context,
            self.analyze_dialogue_attribution(name, text, all_names),
            self.analyze_character_interactions(name, text, known_characters),
        )
        male_score = sum(view.male_score * weight for view, weight in zip(views, _CONSENSUS_WEIGHTS))
        female_score = sum(view.female_score * weight for view, weight in zip(views, _CONSENSUS_WEIGHTS))
        leaning = ScoreResult(male_score, female_score).leaning
        agreeing = sum(1 for view in views if view.has_signal and view.leaning == leaning)
        evidence = f"consensus of {agreeing}/{len(views)} analyses ({leaning})"
        return ScoreResult.create(male_score, female_score, evidence)

    def get_analysis_metrics(self) -> AnalysisMetrics:
        with self._metrics_lock:
            total, hits = self._total_analyses, self._cache_hits
            complex_count, cross = self._complex_context_analyses, self._cross_validations
        return AnalysisMetrics(
            total_analyses=total,
            cache_hits=hits,
            complex_context_analyses=complex_count,
            cross_validations=cross,
            cache_efficiency=hits / max(1, total),
            cache_sizes={
                "sentence": len(self.sentence_cache),
                "dialogue": len(self.dialogue_cache),
                "interaction": len(self.interaction_cache),
            },
        )

    def clear_caches(self) -> None:
        for cache in (self.sentence_cache, self.dialogue_cache, self.interaction_cache):
            cache.clear()
        with self._metrics_lock:
            self._cache_hits = 0
