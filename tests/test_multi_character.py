"""
Tests for roster-aware pronoun resolution and the bounded analysis caches.

Cache eviction is observable: after overflowing a cache of 150 entries exactly the 120
most recently accessed entries must remain.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add the parent directory to path to import novelgender
sys.path.insert(0, str(Path(__file__).parent.parent))

from novelgender.multi_character import AnalysisCache, MultiCharacterContextAnalyzer
from novelgender.results import Character, ScoreResult

MARY = Character(name="Mary", gender="female", confidence=0.9, appearances=5)
MEI = Character(name="Mei", gender="female", confidence=0.9, appearances=4)
LIN = Character(name="Lin", gender="male", confidence=0.9, appearances=4)


@pytest.fixture
def analyzer():
    return MultiCharacterContextAnalyzer()


# ════════════════════════════════════════════════════════════════════════════════
# CACHE
# ════════════════════════════════════════════════════════════════════════════════


def test_cache_overflow_keeps_most_recent_entries():
    cache = AnalysisCache("test", max_entries=150, retain_ratio=0.8)
    for key in range(151):
        cache.put(key, f"value {key}")

    assert len(cache) == 120
    assert all(key in cache for key in range(31, 151))
    assert not any(key in cache for key in range(31))


def test_cache_access_refreshes_recency():
    cache = AnalysisCache("test", max_entries=5, retain_ratio=0.8)
    for key in range(5):
        cache.put(key, key)
    assert cache.get(0) == 0

    cache.put(5, 5)
    assert sorted(cache._entries) == [0, 3, 4, 5]


def test_cache_entry_without_stamp_ranks_oldest(caplog):
    cache = AnalysisCache("test", max_entries=5, retain_ratio=0.8)
    for key in range(5):
        cache.put(key, key)
    cache._entries[4].last_access = None

    with caplog.at_level(logging.WARNING):
        cache.put(5, 5)

    assert sorted(cache._entries) == [1, 2, 3, 5]
    assert "no access stamp" in caplog.text


def test_cache_info_counts_hits_and_misses():
    cache = AnalysisCache("test")
    cache.put("a", 1)
    cache.get("a")
    cache.get("b")

    info = cache.info()
    assert (info.size, info.hits, info.misses, info.max_entries) == (1, 1, 1, 150)

    cache.clear()
    assert len(cache) == 0
    assert cache.info().hits == 0


# ════════════════════════════════════════════════════════════════════════════════
# PRONOUN RESOLUTION
# ════════════════════════════════════════════════════════════════════════════════


def test_direct_pronoun_reference(analyzer):
    result = analyzer.analyze_sentence_context("Lin", "Lin smiled as he drew his sword.", ["Lin"])
    assert result.male_score == 4.0
    assert result.female_score == 0.0


def test_isolated_pronoun_goes_to_nearest_candidate(analyzer):
    sentence = "Mei watched as Lin drew his sword."
    lin = analyzer.analyze_sentence_context("Lin", sentence, ["Mei", "Lin"])
    mei = analyzer.analyze_sentence_context("Mei", sentence, ["Mei", "Lin"])

    assert lin.male_score == 2.0
    assert lin.evidence == "isolated pronoun reference: 1 male pronouns"
    assert not mei.has_signal


def test_speech_verb_attaches_pronoun_to_speaker(analyzer):
    sentence = "Lin said he would help Mei."
    others = analyzer.find_other_characters("Lin", sentence, ["Mei", "Lin"])
    pronoun_position = sentence.index(" he ") + 1

    assert analyzer.determine_pronoun_reference("Lin", 0, others, pronoun_position, sentence) == "Lin"


def test_possessive_partner_in_sentence(analyzer):
    result = analyzer.analyze_sentence_context("Lin", "Lin's wife waited at the gate.", ["Lin"])
    assert result.male_score == 3.0
    assert result.evidence == "possessive: Lin's wife"


def test_find_other_characters_ignores_overlaps(analyzer):
    assert analyzer.find_other_characters("Lin Feng", "Lin Feng bowed.", ["Lin", "Lin Feng"]) == []
    assert analyzer.find_other_characters("Lin Feng", "Lin Feng bowed to Lin.", ["Lin", "Lin Feng"]) == [
        ("Lin", 18)
    ]


def test_dialogue_attribution(analyzer):
    text = '"We leave at dawn," Lin said, and he turned away.'
    result = analyzer.analyze_dialogue_attribution("Lin", text, ["Lin"])

    assert result.male_score == 3.0
    assert result.evidence == "dialogue attribution: 3 male weight"


# ════════════════════════════════════════════════════════════════════════════════
# INTERACTIONS
# ════════════════════════════════════════════════════════════════════════════════


def test_kinship_interaction(analyzer):
    result = analyzer.analyze_character_interactions("Tom", "Tom is Mary's brother.", {"Mary": MARY})
    assert result.male_score == 4.0
    assert result.evidence == "relationship inference: brother with female Mary"


def test_romantic_interaction(analyzer):
    result = analyzer.analyze_character_interactions("Tom", "Tom married Mary.", {"Mary": MARY})
    assert result.male_score == 3.0


def test_interaction_requires_anchor(analyzer):
    weak = {"Mary": Character(name="Mary", gender="female", confidence=0.6, appearances=5)}
    assert not analyzer.analyze_character_interactions("Tom", "Tom is Mary's brother.", weak).has_signal


def test_interaction_results_are_cached(analyzer):
    first = analyzer.analyze_character_interactions("Tom", "Tom is Mary's brother.", {"Mary": MARY})
    second = analyzer.analyze_character_interactions("Tom", "Tom is Mary's brother.", {"Mary": MARY})

    assert first == second
    assert len(analyzer.interaction_cache) == 1
    assert analyzer.get_analysis_metrics().cache_hits == 1


def test_cache_keys_cover_the_text(analyzer):
    brother = analyzer.analyze_character_interactions("Tom", "Tom is Mary's brother.", {"Mary": MARY})
    son = analyzer.analyze_character_interactions("Tom", "Tom is Mary's son.", {"Mary": MARY})
    assert brother.evidence != son.evidence


# ════════════════════════════════════════════════════════════════════════════════
# DIAGNOSTICS
# ════════════════════════════════════════════════════════════════════════════════


def test_find_similar_names(analyzer):
    assert analyzer.find_similar_names("Lin", ["Lin Feng", "Mei", "Lin"]) == ["Lin Feng"]
    assert analyzer.find_similar_names("Xiao Yan", ["Xiao Yun", "Mei"]) == ["Xiao Yun"]


def test_no_ambiguity(analyzer):
    result = analyzer.resolve_character_ambiguities("Tom", "Tom walked home.", ["Mary", "Tom"])
    assert result.ambiguity_score == 0
    assert result.resolution_confidence == 1.0
    assert result.similar_names == ()


def test_ambiguity_between_similar_names(analyzer):
    text = "Lin and Lin Feng argued. Lin left."
    result = analyzer.resolve_character_ambiguities("Lin", text, ["Lin Feng", "Lin"])
    assert result.similar_names == ("Lin Feng",)
    assert result.ambiguity_score >= 1
    assert 0.0 <= result.resolution_confidence <= 1.0


def test_complex_pronoun_references(analyzer):
    result = analyzer.analyze_complex_pronoun_references("Lin", "Lin drew his sword. Mei watched.", {"Mei": MEI})
    assert result.sentences_analyzed == 1
    assert result.high_confidence_matches == 1
    assert result.confidence_ratio == 1.0
    assert result.score.male_score == pytest.approx(3.0)


def test_cross_validate_analysis(analyzer):
    result = analyzer.cross_validate_analysis("Tom", "Tom walked home.", {"Mary": MARY}, ScoreResult(4.0, 0.0))
    assert result.male_score == pytest.approx(1.6)
    assert result.evidence == "consensus of 1/4 analyses (male)"
    assert analyzer.get_analysis_metrics().cross_validations == 1


def test_metrics_and_clear(analyzer):
    known = {"Mary": MARY, "Mei": MEI, "Lin": LIN}
    analyzer.analyze_with_multi_character_context("Tom", "Tom is Mary's brother. Tom smiled.", known)

    metrics = analyzer.get_analysis_metrics()
    assert metrics.total_analyses == 1
    assert metrics.complex_context_analyses == 1
    assert metrics.cache_sizes["sentence"] == 1

    analyzer.clear_caches()
    assert analyzer.get_analysis_metrics().cache_sizes == {"sentence": 0, "dialogue": 0, "interaction": 0}
