"""Relationship, role and anchor-based gender inference."""

from __future__ import annotations
import re
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from novelgender.config import GenderInferenceConfig
from novelgender.gender_patterns_data import (
    GROUP_CONNECTORS,
    KINSHIP_TEMPLATES,
    NAME_PLACEHOLDER,
    RELATIONSHIP_GENDER_RULES,
    RELATIONSHIP_PHRASES,
    ROLE_NOUNS,
    ROMANTIC_TEMPLATES,
)
from novelgender.results import FEMALE, MALE, UNKNOWN, Character, ScoreResult
from novelgender.text_windowing import (
    compile_pattern,
    contains_name,
    first_term_in_windows,
    interpolate_name,
    name_pattern,
    phrase_pattern,
    proximity_window,
    sentences_containing,
)

_PHRASE_SCORE = 3.0
_ROLE_ASSIGNMENT_SCORE = 3.0
_ROLE_ASSOCIATION_SCORE = 2.0
_RELATED_SCORE = 2.0
_GROUP_NUDGE = 1.0
_GROUP_MIN_MEMBERS = 3
_ROLE_WINDOW = 100


def infer_from_rule(relationship: str, partner_gender: str) -> Optional[str]:
    """Gender implied by `relationship` for someone paired with a `partner_gender` character."""
    rule = RELATIONSHIP_GENDER_RULES.get(relationship.lower())
    if not rule:
        return None
    return rule.get("*") or rule.get(partner_gender)


def find_anchor_relationships(
    name: str, text: str, anchor: Character, templates: Iterable[str]
) -> List[Tuple[str, str]]:
    """(relationship word, inferred gender) for every template match linking name to anchor."""
    found = []
    for template in templates:
        pattern = compile_pattern(interpolate_name(template, name, anchor.name))
        for match in pattern.finditer(text):
            relationship = match.group(1).lower()
            inferred = infer_from_rule(relationship, anchor.gender)
            if inferred:
                found.append((relationship, inferred))
    return found


def _all_role_nouns(gender: str) -> Tuple[str, ...]:
    seen: Dict[str, None] = {}
    for roles in ROLE_NOUNS[gender].values():
        for role in roles:
            seen.setdefault(role, None)
    return tuple(sorted(seen, key=len, reverse=True))


class RelationshipAnalyzer:
    def __init__(self, config: Optional[GenderInferenceConfig] = None):
        self._config = config or GenderInferenceConfig.create_default()
        self._flat_roles = {gender: _all_role_nouns(gender) for gender in (MALE, FEMALE)}

    # ════════════════════════════════════════════════════════════════════════════════
    # LITERAL RELATIONSHIP PHRASES
    # ════════════════════════════════════════════════════════════════════════════════

    def check_relationships(self, name: str, text: str) -> ScoreResult:
        """Literal phrases such as "<name> was the father" or "<name>'s wife"; first match per side."""
        scores = {MALE: 0.0, FEMALE: 0.0}
        evidence = []
        for gender in (MALE, FEMALE):
            for template in RELATIONSHIP_PHRASES[gender]:
                if compile_pattern(phrase_pattern(template, name)).search(text):
                    scores[gender] += _PHRASE_SCORE
                    evidence.append(f"'{template.replace(NAME_PLACEHOLDER, name)}'")
                    break
        return ScoreResult.create(scores[MALE], scores[FEMALE], ", ".join(evidence))

    # ════════════════════════════════════════════════════════════════════════════════
    # ROLES
    # ════════════════════════════════════════════════════════════════════════════════

    def analyze_character_role(self, name: str, text: str, culture: str) -> ScoreResult:
        """
        Role nouns tied to the name.

        An explicit assignment ("Li Mu was the emperor", "the princess Mei Ling") is checked
        first against every culture's role nouns (+3). Otherwise a role noun of the name's
        culture co-occurring with the name in the same sentence counts (+2).
        """
        bounded = name_pattern(name)
        for gender in (MALE, FEMALE):
            roles = "|".join(re.escape(role) for role in self._flat_roles[gender])
            patterns = (
                rf"{bounded}[^.!?]{{0,20}}\b(?:was|is)\b[^.!?]{{0,20}}?\b(?:the|a|an)\s+(?:[\w'-]+\s+)??({roles})\b",
                rf"\b(?:the|a|an)\s+(?:[\w'-]+\s+)??({roles}),?\s+{bounded}",
            )
            for pattern in patterns:
                match = compile_pattern(pattern).search(text)
                if match:
                    role = match.group(1).lower()
                    if gender == MALE:
                        return ScoreResult.create(_ROLE_ASSIGNMENT_SCORE, 0.0, f"described as {role}")
                    return ScoreResult.create(0.0, _ROLE_ASSIGNMENT_SCORE, f"described as {role}")

        windows = proximity_window(name, text, _ROLE_WINDOW)
        if not windows:
            return ScoreResult.neutral()
        for gender in (MALE, FEMALE):
            role = first_term_in_windows(windows, ROLE_NOUNS[gender].get(culture, ()))
            if role:
                evidence = f"associated with {role}"
                if gender == MALE:
                    return ScoreResult.create(_ROLE_ASSOCIATION_SCORE, 0.0, evidence)
                return ScoreResult.create(0.0, _ROLE_ASSOCIATION_SCORE, evidence)
        return ScoreResult.neutral()

    # ════════════════════════════════════════════════════════════════════════════════
    # INFERENCE FROM ANCHOR CHARACTERS
    # ════════════════════════════════════════════════════════════════════════════════

    def anchors(self, name: str, character_map: Mapping[str, Character]) -> List[Character]:
        """Known characters other than `name` trusted as gender ground truth."""
        return [
            character
            for other_name, character in character_map.items()
            if other_name != name
            and character.gender != UNKNOWN
            and character.is_anchor(self._config.anchor_min_confidence, self._config.anchor_min_appearances)
        ]

    def infer_gender_from_related(self, name: str, text: str, character_map: Mapping[str, Character]) -> ScoreResult:
        """
        Infer gender from romantic or kinship links to anchor characters.

        The first relationship found decides (+2). Without one, a group-affiliation pass nudges
        the name toward the minority gender of strongly skewed groups it appears in.
        """
        anchors = self.anchors(name, character_map)
        if not anchors:
            return ScoreResult.neutral()

        for anchor in anchors:
            for templates in (ROMANTIC_TEMPLATES, KINSHIP_TEMPLATES):
                matches = find_anchor_relationships(name, text, anchor, templates)
                if matches:
                    relationship, inferred = matches[0]
                    evidence = f"{relationship} ({anchor.gender} {anchor.name})"
                    if inferred == MALE:
                        return ScoreResult.create(_RELATED_SCORE, 0.0, evidence)
                    return ScoreResult.create(0.0, _RELATED_SCORE, evidence)

        return self._analyze_group_affiliation(name, text, anchors)

    def _analyze_group_affiliation(self, name: str, text: str, anchors: List[Character]) -> ScoreResult:
        connector_pattern = compile_pattern(r"\b(?:" + "|".join(GROUP_CONNECTORS) + r")\b|,")

        male_score = 0.0
        female_score = 0.0
        male_members = 0
        female_members = 0
        for scene in sentences_containing(name, text):
            if not connector_pattern.search(scene):
                continue
            males = sum(1 for anchor in anchors if anchor.gender == MALE and contains_name(anchor.name, scene))
            females = sum(1 for anchor in anchors if anchor.gender == FEMALE and contains_name(anchor.name, scene))
            if males + females < 2:
                continue
            if males > females * 2:
                female_score += _GROUP_NUDGE
                male_members += males
            elif females > males * 2:
                male_score += _GROUP_NUDGE
                female_members += females

        if male_members >= _GROUP_MIN_MEMBERS:
            return ScoreResult.create(male_score, female_score, "often appears in male-dominated groups")
        if female_members >= _GROUP_MIN_MEMBERS:
            return ScoreResult.create(male_score, female_score, "often appears in female-dominated groups")
        return ScoreResult.neutral()
