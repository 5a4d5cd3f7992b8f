"""Free-text to master-data matching.

Matching runs in two tiers: keyword rule tables first, fuzzy similarity
second. When neither tier produces a candidate above the threshold, the first
item of the reference list is returned with confidence 0 and source ``None``.
Callers rely on always receiving an item when the list is non-empty, so the
fallback is part of the contract rather than a "not found" signal.
"""

from typing import Any, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from policy_mapper.config.settings import MapperSettings, get_settings
from policy_mapper.core.exceptions import ValidationError
from policy_mapper.schemas.mapping import MatchResult, MatchSource
from policy_mapper.schemas.policy import ReferenceItem
from policy_mapper.services.matching.similarity import (
    EDIT_DISTANCE,
    WORD_OVERLAP,
    SimilarityStrategy,
    get_strategy,
    normalize_text,
)

CONTAINMENT_CONFIDENCE = 0.85
EXACT_CONFIDENCE = 1.0
RULE_CONFIDENCE = 1.0

RuleTable = Mapping[str, Sequence[str]]


def coerce_reference_list(reference_list: Any) -> List[ReferenceItem]:
    """Validate a reference list and turn dict entries into ``ReferenceItem``.

    Raises:
        ValidationError: If the list is missing or holds malformed entries
    """
    if reference_list is None:
        raise ValidationError("Reference list is required")
    if isinstance(reference_list, (str, bytes, Mapping)) or not isinstance(reference_list, Sequence):
        raise ValidationError(
            f"Reference list must be a sequence, got {type(reference_list).__name__}"
        )
    items = []
    for entry in reference_list:
        if isinstance(entry, ReferenceItem):
            items.append(entry)
            continue
        try:
            items.append(ReferenceItem.model_validate(entry))
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid reference item: {entry!r}", original_error=e)
    return items


class ReferenceMatcher:
    """Maps scanned text onto reference items.

    Attributes:
        settings: Mapper settings providing the per-strategy thresholds
    """

    def __init__(self, settings: Optional[MapperSettings] = None):
        self.settings = settings or get_settings()

    def default_threshold(self, strategy: Union[str, SimilarityStrategy]) -> float:
        """Threshold configured for a similarity strategy."""
        name = get_strategy(strategy).name
        if name == WORD_OVERLAP:
            return self.settings.word_overlap_threshold
        return self.settings.edit_distance_threshold

    def match(
        self,
        text: Optional[str],
        reference_list: Sequence[Any],
        rule_table: Optional[RuleTable] = None,
        strategy: Union[str, SimilarityStrategy] = EDIT_DISTANCE,
        threshold: Optional[float] = None,
    ) -> MatchResult:
        """Match ``text`` against ``reference_list``.

        Args:
            text: Scanned value
            reference_list: Reference items (``ReferenceItem`` or dicts)
            rule_table: Optional canonical code -> alias keywords table
            strategy: Similarity strategy name or instance
            threshold: Minimum similarity score; defaults per strategy

        Returns:
            MatchResult: Chosen item, confidence and source

        Raises:
            ValidationError: If the reference list is missing or malformed
        """
        items = coerce_reference_list(reference_list)
        scorer = get_strategy(strategy)
        if threshold is None:
            threshold = self.default_threshold(scorer)

        normalized = normalize_text(text)
        if not normalized or not items:
            return self._fallback(items)

        if rule_table:
            ruled = self._match_rules(normalized, items, rule_table)
            if ruled is not None:
                return MatchResult(item=ruled, confidence=RULE_CONFIDENCE, source=MatchSource.RULE)

        best_item = None
        best_score = 0.0
        for item in items:
            score = self._score(normalized, normalize_text(item.name), scorer)
            if score > best_score:
                best_item, best_score = item, score

        if best_item is None or best_score < threshold:
            return self._fallback(items)
        return MatchResult(
            item=best_item,
            confidence=min(1.0, max(0.0, best_score)),
            source=MatchSource.SIMILARITY,
        )

    @staticmethod
    def _fallback(items: List[ReferenceItem]) -> MatchResult:
        return MatchResult(item=items[0] if items else None, confidence=0.0, source=MatchSource.NONE)

    @staticmethod
    def _match_rules(
        text: str, items: List[ReferenceItem], rule_table: RuleTable
    ) -> Optional[ReferenceItem]:
        for canonical_code, keywords in rule_table.items():
            if not any(normalize_text(keyword) in text for keyword in keywords if keyword):
                continue
            code = normalize_text(canonical_code)
            for item in items:
                if normalize_text(item.code) == code or code in normalize_text(item.name):
                    return item
        return None

    @staticmethod
    def _score(text: str, name: str, scorer: SimilarityStrategy) -> float:
        if not name:
            return 0.0
        if text == name:
            return EXACT_CONFIDENCE
        if name in text or text in name:
            return CONTAINMENT_CONFIDENCE
        return scorer.score(text, name)
