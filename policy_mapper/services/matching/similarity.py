"""Fuzzy similarity strategies for reference matching.

Two scorers coexist and are selected by name at the call site:

- ``WordOverlap``: share of significant words (longer than two characters)
  that overlap by substring between both texts.
- ``EditDistance``: normalized Levenshtein similarity.

Both return a score in ``[0, 1]`` and expect text already passed through
``normalize_text``.
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, List

from rapidfuzz.distance import Levenshtein

from policy_mapper.core.exceptions import MatchingError

WORD_OVERLAP = "WordOverlap"
EDIT_DISTANCE = "EditDistance"

MIN_WORD_LENGTH = 3


def normalize_text(text) -> str:
    """Upper-case, trim and collapse whitespace and newlines."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", str(text)).strip().upper()


class SimilarityStrategy(ABC):
    """A named text similarity scorer."""

    name: str = ""

    @abstractmethod
    def score(self, first: str, second: str) -> float:
        """Similarity of two normalized texts in ``[0, 1]``."""
        raise NotImplementedError


class WordOverlapStrategy(SimilarityStrategy):
    """Word overlap ratio.

    Words of ``first`` that are a substring of, or contain, some word of
    ``second`` are counted and divided by the larger word count.
    """

    name = WORD_OVERLAP

    @staticmethod
    def _words(text: str) -> List[str]:
        return list(dict.fromkeys(w for w in text.split(" ") if len(w) >= MIN_WORD_LENGTH))

    def score(self, first: str, second: str) -> float:
        first_words = self._words(first)
        second_words = self._words(second)
        if not first_words or not second_words:
            return 0.0
        overlap = sum(
            1 for word in first_words
            if any(word in other or other in word for other in second_words)
        )
        return min(1.0, overlap / max(len(first_words), len(second_words)))


class EditDistanceStrategy(SimilarityStrategy):
    """``1 - levenshtein(a, b) / max(len(a), len(b))``."""

    name = EDIT_DISTANCE

    def score(self, first: str, second: str) -> float:
        longest = max(len(first), len(second))
        if longest == 0:
            return 0.0
        return max(0.0, 1.0 - Levenshtein.distance(first, second) / longest)


SIMILARITY_STRATEGIES: Dict[str, SimilarityStrategy] = {
    WORD_OVERLAP: WordOverlapStrategy(),
    EDIT_DISTANCE: EditDistanceStrategy(),
}


def get_strategy(strategy) -> SimilarityStrategy:
    """Resolve a strategy instance or registered strategy name."""
    if isinstance(strategy, SimilarityStrategy):
        return strategy
    try:
        return SIMILARITY_STRATEGIES[strategy]
    except KeyError as e:
        raise MatchingError(
            f"Unknown similarity strategy '{strategy}', expected one of {sorted(SIMILARITY_STRATEGIES)}",
            original_error=e,
        )
