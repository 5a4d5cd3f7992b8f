from .payment_mapper import map_payment_method
from .reference_matcher import ReferenceMatcher, coerce_reference_list
from .similarity import (
    EDIT_DISTANCE,
    WORD_OVERLAP,
    EditDistanceStrategy,
    SimilarityStrategy,
    WordOverlapStrategy,
    get_strategy,
    normalize_text,
)

__all__ = [
    "map_payment_method",
    "ReferenceMatcher",
    "coerce_reference_list",
    "EDIT_DISTANCE",
    "WORD_OVERLAP",
    "EditDistanceStrategy",
    "SimilarityStrategy",
    "WordOverlapStrategy",
    "get_strategy",
    "normalize_text",
]
