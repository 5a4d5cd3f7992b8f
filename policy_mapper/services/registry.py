"""Reference list access.

The mapping pipeline never fetches master data itself. Callers hand it a
snapshot built from a ``ReferenceRegistry`` with ``load_reference_lists``,
which turns collaborator failures into empty lists.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from policy_mapper.schemas.policy import ReferenceItem
from policy_mapper.services.matching.reference_matcher import coerce_reference_list
from policy_mapper.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Reference list types consumed by the orchestrator
REFERENCE_LIST_TYPES = (
    "fuel",
    "destination",
    "department",
    "category",
    "quality",
    "tariff",
    "broker",
    "currency",
)


class ReferenceRegistry(Protocol):
    """Read-only source of master-data lists."""

    def get_list(self, list_type: str) -> Sequence[ReferenceItem]:
        ...


class InMemoryReferenceRegistry:
    """Registry backed by lists supplied up front."""

    def __init__(self, lists: Optional[Mapping[str, Sequence]] = None):
        self._lists: Dict[str, List[ReferenceItem]] = {
            list_type: coerce_reference_list(items) for list_type, items in (lists or {}).items()
        }

    def get_list(self, list_type: str) -> Sequence[ReferenceItem]:
        return list(self._lists.get(list_type, []))


def load_reference_lists(
    registry: ReferenceRegistry,
    list_types: Iterable[str] = REFERENCE_LIST_TYPES,
) -> Dict[str, List[ReferenceItem]]:
    """Snapshot every reference list, degrading failed lookups to empty lists.

    Args:
        registry: Master-data collaborator
        list_types: Reference list types to load

    Returns:
        Mapping of list type to reference items
    """
    snapshot = {}
    for list_type in list_types:
        try:
            snapshot[list_type] = coerce_reference_list(list(registry.get_list(list_type)))
        except Exception as e:
            LOGGER.warning(
                f"Failed to load reference list '{list_type}', using empty list",
                extra={"list_type": list_type, "error": str(e)},
            )
            snapshot[list_type] = []
    return snapshot
