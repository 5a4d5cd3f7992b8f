from policy_mapper.schemas.policy import ReferenceItem
from policy_mapper.services.registry import (
    REFERENCE_LIST_TYPES,
    InMemoryReferenceRegistry,
    load_reference_lists,
)


class FailingRegistry:
    """Registry whose lookups time out."""

    def get_list(self, list_type):
        raise TimeoutError(f"registry timeout for {list_type}")


class TestReferenceRegistry:

    def test_in_memory_registry_coerces_items(self):
        registry = InMemoryReferenceRegistry({"fuel": [{"id": 1, "name": "GASOLINA", "code": "GAS"}]})

        assert registry.get_list("fuel") == [ReferenceItem(id=1, name="GASOLINA", code="GAS")]
        assert registry.get_list("broker") == []

    def test_load_all_list_types(self):
        registry = InMemoryReferenceRegistry({"fuel": [{"id": 1, "name": "GASOLINA"}]})

        snapshot = load_reference_lists(registry)

        assert list(snapshot) == list(REFERENCE_LIST_TYPES)
        assert snapshot["fuel"][0].name == "GASOLINA"
        assert snapshot["department"] == []

    def test_failures_become_empty_lists(self):
        snapshot = load_reference_lists(FailingRegistry(), ["fuel", "currency"])

        assert snapshot == {"fuel": [], "currency": []}
