import pytest

from policy_mapper.core.exceptions import MatchingError, ValidationError
from policy_mapper.schemas.mapping import MatchSource
from policy_mapper.schemas.policy import ReferenceItem
from policy_mapper.services.matching.reference_matcher import ReferenceMatcher
from policy_mapper.services.matching.rule_tables import FUEL_RULES
from policy_mapper.services.matching.similarity import (
    EDIT_DISTANCE,
    WORD_OVERLAP,
    EditDistanceStrategy,
    WordOverlapStrategy,
    normalize_text,
)


@pytest.fixture
def category_list() -> list:
    return [
        ReferenceItem(id=1, name="AUTOMOVIL"),
        ReferenceItem(id=2, name="CAMIONETA DOBLE CABINA"),
        ReferenceItem(id=3, name="MOTO"),
    ]


@pytest.fixture
def department_list() -> list:
    return [
        ReferenceItem(id=1, name="MONTEVIDEO"),
        ReferenceItem(id=2, name="CANELONES"),
        ReferenceItem(id=3, name="MALDONADO"),
    ]


class TestSimilarityStrategies:

    def test_normalize_text(self):
        assert normalize_text("  super\n nafta ") == "SUPER NAFTA"

    def test_word_overlap_partial(self):
        """Two of five significant words overlap with the three-word name."""
        score = WordOverlapStrategy().score("CAMION DOBLE ROJO VIEJO USADO", "CAMIONETA DOBLE CABINA")

        assert score == pytest.approx(0.4)

    def test_word_overlap_ignores_short_words(self):
        assert WordOverlapStrategy().score("DE LA", "DE LA") == 0.0

    def test_edit_distance(self):
        assert EditDistanceStrategy().score("MONTEVIDE0", "MONTEVIDEO") == pytest.approx(0.9)
        assert EditDistanceStrategy().score("ABC", "XYZ") == 0.0
        assert EditDistanceStrategy().score("", "") == 0.0


class TestReferenceMatcher:

    @pytest.fixture
    def matcher(self, settings):
        return ReferenceMatcher(settings)

    def test_rule_alias_resolves_code(self, matcher):
        fuel = [
            ReferenceItem(id=1, name="GASOIL", code="DIS"),
            ReferenceItem(id=2, name="GASOLINA", code="GAS"),
        ]

        result = matcher.match("SUPER NAFTA 95", fuel, rule_table={"GAS": ["NAFTA"]})

        assert result.item.code == "GAS"
        assert result.confidence == 1.0
        assert result.source == MatchSource.RULE

    def test_rule_beats_exact_similarity(self, matcher):
        """A rule hit wins even when another item matches the text exactly."""
        fuel = [
            ReferenceItem(id=1, name="SUPER NAFTA 95", code="SNF"),
            ReferenceItem(id=2, name="GASOLINA", code="GAS"),
        ]

        result = matcher.match("SUPER NAFTA 95", fuel, rule_table={"GAS": ["NAFTA"]})

        assert result.item.id == 2
        assert result.source == MatchSource.RULE

    def test_rule_table_declaration_order(self, matcher, fuel_list):
        result = matcher.match("DIESEL O NAFTA", fuel_list, rule_table=FUEL_RULES)

        assert result.item.name == "GASOIL"

    def test_rule_without_matching_item_falls_through(self, matcher, fuel_list):
        result = matcher.match("GASOLINA", fuel_list, rule_table={"KEROSENE": ["GASOLINA"]})

        assert result.item.name == "GASOLINA"
        assert result.source == MatchSource.SIMILARITY

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_text_returns_first_item(self, matcher, fuel_list, text):
        result = matcher.match(text, fuel_list)

        assert result.item == fuel_list[0]
        assert result.confidence == 0.0
        assert result.source == MatchSource.NONE

    def test_empty_list_returns_no_item(self, matcher):
        result = matcher.match("NAFTA", [])

        assert result.item is None
        assert result.confidence == 0.0
        assert result.source == MatchSource.NONE

    def test_missing_list_raises(self, matcher):
        with pytest.raises(ValidationError):
            matcher.match("NAFTA", None)

    def test_string_list_raises(self, matcher):
        with pytest.raises(ValidationError):
            matcher.match("NAFTA", "GASOLINA")

    def test_malformed_item_raises(self, matcher):
        with pytest.raises(ValidationError):
            matcher.match("NAFTA", [{"name": "GASOLINA"}])

    def test_dict_items_accepted(self, matcher):
        result = matcher.match("montevideo", [{"id": 1, "name": "MONTEVIDEO"}])

        assert result.item.id == 1
        assert result.confidence == 1.0
        assert result.source == MatchSource.SIMILARITY

    def test_containment_scores_085(self, matcher, department_list):
        result = matcher.match("DEPARTAMENTO DE CANELONES", department_list)

        assert result.item.name == "CANELONES"
        assert result.confidence == pytest.approx(0.85)

    def test_edit_distance_match(self, matcher, department_list):
        result = matcher.match("MONTEVIDE0", department_list, strategy=EDIT_DISTANCE)

        assert result.item.name == "MONTEVIDEO"
        assert result.confidence == pytest.approx(0.9)
        assert result.source == MatchSource.SIMILARITY

    def test_low_similarity_falls_back_to_first_item(self, matcher, category_list):
        """A best score of 0.4 under a 0.5 threshold is not accepted."""
        result = matcher.match("CAMION DOBLE ROJO VIEJO USADO", category_list, strategy=WORD_OVERLAP)

        assert result.item.id == 1
        assert result.confidence == 0.0
        assert result.source == MatchSource.NONE

    def test_threshold_is_parameterized(self, matcher, category_list):
        result = matcher.match(
            "CAMION DOBLE ROJO VIEJO USADO", category_list, strategy=WORD_OVERLAP, threshold=0.3
        )

        assert result.item.id == 2
        assert result.confidence == pytest.approx(0.4)

    def test_ties_keep_earliest_item(self, matcher):
        items = [ReferenceItem(id="a", name="ABCD"), ReferenceItem(id="b", name="ABCE")]

        result = matcher.match("ABCF", items, strategy=EDIT_DISTANCE, threshold=0.5)

        assert result.item.id == "a"

    def test_unknown_strategy(self, matcher, fuel_list):
        with pytest.raises(MatchingError):
            matcher.match("NAFTA", fuel_list, strategy="Soundex")

    def test_deterministic(self, matcher, department_list):
        first = matcher.match("MALDONAD", department_list)
        second = matcher.match("MALDONAD", department_list)

        assert first == second
