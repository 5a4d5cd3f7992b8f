import copy

import pytest

from policy_mapper.core.exceptions import ValidationError
from policy_mapper.services.extraction.field_extractor import FieldExtractor
from policy_mapper.services.normalization.base_normalizer import (
    classify_modality,
    collapse_installments,
    fold_synonyms,
    strip_value_prefixes,
)
from policy_mapper.services.normalization.bse_normalizer import BseNormalizer
from policy_mapper.services.normalization.default_normalizer import DefaultNormalizer
from policy_mapper.services.normalization.mapfre_normalizer import MapfreNormalizer
from policy_mapper.services.normalization.sura_normalizer import SuraNormalizer


@pytest.fixture
def indexed_installments() -> dict:
    """Four indexed installment rows as printed by SURA."""
    bag = {}
    for i in range(1, 5):
        bag[f"pago.vencimiento_cuota[{i}]"] = f"10/0{i}/2024"
        bag[f"pago.prima_cuota[{i}]"] = "$ 2.500,00"
    return bag


@pytest.fixture
def noisy_bag(indexed_installments) -> dict:
    """Bag mixing every provider quirk the normalizers handle."""
    bag = dict(indexed_installments)
    bag.update({
        "vehiculo.marca": "Marca\nFIAT",
        "vehiculo.modelo": "Modelo\nCRONOS  DRIVE",
        "vehiculo.motor": "MOTOR ABC123",
        "vehiculo.año": "Año 2019",
        "vehiculo.patente": "Patente SBA 1234",
        "premio.premio": "$ 1.000,00",
        "premio.total": "$ 1.220,00",
        "costo.costo": "$ 1.000,00",
        "pago.forma_de_pago": "10 PAGOS",
        "poliza.modalidad": "Todo Riesgo Total c/deducible",
    })
    return bag


class TestSharedHelpers:

    def test_fold_synonyms_never_overwrites(self):
        bag = {"premio.premio": "$ 1.000,00", "poliza.prima_comercial": "$ 900,00"}

        folded = fold_synonyms(bag, {"premio.premio": "poliza.prima_comercial"})

        assert folded["poliza.prima_comercial"] == "$ 900,00"

    def test_fold_synonyms_fills_missing_key(self):
        folded = fold_synonyms({"premio.total": "X"}, {"premio.total": "financiero.premio_total"})

        assert folded["financiero.premio_total"] == "X"
        assert folded["premio.total"] == "X"

    def test_strip_value_prefixes_first_match_wins(self):
        bag = {"vehiculo.marca": "MARCA\nTOYOTA"}

        cleaned = strip_value_prefixes(bag, {"vehiculo.marca": ("Marca\n", "Marca ")})

        assert cleaned["vehiculo.marca"] == "TOYOTA"

    def test_collapse_installments_counts_either_column(self):
        """An index counts when it has a due date or an amount."""
        bag = {
            "pago.vencimiento_cuota[1]": "01/01/2024",
            "pago.prima_cuota[2]": "$ 100,00",
            "pago.vencimiento_cuota[5]": "01/05/2024",
            "pago.prima_cuota[5]": "$ 100,00",
        }

        collapsed = collapse_installments(bag, 12)

        assert collapsed["pago.cantidad_cuotas"] == "3"
        assert collapsed["pago.cuotas[0].vencimiento"] == "01/01/2024"
        assert collapsed["pago.cuotas[1].prima"] == "$ 100,00"
        assert collapsed["pago.cuotas[2].vencimiento"] == "01/05/2024"

    def test_collapse_installments_respects_range(self):
        bag = {"pago.vencimiento_cuota[13]": "01/01/2025"}

        assert "pago.cantidad_cuotas" not in collapse_installments(bag, 12)

    @pytest.mark.parametrize("text,expected", [
        ("Todo Riesgo Total c/deducible", "TODO RIESGO TOTAL"),
        ("TODO RIESGO", "TODO RIESGO"),
        ("Pérdida Total", "TOTAL"),
        ("Cobertura Total Básico", "BASICA"),
        ("RC obligatorio", "TERCEROS"),
        ("Responsabilidad Civil", "TERCEROS"),
        ("Mínima", "BASICA"),
        ("Premium Plus", "PREMIUM PLUS"),
        ("", ""),
    ])
    def test_classify_modality(self, text, expected):
        """Combined keywords are tried before either keyword alone."""
        assert classify_modality(text) == expected


class TestProviderNormalizers:

    @pytest.mark.parametrize("normalizer_class", [
        DefaultNormalizer, BseNormalizer, SuraNormalizer, MapfreNormalizer,
    ])
    def test_idempotent(self, normalizer_class, noisy_bag):
        normalizer = normalizer_class()

        once = normalizer.normalize(noisy_bag)

        assert normalizer.normalize(once) == once

    @pytest.mark.parametrize("normalizer_class", [
        DefaultNormalizer, BseNormalizer, SuraNormalizer, MapfreNormalizer,
    ])
    def test_input_not_mutated(self, normalizer_class, noisy_bag):
        original = copy.deepcopy(noisy_bag)

        normalizer_class().normalize(noisy_bag)

        assert noisy_bag == original

    def test_non_mapping_bag_raises(self):
        with pytest.raises(ValidationError):
            DefaultNormalizer().normalize(["not", "a", "bag"])

    def test_default_applies_renames_only(self):
        normalized = DefaultNormalizer().normalize({"vehiculo.año": "2019", "vehiculo.marca": "Marca\nFIAT"})

        assert normalized["vehiculo.anio"] == "2019"
        assert normalized["vehiculo.marca"] == "Marca\nFIAT"

    def test_bse_collapses_installments(self, indexed_installments):
        normalized = BseNormalizer().normalize(indexed_installments)

        assert normalized["pago.cantidad_cuotas"] == "4"
        assert normalized["pago.cuotas[3].prima"] == "$ 2.500,00"

    def test_sura_indexed_installments(self, indexed_installments, settings):
        normalized = SuraNormalizer().normalize(indexed_installments)

        assert normalized["pago.cantidad_cuotas"] == "4"
        assert normalized["pago.cuotas[0].vencimiento"] == "10/01/2024"
        assert normalized["pago.cuotas[3].prima"] == "$ 2.500,00"

        data = FieldExtractor(settings).extract(normalized)
        assert data.installment_count == 4
        assert len(data.installments) == 4
        assert data.installments[0].due_date == "2024-01-10"

    def test_sura_payments_text(self):
        normalized = SuraNormalizer().normalize({"pago.forma_de_pago": "Contado 10 PAGOS"})

        assert normalized["pago.cantidad_cuotas"] == "10"

    def test_sura_synonyms_and_prefixes(self, noisy_bag):
        normalized = SuraNormalizer().normalize(noisy_bag)

        assert normalized["poliza.prima_comercial"] == "$ 1.000,00"
        assert normalized["financiero.premio_total"] == "$ 1.220,00"
        assert normalized["vehiculo.marca"] == "FIAT"
        assert normalized["vehiculo.motor"] == "ABC123"
        assert normalized["vehiculo.anio"] == "2019"
        assert normalized["vehiculo.matricula"] == "SBA 1234"

    def test_mapfre_amount_column(self):
        bag = {
            "pago.vencimiento_cuota[1]": "01/02/2024",
            "pago.cuota_monto[1]": "1.000,00",
            "pago.vencimiento_cuota[2]": "01/03/2024",
            "pago.cuota_monto[2]": "1.000,00",
        }

        normalized = MapfreNormalizer().normalize(bag)

        assert normalized["pago.cantidad_cuotas"] == "2"
        assert normalized["pago.cuotas[1].prima"] == "1.000,00"

    def test_mapfre_cleanup_and_modality(self, noisy_bag):
        normalized = MapfreNormalizer().normalize(noisy_bag)

        assert normalized["vehiculo.modelo"] == "CRONOS DRIVE"
        assert normalized["poliza.prima_comercial"] == "$ 1.000,00"
        assert normalized["poliza.modalidad_normalizada"] == "TODO RIESGO TOTAL"
        assert "financiero.premio_total" not in normalized
