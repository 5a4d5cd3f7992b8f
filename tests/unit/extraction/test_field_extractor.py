from decimal import Decimal

import pytest

from policy_mapper.schemas.policy import CanonicalPolicyData
from policy_mapper.services.extraction.field_extractor import FieldExtractor


class TestFieldExtractor:

    @pytest.fixture
    def extractor(self, settings):
        return FieldExtractor(settings)

    def test_bse_style_bag(self, extractor):
        """Labelled policy number, day-first dates and Uruguayan amounts resolve."""
        bag = {
            "poliza.numero": "Póliza: 12345678",
            "poliza.vigencia.desde": "01/03/2024",
            "poliza.vigencia.hasta": "01/03/2025",
            "financiero.premio_total": "$ 10.500,00",
        }

        data = extractor.extract(bag)

        assert data.policy_number == "12345678"
        assert data.start_date == "2024-03-01"
        assert data.end_date == "2025-03-01"
        assert data.total_amount == Decimal("10500.00")
        assert data.premium == Decimal("0")
        assert data.installment_count == 1
        assert data.endorsement == "0"
        assert data.movement_type == "EMISION"
        assert data.vehicle_plate == ""

    def test_full_bag(self, extractor, bse_bag):
        data = extractor.extract(bse_bag)

        assert data.premium == Decimal("8606.56")
        assert data.installment_count == 10
        assert data.payment_method == "TARJETA"
        assert data.vehicle_brand == "TOYOTA"
        assert data.vehicle_model == "COROLLA XEI"
        assert data.vehicle_year == 2020
        assert data.vehicle_motor == "2ZR1234567"
        assert data.vehicle_chassis == "9BRBD48E1234"
        assert data.vehicle_plate == "SBA1234"
        assert data.vehicle_fuel == "NAFTA"
        assert data.department == "MONTEVIDEO"
        assert data.tariff == "TODO RIESGO"
        assert data.client_name == "Juan Perez"
        assert data.broker_name == "Gonzalez Seguros"
        assert data.currency_code == "858"

    def test_empty_bag_returns_defaults(self, extractor):
        """Nothing to extract still yields a fully populated record."""
        data = extractor.extract({})

        assert isinstance(data, CanonicalPolicyData)
        assert data.policy_number == ""
        assert data.start_date == ""
        assert data.total_amount == Decimal("0")
        assert data.installment_count == 1
        assert data.currency_code == "858"

    def test_non_mapping_bag_does_not_raise(self, extractor):
        data = extractor.extract(None)

        assert data.policy_number == ""
        assert data.installment_count == 1

    def test_policy_number_from_labelled_text_anywhere(self, extractor):
        data = extractor.extract({"texto_libre": "Certificado Nº: AB-778899"})

        assert data.policy_number == "AB-778899"

    def test_policy_number_from_digit_run_anywhere(self, extractor):
        data = extractor.extract({"observaciones": "Referencia 87654321 emitida"})

        assert data.policy_number == "87654321"

    def test_dates_from_combined_block(self, extractor):
        bag = {"datos_poliza": "Póliza 1234567 Vigencia desde 01/01/2024 hasta 01/01/2025"}

        data = extractor.extract(bag)

        assert data.policy_number == "1234567"
        assert data.start_date == "2024-01-01"
        assert data.end_date == "2025-01-01"

    def test_period_without_end_label_closes_on_last_date(self, extractor):
        bag = {"datos_poliza": "Póliza 1234567 Vigencia: 01/01/2024 al 01/01/2025"}

        data = extractor.extract(bag)

        assert data.start_date == "2024-01-01"
        assert data.end_date == "2025-01-01"

    def test_alias_order_first_non_empty_wins(self, extractor):
        bag = {"vehiculo.marca": "  ", "marca": "Peugeot"}

        assert extractor.extract(bag).vehicle_brand == "PEUGEOT"

    def test_alias_lookup_ignores_key_case(self, extractor):
        assert extractor.extract({"Vehiculo.Modelo": "208"}).vehicle_model == "208"

    def test_placeholder_plate_recovered_from_text(self, extractor):
        bag = {
            "vehiculo.matricula": "MATRICULA",
            "observaciones": "Vehículo matrícula SBC 4321 color gris",
        }

        assert extractor.extract(bag).vehicle_plate == "SBC4321"

    def test_normalized_installments(self, extractor):
        bag = {
            "pago.cuotas[0].vencimiento": "01/04/2024",
            "pago.cuotas[0].prima": "$ 1.050,00",
            "pago.cuotas[1].vencimiento": "01/05/2024",
            "pago.cuotas[1].prima": "$ 1.050,00",
        }

        data = extractor.extract(bag)

        assert data.installment_count == 2
        assert [i.due_date for i in data.installments] == ["2024-04-01", "2024-05-01"]
        assert data.installments[1].amount == Decimal("1050.00")

    def test_currency_code_from_text(self, extractor):
        assert extractor.extract({"moneda": "U$S"}).currency_code == "840"

    def test_total_to_pay_label_in_financial_block(self, extractor):
        bag = {"datos_financiero": "Prima Comercial: 8.000,00 Premio Total a Pagar: $ 9.760,00"}

        data = extractor.extract(bag)

        assert data.total_amount == Decimal("9760.00")
        assert data.premium == Decimal("8000.00")

    def test_vehicle_year_from_labelled_value(self, extractor):
        assert extractor.extract({"vehiculo.anio": "Año 2019"}).vehicle_year == 2019
