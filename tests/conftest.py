"""Pytest configuration and shared fixtures."""

import pytest

from policy_mapper.config.settings import MapperSettings
from policy_mapper.schemas.policy import ReferenceItem


@pytest.fixture
def settings() -> MapperSettings:
    """Create settings with default tunables.

    Returns:
        MapperSettings: Settings independent of the environment
    """
    return MapperSettings(_env_file=None)


@pytest.fixture
def fuel_list() -> list:
    """Fuel reference list as served by the registry."""
    return [
        ReferenceItem(id=1, name="GASOLINA", code="GAS"),
        ReferenceItem(id=2, name="GASOIL", code="DIS"),
        ReferenceItem(id=3, name="ELECTRICO", code="ELE"),
        ReferenceItem(id=4, name="HIBRIDO", code="HIB"),
    ]


@pytest.fixture
def reference_lists(fuel_list) -> dict:
    """Reference lists for every reference-coded field."""
    return {
        "fuel": fuel_list,
        "destination": [
            ReferenceItem(id=1, name="PARTICULAR"),
            ReferenceItem(id=2, name="COMERCIAL"),
        ],
        "department": [
            ReferenceItem(id=1, name="MONTEVIDEO"),
            ReferenceItem(id=2, name="CANELONES"),
            ReferenceItem(id=3, name="MALDONADO"),
        ],
        "category": [
            ReferenceItem(id=1, name="AUTOMOVIL"),
            ReferenceItem(id=2, name="CAMIONETA"),
            ReferenceItem(id=3, name="MOTO"),
        ],
        "quality": [
            ReferenceItem(id=1, name="PROPIETARIO"),
            ReferenceItem(id=2, name="ARRENDATARIO"),
        ],
        "tariff": [
            ReferenceItem(id=1, name="TODO RIESGO"),
            ReferenceItem(id=2, name="TERCEROS"),
        ],
        "broker": [
            ReferenceItem(id=10, name="GONZALEZ SEGUROS LTDA"),
            ReferenceItem(id=11, name="PEREZ Y ASOCIADOS"),
        ],
        "currency": [
            ReferenceItem(id=858, name="PESO URUGUAYO", code="UYU"),
            ReferenceItem(id=840, name="DOLAR AMERICANO", code="USD"),
        ],
    }


@pytest.fixture
def bse_bag() -> dict:
    """Complete BSE-style OCR field bag."""
    return {
        "poliza.numero": "Póliza: 12345678",
        "poliza.endoso": "Endoso: 0",
        "poliza.vigencia.desde": "01/03/2024",
        "poliza.vigencia.hasta": "01/03/2025",
        "poliza.prima_comercial": "$ 8.606,56",
        "financiero.premio_total": "$ 10.500,00",
        "pago.cantidad_cuotas": "10 cuotas",
        "pago.medio": "Tarjeta de crédito",
        "vehiculo.marca": "MARCA\nTOYOTA",
        "vehiculo.modelo": "COROLLA XEI",
        "vehiculo.anio": "2020",
        "vehiculo.motor": "MOTOR 2ZR1234567",
        "vehiculo.chasis": "CHASIS 9BRBD48E1234",
        "vehiculo.matricula": "SBA 1234",
        "vehiculo.combustible": "NAFTA",
        "vehiculo.destino_del_vehiculo": "PARTICULAR",
        "vehiculo.tipo_de_vehiculo": "AUTOMOVIL",
        "vehiculo.calidad_de_contratante": "PROPIETARIO",
        "poliza.modalidad": "TODO RIESGO",
        "asegurado.nombre": "JUAN PEREZ",
        "asegurado.documento.numero": "1.234.567-8",
        "asegurado.departamento": "Depto: MONTEVIDEO",
        "asegurado.direccion": "AV. ITALIA 1234",
        "corredor.nombre": "GONZALEZ SEGUROS",
    }
