from .base_normalizer import CompanyNormalizer
from .bse_normalizer import BseNormalizer
from .default_normalizer import DefaultNormalizer
from .mapfre_normalizer import MapfreNormalizer
from .normalizer_factory import CompanyNormalizerFactory
from .sura_normalizer import SuraNormalizer

__all__ = [
    "CompanyNormalizer",
    "BseNormalizer",
    "DefaultNormalizer",
    "MapfreNormalizer",
    "CompanyNormalizerFactory",
    "SuraNormalizer",
]
