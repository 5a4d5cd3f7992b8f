from .field_extractor import FieldExtractor

__all__ = ["FieldExtractor"]
