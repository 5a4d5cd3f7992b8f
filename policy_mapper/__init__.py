"""OCR policy field mapping: normalization, extraction, reference matching and scoring."""

__version__ = "0.1.0"
