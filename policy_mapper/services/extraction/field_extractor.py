"""Canonical field extraction from a normalized OCR field bag.

Each canonical field is resolved by trying its alias keys in order, cleaning
every candidate value, and keeping the first one that cleans to something
non-empty. A few fields with a recognizable textual shape (policy number,
dates, amounts) fall back to a regex scan over every value in the bag.
"""

import re
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from policy_mapper.config.settings import MapperSettings, get_settings
from policy_mapper.schemas.policy import CanonicalPolicyData, InstallmentEntry
from policy_mapper.services.extraction.constants import (
    CURRENCY_KEYWORDS,
    END_DATE_LABEL_PATTERN,
    ENDORSEMENT_PATTERN,
    FIELD_ALIASES,
    FIELD_LABELS,
    LABELLED_POLICY_NUMBER_PATTERN,
    LABELLED_PREMIUM_PATTERN,
    PLATE_LABEL_WORDS,
    PLATE_PATTERNS,
    PLATE_PLACEHOLDERS,
    POLICY_NUMBER_PATTERN,
    START_DATE_LABEL_PATTERN,
    DATE_TOKEN_PATTERN,
    TOTAL_TO_PAY_PATTERN,
    YEAR_PATTERN,
)
from policy_mapper.services.extraction.parsers import (
    classify_keywords,
    clean_identifier,
    collapse_whitespace,
    find_dates,
    normalize_movement_type,
    normalize_payment_method,
    parse_amount,
    parse_date,
    parse_installment_count,
    strip_labels,
    title_case_name,
)
from policy_mapper.utils.logging import get_logger

LOGGER = get_logger(__name__)

RawFieldBag = Mapping[str, Any]

# Fields cleaned as upper-cased identifiers
IDENTIFIER_FIELDS = (
    "vehicle_brand",
    "vehicle_model",
    "vehicle_motor",
    "vehicle_chassis",
    "vehicle_fuel",
    "vehicle_destination",
    "vehicle_category",
    "department",
    "quality",
    "tariff",
)

# Values that look like plates but never hold one
PLATE_SCAN_EXCLUDED_FIELDS = (
    "vehicle_brand",
    "vehicle_model",
    "vehicle_year",
    "vehicle_motor",
    "vehicle_chassis",
    "policy_number",
)


class FieldExtractor:
    """Builds a ``CanonicalPolicyData`` record from a field bag.

    The extractor never raises for malformed data. A field whose resolution
    fails is logged and left at its empty default.

    Attributes:
        settings: Active mapper settings
        aliases: Alias keys per canonical field
    """

    def __init__(
        self,
        settings: Optional[MapperSettings] = None,
        aliases: Optional[Dict[str, List[str]]] = None,
    ):
        self.settings = settings or get_settings()
        self.aliases = aliases or FIELD_ALIASES

    def extract(self, bag: RawFieldBag) -> CanonicalPolicyData:
        """Resolve every canonical field.

        Args:
            bag: Normalized OCR field bag (key -> text)

        Returns:
            CanonicalPolicyData: Fully populated record
        """
        if not isinstance(bag, Mapping):
            LOGGER.warning(
                "Field bag is not a mapping, returning empty record",
                extra={"bag_type": type(bag).__name__},
            )
            return CanonicalPolicyData(currency_code=self.settings.default_currency_code)

        bag = {str(key): "" if value is None else str(value) for key, value in bag.items()}
        resolvers: List[Tuple[str, Callable[[Dict[str, str]], Any]]] = [
            ("policy_number", self._extract_policy_number),
            ("endorsement", self._extract_endorsement),
            ("start_date", lambda b: self._extract_date(b, "start_date", START_DATE_LABEL_PATTERN)),
            ("end_date", lambda b: self._extract_date(b, "end_date", END_DATE_LABEL_PATTERN)),
            ("movement_type", self._extract_movement_type),
            ("premium", self._extract_premium),
            ("total_amount", self._extract_total_amount),
            ("installments", self._extract_installments),
            ("payment_method", self._extract_payment_method),
            ("currency_code", self._extract_currency_code),
            ("vehicle_year", self._extract_vehicle_year),
            ("vehicle_plate", self._extract_plate),
            ("client_name", lambda b: self._first_value(
                b, "client_name", lambda v: title_case_name(v, FIELD_LABELS["client_name"]))),
            ("broker_name", lambda b: self._first_value(
                b, "broker_name", lambda v: title_case_name(v, FIELD_LABELS["broker_name"]))),
            ("client_document", lambda b: self._first_value(
                b, "client_document", lambda v: clean_identifier(v, FIELD_LABELS["client_document"]))),
            ("client_address", lambda b: self._first_value(
                b, "client_address", lambda v: strip_labels(v, FIELD_LABELS["client_address"]))),
            ("broker_code", lambda b: self._first_value(
                b, "broker_code", lambda v: clean_identifier(v, ("Número", "Numero", "Nº", "N°", "Código")))),
        ]
        for field_name in IDENTIFIER_FIELDS:
            labels = FIELD_LABELS.get(field_name, ())
            resolvers.append((
                field_name,
                lambda b, f=field_name, l=labels: self._first_value(b, f, lambda v: clean_identifier(v, l)),
            ))

        values: Dict[str, Any] = {}
        for field_name, resolver in resolvers:
            try:
                value = resolver(bag)
            except Exception as e:
                LOGGER.warning(
                    f"Failed to extract field '{field_name}': {e}",
                    extra={"field_name": field_name, "error": str(e)},
                )
                continue
            if value not in (None, ""):
                values[field_name] = value

        installments = values.pop("installments", [])
        values["installments"] = installments
        values["installment_count"] = self._resolve_installment_count(bag, installments)
        values.setdefault("currency_code", self.settings.default_currency_code)

        record = CanonicalPolicyData(**values)
        LOGGER.debug(
            "Extracted canonical policy data",
            extra={"policy_number": record.policy_number, "resolved_fields": len(values)},
        )
        return record

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def _candidates(self, bag: Dict[str, str], field_name: str) -> List[Tuple[str, str]]:
        """Non-empty (alias, value) pairs for a field, in alias order."""
        lowered = {}
        for key, value in bag.items():
            lowered.setdefault(key.lower(), value)

        found = []
        for alias in self.aliases.get(field_name, []):
            value = bag.get(alias)
            if value is None:
                value = lowered.get(alias.lower())
            if value and value.strip():
                found.append((alias, value))
        return found

    def _first_value(
        self,
        bag: Dict[str, str],
        field_name: str,
        cleaner: Callable[[str], Any],
    ) -> Any:
        for _, value in self._candidates(bag, field_name):
            cleaned = cleaner(value)
            if cleaned:
                return cleaned
        return None

    @staticmethod
    def _scan(bag: Dict[str, str], pattern: str, flags: int = re.IGNORECASE) -> List[str]:
        """First capture group of ``pattern`` across all bag values."""
        hits = []
        for value in bag.values():
            for match in re.finditer(pattern, value, flags):
                hits.append(match.group(1))
        return hits

    # ------------------------------------------------------------------
    # Policy fields
    # ------------------------------------------------------------------

    def _extract_policy_number(self, bag: Dict[str, str]) -> str:
        for alias, value in self._candidates(bag, "policy_number"):
            match = re.search(POLICY_NUMBER_PATTERN, value)
            if match:
                return match.group(1)
            labelled = [
                hit for hit in re.findall(LABELLED_POLICY_NUMBER_PATTERN, value, re.IGNORECASE)
                if re.search(r"\d", hit)
            ]
            if labelled:
                return labelled[0].upper()
            if alias != "datos_poliza":
                cleaned = clean_identifier(value, FIELD_LABELS["policy_number"]).replace(" ", "")
                if re.search(r"\d", cleaned):
                    return cleaned

        for hit in self._scan(bag, LABELLED_POLICY_NUMBER_PATTERN):
            if re.search(r"\d", hit):
                return hit.upper()
        hits = self._scan(bag, POLICY_NUMBER_PATTERN, 0)
        return hits[0] if hits else ""

    def _extract_endorsement(self, bag: Dict[str, str]) -> str:
        for _, value in self._candidates(bag, "endorsement"):
            match = re.search(ENDORSEMENT_PATTERN, value, re.IGNORECASE)
            if match:
                return str(int(match.group(1)))
            cleaned = collapse_whitespace(value)
            if cleaned.isdigit():
                return str(int(cleaned))
        hits = self._scan(bag, ENDORSEMENT_PATTERN)
        return str(int(hits[0])) if hits else "0"

    def _extract_date(self, bag: Dict[str, str], field_name: str, label_pattern: str) -> str:
        labelled = label_pattern + DATE_TOKEN_PATTERN
        for _, value in self._candidates(bag, field_name):
            match = re.search(labelled, value, re.IGNORECASE)
            if match:
                parsed = parse_date(match.group(1))
            elif field_name == "end_date":
                # "01/01/2024 al 01/01/2025": the last date closes the period
                found = find_dates(value)
                parsed = found[-1] if len(found) > 1 else parse_date(value)
            else:
                parsed = parse_date(value)
            if parsed:
                return parsed

        for hit in self._scan(bag, labelled):
            parsed = parse_date(hit)
            if parsed:
                return parsed

        # Unlabelled dates: first one opens the period, last one closes it
        dates = [d for value in bag.values() for d in find_dates(value)]
        if field_name == "start_date" and dates:
            return dates[0]
        if field_name == "end_date" and len(dates) > 1:
            return dates[-1]
        return ""

    def _extract_movement_type(self, bag: Dict[str, str]) -> str:
        candidates = self._candidates(bag, "movement_type")
        return normalize_movement_type(candidates[0][1] if candidates else "")

    # ------------------------------------------------------------------
    # Financial fields
    # ------------------------------------------------------------------

    def _extract_premium(self, bag: Dict[str, str]) -> Optional[Decimal]:
        for alias, value in self._candidates(bag, "premium"):
            if alias == "datos_financiero":
                match = re.search(LABELLED_PREMIUM_PATTERN, value, re.IGNORECASE)
                amount = parse_amount(match.group(1)) if match else Decimal("0")
            else:
                amount = parse_amount(value)
            if amount > 0:
                return amount
        for hit in self._scan(bag, LABELLED_PREMIUM_PATTERN):
            amount = parse_amount(hit)
            if amount > 0:
                return amount
        return None

    def _extract_total_amount(self, bag: Dict[str, str]) -> Optional[Decimal]:
        for alias, value in self._candidates(bag, "total_amount"):
            match = re.search(TOTAL_TO_PAY_PATTERN, value, re.IGNORECASE)
            if match:
                amount = parse_amount(match.group(1))
            elif alias == "datos_financiero":
                continue
            else:
                amount = parse_amount(value)
            if amount > 0:
                return amount
        for hit in self._scan(bag, TOTAL_TO_PAY_PATTERN):
            amount = parse_amount(hit)
            if amount > 0:
                return amount
        return None

    def _extract_installments(self, bag: Dict[str, str]) -> List[InstallmentEntry]:
        """Normalized 0-indexed schedule written by the provider normalizers."""
        entries = []
        for index in range(self.settings.max_installment_index):
            due = bag.get(f"pago.cuotas[{index}].vencimiento", "")
            amount = bag.get(f"pago.cuotas[{index}].prima", "")
            if not due.strip() and not amount.strip():
                continue
            entries.append(InstallmentEntry(
                number=index + 1,
                due_date=parse_date(due),
                amount=parse_amount(amount),
            ))
        return entries

    def _resolve_installment_count(
        self, bag: Dict[str, str], installments: List[InstallmentEntry]
    ) -> int:
        for _, value in self._candidates(bag, "installment_count"):
            count = parse_installment_count(value)
            if count:
                return count
        return len(installments) or 1

    def _extract_payment_method(self, bag: Dict[str, str]) -> str:
        return self._first_value(bag, "payment_method", lambda v: normalize_payment_method(
            strip_labels(v, FIELD_LABELS["payment_method"])))

    def _extract_currency_code(self, bag: Dict[str, str]) -> str:
        texts = [value for _, value in self._candidates(bag, "currency")]
        # Amount fields often carry the currency symbol
        texts += [value for _, value in self._candidates(bag, "total_amount")]
        texts += [value for _, value in self._candidates(bag, "premium")]
        for text in texts:
            code = classify_keywords(text, CURRENCY_KEYWORDS)
            if code:
                return code
        return self.settings.default_currency_code

    # ------------------------------------------------------------------
    # Vehicle fields
    # ------------------------------------------------------------------

    def _extract_vehicle_year(self, bag: Dict[str, str]) -> Optional[int]:
        for _, value in self._candidates(bag, "vehicle_year"):
            match = re.search(YEAR_PATTERN, value)
            if match:
                return int(match.group(1))
        return None

    @staticmethod
    def _clean_plate(value: str) -> str:
        cleaned = strip_labels(value, FIELD_LABELS["vehicle_plate"]).upper()
        return re.sub(r"[\s\-]", "", cleaned)

    @staticmethod
    def _is_valid_plate(plate: str) -> bool:
        if not 5 <= len(plate) <= 8 or plate in PLATE_LABEL_WORDS:
            return False
        letters = sum(1 for c in plate if c.isalpha())
        digits = sum(1 for c in plate if c.isdigit())
        return letters >= 2 and digits >= 3

    def _extract_plate(self, bag: Dict[str, str]) -> str:
        for _, value in self._candidates(bag, "vehicle_plate"):
            if collapse_whitespace(value).upper() in PLATE_PLACEHOLDERS:
                continue
            plate = self._clean_plate(value)
            if self._is_valid_plate(plate):
                return plate

        # Recover a plate printed elsewhere in the document
        skipped = {
            alias.lower()
            for field_name in PLATE_SCAN_EXCLUDED_FIELDS
            for alias in self.aliases.get(field_name, [])
        }
        for key, value in bag.items():
            if key.lower() in skipped:
                continue
            upper = collapse_whitespace(value).upper()
            for pattern in PLATE_PATTERNS:
                for match in re.finditer(pattern, upper):
                    plate = re.sub(r"[\s\-]", "", match.group(1))
                    if self._is_valid_plate(plate):
                        return plate
        return ""
