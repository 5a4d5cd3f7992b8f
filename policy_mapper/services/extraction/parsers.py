"""Value-level parsing and cleanup helpers.

Pure functions shared by the field extractor and the provider normalizers.
None of them raise on malformed input: unparseable dates become ``""`` and
unparseable amounts become ``Decimal("0")``.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional

from policy_mapper.services.extraction.constants import (
    AMOUNT_TOKEN_PATTERN,
    DATE_FORMATS,
    DATE_TOKEN_PATTERN,
    DEFAULT_MOVEMENT_TYPE,
    INSTALLMENT_COUNT_PATTERN,
    MAX_INSTALLMENTS,
    MONTH_NAMES,
    MOVEMENT_TYPE_KEYWORDS,
    PAYMENT_METHOD_KEYWORDS,
    STANDARD_AMOUNT_PATTERN,
    TEXT_DATE_PATTERNS,
    UY_AMOUNT_PATTERN,
)

ISO_DATE_FORMAT = "%Y-%m-%d"
MIN_YEAR = 1900
MAX_YEAR = 2099


def collapse_whitespace(text: Optional[str]) -> str:
    """Trim and collapse runs of whitespace and newlines into single spaces."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", str(text)).strip()


def strip_labels(text: Optional[str], labels: Iterable[str]) -> str:
    """Remove OCR label literals from the start of a value.

    Labels are matched case-insensitively, may be followed by ``:``, ``-`` or
    whitespace, and are stripped repeatedly so ``"Marca: MARCA TOYOTA"`` still
    cleans to ``"TOYOTA"``.
    """
    value = collapse_whitespace(text)
    ordered = sorted(labels, key=len, reverse=True)
    changed = True
    while value and changed:
        changed = False
        for label in ordered:
            match = re.match(rf"{re.escape(label)}(?=$|[\s:\-.])[\s:\-.]*", value, re.IGNORECASE)
            if match:
                value = value[match.end():].strip()
                changed = True
                break
    return value


def clean_identifier(text: Optional[str], labels: Iterable[str] = ()) -> str:
    """Upper-cased identifier with labels and whitespace noise removed."""
    return strip_labels(text, labels).upper()


def title_case_name(text: Optional[str], labels: Iterable[str] = ()) -> str:
    """Title-case a person or company name."""
    value = strip_labels(text, labels)
    return " ".join(word.capitalize() for word in value.split(" ")) if value else ""


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    if not MIN_YEAR <= year <= MAX_YEAR:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_text_date(text: str) -> Optional[date]:
    for pattern, format_type in TEXT_DATE_PATTERNS:
        for match in re.finditer(pattern, text):
            if format_type == "dmy_text":
                day, month_name, year = match.groups()
            else:
                month_name, day, year = match.groups()
            month = MONTH_NAMES.get(month_name.lower().rstrip("."))
            if month:
                parsed = _build_date(int(year), month, int(day))
                if parsed:
                    return parsed
    return None


def parse_date(text: Optional[str], date_format: Optional[str] = None) -> str:
    """Parse a date in any supported layout and return ISO ``yyyy-MM-dd``.

    Args:
        text: Raw value, possibly with labels around the date
        date_format: Optional strptime format tried before the defaults

    Returns:
        ISO date string, or ``""`` when nothing parses
    """
    value = collapse_whitespace(text)
    if not value:
        return ""

    formats = [date_format] + DATE_FORMATS if date_format else DATE_FORMATS
    candidates = [value] + re.findall(DATE_TOKEN_PATTERN, value)
    for candidate in candidates:
        for fmt in formats:
            try:
                parsed = datetime.strptime(candidate, fmt).date()
            except ValueError:
                continue
            if MIN_YEAR <= parsed.year <= MAX_YEAR:
                return parsed.strftime(ISO_DATE_FORMAT)

    parsed = _parse_text_date(value)
    return parsed.strftime(ISO_DATE_FORMAT) if parsed else ""


def find_dates(text: Optional[str]) -> List[str]:
    """All parseable date tokens in ``text``, in order of appearance."""
    dates = []
    for token in re.findall(DATE_TOKEN_PATTERN, collapse_whitespace(text)):
        parsed = parse_date(token)
        if parsed:
            dates.append(parsed)
    return dates


def _to_decimal(number: str) -> Optional[Decimal]:
    try:
        return Decimal(number)
    except InvalidOperation:
        return None


def _normalize_separators(number: str) -> str:
    """Turn a digits/.,/- string into a plain decimal literal."""
    negative = number.startswith("-")
    number = number.replace("-", "")
    if "." in number and "," in number:
        # The right-most separator is the decimal one
        if number.rfind(",") > number.rfind("."):
            number = number.replace(".", "").replace(",", ".")
        else:
            number = number.replace(",", "")
    elif "," in number:
        if re.fullmatch(r"\d{1,3}(?:,\d{3})+", number):
            number = number.replace(",", "")
        else:
            number = number.replace(",", ".")
    elif re.fullmatch(r"\d{1,3}(?:\.\d{3})+", number):
        number = number.replace(".", "")
    return f"-{number}" if negative else number


def parse_amount(text: Optional[str]) -> Decimal:
    """Parse a currency amount.

    ``"$ 63.812,36"`` and ``"1,234.56"`` both parse; text without digits
    returns ``Decimal("0")``.
    """
    value = collapse_whitespace(text)
    if not re.search(r"\d", value):
        return Decimal("0")

    for pattern in (UY_AMOUNT_PATTERN, STANDARD_AMOUNT_PATTERN):
        match = re.search(pattern, value)
        if match:
            parsed = _to_decimal(_normalize_separators(match.group(1)))
            if parsed is not None:
                return parsed

    # First bare number, separators resolved by position
    token = re.search(AMOUNT_TOKEN_PATTERN, value).group(0).rstrip(".,")
    parsed = _to_decimal(_normalize_separators(token))
    return parsed if parsed is not None else Decimal("0")


def parse_installment_count(text: Optional[str]) -> Optional[int]:
    """Installment count from ``"12"``, ``"10 cuotas"`` or ``"3 PAGOS"``."""
    value = collapse_whitespace(text)
    if not value:
        return None
    if value.isdigit():
        count = int(value)
        return count if 1 <= count <= MAX_INSTALLMENTS else None
    match = re.search(INSTALLMENT_COUNT_PATTERN, value, re.IGNORECASE)
    if match:
        count = int(match.group(1))
        if 1 <= count <= MAX_INSTALLMENTS:
            return count
    return None


def classify_keywords(text: str, table, default: Optional[str] = None) -> Optional[str]:
    """First canonical value whose keyword appears in the upper-cased text."""
    upper = collapse_whitespace(text).upper()
    if not upper:
        return default
    for canonical, keywords in table:
        if any(keyword in upper for keyword in keywords):
            return canonical
    return default


def normalize_movement_type(text: Optional[str]) -> str:
    """Classify into EMISION/RENOVACION/ENDOSO/ANULACION or pass through uppercased."""
    value = collapse_whitespace(text).upper()
    if not value:
        return DEFAULT_MOVEMENT_TYPE
    return classify_keywords(value, MOVEMENT_TYPE_KEYWORDS, default=value)


def normalize_payment_method(text: Optional[str]) -> str:
    """Classify a payment method or pass the upper-cased text through."""
    value = collapse_whitespace(text).upper()
    if not value:
        return ""
    return classify_keywords(value, PAYMENT_METHOD_KEYWORDS, default=value)
