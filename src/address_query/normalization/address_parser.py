import re
import logging
from dataclasses import dataclass, asdict
from typing import Optional, Tuple, List

from address_query.config.mappings.state_codes import us_state_codes
from address_query.normalization.abbreviations import DEFAULT_TABLE, AbbreviationTable
from address_query.normalization.unit_designators import strip_unit_designator

logger = logging.getLogger(__name__)

"""
Free-form Address Decomposition

Splits whatever a user typed into a search box ("20 Overbrook Ct, Monroe, OH
45050", "7 westerfield dr", "123 Main St Columbus OH 43215") into house number,
street, city, state and ZIP.

Key Features:
- Comma-delimited input is read segment by segment, left to right.
- Space-only input is read right to left: ZIP, then state, then house number,
  and the rightmost street-type word splits street from city.
- Never raises. A component that cannot be identified is left as None.
"""

# ─────────────────────────────────────────────────────────────────────────────
# Pre-compiled regexes
# ─────────────────────────────────────────────────────────────────────────────

ZIP_RE = re.compile(r"\b([0-9]{5})(?:-[0-9]{4})?\s*$", re.ASCII)
HOUSE_NUMBER_RE = re.compile(r"^([0-9]+[a-zA-Z]?(?:-[0-9]+)?)\s+", re.ASCII)

# ─────────────────────────────────────────────────────────────────────────────
# Dataclass for parsed addresses
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class ParsedAddress:
    raw: str = ""
    house_number: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None

    @property
    def unit_free_street(self) -> Optional[str]:
        """Street with any '#F' / 'Apt 2B' style designator removed."""
        if not self.street:
            return self.street
        return strip_unit_designator(self.street) or None

    @property
    def is_empty(self) -> bool:
        return not any((self.house_number, self.street, self.city, self.state, self.zip))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["unit_free_street"] = self.unit_free_street
        return data


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def is_state_code(value: str) -> bool:
    return value.strip().upper() in us_state_codes


def split_house_number(text: str) -> Tuple[Optional[str], str]:
    """
    Pull a leading house number ('123', '123A', '123-125') off ``text``.

    Returns:
        (house_number or None, rest of the string trimmed)
    """
    text = text.strip()
    m = HOUSE_NUMBER_RE.match(text)
    if not m:
        return None, text
    return m.group(1), text[m.end():].strip()


def _split_zip(text: str) -> Tuple[Optional[str], str]:
    m = ZIP_RE.search(text)
    if not m:
        return None, text
    return m.group(1), text[: m.start()].strip()


def _split_state_zip(segment: str) -> Tuple[Optional[str], Optional[str], str]:
    """
    Look for 'ST 12345' at the end of a comma segment.

    Returns:
        (zip, state, leftover) where leftover is the text in front of the
        state code, or the whole remaining segment when no state was found.
    """
    zip_code, rest = _split_zip(segment.strip())
    words = rest.split()
    if words and is_state_code(words[-1]):
        return zip_code, words[-1].upper(), " ".join(words[:-1])
    return zip_code, None, rest


def _split_street_and_city(
    words: List[str],
    has_house_number: bool,
    table: AbbreviationTable,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Use the rightmost street-type word as the street/city boundary.

    'Overbrook Ct Monroe' -> ('Overbrook Ct', 'Monroe')
    """
    if not words:
        return None, None

    boundary = -1
    for i in range(len(words) - 1, -1, -1):
        if table.is_street_type_word(words[i]):
            boundary = i
            break

    if 0 <= boundary < len(words) - 1:
        return " ".join(words[: boundary + 1]), " ".join(words[boundary + 1:])
    if boundary >= 0:
        return " ".join(words), None
    # No street type: numbered text reads as a street, bare words as a place.
    if has_house_number:
        return " ".join(words), None
    return None, " ".join(words)


# ─────────────────────────────────────────────────────────────────────────────
# Parsing paths
# ─────────────────────────────────────────────────────────────────────────────


def _parse_comma_delimited(query: str) -> dict:
    parts = [p.strip() for p in query.split(",")]
    parts = [p for p in parts if p]
    fields: dict = {}
    if not parts:
        return fields

    house, street = split_house_number(parts[0])
    fields["house_number"] = house
    fields["street"] = street

    if len(parts) < 2:
        return fields

    last = parts[-1]
    second_to_last = parts[-2] if len(parts) >= 3 else ""
    zip_code, state, leftover = _split_state_zip(last)

    if zip_code or state:
        fields["zip"] = zip_code
        fields["state"] = state
        if len(parts) == 2:
            # "20 Overbrook Ct, Monroe OH 45050"
            if state and leftover:
                fields["city"] = leftover
        elif not state and is_state_code(second_to_last):
            # "20 Overbrook Ct, Monroe, OH, 45050"
            fields["state"] = second_to_last.upper()
            if len(parts) >= 4:
                fields["city"] = parts[1]
        else:
            fields["city"] = ", ".join(parts[1:-1])
    elif len(parts) == 2:
        # "20 Main St, Monroe"
        fields["city"] = last
    else:
        fields["city"] = second_to_last
        zip_code, state, _ = _split_state_zip(last)
        fields["zip"] = zip_code
        fields["state"] = state

    return fields


def _parse_space_delimited(query: str, table: AbbreviationTable) -> dict:
    fields: dict = {}

    zip_code, remaining = _split_zip(query)
    fields["zip"] = zip_code

    words = remaining.split()
    if len(words) >= 2:
        last = words[-1]
        # 'Ct' is Connecticut only when a ZIP backs it up; otherwise Court.
        if is_state_code(last) and (not table.is_street_type_word(last) or zip_code):
            fields["state"] = last.upper()
            remaining = " ".join(words[:-1])
        elif is_state_code(last):
            logger.debug(f"Trailing '{last}' kept as street type (no ZIP)")

    house, remaining = split_house_number(remaining)
    fields["house_number"] = house

    street, city = _split_street_and_city(remaining.split(), house is not None, table)
    fields["street"] = street
    fields["city"] = city
    return fields


# ─────────────────────────────────────────────────────────────────────────────
# Public entry point
# ─────────────────────────────────────────────────────────────────────────────


def decompose(query: str, table: AbbreviationTable = DEFAULT_TABLE) -> ParsedAddress:
    """
    Decompose a free-form address query into its components.

    Args:
        query: Anything the user typed. Non-string values are treated as "".
        table: Abbreviation table used to recognise street-type words.

    Returns:
        ParsedAddress with every identified field trimmed and the rest None.
        ``raw`` always holds the input unmodified.
    """
    if not isinstance(query, str):
        return ParsedAddress()

    text = query.strip()
    if not text:
        return ParsedAddress(raw=query)

    if "," in text:
        fields = _parse_comma_delimited(text)
    else:
        fields = _parse_space_delimited(text, table)

    cleaned = {k: (v.strip() or None) if isinstance(v, str) else None for k, v in fields.items()}
    parsed = ParsedAddress(raw=query, **cleaned)
    logger.debug(f"Decomposed {query!r} → {parsed}")
    return parsed
