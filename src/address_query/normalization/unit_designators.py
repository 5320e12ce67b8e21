"""
Secondary-unit designators ('#F', 'Apt 2B', 'Suite 100') in address text.
"""

import re

from address_query.config.mappings.secondary_units import unit_designator_keywords

# ─────────────────────────────────────────────────────────────────────────────
# Pre-compiled regexes
# ─────────────────────────────────────────────────────────────────────────────

# '#F' / ', #2B' anywhere, or a designator keyword followed by something that
# looks like a unit id: '#12', '100', '2B', or a lone letter. The value shape
# keeps proper nouns like "Ste. Genevieve" intact.
UNIT_DESIGNATOR_RE = re.compile(
    r"[,\s]*#\s*[a-zA-Z0-9]+"
    r"|[,\s]+(?:" + "|".join(unit_designator_keywords) + r")\b\.?\s*"
    r"(?:#\s*[a-zA-Z0-9]+|[0-9]+[a-zA-Z]?\b|[a-zA-Z]\b)",
    re.IGNORECASE,
)
MULTI_SPACE_RE = re.compile(r"\s{2,}")
COMMA_RUN_RE = re.compile(r"\s*,(?:\s*,)+\s*")


def strip_unit_designator(query: str) -> str:
    """
    Remove '#F', 'Apt 2B', 'Suite 100' and similar from an address.

    Example:
        "20 Overbrook Ct #F, Monroe, OH 45050" -> "20 Overbrook Ct, Monroe, OH 45050"
    """
    stripped = UNIT_DESIGNATOR_RE.sub("", query)
    stripped = COMMA_RUN_RE.sub(", ", stripped)
    stripped = MULTI_SPACE_RE.sub(" ", stripped)
    return stripped.strip()
