# Designator keywords stripped from queries ahead of a unit value
# ("Apt 2B", "Suite 100", "Fl. 3"). Matched case-insensitively.
unit_designator_keywords: tuple[str, ...] = (
    "apt",
    "apartment",
    "ste",
    "suite",
    "unit",
    "bldg",
    "building",
    "fl",
    "floor",
    "rm",
    "room",
)
