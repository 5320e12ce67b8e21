# Canonical word → every recognised spelling, canonical form first.
# Abbreviations are matched lower-cased with one trailing period removed,
# the dotted spellings are kept so they show up as search variants.

street_type_variants: dict[str, tuple[str, ...]] = {
    # ――― common ―――
    "drive":      ("drive", "dr", "dr."),
    "road":       ("road", "rd", "rd."),
    "avenue":     ("avenue", "ave", "ave.", "av"),
    "street":     ("street", "st", "st."),
    "court":      ("court", "ct", "ct."),
    "lane":       ("lane", "ln", "ln."),
    "boulevard":  ("boulevard", "blvd", "blvd.", "bvd"),
    "place":      ("place", "pl", "pl."),
    "circle":     ("circle", "cir", "cir."),
    "trail":      ("trail", "trl", "trl.", "tr"),
    "parkway":    ("parkway", "pkwy", "pkwy."),
    "terrace":    ("terrace", "ter", "ter."),
    "way":        ("way", "wy", "wy."),
    # ――― less common ―――
    "highway":    ("highway", "hwy", "hwy."),
    "pike":       ("pike", "pk", "pk."),
    "alley":      ("alley", "aly", "aly."),
    "annex":      ("annex", "anx", "anx."),
    "expressway": ("expressway", "expy", "expy."),
    "extension":  ("extension", "ext", "ext."),
    "freeway":    ("freeway", "fwy", "fwy."),
    "grove":      ("grove", "grv", "grv."),
    "heights":    ("heights", "hts", "hts."),
    "junction":   ("junction", "jct", "jct."),
    "landing":    ("landing", "lndg", "lndg."),
    "loop":       ("loop", "lp", "lp."),
    "point":      ("point", "pt", "pt."),
    "square":     ("square", "sq", "sq."),
    "trace":      ("trace", "trce", "trce."),
    "view":       ("view", "vw", "vw."),
}

direction_variants: dict[str, tuple[str, ...]] = {
    "north":     ("north", "n", "n."),
    "south":     ("south", "s", "s."),
    "east":      ("east", "e", "e."),
    "west":      ("west", "w", "w."),
    "northeast": ("northeast", "ne", "ne."),
    "northwest": ("northwest", "nw", "nw."),
    "southeast": ("southeast", "se", "se."),
    "southwest": ("southwest", "sw", "sw."),
}
