"""
Batch address decomposition.

Reads a CSV of free-form addresses, decomposes the address column row by row
and writes the components back out next to the original columns.

To run:
    $ python -m address_query batch data/raw/addresses.csv data/processed/parsed.csv --column address
"""

import pandas as pd

from address_query.utils.logging_setup import logger
from address_query.normalization.address_parser import decompose

COMPONENT_COLUMNS = ["house_number", "street", "unit_free_street", "city", "state", "zip"]


def decompose_frame(df: pd.DataFrame, addr_col: str = "address") -> pd.DataFrame:
    """
    Adds one column per address component to a copy of ``df``.

    Args:
        df (pd.DataFrame): Input rows.
        addr_col (str): Name of the column holding the raw address.

    Returns:
        pd.DataFrame: ``df`` plus the COMPONENT_COLUMNS. Missing or non-string
        addresses produce empty (None) components.

    Raises:
        ValueError: If ``addr_col`` is not a column of ``df``.
    """
    if addr_col not in df.columns:
        logger.error(f"Address column '{addr_col}' not found in {list(df.columns)}")
        raise ValueError(f"Column '{addr_col}' not in DataFrame")

    parsed = [decompose(a).to_dict() for a in df[addr_col]]
    components = pd.DataFrame(parsed, index=df.index, columns=COMPONENT_COLUMNS)

    out = df.copy()
    for col in COMPONENT_COLUMNS:
        out[col] = components[col]

    empty = int(components.isna().all(axis=1).sum())
    if empty:
        logger.warning(f"{empty} of {len(df)} addresses yielded no components.")
    return out


def run(input_csv: str, output_csv: str, addr_col: str = "address") -> pd.DataFrame:
    df = pd.read_csv(input_csv, dtype=str, keep_default_na=False)
    logger.info(f"Decomposing {len(df)} addresses from {input_csv}")

    out = decompose_frame(df, addr_col)
    out.to_csv(output_csv, index=False)

    logger.info(f"Wrote {len(out)} rows to {output_csv}")
    return out
