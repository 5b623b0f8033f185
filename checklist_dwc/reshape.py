"""Wide-to-long reshaping of delimited multi-value fields."""

from typing import Callable, Optional

import pandas as pd


def split_values(value, delimiter: str):
    """Non-empty, stripped parts of a delimited string (empty list for null)."""
    if value is None or pd.isna(value):
        return []
    parts = (part.strip() for part in str(value).split(delimiter))
    return [part for part in parts if part]


def split_multivalue(records: pd.DataFrame, field: str, delimiter: str,
                     id_column: str = 'taxon_id', value_column: str = 'value',
                     mapper: Optional[Callable] = None) -> pd.DataFrame:
    """
    One row per value of a delimited field, tagged with the record's id.

    Empty slots produce no row. Rows keep the record order, then the
    value order within the field.

    Args:
        records: DataFrame holding ``id_column`` and ``field``
        field: Column with the delimited list
        delimiter: Separator between values (e.g. ", " or " | ")
        mapper: Optional vocabulary lookup applied to every value

    Returns:
        DataFrame with columns ``id_column`` and ``value_column``
    """
    rows = []
    for taxon_id, value in zip(records[id_column], records[field]):
        for part in split_values(value, delimiter):
            mapped = mapper(part) if mapper else part
            if mapped:
                rows.append({id_column: taxon_id, value_column: mapped})

    return pd.DataFrame(rows, columns=[id_column, value_column])
