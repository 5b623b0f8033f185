"""Content-addressed taxon identifiers."""

import hashlib

import pandas as pd

from checklist_dwc.validation import StructuralError, check_unique


def create_taxon_id(species_name: str, namespace: str) -> str:
    """Generate DwC taxonID: ``{namespace}:taxon:{md5(species_name)}``."""
    digest = hashlib.md5(species_name.encode('utf-8')).hexdigest()
    return f"{namespace}:taxon:{digest}"


def assign_taxon_ids(records: pd.DataFrame, namespace: str,
                     name_column: str = 'species') -> pd.Series:
    """
    Compute the taxonID of every record.

    The name is hashed as read (not trimmed). Blank names and duplicate
    identifiers are structural errors.
    """
    names = records[name_column]
    blank = names.isna() | (names.astype(str).str.strip() == '')
    if blank.any():
        rows = [int(i) for i in records.index[blank]]
        raise StructuralError(f"Blank species name in row(s) {rows}")

    taxon_ids = names.astype(str).apply(lambda name: create_taxon_id(name, namespace))
    check_unique(names, 'species names')
    check_unique(taxon_ids, 'taxonIDs')
    return taxon_ids
