"""
Load the checklist spreadsheet and the reference table.

Sources may be local paths or http(s) URLs. Every cell is read as text and
headers are normalized to snake_case before the required columns of the
source schema are checked.
"""

import re
from io import BytesIO
from pathlib import Path
from typing import Dict, Union

import pandas as pd
import requests

from checklist_dwc.mapping import load_source_schema, required_columns, SOURCE_SCHEMA
from checklist_dwc.validation import check_columns

NON_WORD = re.compile(r"[^0-9a-z]+")


def normalise_header(header) -> str:
    """``"First occurrence in Flanders"`` -> ``"first_occurrence_in_flanders"``."""
    return NON_WORD.sub('_', str(header).strip().lower()).strip('_')


class ChecklistExtractor:
    """Read checklist and reference tables from disk or over HTTP."""

    def __init__(self, source_schema_path=SOURCE_SCHEMA, timeout: int = 60):
        self.source_schema: Dict = load_source_schema(source_schema_path)
        self.timeout = timeout

    def _open(self, location: Union[str, Path]):
        """Local path, or the downloaded bytes of an http(s) URL."""
        location = str(location)
        if location.startswith(('http://', 'https://')):
            response = requests.get(location, timeout=self.timeout)
            response.raise_for_status()
            return BytesIO(response.content)
        return location

    @staticmethod
    def _suffix(location: Union[str, Path]) -> str:
        path = str(location).split('?', 1)[0]
        return Path(path).suffix.lower()

    def _read_table(self, location, sep: str = None, sheet_name=0) -> pd.DataFrame:
        suffix = self._suffix(location)
        handle = self._open(location)
        # Only empty cells are null, literal "NA" or "None" stay text
        if suffix in ('.xls', '.xlsx'):
            df = pd.read_excel(handle, sheet_name=sheet_name, dtype=str,
                               keep_default_na=False, na_values=[''])
        else:
            if sep is None:
                sep = '\t' if suffix in ('.tsv', '.txt') else ','
            df = pd.read_csv(handle, sep=sep, dtype=str, encoding='utf-8',
                             keep_default_na=False, na_values=[''])

        df.columns = [normalise_header(column) for column in df.columns]
        return df.dropna(how='all').reset_index(drop=True)

    def fetch_checklist(self, location, sheet_name=0) -> pd.DataFrame:
        """Checklist records, one row per species."""
        df = self._read_table(location, sheet_name=sheet_name)
        check_columns(df, required_columns(self.source_schema, 'ChecklistRecord'), 'Checklist')
        return df

    def fetch_references(self, location) -> pd.DataFrame:
        """Tab-delimited reference table (citation, full_reference)."""
        df = self._read_table(location, sep='\t')
        check_columns(df, required_columns(self.source_schema, 'ReferenceEntry'), 'Reference table')
        return df
