"""
Resolve short citations to full bibliographic references.

Citations are normalized first (whitespace, typo fixes, unified renderings,
"this study" markers) and then matched exactly against the reference
table. Compound citations such as ``"A | B"`` are looked up as a single
key: the reference table has to contain the compound string itself.
"""

import re
from typing import Dict, Iterable, Optional

import pandas as pd

from checklist_dwc.validation import InputShapeError, check_columns, warn_data_quality

WHITESPACE = re.compile(r"\s+")


class ReferenceResolver:
    """Normalize citations and join them to the reference table."""

    def __init__(self, references_df: pd.DataFrame, corrections: Dict[str, str] = None,
                 this_study_markers: Iterable[str] = (), dataset_citation: str = None,
                 key_column: str = 'citation', value_column: str = 'full_reference'):
        check_columns(references_df, [key_column, value_column], 'Reference table')
        self.corrections = dict(corrections or {})
        self.this_study_markers = set(this_study_markers)
        self.dataset_citation = dataset_citation
        self.lookup = self._build_lookup(references_df, key_column, value_column)

    @staticmethod
    def _collapse(text: str) -> str:
        return WHITESPACE.sub(' ', text).strip()

    def _build_lookup(self, references_df, key_column, value_column) -> Dict[str, Optional[str]]:
        lookup = {}
        duplicated = set()
        for key, value in zip(references_df[key_column], references_df[value_column]):
            if pd.isna(key):
                continue
            key = self._collapse(str(key))
            if key in lookup:
                duplicated.add(key)
            lookup[key] = None if pd.isna(value) else str(value)
        if duplicated:
            raise InputShapeError(
                f"Reference table has duplicate citation keys: {sorted(duplicated)}"
            )
        return lookup

    def normalize(self, citation) -> Optional[str]:
        """Apply whitespace fixes, corrections and the "this study" remap."""
        if citation is None or pd.isna(citation):
            return None
        normalized = self._collapse(str(citation))
        if not normalized:
            return None
        normalized = self.corrections.get(normalized, normalized)
        if normalized in self.this_study_markers and self.dataset_citation:
            normalized = self.dataset_citation
        return normalized

    def resolve(self, citation) -> Optional[str]:
        """
        Full reference of a raw citation, or None.

        An unmatched citation is a data-quality gap, not an error: some
        sources (e.g. unpublished collection data) have no formal reference.
        """
        normalized = self.normalize(citation)
        if normalized is None:
            return None
        if normalized not in self.lookup:
            warn_data_quality(f"No full reference found for citation '{normalized}'")
            return None
        return self.lookup[normalized]

    def resolve_column(self, citations: pd.Series) -> pd.Series:
        return citations.apply(self.resolve)

    @classmethod
    def from_engine(cls, references_df: pd.DataFrame, engine) -> 'ReferenceResolver':
        """Build a resolver with the corrections and markers of a mapping schema."""
        return cls(
            references_df,
            corrections=engine.vocabulary('CitationCorrection'),
            this_study_markers=engine.setting('this_study_markers', []),
            dataset_citation=engine.setting('dataset_citation'),
        )
