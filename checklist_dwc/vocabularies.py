"""
Controlled-vocabulary lookups.

Every lookup is total: unmapped values pass through unchanged (or fall to
the documented default) and never raise. Values that stay outside the
target vocabulary are reported with DataQualityWarning.
"""

from typing import Dict, Iterable, Optional, Tuple

import pandas as pd

from checklist_dwc.validation import warn_data_quality


def _clean(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    return str(value).strip()


def recode(value, lookup: Dict[str, str]) -> Optional[str]:
    """Strip ``value`` and replace it by its mapped value, if it has one."""
    cleaned = _clean(value)
    if cleaned is None:
        return None
    return lookup.get(cleaned, cleaned)


class VocabularyMapper:
    """Lookup tables of one dataset, usually built from its mapping schema."""

    def __init__(self, phylum_corrections: Dict[str, str] = None,
                 order_corrections: Dict[str, str] = None,
                 native_ranges: Dict[str, str] = None,
                 pathways: Dict[str, str] = None,
                 habitat_flags: Dict[str, Dict[str, bool]] = None,
                 subspecies_names: Iterable[str] = (),
                 pathway_prefix: str = 'cbd_2014_pathway:'):
        self.phylum_corrections = dict(phylum_corrections or {})
        self.order_corrections = dict(order_corrections or {})
        self.native_ranges = dict(native_ranges or {})
        self.pathways = dict(pathways or {})
        self.habitat_flags = dict(habitat_flags or {})
        self.subspecies_names = {name.strip() for name in subspecies_names}
        self.pathway_prefix = pathway_prefix

    @classmethod
    def from_engine(cls, engine) -> 'VocabularyMapper':
        return cls(
            phylum_corrections=engine.vocabulary('PhylumCorrection'),
            order_corrections=engine.vocabulary('OrderCorrection'),
            native_ranges=engine.vocabulary('NativeRange'),
            pathways=engine.vocabulary('Pathway'),
            habitat_flags=engine.vocabulary_annotations('SalinityZoneHabitat'),
            subspecies_names=engine.setting('subspecies_names', []),
            pathway_prefix=engine.setting('pathway_prefix', 'cbd_2014_pathway:'),
        )

    def phylum(self, value) -> Optional[str]:
        return recode(value, self.phylum_corrections)

    def order(self, value) -> Optional[str]:
        return recode(value, self.order_corrections)

    def taxon_rank(self, scientific_name) -> str:
        """``subspecies`` for the configured exceptions, ``species`` otherwise."""
        if _clean(scientific_name) in self.subspecies_names:
            return 'subspecies'
        return 'species'

    def native_range(self, value) -> Optional[str]:
        return recode(value, self.native_ranges)

    def pathway(self, value) -> Optional[str]:
        """
        CBD pathway code of a pathway description.

        Unmapped descriptions pass through and are flagged, since they lack
        the vocabulary prefix.
        """
        mapped = recode(value, self.pathways)
        if mapped is not None and not mapped.startswith(self.pathway_prefix):
            warn_data_quality(
                f"Pathway '{mapped}' is not mapped to a '{self.pathway_prefix}' code"
            )
        return mapped

    def salinity_habitat(self, zone) -> Tuple[bool, bool, bool]:
        """
        (isMarine, isFreshwater, isTerrestrial) of a salinity zone code.

        Unknown zones give all False. isTerrestrial is always False: the
        checklist only holds aquatic taxa.
        """
        code = _clean(zone)
        flags = self.habitat_flags.get(code) if code is not None else None
        if flags is None:
            warn_data_quality(f"Unknown salinity zone {zone!r}, habitat flags set to FALSE")
            return False, False, False
        return bool(flags.get('isMarine', False)), bool(flags.get('isFreshwater', False)), False
