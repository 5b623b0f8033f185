"""
Darwin Core table builders.

Each builder projects the enriched records (source columns plus
``taxon_id`` and ``full_reference``) onto one output class of the mapping
schema. Builders only read the records, so they can run in any order.
"""

import re
from datetime import date
from typing import Iterable

import pandas as pd

from checklist_dwc.mapping import MappingEngine
from checklist_dwc.reshape import split_multivalue
from checklist_dwc.validation import StructuralError, check_unique
from checklist_dwc.vocabularies import VocabularyMapper

YEAR = re.compile(r"^\d{4}$")


def parse_event_date(raw, reference_year: int, run_year: int,
                     qualifiers: Iterable[str] = ("< ", "<", "before "),
                     separator: str = "-") -> str:
    """
    Turn a first-occurrence expression into a ``start/end`` interval.

    Qualifiers ("< 2005", "before 2005") are dropped. Without an end year
    the interval ends at ``reference_year``, unless the start lies after
    it, in which case it ends at ``run_year``.

        >>> parse_event_date("1998-2002", 2016, 2024)
        '1998/2002'
        >>> parse_event_date("2020", 2016, 2024)
        '2020/2024'
    """
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    if raw is None or pd.isna(raw):
        raise StructuralError("Missing date expression")

    text = str(raw)
    for qualifier in qualifiers:
        text = text.replace(qualifier, "")

    parts = [part.strip() for part in text.strip().split(separator)]
    if len(parts) > 2 or not all(YEAR.match(part) for part in parts):
        raise StructuralError(f"Malformed date expression {raw!r}")

    start = parts[0]
    if len(parts) == 2:
        end = parts[1]
    elif int(start) > reference_year:
        end = str(run_year)
    else:
        end = str(reference_year)
    return f"{start}/{end}"


class DwCTransformer:
    """Transform enriched checklist records to Darwin Core tables."""

    def __init__(self, mapping_engine: MappingEngine, vocabularies: VocabularyMapper = None,
                 run_year: int = None):
        """
        Args:
            mapping_engine: MappingEngine holding the output classes and settings
            vocabularies: Lookup tables, built from the mapping schema by default
            run_year: Year used as open interval end for recent records
        """
        self.mapping_engine = mapping_engine
        self.vocabularies = vocabularies or VocabularyMapper.from_engine(mapping_engine)
        self.run_year = run_year or date.today().year

    def _finalize(self, df: pd.DataFrame, class_name: str) -> pd.DataFrame:
        """Fix the column order and sort by taxonID (stable)."""
        df = df.reindex(columns=self.mapping_engine.columns(class_name))
        df = df.sort_values('taxonID', kind='mergesort')
        return df.reset_index(drop=True)

    def transform_to_taxon(self, records: pd.DataFrame) -> pd.DataFrame:
        """Taxon core, one row per record."""
        taxon = self.mapping_engine.transform_dataframe(records, 'Taxon')
        taxon['taxonID'] = records['taxon_id']
        taxon['scientificName'] = records['species'].astype(str).str.strip()
        taxon['phylum'] = records['phylum'].apply(self.vocabularies.phylum)
        taxon['order'] = records['order'].apply(self.vocabularies.order)
        taxon['taxonRank'] = taxon['scientificName'].apply(self.vocabularies.taxon_rank)

        check_unique(taxon['scientificName'], 'scientificName')
        return self._finalize(taxon, 'Taxon')

    def transform_to_distribution(self, records: pd.DataFrame) -> pd.DataFrame:
        """Distribution extension, one row per record."""
        engine = self.mapping_engine
        reference_year = int(engine.setting('reference_year'))
        qualifiers = engine.setting('date_qualifiers', ["< ", "<", "before "])
        separator = engine.setting('date_range_separator', '-')

        event_dates = []
        for species, raw in zip(records['species'], records['first_occurrence_in_flanders']):
            try:
                event_dates.append(
                    parse_event_date(raw, reference_year, self.run_year, qualifiers, separator)
                )
            except StructuralError as e:
                raise StructuralError(f"{species}: {e}") from e

        distribution = engine.transform_dataframe(records, 'Distribution')
        distribution['taxonID'] = records['taxon_id']
        distribution['eventDate'] = event_dates
        distribution['source'] = records['full_reference']
        return self._finalize(distribution, 'Distribution')

    def transform_to_species_profile(self, records: pd.DataFrame) -> pd.DataFrame:
        """Species profile extension, habitat flags as TRUE/FALSE strings."""
        flags = records['salinity_zone'].apply(self.vocabularies.salinity_habitat)

        profile = self.mapping_engine.transform_dataframe(records, 'SpeciesProfile')
        profile['taxonID'] = records['taxon_id']
        for position, column in enumerate(['isMarine', 'isFreshwater', 'isTerrestrial']):
            profile[column] = flags.apply(lambda f: 'TRUE' if f[position] else 'FALSE')
        return self._finalize(profile, 'SpeciesProfile')

    def transform_to_description(self, records: pd.DataFrame) -> pd.DataFrame:
        """
        Description extension, several rows per record.

        Native range rows, then pathway rows, then one invasion stage row
        per record, each group ordered by taxonID. The reference and
        language are attached afterwards.
        """
        engine = self.mapping_engine

        native_range = split_multivalue(
            records,
            engine.setting('native_range_column', 'origin'),
            engine.setting('native_range_delimiter', ', '),
            mapper=self.vocabularies.native_range,
        )
        native_range['type'] = 'native range'

        pathway = split_multivalue(
            records,
            engine.setting('pathway_column', 'pathway_mapping'),
            engine.setting('pathway_delimiter', ' | '),
            mapper=self.vocabularies.pathway,
        )
        pathway['type'] = 'pathway'

        invasion_stage = pd.DataFrame({
            'taxon_id': records['taxon_id'].values,
            'value': engine.setting('invasion_stage', 'established'),
        })
        invasion_stage['type'] = 'invasion stage'

        groups = [
            group.sort_values('taxon_id', kind='mergesort')
            for group in (native_range, pathway, invasion_stage)
        ]
        descriptors = pd.concat(groups, ignore_index=True)
        descriptors = descriptors.merge(
            records[['taxon_id', 'full_reference']], on='taxon_id', how='left'
        )

        description = pd.DataFrame({
            'taxonID': descriptors['taxon_id'],
            'description': descriptors['value'],
            'type': descriptors['type'],
            'source': descriptors['full_reference'],
        })
        for column, value in engine.constants('Description').items():
            description[column] = value
        return self._finalize(description, 'Description')
