"""
Alien macroinvertebrates checklist to Darwin Core Archive - Complete Pipeline
Loads checklist + references → Identifies → Resolves → Transforms → Validates → Writes DwC-A
"""

import argparse
from collections import OrderedDict
from pathlib import Path
from typing import Dict

import pandas as pd

from checklist_dwc.archive import DwCArchiveWriter
from checklist_dwc.builders import DwCTransformer
from checklist_dwc.extract import ChecklistExtractor
from checklist_dwc.identifiers import assign_taxon_ids
from checklist_dwc.mapping import MAPPING_SCHEMA, SOURCE_SCHEMA, MappingEngine, load_source_schema, required_columns
from checklist_dwc.references import ReferenceResolver
from checklist_dwc.validation import check_columns, check_referential_integrity


# ============================================================================
# CONFIGURATION
# ============================================================================

DATA_DIR = Path("data")

CHECKLIST_SOURCE = DATA_DIR / "raw" / "AI_2016_Boets_etal_Supplement.xlsx"
REFERENCES_SOURCE = DATA_DIR / "raw" / "references.tsv"

OUTPUT_DIR = DATA_DIR / "processed"


# ============================================================================
# PIPELINE
# ============================================================================

def enrich_records(checklist_df: pd.DataFrame, references_df: pd.DataFrame,
                   engine: MappingEngine, source_schema: Dict = None) -> pd.DataFrame:
    """Attach taxon_id and full_reference to every checklist record."""
    source_schema = source_schema or load_source_schema(SOURCE_SCHEMA)
    check_columns(checklist_df, required_columns(source_schema, 'ChecklistRecord'), 'Checklist')

    records = checklist_df.reset_index(drop=True).copy()
    records['taxon_id'] = assign_taxon_ids(records, engine.setting('taxon_id_namespace'))

    resolver = ReferenceResolver.from_engine(references_df, engine)
    records['full_reference'] = resolver.resolve_column(records['reference'])
    return records


def run_pipeline(checklist_df: pd.DataFrame, references_df: pd.DataFrame,
                 engine: MappingEngine = None, run_year: int = None,
                 source_schema: Dict = None) -> Dict[str, pd.DataFrame]:
    """
    Transform checklist records into the Darwin Core tables.

    Returns:
        Ordered mapping of output filename to DataFrame, core table first
    """
    engine = engine or MappingEngine(MAPPING_SCHEMA)

    records = enrich_records(checklist_df, references_df, engine, source_schema)
    unresolved = records['full_reference'].isna().sum()
    print(f"  Enriched {len(records)} records ({unresolved} without full reference)")

    transformer = DwCTransformer(engine, run_year=run_year)
    builders = OrderedDict([
        ('Taxon', transformer.transform_to_taxon),
        ('Distribution', transformer.transform_to_distribution),
        ('SpeciesProfile', transformer.transform_to_species_profile),
        ('Description', transformer.transform_to_description),
    ])

    results = OrderedDict()
    for class_name, build in builders.items():
        results[class_name] = build(records)
        print(f"  Created {len(results[class_name])} {class_name} records")

    core_class = engine.setting('core_class', 'Taxon')
    check_referential_integrity(
        results[core_class],
        {name: df for name, df in results.items() if name != core_class},
    )

    return OrderedDict(
        (engine.filename(class_name), df) for class_name, df in results.items()
    )


# ============================================================================
# MAIN PIPELINE
# ============================================================================

def main(argv=None):
    """Execute the complete transformation pipeline."""
    parser = argparse.ArgumentParser(description="Alien macroinvertebrates checklist to Darwin Core Archive")
    parser.add_argument("--checklist", default=str(CHECKLIST_SOURCE), help="Checklist spreadsheet (path or URL)")
    parser.add_argument("--references", default=str(REFERENCES_SOURCE), help="Tab-delimited reference table (path or URL)")
    parser.add_argument("--mapping", default=str(MAPPING_SCHEMA), help="LinkML mapping schema")
    parser.add_argument("--output-dir", default=str(OUTPUT_DIR), help="Directory for the Darwin Core files")
    parser.add_argument("--run-year", type=int, help="Year closing open date intervals after the reference year (default: current year)")
    parser.add_argument("--zip", dest="archive_name", help="Also create a zipped archive with this name")
    args = parser.parse_args(argv)

    print("=" * 80)
    print("ALIEN MACROINVERTEBRATES CHECKLIST TO DARWIN CORE ARCHIVE PIPELINE")
    print("=" * 80)
    print()

    # Step 1: Load sources
    print("Loading sources...")
    extractor = ChecklistExtractor()
    checklist_df = extractor.fetch_checklist(args.checklist)
    print(f"  Got {len(checklist_df)} checklist records")
    references_df = extractor.fetch_references(args.references)
    print(f"  Got {len(references_df)} references")
    print()

    # Step 2: Transform to Darwin Core
    print(f"Loading LinkML mapping schema from {args.mapping}...")
    engine = MappingEngine(args.mapping)
    print("Transforming to Darwin Core...")
    tables = run_pipeline(checklist_df, references_df, engine, run_year=args.run_year)
    print()

    # Step 3: Write Darwin Core Archive
    print("Writing Darwin Core Archive...")
    writer = DwCArchiveWriter(Path(args.output_dir))
    writer.write_tables(tables)
    writer.write_meta_xml(engine)

    if args.archive_name:
        writer.create_zip_archive(tables.keys(), args.archive_name)

    print()
    print("=" * 80)
    print("PIPELINE COMPLETE")
    print("=" * 80)
    return tables


if __name__ == "__main__":
    main()
