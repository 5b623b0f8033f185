"""Write the Darwin Core tables, meta.xml and the zipped archive."""

import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Dict

import pandas as pd

from checklist_dwc.mapping import MappingEngine


class DwCArchiveWriter:
    """Write Darwin Core Archive files."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_tables(self, tables: Dict[str, pd.DataFrame]):
        """
        Write every table as comma-delimited UTF-8 with header row.

        Files are staged in a temporary directory and moved into place once
        all of them were written, so a failure leaves no partial output.
        """
        staging = Path(tempfile.mkdtemp(prefix='.staging-', dir=self.output_dir))
        try:
            for filename, df in tables.items():
                df.to_csv(staging / filename, sep=',', index=False, encoding='utf-8',
                          na_rep='', lineterminator='\n')
            for filename, df in tables.items():
                shutil.move(str(staging / filename), str(self.output_dir / filename))
                print(f"  Wrote {filename} ({len(df)} records)")
        finally:
            shutil.rmtree(staging, ignore_errors=True)

    def generate_meta_xml(self, engine: MappingEngine) -> str:
        """meta.xml describing the core and extension files of the mapping schema."""
        core_class = engine.setting('core_class', 'Taxon')
        extension_classes = engine.setting('extension_classes', [])

        xml = """<?xml version="1.0" encoding="UTF-8"?>
<archive xmlns="http://rs.tdwg.org/dwc/text/">"""
        xml += self._file_element(engine, core_class, 'core', 'id')
        for class_name in extension_classes:
            xml += self._file_element(engine, class_name, 'extension', 'coreid')
        xml += "\n</archive>\n"
        return xml

    @staticmethod
    def _file_element(engine: MappingEngine, class_name: str, tag: str, id_tag: str) -> str:
        element = f"""
  <{tag} encoding="UTF-8" fieldsTerminatedBy="," linesTerminatedBy="\\n" fieldsEnclosedBy="&quot;" ignoreHeaderLines="1" rowType="{engine.class_annotation(class_name, 'row_type')}">
    <files>
      <location>{engine.filename(class_name)}</location>
    </files>
    <{id_tag} index="0" />"""
        for index, column in enumerate(engine.columns(class_name)):
            element += f"""
    <field index="{index}" term="{engine.term_uri(column)}"/>"""
        element += f"""
  </{tag}>"""
        return element

    def write_meta_xml(self, engine: MappingEngine):
        meta_path = self.output_dir / "meta.xml"
        with open(meta_path, 'w', encoding='utf-8') as f:
            f.write(self.generate_meta_xml(engine))
        print("  Wrote meta.xml")

    def create_zip_archive(self, filenames, archive_name: str = "dwca.zip") -> Path:
        """Create a zipped Darwin Core Archive next to the output directory."""
        archive_path = self.output_dir.parent / archive_name

        with zipfile.ZipFile(archive_path, 'w', zipfile.ZIP_DEFLATED) as zipf:
            for file in list(filenames) + ['meta.xml']:
                zipf.write(self.output_dir / file, arcname=file)

        print(f"\nCreated Darwin Core Archive: {archive_path}")
        return archive_path
