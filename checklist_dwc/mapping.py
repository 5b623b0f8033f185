"""
Generic mapping engine driven by LinkML mapping schemas.

The mapping schema is the injected configuration of the pipeline: output
classes and their column order, constant values (``ifabsent``), 1:1 field
copies (``exact_mappings``), term URIs (``slot_uri``), controlled
vocabularies (``enums``) and dataset settings (top-level ``annotations``).
"""

from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import yaml


# Schemas ship as package data of checklist_dwc
DATASET_DIR = Path(str(resources.files("checklist_dwc") / "models" / "datasets" / "alien_macroinvertebrates"))

# LinkML mapping schema paths
MAPPING_SCHEMA = DATASET_DIR / "checklist-to-dwc-mappings.yaml"
SOURCE_SCHEMA = DATASET_DIR / "checklist-schema.yaml"


class MappingEngine:
    """
    Reads a LinkML mapping schema and applies it to DataFrames.

    Slots with exactly one ``exact_mappings`` entry are copied from the
    source column, slots with an ``ifabsent`` value are filled with that
    constant; everything else is derived by the table builders.
    """

    def __init__(self, mapping_schema_path=MAPPING_SCHEMA):
        """
        Initialize the mapping engine with a LinkML mapping schema.

        Args:
            mapping_schema_path: Path to the LinkML mapping schema YAML file
        """
        self.schema_path = Path(mapping_schema_path)
        self.schema = self._load_schema()
        self.classes = self.schema.get('classes', {})
        self.slots = self.schema.get('slots', {})
        self.enums = self.schema.get('enums', {})
        self.prefixes = self.schema.get('prefixes', {})
        self.settings = self.schema.get('annotations', {})

    def _load_schema(self) -> Dict:
        """Load and parse the LinkML schema YAML file."""
        with open(self.schema_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)

    def _extract_source_field(self, mapping: str) -> str:
        """
        Extract the source field name from a mapping string.

        Args:
            mapping: String like "checklist:family"

        Returns:
            The field name after the colon (e.g., "family")
        """
        if ':' in mapping:
            return mapping.split(':', 1)[1]
        return mapping

    @staticmethod
    def _parse_ifabsent(value: Any) -> Any:
        """Turn a LinkML ``ifabsent`` expression like ``string(en)`` into its value."""
        if isinstance(value, str) and value.startswith('string(') and value.endswith(')'):
            return value[len('string('):-1]
        return value

    def _get_class(self, class_name: str) -> Dict:
        if class_name not in self.classes:
            raise ValueError(f"Class '{class_name}' not found in schema")
        return self.classes[class_name]

    def _get_slot_mappings(self, class_name: str) -> Dict[str, Dict]:
        """
        Get all slot mappings for a given class.

        Args:
            class_name: Name of the target class (e.g., "Taxon", "Distribution")

        Returns:
            Dictionary mapping target field names to their mapping specifications
        """
        class_def = self._get_class(class_name)
        slot_names = class_def.get('slots', [])

        mappings = {}
        for slot_name in slot_names:
            slot_def = self.slots.get(slot_name) or {}
            mappings[slot_name] = {
                'exact_mappings': slot_def.get('exact_mappings', []),
                'range': slot_def.get('range', 'string'),
                'ifabsent': self._parse_ifabsent(slot_def.get('ifabsent')),
            }

        return mappings

    def _convert_type(self, value: Any, target_range: str) -> Any:
        """
        Convert a value to the target type specified in the LinkML range.

        Only ``string`` is converted; other ranges (enums) keep the value.
        """
        if pd.isna(value):
            return None
        if target_range == 'string':
            return str(value)
        return value

    def columns(self, class_name: str) -> List[str]:
        """Output column order of a target class."""
        return list(self._get_class(class_name).get('slots', []))

    def class_annotation(self, class_name: str, key: str) -> Optional[str]:
        return self._get_class(class_name).get('annotations', {}).get(key)

    def filename(self, class_name: str) -> str:
        return self.class_annotation(class_name, 'filename') or f"{class_name.lower()}.csv"

    def constants(self, class_name: str) -> Dict[str, Any]:
        """Constant values (``ifabsent``) of a target class, keyed by slot name."""
        return {
            slot_name: mapping_spec['ifabsent']
            for slot_name, mapping_spec in self._get_slot_mappings(class_name).items()
            if mapping_spec['ifabsent'] is not None
        }

    def term_uri(self, slot_name: str) -> str:
        """Expand the slot's ``slot_uri`` CURIE to a full term URI."""
        slot_uri = (self.slots.get(slot_name) or {}).get('slot_uri', slot_name)
        prefix, sep, local = slot_uri.partition(':')
        if sep and prefix in self.prefixes:
            return f"{self.prefixes[prefix]}{local}"
        return slot_uri

    def setting(self, key: str, default: Any = None) -> Any:
        """Dataset-level setting from the schema's top-level annotations."""
        return self.settings.get(key, default)

    def vocabulary(self, enum_name: str) -> Dict[str, str]:
        """
        Lookup table of an enum: raw value -> standardized value.

        The standardized value is the permissible value's ``title``;
        values without a title map to themselves.
        """
        if enum_name not in self.enums:
            raise ValueError(f"Enum '{enum_name}' not found in schema")
        values = self.enums[enum_name].get('permissible_values') or {}
        lookup = {}
        for raw, value_def in values.items():
            value_def = value_def or {}
            lookup[str(raw)] = value_def.get('title', str(raw))
        return lookup

    def vocabulary_annotations(self, enum_name: str) -> Dict[str, Dict[str, Any]]:
        """Per permissible value annotations of an enum (e.g. habitat flags)."""
        if enum_name not in self.enums:
            raise ValueError(f"Enum '{enum_name}' not found in schema")
        values = self.enums[enum_name].get('permissible_values') or {}
        return {
            str(raw): dict((value_def or {}).get('annotations', {}))
            for raw, value_def in values.items()
        }

    def transform_dataframe(self, source_df: pd.DataFrame, target_class: str) -> pd.DataFrame:
        """
        Copy the 1:1 mapped fields and fill the constants of a target class.

        Only slots with exactly one exact_mapping are copied; derived slots
        are left to the caller.

        Args:
            source_df: Input DataFrame with source field names
            target_class: Name of target class in the mapping schema

        Returns:
            DataFrame (same index as source_df) with target field names
        """
        mappings = self._get_slot_mappings(target_class)
        result = pd.DataFrame(index=source_df.index)

        for target_field, mapping_spec in mappings.items():
            exact_mappings = mapping_spec['exact_mappings']

            if mapping_spec['ifabsent'] is not None:
                result[target_field] = mapping_spec['ifabsent']
                continue

            if len(exact_mappings) != 1:
                continue

            source_field = self._extract_source_field(exact_mappings[0])

            # Source columns are checked against the source schema on load
            if source_field not in source_df.columns:
                continue

            target_range = mapping_spec['range']
            result[target_field] = source_df[source_field].apply(
                lambda x: self._convert_type(x, target_range)
            )

        return result


def load_source_schema(schema_path=SOURCE_SCHEMA) -> Dict:
    """Load the source (checklist) LinkML schema."""
    with open(schema_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f)


def required_columns(source_schema: Dict, class_name: str) -> List[str]:
    """Names of the required slots of a source class."""
    classes = source_schema.get('classes', {})
    if class_name not in classes:
        raise ValueError(f"Class '{class_name}' not found in schema")
    slots = source_schema.get('slots', {})
    return [
        slot_name for slot_name in classes[class_name].get('slots', [])
        if (slots.get(slot_name) or {}).get('required', False)
    ]
