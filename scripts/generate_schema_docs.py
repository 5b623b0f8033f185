#!/usr/bin/env python3
"""
Generate readable schema documentation from the LinkML YAML files.
Creates slot-focused docs with clean tables for the checklist source schema
and its Darwin Core mappings.
"""
import yaml
from pathlib import Path
from typing import Dict, List
from collections import defaultdict

# Get the repository root
REPO_ROOT = Path(__file__).parent.parent
SCHEMA_DIR = REPO_ROOT / "checklist_dwc" / "models" / "datasets" / "alien_macroinvertebrates"
DOCS_DIR = REPO_ROOT / "docs" / "schemas"

# Schema configurations
SCHEMAS = {
    'checklist-schema.yaml': {
        'output': 'source-data.md',
        'type': 'source'
    },
    'checklist-to-dwc-mappings.yaml': {
        'output': 'dwc-mappings.md',
        'type': 'mappings'
    },
}


class SchemaDocGenerator:
    """Generate readable documentation from LinkML schemas."""

    def __init__(self, schema_path: Path):
        self.schema_path = Path(schema_path)
        with open(self.schema_path, 'r', encoding='utf-8') as f:
            self.schema = yaml.safe_load(f)

        self.classes = self.schema.get('classes', {})
        self.slots = self.schema.get('slots', {})
        self.enums = self.schema.get('enums', {})
        self.settings = self.schema.get('annotations', {})
        self.title = self.schema.get('title', '')
        self.description = self.schema.get('description', '')

    def _schema_file(self) -> str:
        try:
            return str(self.schema_path.resolve().relative_to(REPO_ROOT.resolve()))
        except ValueError:
            return self.schema_path.name

    def _header(self) -> str:
        return f"""# {self.title}

{self.description}

**Schema file**: `{self._schema_file()}`

---

"""

    def generate_source_schema_doc(self) -> str:
        """Generate documentation for the source data schema."""

        doc = self._header() + "## Data Fields (Slots)\n\n"

        for class_name, slots_list in self._group_slots_by_class().items():
            if not slots_list:
                continue

            class_desc = self.classes.get(class_name, {}).get('description', '')

            doc += f"### {class_name} Fields\n\n"
            if class_desc:
                doc += f"{class_desc}\n\n"

            doc += "| Field | Type | Required | Description | Spreadsheet Header |\n"
            doc += "|-------|------|----------|-------------|--------------------|\n"

            for slot_name in slots_list:
                slot_def = self.slots.get(slot_name, {})
                field_type = slot_def.get('range', 'string')
                required = 'yes' if slot_def.get('required', False) else 'no'
                description = slot_def.get('description', '').replace('\n', ' ')

                annotations = slot_def.get('annotations', {})
                header = annotations.get('source_header', slot_name) if isinstance(annotations, dict) else slot_name

                doc += f"| **{slot_name}** | {field_type} | {required} | {description} | `{header}` |\n"

            doc += "\n"

        if self.enums:
            doc += "---\n\n## Enumerations\n\n"
            for enum_name, enum_def in self.enums.items():
                doc += f"### {enum_name}\n\n"
                if enum_def.get('description'):
                    doc += f"{enum_def['description']}\n\n"

                doc += "| Code | Description |\n"
                doc += "|------|-------------|\n"

                for value_name, value_def in (enum_def.get('permissible_values') or {}).items():
                    value_desc = value_def.get('description', '') if isinstance(value_def, dict) else ''
                    doc += f"| **{value_name}** | {value_desc} |\n"

                doc += "\n"

        return doc

    def generate_mappings_doc(self) -> str:
        """Generate documentation for the Darwin Core mappings."""

        doc = self._header() + """## Mapping Overview

```mermaid
flowchart LR
    A[Checklist Fields] -->|exact_mappings| B[Darwin Core Terms]
    A -->|related_mappings| C[Derivation / Vocabulary]
    C --> B
    D[ifabsent] -->|constant| B
```

**Mapping types**:

- **exact_mappings**: 1:1 field copies
- **related_mappings**: derived values (identifiers, vocabularies, dates, splits)
- **ifabsent**: constant values

---

"""

        for class_name, slots_list in self._group_slots_by_class().items():
            if not slots_list:
                continue

            class_def = self.classes.get(class_name, {})
            annotations = class_def.get('annotations', {})

            doc += f"## {class_name} (`{annotations.get('filename', '')}`)\n\n"
            if class_def.get('description'):
                doc += f"{class_def['description']}\n\n"

            doc += "| Target Term | Source | Transformation |\n"
            doc += "|-------------|--------|----------------|\n"

            for slot_name in slots_list:
                slot_def = self.slots.get(slot_name, {})
                ifabsent = slot_def.get('ifabsent')
                exact_mappings = slot_def.get('exact_mappings', [])
                related_mappings = slot_def.get('related_mappings', [])
                comments = slot_def.get('comments', [])

                if ifabsent:
                    source_str = '-'
                    transform_note = f"Constant `{ifabsent[len('string('):-1] if ifabsent.startswith('string(') else ifabsent}`"
                elif exact_mappings:
                    source_str = ', '.join(f"`{self._extract_field_name(m)}`" for m in exact_mappings)
                    transform_note = 'Direct copy'
                else:
                    sources = [self._extract_field_name(m) for m in related_mappings]
                    source_str = ', '.join(f"`{s}`" for s in sources) if sources else '-'
                    transform_note = comments[0] if comments else 'Derived'

                doc += f"| **{slot_name}** | {source_str} | {transform_note} |\n"

            doc += "\n---\n\n"

        if self.settings:
            doc += "## Dataset Settings\n\n"
            doc += "| Setting | Value |\n"
            doc += "|---------|-------|\n"
            for key, value in self.settings.items():
                if isinstance(value, list):
                    value = ', '.join(f"`{v}`" for v in value)
                else:
                    value = f"`{value}`"
                doc += f"| {key} | {value} |\n"
            doc += "\n"

        if self.enums:
            doc += "## Vocabularies\n\n"
            for enum_name, enum_def in self.enums.items():
                doc += f"### {enum_name}\n\n"
                if enum_def.get('description'):
                    doc += f"{enum_def['description']}\n\n"

                doc += "| Source Value | Mapped Value |\n"
                doc += "|--------------|--------------|\n"
                for value_name, value_def in (enum_def.get('permissible_values') or {}).items():
                    value_def = value_def or {}
                    if 'title' in value_def:
                        mapped = value_def['title']
                    else:
                        mapped = ', '.join(f"{k}={v}" for k, v in value_def.get('annotations', {}).items())
                    doc += f"| `{value_name}` | {mapped} |\n"
                doc += "\n"

        return doc

    def _group_slots_by_class(self) -> Dict[str, List[str]]:
        """Group slots by their parent class."""
        class_slots = defaultdict(list)

        for class_name, class_def in self.classes.items():
            class_slots[class_name] = class_def.get('slots', [])

        return dict(class_slots)

    def _extract_field_name(self, mapping: str) -> str:
        """Extract field name from mapping string (e.g., 'checklist:family' -> 'family')."""
        if ':' in mapping:
            return mapping.split(':', 1)[1]
        return mapping


def generate_docs(schema_dir: Path = SCHEMA_DIR, docs_dir: Path = DOCS_DIR) -> List[Path]:
    """Generate documentation for all schemas."""

    print("Generating schema documentation...")
    print("=" * 60)
    print(f"Schema directory: {schema_dir}")
    print(f"Output directory: {docs_dir}")
    print("=" * 60)

    docs_dir.mkdir(parents=True, exist_ok=True)
    written = []

    for schema_file, config in SCHEMAS.items():
        schema_path = schema_dir / schema_file
        output_path = docs_dir / config['output']

        if not schema_path.exists():
            print(f"\n⚠️  Schema not found: {schema_path}")
            continue

        print(f"\n📄 Processing {schema_file}...")
        print(f"   Output: {output_path}")

        generator = SchemaDocGenerator(schema_path)

        if config['type'] == 'source':
            content = generator.generate_source_schema_doc()
        else:
            content = generator.generate_mappings_doc()

        output_path.write_text(content, encoding='utf-8')
        written.append(output_path)

        print(f"   ✅ Generated successfully ({len(content):,} characters)")

    print("\n" + "=" * 60)
    print("✅ Schema documentation generation complete!")
    print(f"📁 Documentation written to: {docs_dir}")
    return written


if __name__ == '__main__':
    generate_docs()
