from generate_schema_docs import SchemaDocGenerator, SCHEMA_DIR, generate_docs


def test_generate_docs_writes_both_schemas(tmp_path):
    written = generate_docs(docs_dir=tmp_path)

    assert sorted(path.name for path in written) == ["dwc-mappings.md", "source-data.md"]


def test_mappings_doc_lists_terms_constants_and_vocabularies():
    doc = SchemaDocGenerator(SCHEMA_DIR / "checklist-to-dwc-mappings.yaml").generate_mappings_doc()

    assert "## Taxon (`taxon.csv`)" in doc
    assert "| **family** | `family` | Direct copy |" in doc
    assert "| **kingdom** | - | Constant `Animalia` |" in doc
    assert "| `aquarium trade` | cbd_2014_pathway:escape_pet |" in doc
    assert "| reference_year | `2016` |" in doc


def test_source_doc_lists_spreadsheet_headers():
    doc = SchemaDocGenerator(SCHEMA_DIR / "checklist-schema.yaml").generate_source_schema_doc()

    assert "`First occurrence in Flanders`" in doc
    assert "### SalinityZone" in doc
