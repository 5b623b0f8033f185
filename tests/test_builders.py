import pandas as pd
import pytest

from checklist_dwc.builders import DwCTransformer, parse_event_date
from checklist_dwc.identifiers import create_taxon_id
from checklist_dwc.transform import enrich_records
from checklist_dwc.validation import StructuralError

NAMESPACE = "alien-macroinvertebrates-checklist"


def taxon_id(name):
    return create_taxon_id(name, NAMESPACE)


@pytest.fixture
def records(checklist_df, references_df, engine):
    return enrich_records(checklist_df, references_df, engine)


@pytest.fixture
def transformer(engine):
    return DwCTransformer(engine, run_year=2024)


@pytest.mark.parametrize("raw, expected", [
    ("1990", "1990/2016"),
    ("< 2005", "2005/2016"),
    ("<2005", "2005/2016"),
    ("before 1911", "1911/2016"),
    ("1998-2002", "1998/2002"),
    ("1998 - 2002", "1998/2002"),
    ("2016", "2016/2016"),
    ("2017", "2017/2024"),
    ("2020", "2020/2024"),
    (1990, "1990/2016"),
    (1990.0, "1990/2016"),
])
def test_parse_event_date(raw, expected):
    assert parse_event_date(raw, reference_year=2016, run_year=2024) == expected


@pytest.mark.parametrize("raw", ["199x", "1990-1995-2000", "", None, "ca. 1990", "90"])
def test_parse_event_date_rejects_malformed(raw):
    with pytest.raises(StructuralError):
        parse_event_date(raw, reference_year=2016, run_year=2024)


def test_taxon_table(records, transformer, engine):
    taxon = transformer.transform_to_taxon(records)

    assert list(taxon.columns) == engine.columns("Taxon")
    assert len(taxon) == len(records)
    assert list(taxon["taxonID"]) == sorted(taxon["taxonID"])
    assert taxon["scientificName"].is_unique

    row = taxon.set_index("scientificName").loc["Girardia tigrina"]
    assert row["taxonID"] == taxon_id("Girardia tigrina")
    assert row["phylum"] == "Platyhelminthes"
    assert row["order"] == "Tricladida"
    assert row["family"] == "Dugesiidae"
    assert row["kingdom"] == "Animalia"
    assert row["taxonRank"] == "species"
    assert row["license"] == "http://creativecommons.org/publicdomain/zero/1.0/"

    by_name = taxon.set_index("scientificName")
    assert by_name.loc["Dreissena rostriformis bugensis", "taxonRank"] == "subspecies"
    assert by_name.loc["Dikerogammarus villosus", "order"] == "Amphipoda"


def test_taxon_table_rejects_duplicate_scientific_names(records, transformer):
    extra = records.iloc[[0]].copy()
    extra["species"] = "Dikerogammarus villosus "
    extra["taxon_id"] = taxon_id("Dikerogammarus villosus ")
    with pytest.raises(StructuralError, match="scientificName"):
        transformer.transform_to_taxon(pd.concat([records, extra], ignore_index=True))


def test_distribution_table(records, transformer, engine):
    distribution = transformer.transform_to_distribution(records).set_index("taxonID")

    assert list(distribution.reset_index().columns) == engine.columns("Distribution")
    assert distribution.loc[taxon_id("Dikerogammarus villosus"), "eventDate"] == "1998/2002"
    assert distribution.loc[taxon_id("Eriocheir sinensis"), "eventDate"] == "1933/2016"
    assert distribution.loc[taxon_id("Dreissena rostriformis bugensis"), "eventDate"] == "2020/2024"
    assert distribution.loc[taxon_id("Crepidula fornicata"), "eventDate"] == "1911/2016"

    row = distribution.loc[taxon_id("Girardia tigrina")]
    assert row["locationID"] == "ISO_3166-2:BE-VLG"
    assert row["countryCode"] == "BE"
    assert row["establishmentMeans"] == "introduced"
    assert row["source"].startswith("Van Haaren T")
    assert pd.isna(distribution.loc[taxon_id("Dreissena rostriformis bugensis"), "source"])


def test_distribution_malformed_date_names_species(records, transformer):
    records.loc[0, "first_occurrence_in_flanders"] = "unknown"
    with pytest.raises(StructuralError, match="Dikerogammarus villosus"):
        transformer.transform_to_distribution(records)


def test_species_profile_table(records, transformer):
    profile = transformer.transform_to_species_profile(records).set_index("taxonID")

    assert list(profile.loc[taxon_id("Eriocheir sinensis")]) == ["TRUE", "TRUE", "FALSE"]
    assert list(profile.loc[taxon_id("Crepidula fornicata")]) == ["TRUE", "FALSE", "FALSE"]
    assert list(profile.loc[taxon_id("Girardia tigrina")]) == ["FALSE", "TRUE", "FALSE"]
    assert list(profile.loc[taxon_id("Dikerogammarus villosus")]) == ["FALSE", "TRUE", "FALSE"]
    assert set(profile["isTerrestrial"]) == {"FALSE"}


def test_description_table(records, transformer, engine):
    description = transformer.transform_to_description(records)

    assert list(description.columns) == engine.columns("Description")
    assert len(description) == 6 + 7 + 5
    assert list(description["taxonID"]) == sorted(description["taxonID"])
    assert set(description["language"]) == {"en"}
    assert (description["type"] == "invasion stage").sum() == len(records)


def test_description_rows_for_one_taxon(records, transformer):
    description = transformer.transform_to_description(records)
    girardia = description[description["taxonID"] == taxon_id("Girardia tigrina")]

    assert list(girardia["type"]) == ["native range", "native range", "pathway", "invasion stage"]
    assert list(girardia["description"]) == [
        "South America", "West Africa", "cbd_2014_pathway:escape_pet", "established",
    ]
    assert set(girardia["source"]) == {"Van Haaren T, Soors J (2009) Sinelobus stanfordi, a new tanaid."}


def test_description_pathways_split_on_pipe(records, transformer):
    description = transformer.transform_to_description(records)
    rows = description[
        (description["taxonID"] == taxon_id("Dikerogammarus villosus"))
        & (description["type"] == "pathway")
    ]
    assert list(rows["description"]) == [
        "cbd_2014_pathway:stowaway_other", "cbd_2014_pathway:corridor_water",
    ]
