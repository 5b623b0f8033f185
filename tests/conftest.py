import pandas as pd
import pytest

from checklist_dwc.mapping import MAPPING_SCHEMA, MappingEngine


CHECKLIST_ROWS = [
    {
        "species": "Dikerogammarus villosus",
        "phylum": "Arthropoda",
        "order": "Amphipode ",
        "family": "Gammaridae",
        "reference": "Messiaen et al.2010",
        "first_occurrence_in_flanders": "1998-2002",
        "origin": "Ponto-Caspian",
        "pathway": "shipping",
        "pathway_mapping": "shipping | canals",
        "salinity_zone": "F/B",
    },
    {
        "species": "Eriocheir sinensis",
        "phylum": "Arthropoda",
        "order": "Decapoda",
        "family": "Varunidae",
        "reference": "this study",
        "first_occurrence_in_flanders": "< 1933",
        "origin": "East-Asia",
        "pathway": "ballast water",
        "pathway_mapping": "ballast water",
        "salinity_zone": "B",
    },
    {
        "species": "Dreissena rostriformis bugensis",
        "phylum": "Mollusca",
        "order": "Veneroidea",
        "family": "Dreissenidae",
        "reference": "Unpublished collection data",
        "first_occurrence_in_flanders": "2020",
        "origin": "Ponto-Caspian",
        "pathway": "shipping",
        "pathway_mapping": "hull fouling",
        "salinity_zone": "F",
    },
    {
        "species": "Crepidula fornicata",
        "phylum": "Mollusca",
        "order": "Littorinimorpha",
        "family": "Calyptraeidae",
        "reference": "Adam & Leloup 1934 | Kerckhof et al. 2007",
        "first_occurrence_in_flanders": "before 1911",
        "origin": "North-America",
        "pathway": "oyster imports",
        "pathway_mapping": "shellfish transfer | aquaculture",
        "salinity_zone": "M",
    },
    {
        "species": "Girardia tigrina",
        "phylum": "Plathelminthes",
        "order": "Tricladia",
        "family": "Dugesiidae",
        "reference": "Van haaren & Soors 2009",
        "first_occurrence_in_flanders": "1990",
        "origin": "South-America, West-Africa",
        "pathway": "aquarium",
        "pathway_mapping": "aquarium trade",
        "salinity_zone": "F",
    },
]

REFERENCE_ROWS = [
    {"citation": "Messiaen et al. 2010", "full_reference": "Messiaen M, Lock K, Gabriels W, et al. (2010) Alien macrobenthic invertebrates in Flanders."},
    {"citation": "Boets et al. 2016", "full_reference": "Boets P, Brosens D, Lock K, et al. (2016) Alien macroinvertebrates in Flanders (Belgium)."},
    {"citation": "Adam & Leloup 1934 | Kerckhof et al. 2007", "full_reference": "Adam W, Leloup E (1934) | Kerckhof F, Haelters J, Gollasch S (2007)"},
    {"citation": "Van Haaren & Soors 2009", "full_reference": "Van Haaren T, Soors J (2009) Sinelobus stanfordi, a new tanaid."},
]


@pytest.fixture
def engine():
    return MappingEngine(MAPPING_SCHEMA)


@pytest.fixture
def checklist_df():
    return pd.DataFrame(CHECKLIST_ROWS)


@pytest.fixture
def references_df():
    return pd.DataFrame(REFERENCE_ROWS)
