"""
Errors, warnings and invariant checks of the checklist pipeline.

Fatal conditions raise a ChecklistError subclass and abort the run before
anything is written. Recoverable data problems are reported with
DataQualityWarning and the value falls back to null or a passthrough.
"""

import warnings
from typing import Dict, Iterable

import pandas as pd


class ChecklistError(ValueError):
    """Base class for conditions that abort a pipeline run."""


class InputShapeError(ChecklistError):
    """Source table lacks an expected column or has an unusable key column."""


class StructuralError(ChecklistError):
    """A structural invariant of the records does not hold."""


class DataQualityWarning(UserWarning):
    """Recoverable gap: unresolved citation or unmapped vocabulary value."""


def warn_data_quality(message: str):
    warnings.warn(message, DataQualityWarning, stacklevel=3)


def check_columns(df: pd.DataFrame, columns: Iterable[str], table: str):
    """Raise InputShapeError when any of the expected columns is missing."""
    missing = [column for column in columns if column not in df.columns]
    if missing:
        raise InputShapeError(
            f"{table} is missing expected column(s) {missing}; "
            f"found {list(df.columns)}"
        )


def check_unique(values: pd.Series, label: str):
    """Raise StructuralError listing the duplicated values of a column."""
    duplicated = values[values.duplicated(keep=False)]
    if not duplicated.empty:
        raise StructuralError(
            f"Duplicate {label}: {sorted(set(duplicated.astype(str)))}"
        )


def check_referential_integrity(core: pd.DataFrame, extensions: Dict[str, pd.DataFrame],
                                key: str = 'taxonID'):
    """Every extension key must have a matching row in the core table."""
    core_ids = set(core[key])
    for name, extension in extensions.items():
        dangling = sorted(set(extension[key]) - core_ids)
        if dangling:
            raise StructuralError(
                f"{name} references {len(dangling)} {key}(s) absent from the core: {dangling}"
            )
