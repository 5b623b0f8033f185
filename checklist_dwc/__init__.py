"""Darwin Core conversion of the alien macroinvertebrates checklist of Flanders."""

from checklist_dwc.mapping import MappingEngine
from checklist_dwc.transform import run_pipeline
from checklist_dwc.validation import (
    ChecklistError,
    DataQualityWarning,
    InputShapeError,
    StructuralError,
)

__version__ = "0.1.0"

__all__ = [
    "MappingEngine",
    "run_pipeline",
    "ChecklistError",
    "DataQualityWarning",
    "InputShapeError",
    "StructuralError",
]
