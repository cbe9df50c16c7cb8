"""Field model export exports."""

from .constants import FIELD_COLUMNS, SOURCE_COLUMNS, SOURCES_SHEET_NAME
from .field_workbook_writer import describe_field_type, write_field_model_workbook

__all__ = [
    "FIELD_COLUMNS",
    "SOURCE_COLUMNS",
    "SOURCES_SHEET_NAME",
    "describe_field_type",
    "write_field_model_workbook",
]
