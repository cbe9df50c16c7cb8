"""Field model exports."""

from .field_models import (
    REFERENCE_KINDS,
    CompleteSchema,
    FieldConstraints,
    FieldKind,
    FieldType,
    IssueKind,
    ResolutionIssue,
    SchemaField,
)
from .field_paths import is_path_prefix, join_path
from .field_payload import to_payload

__all__ = [
    "REFERENCE_KINDS",
    "CompleteSchema",
    "FieldConstraints",
    "FieldKind",
    "FieldType",
    "IssueKind",
    "ResolutionIssue",
    "SchemaField",
    "is_path_prefix",
    "join_path",
    "to_payload",
]
