"""Source annotation entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReferenceMapping:
    """Collection targeted by a reference field declared in source."""

    field_path: str
    collection_name: str
    is_array: bool


@dataclass(frozen=True)
class Annotations:
    """Facts recovered from schema source that the compiled schema loses."""

    references: tuple[ReferenceMapping, ...] = ()
    images: frozenset[str] = frozenset()
    declared_fields: tuple[str, ...] = ()
    optional_fields: frozenset[str] = frozenset()

    def reference_for(self, field_path: str) -> ReferenceMapping | None:
        """Return the reference mapping declared for ``field_path``, if any."""
        for mapping in self.references:
            if mapping.field_path == field_path:
                return mapping
        return None

    @property
    def annotated_fields(self) -> tuple[str, ...]:
        """Return reference and image field names in a stable order."""
        names = [mapping.field_path for mapping in self.references]
        names.extend(sorted(name for name in self.images if name not in names))
        return tuple(names)

    @property
    def is_empty(self) -> bool:
        return not (self.references or self.images or self.declared_fields)
