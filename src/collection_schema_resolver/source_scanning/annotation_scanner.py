"""Pattern-based recovery of reference and image annotations from schema source."""

from __future__ import annotations

import logging
import re

from .annotation_models import Annotations, ReferenceMapping
from .source_text import chained_calls, mask_comments, matching_close, split_top_level

_LOGGER = logging.getLogger("collection_schema_resolver.source_scanning")

_ENTRY_KEY = re.compile(
    r"""\s*(?:(?P<quote>['"])(?P<quoted>[^'"\n]+)(?P=quote)|(?P<bare>[A-Za-z_$][\w$]*))\s*:"""
)
_COLLECTION_ARGUMENT = r"""\s*\(\s*(?P<cq>['"`])(?P<collection>[^'"`\n]+)(?P=cq)\s*\)"""
_ARRAY_REFERENCE = re.compile(r"z\s*\.\s*array\s*\(\s*reference" + _COLLECTION_ARGUMENT)
_REFERENCE = re.compile(r"reference" + _COLLECTION_ARGUMENT)
_IMAGE = re.compile(r"image\s*\(")
_DECLARATION = re.compile(r"(?:z\s*\.|reference\s*\(|image\s*\()")
_SCHEMA_OBJECT = re.compile(r"z\s*\.\s*object\s*\(\s*\{")
_OPTIONAL_CALLS = frozenset({"optional", "nullish", "default"})


def extract_annotations(source: str) -> Annotations:
    """Scan schema source for top-level references, images and field declarations.

    Only entries of an outermost ``z.object({...})`` are considered top-level;
    source without any ``z.object`` call is read as a bare object body.
    """
    masked = mask_comments(source)
    references: list[ReferenceMapping] = []
    images: set[str] = set()
    declared: list[str] = []
    optional: set[str] = set()

    for start, end in _top_level_entries(masked):
        entry = masked[start:end]
        key_match = _ENTRY_KEY.match(entry)
        if key_match is None:
            continue
        name = key_match.group("quoted") or key_match.group("bare")
        value = entry[key_match.end() :].strip()

        if _DECLARATION.match(value) and name not in declared:
            declared.append(name)
            if _OPTIONAL_CALLS.intersection(chained_calls(value)):
                optional.add(name)

        if any(mapping.field_path == name for mapping in references):
            continue
        array_match = _ARRAY_REFERENCE.match(value)
        if array_match:
            references.append(
                ReferenceMapping(
                    field_path=name,
                    collection_name=array_match.group("collection"),
                    is_array=True,
                )
            )
            continue
        reference_match = _REFERENCE.match(value)
        if reference_match:
            references.append(
                ReferenceMapping(
                    field_path=name,
                    collection_name=reference_match.group("collection"),
                    is_array=False,
                )
            )
            continue
        if _IMAGE.match(value):
            images.add(name)

    _LOGGER.debug(
        "Scanned source: %d references, %d images, %d declared fields",
        len(references),
        len(images),
        len(declared),
    )
    return Annotations(
        references=tuple(references),
        images=frozenset(images),
        declared_fields=tuple(declared),
        optional_fields=frozenset(optional),
    )


def _top_level_entries(masked: str) -> list[tuple[int, int]]:
    roots = _schema_object_spans(masked)
    if not roots:
        return split_top_level(masked, 0, len(masked), separators=",\n")
    entries: list[tuple[int, int]] = []
    for open_index, close_index in roots:
        entries.extend(split_top_level(masked, open_index + 1, close_index))
    return entries


def _schema_object_spans(masked: str) -> list[tuple[int, int]]:
    spans: list[tuple[int, int]] = []
    for match in _SCHEMA_OBJECT.finditer(masked):
        open_index = match.end() - 1
        if spans and open_index < spans[-1][1]:
            continue
        close_index = matching_close(masked, open_index)
        if close_index is None:
            _LOGGER.debug("Unbalanced z.object at offset %d", open_index)
            continue
        spans.append((open_index, close_index))
    return spans
