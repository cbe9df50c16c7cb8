"""Isolation of one collection definition inside a content config file."""

from __future__ import annotations

import logging
import re

from .source_text import mask_comments, matching_close, split_top_level

_LOGGER = logging.getLogger("collection_schema_resolver.source_scanning")

_COLLECTIONS_EXPORT = re.compile(r"export\s+const\s+collections\s*=\s*\{")
_EXPORT_ENTRY = re.compile(
    r"""\s*(?:(?P<quote>['"])(?P<quoted>[^'"\n]+)(?P=quote)|(?P<bare>[A-Za-z_$][\w$]*))\s*"""
    r"""(?::\s*(?P<value>.*))?$""",
    re.DOTALL,
)
_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*$")
_DEFINE_CALL = re.compile(r"defineCollection\s*\(")


def extract_collection_source(config_text: str, collection_name: str) -> str | None:
    """Return the ``defineCollection(...)`` call text registered for ``collection_name``.

    The ``export const collections = {...}`` mapping decides which variable
    holds the collection; without a matching entry, a variable named after the
    collection is tried. Returns None when no definition can be isolated.
    """
    masked = mask_comments(config_text)
    exported = _exported_collections(masked)
    value = exported.get(collection_name)

    if value is not None and _DEFINE_CALL.match(value[0]):
        span = _call_span(masked, value[1])
        if span is not None:
            return config_text[span[0] : span[1]]

    identifier = value[0] if value is not None else collection_name
    if not _IDENTIFIER.match(identifier):
        _LOGGER.debug("Collection %s maps to unsupported expression %r", collection_name, identifier)
        return None

    declaration = re.compile(
        r"(?:const|let|var)\s+" + re.escape(identifier) + r"\s*=\s*defineCollection\s*\("
    )
    match = declaration.search(masked)
    if match is None:
        _LOGGER.debug("No defineCollection declaration found for %s", collection_name)
        return None
    span = _call_span(masked, match.start() + match.group(0).index("defineCollection"))
    if span is None:
        return None
    return config_text[span[0] : span[1]]


def exported_collection_names(config_text: str) -> tuple[str, ...]:
    """Return collection names in the order the config exports them."""
    return tuple(_exported_collections(mask_comments(config_text)))


def _exported_collections(masked: str) -> dict[str, tuple[str, int]]:
    match = _COLLECTIONS_EXPORT.search(masked)
    if match is None:
        return {}
    open_index = match.end() - 1
    close_index = matching_close(masked, open_index)
    if close_index is None:
        return {}

    exported: dict[str, tuple[str, int]] = {}
    for start, end in split_top_level(masked, open_index + 1, close_index):
        entry = masked[start:end]
        entry_match = _EXPORT_ENTRY.match(entry)
        if entry_match is None:
            continue
        name = entry_match.group("quoted") or entry_match.group("bare")
        raw_value = entry_match.group("value")
        if raw_value is None:
            exported[name] = (name, start)
            continue
        value_offset = start + entry_match.start("value")
        stripped = raw_value.lstrip()
        exported[name] = (stripped.rstrip(), value_offset + len(raw_value) - len(stripped))
    return exported


def _call_span(masked: str, call_start: int) -> tuple[int, int] | None:
    open_index = masked.find("(", call_start)
    if open_index == -1:
        return None
    close_index = matching_close(masked, open_index)
    if close_index is None:
        return None
    return call_start, close_index + 1
