"""Content collection schema resolution."""

import logging

logging.getLogger("collection_schema_resolver").addHandler(logging.NullHandler())
