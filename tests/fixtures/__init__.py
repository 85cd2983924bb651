"""Test fixtures: sample attribute maps keyed by table name."""

from __future__ import annotations

import json
from pathlib import Path

from sqlcompose.schema.attributes import AttributeDefinition

_FIXTURES_DIR = Path(__file__).parent


def load_attributes(table: str) -> dict[str, AttributeDefinition]:
    """Load the sample attribute map for ``table`` from attributes.json."""
    data = json.loads((_FIXTURES_DIR / "attributes.json").read_text())
    return {
        name: AttributeDefinition.model_validate(definition)
        for name, definition in data[table].items()
    }
