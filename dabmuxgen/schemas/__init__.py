"""
Schema resources bundled with the project.

Deutsch:
    Mitgelieferte JSON-Schemata für die Multiplex-Beschreibung.
"""

from __future__ import annotations

__all__ = ["MULTIPLEX_SCHEMA", "load_schema"]

from functools import lru_cache
from importlib import resources
from json import load
from typing import Any, Dict

MULTIPLEX_SCHEMA = "multiplex.schema.json"


@lru_cache(maxsize=None)
def load_schema(name: str = MULTIPLEX_SCHEMA) -> Dict[str, Any]:
    """
    Load a JSON schema from the local schema package.

    Deutsch:
        Lädt ein JSON-Schema aus dem Schema-Paket.
    """

    with resources.files(__name__).joinpath(name).open("r", encoding="utf-8") as fh:
        return load(fh)
