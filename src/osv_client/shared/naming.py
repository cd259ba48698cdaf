from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# In-process attribute name -> OSV wire key. Names not listed are already
# snake_case on the wire and pass through unchanged.
WIRE_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "pkg": "package",
        "vulnerabilities": "vulns",
        "modified_at": "modified",
    }
)


def wire_name(field_name: str) -> str:
    """Return the wire key for an in-process field name."""
    return WIRE_NAMES.get(field_name, field_name)
