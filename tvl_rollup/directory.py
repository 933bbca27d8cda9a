"""Protocol directory: read-only list of known protocols and parents.

File format (json):
{
  "protocols": [{"id": "1", "name": "Aave V2", "parentProtocol": "parent#aave", ...}, ...],
  "parentProtocols": [{"id": "parent#aave", "name": "Aave", ...}, ...]
}

A bare JSON list is accepted as the protocols list. The directory is built
once and passed to the service explicitly; nothing here is module state.
"""
from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

from loguru import logger

from tvl_rollup.core.custom_types import ParentProtocol
from tvl_rollup.core.errors import NoChildrenError


def sluggify(name: str) -> str:
    """API slug for a protocol name: lowercase, spaces to dashes, no apostrophes."""
    return name.lower().replace(' ', '-').replace("'", '')


@dataclass(frozen=True)
class ProtocolDirectory:
    protocols: Tuple[Dict[str, Any], ...] = ()
    parents: Tuple[Dict[str, Any], ...] = ()

    @staticmethod
    def from_json_path(path: str | Path) -> 'ProtocolDirectory':
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if isinstance(data, list):
            data = {'protocols': data}
        directory = ProtocolDirectory(
            protocols=tuple(data.get('protocols') or []),
            parents=tuple(data.get('parentProtocols') or []),
        )
        logger.info("Loaded protocol directory from {} protocols={} parents={}",
                    path, len(directory.protocols), len(directory.parents))
        return directory

    def children_of(self, parent: ParentProtocol) -> List[Dict[str, Any]]:
        return [p for p in self.protocols if p.get('parentProtocol') == parent.id]

    def resolve_children(self, parent: ParentProtocol) -> List[Dict[str, Any]]:
        """Children of `parent` in directory order.

        Raises NoChildrenError when there are none, or when a child carries
        the parent's own name.
        """
        children = self.children_of(parent)
        if not children or any(c.get('name') == parent.name for c in children):
            raise NoChildrenError(parent.id)
        return children

    def get_parent(self, key: str) -> ParentProtocol:
        """Look up a parent by id, name or slug."""
        for p in self.parents:
            if key in (p.get('id'), p.get('name')) or sluggify(str(p.get('name', ''))) == key:
                return ParentProtocol.from_dict(p)
        raise NoChildrenError(key)


__all__ = ['sluggify', 'ProtocolDirectory']
