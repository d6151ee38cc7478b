# src/cblm/grouping/index.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional

from cblm.grouping.adapters import normalize_grouping
from cblm.grouping.schema import Grouping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DuplicateAssignment:
    name: str
    previous_code: str
    code: str


@dataclass(frozen=True)
class CodeIndex(Mapping[str, str]):
    """
    Read-only node name -> code lookup.

    `duplicates` lists every name that appeared under more than one code,
    in the order the overwrites happened. The last code seen is the one
    kept; the list is there so callers can report the anomaly upstream.
    """
    mapping: Mapping[str, str]
    duplicates: List[DuplicateAssignment] = field(default_factory=list)

    def __getitem__(self, name: str) -> str:
        return self.mapping[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.mapping)

    def __len__(self) -> int:
        return len(self.mapping)

    def lookup(self, name: str) -> Optional[str]:
        return self.mapping.get(name)


def build_index(grouping: Grouping | Dict[str, Any]) -> CodeIndex:
    """
    Invert a grouping into a node name -> code index.

    Codes are visited in decoded order and names within a code in list
    order; a name seen again overwrites the earlier code (last write wins).
    Codes with no names add nothing. A plain decoded dict is normalized
    first, so malformed input raises MalformedGroupingData.
    """
    grouping = normalize_grouping(grouping)

    index: Dict[str, str] = {}
    duplicates: List[DuplicateAssignment] = []
    for group in grouping:
        for name in group.names:
            prev = index.get(name)
            if prev is not None and prev != group.code:
                duplicates.append(DuplicateAssignment(name=name, previous_code=prev, code=group.code))
                logger.warning("Node %r listed under %r and %r; keeping %r",
                               name, prev, group.code, group.code)
            index[name] = group.code

    if logger.isEnabledFor(logging.DEBUG):
        for name, code in index.items():
            logger.debug("index: %s -> %s", name, code)
    logger.info("Built code index: %d names across %d codes (%d reassigned)",
                len(index), len(grouping), len(duplicates))
    return CodeIndex(mapping=MappingProxyType(index), duplicates=duplicates)
