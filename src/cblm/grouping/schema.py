from dataclasses import dataclass
from typing import Iterator, List, Tuple

# ---- canonical data shapes ----
SHAPE_FLAT = "flat"
SHAPE_SORTED = "sorted"


@dataclass(frozen=True)
class CodeGroup:
    code: str
    names: Tuple[str, ...]


@dataclass(frozen=True)
class Grouping:
    """Codes with their node names, in the order they were decoded."""
    groups: Tuple[CodeGroup, ...]
    shape: str = SHAPE_FLAT

    def __iter__(self) -> Iterator[CodeGroup]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    @property
    def ordered_codes(self) -> List[str]:
        return [g.code for g in self.groups]

    @property
    def n_names(self) -> int:
        return sum(len(g.names) for g in self.groups)
