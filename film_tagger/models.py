from dataclasses import dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional, Union

from .exceptions import DuplicateTagError

TagValue = Union[str, int]


@dataclass(frozen=True)
class MutationRequest:
    """
    Every edit requested for one run. Built once and shared read-only
    by all workers.
    """
    description: Optional[str] = None   # film stock
    iso: Optional[int] = None
    camera: Optional[str] = None        # "Maker Model"
    lens: Optional[str] = None          # "Maker Model"
    focal_length: Optional[int] = None
    artist: Optional[str] = None
    clear: bool = False
    timestamp: bool = False

    def has_operation(self) -> bool:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool):
                if value:
                    return True
            elif value is not None:
                return True
        return False


@dataclass(frozen=True)
class FileFacts:
    """Per-file facts consumed by derivation."""
    path: Path
    created: Optional[datetime] = None


class MakerModelPair(NamedTuple):
    maker: str
    model: str


@dataclass(frozen=True)
class TagWrite:
    name: str
    value: TagValue

    @property
    def is_numeric(self) -> bool:
        return isinstance(self.value, int) and not isinstance(self.value, bool)


class DerivedTagSet:
    """
    Ordered tag writes for one file. Tag names are unique.
    """

    def __init__(self):
        self._writes: Dict[str, TagWrite] = {}

    def add(self, name: str, value: TagValue):
        if name in self._writes:
            raise DuplicateTagError(f"Tag {name} is already set")
        self._writes[name] = TagWrite(name, value)

    def get(self, name: str) -> Optional[TagValue]:
        write = self._writes.get(name)
        return write.value if write else None

    def as_dict(self) -> Dict[str, TagValue]:
        return {name: w.value for name, w in self._writes.items()}

    def __iter__(self) -> Iterator[TagWrite]:
        return iter(list(self._writes.values()))

    def __len__(self) -> int:
        return len(self._writes)

    def __contains__(self, name) -> bool:
        return name in self._writes

    def __repr__(self) -> str:
        return f"DerivedTagSet({self.as_dict()!r})"


@dataclass
class BatchSummary:
    succeeded: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
