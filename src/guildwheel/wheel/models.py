"""Data containers for wheel spins.

Candidates are immutable for the lifetime of a spin. A CandidateSet is an
ordered, duplicate-free tuple of candidates; its order decides where each
candidate sits on the wheel.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional


@dataclass(frozen=True)
class Candidate:
    """A single entry on the wheel.

    Attributes:
        id: Opaque identity token (unique within a set)
        label: Text drawn on the segment
        metadata: Arbitrary data passed through untouched
    """

    id: str
    label: str
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)


class CandidateSet:
    """Ordered, immutable sequence of candidates."""

    __slots__ = ("_items", "_index")

    def __init__(self, candidates: Iterable[Candidate] = ()) -> None:
        items = tuple(candidates)
        index: dict[str, int] = {}
        for i, candidate in enumerate(items):
            if candidate.id in index:
                raise ValueError(f"Duplicate candidate id: {candidate.id!r}")
            index[candidate.id] = i
        self._items = items
        self._index = index

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._items)

    def __getitem__(self, i: int) -> Candidate:
        return self._items[i]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandidateSet):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        labels = ", ".join(c.label for c in self._items)
        return f"CandidateSet([{labels}])"

    def same_as(self, other: "CandidateSet") -> bool:
        """Equal including metadata (plain == compares ids and labels only)."""
        return self == other and all(
            a.metadata == b.metadata for a, b in zip(self._items, other._items)
        )

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(c.id for c in self._items)

    def index_of(self, candidate_id: str) -> Optional[int]:
        """Position of a candidate id, or None if absent."""
        return self._index.get(candidate_id)

    def get(self, candidate_id: str) -> Optional[Candidate]:
        i = self._index.get(candidate_id)
        return self._items[i] if i is not None else None

    @classmethod
    def from_labels(cls, *labels: str) -> "CandidateSet":
        """Build a set where each label doubles as the id."""
        return cls(Candidate(id=label, label=label) for label in labels)


@dataclass(frozen=True)
class SpinCriteria:
    """Selection criteria forwarded to the winner authority.

    Attributes:
        quality: Reward quality tier ("silver" or "gold")
        list_id: Distribution list to draw from, if the authority uses one
    """

    quality: str = "silver"
    list_id: Optional[str] = None


@dataclass(frozen=True)
class SpinResult:
    """Authoritative outcome of one spin.

    Attributes:
        winner_id: Identity of the winning candidate
        winner: The winner as reported by the authority, if it sent details
        payload: Extra result data (reward details, list status, ...)
    """

    winner_id: str
    winner: Optional[Candidate] = None
    payload: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)
