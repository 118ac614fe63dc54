"""
Domain models for the taxonomy module.

These records describe SNOMED CT concepts and relationships as they are held
in the in-memory taxonomy store. Relationships reference concepts by id only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .constants import Concepts


SctId = Union[int, str]


class Characteristic(str, Enum):
    """Relationship characteristic. Each one is its own relationship id space."""
    STATED = "stated"       # authored, pre-classification
    INFERRED = "inferred"   # produced by a reasoner


def to_sctid(value: SctId) -> int:
    """Normalise a textual or numeric SNOMED CT identifier to an int."""
    return value if isinstance(value, int) else int(value.strip())


@dataclass
class Concept:
    """A concept known to the taxonomy."""

    concept_id: int
    primitive: bool = True
    active: bool = True


@dataclass(frozen=True)
class Relationship:
    """An attribute or is-a edge between two concepts.

    Only ``effective_time`` and ``group`` may change once a relationship id is
    known; the store replaces the record rather than mutating it.
    """

    relationship_id: int
    source_id: int
    destination_id: int
    type_id: int
    group: int = 0                      # 0 = ungrouped
    characteristic: Characteristic = Characteristic.STATED
    effective_time: Optional[int] = None
    module_id: Optional[int] = None

    @property
    def is_a(self) -> bool:
        return self.type_id == Concepts.IS_A

    def same_identity(self, other: "Relationship") -> bool:
        """True when both records agree on every immutable field."""
        return (self.relationship_id == other.relationship_id
                and self.source_id == other.source_id
                and self.destination_id == other.destination_id
                and self.type_id == other.type_id)
