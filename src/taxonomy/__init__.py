"""
SNOMED CT Taxonomy Module

In-memory concept/relationship graph populated by a release loader and read by
the ontology module when building axioms.

Public Interface:
- SnomedTaxonomy: the taxonomy store
- Relationship, Characteristic, Concept: stored records
- Concepts: well-known concept ids
"""

from .constants import Concepts, DEFAULT_NEVER_GROUPED_ROLE_IDS
from .domain import Characteristic, Concept, Relationship
from .store import HierarchyDepthExceededError, SnomedTaxonomy

__all__ = [
    "Concepts",
    "DEFAULT_NEVER_GROUPED_ROLE_IDS",
    "Characteristic",
    "Concept",
    "Relationship",
    "HierarchyDepthExceededError",
    "SnomedTaxonomy",
]
