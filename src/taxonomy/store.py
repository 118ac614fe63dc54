"""
In-memory store for the SNOMED CT concept and relationship graph.

The store owns every map: concepts, stated and inferred relationships (indexed
by id and by source concept), the stated subtype index, the axiom overlay,
fully specified names and the ungrouped role registry. It knows nothing about
description logic syntax.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Hashable, Iterable, List, Optional, Set, Tuple

from .constants import Concepts, DEFAULT_NEVER_GROUPED_ROLE_IDS
from .domain import Characteristic, Concept, Relationship, SctId, to_sctid

logger = logging.getLogger(__name__)

MAX_ANCESTOR_DEPTH = 30


class HierarchyDepthExceededError(RuntimeError):
    """Raised when an ancestor search runs into a probable hierarchy cycle."""


class SnomedTaxonomy:
    """Concept/relationship graph with the indexes needed for axiom building."""

    def __init__(self, max_ancestor_depth: int = MAX_ANCESTOR_DEPTH):
        self.max_ancestor_depth = max_ancestor_depth

        self._concepts: Dict[int, Concept] = {}

        # Relationships by id, one id space per characteristic
        self._relationships_by_id: Dict[Characteristic, Dict[int, Relationship]] = {
            Characteristic.STATED: {},
            Characteristic.INFERRED: {},
        }
        # source concept -> relationship id -> relationship
        self._relationships_by_concept: Dict[Characteristic, Dict[int, Dict[int, Relationship]]] = {
            Characteristic.STATED: {},
            Characteristic.INFERRED: {},
        }
        self._stated_sub_types: Dict[int, Set[int]] = {}

        # Axiom overlay
        self._concept_axioms: Dict[int, Dict[Hashable, None]] = {}
        self._axioms_by_id: Dict[str, Tuple[int, Hashable]] = {}
        # (concept, axiom) -> number of axiom ids carrying it
        self._axiom_reference_counts: Dict[Tuple[int, Hashable], int] = {}

        self._fsn_terms: Dict[int, str] = {}
        self._ungrouped_roles_by_content_type: Dict[int, Set[int]] = {}

    # ------------------------------------------------------------------ concepts

    def add_or_modify_concept(self, concept_id: SctId, active: bool = True, primitive: bool = True) -> Concept:
        """Register a concept or update its state. Concepts are never removed."""
        concept_id = to_sctid(concept_id)
        concept = self._concepts.get(concept_id)
        if concept is None:
            concept = Concept(concept_id=concept_id, primitive=primitive, active=active)
            self._concepts[concept_id] = concept
        else:
            concept.primitive = primitive
            concept.active = active
        return concept

    def get_concept(self, concept_id: SctId) -> Optional[Concept]:
        return self._concepts.get(to_sctid(concept_id))

    def is_primitive(self, concept_id: SctId) -> bool:
        concept = self._concepts.get(to_sctid(concept_id))
        return concept is None or concept.primitive

    def is_active(self, concept_id: SctId) -> bool:
        concept = self._concepts.get(to_sctid(concept_id))
        return concept is not None and concept.active

    def get_all_concept_ids(self) -> List[int]:
        """Active concept ids in registration order."""
        return [c.concept_id for c in self._concepts.values() if c.active]

    def get_known_concept_ids(self) -> List[int]:
        """Every registered concept id, active or not."""
        return list(self._concepts)

    def get_fully_defined_concept_ids(self) -> Set[int]:
        return {c.concept_id for c in self._concepts.values() if c.active and not c.primitive}

    def get_inactivated_concepts(self) -> Set[int]:
        return {c.concept_id for c in self._concepts.values() if not c.active}

    # ------------------------------------------------------------- relationships

    def get_stated_relationships(self, concept_id: SctId) -> List[Relationship]:
        return self._get_relationships(Characteristic.STATED, concept_id)

    def get_inferred_relationships(self, concept_id: SctId) -> List[Relationship]:
        return self._get_relationships(Characteristic.INFERRED, concept_id)

    def _get_relationships(self, characteristic: Characteristic, concept_id: SctId) -> List[Relationship]:
        by_id = self._relationships_by_concept[characteristic].get(to_sctid(concept_id))
        return list(by_id.values()) if by_id else []

    def get_relationship(self, characteristic: Characteristic, relationship_id: SctId) -> Optional[Relationship]:
        return self._relationships_by_id[characteristic].get(to_sctid(relationship_id))

    def add_or_modify_relationship(self, characteristic: Characteristic, source_id: SctId,
                                   relationship: Relationship) -> Relationship:
        """Insert a relationship, or update effective time and group of a known one.

        Returns the record now held by the store.

        Raises:
            ValueError: If the relationship's source disagrees with ``source_id``
                or a known id is given a different source, destination or type.
        """
        characteristic = Characteristic(characteristic)
        source_id = to_sctid(source_id)
        if relationship.source_id != source_id:
            raise ValueError(f"Relationship {relationship.relationship_id} has source "
                             f"{relationship.source_id}, expected {source_id}")
        if relationship.characteristic != characteristic:
            relationship = replace(relationship, characteristic=characteristic)

        by_id = self._relationships_by_id[characteristic]
        existing = by_id.get(relationship.relationship_id)

        if existing is not None:
            if not existing.same_identity(relationship):
                raise ValueError(f"Only effective time and group of relationship "
                                 f"{relationship.relationship_id} may change")
            updated = replace(existing, effective_time=relationship.effective_time, group=relationship.group)
            by_id[updated.relationship_id] = updated
            self._relationships_by_concept[characteristic][source_id][updated.relationship_id] = updated
            logger.debug(f"Modified {characteristic.value} relationship {updated.relationship_id}")
            return updated

        self._relationships_by_concept[characteristic].setdefault(source_id, {})[
            relationship.relationship_id] = relationship
        by_id[relationship.relationship_id] = relationship
        if characteristic == Characteristic.STATED and relationship.is_a:
            self._stated_sub_types.setdefault(relationship.destination_id, set()).add(source_id)
        return relationship

    def remove_relationship(self, characteristic: Characteristic, source_id: SctId, relationship_id: SctId) -> None:
        """Remove a relationship from both indexes. No-op when absent."""
        characteristic = Characteristic(characteristic)
        source_id = to_sctid(source_id)
        relationship_id = to_sctid(relationship_id)

        concept_map = self._relationships_by_concept[characteristic]
        concept_relationships = concept_map.get(source_id)
        if not concept_relationships or relationship_id not in concept_relationships:
            return

        removed = concept_relationships.pop(relationship_id)
        if not concept_relationships:
            del concept_map[source_id]
        self._relationships_by_id[characteristic].pop(relationship_id, None)

        if characteristic == Characteristic.STATED and removed.is_a:
            self._unindex_sub_type(source_id, removed.destination_id)

    def _unindex_sub_type(self, source_id: int, destination_id: int) -> None:
        # Another stated is-a edge may still link the same pair
        for relationship in self.get_stated_relationships(source_id):
            if relationship.is_a and relationship.destination_id == destination_id:
                return
        sub_types = self._stated_sub_types.get(destination_id)
        if sub_types is not None:
            sub_types.discard(source_id)
            if not sub_types:
                del self._stated_sub_types[destination_id]

    def get_non_is_a_statements(self, concept_id: SctId) -> List[Relationship]:
        return [r for r in self.get_stated_relationships(concept_id) if not r.is_a]

    # ------------------------------------------------------------------ hierarchy

    def get_super_type_ids(self, concept_id: SctId) -> Set[int]:
        concept_id = to_sctid(concept_id)
        if concept_id == Concepts.ROOT:
            return set()
        return {r.destination_id for r in self.get_stated_relationships(concept_id) if r.is_a}

    def get_sub_type_ids(self, concept_id: SctId) -> Set[int]:
        return set(self._stated_sub_types.get(to_sctid(concept_id), ()))

    def get_descendants(self, concept_id: SctId) -> Set[int]:
        """All stated descendants of a concept."""
        descendants: Set[int] = set()
        worklist = [to_sctid(concept_id)]
        while worklist:
            for sub_type_id in self._stated_sub_types.get(worklist.pop(), ()):
                if sub_type_id not in descendants:
                    descendants.add(sub_type_id)
                    worklist.append(sub_type_id)
        return descendants

    def concept_has_ancestor(self, concept_id: SctId, ancestor_id: SctId) -> bool:
        """Check whether ``ancestor_id`` lies on the concept's stated is-a chain.

        Only the first stated is-a relationship of each concept is followed, so
        ancestry through a second stated parent is not reported.

        Raises:
            HierarchyDepthExceededError: If the walk revisits a concept or
                exceeds ``max_ancestor_depth`` steps.
        """
        concept_id = to_sctid(concept_id)
        ancestor_id = to_sctid(ancestor_id)
        current = concept_id
        visited = {current}
        depth = 0
        while current != Concepts.ROOT:
            if depth > self.max_ancestor_depth:
                raise HierarchyDepthExceededError(
                    f"Depth limit exceeded searching for potential ancestor {ancestor_id} of concept {concept_id}")

            parent = self._first_stated_parent(current)
            if parent is None:
                return False
            if parent in visited:
                raise HierarchyDepthExceededError(
                    f"Cycle found at concept {parent} searching for potential ancestor {ancestor_id} "
                    f"of concept {concept_id}")
            if parent == ancestor_id:
                return True

            visited.add(parent)
            current = parent
            depth += 1
        return False

    def _first_stated_parent(self, concept_id: int) -> Optional[int]:
        for relationship in self.get_stated_relationships(concept_id):
            if relationship.is_a:
                return relationship.destination_id
        return None

    def get_attribute_concept_ids(self) -> Set[int]:
        """Active concepts below the concept model attribute root."""
        return {concept_id for concept_id in self.get_all_concept_ids()
                if self.concept_has_ancestor(concept_id, Concepts.CONCEPT_MODEL_ATTRIBUTE)}

    # -------------------------------------------------------------- axiom overlay

    def add_axiom(self, referenced_component_id: SctId, axiom_id: str, axiom: Any) -> None:
        """Attach an externally authored axiom to a concept."""
        concept_id = to_sctid(referenced_component_id)
        if axiom_id in self._axioms_by_id:
            self.remove_axiom(self._axioms_by_id[axiom_id][0], axiom_id)
        self._concept_axioms.setdefault(concept_id, {})[axiom] = None
        self._axioms_by_id[axiom_id] = (concept_id, axiom)
        key = (concept_id, axiom)
        self._axiom_reference_counts[key] = self._axiom_reference_counts.get(key, 0) + 1

    def remove_axiom(self, referenced_component_id: SctId, axiom_id: str) -> None:
        """Remove a previously added axiom by id. No-op when unknown."""
        entry = self._axioms_by_id.pop(axiom_id, None)
        if entry is None:
            return
        concept_id, axiom = entry
        if concept_id != to_sctid(referenced_component_id):
            logger.warning(f"Axiom {axiom_id} was registered on concept {concept_id}, "
                           f"not {referenced_component_id}")
        # Another axiom id may carry an identical axiom on the same concept
        remaining = self._axiom_reference_counts.pop(entry, 1) - 1
        if remaining > 0:
            self._axiom_reference_counts[entry] = remaining
            return
        axioms = self._concept_axioms.get(concept_id)
        if axioms is not None:
            axioms.pop(axiom, None)
            if not axioms:
                del self._concept_axioms[concept_id]

    def get_concept_axioms(self, concept_id: SctId) -> List[Any]:
        return list(self._concept_axioms.get(to_sctid(concept_id), ()))

    @property
    def concept_axiom_map(self) -> Dict[int, List[Any]]:
        return {concept_id: list(axioms) for concept_id, axioms in self._concept_axioms.items()}

    # --------------------------------------------------------------- annotations

    def add_fsn(self, concept_id: SctId, term: str) -> None:
        self._fsn_terms[to_sctid(concept_id)] = term

    def get_concept_fsn_term(self, concept_id: SctId) -> Optional[str]:
        return self._fsn_terms.get(to_sctid(concept_id))

    # ---------------------------------------------------------- ungrouped roles

    def add_ungrouped_role(self, content_type_id: SctId, attribute_id: SctId) -> None:
        self._ungrouped_roles_by_content_type.setdefault(to_sctid(content_type_id), set()).add(
            to_sctid(attribute_id))

    def remove_ungrouped_role(self, content_type_id: SctId, attribute_id: SctId) -> None:
        ungrouped = self._ungrouped_roles_by_content_type.get(to_sctid(content_type_id))
        if ungrouped is not None:
            ungrouped.discard(to_sctid(attribute_id))

    @property
    def ungrouped_roles_by_content_type(self) -> Dict[int, Set[int]]:
        return {content_type: set(roles) for content_type, roles in self._ungrouped_roles_by_content_type.items()}

    def get_ungrouped_roles_for_content_type_or_default(
            self, content_type_id: SctId,
            default: Iterable[int] = DEFAULT_NEVER_GROUPED_ROLE_IDS) -> Set[int]:
        """Never-grouped attribute ids for a content type and its direct subtypes.

        Falls back to ``default`` when the registry holds nothing for them.
        """
        content_type_id = to_sctid(content_type_id)
        ungrouped: Set[int] = set()
        for sub_type_id in self.get_sub_type_ids(content_type_id):
            ungrouped.update(self._ungrouped_roles_by_content_type.get(sub_type_id, ()))
        ungrouped.update(self._ungrouped_roles_by_content_type.get(content_type_id, ()))

        if ungrouped:
            logger.info(f"Using never grouped role list from MRCM reference set {sorted(ungrouped)}")
            return ungrouped

        ungrouped = set(default)
        logger.info(f"No MRCM information found, falling back to legacy never grouped role list {sorted(ungrouped)}")
        return ungrouped
