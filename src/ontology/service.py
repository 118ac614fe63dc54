"""
High-level ontology service converting a SNOMED CT taxonomy into OWL axioms.

This is the only public interface into the ontology module. It builds one
class axiom per concept from its stated relationships, sub-property axioms for
the attribute hierarchy and label annotations, and recovers property chains
from a built or loaded ontology.
"""

import logging
from typing import Dict, IO, Iterable, List, Optional, Set, Union

from taxonomy.constants import Concepts
from taxonomy.domain import Relationship
from taxonomy.store import SnomedTaxonomy

from .config import OntologyConfig
from .domain import (
    Axiom, AxiomRepresentation, ClassExpression, ObjectSomeValuesFrom, Ontology,
    ONTOLOGY_URI_VERSION_POSTFIX, PropertyChain, SubPropertyChainOf, TransitiveObjectProperty,
)
from .factory import AxiomFactory
from .render import OntologyGraphRenderer

logger = logging.getLogger(__name__)


class OntologyServiceError(RuntimeError):
    """Raised when ontology content breaks a structural assumption."""


class OntologyService:
    """Builds SNOMED CT ontologies from a taxonomy store."""

    def __init__(self, ungrouped_attributes: Iterable[int], config: Optional[OntologyConfig] = None,
                 factory: Optional[AxiomFactory] = None):
        """Initialize the ontology service.

        Args:
            ungrouped_attributes: Attribute ids never wrapped in a role group
                when stated in group 0.
            config: Optional configuration. If None, defaults are used.
            factory: Optional expression factory. If None, creates a new one.
        """
        self.ungrouped_attributes: Set[int] = set(ungrouped_attributes)
        self.config = config or OntologyConfig()
        self.factory = factory or AxiomFactory()
        self.renderer = OntologyGraphRenderer(self.config.default_prefix)

    @classmethod
    def for_taxonomy(cls, snomed_taxonomy: SnomedTaxonomy,
                     config: Optional[OntologyConfig] = None) -> "OntologyService":
        """Create a service using the taxonomy's never-grouped roles for the configured content type."""
        config = config or OntologyConfig()
        ungrouped = snomed_taxonomy.get_ungrouped_roles_for_content_type_or_default(
            config.content_type_id, config.never_grouped_role_ids)
        return cls(ungrouped, config)

    def create_ontology(self, snomed_taxonomy: SnomedTaxonomy, ontology_uri: Optional[str] = None,
                        version_date: Optional[str] = None) -> Ontology:
        """Build the ontology for every active concept of the taxonomy.

        Args:
            snomed_taxonomy: Populated taxonomy store
            ontology_uri: Ontology IRI, defaults to the configured one
            version_date: Optional release date used in the version IRI

        Returns:
            Ontology holding class, sub-property, overlay and label axioms
        """
        axioms: Dict[Axiom, None] = {}

        # Attribute hierarchy
        attribute_concept_ids = sorted(snomed_taxonomy.get_attribute_concept_ids())
        for attribute_concept_id in attribute_concept_ids:
            owl_property = self.factory.get_owl_object_property(attribute_concept_id)
            for relationship in snomed_taxonomy.get_stated_relationships(attribute_concept_id):
                if relationship.is_a and relationship.destination_id != Concepts.CONCEPT_MODEL_ATTRIBUTE:
                    axioms[self.factory.get_owl_sub_object_property_of_axiom(
                        owl_property, self.factory.get_owl_object_property(relationship.destination_id))] = None
            self._add_fsn_annotation(attribute_concept_id, snomed_taxonomy, axioms)

        # Concepts
        for concept_id in sorted(snomed_taxonomy.get_all_concept_ids()):
            relationship_map: Dict[int, List[Relationship]] = {}
            for relationship in snomed_taxonomy.get_stated_relationships(concept_id):
                relationship_map.setdefault(relationship.group, []).append(relationship)

            representation = AxiomRepresentation(
                primitive=snomed_taxonomy.is_primitive(concept_id),
                left_hand_side_named_concept=concept_id,
                right_hand_side_relationships=relationship_map,
            )
            axioms[self.create_owl_class_axiom(representation)] = None

            # Axioms authored directly in the axiom reference set
            for axiom in snomed_taxonomy.get_concept_axioms(concept_id):
                axioms[axiom] = None

            self._add_fsn_annotation(concept_id, snomed_taxonomy, axioms)

        ontology_uri = ontology_uri or self.config.ontology_uri
        version_date = version_date or self.config.version_date
        version_uri = ontology_uri + ONTOLOGY_URI_VERSION_POSTFIX + version_date if version_date else None

        logger.info(f"Created ontology {ontology_uri} with {len(axioms)} axioms "
                    f"({len(attribute_concept_ids)} attributes)")
        return Ontology(ontology_uri, version_uri, axioms)

    def save_ontology(self, ontology: Ontology, destination: Optional[Union[str, IO[bytes]]] = None,
                      format: Optional[str] = None) -> Optional[str]:
        """Serialize an ontology. Returns the text when no destination is given."""
        return self.renderer.serialize(ontology, destination, format or self.config.output_format)

    def load_ontology(self, source: Optional[Union[str, IO[bytes]]] = None, data: Optional[str] = None,
                      format: Optional[str] = None) -> Ontology:
        """Load an ontology previously saved or produced elsewhere.

        Raises:
            OntologyServiceError: If a property IRI is not a SNOMED CT identifier.
                Class axioms that cannot be read are skipped.
        """
        try:
            return self.renderer.parse(source=source, data=data, format=format)
        except ValueError as e:
            raise OntologyServiceError(f"Could not read ontology: {e}") from e

    def create_owl_class_axiom(self, axiom_representation: AxiomRepresentation) -> Axiom:
        # Left side is usually a single named concept
        left_side = self._create_owl_class_expression(axiom_representation.left_hand_side_named_concept,
                                                      axiom_representation.left_hand_side_relationships)

        # Right side is usually an expression created from a set of stated relationships
        right_side = self._create_owl_class_expression(axiom_representation.right_hand_side_named_concept,
                                                       axiom_representation.right_hand_side_relationships)

        if axiom_representation.primitive:
            return self.factory.get_owl_sub_class_of_axiom(left_side, right_side)
        return self.factory.get_owl_equivalent_classes_axiom(left_side, right_side)

    def _create_owl_class_expression(self, named_concept: Optional[int],
                                     relationships: Optional[Dict[int, List[Relationship]]]) -> ClassExpression:
        if named_concept is not None:
            return self.factory.get_owl_class(named_concept)

        terms: Dict[ClassExpression, None] = {}
        non_zero_role_groups: Dict[int, Dict[ClassExpression, None]] = {}
        for group in sorted(relationships or {}):
            for relationship in relationships[group]:
                type_id = relationship.type_id
                destination_id = relationship.destination_id
                if relationship.is_a:
                    terms[self.factory.get_owl_class(destination_id)] = None
                elif relationship.group == 0:
                    restriction = self._get_owl_object_some_values_from(type_id, destination_id)
                    if type_id in self.ungrouped_attributes:
                        terms[restriction] = None
                    else:
                        # Self grouped
                        terms[self._get_owl_object_some_values_from_group(restriction)] = None
                else:
                    non_zero_role_groups.setdefault(relationship.group, {})[
                        self._get_owl_object_some_values_from(type_id, destination_id)] = None

        # One role group per group number, intersecting its statements when there are several
        for group in sorted(non_zero_role_groups):
            terms[self._get_owl_object_some_values_from_group(
                self._get_only_value_or_intersection(non_zero_role_groups[group]))] = None

        if not terms:
            # SNOMED CT root concept
            terms[self.factory.get_owl_thing()] = None

        return self._get_only_value_or_intersection(terms)

    def get_property_chains(self, ontology: Ontology) -> Set[PropertyChain]:
        """Collect role composition rules from chain and transitivity axioms.

        Raises:
            OntologyServiceError: If a property chain is not exactly two properties long.
        """
        property_chains: Set[PropertyChain] = set()

        for chain_axiom in ontology.get_axioms(SubPropertyChainOf):
            if len(chain_axiom.chain) != 2:
                raise OntologyServiceError("Property chain must be 2 properties long.")
            first, second = chain_axiom.chain
            property_chains.add(PropertyChain(first.property_id, second.property_id,
                                              chain_axiom.super_property.property_id))

        # Transitive properties compose with themselves
        for transitive_axiom in ontology.get_axioms(TransitiveObjectProperty):
            property_id = transitive_axiom.property.property_id
            property_chains.add(PropertyChain(property_id, property_id, property_id))

        return property_chains

    def _get_only_value_or_intersection(self, terms: Iterable[ClassExpression]) -> ClassExpression:
        terms = list(terms)
        return terms[0] if len(terms) == 1 else self.factory.get_owl_object_intersection_of(terms)

    def _get_owl_object_some_values_from_group(self, expression: ClassExpression) -> ObjectSomeValuesFrom:
        return self.factory.get_owl_object_some_values_from(
            self.factory.get_owl_object_property(Concepts.ROLE_GROUP), expression)

    def _get_owl_object_some_values_from(self, type_id: int, destination_id: int) -> ObjectSomeValuesFrom:
        return self.factory.get_owl_object_some_values_from(
            self.factory.get_owl_object_property(type_id), self.factory.get_owl_class(destination_id))

    def _add_fsn_annotation(self, concept_id: int, snomed_taxonomy: SnomedTaxonomy, axioms: Dict[Axiom, None]):
        fsn_term = snomed_taxonomy.get_concept_fsn_term(concept_id)
        if fsn_term is not None:
            axioms[self.factory.get_owl_label_annotation_axiom(concept_id, fsn_term)] = None
