"""
RDF rendering of SNOMED CT ontologies.

Axioms are written to an rdflib graph using the standard OWL to RDF mapping,
with the SNOMED CT core namespace bound as the default prefix. The same
mapping is read back so that property chains can be recovered from a saved or
externally produced ontology.
"""

import logging
from typing import IO, Optional, Union

from rdflib import BNode, Graph, Literal, Namespace, OWL, RDF, RDFS, URIRef
from rdflib.collection import Collection
from rdflib.term import Node

from taxonomy.constants import Concepts

from .domain import (
    Axiom, ClassExpression, EquivalentClasses, LabelAnnotation, NamedClass, ObjectIntersectionOf,
    ObjectProperty, ObjectSomeValuesFrom, Ontology, SNOMED_CORE_COMPONENTS_URI, SubClassOf,
    SubObjectPropertyOf, SubPropertyChainOf, Thing, TransitiveObjectProperty,
)

logger = logging.getLogger(__name__)

ROLE_GROUP_OUTDATED_CONSTANT = "roleGroup"

FUNCTIONAL_SYNTAX = "functional"
FUNCTIONAL_PREFIXES = (
    ("owl", "http://www.w3.org/2002/07/owl#"),
    ("rdf", "http://www.w3.org/1999/02/22-rdf-syntax-ns#"),
    ("xml", "http://www.w3.org/XML/1998/namespace"),
    ("xsd", "http://www.w3.org/2001/XMLSchema#"),
    ("rdfs", "http://www.w3.org/2000/01/rdf-schema#"),
)


class OntologyGraphRenderer:
    """Converts between the ontology model and rdflib graphs."""

    def __init__(self, default_prefix: str = SNOMED_CORE_COMPONENTS_URI):
        self.sct = Namespace(default_prefix)

    def _init_namespaces(self, graph: Graph):
        graph.bind("", self.sct)
        graph.bind("owl", OWL)
        graph.bind("rdfs", RDFS)

    # ----------------------------------------------------------------- writing

    def to_graph(self, ontology: Ontology) -> Graph:
        graph = Graph()
        self._init_namespaces(graph)

        ontology_node = URIRef(ontology.ontology_uri)
        graph.add((ontology_node, RDF.type, OWL.Ontology))
        if ontology.version_uri:
            graph.add((ontology_node, OWL.versionIRI, URIRef(ontology.version_uri)))

        for axiom in ontology:
            self._add_axiom(graph, axiom)
        return graph

    def serialize(self, ontology: Ontology, destination: Optional[Union[str, IO[bytes]]] = None,
                  format: str = "turtle") -> Optional[str]:
        """Serialize an ontology. Returns the text when no destination is given.

        ``format`` is an rdflib serializer name, or ``"functional"`` for an
        OWL functional-syntax document.
        """
        if format == FUNCTIONAL_SYNTAX:
            return self._write_functional(ontology, destination)

        graph = self.to_graph(ontology)
        logger.info(f"Serializing {len(ontology)} axioms as {len(graph)} triples ({format})")
        if destination is None:
            return graph.serialize(format=format)
        graph.serialize(destination=destination, format=format)
        return None

    def to_functional(self, ontology: Ontology) -> str:
        """Render an ontology as an OWL functional-syntax document."""
        lines = [f"Prefix(:=<{self.sct}>)"]
        lines.extend(f"Prefix({prefix}:=<{namespace}>)" for prefix, namespace in FUNCTIONAL_PREFIXES)
        lines.append("")
        header = f"<{ontology.ontology_uri}>"
        if ontology.version_uri:
            header += f" <{ontology.version_uri}>"
        lines.append(f"Ontology({header}")
        lines.extend(str(axiom) for axiom in ontology)
        lines.append(")")
        return "\n".join(lines) + "\n"

    def _write_functional(self, ontology: Ontology,
                          destination: Optional[Union[str, IO[bytes]]]) -> Optional[str]:
        text = self.to_functional(ontology)
        logger.info(f"Serializing {len(ontology)} axioms ({FUNCTIONAL_SYNTAX})")
        if destination is None:
            return text
        if isinstance(destination, str):
            with open(destination, "w", encoding="utf-8") as f:
                f.write(text)
        else:
            destination.write(text.encode("utf-8"))
        return None

    def _add_axiom(self, graph: Graph, axiom: Axiom):
        if isinstance(axiom, SubClassOf):
            graph.add((self._class_node(graph, axiom.sub_class), RDFS.subClassOf,
                       self._class_node(graph, axiom.super_class)))
        elif isinstance(axiom, EquivalentClasses):
            graph.add((self._class_node(graph, axiom.first), OWL.equivalentClass,
                       self._class_node(graph, axiom.second)))
        elif isinstance(axiom, SubObjectPropertyOf):
            graph.add((self._property_node(graph, axiom.sub_property), RDFS.subPropertyOf,
                       self._property_node(graph, axiom.super_property)))
        elif isinstance(axiom, SubPropertyChainOf):
            chain_node = BNode()
            Collection(graph, chain_node, [self._property_node(graph, p) for p in axiom.chain])
            graph.add((self._property_node(graph, axiom.super_property), OWL.propertyChainAxiom, chain_node))
        elif isinstance(axiom, TransitiveObjectProperty):
            graph.add((self._property_node(graph, axiom.property), RDF.type, OWL.TransitiveProperty))
        elif isinstance(axiom, LabelAnnotation):
            graph.add((self.sct[str(axiom.concept_id)], RDFS.label, Literal(axiom.label)))
        else:
            raise ValueError(f"Unsupported axiom type: {type(axiom).__name__}")

    def _property_node(self, graph: Graph, owl_property: ObjectProperty) -> URIRef:
        node = self.sct[str(owl_property.property_id)]
        graph.add((node, RDF.type, OWL.ObjectProperty))
        return node

    def _class_node(self, graph: Graph, expression: ClassExpression) -> Node:
        if isinstance(expression, NamedClass):
            node = self.sct[str(expression.concept_id)]
            graph.add((node, RDF.type, OWL.Class))
            return node

        if isinstance(expression, Thing):
            return OWL.Thing

        if isinstance(expression, ObjectSomeValuesFrom):
            node = BNode()
            graph.add((node, RDF.type, OWL.Restriction))
            graph.add((node, OWL.onProperty, self._property_node(graph, expression.property)))
            graph.add((node, OWL.someValuesFrom, self._class_node(graph, expression.filler)))
            return node

        if isinstance(expression, ObjectIntersectionOf):
            node = BNode()
            list_node = BNode()
            Collection(graph, list_node, [self._class_node(graph, o) for o in expression.sorted_operands()])
            graph.add((node, RDF.type, OWL.Class))
            graph.add((node, OWL.intersectionOf, list_node))
            return node

        raise ValueError(f"Unsupported class expression: {type(expression).__name__}")

    # ----------------------------------------------------------------- reading

    def parse(self, source: Optional[Union[str, IO[bytes]]] = None, data: Optional[str] = None,
              format: Optional[str] = None) -> Ontology:
        """Load an ontology from a file, stream or string."""
        graph = Graph()
        graph.parse(source=source, data=data, format=format)
        return self.from_graph(graph)

    def from_graph(self, graph: Graph) -> Ontology:
        """Read the axiom types this module writes out of an rdflib graph.

        Class axioms using other constructs, such as the data restrictions of
        concrete domains, are logged and skipped so that the property axioms
        of the document can still be read.

        Raises:
            ValueError: If a property IRI is not a SNOMED CT identifier.
        """
        ontology_node = next(iter(graph.subjects(RDF.type, OWL.Ontology)), None)
        ontology = Ontology()
        if ontology_node is not None:
            ontology.ontology_uri = str(ontology_node)
            version = graph.value(ontology_node, OWL.versionIRI)
            ontology.version_uri = str(version) if version is not None else None

        axioms = []
        skipped = 0
        for axiom_type, predicate in ((SubClassOf, RDFS.subClassOf), (EquivalentClasses, OWL.equivalentClass)):
            for subject, obj in graph.subject_objects(predicate):
                try:
                    axioms.append(axiom_type(self._read_class(graph, subject), self._read_class(graph, obj)))
                except ValueError as e:
                    logger.warning(f"Skipping {axiom_type.__name__} axiom on {subject}: {e}")
                    skipped += 1
        for subject, obj in graph.subject_objects(RDFS.subPropertyOf):
            axioms.append(SubObjectPropertyOf(self._read_property(subject), self._read_property(obj)))
        for subject, obj in graph.subject_objects(OWL.propertyChainAxiom):
            chain = tuple(self._read_property(p) for p in Collection(graph, obj))
            axioms.append(SubPropertyChainOf(chain, self._read_property(subject)))
        for subject in graph.subjects(RDF.type, OWL.TransitiveProperty):
            axioms.append(TransitiveObjectProperty(self._read_property(subject)))
        for subject, obj in graph.subject_objects(RDFS.label):
            if isinstance(subject, URIRef) and str(subject).startswith(str(self.sct)):
                axioms.append(LabelAnnotation(self._short_form(subject), str(obj)))

        # rdflib does not preserve triple order
        ontology.add_axioms(sorted(axioms, key=str))
        logger.info(f"Read {len(ontology)} axioms from {len(graph)} triples ({skipped} class axioms skipped)")
        return ontology

    def _read_property(self, node: Node) -> ObjectProperty:
        return ObjectProperty(self._short_form(node))

    def _read_class(self, graph: Graph, node: Node) -> ClassExpression:
        if node == OWL.Thing:
            return Thing()
        if isinstance(node, URIRef):
            return NamedClass(self._short_form(node))

        operand_list = graph.value(node, OWL.intersectionOf)
        if operand_list is not None:
            return ObjectIntersectionOf(frozenset(self._read_class(graph, o) for o in Collection(graph, operand_list)))

        on_property = graph.value(node, OWL.onProperty)
        filler = graph.value(node, OWL.someValuesFrom)
        if on_property is not None and filler is not None:
            return ObjectSomeValuesFrom(self._read_property(on_property), self._read_class(graph, filler))

        raise ValueError(f"Unsupported class expression node: {node}")

    def _short_form(self, node: Node) -> int:
        iri = str(node)
        short_form = iri[len(str(self.sct)):] if iri.startswith(str(self.sct)) else iri.rsplit("/", 1)[-1].rsplit("#", 1)[-1]
        if short_form == ROLE_GROUP_OUTDATED_CONSTANT:
            return Concepts.ROLE_GROUP
        if not short_form.isdigit():
            raise ValueError(f"Not a SNOMED CT identifier: {iri}")
        return int(short_form)
