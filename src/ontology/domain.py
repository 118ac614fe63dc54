"""
Domain models for the ontology module.

Class expressions and axioms are immutable, hashable values so that axiom sets
deduplicate structurally. ``str()`` of any of them gives the OWL functional
syntax form, with ``:`` standing for the SNOMED CT core namespace.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple, Type, TypeVar, Union

from taxonomy.domain import Relationship


SNOMED_CORE_COMPONENTS_URI = "http://snomed.info/id/"
SNOMED_INTERNATIONAL_EDITION_URI = "http://snomed.info/sct/900000000000207008"
ONTOLOGY_URI_VERSION_POSTFIX = "/version/"


# --------------------------------------------------------------------- expressions

@dataclass(frozen=True)
class NamedClass:
    """A SNOMED CT concept used as a class."""

    concept_id: int

    def __str__(self) -> str:
        return f":{self.concept_id}"


@dataclass(frozen=True)
class Thing:
    """The universal top concept."""

    def __str__(self) -> str:
        return "owl:Thing"


@dataclass(frozen=True)
class ObjectProperty:
    """A SNOMED CT attribute concept used as an object property."""

    property_id: int

    def __str__(self) -> str:
        return f":{self.property_id}"


@dataclass(frozen=True)
class ObjectSomeValuesFrom:
    """Existential restriction: some ``property`` to ``filler``."""

    property: ObjectProperty
    filler: "ClassExpression"

    def __str__(self) -> str:
        return f"ObjectSomeValuesFrom({self.property} {self.filler})"


@dataclass(frozen=True)
class ObjectIntersectionOf:
    """Conjunction of two or more class expressions."""

    operands: FrozenSet["ClassExpression"]

    def sorted_operands(self) -> List["ClassExpression"]:
        return sorted(self.operands, key=str)

    def __str__(self) -> str:
        return "ObjectIntersectionOf(" + " ".join(str(o) for o in self.sorted_operands()) + ")"


ClassExpression = Union[NamedClass, Thing, ObjectSomeValuesFrom, ObjectIntersectionOf]


# -------------------------------------------------------------------------- axioms

@dataclass(frozen=True)
class SubClassOf:
    sub_class: ClassExpression
    super_class: ClassExpression

    def __str__(self) -> str:
        return f"SubClassOf({self.sub_class} {self.super_class})"


@dataclass(frozen=True)
class EquivalentClasses:
    first: ClassExpression
    second: ClassExpression

    def __str__(self) -> str:
        return f"EquivalentClasses({self.first} {self.second})"


@dataclass(frozen=True)
class SubObjectPropertyOf:
    sub_property: ObjectProperty
    super_property: ObjectProperty

    def __str__(self) -> str:
        return f"SubObjectPropertyOf({self.sub_property} {self.super_property})"


@dataclass(frozen=True)
class SubPropertyChainOf:
    chain: Tuple[ObjectProperty, ...]
    super_property: ObjectProperty

    def __str__(self) -> str:
        chain = " ".join(str(p) for p in self.chain)
        return f"SubObjectPropertyOf(ObjectPropertyChain({chain}) {self.super_property})"


@dataclass(frozen=True)
class TransitiveObjectProperty:
    property: ObjectProperty

    def __str__(self) -> str:
        return f"TransitiveObjectProperty({self.property})"


@dataclass(frozen=True)
class LabelAnnotation:
    """rdfs:label annotation assertion on a concept."""

    concept_id: int
    label: str

    def __str__(self) -> str:
        escaped = self.label.replace("\\", "\\\\").replace('"', '\\"')
        return f'AnnotationAssertion(rdfs:label :{self.concept_id} "{escaped}")'


Axiom = Union[SubClassOf, EquivalentClasses, SubObjectPropertyOf, SubPropertyChainOf,
              TransitiveObjectProperty, LabelAnnotation]

A = TypeVar("A")


@dataclass
class AxiomRepresentation:
    """Both sides of a class axiom before conversion.

    Each side is either a named concept or a map of role group number to the
    relationships stated in that group.
    """

    primitive: bool = True
    left_hand_side_named_concept: Optional[int] = None
    left_hand_side_relationships: Optional[Dict[int, List[Relationship]]] = None
    right_hand_side_named_concept: Optional[int] = None
    right_hand_side_relationships: Optional[Dict[int, List[Relationship]]] = None


@dataclass(frozen=True)
class PropertyChain:
    """Role composition ``source_type o destination_type -> inferred_type``."""

    source_type: int
    destination_type: int
    inferred_type: int


class Ontology:
    """An ontology identifier plus an insertion-ordered set of axioms."""

    def __init__(self, ontology_uri: str = SNOMED_INTERNATIONAL_EDITION_URI,
                 version_uri: Optional[str] = None, axioms: Iterable[Axiom] = ()):
        self.ontology_uri = ontology_uri
        self.version_uri = version_uri
        self._axioms: Dict[Axiom, None] = dict.fromkeys(axioms)

    def add_axiom(self, axiom: Axiom) -> None:
        self._axioms[axiom] = None

    def add_axioms(self, axioms: Iterable[Axiom]) -> None:
        for axiom in axioms:
            self._axioms[axiom] = None

    @property
    def axioms(self) -> List[Axiom]:
        return list(self._axioms)

    def get_axioms(self, axiom_type: Type[A]) -> List[A]:
        return [a for a in self._axioms if isinstance(a, axiom_type)]

    def __contains__(self, axiom: object) -> bool:
        return axiom in self._axioms

    def __iter__(self) -> Iterator[Axiom]:
        return iter(list(self._axioms))

    def __len__(self) -> int:
        return len(self._axioms)
