"""
Factory for class expressions and axioms.

This is the fixed construction vocabulary the axiom builder emits into.
"""

from typing import Iterable, Sequence

from .domain import (
    ClassExpression, EquivalentClasses, LabelAnnotation, NamedClass, ObjectIntersectionOf,
    ObjectProperty, ObjectSomeValuesFrom, SubClassOf, SubObjectPropertyOf, SubPropertyChainOf,
    Thing, TransitiveObjectProperty,
)


class AxiomFactory:
    """Creates expression and axiom values from SNOMED CT ids."""

    def get_owl_class(self, concept_id: int) -> NamedClass:
        return NamedClass(int(concept_id))

    def get_owl_thing(self) -> Thing:
        return Thing()

    def get_owl_object_property(self, property_id: int) -> ObjectProperty:
        return ObjectProperty(int(property_id))

    def get_owl_object_some_values_from(self, owl_property: ObjectProperty,
                                        filler: ClassExpression) -> ObjectSomeValuesFrom:
        return ObjectSomeValuesFrom(owl_property, filler)

    def get_owl_object_intersection_of(self, operands: Iterable[ClassExpression]) -> ObjectIntersectionOf:
        operands = frozenset(operands)
        if len(operands) < 2:
            raise ValueError(f"An intersection needs at least two distinct operands, got {len(operands)}")
        return ObjectIntersectionOf(operands)

    def get_owl_sub_class_of_axiom(self, sub_class: ClassExpression, super_class: ClassExpression) -> SubClassOf:
        return SubClassOf(sub_class, super_class)

    def get_owl_equivalent_classes_axiom(self, first: ClassExpression,
                                         second: ClassExpression) -> EquivalentClasses:
        return EquivalentClasses(first, second)

    def get_owl_sub_object_property_of_axiom(self, sub_property: ObjectProperty,
                                             super_property: ObjectProperty) -> SubObjectPropertyOf:
        return SubObjectPropertyOf(sub_property, super_property)

    def get_owl_sub_property_chain_of_axiom(self, chain: Sequence[ObjectProperty],
                                            super_property: ObjectProperty) -> SubPropertyChainOf:
        return SubPropertyChainOf(tuple(chain), super_property)

    def get_owl_transitive_object_property_axiom(self, owl_property: ObjectProperty) -> TransitiveObjectProperty:
        return TransitiveObjectProperty(owl_property)

    def get_owl_label_annotation_axiom(self, concept_id: int, label: str) -> LabelAnnotation:
        return LabelAnnotation(int(concept_id), label)
