"""
Well-known SNOMED CT concept identifiers used by the taxonomy and ontology modules.
"""

from typing import FrozenSet


class Concepts:
    """SNOMED CT concept ids referenced by the conversion logic."""

    ROOT = 138875005                       # SNOMED CT Concept
    IS_A = 116680003
    CONCEPT_MODEL_ATTRIBUTE = 410662002
    ROLE_GROUP = 609096000

    # Attributes that are classically never grouped
    PART_OF = 123005000
    LATERALITY = 272741003
    HAS_ACTIVE_INGREDIENT = 127489000
    HAS_DOSE_FORM = 411116001

    # Metadata
    STATED_RELATIONSHIP = 900000000000010007
    INFERRED_RELATIONSHIP = 900000000000011006
    EXISTENTIAL_RESTRICTION_MODIFIER = 900000000000451002
    FULLY_DEFINED = 900000000000073002
    PRIMITIVE = 900000000000074008

    # MRCM content types
    ALL_SNOMED_CT_CONTENT = 723593002
    ALL_PRECOORDINATED_CONTENT = 723594008


DEFAULT_NEVER_GROUPED_ROLE_IDS: FrozenSet[int] = frozenset({
    Concepts.PART_OF,
    Concepts.LATERALITY,
    Concepts.HAS_ACTIVE_INGREDIENT,
    Concepts.HAS_DOSE_FORM,
})
