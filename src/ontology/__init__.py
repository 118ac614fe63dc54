"""
Ontology Construction Module

This module converts a SNOMED CT taxonomy into OWL axioms: one class axiom per
concept built from its stated relationships and role groups, sub-property
axioms for the attribute hierarchy and label annotations. It also recovers
property chains from a built or loaded ontology.

Public Interface:
- OntologyService: High-level service for all ontology operations
- OntologyConfig: Build and serialization settings

Private Components:
- AxiomFactory: Expression and axiom construction
- OntologyGraphRenderer: rdflib rendering and loading
- Domain models: class expressions, axioms, PropertyChain, etc.
"""

from .config import OntologyConfig
from .service import OntologyService, OntologyServiceError

__all__ = ["OntologyService", "OntologyServiceError", "OntologyConfig"]
