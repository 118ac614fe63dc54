"""
Configuration for ontology construction and serialization.
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from dotenv import load_dotenv

from taxonomy.constants import Concepts, DEFAULT_NEVER_GROUPED_ROLE_IDS

from .domain import SNOMED_CORE_COMPONENTS_URI, SNOMED_INTERNATIONAL_EDITION_URI


@dataclass
class OntologyConfig:
    """Configuration for building and saving a SNOMED CT ontology."""
    # Ontology identity
    ontology_uri: str = SNOMED_INTERNATIONAL_EDITION_URI
    version_date: Optional[str] = None  # e.g. "20250131", appended as <uri>/version/<date>

    # Serialization
    default_prefix: str = SNOMED_CORE_COMPONENTS_URI
    output_format: str = "turtle"  # rdflib serializer name or "functional"

    # Role grouping
    content_type_id: int = Concepts.ALL_PRECOORDINATED_CONTENT
    never_grouped_role_ids: FrozenSet[int] = field(default_factory=lambda: DEFAULT_NEVER_GROUPED_ROLE_IDS)

    @classmethod
    def from_env(cls) -> "OntologyConfig":
        """Build a configuration from environment variables (and a .env file if present)."""
        load_dotenv()
        config = cls()
        config.ontology_uri = os.getenv("SNOMED_ONTOLOGY_URI") or config.ontology_uri
        config.version_date = os.getenv("SNOMED_VERSION_DATE") or config.version_date
        config.output_format = os.getenv("SNOMED_OUTPUT_FORMAT") or config.output_format
        return config
