"""
Unit test for the ontology configuration.

HOW TO RUN:
The virtual environment .venv should be activated before running the tests.

From the src directory, run:
    python -m pytest ontology/test_config.py
"""

from taxonomy.constants import Concepts, DEFAULT_NEVER_GROUPED_ROLE_IDS

from .config import OntologyConfig


def test_config_defaults():
    """Test default configuration values."""
    config = OntologyConfig()

    assert config.ontology_uri == "http://snomed.info/sct/900000000000207008"
    assert config.version_date is None
    assert config.default_prefix == "http://snomed.info/id/"
    assert config.output_format == "turtle"
    assert config.content_type_id == Concepts.ALL_PRECOORDINATED_CONTENT
    assert config.never_grouped_role_ids == DEFAULT_NEVER_GROUPED_ROLE_IDS


def test_config_from_env(monkeypatch, tmp_path):
    """Test reading configuration from the environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SNOMED_ONTOLOGY_URI", "http://snomed.info/sct/45991000052106")
    monkeypatch.setenv("SNOMED_VERSION_DATE", "20250131")
    monkeypatch.setenv("SNOMED_OUTPUT_FORMAT", "xml")

    config = OntologyConfig.from_env()

    assert config.ontology_uri == "http://snomed.info/sct/45991000052106"
    assert config.version_date == "20250131"
    assert config.output_format == "xml"


def test_config_from_env_defaults(monkeypatch, tmp_path):
    """Test that unset variables keep the defaults."""
    monkeypatch.chdir(tmp_path)
    for name in ("SNOMED_ONTOLOGY_URI", "SNOMED_VERSION_DATE", "SNOMED_OUTPUT_FORMAT"):
        monkeypatch.delenv(name, raising=False)

    config = OntologyConfig.from_env()

    assert config == OntologyConfig()
