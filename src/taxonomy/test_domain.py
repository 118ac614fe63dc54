"""
Unit test for the taxonomy domain models.

HOW TO RUN:
The virtual environment .venv should be activated before running the tests.

From the src directory, run:
    python -m pytest taxonomy/test_domain.py
"""

import dataclasses

import pytest

from .constants import Concepts
from .domain import Characteristic, Relationship, to_sctid


def test_relationship_defaults():
    """Test Relationship default values."""
    print("Testing Relationship defaults...")

    relationship = Relationship(relationship_id=1, source_id=10, destination_id=20, type_id=Concepts.IS_A)

    assert relationship.group == 0
    assert relationship.characteristic == Characteristic.STATED
    assert relationship.effective_time is None
    assert relationship.module_id is None
    assert relationship.is_a

    print("✓ Relationship defaults working correctly")


def test_relationship_is_immutable():
    """Test that relationships are immutable value records."""
    relationship = Relationship(1, 10, 20, 363698007, group=1)

    with pytest.raises(dataclasses.FrozenInstanceError):
        relationship.group = 2

    assert not relationship.is_a
    assert relationship == Relationship(1, 10, 20, 363698007, group=1)
    assert len({relationship, Relationship(1, 10, 20, 363698007, group=1)}) == 1


def test_same_identity_ignores_mutable_fields():
    """Test identity comparison over the immutable fields only."""
    original = Relationship(1, 10, 20, 363698007, group=1, effective_time=20200131)
    regrouped = Relationship(1, 10, 20, 363698007, group=3, effective_time=20210131)
    moved = Relationship(1, 10, 21, 363698007, group=1)

    assert original.same_identity(regrouped)
    assert not original.same_identity(moved)


def test_to_sctid():
    """Test identifier normalisation."""
    assert to_sctid("138875005") == Concepts.ROOT
    assert to_sctid(" 116680003 ") == Concepts.IS_A
    assert to_sctid(609096000) == Concepts.ROLE_GROUP

    with pytest.raises(ValueError):
        to_sctid("not-an-id")


def test_characteristic_values():
    """Test characteristic lookup by value."""
    assert Characteristic("stated") is Characteristic.STATED
    assert Characteristic("inferred") is Characteristic.INFERRED
