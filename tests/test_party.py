"""Tests for the party service."""

import pytest

from finimport.domain.errors import NotFoundError
from finimport.domain.party import PartyService


@pytest.fixture
def party_service(temp_db, import_context):
    return PartyService(temp_db)


def test_set_default_creates_party(party_service, import_context):
    """Test that an unseen party is created with the default."""
    party = party_service.set_default_category("CORNER STORE", "Groceries")

    assert party.name == "CORNER STORE"
    assert party.default_category_id == import_context.category_id("Groceries")
    assert [p.name for p in party_service.list_parties()] == ["CORNER STORE"]


def test_set_default_updates_party(party_service, import_context):
    """Test changing the default of an existing party."""
    party_service.set_default_category("CORNER STORE", "Groceries")
    party = party_service.set_default_category("CORNER STORE", "Home Supplies")

    assert party.default_category_id == import_context.category_id("Home Supplies")
    assert len(party_service.list_parties()) == 1


def test_unknown_category(party_service):
    """Test that an unknown category is rejected."""
    with pytest.raises(NotFoundError, match="Category 'Gadgets' not found"):
        party_service.set_default_category("CORNER STORE", "Gadgets")
    assert party_service.get_party("CORNER STORE") is None
