"""Party (counterparty) domain service."""

from typing import Optional

from finimport.database.base import Database
from finimport.domain.entities import Party
from finimport.domain.errors import NotFoundError, category_not_found


class PartyService:
    """Service for managing counterparties."""

    def __init__(self, db: Database):
        """Initialize party service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_party(self, name: str) -> Optional[Party]:
        return self.db.get_party_by_name(name)

    def list_parties(self) -> list[Party]:
        return self.db.list_parties()

    def set_default_category(self, name: str, category_name: str) -> Party:
        """Set the category used for a party's transactions when nothing else applies.

        The party is created if it has not been seen yet.

        Args:
            name: Party name
            category_name: Internal category name

        Returns:
            The updated party

        Raises:
            NotFoundError: If the category does not exist
        """
        category = self.db.get_category_by_name(category_name)
        if category is None:
            raise NotFoundError(category_not_found(category_name))

        party = self.db.get_party_by_name(name)
        if party is None:
            self.db.create_party(name=name, default_category_id=category.id)
        else:
            self.db.update_party_default_category(party.id, category.id)
        return self.db.get_party_by_name(name)
