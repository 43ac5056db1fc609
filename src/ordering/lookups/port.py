"""Catalog and address lookup ports (abstract interfaces).

Ordering only reads products and addresses; both are owned by other bounded
contexts. These ports define the narrow read contracts so the split workflow
can be exercised against in-memory adapters in development and tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ProductSnapshot:
    """Read-only view of a catalog product."""

    product_id: str
    name: str
    price: float


@dataclass(frozen=True)
class AddressSnapshot:
    """Read-only view of a customer shipping address."""

    address_id: str
    street: str
    city: str
    postal_code: str
    country: str
    state: str | None = None

    def as_dict(self) -> dict:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
        }


class ProductCatalog(ABC):
    """Resolves product ids to snapshots."""

    @abstractmethod
    def get_product(self, product_id: str) -> ProductSnapshot | None:
        """Return the product, or None when the catalog does not know it."""
        ...


class AddressBook(ABC):
    """Resolves address ids to shipping address snapshots."""

    @abstractmethod
    def get_address(self, address_id: str) -> AddressSnapshot | None:
        """Return the address, or None when it does not exist."""
        ...
