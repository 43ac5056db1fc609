"""Lookup adapter factory.

Provides get_*/set_*/reset_* accessors to swap implementations:
- In-memory adapters for development and testing (default)
- Service-backed adapters wired at application start-up in production
"""

from ordering.lookups.in_memory import InMemoryAddressBook, InMemoryProductCatalog
from ordering.lookups.port import AddressBook, ProductCatalog

_current_catalog: ProductCatalog | None = None
_current_address_book: AddressBook | None = None


def get_catalog() -> ProductCatalog:
    """Return the current product catalog. Defaults to an empty in-memory catalog."""
    global _current_catalog
    if _current_catalog is None:
        _current_catalog = InMemoryProductCatalog()
    return _current_catalog


def set_catalog(catalog: ProductCatalog) -> None:
    global _current_catalog
    _current_catalog = catalog


def get_address_book() -> AddressBook:
    """Return the current address book. Defaults to an empty in-memory address book."""
    global _current_address_book
    if _current_address_book is None:
        _current_address_book = InMemoryAddressBook()
    return _current_address_book


def set_address_book(address_book: AddressBook) -> None:
    global _current_address_book
    _current_address_book = address_book


def reset_lookups() -> None:
    """Reset to default adapters."""
    global _current_catalog, _current_address_book
    _current_catalog = None
    _current_address_book = None
