"""In-memory catalog and address book adapters for development and testing."""

from ordering.lookups.port import AddressBook, AddressSnapshot, ProductCatalog, ProductSnapshot


class InMemoryProductCatalog(ProductCatalog):
    def __init__(self) -> None:
        self._products: dict[str, ProductSnapshot] = {}

    def register(self, product_id: str, name: str, price: float) -> ProductSnapshot:
        product = ProductSnapshot(product_id=str(product_id), name=name, price=price)
        self._products[product.product_id] = product
        return product

    def remove(self, product_id: str) -> None:
        self._products.pop(str(product_id), None)

    def get_product(self, product_id: str) -> ProductSnapshot | None:
        return self._products.get(str(product_id))


class InMemoryAddressBook(AddressBook):
    def __init__(self) -> None:
        self._addresses: dict[str, AddressSnapshot] = {}

    def register(self, address_id: str, street: str, city: str, postal_code: str, country: str, state=None):
        address = AddressSnapshot(
            address_id=str(address_id),
            street=street,
            city=city,
            state=state,
            postal_code=postal_code,
            country=country,
        )
        self._addresses[address.address_id] = address
        return address

    def get_address(self, address_id: str) -> AddressSnapshot | None:
        return self._addresses.get(str(address_id))
