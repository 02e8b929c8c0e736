"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, in-memory)
live in the infrastructure layer.

All methods are coroutines: a handler suspends on them while the
backing store does its I/O.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Price, ProductCategory, ProductId, Stock
from storefront.domain.repository.criteria import ProductSearchCriteria


class ProductRepository(ABC):

    @abstractmethod
    async def find_by_id(self, product_id: ProductId) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    async def find_by_ids(self, product_ids: list[ProductId]) -> list[Product]:
        """Return the products that exist among ``product_ids``, in that order."""

    @abstractmethod
    async def find_by_criteria(self, criteria: ProductSearchCriteria) -> list[Product]:
        """Return one page of products matching the filters, sorted."""

    @abstractmethod
    async def next_id(self) -> ProductId:
        """The ID the next saved product would receive."""

    @abstractmethod
    async def save(self, product: Product) -> Product:
        """Insert a new product (unsaved id) and return it with its assigned ID."""

    @abstractmethod
    async def update(self, product: Product) -> Product:
        """Replace a stored product.  Raises EntityNotFoundError if absent.

        The whole record is overwritten, stock included, so a concurrent
        stock change can be lost.  Catalog maintenance goes through the
        field-targeted writes below instead.
        """

    @abstractmethod
    async def update_price(self, product_id: ProductId, price: Price) -> Product:
        """Atomically change only the price of the stored product."""

    @abstractmethod
    async def set_active(self, product_id: ProductId, active: bool) -> Product:
        """Atomically change only the active flag of the stored product."""

    @abstractmethod
    async def set_stock(self, product_id: ProductId, stock: Stock) -> Product:
        """Atomically overwrite the stock level of the stored product.

        All three re-read the stored record under the repository's write
        guard and raise EntityNotFoundError if it is gone.
        """

    @abstractmethod
    async def exists_by_id(self, product_id: ProductId) -> bool:
        """True if a product with this ID is stored."""

    @abstractmethod
    async def count(self) -> int:
        """Total number of products."""

    @abstractmethod
    async def count_active(self) -> int:
        """Number of active products."""

    @abstractmethod
    async def count_in_stock(self) -> int:
        """Number of products with stock above zero."""

    @abstractmethod
    async def count_by_category(self, category: ProductCategory) -> int:
        """Number of products in ``category``."""

    @abstractmethod
    async def decrement_stock_if_sufficient(
        self, product_id: ProductId, quantity: int
    ) -> bool:
        """Atomically remove ``quantity`` units if at least that many remain.

        Returns False (and changes nothing) when the product is missing,
        inactive or short of stock.  The check and the write must not be
        separable by another caller.
        """

    @abstractmethod
    async def increase_stock(self, product_id: ProductId, quantity: int) -> None:
        """Atomically add ``quantity`` units back (restock / compensation)."""
