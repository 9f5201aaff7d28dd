"""Product catalog service.

Couples each product row to at most one image object in the object store.
The database and the object store never share a transaction, so every write
orders its side effects to avoid dangling keys and compensates by deleting a
freshly uploaded object when the row write that should reference it fails.
"""

from dataclasses import dataclass

from loguru import logger
from sqlmodel import Session

from src.catalog.core.errors import CatalogError, NotFoundError
from src.catalog.core.services.storage.storage_service import StorageService
from src.catalog.entities.service.product import (
    Product,
    ProductCreate,
    ProductQuery,
    ProductRead,
    ProductRepository,
    ProductUpdate,
)

PRODUCT_IMAGE_FOLDER = "products"


@dataclass(frozen=True)
class ImageUpload:
    """An image received from a client, independent of the transport."""

    data: bytes
    filename: str
    content_type: str | None = None


class ProductCatalogService:
    def __init__(self, db_session: Session, storage: StorageService):
        self._db_session = db_session
        self._repository = ProductRepository(db_session)
        self._storage = storage

    def create(self, data: ProductCreate, image: ImageUpload | None = None) -> ProductRead:
        """Create a product, uploading its image first when one is given."""
        image_key = self._upload(image) if image else None

        try:
            product = self._repository.create(data, image_key=image_key)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            if image_key:
                self._discard_upload(image_key)
            raise

        logger.info("Created product {}", product.id)
        return self._with_image_url(product)

    def find_all(self, query: ProductQuery | None = None) -> list[ProductRead]:
        products = self._repository.find_all(query or ProductQuery())
        return [self._with_image_url(product) for product in products]

    def get(self, product_id: int) -> ProductRead | None:
        product = self._repository.get(product_id)
        return self._with_image_url(product) if product else None

    def update(
        self,
        product_id: int,
        data: ProductUpdate,
        image: ImageUpload | None = None,
    ) -> ProductRead:
        """Apply a partial update, replacing the image when one is given.

        The new object is uploaded and referenced before the previous one is
        deleted, so a failure never leaves the row pointing at a missing object.

        Raises:
            NotFoundError: If the product does not exist; nothing is uploaded
        """
        current = self._repository.get(product_id)
        if current is None:
            raise NotFoundError("Product not found")

        new_key = self._upload(image) if image else None

        try:
            updated = self._repository.update(product_id, data, image_key=new_key)
            if updated is None:
                # Deleted between the read above and this write
                raise NotFoundError("Product not found")
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            if new_key:
                self._discard_upload(new_key)
            raise

        if new_key and current.image_key:
            self._delete_previous_image(current.image_key)

        logger.info("Updated product {}", product_id)
        return self._with_image_url(updated)

    def remove(self, product_id: int) -> None:
        """Delete a product and its image object.

        Raises:
            NotFoundError: If the product does not exist
        """
        product = self._repository.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        if product.image_key:
            self._storage.delete_file(product.image_key)

        self._repository.delete(product_id)
        self._db_session.commit()
        logger.info("Deleted product {}", product_id)

    def find_orphaned_keys(self) -> list[str]:
        """Image objects that no product references any more."""
        referenced = self._repository.image_keys()
        stored = self._storage.list_files(prefix=f"{PRODUCT_IMAGE_FOLDER}/")
        return sorted(key for key in stored if key not in referenced)

    def _with_image_url(self, product: Product) -> ProductRead:
        image_url = (
            self._storage.get_file_url(product.image_key) if product.image_key else None
        )
        return ProductRead(**product.model_dump(), image_url=image_url)

    def _upload(self, image: ImageUpload) -> str:
        return self._storage.upload_file(
            image.data,
            image.content_type,
            image.filename,
            folder=PRODUCT_IMAGE_FOLDER,
        )

    def _discard_upload(self, key: str) -> None:
        try:
            self._storage.delete_file(key)
        except CatalogError:
            logger.warning("Could not remove orphaned upload {}", key)

    def _delete_previous_image(self, key: str) -> None:
        # The row already points at the new image; the old object is now an orphan
        try:
            self._storage.delete_file(key)
        except CatalogError:
            logger.warning("Could not remove replaced image {}", key)
