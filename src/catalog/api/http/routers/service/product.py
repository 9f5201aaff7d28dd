"""Product API router with CRUD operations."""

from typing import Literal

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from src.catalog.api.http.deps import get_current_claims, get_product_catalog_service
from src.catalog.core.services import ImageUpload, ProductCatalogService
from src.catalog.entities.service.product import (
    ProductCreate,
    ProductQuery,
    ProductRead,
    ProductUpdate,
)

router = APIRouter(dependencies=[Depends(get_current_claims)])

_OPTIONAL_NUMBERS = ("volume", "weight")


def _form_fields(**fields: str | None) -> dict[str, str]:
    """Keep submitted form fields; blank optional numbers count as not submitted."""
    return {
        key: value
        for key, value in fields.items()
        if value is not None and not (key in _OPTIONAL_NUMBERS and value.strip() == "")
    }


def _validation_error(exc: ValidationError) -> RequestValidationError:
    errors = [
        {**error, "loc": ("body", *error["loc"])}
        for error in exc.errors(include_url=False, include_context=False)
    ]
    return RequestValidationError(errors)


def _image_upload(image: UploadFile | None) -> ImageUpload | None:
    # Browsers submit an empty part when no file was chosen
    if image is None or not image.filename:
        return None
    return ImageUpload(
        data=image.file.read(),
        filename=image.filename,
        content_type=image.content_type,
    )


def product_create_form(
    name: str = Form(...),
    category: str = Form(...),
    price: str = Form(...),
    stock: str = Form(...),
    volume: str | None = Form(None),
    weight: str | None = Form(None),
) -> ProductCreate:
    fields = _form_fields(
        name=name, category=category, price=price, stock=stock, volume=volume, weight=weight
    )
    try:
        return ProductCreate.model_validate(fields)
    except ValidationError as exc:
        raise _validation_error(exc) from exc


def product_update_form(
    name: str | None = Form(None),
    category: str | None = Form(None),
    price: str | None = Form(None),
    stock: str | None = Form(None),
    volume: str | None = Form(None),
    weight: str | None = Form(None),
) -> ProductUpdate:
    fields = _form_fields(
        name=name, category=category, price=price, stock=stock, volume=volume, weight=weight
    )
    try:
        return ProductUpdate.model_validate(fields)
    except ValidationError as exc:
        raise _validation_error(exc) from exc


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate = Depends(product_create_form),
    image: UploadFile | None = File(None),
    catalog: ProductCatalogService = Depends(get_product_catalog_service),
) -> ProductRead:
    """Create a new product with an optional image."""
    return catalog.create(data, _image_upload(image))


@router.get("", response_model=list[ProductRead])
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = Query(None),
    category: str | None = Query(None),
    sort_by: Literal["name", "price"] = Query("name", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("asc", alias="sortOrder"),
    catalog: ProductCatalogService = Depends(get_product_catalog_service),
) -> list[ProductRead]:
    """List products with search, category filter, sorting and pagination."""
    query = ProductQuery(
        page=page,
        limit=limit,
        search=search or None,
        category=category or None,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return catalog.find_all(query)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: int,
    catalog: ProductCatalogService = Depends(get_product_catalog_service),
) -> ProductRead:
    """Get a product by ID."""
    product = catalog.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.put("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: int,
    data: ProductUpdate = Depends(product_update_form),
    image: UploadFile | None = File(None),
    catalog: ProductCatalogService = Depends(get_product_catalog_service),
) -> ProductRead:
    """Update any subset of a product's fields and optionally replace its image."""
    return catalog.update(product_id, data, _image_upload(image))


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    catalog: ProductCatalogService = Depends(get_product_catalog_service),
) -> None:
    """Delete a product and its image."""
    catalog.remove(product_id)
