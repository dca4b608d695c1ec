"""Product API router with CRUD operations.

Each id-addressed or state-changing route declares its validation rules in
the ``ValidateRequest`` dependency; the gate runs them all before the
handler body is entered.
"""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.catalog.api.http.deps import get_product_repository
from src.catalog.api.http.middleware.validation_gate import ValidateRequest
from src.catalog.api.http.validation.rules import (
    AVAILABILITY_IS_BOOLEAN,
    ID_IS_INT,
    NAME_NOT_EMPTY,
    PRICE_IS_POSITIVE,
    RequestInput,
)
from src.catalog.core.exceptions import ProductNotFoundError
from src.catalog.entities.service.product import (
    Product,
    ProductCreate,
    ProductRepository,
    ProductUpdate,
)

router = APIRouter(tags=["Products"])


class ProductResponse(BaseModel):
    data: Product


class ProductListResponse(BaseModel):
    data: list[Product]


class DeletedResponse(BaseModel):
    data: str


def _product_id(validated: RequestInput) -> int:
    return int(validated.params["id"])


@router.get("", response_model=ProductListResponse)
def get_products(
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductListResponse:
    """Return every product ordered by id."""
    return ProductListResponse(data=repository.list_all(order_by="id"))


@router.get("/{id}", response_model=ProductResponse)
def get_product_by_id(
    validated: RequestInput = Depends(ValidateRequest(ID_IS_INT)),
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """Return a product based on its unique id."""
    product_id = _product_id(validated)
    product = repository.get(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return ProductResponse(data=product)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    validated: RequestInput = Depends(ValidateRequest(NAME_NOT_EMPTY, PRICE_IS_POSITIVE)),
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """Create a new product; availability starts out true."""
    data = ProductCreate(name=validated.body["name"], price=validated.body["price"])
    return ProductResponse(data=repository.create(data))


@router.put("/{id}", response_model=ProductResponse)
def update_product(
    validated: RequestInput = Depends(
        ValidateRequest(
            ID_IS_INT, NAME_NOT_EMPTY, PRICE_IS_POSITIVE, AVAILABILITY_IS_BOOLEAN
        )
    ),
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """Replace name, price and availability of a product."""
    product_id = _product_id(validated)
    changes = ProductUpdate(
        name=validated.body["name"],
        price=validated.body["price"],
        availability=validated.body["availability"],
    )
    product = repository.update(product_id, changes.model_dump())
    if product is None:
        raise ProductNotFoundError(product_id)
    return ProductResponse(data=product)


@router.patch("/{id}", response_model=ProductResponse)
def update_availability(
    validated: RequestInput = Depends(ValidateRequest(ID_IS_INT)),
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """Flip the availability of a product. The request body is ignored."""
    product_id = _product_id(validated)
    product = repository.toggle_availability(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return ProductResponse(data=product)


@router.delete("/{id}", response_model=DeletedResponse)
def delete_product(
    validated: RequestInput = Depends(ValidateRequest(ID_IS_INT)),
    repository: ProductRepository = Depends(get_product_repository),
) -> DeletedResponse:
    """Permanently delete a product."""
    product_id = _product_id(validated)
    if not repository.delete(product_id):
        raise ProductNotFoundError(product_id)
    return DeletedResponse(data="Product deleted")
