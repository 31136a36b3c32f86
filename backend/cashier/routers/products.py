from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response

from cashier.models import MAX_INT
from cashier.schemas.product import ProductIn, ProductOut
from cashier.services.deps import get_product_service, require_api_key
from cashier.services.product_service import ProductService

router = APIRouter(prefix="/api/product", tags=["products"], dependencies=[Depends(require_api_key)])

ProductId = Annotated[int, Path(gt=0, le=MAX_INT)]


@router.get("", response_model=list[ProductOut])
async def list_products(name: str | None = None, service: ProductService = Depends(get_product_service)):
    return await service.list_products(name)


@router.post("", response_model=ProductOut, status_code=201)
async def create_product(data: ProductIn, service: ProductService = Depends(get_product_service)):
    return await service.create_product(data)


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: ProductId, service: ProductService = Depends(get_product_service)):
    return await service.get_product(product_id)


@router.put("/{product_id}", response_model=ProductOut)
async def update_product(product_id: ProductId, data: ProductIn, service: ProductService = Depends(get_product_service)):
    return await service.update_product(product_id, data)


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: ProductId, service: ProductService = Depends(get_product_service)):
    await service.delete_product(product_id)
    return Response(status_code=204)
