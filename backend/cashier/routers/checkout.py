from fastapi import APIRouter, Depends

from cashier.schemas.transaction import CheckoutRequest, TransactionOut
from cashier.services.checkout_service import CheckoutService
from cashier.services.deps import get_checkout_service, require_api_key

router = APIRouter(prefix="/api", tags=["checkout"], dependencies=[Depends(require_api_key)])


@router.post("/checkout", response_model=TransactionOut, status_code=201)
async def checkout(request: CheckoutRequest, service: CheckoutService = Depends(get_checkout_service)):
    # Errors come back as AppException and are rendered by the global handler
    return await service.checkout(request.items)
