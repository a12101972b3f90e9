"""Checkout and order API routes"""

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse

from ..core.identity import RequestContext, optional_identity, require_identity
from ..database.carts import local_cart_store, remote_cart_store
from ..database.orders import order_db
from ..models.checkout import CheckoutResponse, Order
from ..services.cart_reconciler import CartReconciler
from ..services.checkout import CheckoutProcessor
from .cart import get_cart_reconciler

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])

_STATUS_BY_CODE = {
    "not_authenticated": 401,
    "order_failed": 500,
}


@router.post("", response_model=CheckoutResponse)
async def checkout(
    ctx: RequestContext = Depends(optional_identity),
    reconciler: CartReconciler = Depends(get_cart_reconciler),
):
    """
    Place an order for the caller's cart.

    Failures come back as CheckoutResponse(success=False) with a matching
    status code: 401 when not logged in, 400 for other validation errors,
    500 when the order could not be stored.
    """
    processor = CheckoutProcessor(
        order_db=order_db,
        local_store=local_cart_store,
        remote_store=remote_cart_store,
        device_id=ctx.device_id,
    )
    result = processor.checkout(ctx.identity, reconciler.cart)

    if result.success:
        return result

    status_code = _STATUS_BY_CODE.get(result.error_code, 400)
    return JSONResponse(status_code=status_code, content=result.model_dump())


@router.get("/orders", response_model=list[Order])
async def list_orders(ctx: RequestContext = Depends(require_identity)):
    """Orders placed by the caller, newest first"""
    return order_db.list_orders_for_user(ctx.identity.user_id)


@router.get("/orders/{order_id}", response_model=Order)
async def get_order(
    order_id: str,
    ctx: RequestContext = Depends(require_identity),
):
    """Get one of the caller's orders"""
    order = order_db.get_order(order_id)
    if not order or order.user_id != ctx.identity.user_id:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
