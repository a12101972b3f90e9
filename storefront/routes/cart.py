"""Cart API routes"""

from fastapi import APIRouter, HTTPException, Depends

from ..core.errors import CartLineNotFound, ValidationError
from ..core.identity import RequestContext, optional_identity
from ..database.carts import local_cart_store, remote_cart_store
from ..database.products import product_db
from ..models.cart import AddToCartRequest, UpdateCartItemRequest, CartResponse
from ..services.cart_reconciler import CartReconciler

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def get_cart_reconciler(ctx: RequestContext = Depends(optional_identity)) -> CartReconciler:
    """Reconciler for the caller, loaded (and merged after login) before use"""
    reconciler = CartReconciler(
        device_id=ctx.device_id,
        local_store=local_cart_store,
        remote_store=remote_cart_store,
        catalog=product_db,
    )
    reconciler.initialize(ctx.identity)
    return reconciler


def raise_for_validation(error: ValidationError) -> None:
    status_code = 404 if isinstance(error, CartLineNotFound) else 400
    raise HTTPException(status_code=status_code, detail=str(error))


@router.get("", response_model=CartResponse)
async def get_cart(reconciler: CartReconciler = Depends(get_cart_reconciler)):
    """Get the caller's cart"""
    cart = reconciler.cart
    return CartResponse(
        cart=cart,
        message=None if not cart.is_empty else "Cart is empty",
    )


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    reconciler: CartReconciler = Depends(get_cart_reconciler),
):
    """Add an item to the cart (quantities add up)"""
    product = product_db.get_product(request.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    try:
        cart = reconciler.add_to_cart(request.product_id, request.quantity)
    except ValidationError as e:
        raise_for_validation(e)

    return CartResponse(
        cart=cart,
        message=f"Added {request.quantity}x {product.title} to cart",
    )


@router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    reconciler: CartReconciler = Depends(get_cart_reconciler),
):
    """Set item quantity (zero or less removes it)"""
    try:
        cart = reconciler.update_quantity(product_id, request.quantity)
    except ValidationError as e:
        raise_for_validation(e)

    message = "Item removed" if request.quantity <= 0 else "Cart updated"
    return CartResponse(cart=cart, message=message)


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(
    product_id: str,
    reconciler: CartReconciler = Depends(get_cart_reconciler),
):
    """Remove item from cart"""
    cart = reconciler.remove_from_cart(product_id)
    return CartResponse(cart=cart, message="Item removed")


@router.delete("", response_model=CartResponse)
async def clear_cart(reconciler: CartReconciler = Depends(get_cart_reconciler)):
    """Remove every item from the cart"""
    cart = reconciler.clear_cart()
    return CartResponse(cart=cart, message="Cart cleared")
