# app/routers/cart.py
from collections.abc import Callable, Iterator

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlmodel import Session

from app.core.auth import require_user
from app.core.config import get_settings
from app.core.exceptions import (
    ConcurrentModificationConflict,
    EmptyCart,
    InsufficientStock,
    ProductNotFound,
)
from app.database import get_session, get_session_factory
from app.models.cart import CartLedger
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartSummary
from app.schemas.order import OrderWithSoldRead
from app.services.cart_service import CartService
from app.services.cart_session_store import CartSessionStore
from app.services.checkout_service import CheckoutService

settings = get_settings()

router = APIRouter(prefix="/cart", tags=["Cart"])

product_repo = ProductRepository()
order_repo = OrderRepository()
service = CartService(product_repo)

cart_store = CartSessionStore(ttl_seconds=settings.CART_SESSION_TTL_SECONDS)


# -------- Dependencies --------


def get_cart_store() -> CartSessionStore:
    return cart_store


def get_cart_ledger(
    request: Request,
    response: Response,
    store: CartSessionStore = Depends(get_cart_store),
) -> Iterator[CartLedger]:
    """
    Resolve the caller's cart from the session cookie.

    A first-time caller gets a new session id in a cookie. Error responses
    do not carry that cookie, so a new session whose request fails is
    discarded again.
    """
    session_id = request.cookies.get(settings.CART_SESSION_COOKIE)
    is_new = not session_id
    if is_new:
        session_id = store.new_session_id()
        response.set_cookie(
            settings.CART_SESSION_COOKIE,
            session_id,
            httponly=True,
            samesite="lax",
        )
    ledger = store.get_or_create(session_id)
    try:
        yield ledger
    except Exception:
        if is_new:
            store.discard(session_id)
        raise


def get_checkout_service(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> CheckoutService:
    return CheckoutService(
        product_repo,
        order_repo,
        session_factory,
        max_attempts=settings.CHECKOUT_MAX_ATTEMPTS,
    )


# -------- Endpoints --------


@router.get("", response_model=CartSummary)
def get_my_cart(ledger: CartLedger = Depends(get_cart_ledger)):
    """
    Get the current session's cart summary.
    """
    return service.get_cart_summary(ledger)


@router.post("/items/{product_id}", response_model=CartSummary)
def add_to_cart(
    product_id: int,
    session: Session = Depends(get_session),
    ledger: CartLedger = Depends(get_cart_ledger),
):
    """
    Add one unit of a product to the cart.

    Stock is not checked until checkout.
    """
    try:
        return service.add_to_cart(session, ledger, product_id)
    except ProductNotFound as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        )


@router.delete("/items/{product_id}", response_model=CartSummary)
def remove_from_cart(
    product_id: int,
    ledger: CartLedger = Depends(get_cart_ledger),
):
    """
    Remove one unit of a product from the cart.

    Removing a product that is not in the cart is not an error.
    """
    return service.remove_from_cart(ledger, product_id)


@router.delete("", response_model=CartSummary)
def clear_cart(ledger: CartLedger = Depends(get_cart_ledger)):
    """
    Clear the entire cart.

    Returns an empty cart summary.
    """
    return service.clear_cart(ledger)


@router.post(
    "/checkout",
    response_model=OrderWithSoldRead,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    ledger: CartLedger = Depends(get_cart_ledger),
    current_user: User = Depends(require_user),
    checkout_service: CheckoutService = Depends(get_checkout_service),
):
    """
    Turn the session's cart into an order.

    Errors:
      - 400 cart is empty
      - 404 a product in the cart no longer exists
      - 409 not enough stock, or stock changed concurrently (retryable)

    On any error the cart is left as it was.
    """
    try:
        return checkout_service.checkout(ledger, current_user)
    except EmptyCart as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        )
    except ProductNotFound as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": str(exc), "product_id": exc.product_id},
        )
    except InsufficientStock as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": str(exc),
                "product_id": exc.product_id,
                "available": exc.available,
                "requested": exc.requested,
            },
        )
    except ConcurrentModificationConflict as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": str(exc),
                "product_id": exc.product_id,
                "retryable": exc.retryable,
            },
        )
