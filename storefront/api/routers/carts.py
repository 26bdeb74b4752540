#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.domain.schemas import (
    CartOut,
    Identity,
    ItemIn,
    ItemUpdateIn,
    MessageOut,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("/", response_model=CartOut)
def get_cart(
    user: Identity = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart(user.id)


@router.post("/items", response_model=CartOut, status_code=201)
def add_item(
    payload: ItemIn,
    user: Identity = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Dodaje produkt do koszyka, jesli juz jest - zwieksza ilosc.
    400 INSUFFICIENT_STOCK gdy cala ilosc sie nie miesci.
    """
    return get_service(db).add_item(user.id, payload.product_id, payload.quantity)


@router.put("/items/{item_id}", response_model=CartOut)
def update_item(
    item_id: int,
    payload: ItemUpdateIn,
    user: Identity = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update_item(user.id, item_id, payload.quantity)


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user: Identity = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).remove_item(user.id, item_id)


@router.delete("/", response_model=MessageOut)
def clear_cart(
    user: Identity = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).clear_cart(user.id)
