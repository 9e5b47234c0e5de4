#app/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import ShopError
from app.domain.schemas import (
    CartOut,
    CartSummaryOut,
    CheckoutIn,
    CheckoutOut,
    ItemIn,
    OrderOut,
    QuantityIn,
)
from app.services.cart_service import CartService
from app.services.catalog import get_catalog
from app.services.checkout_service import CheckoutService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db=db, catalog=get_catalog(db))


@router.get("/", response_model=CartOut)
def get_cart(user_id: int = Query(...), db: Session = Depends(get_db)):
    return get_service(db).get_cart(user_id)


@router.get("/summary", response_model=CartSummaryOut)
def get_cart_summary(user_id: int = Query(...), db: Session = Depends(get_db)):
    return get_service(db).summary(user_id)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_product(user_id, payload.product_id, payload.quantity)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.put("/items/{product_id}", response_model=CartOut)
def update_item(
    product_id: int,
    payload: QuantityIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_quantity(user_id, product_id, payload.quantity)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_line(user_id, product_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.delete("/", response_model=CartOut)
def clear_cart(user_id: int = Query(...), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.clear(user_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.post("/checkout", response_model=CheckoutOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamówienie z koszyka i zwraca link WhatsApp.
    Brak towaru / pusty koszyk - koszyk zostaje bez zmian.
    """
    svc = CheckoutService(db)
    try:
        result = svc.checkout_cart(
            user_id,
            payload.shipping_address.model_dump(),
            payload.payment_method,
            payload.notes,
        )
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())

    return {
        "order": OrderOut.model_validate(result.order),
        "whatsapp_link": result.whatsapp_link,
        "whatsapp_message": result.order.whatsapp_message,
        "stock_warnings": result.stock_warnings,
    }
