# app/api/routers/orders.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import ShopError
from app.domain.schemas import (
    CancelIn,
    MessageOut,
    OrderListOut,
    OrderOut,
    OrderStatsOut,
    StatusUpdateIn,
)
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("/", response_model=OrderListOut)
def list_orders(
    user_id: int = Query(...),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    orders, pagination = get_service(db).list_user_orders(user_id, page, limit, status)
    return {
        "orders": [OrderOut.model_validate(o) for o in orders],
        "pagination": pagination,
    }


@router.get("/stats", response_model=OrderStatsOut)
def order_stats(db: Session = Depends(get_db)):
    return get_service(db).stats()


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """
    Pobiera szczegóły zamówienia.
    """
    svc = get_service(db)
    try:
        return svc.get_order(order_id, user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: StatusUpdateIn,
    db: Session = Depends(get_db),
):
    """Zmiana statusu (admin) - tylko przejscia z tabeli."""
    svc = get_service(db)
    try:
        return svc.update_status(order_id, payload.status)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.put("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    payload: CancelIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.cancel_order(order_id, user_id, payload.reason)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.put("/{order_id}/whatsapp-sent", response_model=OrderOut)
def mark_whatsapp_sent(order_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.mark_message_sent(order_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.post("/{order_id}/resend-whatsapp", response_model=MessageOut)
def resend_whatsapp(order_id: int, db: Session = Depends(get_db)):
    """Ponowne wygenerowanie wiadomosci - deterministyczne z zapisanego zamowienia."""
    svc = get_service(db)
    try:
        return svc.resend_message(order_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
