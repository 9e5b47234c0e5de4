# app/api/routers/offers.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import ShopError
from app.domain.schemas import ClaimIn, ClaimOut, OfferClaimOut, OfferDetailOut, OfferOut, OrderOut
from app.services.catalog import get_catalog
from app.services.checkout_service import CheckoutService
from app.services.offer_service import OfferService

router = APIRouter(prefix="/offers", tags=["offers"])


def get_service(db: Session):
    return OfferService(db, get_catalog(db))


@router.get("/", response_model=List[OfferOut])
def list_offers(db: Session = Depends(get_db)):
    return get_service(db).list_offers()


@router.get("/{offer_id}", response_model=OfferDetailOut)
def get_offer(offer_id: int, db: Session = Depends(get_db)):
    try:
        offer = get_service(db).get_offer(offer_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())

    return {
        **OfferOut.model_validate(offer).model_dump(),
        "claimed_by": [OfferClaimOut.model_validate(c) for c in offer.claims],
    }


@router.post("/claim", response_model=ClaimOut)
def claim_offer(
    payload: ClaimIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """
    Claim oferty. "already_claimed" to wynik informacyjny (200), nie blad.
    "partial_failure" - claim zapisany, zamowienie nie powstalo, rabat czeka w koszyku.
    """
    svc = CheckoutService(db)
    try:
        outcome = svc.claim_offer(
            payload.offer_id,
            user_id,
            create_order=payload.create_order,
            shipping_address=payload.shipping_address.model_dump() if payload.shipping_address else None,
            payment_method=payload.payment_method,
            notes=payload.notes,
        )
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    body = {
        "outcome": outcome.outcome,
        "message": outcome.message,
        "offer_id": outcome.offer_id,
        "added_products": [vars(p) for p in outcome.products],
        "error": outcome.error,
    }
    if outcome.build:
        body.update(
            order=OrderOut.model_validate(outcome.build.order),
            whatsapp_link=outcome.build.whatsapp_link,
            whatsapp_message=outcome.build.order.whatsapp_message,
            stock_warnings=outcome.build.stock_warnings,
        )
    return body
