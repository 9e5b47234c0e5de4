# product_service/main.py
from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import ShopError
from app.services.catalog import LocalCatalog

app = FastAPI(title="Product Service (catalog stock ledger)")


class DecrementIn(BaseModel):
    quantity: int = Field(..., gt=0)


@app.get("/products/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        product = LocalCatalog(db).get_product(product_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "stock": product.stock,
        "is_active": product.is_active,
    }


@app.post("/products/{product_id}/decrement-stock", status_code=204)
def decrement_stock(product_id: int, payload: DecrementIn, db: Session = Depends(get_db)):
    # 409 gdy stan < quantity, stan nigdy nie spada ponizej zera
    try:
        LocalCatalog(db).decrement_stock(product_id, payload.quantity)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
