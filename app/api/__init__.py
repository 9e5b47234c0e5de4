# app/api/__init__.py
from fastapi import APIRouter

from app.api.routers import cart, health, offers, orders, users

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(users.router)
api_router.include_router(offers.router)
api_router.include_router(cart.router)
api_router.include_router(orders.router)
