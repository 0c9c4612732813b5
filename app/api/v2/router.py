from fastapi import APIRouter
from app.api.v2 import (
    campaigns,
    customers,
    orders,
    segments,
)

api_router = APIRouter()

# Include all v2 routers
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(segments.router, prefix="/segments", tags=["segments"])
api_router.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
