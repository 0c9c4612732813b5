from fastapi import APIRouter, Query
from typing import Optional

from app.api.deps import Store
from app.schemas.customer import OrderListResponse

router = APIRouter()


@router.get("", response_model=OrderListResponse)
async def list_orders(
    store: Store,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=500),
    customer_id: Optional[str] = None,
):
    """List orders, most recent first."""
    orders = list(store.get_orders())

    if customer_id:
        orders = [o for o in orders if o.customer_id == customer_id]

    orders.sort(key=lambda o: o.order_date, reverse=True)

    total = len(orders)
    offset = (page - 1) * page_size

    return OrderListResponse(
        items=orders[offset:offset + page_size],
        total=total,
        page=page,
        page_size=page_size,
    )
