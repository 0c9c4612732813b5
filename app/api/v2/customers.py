from fastapi import APIRouter, Query
from typing import Optional

from app.api.deps import Store
from app.schemas.customer import CustomerListResponse

router = APIRouter()


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    store: Store,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=500),
    tag: Optional[str] = None,
    search: Optional[str] = None,
):
    """List customers with pagination and filtering."""
    customers = list(store.get_customers())

    if tag:
        customers = [c for c in customers if tag in c.tags]

    if search:
        needle = search.lower()
        customers = [
            c for c in customers
            if needle in c.name.lower()
            or (c.email and needle in c.email.lower())
            or any(needle in t.lower() for t in c.tags)
        ]

    total = len(customers)
    offset = (page - 1) * page_size

    return CustomerListResponse(
        items=customers[offset:offset + page_size],
        total=total,
        page=page,
        page_size=page_size,
    )
