"""
Segment API Endpoints

Live audience sizing and preview for the segment and campaign builders,
plus the field/operator catalog the builders render.
"""

from fastapi import APIRouter

from app.api.deps import Audience
from app.schemas.segment import (
    SegmentCountRequest,
    SegmentCountResponse,
    SegmentFieldsResponse,
    SegmentPreviewRequest,
    SegmentPreviewResponse,
)
from app.services.segment_catalog import KNOWN_TAGS, field_options

router = APIRouter()


@router.get("/fields", response_model=SegmentFieldsResponse)
async def list_segment_fields():
    """Rule fields with their builder operators, and the known tags."""
    return SegmentFieldsResponse(fields=field_options(), tags=list(KNOWN_TAGS))


@router.post("/count", response_model=SegmentCountResponse)
async def count_segment(payload: SegmentCountRequest, audience: Audience):
    """Audience size for a rule set. An empty rule set counts 0."""
    return SegmentCountResponse(audience_size=audience.audience_size(payload.rules))


@router.post("/preview", response_model=SegmentPreviewResponse)
async def preview_segment(payload: SegmentPreviewRequest, audience: Audience):
    """Audience size plus the first matching customers."""
    preview = audience.preview(payload.rules, limit=payload.limit)
    return SegmentPreviewResponse(
        audience_size=preview.audience_size,
        sample=preview.sample,
        reference_date=preview.reference_date,
    )
