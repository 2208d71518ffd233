"""API v1 request and response schemas."""

from api.v1.schemas.bills import (
    BillResponse,
    BillDetailResponse,
    BillListResponse,
    BillSubmissionRequest,
)
from api.v1.schemas.insights import (
    SummarizeRequest,
    SummarizeResponse,
    ArgumentsRequest,
    ArgumentsResponse,
    ImpactRequest,
    ImpactResponse,
    StagesRequest,
    StagesResponse,
    ChatRequest,
    ChatResponse,
)
from api.v1.schemas.representatives import (
    RepresentativeRequest,
    RepresentativeResponse,
)
from api.v1.schemas.sync import (
    SyncLogResponse,
    SyncLogListResponse,
)

__all__ = [
    "BillResponse",
    "BillDetailResponse",
    "BillListResponse",
    "BillSubmissionRequest",
    "SummarizeRequest",
    "SummarizeResponse",
    "ArgumentsRequest",
    "ArgumentsResponse",
    "ImpactRequest",
    "ImpactResponse",
    "StagesRequest",
    "StagesResponse",
    "ChatRequest",
    "ChatResponse",
    "RepresentativeRequest",
    "RepresentativeResponse",
    "SyncLogResponse",
    "SyncLogListResponse",
]
