"""Services package for AI insights and civic lookups"""

from .ai_gateway import AIGatewayClient
from .insight_service import InsightService
from .representative_service import RepresentativeService

__all__ = [
    "AIGatewayClient",
    "InsightService",
    "RepresentativeService",
]
