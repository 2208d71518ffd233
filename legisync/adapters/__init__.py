"""
Legislative source adapters.

One generic sync routine (BaseAdapter.sync) configured three ways.
"""

from .base_adapter import BaseAdapter, PageRequest
from .congress_bills import CongressBillsAdapter
from .govtrack_bills import GovTrackBillsAdapter
from .openstates_bills import OpenStatesBillsAdapter

__all__ = [
    "BaseAdapter",
    "PageRequest",
    "CongressBillsAdapter",
    "GovTrackBillsAdapter",
    "OpenStatesBillsAdapter",
]
