"""
Orchestration package for multi-source sync runs.
"""

from .sync_orchestrator import SyncOrchestrator, default_adapters

__all__ = ["SyncOrchestrator", "default_adapters"]
