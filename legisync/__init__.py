"""
LegiSync: multi-source legislative bill synchronization.

Pulls bills from Congress.gov, GovTrack and Open States, normalizes them
into one canonical record and serves them with AI-generated insights.
"""

__version__ = "1.0.0"
