"""Utility modules."""

from aiffconv.utils.errors import AiffconvError
from aiffconv.utils.logging import setup_logging
from aiffconv.utils.summary import DestinationSummary, summarize_destination

__all__ = ["AiffconvError", "DestinationSummary", "setup_logging", "summarize_destination"]
