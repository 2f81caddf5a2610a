"""
Shared utilities for COURIER.

Common functionality used across contexts:
- Logger setup with provenance
- Pipeline event log
- Timestamps
- PDF inspection
"""

from courier.utils.pdf_processing import page_count
from courier.utils.timestamp import format_timestamp, now, now_exact

__all__ = ["format_timestamp", "now", "now_exact", "page_count"]
