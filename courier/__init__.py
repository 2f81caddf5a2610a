"""
COURIER - Compiled Output Unified for Recipient-Individualized Employment Requests

Assembles a personalized application package from a cover letter and a resume:
both LaTeX sources are compiled to PDF and merged into a single document, named
after the recipient and a content fingerprint of the sources.

Architecture:
- Packaging Context: fingerprinting, staleness checks, compile/merge orchestration
- Utils: logging setup, pipeline event log, timestamps, PDF helpers
"""

__version__ = "0.1.0"
