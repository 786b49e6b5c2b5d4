"""
Fiscal computation engine for Spanish sole proprietors.

Quotas, identity checks, social security, year-to-date accumulation and
declaration box sets. Everything under ``fiscal.core`` and
``fiscal.declarations`` is pure and safe to call from any thread.
"""
from __future__ import annotations

__version__ = "0.4.0"
