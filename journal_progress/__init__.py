"""
Journal Progress - Source Package

The streak & milestone engine behind the journaling app: consecutive-day
streaks per journal type, and one-time badges when fixed thresholds are
crossed.

DESIGN PRINCIPLES:
1. The engine is pure: state goes in as arguments and comes back as values
2. Badges are append-only and keyed by a deterministic id
3. Local calendar dates, never UTC dates
4. Bad input fails loudly at the date boundary, never as silent drift
5. Storage belongs to the host and is swappable
"""

__version__ = "1.0.0"
__author__ = "Journal Progress Team"

from journal_progress.config.logging_setup import configure_logging

configure_logging()
