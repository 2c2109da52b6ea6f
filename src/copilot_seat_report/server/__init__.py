"""FastAPI webhook receiver for copilot-seat-report.

Design intent:
- Keep report logic in `copilot_seat_report.report.*`
- Keep server-specific concerns (webhook verification, routing, job tracking) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from copilot_seat_report.server.app import create_app
