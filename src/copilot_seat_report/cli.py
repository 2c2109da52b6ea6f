"""Console entrypoint.

The CLI itself is implemented in `copilot_seat_report.report.main`.
"""

from __future__ import annotations

from copilot_seat_report.report.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
