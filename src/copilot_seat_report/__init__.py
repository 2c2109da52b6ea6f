"""Copilot seat report.

Issue-driven reporting of an organization's GitHub Copilot seat assignments:
- configuration loaded from the environment / `.env`
- structured logging (with GitHub Actions annotations)
- billing seats query, CSV/JSON/Markdown rendering and issue comments
"""

__version__ = "0.1.0"

from copilot_seat_report.report.config import ReportSettings

__all__ = ["__version__", "ReportSettings"]
