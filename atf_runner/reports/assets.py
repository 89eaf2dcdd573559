"""Stylesheets shipped with the HTML report."""

from __future__ import annotations

from pathlib import Path

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"

# Always linked and copied next to report.html.
MANDATORY_CSS = ASSETS_DIR / "always.css"
# Default user stylesheet, replaceable from the command line.
DEFAULT_REPORT_CSS = ASSETS_DIR / "report_def.css"
