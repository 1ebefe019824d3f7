"""Settings for the mortgage simulator.

Simulation constants live here as plain module-level values. Settings that
depend on the deployment (API keys, the Flask secret) are read from the
environment when the module is imported.
"""

import os
from decimal import Decimal

# ── Simulation ───────────────────────────────────────────────────────
MAX_PERIODS = 600                   # hard stop for any schedule (50 years)
MAX_TERM = 1200                     # longest accepted term (100 years)
BALANCE_TOLERANCE = Decimal("0.005")  # balances at or below half a cent are paid off
DECIMAL_PRECISION = 28

# ── Presentation ─────────────────────────────────────────────────────
DEFAULT_VISIBLE_ROWS = 24           # schedule rows shown before "load more"
ROWS_PER_PAGE = 24
CLI_MAX_ROWS = 120                  # rows printed by the CLI before truncating
CHART_SAMPLE_EVERY = 12             # balance chart samples one point per year

# ── Advice generator ─────────────────────────────────────────────────
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
ADVICE_MODEL = os.environ.get("ADVICE_MODEL", "gemini-2.5-flash")
ADVICE_EMPTY = "Advice is not available right now."
ADVICE_FAILED = "Could not fetch advice. Check your network connection or API configuration."

# ── Web app ──────────────────────────────────────────────────────────
FLASK_SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
ASSET_VERSION = os.environ.get("ASSET_VERSION", "1")
