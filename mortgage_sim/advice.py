"""Natural-language advice for an early-repayment comparison.

The comparison is formatted into a prompt and sent to the Gemini text API.
Whatever text comes back is returned verbatim. Any failure is logged and
reduced to a fixed message; the call is not retried.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from google import genai

from . import config
from .data_models import Comparison

logger = logging.getLogger(__name__)


def build_advice_prompt(comparison: Comparison) -> str:
    baseline = comparison.baseline
    savings = comparison.savings
    return f"""
As a senior personal finance advisor, give professional advice on the following
mortgage early-repayment comparison.

Original plan:
- Total interest: {baseline.total_interest:.2f}
- Payoff date: {baseline.payoff_date.isoformat()}

Early-repayment plan ({comparison.strategy.label.lower()}):
- Interest saved: {savings.interest:.2f}
- Paid off earlier by: {savings.periods} months
- Total saved: {savings.money:.2f}

Briefly analyse:
1. How cost-effective this repayment plan is.
2. The psychological and financial trade-offs between shortening the term and
   reducing the monthly payment.
3. What to watch out for when repaying early in the current economy
   (for example, opportunity cost).

Keep the tone professional and objective, stay under 300 words and use Markdown.
"""


def get_mortgage_advice(comparison: Comparison, client: Optional[Any] = None) -> str:
    """Return advice text for ``comparison``.

    ``client`` defaults to a ``google.genai.Client`` configured from
    ``GEMINI_API_KEY``.
    """
    prompt = build_advice_prompt(comparison)
    try:
        if client is None:
            client = genai.Client(api_key=config.GEMINI_API_KEY)
        response = client.models.generate_content(model=config.ADVICE_MODEL, contents=prompt)
        return response.text or config.ADVICE_EMPTY
    except Exception:
        logger.exception("Advice request to %s failed", config.ADVICE_MODEL)
        return config.ADVICE_FAILED
