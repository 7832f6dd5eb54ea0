"""
Usage metering for generation requests.
"""
import math
from typing import Optional

from config import Config
from utils.logger import get_logger
from utils.usage_store import UsageTotals, get_usage_store

usage_logger = get_logger("usage")


class UsageService:
    """Best-effort token metering per caller."""

    @staticmethod
    def estimate_tokens(prompt_text: str, response_text: str) -> int:
        """Coarse estimate: one token per 4 characters of prompt plus response, rounded up."""
        total_chars = len(prompt_text or "") + len(response_text or "")
        return math.ceil(total_chars / Config.CHARS_PER_TOKEN)

    @staticmethod
    def record_usage(
        caller_id: Optional[str],
        prompt_text: str,
        response_text: str,
        optimizer_id: Optional[str] = None,
        optimizer_name: Optional[str] = None
    ) -> Optional[UsageTotals]:
        """
        Add one request and its estimated tokens to the caller's totals.

        Runs after the response has been produced. Failures are logged and
        never raised; nothing is retried.

        Returns:
            Updated totals, or None when nothing was recorded
        """
        if not caller_id:
            return None

        tokens = UsageService.estimate_tokens(prompt_text, response_text)

        try:
            totals = get_usage_store().increment_usage(
                caller_id,
                tokens,
                requests=1,
                optimizer_id=optimizer_id or None,
                optimizer_name=optimizer_name
            )
        except Exception as e:
            usage_logger.error(f"Failed to record usage for {caller_id}: {type(e).__name__}: {e}")
            return None

        usage_logger.info(f"Recorded {tokens} tokens for {caller_id} (total {totals.total_tokens})")
        return totals
