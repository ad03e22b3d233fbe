"""Helpers for loading tiktoken encodings with operator-controlled fallback."""

from __future__ import annotations

import logging
from typing import Optional

import tiktoken

logger = logging.getLogger(__name__)


def get_cl100k_encoding(context: str, allow_fallback: bool = False) -> Optional[tiktoken.Encoding]:
    """Load the OpenAI tokenizer; ``None`` means whitespace approximation."""
    try:
        return tiktoken.get_encoding("cl100k_base")
    except Exception as exc:
        message = f"Failed to load tiktoken 'cl100k_base' while {context}. Reason: {exc}"
        if allow_fallback:
            logger.warning(
                "%s. Proceeding with whitespace token approximation because "
                "ALLOW_TIKTOKEN_FALLBACK=1.",
                message,
            )
            return None
        raise RuntimeError(
            f"{message}. Rerun with ALLOW_TIKTOKEN_FALLBACK=1 to allow whitespace fallback."
        ) from exc


def count_tokens(text: str, encoding: Optional[tiktoken.Encoding]) -> int:
    """Count tokens using tiktoken if available, otherwise whitespace approximation."""
    if encoding:
        return len(encoding.encode(text))
    return len(text.split())
