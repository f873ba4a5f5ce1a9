"""Phone number normalization helpers."""

import re

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str) -> str:
    """
    Canonicalize a phone number to its digits.

    The result is the identity key for conversations, leads and the
    pharmacy directory cache.

    Args:
        phone: Raw phone number (e.g., "+1-555-123-4567")

    Returns:
        Digits-only phone number (e.g., "15551234567")
    """
    return _NON_DIGITS.sub("", phone or "")


def mask_phone(phone: str) -> str:
    """
    Mask a phone number for logging, keeping only the last four digits.

    Args:
        phone: Raw or normalized phone number

    Returns:
        Masked phone number (e.g., "***-4567")
    """
    digits = normalize_phone(phone)
    if len(digits) < 4:
        return "***"
    return f"***-{digits[-4:]}"
