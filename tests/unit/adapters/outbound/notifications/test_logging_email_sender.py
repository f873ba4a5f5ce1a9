"""Unit tests for the logging notification adapters."""

import pytest

from app.adapters.outbound.notifications import LoggingCallbackScheduler, LoggingEmailSender
from app.adapters.outbound.notifications.logging_email_sender import build_email_content
from app.application.dtos.pharmacy import Pharmacy


@pytest.fixture
def pharmacy():
    """Create a medium-volume pharmacy."""
    return Pharmacy(
        id="1",
        name="HealthFirst Pharmacy",
        phone="+1-555-123-4567",
        contact_person="John Smith",
        rx_volume=6000,
    )


def test_email_personalized_for_pharmacy(pharmacy):
    """Test name, contact and volume appear in the email."""
    content = build_email_content(pharmacy)

    assert content.startswith("Subject: Pharmesol Solutions for HealthFirst Pharmacy")
    assert "Dear John Smith," in content
    assert "6,000 prescriptions" in content
    assert "mid-tier" in content
    assert "Pricing Information:" not in content


def test_email_for_unknown_pharmacy_with_pricing():
    """Test generic salutation and optional pricing section."""
    content = build_email_content(None, include_pricing=True)

    assert "Subject: Pharmesol Solutions for Your Pharmacy" in content
    assert "Dear Pharmacy Manager," in content
    assert "Pricing Information:" in content
    assert "prescription volume" not in content


@pytest.mark.asyncio
async def test_adapters_accept_requests(pharmacy):
    """Test both adapters acknowledge and log the request."""
    assert await LoggingEmailSender().send_followup_email("a@b.com", pharmacy, False) is True
    assert await LoggingCallbackScheduler().schedule_callback("15551234567", "Friday", "n") is True
