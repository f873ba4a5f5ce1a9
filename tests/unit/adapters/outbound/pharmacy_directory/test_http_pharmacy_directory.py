"""Unit tests for the HTTP pharmacy directory."""

import httpx
import pytest

from app.adapters.outbound.pharmacy_directory import HttpPharmacyDirectory
from app.application.errors import UpstreamUnavailableError

API_URL = "https://directory.example.com/pharmacies"

RECORDS = [
    {
        "id": 1,
        "name": "HealthFirst Pharmacy",
        "phone": "+1-555-123-4567",
        "city": "New York",
        "state": "NY",
        "contactPerson": "John Smith",
        "email": "",
        "prescriptions": [{"drug": "Lisinopril", "count": 10}, {"drug": "Metformin", "count": 20}],
    },
    {
        "id": 2,
        "name": "QuickCare",
        "phone": "(555) 987-6543",
    },
]


def make_directory(handler) -> HttpPharmacyDirectory:
    return HttpPharmacyDirectory(API_URL, timeout_seconds=1.0, transport=httpx.MockTransport(handler))


def json_handler(request: httpx.Request) -> httpx.Response:
    assert str(request.url) == API_URL
    return httpx.Response(200, json=RECORDS)


@pytest.mark.asyncio
async def test_find_by_phone_matches_normalized_numbers():
    """Test lookup compares digits only and maps the record."""
    pharmacy = await make_directory(json_handler).find_by_phone("15551234567")

    assert pharmacy is not None
    assert pharmacy.id == "1"
    assert pharmacy.contact_person == "John Smith"
    assert pharmacy.email is None
    assert pharmacy.rx_volume == 900
    assert [p.drug for p in pharmacy.prescriptions] == ["Lisinopril", "Metformin"]


@pytest.mark.asyncio
async def test_find_by_phone_not_listed():
    """Test an unknown number returns None."""
    assert await make_directory(json_handler).find_by_phone("5550001111") is None


@pytest.mark.asyncio
async def test_record_without_prescriptions_has_zero_volume():
    """Test a record with no prescriptions."""
    pharmacy = await make_directory(json_handler).find_by_phone("555-987-6543")
    assert pharmacy.rx_volume == 0
    assert pharmacy.prescriptions == []


@pytest.mark.asyncio
async def test_list_all():
    """Test listing maps every record."""
    pharmacies = await make_directory(json_handler).list_all()
    assert [p.name for p in pharmacies] == ["HealthFirst Pharmacy", "QuickCare"]


@pytest.mark.asyncio
async def test_http_error_is_upstream_failure():
    """Test a 5xx response surfaces as upstream unavailability."""
    directory = make_directory(lambda request: httpx.Response(503))
    with pytest.raises(UpstreamUnavailableError):
        await directory.find_by_phone("15551234567")


@pytest.mark.asyncio
async def test_transport_error_is_upstream_failure():
    """Test a connection failure surfaces as upstream unavailability."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnavailableError):
        await make_directory(handler).list_all()


@pytest.mark.asyncio
async def test_unexpected_payload_is_upstream_failure():
    """Test a non-list payload is rejected."""
    directory = make_directory(lambda request: httpx.Response(200, json={"data": []}))
    with pytest.raises(UpstreamUnavailableError):
        await directory.list_all()


def test_requires_url():
    """Test the adapter refuses an empty URL."""
    with pytest.raises(ValueError):
        HttpPharmacyDirectory("")
