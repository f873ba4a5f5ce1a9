"""Unit tests for PharmacyLead merge semantics."""

from app.application.dtos.lead import PharmacyLead


def test_merge_sets_supplied_fields():
    """Test that supplied fields are applied."""
    lead = PharmacyLead(phone_number="15551234567")
    merged = lead.merge(pharmacy_name="Corner Drug", city="Austin")

    assert merged.pharmacy_name == "Corner Drug"
    assert merged.city == "Austin"
    assert merged.phone_number == "15551234567"


def test_merge_never_clears_existing_values():
    """Test that None and blank values leave existing fields untouched."""
    lead = PharmacyLead(phone_number="1", pharmacy_name="A", contact_person="Sam")
    merged = lead.merge(pharmacy_name=None, contact_person="  ", email="a@b.com")

    assert merged.pharmacy_name == "A"
    assert merged.contact_person == "Sam"
    assert merged.email == "a@b.com"


def test_merge_is_idempotent():
    """Test that merging the same fields twice gives the same values."""
    lead = PharmacyLead(phone_number="1")
    once = lead.merge(pharmacy_name="A", estimated_rx_volume=3000)
    twice = once.merge(pharmacy_name="A", estimated_rx_volume=3000)

    assert twice.pharmacy_name == once.pharmacy_name
    assert twice.estimated_rx_volume == once.estimated_rx_volume


def test_merge_without_values_returns_same_lead():
    """Test that an empty merge is a no-op."""
    lead = PharmacyLead(phone_number="1", pharmacy_name="A")
    assert lead.merge() is lead
    assert lead.merge(pharmacy_name=None, unknown_field="x") is lead


def test_merge_skips_zero_volume():
    """Test that a zero volume neither creates nor overwrites a value."""
    lead = PharmacyLead(phone_number="1")
    assert lead.merge(estimated_rx_volume=0) is lead

    known = lead.merge(estimated_rx_volume=3000)
    assert known.merge(estimated_rx_volume=0).estimated_rx_volume == 3000


def test_zero_volume_does_not_qualify():
    """Test that a stored zero volume is still reported as missing."""
    lead = PharmacyLead(
        phone_number="1", pharmacy_name="A", contact_person="Sam", estimated_rx_volume=0
    )
    assert not lead.has_required_info()
    assert lead.missing_required_fields() == ["estimated_rx_volume"]


def test_required_info():
    """Test qualification requires name, contact and volume."""
    lead = PharmacyLead(phone_number="1", pharmacy_name="A", contact_person="Sam")
    assert not lead.has_required_info()
    assert lead.missing_required_fields() == ["estimated_rx_volume"]

    qualified = lead.merge(estimated_rx_volume=12000)
    assert qualified.has_required_info()
    assert qualified.missing_required_fields() == []


def test_serializes_with_camel_case_aliases():
    """Test lead JSON uses camelCase keys."""
    data = PharmacyLead(phone_number="1", pharmacy_name="A").model_dump(by_alias=True)
    assert data["phoneNumber"] == "1"
    assert data["pharmacyName"] == "A"
