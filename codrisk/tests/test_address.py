# tests/test_address.py
from codrisk.rules.address import parse_shipping_address

def test_standard_layout():
    parsed = parse_shipping_address("Karim Uddin, 01712345678, House 5, Road 2, Dhaka")
    assert parsed.name == "Karim Uddin"
    assert parsed.phone == "01712345678"
    assert parsed.address_parts == ["House 5", "Road 2", "Dhaka"]

def test_empty_address():
    assert parse_shipping_address(None) == ("", "", [])
    assert parse_shipping_address("") == ("", "", [])

def test_name_only():
    assert parse_shipping_address("  Rahima Begum ") == ("Rahima Begum", "", [])

def test_phone_in_third_segment():
    parsed = parse_shipping_address("Karim, House 5, 01712-345678, Dhaka")
    assert parsed.phone == "01712-345678"
    assert parsed.address_parts == ["Dhaka"]

def test_phone_past_third_segment_stays_in_address():
    parsed = parse_shipping_address("Karim, House 5, Road 2, 01712345678")
    assert parsed.phone == ""
    assert parsed.address_parts == ["House 5", "Road 2", "01712345678"]

def test_postcode_is_not_a_phone():
    parsed = parse_shipping_address("Karim, 1207, Dhaka")
    assert parsed.phone == ""
    assert parsed.address_parts == ["1207", "Dhaka"]

def test_phone_with_nothing_after():
    assert parse_shipping_address("Karim, 01712345678") == ("Karim", "01712345678", [])
