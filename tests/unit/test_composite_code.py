from __future__ import annotations

import pytest

from agrocal.models import CompositeIdentifier
from agrocal.services.composite_code import COMMODITY, DISTRICT, REGION, parse_composite


def test_region_composite_value():
    ident = parse_composite("REG03/Western Region", REGION)
    assert ident == CompositeIdentifier(code="REG03", name="Western Region")


def test_split_happens_at_first_slash_only():
    ident = parse_composite("DS179/Biakoye/North", DISTRICT)
    assert ident.code == "DS179"
    assert ident.name == "Biakoye/North"


def test_commodity_composite_keeps_name_case():
    ident = parse_composite("CT0000000008/Rice", COMMODITY)
    assert ident == CompositeIdentifier(code="CT0000000008", name="Rice")


def test_bare_code_resolves_name_from_reference(reference):
    assert parse_composite("REG02", REGION, reference) == CompositeIdentifier(code="REG02", name="Ashanti Region")
    assert parse_composite("DS225", DISTRICT, reference).name == "Biakoye"


def test_bare_code_without_reference_or_unknown_code(reference):
    assert parse_composite("REG02", REGION) == CompositeIdentifier(code="REG02", name="REG02")
    assert parse_composite("REG99", REGION, reference) == CompositeIdentifier(code="REG99", name="REG99")


def test_plain_names():
    assert parse_composite("Ashanti", REGION) == CompositeIdentifier(code=None, name="Ashanti")
    assert parse_composite("  Maize ", COMMODITY) == CompositeIdentifier(code=None, name="maize")


def test_code_of_another_family_is_a_name():
    assert parse_composite("DS225/Biakoye", REGION) == CompositeIdentifier(code=None, name="DS225/Biakoye")


@pytest.mark.parametrize("value", [None, "", "   "])
def test_empty_values(value):
    assert parse_composite(value, REGION) == CompositeIdentifier()


def test_unknown_family_is_rejected():
    with pytest.raises(ValueError, match="unknown code family"):
        parse_composite("XX1/foo", "XX")
