import pytest

from restrictions.country import (
    CountryRestrictionType,
    check_country_restrictions,
    country_restriction_message,
    get_country_restrictions,
    is_category_prohibited_for_country,
    requires_documentation_for_country,
)
from restrictions.plane import (
    ItemSpecs,
    PlaneRestrictionType,
    check_plane_restrictions,
    fits_carry_on,
    fits_checked_baggage,
    plane_restriction_details,
)


def test_small_item_fits_carry_on():
    specs = ItemSpecs(weight=5, length=30, width=20, height=15)

    check = check_plane_restrictions(specs)

    assert check.can_transport_by_plane
    assert check.reason is None
    assert fits_carry_on(specs)


def test_medium_item_goes_in_checked_baggage():
    specs = ItemSpecs(weight=20, length=80, width=50, height=40)

    assert not fits_carry_on(specs)
    assert fits_checked_baggage(specs)
    assert check_plane_restrictions(specs).can_transport_by_plane


def test_restricted_items_are_rejected_with_boat_suggestion():
    check = check_plane_restrictions(ItemSpecs(weight=2, restricted_items=True))

    assert not check.can_transport_by_plane
    assert check.restriction_type == PlaneRestrictionType.DANGEROUS_GOODS
    assert check.suggested_method == "boat"
    assert check.reason.startswith("Restricted items")


def test_prohibited_category_is_rejected():
    check = check_plane_restrictions(ItemSpecs(weight=1, category="Explosives"))

    assert not check.can_transport_by_plane
    assert check.restriction_type == PlaneRestrictionType.CATEGORY
    assert '"Explosives"' in check.reason


def test_oversized_item_flies_with_warning():
    # 35 kg is over checked baggage, under the oversized limit
    check = check_plane_restrictions(ItemSpecs(weight=35, length=60, width=40, height=40))

    assert check.can_transport_by_plane
    assert check.restriction_type == PlaneRestrictionType.OVERSIZED
    assert "oversized/overweight" in check.reason


def test_overweight_item_is_rejected():
    check = check_plane_restrictions(ItemSpecs(weight=50, length=40, width=30, height=20))

    assert not check.can_transport_by_plane
    assert check.restriction_type == PlaneRestrictionType.WEIGHT
    assert "50kg" in check.reason
    assert "45kg" in check.reason


def test_too_large_item_is_rejected():
    check = check_plane_restrictions(ItemSpecs(weight=30, length=100, width=100, height=130))

    assert not check.can_transport_by_plane
    assert check.restriction_type == PlaneRestrictionType.SIZE
    assert "330cm" in check.reason


@pytest.mark.parametrize("weight", [45.01, 50, 100, 1000])
def test_nothing_over_oversized_weight_limit_can_fly(weight):
    assert not check_plane_restrictions(ItemSpecs(weight=weight, length=10, width=10, height=10)).can_transport_by_plane


def test_country_prohibition_blocks_plane():
    specs = ItemSpecs(weight=1, category="food", origin_country="US", destination_country="AU")

    check = check_plane_restrictions(specs)

    assert not check.can_transport_by_plane
    assert check.restriction_type == PlaneRestrictionType.COUNTRY
    assert "AU" in check.reason


def test_documentation_requirement_does_not_block_plane():
    specs = ItemSpecs(weight=1, category="electronics", origin_country="GB", destination_country="US")
    assert check_plane_restrictions(specs).can_transport_by_plane


def test_details_report_each_tier():
    details = plane_restriction_details(ItemSpecs(weight=5, length=30, width=20, height=15))
    assert details.fits_carry_on
    assert details.fits_checked_baggage
    assert details.fits_oversized
    assert details.restriction_message is None


# -------------------------
# Country table
# -------------------------

def test_lookup_is_case_insensitive():
    assert get_country_restrictions("au").country_code == "AU"
    assert get_country_restrictions("ZZ") is None


def test_category_match_is_substring_based():
    assert is_category_prohibited_for_country("Frozen Food", "NZ")
    assert not is_category_prohibited_for_country("electronics", "NZ")
    assert requires_documentation_for_country("medical supplies", "US")


def test_destination_prohibition_wins():
    check = check_country_restrictions("US", "JP", "medical")
    assert check.is_restricted
    assert check.restriction_type == CountryRestrictionType.PROHIBITED


def test_destination_documentation_is_informational():
    check = check_country_restrictions("AU", "CA", "food")
    # CA asks for paperwork, so AU's origin ban is never reached
    assert not check.is_restricted
    assert check.restriction_type == CountryRestrictionType.REQUIRES_DOCUMENTATION
    assert "documentation" in check.reason


def test_origin_prohibition_applies_when_destination_is_silent():
    check = check_country_restrictions("AU", "GB", "food")
    assert check.is_restricted
    assert "AU" in check.reason


def test_no_category_means_no_restriction():
    assert not check_country_restrictions("AU", "NZ").is_restricted
    assert country_restriction_message("XX") is None
