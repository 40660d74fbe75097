#Plane + country eligibility rules.
#Re-exports the public checks so callers import from restrictions directly.

from .country import (
    COUNTRY_RESTRICTIONS,
    CountryRestriction,
    CountryRestrictionCheck,
    CountryRestrictionType,
    check_country_restrictions,
    country_restriction_message,
    get_country_restrictions,
    is_category_prohibited_for_country,
    requires_documentation_for_country,
)
from .plane import (
    ItemSpecs,
    PlaneRestrictionCheck,
    PlaneRestrictionDetails,
    PlaneRestrictionType,
    check_plane_restrictions,
    plane_restriction_details,
)

__all__ = [
    "COUNTRY_RESTRICTIONS",
    "CountryRestriction",
    "CountryRestrictionCheck",
    "CountryRestrictionType",
    "check_country_restrictions",
    "country_restriction_message",
    "get_country_restrictions",
    "is_category_prohibited_for_country",
    "requires_documentation_for_country",
    "ItemSpecs",
    "PlaneRestrictionCheck",
    "PlaneRestrictionDetails",
    "PlaneRestrictionType",
    "check_plane_restrictions",
    "plane_restriction_details",
]
