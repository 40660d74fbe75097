"""
Purpose: Plane eligibility rules (can this item fly?).
What it does:
Checks, in order:
- restricted / dangerous goods
- country-specific prohibitions for the route
- categories airlines never accept
- carry-on, checked and oversized baggage limits (weight + size)

Items outside every baggage tier are rejected with "boat" as the
suggested alternative. Oversized items are accepted with a warning.

Rule: Pure functions. No I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from listings.models import DeliveryRequest
from .country import CountryRestrictionType, check_country_restrictions


# Typical airline limits (kg / cm)
CARRY_ON_MAX_WEIGHT = 7
CARRY_ON_MAX_LENGTH = 55
CARRY_ON_MAX_WIDTH = 40
CARRY_ON_MAX_HEIGHT = 23
CARRY_ON_MAX_LINEAR = 115

CHECKED_MAX_WEIGHT = 32
CHECKED_MAX_SIDE = 158
CHECKED_MAX_LINEAR = 300

# accepted with extra airline fees
OVERSIZED_MAX_WEIGHT = 45
OVERSIZED_MAX_LINEAR = 320

PROHIBITED_CATEGORIES = (
    "explosives",
    "flammable",
    "toxic",
    "radioactive",
    "corrosive",
    "weapons",
    "ammunition",
)


class PlaneRestrictionType(str, Enum):
    WEIGHT = "weight"
    SIZE = "size"
    DANGEROUS_GOODS = "dangerous_goods"
    CATEGORY = "category"
    OVERSIZED = "oversized"
    COUNTRY = "country"


@dataclass(frozen=True)
class ItemSpecs:
    weight: float  # kg
    length: float = 0.0  # cm
    width: float = 0.0
    height: float = 0.0
    restricted_items: bool = False  # lithium batteries, flammables, ...
    category: Optional[str] = None
    origin_country: Optional[str] = None  # ISO2
    destination_country: Optional[str] = None

    @property
    def linear_cm(self) -> float:
        return self.length + self.width + self.height

    @property
    def max_side(self) -> float:
        return max(self.length, self.width, self.height)

    @classmethod
    def from_request(
        cls,
        request: DeliveryRequest,
        origin_country: Optional[str] = None,
        destination_country: Optional[str] = None,
    ) -> ItemSpecs:
        dims = request.dimensions
        return cls(
            weight=request.weight_kg,
            length=dims.length,
            width=dims.width,
            height=dims.height,
            restricted_items=request.restricted_items,
            category=request.category,
            origin_country=origin_country or request.origin_country,
            destination_country=destination_country or request.destination_country,
        )


@dataclass(frozen=True)
class PlaneRestrictionCheck:
    can_transport_by_plane: bool
    reason: Optional[str] = None
    restriction_type: Optional[PlaneRestrictionType] = None
    suggested_method: Optional[str] = None


@dataclass(frozen=True)
class PlaneRestrictionDetails:
    fits_carry_on: bool
    fits_checked_baggage: bool
    fits_oversized: bool
    restriction_message: Optional[str] = None


def fits_carry_on(specs: ItemSpecs) -> bool:
    return (
        specs.weight <= CARRY_ON_MAX_WEIGHT
        and specs.length <= CARRY_ON_MAX_LENGTH
        and specs.width <= CARRY_ON_MAX_WIDTH
        and specs.height <= CARRY_ON_MAX_HEIGHT
        and specs.linear_cm <= CARRY_ON_MAX_LINEAR
    )


def fits_checked_baggage(specs: ItemSpecs) -> bool:
    return (
        specs.weight <= CHECKED_MAX_WEIGHT
        and specs.max_side <= CHECKED_MAX_SIDE
        and specs.linear_cm <= CHECKED_MAX_LINEAR
    )


def fits_oversized(specs: ItemSpecs) -> bool:
    return specs.weight <= OVERSIZED_MAX_WEIGHT and specs.linear_cm <= OVERSIZED_MAX_LINEAR


def _rejected(reason: str, restriction_type: PlaneRestrictionType) -> PlaneRestrictionCheck:
    return PlaneRestrictionCheck(
        can_transport_by_plane=False,
        reason=reason,
        restriction_type=restriction_type,
        suggested_method="boat",
    )


def check_plane_restrictions(specs: ItemSpecs) -> PlaneRestrictionCheck:
    if specs.restricted_items:
        return _rejected(
            "Restricted items (lithium batteries, flammable materials, etc.) cannot be "
            "transported by plane due to airline regulations.",
            PlaneRestrictionType.DANGEROUS_GOODS,
        )

    if specs.category and (specs.origin_country or specs.destination_country):
        country_check = check_country_restrictions(
            specs.origin_country or "",
            specs.destination_country or "",
            specs.category,
        )
        if country_check.is_restricted and country_check.restriction_type == CountryRestrictionType.PROHIBITED:
            return _rejected(
                country_check.reason
                or f'Items in the "{specs.category}" category are prohibited for this route '
                "due to country-specific regulations.",
                PlaneRestrictionType.COUNTRY,
            )

    if specs.category:
        category_lower = specs.category.lower()
        if any(prohibited in category_lower for prohibited in PROHIBITED_CATEGORIES):
            return _rejected(
                f'Items in the "{specs.category}" category cannot be transported by plane '
                "due to safety regulations.",
                PlaneRestrictionType.CATEGORY,
            )

    if fits_carry_on(specs) or fits_checked_baggage(specs):
        return PlaneRestrictionCheck(can_transport_by_plane=True)

    if fits_oversized(specs):
        return PlaneRestrictionCheck(
            can_transport_by_plane=True,
            reason="Item exceeds standard checked baggage limits but may be accepted as "
            "oversized/overweight baggage (additional airline fees may apply).",
            restriction_type=PlaneRestrictionType.OVERSIZED,
        )

    if specs.weight > OVERSIZED_MAX_WEIGHT:
        return _rejected(
            f"Item weight ({specs.weight:g}kg) exceeds maximum allowed weight "
            f"({OVERSIZED_MAX_WEIGHT}kg) for plane transport.",
            PlaneRestrictionType.WEIGHT,
        )

    return _rejected(
        f"Item dimensions ({specs.linear_cm:g}cm total) exceed maximum allowed size "
        f"({OVERSIZED_MAX_LINEAR}cm) for plane transport.",
        PlaneRestrictionType.SIZE,
    )


def plane_restriction_details(specs: ItemSpecs) -> PlaneRestrictionDetails:
    check = check_plane_restrictions(specs)
    return PlaneRestrictionDetails(
        fits_carry_on=fits_carry_on(specs),
        fits_checked_baggage=fits_checked_baggage(specs),
        fits_oversized=fits_oversized(specs),
        restriction_message=check.reason,
    )
