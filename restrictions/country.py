"""
Purpose: Country-specific shipping restrictions.
What it does:
- Holds the per-country table (prohibited categories / items, documentation
  requirements, notes) that applies on top of general airline rules.
- Answers "is this category prohibited for this route?" with the
  destination checked before the origin.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class CountryRestrictionType(str, Enum):
    PROHIBITED = "prohibited"
    REQUIRES_DOCUMENTATION = "requires_documentation"


@dataclass(frozen=True)
class CountryRestriction:
    country_code: str
    prohibited_categories: List[str] = field(default_factory=list)
    prohibited_items: List[str] = field(default_factory=list)
    requires_documentation: List[str] = field(default_factory=list)
    notes: str = ""


@dataclass(frozen=True)
class CountryRestrictionCheck:
    is_restricted: bool
    reason: Optional[str] = None
    restriction_type: Optional[CountryRestrictionType] = None


_RESTRICTIONS: List[CountryRestriction] = [
    CountryRestriction(
        "AU",
        prohibited_categories=["food", "medical"],
        requires_documentation=["electronics", "tools"],
        notes="Australia has strict biosecurity laws. Food, plants, and some medical items require permits.",
    ),
    CountryRestriction(
        "NZ",
        prohibited_categories=["food"],
        requires_documentation=["medical"],
        notes="New Zealand has strict biosecurity requirements. Food items generally prohibited.",
    ),
    CountryRestriction(
        "US",
        prohibited_items=["weapons", "ammunition"],
        requires_documentation=["medical", "electronics"],
        notes="Firearms and ammunition require special permits and documentation.",
    ),
    CountryRestriction(
        "CA",
        prohibited_items=["weapons"],
        requires_documentation=["medical", "food"],
        notes="Firearms require permits. Food items may require inspection.",
    ),
    CountryRestriction(
        "GB",
        prohibited_items=["weapons"],
        requires_documentation=["medical", "electronics"],
        notes="Firearms require licenses. Some electronics may require documentation.",
    ),
    CountryRestriction(
        "FR",
        prohibited_items=["weapons"],
        requires_documentation=["medical", "food"],
        notes="Firearms require permits. Food items may be restricted.",
    ),
    CountryRestriction(
        "DE",
        prohibited_items=["weapons"],
        requires_documentation=["medical", "electronics"],
        notes="Firearms require permits. Some electronics may require CE marking documentation.",
    ),
    CountryRestriction(
        "IT",
        prohibited_items=["weapons"],
        requires_documentation=["medical", "food"],
        notes="Firearms require permits. Food items may be restricted.",
    ),
    CountryRestriction(
        "ES",
        prohibited_items=["weapons"],
        requires_documentation=["medical", "food"],
        notes="Firearms require permits. Dietary supplements and cosmetics may be restricted.",
    ),
    CountryRestriction(
        "SE",
        prohibited_items=["weapons"],
        requires_documentation=["medical", "food"],
        notes="Firearms require permits. Dietary supplements may be restricted.",
    ),
    CountryRestriction(
        "JP",
        prohibited_categories=["food", "medical"],
        requires_documentation=["electronics"],
        notes="Japan has strict import regulations. Food and medical items require permits. "
        "Electronics may need certification.",
    ),
    CountryRestriction(
        "CN",
        prohibited_categories=["food", "medical"],
        requires_documentation=["electronics", "tools"],
        notes="China has strict import regulations. Food, medical items, and electronics require "
        "permits and certification.",
    ),
    CountryRestriction(
        "IN",
        prohibited_categories=["food"],
        requires_documentation=["medical", "electronics"],
        notes="Food items may be restricted. Medical items and electronics require documentation.",
    ),
    CountryRestriction(
        "BR",
        prohibited_categories=["food"],
        requires_documentation=["medical", "electronics"],
        notes="Food items may be restricted. Medical items and electronics require ANVISA approval.",
    ),
    CountryRestriction(
        "MX",
        prohibited_items=["weapons"],
        requires_documentation=["medical", "food"],
        notes="Firearms require permits. Medical items and food may require documentation.",
    ),
    CountryRestriction(
        "AE",
        prohibited_categories=["food", "medical"],
        prohibited_items=["weapons"],
        notes="UAE has strict import regulations. Food, medical items, and firearms are heavily restricted.",
    ),
    CountryRestriction(
        "SA",
        prohibited_categories=["food", "medical"],
        prohibited_items=["weapons"],
        notes="Saudi Arabia has strict import regulations. Food, medical items, and firearms are "
        "heavily restricted.",
    ),
]

COUNTRY_RESTRICTIONS: Dict[str, CountryRestriction] = {r.country_code: r for r in _RESTRICTIONS}


def get_country_restrictions(country_code: str) -> Optional[CountryRestriction]:
    return COUNTRY_RESTRICTIONS.get((country_code or "").upper())


def _category_in(category: str, entries: List[str]) -> bool:
    category_lower = category.lower()
    return any(entry.lower() in category_lower for entry in entries)


def is_category_prohibited_for_country(category: str, country_code: str) -> bool:
    restriction = get_country_restrictions(country_code)
    if restriction is None:
        return False
    return _category_in(category, restriction.prohibited_categories)


def requires_documentation_for_country(category: str, country_code: str) -> bool:
    restriction = get_country_restrictions(country_code)
    if restriction is None:
        return False
    return _category_in(category, restriction.requires_documentation)


def country_restriction_message(country_code: str, category: Optional[str] = None) -> Optional[str]:
    restriction = get_country_restrictions(country_code)
    if restriction is None:
        return None

    code = restriction.country_code
    if category and is_category_prohibited_for_country(category, code):
        return f'{restriction.notes} Items in the "{category}" category are prohibited for {code}.'

    if category and requires_documentation_for_country(category, code):
        return (
            f'{restriction.notes} Items in the "{category}" category may require '
            f"special documentation for {code}."
        )

    return restriction.notes


def check_country_restrictions(
    origin_country: str,
    destination_country: str,
    category: Optional[str] = None,
) -> CountryRestrictionCheck:
    """
    Destination rules win: a prohibited destination category blocks, a
    documentation requirement is reported but does not block. The origin
    is only checked for prohibitions.
    """
    if not category:
        return CountryRestrictionCheck(is_restricted=False)

    if is_category_prohibited_for_country(category, destination_country):
        return CountryRestrictionCheck(
            is_restricted=True,
            reason=country_restriction_message(destination_country, category),
            restriction_type=CountryRestrictionType.PROHIBITED,
        )

    if requires_documentation_for_country(category, destination_country):
        return CountryRestrictionCheck(
            is_restricted=False,
            reason=country_restriction_message(destination_country, category),
            restriction_type=CountryRestrictionType.REQUIRES_DOCUMENTATION,
        )

    if is_category_prohibited_for_country(category, origin_country):
        return CountryRestrictionCheck(
            is_restricted=True,
            reason=country_restriction_message(origin_country, category),
            restriction_type=CountryRestrictionType.PROHIBITED,
        )

    return CountryRestrictionCheck(is_restricted=False)
