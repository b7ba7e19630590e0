"""Compatibility scoring between a requester and a target listing.

Everything here is pure: the same inputs always produce the same score, and
nothing is read from or written to storage. Scores are advisory, so malformed
input (an inverted date range, say) lowers a sub-score instead of raising.

Weights:
    date overlap        30%
    location (distance) 20%
    property type       25%
    university          25%
"""

import math
from typing import Optional
from pydantic import BaseModel

from swapstay.models.listing import Listing, PropertyType
from swapstay.models.swap_request import DateRange, MatchingFactors, RequestType
from swapstay.models.user import User


DATE_WEIGHT = 0.30
DISTANCE_WEIGHT = 0.20
PROPERTY_WEIGHT = 0.25
UNIVERSITY_WEIGHT = 0.25

# Fallbacks when there is no offered listing to compare against
RENT_DISTANCE_SCORE = 100
RENT_PROPERTY_SCORE = 80

# Location is approximated by university name; coordinates are not modeled.
UNIVERSITY_REGIONS: dict[str, tuple[str, ...]] = {
    "California": (
        "Stanford University",
        "UC Berkeley",
        "UCLA",
        "USC",
        "UC San Diego",
        "UC Davis",
    ),
    "Northeast": (
        "Harvard University",
        "MIT",
        "Yale University",
        "Columbia University",
        "NYU",
        "Boston University",
    ),
    "Texas": (
        "University of Texas at Austin",
        "Texas Tech University",
        "Texas A&M University",
        "Rice University",
        "SMU",
    ),
    "Midwest": (
        "University of Chicago",
        "Northwestern University",
        "University of Michigan",
        "Notre Dame",
    ),
}

# Types a requester would reasonably accept in place of their own.
# Keyed by the requester's type; lookups are one-directional.
COMPATIBLE_PROPERTY_TYPES: dict[PropertyType, tuple[PropertyType, ...]] = {
    PropertyType.APARTMENT: (PropertyType.STUDIO, PropertyType.CONDO),
    PropertyType.STUDIO: (PropertyType.APARTMENT,),
    PropertyType.CONDO: (PropertyType.APARTMENT,),
    PropertyType.HOUSE: (PropertyType.TOWNHOUSE,),
    PropertyType.TOWNHOUSE: (PropertyType.HOUSE,),
    PropertyType.DORM: (PropertyType.APARTMENT, PropertyType.STUDIO),
}

UNIVERSITY_TIERS: dict[str, int] = {
    "Harvard University": 5,
    "Stanford University": 5,
    "MIT": 5,
    "Yale University": 5,
    "Columbia University": 4,
    "UC Berkeley": 4,
    "UCLA": 4,
    "University of Chicago": 4,
    "Northwestern University": 3,
    "NYU": 3,
    "University of Michigan": 3,
    "University of Texas at Austin": 3,
    "Texas Tech University": 2,
}
DEFAULT_UNIVERSITY_TIER = 2


class MatchResult(BaseModel):
    """Overall score plus the factors it was built from."""
    score: int
    factors: MatchingFactors


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def calculate_date_overlap(requested: DateRange, available: DateRange) -> int:
    """Percentage of the requested stay that falls inside the availability window.

    Overlap is counted in calendar days including both boundary days; the
    denominator is always the requested span, never the listing's window.

    The two sides deliberately count differently: the numerator includes
    both boundary days while the denominator counts nights. Jun 1-30
    requested against Jun 15-Jul 15 gives 16 / 29 -> 55, which is the
    published contract. The cost is that short partial stays read high
    (Jun 1-3 against availability from Jun 2 gives 2 / 2 -> 100) before the
    clamp. Changing either side alone breaks the 55 case.
    """
    requested_days = requested.nights
    if requested_days <= 0:
        return 0

    overlap_start = max(requested.start_date, available.start_date)
    overlap_end = min(requested.end_date, available.end_date)
    if overlap_start >= overlap_end:
        return 0

    overlap_days = (overlap_end - overlap_start).days + 1
    return clamp_score(overlap_days / requested_days * 100)


def region_for(university: str) -> Optional[str]:
    for region, universities in UNIVERSITY_REGIONS.items():
        if university in universities:
            return region
    return None


def calculate_location_match(requester_university: str, target_university: str) -> int:
    """100 same campus, 75 same region, 50 anywhere else."""
    if requester_university == target_university:
        return 100

    requester_region = region_for(requester_university)
    if requester_region is not None and requester_region == region_for(target_university):
        return 75

    return 50


def _bedroom_bonus(difference: int) -> int:
    if difference == 0:
        return 30
    if difference == 1:
        return 20
    if difference == 2:
        return 10
    return 0


def _bathroom_bonus(difference: float) -> int:
    if difference <= 0.5:
        return 20
    if difference <= 1:
        return 15
    return 5


def amenity_similarity(requester_listing: Listing, target_listing: Listing) -> float:
    """Jaccard similarity of enabled amenities scaled to 0-10."""
    mine = requester_listing.enabled_amenities()
    theirs = target_listing.enabled_amenities()
    union = mine | theirs
    if not union:
        return 0.0
    return len(mine & theirs) / len(union) * 10


def calculate_property_type_match(requester_listing: Listing, target_listing: Listing) -> int:
    score: float = 0

    if requester_listing.property_type == target_listing.property_type:
        score += 40
    elif target_listing.property_type in COMPATIBLE_PROPERTY_TYPES.get(requester_listing.property_type, ()):
        score += 25
    else:
        # Any housing beats none
        score += 10

    score += _bedroom_bonus(abs(requester_listing.bedrooms - target_listing.bedrooms))
    score += _bathroom_bonus(abs(requester_listing.bathrooms - target_listing.bathrooms))
    score += amenity_similarity(requester_listing, target_listing)

    return clamp_score(score)


def calculate_university_match(requester_university: str, target_university: str) -> int:
    """Same campus wins outright; otherwise compare prestige tiers."""
    if requester_university == target_university:
        return 100

    requester_tier = UNIVERSITY_TIERS.get(requester_university, DEFAULT_UNIVERSITY_TIER)
    target_tier = UNIVERSITY_TIERS.get(target_university, DEFAULT_UNIVERSITY_TIER)
    tier_diff = abs(requester_tier - target_tier)

    if tier_diff == 0:
        return 85
    if tier_diff == 1:
        return 70
    if tier_diff == 2:
        return 55
    return 40


def calculate_compatibility_score(
    requester_listing: Optional[Listing],
    target_listing: Listing,
    requester: User,
    requested_dates: DateRange,
    request_type: RequestType,
) -> MatchResult:
    """Score how well a requester fits a target listing.

    A SWAP without an offered listing falls back to the RENT defaults for
    the location and property-type factors.
    """
    available = DateRange(
        start_date=target_listing.available_from,
        end_date=target_listing.available_to,
    )
    date_overlap = calculate_date_overlap(requested_dates, available)

    compare_listings = requester_listing is not None and request_type == RequestType.SWAP
    if compare_listings:
        distance_match = calculate_location_match(
            requester_listing.near_university,
            target_listing.near_university,
        )
        property_type_match = calculate_property_type_match(requester_listing, target_listing)
    else:
        distance_match = RENT_DISTANCE_SCORE
        property_type_match = RENT_PROPERTY_SCORE

    university_match = calculate_university_match(
        requester.university,
        target_listing.near_university,
    )

    # Sub-scores are already rounded; the weighted sum is rounded again.
    overall_score = clamp_score(
        date_overlap * DATE_WEIGHT
        + distance_match * DISTANCE_WEIGHT
        + property_type_match * PROPERTY_WEIGHT
        + university_match * UNIVERSITY_WEIGHT
    )

    factors = MatchingFactors(
        date_overlap=date_overlap,
        distance_match=distance_match,
        property_type_match=property_type_match,
        university_match=university_match,
        overall_score=overall_score,
    )
    return MatchResult(score=overall_score, factors=factors)


def generate_match_insights(factors: MatchingFactors) -> list[str]:
    """Human-readable highlights for a set of factors, in display order."""
    insights: list[str] = []

    if factors.date_overlap >= 90:
        insights.append("Perfect date alignment! 📅")
    elif factors.date_overlap >= 70:
        insights.append("Great date compatibility 📅")
    elif factors.date_overlap < 50:
        insights.append("Limited date overlap ⚠️")

    if factors.distance_match >= 90:
        insights.append("Same university area! 🎓")
    elif factors.distance_match >= 75:
        insights.append("Same region 🌍")

    if factors.property_type_match >= 85:
        insights.append("Perfect property match 🏠")
    elif factors.property_type_match >= 70:
        insights.append("Compatible properties 🏠")

    if factors.university_match >= 90:
        insights.append("Same university! 🎓")
    elif factors.university_match >= 70:
        insights.append("Academic compatibility ✅")

    if factors.overall_score >= 90:
        insights.append("Excellent match! ⭐")
    elif factors.overall_score >= 80:
        insights.append("Great compatibility! ⭐")
    elif factors.overall_score >= 70:
        insights.append("Good potential match ⭐")

    return insights
