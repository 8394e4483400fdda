"""
Exam venue lookup.

Venue names in the admissions data are typed inconsistently
("Bohol Island State University - Candijay Campus" vs
"BoholIslandStateUniversity-CandijayCampus"), so both sides are
normalized before an exact comparison.
"""

import re
from typing import List, Optional

from .models import VenueLocation

VENUES: List[VenueLocation] = [
    VenueLocation(
        name="BoholIslandStateUniversity-CandijayCampus",
        address="Bohol Island State University Candijay Campus, Tagbilaran East Road, Poblacion, Candijay, Bohol, Central Visayas, 6312, Philippines",
        lat=9.83486805,
        lng=124.52998639604577,
    ),
    VenueLocation(
        name="BoholIslandStateUniversity-BalilihanCampus",
        address="Bohol Island State University - Balilihan Campus, Corella - Balilihan Road, Del Carmen Weste, Poblacion, Balilihan, Bohol, Central Visayas, Philippines",
        lat=9.7446957,
        lng=123.962162,
    ),
    VenueLocation(
        name="BoholIslandStateUniversity-BilarCampus",
        address="P495+6RF, Bilar, Bohol",
        lat=9.718288762783592,
        lng=124.10953433698481,
    ),
    VenueLocation(
        name="BoholIslandStateUniversity-BINGAG-DAUISCampus",
        address="JR32+GVM, Dauis - Panglao Rd, Dauis, Bohol",
        lat=9.604044356653406,
        lng=123.80222104253725,
    ),
    VenueLocation(
        name="BoholIslandStateUniversity-CalapeCampus",
        address="VVVJ+RXG, Calape, 6328 Bohol",
        lat=9.894687690448325,
        lng=123.88256918301862,
    ),
    VenueLocation(
        name="BoholIslandStateUniversity-CLARINCampus",
        address="X27F+CQ3, Clarin, Bohol",
        lat=9.963720190699068,
        lng=124.02443383419356,
    ),
    VenueLocation(
        name="FaraonNationalHighSchool-Jagna,Bohol",
        address="J8MW+823, Jagna, Bohol",
        lat=9.63346924137348,
        lng=124.34514915417864,
    ),
    VenueLocation(
        name="KatipunanNationalHighSchool-Carmen,Bohol",
        address="R6Q9+PVH, Carmen, Bohol",
        lat=9.839539081686855,
        lng=124.21975492349436,
    ),
    VenueLocation(
        name="SanJoseNationalHighSchool-Talibon,Bohol",
        address="48VC+G78, San Jose, Talibon, Bohol, San Jose Barangay Rd, Talibon, Bohol",
        lat=10.143972729160124,
        lng=124.32074733884302,
    ),
    VenueLocation(
        name="UbayNationalScienceHighSchool-Ubay,Bohol",
        address="2FWF+QVJ, E Aumentado Ave, Ubay, Bohol",
        lat=10.047120454674284,
        lng=124.47457192164639,
    ),
]


def normalize_venue_name(name: Optional[str]) -> str:
    """Remove whitespace, hyphens and commas, then lowercase"""
    if not name:
        return ""
    return re.sub(r'[-,]', '', re.sub(r'\s+', '', name)).lower()


def search_venue(
    venue_name: Optional[str],
    venues: Optional[List[VenueLocation]] = None
) -> Optional[VenueLocation]:
    """
    Find a venue by name.

    Args:
        venue_name: Venue as written in the admissions data
        venues: Table to search, defaults to the built-in VENUES

    Returns:
        The matching VenueLocation, or None
    """
    normalized = normalize_venue_name(venue_name)
    if not normalized:
        return None

    for venue in (VENUES if venues is None else venues):
        if normalize_venue_name(venue.name) == normalized:
            return venue
    return None


def maps_search_url(venue: VenueLocation) -> str:
    """Google Maps URL pinned on the venue"""
    return f"https://www.google.com/maps/search/?api=1&query={venue.lat},{venue.lng}"


def directions_url(venue: VenueLocation) -> str:
    """Google Maps directions from the visitor's location to the venue"""
    return f"https://www.google.com/maps/dir/?api=1&destination={venue.lat},{venue.lng}"
