from __future__ import annotations

from enum import Enum


class TrainType(str, Enum):
    """Train types offered for an announcement, in display order.

    Using (str, Enum) for Python 3.10 compatibility (StrEnum requires 3.11+).
    """

    INTERCITY = "Intercity"
    SPRINTER = "Sprinter"
    INTERCITY_DIRECT = "Intercity Direct"
    THALYS = "Thalys"
    EUROSTAR = "Eurostar"
    IC_DIRECT = "IC Direct"
    ICE = "ICE"
    NIGHTJET = "Nightjet"
    IC_BERLIJN = "IC Berlijn"


class Notice(str, Enum):
    """Standard service notices that can be appended to an announcement."""

    RIJDT_NIET = "Rijdt niet"
    VERTRAGING = "Vertraging"
    GEDEELTELIJK_OPGEHEVEN = "Gedeeltelijk opgeheven"
    ANDERE_ROUTE = "Rijdt via andere route"
    EXTRA_TREIN = "Extra trein"
    MINDER_WAGONS = "Minder wagons"
    STOPT_NIET_OVERAL = "Stopt niet op alle stations"
    VERVANGEND_VERVOER = "Vervangend vervoer"
    AANRIJDING_PERSOON = "Aanrijding persoon"
    AANRIJDING_DIER = "Aanrijding dier"
    AANRIJDING_VOERTUIG = "Aanrijding voertuig"
    WISSELSTORING = "Wisselstoring"
    DEFECTE_TREIN = "Defecte trein"
    WEERSOMSTANDIGHEDEN = "Weersomstandigheden"
    SEINSTORING = "Seinsstoring"
    DEFECTE_BOVENLEIDING = "Defecte bovenleiding"


class StationRole(str, Enum):
    """Which endpoint of the journey a station selection applies to."""

    FROM = "from"
    TO = "to"


class RouteStatus(str, Enum):
    """Result kinds of a single route derivation."""

    APPLIED = "applied"  # Response accepted, RouteStops replaced
    STALE = "stale"  # A newer request was issued; response discarded
    FAILED = "failed"  # Route service failure; RouteStops unchanged
    CLEARED = "cleared"  # An endpoint is empty; RouteStops reset, no request
