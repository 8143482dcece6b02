"""Provider continuation links (best-effort; on mobile these may open the apps)."""

from __future__ import annotations

from urllib.parse import quote

LINK_GROUPS: tuple[str, ...] = ("ola", "uber", "rapido", "namma")

OLA_BOOKING_URL = "https://book.olacabs.com/"
UBER_UNIVERSAL_URL = "https://m.uber.com/ul/"
# No public deep-link parameters for these two.
RAPIDO_URL = "https://rapido.bike/"
NAMMA_YATRI_URL = "https://nammayatri.in/"

# Same unreserved set as JavaScript's encodeURIComponent.
_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_COMPONENT_SAFE)


def build_links(origin: str, destination: str) -> dict[str, str]:
    pickup = encode_component(origin)
    drop = encode_component(destination)
    return {
        "ola": f"{OLA_BOOKING_URL}?pickup={pickup}&drop={drop}",
        "uber": f"{UBER_UNIVERSAL_URL}?action=setPickup&pickup={pickup}&dropoff={drop}",
        "rapido": RAPIDO_URL,
        "namma": NAMMA_YATRI_URL,
    }


__all__ = ["LINK_GROUPS", "build_links", "encode_component"]
