"""Postal-code zoning around the Angoulême depot.

Zones are derived from postal-code prefixes: two digits give the
département, three digits give a finer local area.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from ...models.domain import Stop

DEPARTMENT_LABELS: Dict[str, str] = {
    "16": "Charente",
    "17": "Charente-Maritime",
    "86": "Vienne",
    "24": "Dordogne",
    "87": "Haute-Vienne",
    "79": "Deux-Sèvres",
}

SUB_ZONE_LABELS: Dict[str, str] = {
    "160": "Angoulême Centre",
    "161": "Nord Angoulême",
    "162": "Est Angoulême (Cognac)",
    "163": "Sud Angoulême",
    "164": "Ouest Angoulême",
    "165": "Confolentais",
    "166": "Ruffécois",
    "167": "Rouillac",
    "168": "Soyaux/La Couronne",
    "171": "Charente-Maritime Nord",
    "172": "Charente-Maritime Centre",
}


def _prefix(postal_code: str, length: int) -> str:
    code = (postal_code or "").strip()
    prefix = code[:length]
    if len(prefix) < length or not prefix.isdigit():
        raise ValueError(f"Postal code {postal_code!r} is too short for a {length}-digit zone lookup")
    return prefix


def coarse_zone(postal_code: str) -> str:
    prefix = _prefix(postal_code, 2)
    return DEPARTMENT_LABELS.get(prefix, f"Zone {prefix}")


def sub_zone(postal_code: str, city_name: str) -> str:
    """Local area label, or the city name itself when the prefix is unmapped."""
    prefix = _prefix(postal_code, 3)
    return SUB_ZONE_LABELS.get(prefix, city_name)


def cluster_by_zone(stops: Sequence[Stop]) -> Dict[str, List[Stop]]:
    clusters: Dict[str, List[Stop]] = {}
    for stop in stops:
        clusters.setdefault(sub_zone(stop.postal_code, stop.city_name), []).append(stop)
    return clusters


def rank_zones(clusters: Dict[str, List[Stop]]) -> List[tuple[str, List[Stop]]]:
    """Zones ordered densest first; equal sizes keep their first-seen order."""
    return sorted(clusters.items(), key=lambda item: len(item[1]), reverse=True)
