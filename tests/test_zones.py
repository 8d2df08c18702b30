import pytest

from clozer.models.domain import Stop
from clozer.services.planning.zones import cluster_by_zone, coarse_zone, rank_zones, sub_zone


def _stop(stop_id: str, postal_code: str, city: str) -> Stop:
    return Stop(id=stop_id, lat=45.65, lng=0.15, postal_code=postal_code, city_name=city)


def test_cluster_by_zone_groups_on_three_digit_prefix():
    stops = [
        _stop("a", "16000", "Angoulême"),
        _stop("b", "16100", "Cognac"),
        _stop("c", "16000", "Angoulême"),
        _stop("d", "99999", "Nowhereville"),
    ]

    clusters = cluster_by_zone(stops)

    assert list(clusters) == ["Angoulême Centre", "Nord Angoulême", "Nowhereville"]
    assert [stop.id for stop in clusters["Angoulême Centre"]] == ["a", "c"]
    assert [stop.id for stop in clusters["Nord Angoulême"]] == ["b"]
    assert [stop.id for stop in clusters["Nowhereville"]] == ["d"]


def test_cluster_by_zone_assigns_every_stop_once():
    stops = [_stop(str(i), code, "Ville") for i, code in enumerate(["16000", "17100", "16500", "16000", "24000"])]

    clusters = cluster_by_zone(stops)

    member_ids = [stop.id for members in clusters.values() for stop in members]
    assert sorted(member_ids) == sorted(stop.id for stop in stops)


def test_coarse_zone_labels():
    assert coarse_zone("16000") == "Charente"
    assert coarse_zone("79000") == "Deux-Sèvres"
    assert coarse_zone("33000") == "Zone 33"


def test_sub_zone_falls_back_to_city_name():
    assert sub_zone("16800", "Soyaux") == "Soyaux/La Couronne"
    assert sub_zone("86000", "Poitiers") == "Poitiers"


@pytest.mark.parametrize("postal_code", ["", "1", "16", "A6000"])
def test_short_postal_code_is_rejected(postal_code):
    with pytest.raises(ValueError):
        sub_zone(postal_code, "Angoulême")


def test_rank_zones_densest_first_with_stable_ties():
    clusters = {
        "one": [_stop("a", "16000", "x")],
        "three": [_stop("b", "16000", "x")] * 3,
        "also-one": [_stop("c", "16000", "x")],
    }

    ranked = rank_zones(clusters)

    assert [zone for zone, _ in ranked] == ["three", "one", "also-one"]
