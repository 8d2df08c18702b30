from clozer.models.domain import Stop
from clozer.services.planning.insights import compute_insights, select_unvisited


def _stop(sid: str, geocoded: bool = True, postal_code: str = "16000") -> Stop:
    return Stop(
        id=sid,
        lat=45.65 if geocoded else None,
        lng=0.15 if geocoded else None,
        postal_code=postal_code,
        city_name="Angoulême",
    )


def test_select_unvisited_skips_visited_and_ungeocoded():
    stops = [_stop("a"), _stop("b"), _stop("c", geocoded=False)]

    assert [stop.id for stop in select_unvisited(stops, {"a"})] == ["b"]


def test_empty_portfolio():
    insights = compute_insights([], set())

    assert insights.total_clients == 0
    assert insights.completion_rate == 0
    assert insights.most_visited_zone is None
    assert insights.suggested_next_action.startswith("Import")


def test_completion_rate_rounds_half_up():
    stops = [_stop(str(i)) for i in range(8)]

    insights = compute_insights(stops, {"0"})

    assert insights.completion_rate == 13
    assert insights.pending_clients == 7
    assert "Launch an optimized tour" in insights.suggested_next_action


def test_everything_visited():
    stops = [_stop("a"), _stop("b", postal_code="16100")]

    insights = compute_insights(stops, {"a", "b"})

    assert insights.completion_rate == 100
    assert insights.pending_clients == 0
    assert insights.pending_per_zone == {}
    assert insights.suggested_next_action.startswith("Congratulations")


def test_most_visited_zone_prefers_first_on_ties():
    stops = [_stop("a", postal_code="16100"), _stop("b"), _stop("c"), _stop("d", postal_code="16100"), _stop("e")]

    insights = compute_insights(stops, {"a", "b", "c", "d"})

    assert insights.most_visited_zone == "Nord Angoulême"
    assert insights.completion_rate == 80
    assert insights.suggested_next_action == "Almost done! Only 1 clients left to visit."
