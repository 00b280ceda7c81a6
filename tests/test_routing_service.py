import threading

import numpy as np
import pytest

from evacmap.models.domain import CandidateRoute
from evacmap.services.routing import service as routing_service
from evacmap.services.session import EvacuationSession

START = (26.8309, 80.9214)
END = (26.8537, 80.9458)


def _route(meters: float, seconds: float, coords: list[tuple[float, float]]) -> dict:
    return {
        "distance": meters,
        "duration": seconds,
        "geometry": {"type": "LineString", "coordinates": [[lon, lat] for lat, lon in coords]},
    }


SHORT_VIA_WEST = _route(3200.0, 420.0, [START, (26.8420, 80.9300), END])
LONG_VIA_EAST = _route(4100.0, 500.0, [START, (26.8350, 80.9500), END])


class DummyOSRM:
    def __init__(self, routes=None, error: Exception | None = None):
        self.routes = routes or []
        self.error = error
        self.calls = []

    def route(self, coordinates, alternatives=True):
        self.calls.append((list(coordinates), alternatives))
        if self.error:
            raise self.error
        return {"code": "Ok", "routes": self.routes}


@pytest.fixture
def session() -> EvacuationSession:
    session = EvacuationSession.create(rng=np.random.default_rng(0))
    session.start = START
    session.end = END
    return session


def test_selects_shortest_route_when_nothing_blocked(session: EvacuationSession):
    client = DummyOSRM(routes=[LONG_VIA_EAST, SHORT_VIA_WEST])

    outcome = routing_service.compute_evacuation_route(session, client=client)

    assert outcome.status == "ok"
    assert outcome.selected.index == 1
    assert outcome.candidates_considered == 2
    assert session.distance_km == 3.2
    assert session.duration_min == 7.0
    assert session.route[0] == START
    assert client.calls == [([START, END], True)]


def test_avoids_blocked_alternative(session: EvacuationSession):
    session.add_blockage((26.8420, 80.9300))
    client = DummyOSRM(routes=[SHORT_VIA_WEST, LONG_VIA_EAST])

    outcome = routing_service.compute_evacuation_route(session, client=client)

    assert outcome.status == "ok"
    assert outcome.selected.index == 1
    assert session.distance_km == 4.1


def test_all_blocked_clears_previous_route(session: EvacuationSession):
    session.apply_route(CandidateRoute(index=0, distance_m=1.0, duration_s=1.0, coordinates=[START, END]))
    session.add_blockage(START)
    client = DummyOSRM(routes=[SHORT_VIA_WEST, LONG_VIA_EAST])

    outcome = routing_service.compute_evacuation_route(session, client=client)

    assert outcome.status == "all_blocked"
    assert outcome.message == routing_service.ALL_BLOCKED_MESSAGE
    assert outcome.selected is None
    assert session.route == []
    assert session.distance_km is None
    assert session.duration_min is None


def test_no_routes_reports_no_route(session: EvacuationSession):
    outcome = routing_service.compute_evacuation_route(session, client=DummyOSRM(routes=[]))

    assert outcome.status == "no_route"
    assert outcome.message == "No route found"
    assert session.route == []


def test_provider_failure_keeps_current_route(session: EvacuationSession):
    session.apply_route(CandidateRoute(index=0, distance_m=2000.0, duration_s=120.0, coordinates=[START, END]))
    client = DummyOSRM(error=ConnectionError("network down"))

    outcome = routing_service.compute_evacuation_route(session, client=client)

    assert outcome.status == "failed"
    assert outcome.message == "Failed to compute route"
    assert session.distance_km == 2.0
    assert len(client.calls) == 1


def test_missing_end_point_is_rejected(session: EvacuationSession):
    session.end = None
    with pytest.raises(ValueError):
        routing_service.compute_evacuation_route(session, client=DummyOSRM(routes=[SHORT_VIA_WEST]))


def test_uses_default_client_when_none_given(session: EvacuationSession, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(routing_service, "OSRMClient", lambda *args, **kwargs: DummyOSRM(routes=[SHORT_VIA_WEST]))

    outcome = routing_service.compute_evacuation_route(session)

    assert outcome.status == "ok"


def test_truncated_polyline_route_is_dropped(session: EvacuationSession):
    truncated = {"distance": 100.0, "duration": 10.0, "geometry": "_p~iF~ps|U_"}

    outcome = routing_service.compute_evacuation_route(session, client=DummyOSRM(routes=[truncated]))

    assert outcome.status == "no_route"
    assert outcome.message == routing_service.NO_ROUTE_MESSAGE


def test_session_is_locked_while_route_is_computed(session: EvacuationSession):
    acquired_elsewhere = []

    class ConcurrentEditOSRM(DummyOSRM):
        def route(self, coordinates, alternatives=True):
            def _try_edit():
                got_lock = session.lock.acquire(blocking=False)
                acquired_elsewhere.append(got_lock)
                if got_lock:
                    session.lock.release()

            worker = threading.Thread(target=_try_edit)
            worker.start()
            worker.join()
            return super().route(coordinates, alternatives)

    outcome = routing_service.compute_evacuation_route(session, client=ConcurrentEditOSRM(routes=[SHORT_VIA_WEST]))

    assert outcome.status == "ok"
    assert acquired_elsewhere == [False]
    assert session.lock.acquire(blocking=False)
    session.lock.release()


def test_reset_waits_for_route_in_flight(session: EvacuationSession):
    reset_done = threading.Event()

    class SlowOSRM(DummyOSRM):
        def route(self, coordinates, alternatives=True):
            resetter.start()
            # The reset cannot run while the route is being computed.
            assert not reset_done.wait(timeout=0.2)
            return super().route(coordinates, alternatives)

    def _reset():
        with session.lock:
            session.reset()
        reset_done.set()

    resetter = threading.Thread(target=_reset)
    outcome = routing_service.compute_evacuation_route(session, client=SlowOSRM(routes=[SHORT_VIA_WEST]))
    resetter.join(timeout=5)

    assert outcome.status == "ok"
    assert reset_done.is_set()
    assert session.start is None
    assert session.route == []
