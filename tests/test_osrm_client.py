import httpx
import pytest

from evacmap.services.routing import osrm_client as osrm_module
from evacmap.services.routing.osrm_client import OSRMClient, check_health, decode_polyline

START = (26.8309, 80.9214)
END = (26.8537, 80.9458)


def _client_with(handler, **kwargs) -> OSRMClient:
    client = OSRMClient(base_url="http://osrm.test/", max_retries=0, backoff_seconds=0, **kwargs)
    client._get_client = lambda: httpx.Client(transport=httpx.MockTransport(handler))
    return client


def test_route_builds_lon_lat_url_and_params():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"code": "Ok", "routes": [{"distance": 1.0, "duration": 1.0}]})

    payload = _client_with(handler, profile="driving", geometries="geojson").route([START, END])

    assert payload["routes"]
    assert seen["path"] == "/route/v1/driving/80.9214,26.8309;80.9458,26.8537"
    assert seen["params"]["alternatives"] == "true"
    assert seen["params"]["overview"] == "full"
    assert seen["params"]["geometries"] == "geojson"


def test_route_requires_two_coordinates():
    with pytest.raises(ValueError):
        _client_with(lambda request: httpx.Response(200)).route([START])


def test_no_route_code_yields_empty_routes():
    handler = lambda request: httpx.Response(200, json={"code": "NoRoute", "message": "Impossible route"})
    assert _client_with(handler).route([START, END]) == {"code": "NoRoute", "routes": []}


def test_error_code_raises_value_error():
    handler = lambda request: httpx.Response(200, json={"code": "InvalidQuery", "message": "bad"})
    with pytest.raises(ValueError, match="bad"):
        _client_with(handler).route([START, END])


def test_http_error_is_not_retried_by_default():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    with pytest.raises(httpx.HTTPStatusError):
        _client_with(handler).route([START, END])
    assert len(calls) == 1


def test_connection_error_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ConnectionError):
        _client_with(handler).route([START, END])


def test_retries_when_configured():
    responses = iter([httpx.Response(502), httpx.Response(200, json={"code": "Ok", "routes": []})])
    client = _client_with(lambda request: next(responses))
    client.max_retries = 1

    assert client.route([START, END]) == {"code": "Ok", "routes": []}


def test_missing_base_url(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(osrm_module.settings, "osrm_base_url", None)
    with pytest.raises(ValueError):
        OSRMClient()
    assert check_health() is False


def test_decode_polyline_reference_string():
    coordinates = decode_polyline("_p~iF~ps|U_ulLnnqC_mqNvxq`@")
    assert coordinates == [
        pytest.approx((38.5, -120.2)),
        pytest.approx((40.7, -120.95)),
        pytest.approx((43.252, -126.453)),
    ]


def test_decode_empty_polyline():
    assert decode_polyline("") == []


@pytest.mark.parametrize("polyline", ["_p~iF~ps|U_", "_p~iF", "_"])
def test_decode_polyline_rejects_truncated_string(polyline: str):
    with pytest.raises(ValueError, match="Truncated polyline"):
        decode_polyline(polyline)
