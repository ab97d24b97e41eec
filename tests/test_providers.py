import pytest
import requests

from drive_safety.core import ProviderUnavailableError
from drive_safety.core.geocoding import NominatimGeocoder
from drive_safety.core.osrm import fetch_route
from drive_safety.core.weather import fetch_weather
from drive_safety.safety.models import GeoPoint

from conftest import FakeHttp

OSRM_OK = {
    "code": "Ok",
    "routes": [{
        "distance": 5234.7,
        "duration": 754.2,
        "geometry": {
            "type": "LineString",
            "coordinates": [[78.4867, 17.3850], [78.4870, 17.3860], [78.4880, 17.3870]],
        },
    }],
}


class TestOsrm:
    def test_parses_route(self):
        http = FakeHttp(OSRM_OK)
        route = fetch_route(GeoPoint(17.385, 78.4867), GeoPoint(17.387, 78.488),
                            osrm_url="http://osrm.test/", session=http)

        assert route.points[0] == GeoPoint(17.3850, 78.4867)
        assert len(route.points) == 3
        assert route.distance_meters == 5234.7
        assert route.distance_text == "5.2 km"
        assert route.duration_text == "12 mins"

        call = http.calls[0]
        assert call["url"] == "http://osrm.test/route/v1/driving/78.4867,17.385;78.488,17.387"
        assert call["params"] == {"overview": "full", "geometries": "geojson"}

    def test_no_route(self):
        http = FakeHttp({"code": "NoRoute", "message": "Impossible route", "routes": []})
        with pytest.raises(ProviderUnavailableError, match="Impossible route"):
            fetch_route(GeoPoint(0, 0), GeoPoint(1, 1), session=http)

    def test_network_failure(self):
        http = FakeHttp(error=requests.ConnectionError("refused"))
        with pytest.raises(ProviderUnavailableError) as excinfo:
            fetch_route(GeoPoint(0, 0), GeoPoint(1, 1), session=http)
        assert excinfo.value.provider == "routing"

    def test_http_error(self):
        with pytest.raises(ProviderUnavailableError):
            fetch_route(GeoPoint(0, 0), GeoPoint(1, 1), session=FakeHttp({}, status_code=503))

    def test_malformed_geometry(self):
        payload = {"code": "Ok", "routes": [{"distance": 1, "duration": 1}]}
        with pytest.raises(ProviderUnavailableError, match="malformed"):
            fetch_route(GeoPoint(0, 0), GeoPoint(1, 1), session=FakeHttp(payload))


class TestNominatim:
    def test_short_query_skips_request(self):
        http = FakeHttp([])
        geocoder = NominatimGeocoder(session=http)
        assert geocoder.search("ab") == []
        assert http.calls == []

    def test_search_with_bias(self):
        http = FakeHttp([
            {"display_name": "Charminar, Ghansi Bazaar, Hyderabad", "lat": "17.3616", "lon": "78.4747"},
            {"display_name": "broken"},
        ])
        geocoder = NominatimGeocoder("http://geo.test", user_agent="tests", session=http)
        places = geocoder.search("Charminar", near=GeoPoint(17.0, 78.0))

        assert len(places) == 1
        place = places[0]
        assert place.main_name == "Charminar"
        assert place.sub_name == "Ghansi Bazaar, Hyderabad"
        assert place.point == GeoPoint(17.3616, 78.4747)

        call = http.calls[0]
        assert call["url"] == "http://geo.test/search"
        assert call["params"]["viewbox"] == "77.5,16.5,78.5,17.5"
        assert call["params"]["limit"] == 5
        assert call["headers"] == {"User-Agent": "tests"}

    def test_search_failure_raises(self):
        geocoder = NominatimGeocoder(session=FakeHttp(error=requests.Timeout("slow")))
        with pytest.raises(ProviderUnavailableError):
            geocoder.search("Hyderabad")

    def test_reverse(self):
        geocoder = NominatimGeocoder(session=FakeHttp({"display_name": "Paradise, Secunderabad"}))
        assert geocoder.reverse(17.44, 78.49) == "Paradise, Secunderabad"

    def test_reverse_falls_back_to_coordinates(self):
        geocoder = NominatimGeocoder(session=FakeHttp(error=requests.ConnectionError("down")))
        assert geocoder.reverse(17.44123, 78.49876) == "17.4412, 78.4988"


class TestWeather:
    def test_current_weather(self):
        http = FakeHttp({"current_weather": {"temperature": 18.2, "windspeed": 9.4, "weathercode": 61}})
        weather = fetch_weather(17.4, 78.5, base_url="http://meteo.test", session=http)

        assert weather.temperature == 18.2
        assert weather.windspeed == 9.4
        assert weather.condition == "rainy"
        assert http.calls[0]["params"]["current_weather"] == "true"

    def test_failure_returns_none(self):
        assert fetch_weather(17.4, 78.5, session=FakeHttp(error=requests.ConnectionError("x"))) is None
        assert fetch_weather(17.4, 78.5, session=FakeHttp({"unexpected": True})) is None

    @pytest.mark.parametrize("temperature,code,condition", [
        (25.0, 80, "sunny"),
        (15.0, 51, "rainy"),
        (15.0, 3, "cloudy"),
    ])
    def test_condition(self, temperature, code, condition):
        http = FakeHttp({"current_weather": {"temperature": temperature, "windspeed": 0, "weathercode": code}})
        assert fetch_weather(0, 0, session=http).condition == condition
