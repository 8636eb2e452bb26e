import json
import httpx
import pytest

from natureup.core.errors import AppError, UpstreamError
from natureup.models.trails_model import TrailsRequest
from natureup.services.Trails_service import TrailsService

ALLTRAILS_OK = {
    "assumed_location": "San Francisco, CA",
    "data": [
        {
            "trail_name": "Lands End Trail",
            "hyperlink_url": "https://www.alltrails.com/trail/us/california/lands-end-trail",
            "geoloc": {"lat": 37.7802, "lng": -122.5117},
            "difficulty_rating": "easy",
            "length": 3.4,
            "elevation_gain": 544,
            "estimated_completion_time": "1h 20m",
            "star_rating": 4.7,
            "location": "Golden Gate National Recreation Area",
            "image": "https://images.alltrails.com/lands-end.jpg",
        },
        {
            "trail_name": "Batteries to Bluffs",
            "hyperlink_url": "https://www.alltrails.com/trail/us/california/batteries-to-bluffs",
            "geoloc": {"lat": 37.7921, "lng": -122.4836},
        },
    ],
}


def _request(**overrides):
    data = {"latitude": 37.7749, "longitude": -122.4194, **overrides}
    return TrailsRequest(**data)


def test_payload_converts_miles_to_meters(test_settings):
    payload = TrailsService(test_settings).build_payload(_request(radiusMiles=5, numTrails=3))

    assert payload["radius"] == 8047
    assert payload["num_trails"] == 3
    assert payload["raw_query"] == "trails near 37.7749,-122.4194"
    assert payload["location_helper"] == "near"


@pytest.mark.asyncio
async def test_search_maps_trails(test_settings, make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json=ALLTRAILS_OK))

    result = await TrailsService(test_settings, transport=transport).search(_request())

    assert result.count == 2
    assert result.assumed_location == "San Francisco, CA"
    first = result.trails[0]
    assert first.id == first.url
    assert first.name == "Lands End Trail"
    assert first.latitude == 37.7802
    assert first.type == "trail"
    assert first.difficulty == "easy"
    assert first.image_url.endswith("lands-end.jpg")
    assert result.trails[1].description == ""

    sent = transport.requests[0]
    assert sent.headers["authorization"] == "Bearer test-alltrails-token"
    assert json.loads(sent.content)["radius"] == 16093


@pytest.mark.asyncio
async def test_missing_token(test_settings, make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json=ALLTRAILS_OK))
    config = test_settings.model_copy(update={"ALLTRAILS_API_TOKEN": ""})

    with pytest.raises(UpstreamError) as exc:
        await TrailsService(config, transport=transport).search(_request())

    assert exc.value.message == "AllTrails API token not configured"
    assert exc.value.status_code == 500
    assert transport.requests == []


@pytest.mark.asyncio
async def test_missing_coordinates(test_settings, make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json=ALLTRAILS_OK))

    with pytest.raises(AppError) as exc:
        await TrailsService(test_settings, transport=transport).search(TrailsRequest(latitude=37.0))

    assert exc.value.status_code == 400
    assert exc.value.message == "Missing latitude or longitude"


@pytest.mark.asyncio
async def test_upstream_error_status(test_settings, make_transport):
    transport = make_transport(lambda request: httpx.Response(401, text="unauthorized"))

    with pytest.raises(UpstreamError) as exc:
        await TrailsService(test_settings, transport=transport).search(_request())

    assert exc.value.message == "AllTrails API returned 401"
    assert exc.value.code == "TRAIL_SEARCH_FAILED"
    assert exc.value.upstream_status == 401
