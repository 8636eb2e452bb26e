import httpx
import pytest
from unittest.mock import patch

from natureup.core.errors import AppError
from natureup.models.places_model import Place
from natureup.services.Places_service import PLACE_QUERIES, PlacesService, build_fallback_places, rank_places

ORIGIN = (37.7749, -122.4194)

ELEMENTS = [
    {"type": "node", "id": 1, "lat": 37.7800, "lon": -122.4194, "tags": {"name": "Dolores Park"}},
    {"type": "way", "id": 2, "center": {"lat": 37.7760, "lon": -122.4194}, "tags": {"ref": "Path 7"}},
    {"type": "node", "id": 3, "lat": 37.7900, "lon": -122.4194, "tags": {}},
    {"type": "node", "id": 4, "lat": 37.8000, "lon": -122.4194, "tags": {"name": "Far Reserve"}},
    {"type": "way", "id": 5, "tags": {"name": "No geometry"}},
]


def _place(id, distance):
    return Place(id=id, name=id, latitude=0.0, longitude=0.0, type="park", distance=distance)


def test_rank_places_sorts_dedupes_and_limits():
    places = [_place("a", 500), _place("b", 100), _place("a", 50), _place("c", 300), _place("d", 900)]

    ranked = rank_places(places)

    assert [p.id for p in ranked] == ["b", "c", "a"]
    assert [p.distance for p in ranked] == sorted(p.distance for p in ranked)


def test_rank_places_last_duplicate_wins():
    ranked = rank_places([_place("a", 10), _place("a", 20)])

    assert len(ranked) == 1
    assert ranked[0].distance == 20


def test_rank_places_resorts_after_duplicate_moves_back():
    places = [_place("a", 100), _place("b", 200), _place("a", 900), _place("c", 300)]

    ranked = rank_places(places)

    assert [p.id for p in ranked] == ["b", "c", "a"]
    assert [p.distance for p in ranked] == [200, 300, 900]


def test_fallback_places_are_offset_from_origin():
    places = build_fallback_places(10.0, 20.0)

    assert [p.id for p in places] == ["mock-1", "mock-2", "mock-3"]
    assert places[0].latitude == pytest.approx(10.01)
    assert places[0].longitude == pytest.approx(20.01)
    assert [p.distance for p in places] == [1200, 2100, 2800]


@pytest.mark.asyncio
async def test_live_search_ranks_and_exits_early(test_settings, make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json={"elements": ELEMENTS}))
    service = PlacesService(test_settings, transport=transport)

    result = await service.get_places(*ORIGIN)

    assert result.source == "live"
    assert not result.is_fallback
    assert result.error is None
    assert [p.id for p in result.places] == ["osm-2", "osm-1", "osm-3"]
    assert len({p.id for p in result.places}) == len(result.places)
    # Four usable elements per query, so the fourth query crosses the threshold
    assert len(transport.requests) == 4
    assert result.debug["totalResults"] == 16
    assert result.debug["searches"][0] == {"query": "amenity=park", "status": 200, "resultCount": 5}


@pytest.mark.asyncio
async def test_place_names_fall_back_to_ref_then_category(test_settings, make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json={"elements": ELEMENTS}))

    result = await PlacesService(test_settings, transport=transport).get_places(*ORIGIN)
    names = {p.id: p.name for p in result.places}

    assert names["osm-1"] == "Dolores Park"
    assert names["osm-2"] == "Path 7"
    assert names["osm-3"] == "beach"


@pytest.mark.asyncio
async def test_overpass_query_sent_as_data_param(test_settings, make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json={"elements": []}))

    await PlacesService(test_settings, transport=transport).get_places(*ORIGIN)

    query = transport.requests[0].url.params["data"]
    assert query.startswith("[out:json];")
    assert "node[amenity=park](around:8046.72,37.7749,-122.4194);" in query
    assert query.endswith("out center;")


@pytest.mark.asyncio
async def test_each_overpass_query_opens_its_own_client(test_settings, make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json={"elements": []}))

    with patch("natureup.services.Places_service.httpx.AsyncClient", wraps=httpx.AsyncClient) as factory:
        await PlacesService(test_settings, transport=transport).get_places(*ORIGIN)

    assert len(transport.requests) == len(PLACE_QUERIES)
    assert factory.call_count == len(PLACE_QUERIES)


@pytest.mark.asyncio
async def test_one_failed_query_is_skipped(test_settings, make_transport):
    def handler(request):
        if "amenity=park" in request.url.params["data"]:
            return httpx.Response(504, text="gateway timeout")
        return httpx.Response(200, json={"elements": ELEMENTS[:1]})

    transport = make_transport(handler)
    result = await PlacesService(test_settings, transport=transport).get_places(*ORIGIN)

    assert result.source == "live"
    assert "error" in result.debug["searches"][0]
    assert [p.id for p in result.places] == ["osm-1"]


@pytest.mark.asyncio
async def test_all_queries_failing_returns_fallback(test_settings, make_transport):
    transport = make_transport(lambda request: httpx.Response(500, text="boom"))

    result = await PlacesService(test_settings, transport=transport).get_places(*ORIGIN)

    assert result.is_fallback
    assert result.error == "Using fallback mock data"
    assert result.debug["mock"] is True
    assert [p.id for p in result.places] == ["mock-1", "mock-2", "mock-3"]
    assert result.places[0].latitude == pytest.approx(ORIGIN[0] + 0.01)


@pytest.mark.asyncio
async def test_missing_coordinates_rejected(test_settings, make_transport):
    transport = make_transport(lambda request: httpx.Response(200, json={"elements": []}))

    with pytest.raises(AppError) as exc:
        await PlacesService(test_settings, transport=transport).get_places(37.0, None)

    assert exc.value.status_code == 400
    assert transport.requests == []
