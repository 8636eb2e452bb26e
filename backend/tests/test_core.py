import logging
import pytest
from unittest.mock import MagicMock, patch

from natureup.core.db_connection import MongoConnection
from natureup.core.errors import AppError, UpstreamError, missing_coordinates
from natureup.core.logger import NO_TRACE, TraceIdFilter


def test_mongo_connection_requires_mongodb_mode(test_settings):
    with pytest.raises(RuntimeError):
        MongoConnection(test_settings)


def test_mongo_connection_shares_one_client(test_settings):
    config = test_settings.model_copy(update={"STORAGE_MODE": "mongodb", "MONGO_DB_NAME": "natureup_test"})
    client = MagicMock()

    with patch("natureup.core.db_connection.AsyncIOMotorClient", return_value=client) as factory:
        first = MongoConnection(config).cache_collection()
        second = MongoConnection(config).cache_collection()
        MongoConnection.close()

    factory.assert_called_once_with(config.MONGO_URI, tz_aware=True)
    client.__getitem__.assert_called_with("natureup_test")
    assert first is second
    client.close.assert_called_once()
    assert MongoConnection._client is None


def test_trace_filter_fills_missing_trace_id():
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)

    assert TraceIdFilter().filter(record)
    assert record.trace_id == NO_TRACE


def test_app_error_body_merges_extra():
    err = AppError("boom", status_code=418, code="TEAPOT", extra={"trails": []})

    assert err.to_body() == {"code": "TEAPOT", "message": "boom", "trails": []}


def test_upstream_error_is_500():
    err = UpstreamError("osrm", "OSRM API error: 502", upstream_status=502)

    assert err.status_code == 500
    assert err.service == "osrm"
    assert err.upstream_status == 502


def test_missing_coordinates_allows_zero():
    missing_coordinates(0.0, 0.0)

    with pytest.raises(AppError) as exc:
        missing_coordinates(None, 0.0)
    assert exc.value.code == "MISSING_COORDINATES"
