"""App-level behaviour: routing errors, body parsing, config and logging."""

import json
import logging

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError as PydanticValidationError

from config import Settings
from errors import ApiError, StatePreconditionError
from main import app
from observability import HANDLER_NAME, JSONFormatter, TextFormatter, setup_logging


def test_root(client):
    assert client.get("/").json() == {"message": "Restaurant Ordering API running"}


def test_unknown_path_is_404(client):
    response = client.get("/menus")
    assert response.status_code == 404
    assert response.json() == {"error": "Path not found: /menus"}


def test_405_keeps_allow_header(client):
    response = client.delete("/dishes")
    assert response.status_code == 405
    assert "GET" in response.headers["allow"]


def test_invalid_json_body_is_400(client):
    response = client.post(
        "/dishes", content=b"{not json", headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_non_object_data_is_400(client):
    response = client.post("/orders", json={"data": ["a"]})
    assert response.status_code == 400
    assert response.json() == {"error": "Request body must be a JSON object with a 'data' object"}


def test_api_error_to_response():
    err = StatePreconditionError("A delivered order cannot be changed", 400)
    assert err.status_code == 400
    assert err.to_response() == {"error": "A delivered order cannot be changed"}
    assert ApiError("boom").status_code == 500


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("LOG_FORMAT", "JSON")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("SEED_DATA_PATH", "")
    settings = Settings(_env_file=None)
    assert settings.port == 9000
    assert settings.log_format == "json"
    assert settings.cors_origin_list == ["http://a.test", "http://b.test"]
    assert settings.seed_data_path is None


def test_settings_defaults(monkeypatch):
    for name in ("HOST", "PORT", "LOG_LEVEL", "LOG_FORMAT", "CORS_ORIGINS", "SEED_DATA_PATH"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert (settings.host, settings.port, settings.log_level) == ("0.0.0.0", 8000, "INFO")
    assert settings.cors_origin_list == ["*"]


def test_settings_reject_unknown_log_format(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "xml")
    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None)


def _record(**extras):
    record = logging.LogRecord("orders", logging.INFO, __file__, 1, "Created %s", ("x",), None)
    for key, value in extras.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields():
    payload = json.loads(JSONFormatter().format(_record(resource="orders", record_id="7")))
    assert payload["message"] == "Created x"
    assert payload["level"] == "INFO"
    assert payload["resource"] == "orders"
    assert payload["record_id"] == "7"
    assert "path" not in payload
    assert "lineno" not in payload


def test_text_formatter_appends_extra_fields():
    line = TextFormatter().format(_record(status=404, path="/orders/9"))
    assert line.endswith("[orders] Created x path=/orders/9 status=404")


def test_setup_logging_sets_level():
    handler = setup_logging("warning", "json")
    try:
        assert logging.root.level == logging.WARNING
        assert isinstance(handler.formatter, JSONFormatter)
    finally:
        logging.root.removeHandler(handler)


def test_setup_logging_twice_keeps_one_handler():
    first = setup_logging("INFO", "text")
    second = setup_logging("INFO", "json")
    try:
        assert first not in logging.root.handlers
        assert [h for h in logging.root.handlers if h.get_name() == HANDLER_NAME] == [second]
    finally:
        logging.root.removeHandler(second)


def test_lifespan_loads_seed_data(monkeypatch, tmp_path):
    import config
    import database

    seed = tmp_path / "seed.json"
    seed.write_text(json.dumps({"dishes": [{
        "id": "seed-1", "name": "Taco", "description": "Spicy", "price": 8, "image_url": "http://x/y.png",
    }]}), encoding="utf-8")
    monkeypatch.setenv("SEED_DATA_PATH", str(seed))
    store = database.Database(database.CounterIdGenerator())
    monkeypatch.setattr("main.db", store)
    config.get_settings.cache_clear()
    app.dependency_overrides[database.get_db] = lambda: store
    handlers_before = list(logging.root.handlers)
    try:
        with TestClient(app) as client:
            assert client.get("/dishes/seed-1").json()["data"]["name"] == "Taco"
    finally:
        app.dependency_overrides.clear()
        config.get_settings.cache_clear()
        for handler in list(logging.root.handlers):
            if handler not in handlers_before:
                logging.root.removeHandler(handler)
