import asyncio
from datetime import datetime

import httpx
import pytest
from fastapi.testclient import TestClient

from mycoffee.app_factory import create_application, create_development_app, create_production_app
from mycoffee.database.mysql_connection import DatabasePool
from tests.fakes import FakeResult


def test_health_reports_ok_with_non_decreasing_timestamp(client):
    stamps = []
    for _ in range(3):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        stamps.append(datetime.fromisoformat(response.json()["now"]))

    assert stamps == sorted(stamps)


def test_health_does_not_touch_database(client, fake_db):
    response = client.get("/health")

    assert response.json()["database"] == "uninitialized"
    assert fake_db.engines == []

    client.post("/phone/request", json={"phone_number": "01012345678"})
    assert client.get("/health").json()["database"] == "ready"


def test_openapi_document_and_docs(client):
    spec = client.get("/swagger.json")
    assert spec.status_code == 200
    paths = spec.json()["paths"]
    for path in ("/phone/request", "/phone/verify", "/phone/request-find-id", "/signup",
                 "/api/login/email", "/api/recommend", "/api/reset-password", "/health"):
        assert path in paths

    for docs_path in ("/docs", "/api-docs"):
        page = client.get(docs_path)
        assert page.status_code == 200
        assert "swagger-ui" in page.text
        assert "/swagger.json" in page.text


def test_malformed_json_is_a_validation_error(client, fake_db):
    response = client.post("/phone/request", content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "VALIDATION"
    assert fake_db.engines == []


def test_validation_errors_do_not_echo_input(client):
    response = client.post("/signup", json={"password": "secret-password"})

    assert response.status_code == 400
    assert "secret-password" not in response.text


def test_recommend_returns_rows_sorted_by_distance(client, fake_db):
    response = client.post("/api/recommend", json={"aroma": 5, "acidity": 5, "nutty": 1, "body": 2, "sweetness": 3})

    assert response.status_code == 200
    rows = response.json()
    assert isinstance(rows, list)
    assert rows[0]["blend_name"] == "Bright Ethiopia"
    assert rows[0]["distance"] <= rows[1]["distance"]
    assert fake_db.calls("PRC_COF_RECOMMEND")[-1]["p_user_id"] is None


def test_recommend_requires_all_scores(client):
    response = client.post("/api/recommend", json={"aroma": 5})

    assert response.status_code == 400


def test_users_select_and_insert(client, fake_db):
    def handler(sql, params):
        if sql.startswith("SELECT"):
            return FakeResult(rows=[{"id": 7, "name": "kim", "email": "kim@example.com"}], rowcount=1)
        return FakeResult(rowcount=1, lastrowid=8, returns_rows=False)

    fake_db.statement_handler = handler

    assert client.get("/users").json() == [{"id": 7, "name": "kim", "email": "kim@example.com"}]

    created = client.post("/users", json={"name": "lee", "email": "lee@example.com"})
    assert created.status_code == 200
    assert created.json() == {"id": 8, "name": "lee", "email": "lee@example.com"}


def test_procedure_failure_becomes_500_with_message(client, fake_db, pool):
    def broken(params):
        raise RuntimeError("unexpected SQL error")

    fake_db.procedures["PRC_COF_PHONE_REQUEST"] = broken

    response = client.post("/phone/request", json={"phone_number": "01012345678"})

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["kind"] == "EXECUTION"
    assert error["message"] == "unexpected SQL error"
    assert pool.checkouts == pool.checkins


def test_connectivity_failure_then_recovery(client, fake_db):
    fake_db.create_failures = 1

    failed = client.post("/phone/request", json={"phone_number": "01012345678"})
    assert failed.status_code == 500
    assert failed.json()["error"]["kind"] == "CONNECTIVITY"

    recovered = client.post("/phone/request", json={"phone_number": "01012345678"})
    assert recovered.status_code == 200


def _failing_app(make_config, fake_db, environment, **env):
    config = make_config(ENVIRONMENT=environment, DB_NAME="mycoffee", DB_USER="coffee", **env)

    def broken(params):
        raise RuntimeError("boom")

    fake_db.procedures["PRC_COF_PHONE_REQUEST"] = broken
    pool = DatabasePool(config.database, engine_factory=fake_db.engine_factory)
    return create_application(config=config, pool=pool)


def test_stack_trace_exposed_in_development(make_config, fake_db):
    app = _failing_app(make_config, fake_db, "development")

    with TestClient(app) as client:
        response = client.post("/phone/request", json={"phone_number": "01012345678"})

    assert response.status_code == 500
    assert "RuntimeError: boom" in response.json()["error"]["stack"]


def test_stack_trace_never_exposed_in_production(make_config, fake_db):
    app = _failing_app(make_config, fake_db, "production", DEBUG="true")

    with TestClient(app) as client:
        response = client.post("/phone/request", json={"phone_number": "01012345678"})

    assert response.status_code == 500
    assert response.json()["error"]["message"] == "boom"
    assert "stack" not in response.json()["error"]


@pytest.mark.asyncio
async def test_pool_balanced_after_concurrent_success_and_failure(app, fake_db, pool):
    original = fake_db.procedures["PRC_COF_PHONE_REQUEST"]

    def flaky(params):
        if params["p_phone_number"].endswith("0000"):
            raise RuntimeError("procedure failed")
        return original(params)

    fake_db.procedures["PRC_COF_PHONE_REQUEST"] = flaky
    n = 20

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        requests = [client.post("/phone/request", json={"phone_number": f"010{i:04d}1234"}) for i in range(n)]
        requests += [client.post("/phone/request", json={"phone_number": f"010{i:04d}0000"}) for i in range(n)]
        responses = await asyncio.gather(*requests)

    statuses = [r.status_code for r in responses]
    assert statuses.count(200) == n
    assert statuses.count(500) == n
    assert pool.checkouts == pool.checkins == 2 * n
    assert pool.in_use == 0


def test_shutdown_disposes_pool(app, fake_db, pool):
    with TestClient(app) as client:
        client.post("/phone/request", json={"phone_number": "01012345678"})
        assert pool.state.value == "ready"

    assert fake_db.engines[0].disposed
    assert pool.state.value == "uninitialized"


def test_warmup_on_startup(make_config, fake_db):
    config = make_config(DB_WARMUP="true")
    pool = DatabasePool(config.database, engine_factory=fake_db.engine_factory)

    with TestClient(create_application(config=config, pool=pool)) as client:
        assert len(fake_db.engines) == 1
        assert client.get("/health").json()["database"] == "ready"


def test_warmup_failure_does_not_prevent_startup(make_config, fake_db):
    config = make_config(DB_WARMUP="true")
    fake_db.create_failures = 1
    pool = DatabasePool(config.database, engine_factory=fake_db.engine_factory)

    with TestClient(create_application(config=config, pool=pool)) as client:
        assert client.get("/health").json()["database"] == "uninitialized"
        assert client.post("/phone/request", json={"phone_number": "01012345678"}).status_code == 200


def test_unexpected_error_still_returns_error_body(app):
    @app.get("/explode")
    async def explode():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/explode")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["kind"] == "EXECUTION"
    assert error["message"] == "Internal server error"


def test_production_app_turns_debug_off(make_config, pool):
    config = make_config(DB_NAME="mycoffee", DB_USER="coffee", DEBUG="true")

    app = create_production_app(config=config, pool=pool)

    assert app.state.config.system.environment == "production"
    assert app.state.config.system.debug is False
    assert app.state.config.system.expose_stack is False
    assert app.state.pool is pool


def test_development_app_exposes_stack(make_config, pool):
    config = make_config(DB_NAME="mycoffee", DB_USER="coffee")

    app = create_development_app(config=config, pool=pool)

    assert app.state.config.system.environment == "development"
    assert app.state.config.system.expose_stack is True
