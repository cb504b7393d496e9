import asyncio

import httpx
import pytest

SIGNUP = {
    "email": "coffeeuser@example.com",
    "password": "Coffee1234",
    "name": "김커피",
    "phone_number": "01012345678",
    "verification_code": "123456",
    "terms_agreed": True,
    "privacy_agreed": True,
}


def verify_phone(client, phone="01012345678"):
    client.post("/phone/request", json={"phone_number": phone})
    client.post("/phone/verify", json={"phone_number": phone, "verification_code": "123456"})


def test_signup_success_returns_user_id(client):
    verify_phone(client)

    response = client.post("/signup", json=SIGNUP)

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"output", "recordset", "recordsets", "rowsAffected"}
    assert body["output"]["p_result_code"] == "SUCCESS"
    assert isinstance(body["output"]["p_user_id"], int) and body["output"]["p_user_id"] > 0
    assert body["output"]["p_session_id"] == "S-1"


def test_signup_binds_defaults_and_typed_values(client, fake_db):
    verify_phone(client)

    client.post("/signup", json={**SIGNUP, "birth_date": "1990-05-01", "birth_year": "1990"})

    params = fake_db.calls("PRC_COF_USER_SIGNUP")[-1]
    assert params["p_validation_mode"] == "FULL_SIGNUP"
    assert params["p_marketing_agreed"] is False
    assert params["p_birth_year"] == 1990
    assert params["p_birth_date"].isoformat() == "1990-05-01"
    assert params["p_gender"] is None
    assert params["p_terms_agreed"] is True


def test_signup_without_verified_phone(client):
    response = client.post("/signup", json=SIGNUP)

    assert response.status_code == 200
    assert response.json()["output"]["p_result_code"] == "PHONE_NOT_VERIFIED"
    assert response.json()["output"]["p_user_id"] is None


def test_signup_missing_required_fields(client, fake_db):
    payload = {key: value for key, value in SIGNUP.items() if key != "terms_agreed"}

    response = client.post("/signup", json=payload)

    assert response.status_code == 400
    assert fake_db.calls("PRC_COF_USER_SIGNUP") == []


def test_signup_invalid_date_is_rejected(client, fake_db):
    response = client.post("/signup", json={**SIGNUP, "birth_date": "not-a-date"})

    assert response.status_code == 400
    assert fake_db.calls("PRC_COF_USER_SIGNUP") == []


@pytest.mark.asyncio
async def test_concurrent_duplicate_signups_surface_both_results(app, coffee, pool):
    coffee.verified["01012345678"] = 1

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        responses = await asyncio.gather(
            client.post("/signup", json=SIGNUP),
            client.post("/signup", json=SIGNUP),
        )

    assert [r.status_code for r in responses] == [200, 200]
    codes = sorted(r.json()["output"]["p_result_code"] for r in responses)
    assert codes == ["EMAIL_DUPLICATE", "SUCCESS"]
    assert pool.checkouts == pool.checkins == 2


def test_login_returns_output_only(client):
    verify_phone(client)
    client.post("/signup", json=SIGNUP)

    response = client.post("/api/login/email", json={"email": SIGNUP["email"], "password": SIGNUP["password"]})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"output"}
    assert body["output"]["p_result_code"] == "SUCCESS"
    assert body["output"]["p_user_id"] == 1


def test_login_defaults_auto_login_false(client, fake_db):
    client.post("/api/login/email", json={"email": "nobody@example.com", "password": "x"})

    params = fake_db.calls("PRC_COF_LOGIN_EMAIL")[-1]
    assert params["p_auto_login"] is False
    assert params["p_device_type"] is None


def test_login_wrong_password(client):
    response = client.post("/api/login/email", json={"email": "nobody@example.com", "password": "x"})

    assert response.status_code == 200
    assert response.json()["output"]["p_result_code"] == "INVALID_CREDENTIALS"


def test_reset_password_flow(client):
    verify_phone(client)
    client.post("/signup", json=SIGNUP)
    client.post("/phone/request", json={"phone_number": SIGNUP["phone_number"], "purpose": "RESET_PASSWORD"})

    response = client.post("/api/reset-password", json={
        "email": SIGNUP["email"],
        "phone_number": SIGNUP["phone_number"],
        "verification_code": "123456",
        "new_password": "NewCoffee1234",
        "new_password_confirm": "NewCoffee1234",
    })

    assert response.status_code == 200
    assert response.json() == {"output": {"p_result_code": "SUCCESS", "p_result_message": "SUCCESS"}}

    login = client.post("/api/login/email", json={"email": SIGNUP["email"], "password": "NewCoffee1234"})
    assert login.json()["output"]["p_result_code"] == "SUCCESS"


def test_reset_password_requires_all_fields(client):
    response = client.post("/api/reset-password", json={"email": SIGNUP["email"]})

    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "VALIDATION"
