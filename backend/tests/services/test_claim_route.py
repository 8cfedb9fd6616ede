"""Claim Route — HTTP surface of POST /api/v1/nicknames/claim.

Invariants:
    - Success body is exactly {"success": true, "nickname": <requested>}
    - Failure body is the error envelope: code and message only
    - Missing identity header → 401 UNAUTHENTICATED, no store access, whatever the body
    - Malformed or non-object bodies read as "no nickname" → 400 INVALID_ARGUMENT
    - Status codes: 400 invalid/precondition, 409 taken, 500 internal
"""

import pytest

from app.core.claim_outcome import MSG_INTERNAL, MSG_NICKNAME_REQUIRED

UID_HEADER = "X-Authenticated-Uid"
CLAIM_URL = "/api/v1/nicknames/claim"


def _as(uid: str) -> dict:
    return {UID_HEADER: uid}


async def test_claim_returns_success_body(client):
    res = await client.post(CLAIM_URL, json={"nickname": "Neo123"}, headers=_as("u1"))
    assert res.status_code == 200
    assert res.json() == {"success": True, "nickname": "Neo123"}


async def test_scenario_over_http(client):
    await client.post(CLAIM_URL, json={"nickname": "Neo123"}, headers=_as("u1"))

    taken = await client.post(CLAIM_URL, json={"nickname": "neo123"}, headers=_as("u2"))
    assert taken.status_code == 409
    assert taken.json()["error"]["code"] == "ALREADY_EXISTS"
    assert taken.json()["error"]["message"] == "This nickname is already taken"

    again = await client.post(CLAIM_URL, json={"nickname": "OtherName"}, headers=_as("u1"))
    assert again.status_code == 400
    assert again.json()["error"]["code"] == "FAILED_PRECONDITION"


async def test_error_envelope_has_no_extra_fields(client):
    res = await client.post(CLAIM_URL, json={"nickname": "ab"}, headers=_as("u1"))
    assert res.status_code == 400
    assert set(res.json()["error"]) == {"code", "message"}
    assert res.json()["error"]["code"] == "INVALID_ARGUMENT"


@pytest.mark.parametrize("body", [
    {"nickname": ""},
    {"nickname": None},
    {"nickname": 12345},
    {"nickname": "bad name!"},
    {"nickname": "this_name_is_way_too_long_12345"},
    {},
])
async def test_invalid_nickname_is_400(client, body):
    res = await client.post(CLAIM_URL, json=body, headers=_as("u1"))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_ARGUMENT"


async def test_missing_body_is_invalid_argument(client):
    res = await client.post(CLAIM_URL, headers=_as("u1"))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_ARGUMENT"


async def test_missing_identity_is_401_without_store_access(fake_client, fake_store):
    res = await fake_client.post(CLAIM_URL, json={"nickname": "Neo123"})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHENTICATED"
    assert fake_store.transactions == 0


async def test_blank_identity_is_401(fake_client, fake_store):
    res = await fake_client.post(
        CLAIM_URL, json={"nickname": "Neo123"}, headers=_as("  "),
    )
    assert res.status_code == 401
    assert fake_store.transactions == 0


async def test_store_failure_is_generic_500(fake_client, fake_store):
    fake_store.fail_with = RuntimeError("relation \"profiles\" does not exist")
    res = await fake_client.post(
        CLAIM_URL, json={"nickname": "Neo123"}, headers=_as("u1"),
    )
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL"
    assert res.json()["error"]["message"] == MSG_INTERNAL
    assert "profiles" not in res.text


MALFORMED_JSON = b"{not json"
JSON_HEADERS = {"Content-Type": "application/json"}


@pytest.mark.parametrize("body", [["Neo123"], "Neo123", 42])
async def test_non_object_body_is_invalid_argument(client, body):
    res = await client.post(CLAIM_URL, json=body, headers=_as("u1"))
    assert res.status_code == 400
    assert res.json() == {
        "error": {"code": "INVALID_ARGUMENT", "message": MSG_NICKNAME_REQUIRED},
    }


async def test_malformed_json_is_invalid_argument(client):
    res = await client.post(
        CLAIM_URL, content=MALFORMED_JSON,
        headers={**JSON_HEADERS, **_as("u1")},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_ARGUMENT"


@pytest.mark.parametrize("body", [["Neo123"], "Neo123", {"nickname": 7}])
async def test_unauthenticated_wins_over_bad_body(fake_client, fake_store, body):
    res = await fake_client.post(CLAIM_URL, json=body)
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHENTICATED"
    assert fake_store.transactions == 0


async def test_unauthenticated_wins_over_malformed_json(fake_client, fake_store):
    res = await fake_client.post(
        CLAIM_URL, content=MALFORMED_JSON,
        headers=JSON_HEADERS,
    )
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHENTICATED"
    assert fake_store.transactions == 0


# -- Health --------------------------------------------------------------------


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json() == {"status": "ready", "checks": {"database": "healthy"}}
