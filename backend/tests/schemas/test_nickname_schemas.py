"""Nickname schema tests — request accepts any JSON value, response is fixed-shape."""

from app.schemas.nickname import ClaimNicknameRequest, ClaimNicknameResponse


def test_request_defers_validation_to_core():
    assert ClaimNicknameRequest().nickname is None
    assert ClaimNicknameRequest(nickname=42).nickname == 42
    assert ClaimNicknameRequest(nickname="Neo123").nickname == "Neo123"


def test_response_shape():
    body = ClaimNicknameResponse(nickname="Neo123").model_dump()
    assert body == {"success": True, "nickname": "Neo123"}


def test_request_from_non_object_payload_has_no_nickname():
    for payload in (["Neo123"], "Neo123", 42, None):
        assert ClaimNicknameRequest.from_payload(payload).nickname is None
    assert ClaimNicknameRequest.from_payload({"nickname": "Neo123"}).nickname == "Neo123"
