"""Nickname Schemas — request/response models for the claim endpoint.

Invariants:
    - The claim body is read raw: any JSON value (or none, or malformed text) is
      accepted, and only an object contributes a "nickname"
    - ClaimNicknameRequest.nickname is deliberately untyped: presence, type and
      format are judged by core/enforce_nickname after the identity check
    - ClaimNicknameResponse.success is always True (failures use the error envelope)
"""

from typing import Any, Literal

from pydantic import BaseModel


class ClaimNicknameRequest(BaseModel):
    """Claim request body — `{"nickname": ...}`."""
    nickname: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> "ClaimNicknameRequest":
        """Non-object payloads (string, list, null) carry no nickname."""
        if isinstance(payload, dict):
            return cls.model_validate(payload)
        return cls()


class ClaimNicknameResponse(BaseModel):
    """Successful claim — nickname in the caller's original casing."""
    success: Literal[True] = True
    nickname: str
