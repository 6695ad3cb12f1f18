from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from kyasms.http import HttpClient
from kyasms.utils import to_int, top_or_data

OTP_LANGUAGES = ("fr", "en", "es", "de")

# provider returns this exact msg for a valid code
VERIFIED_MSG = "checked"


@dataclass(frozen=True)
class OtpVerification:
    reason: str = ""
    status: int = 0
    msg: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "OtpVerification":
        data = raw if isinstance(raw, dict) else {}
        reason = data.get("reason")
        msg = data.get("msg")
        return cls(
            reason=reason if isinstance(reason, str) else "",
            status=to_int(data.get("status"), 0),
            msg=msg if isinstance(msg, str) else "",
        )

    @property
    def is_verified(self) -> bool:
        return self.status == 200 and self.msg == VERIFIED_MSG


class OtpApi:
    def __init__(self, client: HttpClient):
        self.client = client

    def create(
            self,
            app_id: str,
            recipient: str,
            lang: str = "fr",
            code: Optional[str] = None,
            minutes: Optional[int] = None,
    ) -> "OtpResult":
        """
        Create and send an OTP. `recipient` is a phone number or an email.
        `code` and `minutes` are left out of the payload when not given so
        the server applies its own defaults.
        """
        payload: Dict[str, Any] = {
            "appId": app_id,
            "recipient": recipient,
            "lang": lang or "fr",
        }
        if code:
            payload["code"] = code
        if minutes:
            payload["minutes"] = minutes

        response = self.client.post("/otp/create", payload)
        return OtpResult(response)

    def send(self, app_id: str, recipient: str, lang: str = "fr") -> "OtpResult":
        return self.create(app_id, recipient, lang=lang)

    def send_with_expiration(self, app_id: str, recipient: str, minutes: int, lang: str = "fr") -> "OtpResult":
        return self.create(app_id, recipient, lang=lang, minutes=minutes)

    def send_with_custom_code(
            self, app_id: str, recipient: str, code: str, lang: str = "fr", minutes: Optional[int] = None
    ) -> "OtpResult":
        return self.create(app_id, recipient, lang=lang, code=code, minutes=minutes)

    def verify(self, app_id: str, key: str, code: str) -> OtpVerification:
        """`key` is the one returned by create()."""
        response = self.client.post("/otp/verify", {"appId": app_id, "key": key, "code": code})
        return OtpVerification.from_raw(response)

    def is_verified(self, result: OtpVerification) -> bool:
        return result.is_verified


class OtpResult:
    """
    Accessors over the /otp/create response. Fields may sit at the top level
    or under "data"; the top level wins.
    """

    def __init__(self, response: Any):
        self.response: Dict[str, Any] = response if isinstance(response, dict) else {}

    def _field(self, key: str) -> str:
        value = top_or_data(self.response, key)
        return "" if value is None else str(value)

    def is_success(self) -> bool:
        return self.response.get("reason") == "success"

    def get_key(self) -> str:
        return self._field("key")

    def get_recipient(self) -> str:
        return self._field("recipient")

    def get_status(self) -> str:
        return self._field("status")

    def get_message_id(self) -> str:
        return self._field("messageId")

    def get_raw_response(self) -> Dict[str, Any]:
        return self.response
