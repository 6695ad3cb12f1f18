from __future__ import annotations
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

from kyasms.http import HttpClient
from kyasms.models import SmsHistory
from kyasms.utils import Recipients, clamp, format_date, join_recipients, to_number, to_int

log = logging.getLogger(__name__)

# marks traffic sent through the API rather than the dashboard
API_SOURCE = 2

HISTORY_MAX_PER_PAGE = 100
STATUS_MAX_IDS = 100
DELIVERED = "DELIVERED"


class SmsApi:
    def __init__(self, client: HttpClient):
        self.client = client

    def send(
            self,
            sender: str,
            to: Recipients,
            message: Optional[str] = None,
            *,
            type: str = "text",
            wallet: Optional[str] = None,
            callback_url: Optional[str] = None,
            ref_custom: Optional[str] = None,
            is_bulk: bool = False,
            is_template: bool = False,
            template: Optional[Dict[str, str]] = None,
    ) -> "SmsResult":
        """
        Send an SMS. `to` is one number/group id or a sequence of them; it is
        always sent as a single comma-joined string. `template` is
        {"id": ..., "lang": ...} and is only sent with is_template=True.
        """
        payload: Dict[str, Any] = {
            "from": sender,
            "to": join_recipients(to),
            "type": type or "text",
            "isBulk": bool(is_bulk),
            "isTemplate": bool(is_template),
            "source": API_SOURCE,
        }
        if message:
            payload["message"] = message
        if wallet:
            payload["wallet"] = wallet
        if callback_url:
            payload["callback_url"] = callback_url
        if ref_custom:
            payload["ref_custom"] = ref_custom
        if is_template and template:
            payload["template"] = template

        response = self.client.post("/sms/send", payload)
        return SmsResult(response)

    def send_simple(self, sender: str, to: Recipients, message: str) -> "SmsResult":
        return self.send(sender, to, message)

    def send_flash(self, sender: str, to: Recipients, message: str) -> "SmsResult":
        """Flash SMS: displayed directly on the handset screen."""
        return self.send(sender, to, message, type="flash")

    def send_with_template(self, sender: str, to: Recipients, template_id: str, lang: str = "fr") -> "SmsResult":
        return self.send(sender, to, is_template=True, template={"id": template_id, "lang": lang})

    def send_bulk(self, sender: str, group_ids: Sequence[str], message: str) -> "SmsResult":
        return self.send(sender, group_ids, message, is_bulk=True)

    def send_bulk_with_template(
            self, sender: str, group_ids: Sequence[str], template_id: str, lang: str = "fr"
    ) -> "SmsResult":
        return self.send(
            sender,
            group_ids,
            is_bulk=True,
            is_template=True,
            template={"id": template_id, "lang": lang},
        )

    def get_history(
            self,
            page: int = 1,
            per_page: int = 50,
            start_date: Union[str, date, None] = None,
            end_date: Union[str, date, None] = None,
            status: Optional[str] = None,
            sender: Optional[str] = None,
            contact: Optional[str] = None,
    ) -> SmsHistory:
        """Paged SMS history. per_page above 100 is capped at 100."""
        payload: Dict[str, Any] = {
            "page": page or 1,
            "per_page": clamp(per_page or 50, HISTORY_MAX_PER_PAGE),
        }
        if start_date:
            payload["start_date"] = format_date(start_date)
        if end_date:
            payload["end_date"] = format_date(end_date)
        if status:
            payload["status"] = status
        if sender:
            payload["sender"] = sender
        if contact:
            payload["contact"] = contact

        response = self.client.post("/sms/history", payload)
        return SmsHistory.from_raw(response.get("data") if isinstance(response, dict) else None)

    def get_status(self, message_ids: Sequence[str]) -> Dict[str, Optional[Dict[str, Any]]]:
        """
        Status of up to 100 messages, keyed by message id. Ids past the first
        100 are dropped. Unknown ids map to None.
        """
        ids = list(message_ids)
        if len(ids) > STATUS_MAX_IDS:
            log.debug("sms_status_ids_truncated", extra={"requested": len(ids), "sent": STATUS_MAX_IDS})
            ids = ids[:STATUS_MAX_IDS]

        response = self.client.post("/message/status", {"message_ids": ids})
        data = response.get("data") if isinstance(response, dict) else None
        return data if isinstance(data, dict) else {}

    def get_message_status(self, message_id: str) -> Optional[Dict[str, Any]]:
        return self.get_status([message_id]).get(message_id)

    def is_delivered(self, message_id: str) -> bool:
        status = self.get_message_status(message_id)
        return isinstance(status, dict) and status.get("status") == DELIVERED


class SmsResult:
    """Accessors over the /sms/send response. Missing fields fall back to defaults."""

    def __init__(self, response: Any):
        self.response: Dict[str, Any] = response if isinstance(response, dict) else {}

    def _messages(self) -> List[Dict[str, Any]]:
        data = self.response.get("data")
        if not isinstance(data, list):
            return []
        return [m for m in data if isinstance(m, dict)]

    def _first(self, key: str, default: Any = "") -> Any:
        first = self.get_first_message()
        if first is None:
            return default
        value = first.get(key)
        return default if value is None else value

    def is_success(self) -> bool:
        return self.response.get("reason") == "success"

    def get_message_id(self) -> str:
        return self._first("messageId")

    def get_message_ids(self) -> List[str]:
        return [m["messageId"] for m in self._messages() if m.get("messageId") is not None]

    def get_status(self) -> str:
        return self._first("status")

    def get_route(self) -> str:
        return self._first("route")

    def get_price(self) -> float:
        return to_number(self._first("price", 0))

    def get_total_price(self) -> float:
        return sum(to_number(m.get("price")) for m in self._messages())

    def get_sms_part(self) -> int:
        return to_int(self._first("sms_part", 1), 1)

    def get_to(self) -> str:
        return self._first("to")

    def get_message(self) -> str:
        return self._first("message")

    def get_created_at(self) -> str:
        return self._first("created_at")

    def get_data(self) -> List[Dict[str, Any]]:
        return self._messages()

    def get_first_message(self) -> Optional[Dict[str, Any]]:
        messages = self._messages()
        return messages[0] if messages else None

    def get_raw_response(self) -> Dict[str, Any]:
        return self.response

    def __repr__(self) -> str:
        return f"SmsResult(success={self.is_success()}, message_ids={self.get_message_ids()!r})"
