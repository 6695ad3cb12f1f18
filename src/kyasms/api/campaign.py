from __future__ import annotations
import math
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence, Union

from kyasms.http import HttpClient
from kyasms.models import CampaignRecords
from kyasms.utils import clamp, format_date, format_datetime, round_half_up, to_number, top_or_data

CAMPAIGN_TYPES = ("auto", "customize", "periodic")
SMS_TYPES = ("text", "flash", "unicode")
PERIODIC_TYPES = (
    "weekly_start",
    "weekly_end",
    "monthly_start",
    "monthly_end",
    "specific_day_of_month",
    "beginning_of_year",
    "christmas",
)

DEFAULT_TIMEZONE = "Africa/Porto-Novo"
RECORDS_MAX_PER_PAGE = 50
COMPLETED_STATUSES = ("completed", "executed")


def build_content(
        content: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
        template_id: Optional[str] = None,
        template_lang: str = "fr",
) -> Dict[str, Any]:
    """Explicit content wins, then a template id, then a plain message."""
    if content:
        return content
    if template_id:
        return {
            "type": "template",
            "template_id": template_id,
            "template_default_lang": template_lang or "fr",
        }
    return {"type": "message", "message": message or ""}


class CampaignApi:
    def __init__(self, client: HttpClient):
        self.client = client

    def create(
            self,
            name: str,
            groups: Sequence[str],
            sender_id: str,
            *,
            type: str = "auto",
            sms_type: str = "text",
            content: Optional[Dict[str, Any]] = None,
            message: Optional[str] = None,
            template_id: Optional[str] = None,
            template_lang: str = "fr",
            timezone: Optional[str] = None,
            schedule_date: Union[str, datetime, None] = None,
            campaign_periodic: Optional[str] = None,
    ) -> "CampaignResult":
        """
        Create a campaign.

        type="customize" expects `schedule_date` ("YYYY-MM-DD HH:MM:SS" or a
        datetime) and type="periodic" expects `campaign_periodic` (one of
        PERIODIC_TYPES). Combinations are checked server side; a bad one comes
        back as a ValidationError.
        """
        payload: Dict[str, Any] = {
            "name": name,
            "type": type or "auto",
            "groups": list(groups),
            "sender_id": sender_id,
            "sms_type": sms_type or "text",
            "content": build_content(content, message, template_id, template_lang),
        }
        if timezone:
            payload["timezone"] = timezone
        if schedule_date:
            payload["schedule_date"] = format_datetime(schedule_date)
        if campaign_periodic:
            payload["campaign_periodic"] = campaign_periodic

        response = self.client.post("/sms/campaign/create", payload)
        return CampaignResult(response)

    def create_automatic(self, name: str, groups: Sequence[str], sender_id: str, message: str) -> "CampaignResult":
        return self.create(name, groups, sender_id, type="auto", message=message)

    def create_scheduled(
            self,
            name: str,
            groups: Sequence[str],
            sender_id: str,
            message: str,
            schedule_date: Union[str, datetime],
            timezone: str = DEFAULT_TIMEZONE,
    ) -> "CampaignResult":
        return self.create(
            name,
            groups,
            sender_id,
            type="customize",
            message=message,
            schedule_date=schedule_date,
            timezone=timezone,
        )

    def create_periodic(
            self,
            name: str,
            groups: Sequence[str],
            sender_id: str,
            message: str,
            periodic: str,
            timezone: str = DEFAULT_TIMEZONE,
    ) -> "CampaignResult":
        return self.create(
            name,
            groups,
            sender_id,
            type="periodic",
            message=message,
            campaign_periodic=periodic,
            timezone=timezone,
        )

    def create_with_template(
            self, name: str, groups: Sequence[str], sender_id: str, template_id: str, template_lang: str = "fr"
    ) -> "CampaignResult":
        return self.create(
            name,
            groups,
            sender_id,
            type="auto",
            template_id=template_id,
            template_lang=template_lang,
        )

    def get_status(self, campaign_id: Union[int, str]) -> Dict[str, Any]:
        response = self.client.get(f"/sms/campaign/status/{campaign_id}")
        return response if isinstance(response, dict) else {}

    def get_progress(self, campaign_id: Union[int, str]) -> int:
        """Percentage of messages sent, 0 when the campaign has no progress block yet."""
        status = self.get_status(campaign_id)
        return progress_percent(status.get("data"))

    def is_completed(self, campaign_id: Union[int, str]) -> bool:
        data = self.get_status(campaign_id).get("data")
        return isinstance(data, dict) and data.get("status") in COMPLETED_STATUSES

    def get_records(self, page: int = 1, per_page: int = 20) -> CampaignRecords:
        return self.get_records_filtered(page=page, per_page=per_page)

    def get_records_filtered(
            self,
            page: int = 1,
            per_page: int = 20,
            status: Optional[str] = None,
            type: Optional[str] = None,
            start_date: Union[str, date, None] = None,
            end_date: Union[str, date, None] = None,
    ) -> CampaignRecords:
        """Paged campaign history. per_page above 50 is capped at 50."""
        params: Dict[str, str] = {
            "page": str(page or 1),
            "per_page": str(clamp(per_page or 20, RECORDS_MAX_PER_PAGE)),
        }
        if status:
            params["status"] = status
        if type:
            params["type"] = type
        if start_date:
            params["start_date"] = format_date(start_date)
        if end_date:
            params["end_date"] = format_date(end_date)

        response = self.client.get("/sms/campaign/records", params)
        return CampaignRecords.from_raw(response.get("data") if isinstance(response, dict) else None)

    def calculate_cost(self, groups: Sequence[str], message: str) -> Dict[str, Any]:
        """
        Dry-run cost estimate as computed by the provider: estimated_cost,
        recipient counts, message_info (encoding, parts) and
        country_breakdown.
        """
        response = self.client.post("/sms/campaign/calculate-cost", {"groups": list(groups), "message": message})
        data = response.get("data") if isinstance(response, dict) else None
        return data if isinstance(data, dict) else {}


def progress_percent(data: Any) -> int:
    progress = data.get("progress") if isinstance(data, dict) else None
    if not isinstance(progress, dict):
        return 0
    total = to_number(progress.get("total"))
    if total == 0:
        return 0
    sent = to_number(progress.get("sent"))
    pct = sent / total * 100
    if not math.isfinite(pct):
        return 0
    return round_half_up(pct)


class CampaignResult:
    def __init__(self, response: Any):
        self.response: Dict[str, Any] = response if isinstance(response, dict) else {}

    def is_success(self) -> bool:
        return self.response.get("reason") == "success"

    def get_campaign_id(self) -> Optional[int]:
        value = top_or_data(self.response, "campaign_id")
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def get_status(self) -> str:
        value = top_or_data(self.response, "status")
        return "" if value is None else str(value)

    def get_scheduled_at(self) -> str:
        value = top_or_data(self.response, "scheduled_at")
        return "" if value is None else str(value)

    def get_raw_response(self) -> Dict[str, Any]:
        return self.response
