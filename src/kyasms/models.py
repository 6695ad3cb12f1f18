from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from kyasms.utils import to_int


@dataclass(frozen=True)
class Pagination:
    """Paging block of a list response."""

    current_page: int = 1
    per_page: int = 0
    total_pages: int = 0
    total_records: int = 0
    has_more: bool = False
    records_limited: bool = False

    @classmethod
    def from_raw(cls, raw: Optional[Dict[str, Any]]) -> "Pagination":
        if not isinstance(raw, dict):
            return cls()
        return cls(
            current_page=to_int(raw.get("current_page"), 1),
            per_page=to_int(raw.get("per_page"), 0),
            total_pages=to_int(raw.get("total_pages"), 0),
            total_records=to_int(raw.get("total_records"), 0),
            has_more=raw.get("has_more") is True,
            records_limited=raw.get("records_limited") is True,
        )


@dataclass(frozen=True)
class SmsHistory:
    messages: List[Dict[str, Any]] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)

    @classmethod
    def from_raw(cls, raw: Any) -> "SmsHistory":
        data = raw if isinstance(raw, dict) else {}
        messages = data.get("messages")
        return cls(
            messages=list(messages) if isinstance(messages, list) else [],
            pagination=Pagination.from_raw(data.get("pagination")),
        )


@dataclass(frozen=True)
class CampaignRecords:
    campaigns: List[Dict[str, Any]] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)

    @classmethod
    def from_raw(cls, raw: Any) -> "CampaignRecords":
        data = raw if isinstance(raw, dict) else {}
        campaigns = data.get("campaigns")
        return cls(
            campaigns=list(campaigns) if isinstance(campaigns, list) else [],
            pagination=Pagination.from_raw(data.get("pagination")),
        )
