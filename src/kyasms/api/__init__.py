from __future__ import annotations
from .sms import SmsApi, SmsResult
from .otp import OtpApi, OtpResult, OtpVerification
from .campaign import CampaignApi, CampaignResult, PERIODIC_TYPES

__all__ = [
    "SmsApi",
    "SmsResult",
    "OtpApi",
    "OtpResult",
    "OtpVerification",
    "CampaignApi",
    "CampaignResult",
    "PERIODIC_TYPES",
]
