from __future__ import annotations
from .client import KyaSms
from .config import ClientConfig, load_config
from .exceptions import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    KyaSmsError,
    NetworkError,
    ValidationError,
)
from .api import (
    CampaignApi,
    CampaignResult,
    OtpApi,
    OtpResult,
    OtpVerification,
    PERIODIC_TYPES,
    SmsApi,
    SmsResult,
)
from .models import CampaignRecords, Pagination, SmsHistory

__version__ = "1.0.0"

__all__ = [
    "KyaSms",
    "ClientConfig",
    "load_config",
    "KyaSmsError",
    "AuthenticationError",
    "ValidationError",
    "ApiError",
    "NetworkError",
    "ConfigurationError",
    "SmsApi",
    "SmsResult",
    "OtpApi",
    "OtpResult",
    "OtpVerification",
    "CampaignApi",
    "CampaignResult",
    "PERIODIC_TYPES",
    "Pagination",
    "SmsHistory",
    "CampaignRecords",
]
