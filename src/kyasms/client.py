from __future__ import annotations
import logging
from typing import Any, Mapping, Optional, Union

import requests

from kyasms.api.campaign import CampaignApi
from kyasms.api.otp import OtpApi
from kyasms.api.sms import SmsApi
from kyasms.config import ClientConfig, load_config
from kyasms.exceptions import ConfigurationError
from kyasms.http import HttpClient

log = logging.getLogger(__name__)


class KyaSms:
    """
    KYA SMS client.

        client = KyaSms("your-api-key")
        result = client.sms.send_simple("MyApp", "22990123456", "Hello!")
        print(result.get_message_id())

    `api_key_or_config` is a bare API key, a ClientConfig, or a mapping with
    api_key / base_url / timeout / debug.
    """

    def __init__(
            self,
            api_key_or_config: Union[str, ClientConfig, Mapping[str, Any]],
            base_url: Optional[str] = None,
            session: Optional[requests.Session] = None,
    ):
        if isinstance(api_key_or_config, ClientConfig):
            # set_api_key/set_base_url change this copy, never the caller's object
            update = {"base_url": base_url.rstrip("/")} if base_url else None
            config = api_key_or_config.model_copy(update=update)
        elif isinstance(api_key_or_config, str):
            config = ClientConfig(api_key=api_key_or_config, base_url=base_url)
        else:
            data = dict(api_key_or_config)
            if base_url:
                data["base_url"] = base_url
            config = ClientConfig(**data)

        self._config = config
        self._http = HttpClient(config, session=session)
        self._sms = SmsApi(self._http)
        self._otp = OtpApi(self._http)
        self._campaign = CampaignApi(self._http)

    @classmethod
    def from_environment(cls) -> "KyaSms":
        """
        Build a client from KYA_SMS_API_KEY and optionally KYA_SMS_BASE_URL
        (plus the rest of ClientConfig). Raises ConfigurationError when no API
        key is set.
        """
        config = load_config()
        if not config.api_key:
            raise ConfigurationError("KYA_SMS_API_KEY environment variable is not set")
        return cls(config)

    def __enter__(self) -> "KyaSms":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def sms(self) -> SmsApi:
        return self._sms

    @property
    def otp(self) -> OtpApi:
        return self._otp

    @property
    def campaign(self) -> CampaignApi:
        return self._campaign

    def set_api_key(self, api_key: str) -> None:
        self._config.api_key = api_key
        self._http.set_api_key(api_key)

    def set_base_url(self, base_url: str) -> None:
        self._config.base_url = base_url.rstrip("/")
        self._http.set_base_url(base_url)
        log.debug("kyasms_base_url_changed", extra={"base_url": self._config.base_url})
