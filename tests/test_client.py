import pydantic
import pytest
import requests

from kyasms import ClientConfig, ConfigurationError, KyaSms, load_config
from kyasms.api import CampaignApi, OtpApi, SmsApi
from kyasms.config import DEFAULT_BASE_URL


def test_create_with_api_key(session):
    client = KyaSms("test-api-key", session=session)
    assert client.config.api_key == "test-api-key"
    assert client.config.base_url == DEFAULT_BASE_URL
    assert client.config.timeout == 30.0
    assert client.config.debug is False
    assert isinstance(client.sms, SmsApi)
    assert isinstance(client.otp, OtpApi)
    assert isinstance(client.campaign, CampaignApi)


def test_create_with_api_key_and_base_url(session):
    client = KyaSms("k", "https://sandbox.example.com/api/", session=session)
    client.sms.send_simple("KYA", "229", "hi")
    assert session.last["url"] == "https://sandbox.example.com/api/sms/send"


def test_create_with_mapping(session):
    client = KyaSms({"api_key": "k", "timeout": 5, "debug": True}, session=session)
    assert client.config.timeout == 5.0
    assert client.config.debug is True


def test_create_with_config(session):
    cfg = ClientConfig(api_key="k", base_url="https://x.example.com/v3")
    client = KyaSms(cfg, session=session)
    assert client.config == cfg
    client.otp.send("App", "229")
    assert session.last["url"] == "https://x.example.com/v3/otp/create"


def test_invalid_timeout_rejected():
    with pytest.raises(pydantic.ValidationError):
        ClientConfig(api_key="k", timeout=0)


def test_setters_apply_to_next_request(client, session):
    client.set_api_key("new-key")
    client.set_base_url("https://other.example.com/v3")
    client.campaign.get_status(3)
    assert session.last["headers"]["APIKEY"] == "new-key"
    assert session.last["url"] == "https://other.example.com/v3/sms/campaign/status/3"
    assert client.config.api_key == "new-key"
    assert client.config.base_url == "https://other.example.com/v3"


def test_setters_do_not_touch_shared_config(session):
    cfg = ClientConfig(api_key="shared-key")
    first = KyaSms(cfg, session=session)
    second = KyaSms(cfg, session=session)

    first.set_api_key("first-key")
    first.set_base_url("https://first.example.com/v3")

    assert cfg.api_key == "shared-key"
    assert cfg.base_url == DEFAULT_BASE_URL
    assert second.config.api_key == "shared-key"
    second.sms.get_status(["m1"])
    assert session.last["headers"]["APIKEY"] == "shared-key"
    assert session.last["url"].startswith(DEFAULT_BASE_URL)


def test_config_with_base_url_override_is_copied(session):
    cfg = ClientConfig(api_key="k")
    client = KyaSms(cfg, "https://sandbox.example.com/v3/", session=session)
    assert client.config.base_url == "https://sandbox.example.com/v3"
    assert cfg.base_url == DEFAULT_BASE_URL


def test_from_environment(monkeypatch):
    monkeypatch.setenv("KYA_SMS_API_KEY", "env-key")
    monkeypatch.setenv("KYA_SMS_BASE_URL", "https://env.example.com/v3/")
    client = KyaSms.from_environment()
    assert client.config.api_key == "env-key"
    assert client.config.base_url == "https://env.example.com/v3"


def test_from_environment_without_key_fails_fast():
    with pytest.raises(ConfigurationError) as exc:
        KyaSms.from_environment()
    assert "KYA_SMS_API_KEY" in str(exc.value)


def test_from_environment_empty_key_fails_fast(monkeypatch):
    monkeypatch.setenv("KYA_SMS_API_KEY", "  ")
    with pytest.raises(ConfigurationError):
        KyaSms.from_environment()


def test_load_config_reads_yaml_env_wins(tmp_path, monkeypatch):
    cfg_file = tmp_path / "kyasms.yaml"
    cfg_file.write_text(
        "KYA_SMS_API_KEY: file-key\nKYA_SMS_TIMEOUT: 7\nKYA_SMS_BASE_URL: https://file.example.com\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("KYA_SMS_CONFIG_FILE", str(cfg_file))
    monkeypatch.setenv("KYA_SMS_API_KEY", "env-key")

    cfg = load_config()
    assert cfg.api_key == "env-key"
    assert cfg.timeout == 7.0
    assert cfg.base_url == "https://file.example.com"


def test_context_manager_closes_session(session):
    with KyaSms("k", session=session) as client:
        assert client.sms is not None
    assert session.closed is True


def test_default_session_is_requests_session():
    client = KyaSms("k")
    assert isinstance(client._http.session, requests.Session)
    assert "APIKEY" not in client._http.session.headers
    assert client._http.api_key == "k"
    client.close()
