import pytest

from kyasms.api.otp import OtpResult, OtpVerification


def test_create_omits_code_and_minutes(client, session):
    client.otp.create("MyApp", "22990000001")
    payload = session.last["json"]
    assert session.last["url"].endswith("/otp/create")
    assert payload == {"appId": "MyApp", "recipient": "22990000001", "lang": "fr"}
    assert "code" not in payload
    assert "minutes" not in payload


def test_create_with_all_options(client, session):
    client.otp.create("MyApp", "user@example.com", lang="en", code="123456", minutes=5)
    assert session.last["json"] == {
        "appId": "MyApp",
        "recipient": "user@example.com",
        "lang": "en",
        "code": "123456",
        "minutes": 5,
    }


def test_send_helpers_match_create(client, session):
    client.otp.send("MyApp", "229", "de")
    assert session.last["json"] == {"appId": "MyApp", "recipient": "229", "lang": "de"}

    client.otp.send_with_expiration("MyApp", "229", 10)
    via_helper = session.last["json"]
    client.otp.create("MyApp", "229", minutes=10)
    assert session.last["json"] == via_helper

    client.otp.send_with_custom_code("MyApp", "229", "4321", "fr", 3)
    via_helper = session.last["json"]
    client.otp.create("MyApp", "229", lang="fr", code="4321", minutes=3)
    assert session.last["json"] == via_helper
    assert via_helper["code"] == "4321"


def test_custom_code_without_minutes(client, session):
    client.otp.send_with_custom_code("MyApp", "229", "4321")
    assert "minutes" not in session.last["json"]


def test_otp_result_reads_top_level_or_data(client, session):
    session.queue_response(200, {"reason": "success", "key": "K1", "recipient": "229", "status": "sent"})
    result = client.otp.send("MyApp", "229")
    assert result.is_success()
    assert result.get_key() == "K1"
    assert result.get_recipient() == "229"
    assert result.get_status() == "sent"

    nested = OtpResult({"reason": "success", "data": {"key": "K2", "messageId": "m9"}})
    assert nested.get_key() == "K2"
    assert nested.get_message_id() == "m9"


def test_otp_result_defaults():
    result = OtpResult({})
    assert result.is_success() is False
    assert result.get_key() == ""
    assert result.get_recipient() == ""
    assert result.get_status() == ""
    assert result.get_message_id() == ""


def test_verify_posts_triple(client, session):
    session.queue_response(200, {"reason": "success", "status": 200, "msg": "checked"})
    result = client.otp.verify("MyApp", "K1", "123456")
    assert session.last["url"].endswith("/otp/verify")
    assert session.last["json"] == {"appId": "MyApp", "key": "K1", "code": "123456"}
    assert result == OtpVerification(reason="success", status=200, msg="checked")
    assert client.otp.is_verified(result) is True


def test_verify_defaults_on_missing_fields(client, session):
    session.queue_response(200, {})
    result = client.otp.verify("MyApp", "K1", "000000")
    assert result.reason == ""
    assert result.status == 0
    assert result.msg == ""
    assert client.otp.is_verified(result) is False


@pytest.mark.parametrize(
    "status,msg,expected",
    [
        (200, "checked", True),
        (200, "expired", False),
        (200, "Checked", False),
        (400, "checked", False),
        (0, "", False),
    ],
)
def test_is_verified_needs_both_conditions(client, status, msg, expected):
    assert client.otp.is_verified(OtpVerification(reason="x", status=status, msg=msg)) is expected


def test_verification_coerces_string_status():
    assert OtpVerification.from_raw({"status": "200", "msg": "checked"}).is_verified is True
    assert OtpVerification.from_raw({"status": "oops"}).status == 0


@pytest.mark.parametrize("status", [1e400, float("-inf"), float("nan")])
def test_verification_non_finite_status_defaults_to_zero(status):
    verification = OtpVerification.from_raw({"status": status, "msg": "checked"})
    assert verification.status == 0
    assert verification.is_verified is False
