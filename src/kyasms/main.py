from __future__ import annotations
import json
import logging
from dataclasses import asdict
from functools import wraps
from typing import Any, Tuple

import click

from kyasms.api.campaign import DEFAULT_TIMEZONE
from kyasms.client import KyaSms
from kyasms.config import ClientConfig, load_config
from kyasms.exceptions import ApiError, KyaSmsError, ValidationError
from kyasms.logging_setup import setup_logging
from kyasms.utils import format_datetime, parse_schedule_date

log = logging.getLogger(__name__)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, ensure_ascii=False, indent=2, default=str))


def _error_text(err: KyaSmsError) -> str:
    if isinstance(err, ValidationError) and err.errors:
        lines = [err.message]
        for field, msgs in err.errors.items():
            msgs = msgs if isinstance(msgs, list) else [msgs]
            lines.extend(f"  {field}: {m}" for m in msgs)
        return "\n".join(lines)
    if isinstance(err, ApiError):
        return f"[{err.status_code}] {err.message}"
    return err.message


def handle_api_errors(f):
    """Turn client errors into a clean non-zero exit."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except KyaSmsError as e:
            log.debug("cli_command_failed", extra={"error": type(e).__name__})
            raise click.ClickException(_error_text(e)) from e
    return wrapper


def pass_client(f):
    """
    Like click.pass_obj, but passes a KyaSms built from the group's config.
    The API key is checked here so that --help works without one.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        cfg = ctx.find_object(ClientConfig)
        if cfg is None or not cfg.api_key:
            raise click.UsageError("No API key: pass --api-key or set KYA_SMS_API_KEY", ctx=ctx)
        client = KyaSms(cfg)
        ctx.call_on_close(client.close)
        return f(client, *args, **kwargs)
    return wrapper


@click.group()
@click.option("--api-key", envvar="KYA_SMS_API_KEY", default=None, help="Defaults to $KYA_SMS_API_KEY.")
@click.option("--base-url", envvar="KYA_SMS_BASE_URL", default=None)
@click.option("--debug", is_flag=True, default=False, help="Log every request and response.")
@click.pass_context
def cli(ctx: click.Context, api_key: str | None, base_url: str | None, debug: bool):
    overrides = {}
    if api_key:
        overrides["api_key"] = api_key
    if base_url:
        overrides["base_url"] = base_url
    if debug:
        overrides["debug"] = True
    cfg = load_config(**overrides)
    setup_logging(cfg.log_level if not cfg.debug else "DEBUG")
    ctx.obj = cfg


# ---------------- SMS ----------------

@cli.group()
def sms():
    """Send SMS and query delivery."""


@sms.command("send")
@click.option("--from", "sender", required=True, help="Sender id.")
@click.option("--to", "to", multiple=True, required=True, help="Recipient number or group id (repeatable).")
@click.option("--message", "-m", default=None)
@click.option("--flash", is_flag=True, default=False)
@click.option("--bulk", is_flag=True, default=False, help="Recipients are group ids.")
@click.option("--template", "template_id", default=None)
@click.option("--lang", default="fr", show_default=True)
@click.option("--callback-url", default=None)
@click.option("--ref", "ref_custom", default=None)
@pass_client
@handle_api_errors
def sms_send(client: KyaSms, sender: str, to: Tuple[str, ...], message: str | None, flash: bool, bulk: bool,
             template_id: str | None, lang: str, callback_url: str | None, ref_custom: str | None):
    if not message and not template_id:
        raise click.UsageError("Pass --message or --template")
    result = client.sms.send(
        sender,
        list(to),
        message,
        type="flash" if flash else "text",
        callback_url=callback_url,
        ref_custom=ref_custom,
        is_bulk=bulk,
        is_template=bool(template_id),
        template={"id": template_id, "lang": lang} if template_id else None,
    )
    _echo_json(result.get_raw_response())


@sms.command("status")
@click.argument("message_ids", nargs=-1, required=True)
@pass_client
@handle_api_errors
def sms_status(client: KyaSms, message_ids: Tuple[str, ...]):
    _echo_json(client.sms.get_status(list(message_ids)))


@sms.command("history")
@click.option("--page", default=1, show_default=True, type=int)
@click.option("--per-page", default=50, show_default=True, type=int)
@click.option("--start-date", default=None)
@click.option("--end-date", default=None)
@click.option("--status", default=None)
@pass_client
@handle_api_errors
def sms_history(client: KyaSms, page: int, per_page: int, start_date: str | None, end_date: str | None,
                status: str | None):
    history = client.sms.get_history(
        page=page, per_page=per_page, start_date=start_date, end_date=end_date, status=status
    )
    _echo_json(asdict(history))


# ---------------- OTP ----------------

@cli.group()
def otp():
    """Issue and verify one-time passcodes."""


@otp.command("send")
@click.option("--app-id", required=True)
@click.option("--to", "recipient", required=True, help="Phone number or email.")
@click.option("--lang", default="fr", show_default=True, type=click.Choice(["fr", "en", "es", "de"]))
@click.option("--code", default=None, help="Custom code instead of a generated one.")
@click.option("--minutes", default=None, type=int, help="Validity in minutes.")
@pass_client
@handle_api_errors
def otp_send(client: KyaSms, app_id: str, recipient: str, lang: str, code: str | None, minutes: int | None):
    result = client.otp.create(app_id, recipient, lang=lang, code=code, minutes=minutes)
    _echo_json({"success": result.is_success(), "key": result.get_key(), "raw": result.get_raw_response()})


@otp.command("verify")
@click.option("--app-id", required=True)
@click.option("--key", required=True)
@click.option("--code", required=True)
@pass_client
@handle_api_errors
def otp_verify(client: KyaSms, app_id: str, key: str, code: str):
    result = client.otp.verify(app_id, key, code)
    _echo_json({**asdict(result), "verified": client.otp.is_verified(result)})
    if not client.otp.is_verified(result):
        raise click.exceptions.Exit(2)


# ---------------- Campaigns ----------------

@cli.group()
def campaign():
    """Create and track campaigns."""


@campaign.command("create")
@click.option("--name", required=True)
@click.option("--group", "groups", multiple=True, required=True, help="Group id (repeatable).")
@click.option("--sender", "sender_id", required=True)
@click.option("--message", "-m", default=None)
@click.option("--template", "template_id", default=None)
@click.option("--lang", "template_lang", default="fr", show_default=True)
@click.option("--schedule", default=None, help='When to run, e.g. "2025-09-01 09:00" or "tomorrow 9am".')
@click.option("--periodic", default=None, help="weekly_start, monthly_end, ...")
@click.option("--timezone", default=None)
@pass_client
@handle_api_errors
def campaign_create(client: KyaSms, name: str, groups: Tuple[str, ...], sender_id: str, message: str | None,
                    template_id: str | None, template_lang: str, schedule: str | None, periodic: str | None,
                    timezone: str | None):
    schedule_date = None
    ctype = "auto"
    if schedule:
        dt = parse_schedule_date(schedule)
        if dt is None:
            raise click.BadParameter(f"cannot parse date: {schedule}", param_hint="--schedule")
        schedule_date = format_datetime(dt)
        ctype = "customize"
    elif periodic:
        ctype = "periodic"
    if ctype != "auto" and not timezone:
        timezone = DEFAULT_TIMEZONE

    result = client.campaign.create(
        name,
        list(groups),
        sender_id,
        type=ctype,
        message=message,
        template_id=template_id,
        template_lang=template_lang,
        timezone=timezone,
        schedule_date=schedule_date,
        campaign_periodic=periodic,
    )
    _echo_json({
        "success": result.is_success(),
        "campaign_id": result.get_campaign_id(),
        "status": result.get_status(),
        "scheduled_at": result.get_scheduled_at(),
    })


@campaign.command("status")
@click.argument("campaign_id")
@pass_client
@handle_api_errors
def campaign_status(client: KyaSms, campaign_id: str):
    status = client.campaign.get_status(campaign_id)
    _echo_json(status.get("data") or {})


@campaign.command("records")
@click.option("--page", default=1, show_default=True, type=int)
@click.option("--per-page", default=20, show_default=True, type=int)
@click.option("--status", default=None)
@click.option("--type", "ctype", default=None)
@pass_client
@handle_api_errors
def campaign_records(client: KyaSms, page: int, per_page: int, status: str | None, ctype: str | None):
    records = client.campaign.get_records_filtered(page=page, per_page=per_page, status=status, type=ctype)
    _echo_json(asdict(records))


@campaign.command("cost")
@click.option("--group", "groups", multiple=True, required=True)
@click.option("--message", "-m", required=True)
@pass_client
@handle_api_errors
def campaign_cost(client: KyaSms, groups: Tuple[str, ...], message: str):
    _echo_json(client.campaign.calculate_cost(list(groups), message))
