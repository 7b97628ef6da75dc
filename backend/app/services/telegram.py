import logging

import requests

logger = logging.getLogger(__name__)

TELEGRAM_SEND_MESSAGE = "https://api.telegram.org/bot{token}/sendMessage"


class NotificationError(Exception):
    pass


def send_report(token: str, chat_id: str, text: str, timeout: int = 15) -> None:
    try:
        response = requests.post(
            TELEGRAM_SEND_MESSAGE.format(token=token),
            json={
                "chat_id": chat_id,
                "text": text,
                "parse_mode": "HTML",
                "disable_web_page_preview": True,
            },
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise NotificationError(f"Telegram request failed: {exc.__class__.__name__}") from exc

    try:
        payload = response.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    if response.status_code != 200 or not payload.get("ok"):
        description = payload.get("description") or f"HTTP {response.status_code}"
        raise NotificationError(f"Telegram rejected the report: {description}")

    logger.info("Sent Telegram report to chat %s", chat_id)
