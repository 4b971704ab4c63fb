"""One-way notifications sent after an episode has been downloaded."""

import subprocess
from collections.abc import Sequence

import requests

from src.constants import DEFAULT_NOTIFY_COMMAND
from src.utils import log


def notify(
    destination: str,
    message: str,
    command: Sequence[str] | None = None,
    session: requests.Session | None = None,
) -> bool:
    """
    Sends a notification. Failures are logged and never stop the program.

    Args:
        destination: A webhook URL, or an identifier (such as a phone number) passed to the command.
        message: The text to send.
        command: The command template for non-URL destinations; {destination} and {message}
            are replaced. Defaults to the SMS utility.
        session: The requests.Session used for webhooks.

    Returns:
        True if the notification was sent, False otherwise.
    """
    if destination.startswith(("http://", "https://")):
        return _post_webhook(destination, message, session)
    return _run_command(command or DEFAULT_NOTIFY_COMMAND, destination, message)


def _post_webhook(url: str, message: str, session: requests.Session | None) -> bool:
    try:
        response = (session or requests).post(url, json={"text": message}, timeout=30)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        log(f"⚠️ Не удалось отправить уведомление на {url}: {e}", indent=2)
        return False
    return True


def _run_command(template: Sequence[str], destination: str, message: str) -> bool:
    try:
        command = [arg.format(destination=destination, message=message) for arg in template]
    except (KeyError, IndexError, ValueError) as e:
        log(f"⚠️ Неверный шаблон notify_command ({e!r}). Уведомление не отправлено.", indent=2)
        return False

    try:
        subprocess.run(command, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        log(f"⚠️ Не удалось отправить уведомление через '{command[0]}': {e}", indent=2)
        return False
    return True
