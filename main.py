import argparse
import os
import sys
import time
from collections.abc import Sequence
from typing import NoReturn

from src.app import Watcher
from src.config import load_settings
from src.constants import DEFAULT_CONFIG_PATH
from src.downloaders import DOWNLOADER_REGISTRY, get_downloader
from src.models import Show
from src.scraper import create_session
from src.utils import log

if sys.platform == "win32":
    import msvcrt
else:
    import select

USAGE_EXAMPLE = 'Example: python main.py -r 480 -m 4161231234 "Sword Art Online II" "HorribleSubs" "/srv/anime"'


def wait_for_input_or_timeout(timeout_seconds: int) -> bool:
    """
    Waits for user input or a timeout, whichever comes first.

    Args:
        timeout_seconds: The timeout in seconds.

    Returns:
        True if input was received, False otherwise.
    """
    if sys.platform == "win32":
        start_time = time.time()
        while time.time() - start_time < timeout_seconds:
            if msvcrt.kbhit() and msvcrt.getch() == b"\r":
                return True
            time.sleep(0.1)
        return False

    if not sys.stdin.isatty():
        time.sleep(timeout_seconds)
        return False

    rlist, _, _ = select.select([sys.stdin], [], [], timeout_seconds)
    if rlist:
        sys.stdin.readline()
        return True
    return False


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Monitors nyaa for new episodes of a show and downloads them.",
        epilog=USAGE_EXAMPLE,
    )
    parser.add_argument("show_name", help="Show name as it appears in episode names")
    parser.add_argument("subber", help="Release group, e.g. HorribleSubs")
    parser.add_argument("download_directory", help="Existing directory the episodes are downloaded to")
    parser.add_argument("-r", "--resolution", default="", help="Resolution, e.g. 480 or 720")
    parser.add_argument(
        "-m",
        "--notify",
        default=None,
        help="Where to send a notification after each episode: a phone number or a webhook URL",
    )
    parser.add_argument("-c", "--config", default=DEFAULT_CONFIG_PATH, help="Path to the YAML settings file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print the episode lists on every check")
    return parser.parse_args(argv)


def build_show(args: argparse.Namespace) -> Show:
    """Validates the command line arguments and builds the show to monitor. Exits on invalid input."""
    show_name = args.show_name.strip()
    subber = args.subber.strip()
    download_dir = args.download_directory.strip()

    if not show_name or not subber or not download_dir:
        log("❌ Ни один из аргументов не может быть пустым. Выход.")
        sys.exit(1)

    if not os.path.isdir(download_dir):
        log(f"❌ Папка загрузок '{download_dir}' не существует. Выход.")
        sys.exit(1)

    return Show(show_name=show_name, subber=subber, resolution=args.resolution.strip())


def main(argv: Sequence[str] | None = None) -> NoReturn:
    """The main entry point of the script."""
    args = parse_args(argv)
    show = build_show(args)
    download_dir = args.download_directory.strip()

    settings = load_settings(args.config)
    if settings["downloader"] not in DOWNLOADER_REGISTRY:
        log(f"❌ Неизвестный загрузчик '{settings['downloader']}'. Доступны: {', '.join(DOWNLOADER_REGISTRY)}.")
        sys.exit(1)
    try:
        get_downloader(settings["downloader"]).check_settings(
            download_dir,
            executable=settings.get("downloader_path"),
            extra_args=settings.get("downloader_args"),
            max_upload_speed=settings.get("max_upload_speed"),
        )
    except ValueError as e:
        log(f"❌ Ошибка в настройках загрузчика: {e}. Выход.")
        sys.exit(1)

    log("👀 Буду отслеживать и скачивать:", top=1)
    log(f"Сериал: {show.show_name}", indent=1)
    log(f"Сабберы: {show.subber}", indent=1)
    if show.resolution:
        log(f"Разрешение: {show.resolution}", indent=1)

    session = create_session(
        user_agent=settings["user_agent"],
        bypass_proxy=settings["bypass_proxy"],
        cookie_settings=settings.get("cookies"),
        cookie_url=settings["search_url"],
    )
    watcher = Watcher(show, download_dir, settings, session, notify_destination=args.notify, verbose=args.verbose)

    try:
        log("🚀 Мониторинг запущен. Нажмите Ctrl+C для выхода.", top=1)
        log("ℹ️ Нажмите Enter, чтобы запустить проверку немедленно.")
        while True:
            wait_seconds = watcher.run_check()
            if wait_seconds and wait_for_input_or_timeout(wait_seconds):
                log("⌨️ Enter нажат. Запускаю проверку...", top=1)

    except KeyboardInterrupt:
        log("🛑 Получен сигнал завершения. Выход.", top=2)
        sys.exit(0)
    finally:
        session.close()


if __name__ == "__main__":
    main()
