import time
from collections.abc import Iterable
from enum import Enum
from typing import Any

import requests

from src.constants import NOTIFY_MESSAGE_TEMPLATE
from src.downloaders import get_downloader
from src.inventory import find_new_episodes, scan_downloaded_episodes
from src.models import Episode, Show
from src.notifier import notify
from src.scraper import build_search_url, fetch_page, parse_episodes
from src.utils import log


class WatchState(Enum):
    WAITING = "waiting"
    DOWNLOADING = "downloading"


class Watcher:
    """Checks the search page for new episodes of one show and downloads them."""

    def __init__(
        self,
        show: Show,
        download_dir: str,
        settings: dict[str, Any],
        session: requests.Session,
        notify_destination: str | None = None,
        verbose: bool = False,
    ):
        self.show = show
        self.download_dir = download_dir
        self.settings = settings
        self.session = session
        self.notify_destination = notify_destination
        self.verbose = verbose

        self.search_url = build_search_url(show, settings["search_url"])
        self.downloader = get_downloader(settings["downloader"])
        self.state = WatchState.WAITING

    @property
    def check_interval(self) -> int:
        """Seconds to wait before the next check when nothing new was found."""
        return int(self.settings["check_interval_minutes"] * 60)

    def run_check(self) -> int:
        """
        Runs a single check cycle.

        Returns:
            The number of seconds to wait before the next check: 0 if at least one
            episode was downloaded, the check interval otherwise.
        """
        downloaded = scan_downloaded_episodes(self.download_dir, self.show)
        if self.verbose:
            self._dump("📁 Скачанные серии:", sorted(downloaded))

        page, ok = fetch_page(self.session, self.search_url, timeout=self.settings.get("request_timeout"))
        if not ok:
            log("⚠️ Страница поиска недоступна. Повторю при следующей проверке.", indent=1)

        online_episodes = parse_episodes(page, self.show) if ok else []
        if self.verbose:
            self._dump("🌐 Серии на сайте:", (f"{e.name}, {e.torrent_url}" for e in online_episodes))

        new_episodes = find_new_episodes(online_episodes, downloaded)
        if self.verbose:
            self._dump("✨ Серии для скачивания:", (f"{e.name}, {e.torrent_url}" for e in new_episodes))

        if not new_episodes:
            self.state = WatchState.WAITING
            # Repeated idle checks overwrite the same line
            log(
                f"✅ Новых серий нет, ожидание... (проверено в {time.strftime('%H:%M:%S')})",
                indent=1,
                carriage_return=True,
            )
            return self.check_interval

        self.state = WatchState.DOWNLOADING
        log(f"✨ Найдено {len(new_episodes)} новых серий. Начинаю скачивание...", indent=1, top=1)
        downloaded_count = sum(self._download_episode(episode) for episode in new_episodes)

        self.state = WatchState.WAITING
        if not downloaded_count:
            log("⚠️ Ни одна серия не скачана. Жду до следующей проверки.", indent=1)
            return self.check_interval
        return 0

    def _download_episode(self, episode: Episode) -> bool:
        log(f"🔗 Серия '{episode.name}': {episode.torrent_url}", indent=1)
        download_successful = self.downloader.download(
            torrent_url=episode.torrent_url,
            episode_name=episode.name,
            output_dir=self.download_dir,
            session=self.session,
            executable=self.settings.get("downloader_path"),
            extra_args=self.settings.get("downloader_args"),
            max_upload_speed=self.settings.get("max_upload_speed"),
            fetch_torrent_file=self.settings.get("fetch_torrent_file", False),
        )

        if not download_successful:
            log(f"⚠️ Серия '{episode.name}' не скачана. Повторю при следующей проверке.", indent=1)
            return False

        if self.notify_destination:
            log("📨 Отправка уведомления...", indent=2)
            notify(
                self.notify_destination,
                NOTIFY_MESSAGE_TEMPLATE.format(name=episode.name),
                command=self.settings.get("notify_command"),
                session=self.session,
            )
        return True

    def _dump(self, title: str, lines: Iterable[str]) -> None:
        log(title, indent=1)
        for line in lines:
            log(line, indent=2)
