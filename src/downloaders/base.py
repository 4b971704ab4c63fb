import os
import subprocess
import sys
import tempfile
from abc import ABC, abstractmethod
from typing import Any

import requests

from src.utils import log


class BaseDownloader(ABC):
    """
    Abstract base class for a torrent downloader.

    Subclasses only decide which command to run; fetching the .torrent descriptor,
    running the client and handling its failures is shared.
    """

    name = "base"

    def download(
        self,
        torrent_url: str,
        episode_name: str,
        output_dir: str,
        **kwargs: Any,
    ) -> bool:
        """
        Download a single episode and wait until the client exits.

        Args:
            torrent_url: The torrent link from the search page.
            episode_name: The pretty name of the episode.
            output_dir: The directory to save the downloaded file.
            **kwargs: Additional arguments for the downloader:
                fetch_torrent_file: download the .torrent first and hand the client a local file.
                session: the requests.Session used for that.
                executable, extra_args, max_upload_speed: see the subclasses.

        Returns:
            True if the client finished successfully, False otherwise.
        """
        torrent = torrent_url
        torrent_path: str = ""

        if kwargs.get("fetch_torrent_file", False):
            torrent_path = self._fetch_torrent_file(torrent_url, kwargs.get("session"))
            if not torrent_path:
                return False
            torrent = torrent_path

        try:
            try:
                command = self.build_command(torrent, episode_name, output_dir, **kwargs)
            except ValueError as e:
                log(f"❌ [{self.name}] Ошибка в настройках загрузчика: {e}. Выход.", indent=2)
                sys.exit(1)
            return self._run(command, episode_name)
        finally:
            if torrent_path and os.path.exists(torrent_path):
                os.remove(torrent_path)

    @abstractmethod
    def build_command(self, torrent: str, episode_name: str, output_dir: str, **kwargs: Any) -> list[str]:
        """
        Build the command line for the torrent client.

        Args:
            torrent: A torrent URL or the path of a local .torrent file.
            episode_name: The pretty name of the episode.
            output_dir: The directory to save the downloaded file.
            **kwargs: The arguments passed to download().
        """
        pass

    def check_settings(self, output_dir: str, **kwargs: Any) -> None:
        """
        Check the downloader settings before the first download.

        Raises:
            ValueError: If no valid command can be built from the settings.
        """
        self.build_command("episode.torrent", "episode.mkv", output_dir, **kwargs)

    def _run(self, command: list[str], episode_name: str) -> bool:
        log(f"🔽 [{self.name}] Скачивание серии '{episode_name}'...", indent=2)
        try:
            result = subprocess.run(command)
        except OSError as e:
            log(f"❌ [{self.name}] Не удалось запустить '{command[0]}': {e}. Выход.", indent=2, top=1)
            sys.exit(1)

        if result.returncode != 0:
            log(
                f"❌ [{self.name}] Ошибка при скачивании серии '{episode_name}' (код {result.returncode}).",
                indent=2,
                top=1,
            )
            return False

        log(f"✅ [{self.name}] Скачивание серии '{episode_name}' успешно завершено.", indent=2, top=1)
        return True

    def _fetch_torrent_file(self, torrent_url: str, session: requests.Session | None) -> str:
        """Saves the .torrent descriptor to a temporary file and returns its path, or '' on failure."""
        temp_path: str = ""
        try:
            response = (session or requests).get(torrent_url)
            response.raise_for_status()
            with tempfile.NamedTemporaryFile(suffix=".torrent", delete=False) as temp_file:
                temp_path = temp_file.name
                temp_file.write(response.content)
            return temp_path
        except requests.exceptions.RequestException as e:
            log(f"❌ [{self.name}] Не удалось скачать торрент-файл {torrent_url}: {e}", indent=2)
        except OSError as e:
            log(f"❌ [{self.name}] Не удалось сохранить торрент-файл: {e}", indent=2)

        if temp_path and os.path.exists(temp_path):
            os.remove(temp_path)
        return ""
