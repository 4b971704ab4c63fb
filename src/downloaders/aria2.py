from typing import Any

from src.constants import ARIA2_DEFAULT_ARGS, ARIA2_EXECUTABLE, DEFAULT_MAX_UPLOAD_SPEED
from src.downloaders.base import BaseDownloader


class Aria2Downloader(BaseDownloader):
    """Downloader that uses aria2c. Seeding stops as soon as the download is complete."""

    name = "aria2"

    def build_command(self, torrent: str, episode_name: str, output_dir: str, **kwargs: Any) -> list[str]:
        executable = kwargs.get("executable") or ARIA2_EXECUTABLE
        max_upload_speed = kwargs.get("max_upload_speed")
        if max_upload_speed is None:
            max_upload_speed = DEFAULT_MAX_UPLOAD_SPEED
        extra_args = kwargs.get("extra_args") or []

        return (
            [
                executable,
                "--dir",
                output_dir,
                f"--max-overall-upload-limit={max_upload_speed}K",
            ]
            + ARIA2_DEFAULT_ARGS
            + list(extra_args)
            + [torrent]
        )
