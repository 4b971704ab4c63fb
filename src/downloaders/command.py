from typing import Any

from src.downloaders.base import BaseDownloader


class CommandDownloader(BaseDownloader):
    """
    Downloader that runs any torrent client given in the settings.

    `downloader_path` is the executable and `downloader_args` its arguments, where
    {torrent}, {directory} and {name} are replaced for every episode. Without a
    {torrent} placeholder the torrent is appended as the last argument. Literal braces
    are written as {{ and }}.

    Example:
        downloader_path: transmission-cli
        downloader_args: ["-w", "{directory}", "-u", "25", "{torrent}"]
    """

    name = "command"

    def build_command(self, torrent: str, episode_name: str, output_dir: str, **kwargs: Any) -> list[str]:
        executable = kwargs.get("executable")
        if not executable:
            raise ValueError("downloader_path must be set for the 'command' downloader")

        template: list[str] = list(kwargs.get("extra_args") or [])
        values = {"torrent": torrent, "directory": output_dir, "name": episode_name}
        try:
            args = [arg.format(**values) for arg in template]
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"invalid placeholder in downloader_args: {e!r}") from e

        if not any("{torrent}" in arg for arg in template):
            args.append(torrent)

        return [executable] + args
