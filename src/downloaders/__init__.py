from src.downloaders.aria2 import Aria2Downloader
from src.downloaders.base import BaseDownloader
from src.downloaders.command import CommandDownloader

# A registry of all available downloaders
DOWNLOADER_REGISTRY: dict[str, type[BaseDownloader]] = {
    "aria2": Aria2Downloader,
    "command": CommandDownloader,
}


def get_downloader(downloader_name: str) -> BaseDownloader:
    """
    Factory function to get a downloader instance by name.

    Args:
        downloader_name: The name of the downloader to get.

    Returns:
        An instance of the requested downloader.

    Raises:
        ValueError: If the downloader is not found in the registry.
    """
    downloader_class = DOWNLOADER_REGISTRY.get(downloader_name)
    if not downloader_class:
        raise ValueError(f"Unknown downloader: {downloader_name}")
    return downloader_class()
