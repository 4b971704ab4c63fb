import os
import sys
from collections.abc import Iterable, Sequence

from src.models import Episode, Show
from src.naming import has_media_extension, normalize_name
from src.utils import log


def scan_downloaded_episodes(directory: str, show: Show) -> set[str]:
    """
    Collects the pretty names of the show's episodes already present in the directory.

    Without this baseline there is no safe way to tell which episodes are new,
    so a directory that cannot be read stops the program.
    """
    try:
        with os.scandir(directory) as entries:
            file_names = [entry.name for entry in entries if entry.is_file()]
    except OSError as e:
        log(f"❌ Ошибка при чтении папки загрузок ({e}). Выход.", indent=1)
        sys.exit(1)

    pretty_names = (normalize_name(name) for name in file_names if has_media_extension(name))
    return {name for name in pretty_names if show.show_name in name}


def find_new_episodes(episodes: Sequence[Episode], downloaded: Iterable[str]) -> list[Episode]:
    """
    Returns the episodes that are not downloaded yet, in their original order.

    Releases that share a pretty name are the same episode (for example its 720p and 1080p
    versions when no resolution is set), so only the first one is kept.
    """
    seen_names = set(downloaded)
    new_episodes: list[Episode] = []
    for episode in episodes:
        if episode.name in seen_names:
            continue
        seen_names.add(episode.name)
        new_episodes.append(episode)
    return new_episodes
