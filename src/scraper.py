import re
from typing import Any
from urllib.parse import urlparse

import browser_cookie3  # type: ignore
import requests

from src.constants import (
    ANCHOR_END,
    DEFAULT_USER_AGENT,
    DOWNLOAD_CELL_MARKER,
    ESCAPED_AMPERSAND,
    NAME_CELL_MARKER,
    NYAA_SEARCH_URL,
    TORRENT_LINK_END,
    TORRENT_LINK_START,
)
from src.models import Episode, Show
from src.naming import has_media_extension, normalize_name
from src.utils import log


def create_session(
    user_agent: str = DEFAULT_USER_AGENT,
    bypass_proxy: bool = True,
    cookie_settings: dict[str, Any] | None = None,
    cookie_url: str = NYAA_SEARCH_URL,
) -> requests.Session:
    """
    Creates the HTTP session used for every request.

    Args:
        user_agent: The User-Agent header to send.
        bypass_proxy: If True, proxy settings from the environment are ignored.
            Proxy autodetection can add tens of seconds to every request.
        cookie_settings: The `cookies` section of the settings.
        cookie_url: The URL whose domain the browser cookies are loaded for.
    """
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent})
    session.trust_env = not bypass_proxy

    if cookie_settings:
        _handle_cookies(session, cookie_settings, cookie_url)

    return session


def _handle_cookies(session: requests.Session, cookie_settings: dict[str, Any], url: str) -> None:
    """Handles loading cookies into the requests session."""
    if not cookie_settings.get("enable", False):
        return

    try:
        domain = urlparse(url).netloc
        if not domain:
            log("⚠️ Не удалось извлечь домен из URL поиска. Пропускаю загрузку cookies.", indent=1)
            return

        browser = cookie_settings.get("browser", "firefox")
        log(f"🍪 Загрузка cookies для домена '{domain}' из {browser}...", indent=1)
        cj = getattr(browser_cookie3, browser)(domain_name=domain)
        session.cookies.update(cj)  # type: ignore
        log("✅ Cookies успешно загружены.", indent=1)
    except Exception as e:
        log(f"❌ Не удалось загрузить cookies: {e}", indent=1)


def build_search_url(show: Show, base_url: str = NYAA_SEARCH_URL) -> str:
    """
    Builds the search query for a show.

    The subber goes in percent-encoded brackets and spaces in the show name become '+'.
    Nothing else is encoded: the site expects the query exactly in this form.
    """
    url = f"{base_url}%5B{show.subber}%5D+{show.show_name.replace(' ', '+')}"
    if show.resolution:
        url += f"+{show.resolution}"
    return url


def fetch_page(session: requests.Session, url: str, timeout: float | None = None) -> tuple[str, bool]:
    """
    Downloads the search page.

    Returns:
        The page body and True, or an empty string and False if the request failed.
    """
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
        return response.text, True
    except requests.exceptions.RequestException as e:
        log(f"❌ Ошибка при загрузке страницы {url}: {e}", indent=1)
        return "", False


def _find_all(page: str, marker: str) -> list[int]:
    return [match.start() for match in re.finditer(re.escape(marker), page)]


def _extract_raw_name(page: str, name_index: int, download_index: int) -> str | None:
    """Returns the anchor text of the name cell, or None if the cell is malformed."""
    name_cell = page[name_index:download_index]

    tag_end = name_cell.find(">", len(NAME_CELL_MARKER))
    name_end = name_cell.find(ANCHOR_END)
    if tag_end < 0 or name_end < 0 or tag_end + 1 >= name_end:
        log(
            f"❌ Ошибка разбора: неверные границы названия ({tag_end + 1}, {name_end}) "
            f"в ячейке на позиции {name_index}",
            indent=1,
        )
        return None

    return name_cell[tag_end + 1 : name_end]


def _extract_torrent_url(page: str, download_index: int, row_end: int) -> str | None:
    """Returns the unescaped torrent link of the download cell, or None if the cell is malformed."""
    download_cell = page[download_index:row_end]

    link_start = download_cell.find(TORRENT_LINK_START)
    link_end = download_cell.find(TORRENT_LINK_END)
    if link_start < 0 or link_end < 0 or link_start + len(TORRENT_LINK_START) >= link_end:
        log(
            f"❌ Ошибка разбора: неверные границы ссылки ({link_start}, {link_end}) "
            f"в ячейке на позиции {download_index}",
            indent=1,
        )
        return None

    torrent_url = download_cell[link_start + len(TORRENT_LINK_START) : link_end]
    return torrent_url.replace(ESCAPED_AMPERSAND, "&")


def parse_episodes(page: str, show: Show) -> list[Episode]:
    """
    Finds the episodes of a show on a nyaa search results page.

    Every result row has a name cell and a download cell. The cells are paired up by
    their order on the page; a row is kept when its name contains the subber and the
    resolution, is a single .mp4/.mkv episode and its pretty name contains the show name.
    Malformed rows are logged and skipped. If the two cell counts differ the page layout
    has changed and nothing is returned.

    Returns:
        The matching episodes, oldest first.
    """
    name_indices = _find_all(page, NAME_CELL_MARKER)
    download_indices = _find_all(page, DOWNLOAD_CELL_MARKER)

    if len(name_indices) != len(download_indices):
        log(
            "❌ Ошибка разбора: количество ячеек названий и ссылок не совпадает "
            f"({len(name_indices)} и {len(download_indices)})",
            indent=1,
        )
        return []

    episodes: list[Episode] = []
    for i, (name_index, download_index) in enumerate(zip(name_indices, download_indices)):
        if name_index >= download_index:
            log(
                f"❌ Ошибка разбора: ячейка названия идёт после ячейки ссылки ({name_index} и {download_index})",
                indent=1,
            )
            continue

        raw_name = _extract_raw_name(page, name_index, download_index)
        if raw_name is None:
            continue

        if show.subber not in raw_name or show.resolution not in raw_name:
            continue

        # Skip batches and other non-episode releases
        if not has_media_extension(raw_name):
            continue

        pretty_name = normalize_name(raw_name)
        if show.show_name not in pretty_name:
            continue

        row_end = name_indices[i + 1] if i + 1 < len(name_indices) else len(page)
        torrent_url = _extract_torrent_url(page, download_index, row_end)
        if torrent_url is None:
            continue

        episodes.append(Episode(name=pretty_name, torrent_url=torrent_url))

    # The page lists the newest release first
    episodes.reverse()
    return episodes
