import pytest

from src.models import Show


def make_row(raw_name: str, torrent_url: str) -> str:
    """Builds one search result row the way nyaa renders it."""
    return (
        '<tr class="tlistrow">'
        '<td class="tlisticon"><a href="//www.nyaa.se/?page=search&#38;cats=1_37" title="English-translated Anime">'
        "</a></td>"
        f'<td class="tlistname"><a href="//www.nyaa.se/?page=view&#38;tid=1">{raw_name}</a></td>'
        f'<td class="tlistdownload"><a href="{torrent_url}" title="Download"><img src="dl.png" alt="DL"></a></td>'
        '<td class="tlistsize">140.5 MiB</td>'
        "</tr>"
    )


def make_page(*rows: str) -> str:
    return '<html><body><table class="tlist">' + "".join(rows) + "</table></body></html>"


@pytest.fixture
def show() -> Show:
    return Show(show_name="Initial D Fifth Stage", subber="HorribleSubs", resolution="480")


@pytest.fixture(autouse=True)
def reset_open_line(monkeypatch: pytest.MonkeyPatch) -> None:
    """Every test starts with the console on a fresh line."""
    monkeypatch.setattr("src.utils._line_open", False)
