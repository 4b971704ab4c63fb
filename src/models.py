from dataclasses import dataclass, field


@dataclass(frozen=True)
class Show:
    """The show being monitored, as given on the command line."""

    show_name: str
    subber: str
    resolution: str = ""


@dataclass(frozen=True)
class Episode:
    """
    A single episode listed on the search page.

    Two episodes are the same episode when their pretty names match,
    so the torrent URL takes no part in comparison or hashing.
    """

    name: str
    torrent_url: str = field(compare=False)
