import os
import subprocess
from unittest.mock import MagicMock, patch

import pytest
import requests

from src.downloaders import DOWNLOADER_REGISTRY, get_downloader
from src.downloaders.aria2 import Aria2Downloader
from src.downloaders.command import CommandDownloader


def _completed(returncode: int) -> subprocess.CompletedProcess[bytes]:
    return subprocess.CompletedProcess(args=[], returncode=returncode)


def test_get_downloader():
    assert isinstance(get_downloader("aria2"), Aria2Downloader)
    assert isinstance(get_downloader("command"), CommandDownloader)
    assert set(DOWNLOADER_REGISTRY) == {"aria2", "command"}


def test_get_downloader_unknown():
    with pytest.raises(ValueError, match="Unknown downloader"):
        get_downloader("monotorrent")


def test_aria2_command():
    command = Aria2Downloader().build_command("http://example/ep02.torrent&tr=foo", "Show - 02.mkv", "/srv/anime")

    assert command == [
        "aria2c",
        "--dir",
        "/srv/anime",
        "--max-overall-upload-limit=25K",
        "--seed-time=0",
        "--follow-torrent=mem",
        "http://example/ep02.torrent&tr=foo",
    ]


def test_aria2_command_with_settings():
    command = Aria2Downloader().build_command(
        "ep.torrent",
        "Show - 02.mkv",
        "/srv/anime",
        executable="/opt/aria2/aria2c",
        max_upload_speed=100,
        extra_args=["--quiet"],
    )

    assert command[0] == "/opt/aria2/aria2c"
    assert "--max-overall-upload-limit=100K" in command
    assert command[-2:] == ["--quiet", "ep.torrent"]


def test_command_downloader_fills_placeholders():
    command = CommandDownloader().build_command(
        "http://example/ep.torrent",
        "Show - 02.mkv",
        "/srv/anime",
        executable="transmission-cli",
        extra_args=["-w", "{directory}", "{torrent}"],
    )

    assert command == ["transmission-cli", "-w", "/srv/anime", "http://example/ep.torrent"]


def test_command_downloader_appends_torrent():
    command = CommandDownloader().build_command("ep.torrent", "Show - 02.mkv", "/srv/anime", executable="client")

    assert command == ["client", "ep.torrent"]


def test_command_downloader_requires_executable():
    with pytest.raises(ValueError):
        CommandDownloader().build_command("ep.torrent", "Show - 02.mkv", "/srv/anime")


def test_download_success():
    with patch("src.downloaders.base.subprocess.run", return_value=_completed(0)) as run:
        assert Aria2Downloader().download("http://example/ep.torrent", "Show - 02.mkv", "/srv/anime")

    assert run.call_args.args[0][-1] == "http://example/ep.torrent"


def test_download_failure_exit_code(capsys: pytest.CaptureFixture[str]):
    with patch("src.downloaders.base.subprocess.run", return_value=_completed(7)):
        assert not Aria2Downloader().download("http://example/ep.torrent", "Show - 02.mkv", "/srv/anime")

    assert "код 7" in capsys.readouterr().out


def test_download_missing_executable_exits():
    """
    Tests that a torrent client that cannot be started stops the program.
    """
    with patch("src.downloaders.base.subprocess.run", side_effect=FileNotFoundError("aria2c")):
        with pytest.raises(SystemExit) as exc_info:
            Aria2Downloader().download("http://example/ep.torrent", "Show - 02.mkv", "/srv/anime")

    assert exc_info.value.code == 1


def test_download_fetches_torrent_file():
    """
    Tests that the .torrent descriptor is handed to the client as a local file and removed afterwards.
    """
    session = MagicMock()
    session.get.return_value.content = b"d8:announce0:e"
    seen: dict[str, str] = {}

    def fake_run(command: list[str]) -> subprocess.CompletedProcess[bytes]:
        torrent_path = command[-1]
        with open(torrent_path, "rb") as f:
            seen["content"] = f.read().decode()
        seen["path"] = torrent_path
        return _completed(0)

    with patch("src.downloaders.base.subprocess.run", side_effect=fake_run):
        assert Aria2Downloader().download(
            "http://example/ep.torrent",
            "Show - 02.mkv",
            "/srv/anime",
            session=session,
            fetch_torrent_file=True,
        )

    session.get.assert_called_once_with("http://example/ep.torrent")
    assert seen["content"] == "d8:announce0:e"
    assert seen["path"].endswith(".torrent")
    assert not os.path.exists(seen["path"])


def test_download_torrent_file_fetch_failure():
    session = MagicMock()
    session.get.side_effect = requests.exceptions.ConnectionError("timed out")

    with patch("src.downloaders.base.subprocess.run") as run:
        assert not Aria2Downloader().download(
            "http://example/ep.torrent",
            "Show - 02.mkv",
            "/srv/anime",
            session=session,
            fetch_torrent_file=True,
        )

    run.assert_not_called()


@pytest.mark.parametrize("bad_arg", ["{}", "{0}", "{torrent_path}", "{unclosed"])
def test_command_downloader_rejects_unknown_placeholders(bad_arg: str):
    with pytest.raises(ValueError, match="downloader_args"):
        CommandDownloader().build_command(
            "ep.torrent", "Show - 02.mkv", "/srv/anime", executable="client", extra_args=[bad_arg]
        )


def test_command_downloader_keeps_escaped_braces():
    command = CommandDownloader().build_command(
        "ep.torrent", "Show - 02.mkv", "/srv/anime", executable="client", extra_args=["--tag={{new}}", "{torrent}"]
    )

    assert command == ["client", "--tag={new}", "ep.torrent"]


def test_check_settings():
    Aria2Downloader().check_settings("/srv/anime")

    with pytest.raises(ValueError):
        CommandDownloader().check_settings("/srv/anime", executable="client", extra_args=["{0}"])


def test_download_with_bad_template_exits():
    with patch("src.downloaders.base.subprocess.run") as run, pytest.raises(SystemExit) as exc_info:
        CommandDownloader().download(
            "http://example/ep.torrent", "Show - 02.mkv", "/srv/anime", executable="client", extra_args=["{}"]
        )

    assert exc_info.value.code == 1
    run.assert_not_called()
