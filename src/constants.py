"""Constants used throughout the application."""

# Default user agent for HTTP requests
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/140.0.0.0 Safari/537.36 Edg/140.0.0.0"
)

# Default configuration values
DEFAULT_CONFIG_PATH = "config.yaml"
DEFAULT_CHECK_INTERVAL_MINUTES = 1
DEFAULT_DOWNLOADER = "aria2"
DEFAULT_MAX_UPLOAD_SPEED = 25  # KB/s

# Nyaa constants
NYAA_SEARCH_URL = "http://www.nyaa.se/?term="
NAME_CELL_MARKER = '<td class="tlistname">'
DOWNLOAD_CELL_MARKER = '<td class="tlistdownload">'
ANCHOR_END = "</a>"
TORRENT_LINK_START = '<a href="'
TORRENT_LINK_END = '" title="Download"'
ESCAPED_AMPERSAND = "&#38;"

# Only single episodes, batches come in other containers
MEDIA_EXTENSIONS = (".mp4", ".mkv")

# aria2c default arguments
ARIA2_EXECUTABLE = "aria2c"
ARIA2_DEFAULT_ARGS = ["--seed-time=0", "--follow-torrent=mem"]

# Notification defaults
DEFAULT_NOTIFY_COMMAND = ["SMSUtil.exe", "{destination}", "{message}"]
NOTIFY_MESSAGE_TEMPLATE = "'{name}' has finished downloading"
