import re

from src.constants import MEDIA_EXTENSIONS

# Subber-specific annotations like "(1280x720 Hi10P AAC)" and "(720p)"; more will show up sooner or later
_CODEC_ANNOTATION_RE = re.compile(r"\([0-9]{3,4}x[0-9]{3,4}[^)]+\)")
_RESOLUTION_TOKEN_RE = re.compile(r"\([0-9]{3,4}p\)")
_BRACKET_TAG_RE = re.compile(r"[ ]*\[[^[]*\][ ]*")


def normalize_name(raw_name: str) -> str:
    """
    Turns a scraped or on-disk file name into its "pretty" form.

    Underscores become spaces, bracketed tags ("[HorribleSubs]", "[A1B2C3D4]") are removed
    together with the spaces around them, then resolution/codec annotations in parentheses
    are dropped. Remaining whitespace is left as is, so double spaces may survive.

    Example:
        "[HorribleSubs] Initial D Fifth Stage - 02 (480p).mkv" -> "Initial D Fifth Stage - 02 .mkv"
    """
    pretty_name = raw_name.replace("_", " ")
    pretty_name = _BRACKET_TAG_RE.sub("", pretty_name)
    pretty_name = _CODEC_ANNOTATION_RE.sub("", pretty_name)
    return _RESOLUTION_TOKEN_RE.sub("", pretty_name)


def has_media_extension(name: str) -> bool:
    """Check if the name ends with one of the episode container extensions."""
    return name.lower().endswith(MEDIA_EXTENSIONS)
