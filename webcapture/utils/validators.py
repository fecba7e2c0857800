"""Input classification and validation helpers."""

import re
from pathlib import Path


URL_PATTERN = re.compile(r"^(https?|file)://|^data:", re.IGNORECASE)

BASE64_INVALID_CHARS = re.compile(r"[^A-Z0-9+/=]", re.IGNORECASE)

# Characters rejected in filesystem paths on any supported platform
INVALID_PATH_CHARS = re.compile(r'[<>"|?*\x00-\x1f]')
WINDOWS_DRIVE = re.compile(r"^[a-zA-Z]:[\\/]")

# Standard elements plus obsolete ones still rendered by browsers
HTML_TAGS = (
    "a", "abbr", "acronym", "address", "applet", "area", "article", "aside", "audio",
    "b", "base", "basefont", "bdi", "bdo", "big", "blink", "blockquote", "body", "br",
    "button", "canvas", "caption", "center", "cite", "code", "col", "colgroup",
    "data", "datalist", "dd", "del", "details", "dfn", "dialog", "dir", "div", "dl", "dt",
    "em", "embed", "fieldset", "figcaption", "figure", "font", "footer", "form", "frame",
    "frameset", "h1", "h2", "h3", "h4", "h5", "h6", "head", "header", "hgroup", "hr",
    "html", "i", "iframe", "img", "input", "ins", "isindex", "kbd", "keygen", "label",
    "legend", "li", "link", "listing", "main", "map", "mark", "marquee", "math", "menu",
    "menuitem", "meta", "meter", "multicol", "nav", "nextid", "nobr", "noembed",
    "noframes", "noscript", "object", "ol", "optgroup", "option", "output", "p", "param",
    "picture", "plaintext", "pre", "progress", "q", "rb", "rp", "rt", "rtc", "ruby", "s",
    "samp", "script", "search", "section", "select", "slot", "small", "source", "spacer",
    "span", "strike", "strong", "style", "sub", "summary", "sup", "svg", "table", "tbody",
    "td", "template", "textarea", "tfoot", "th", "thead", "time", "title", "tr", "track",
    "tt", "u", "ul", "var", "video", "wbr", "xmp",
)

HTML_PATTERN = re.compile(
    r"\s*<!doctype\s+html|<x-[^>]+>|<(?:%s)\b[^>]*>" % "|".join(HTML_TAGS),
    re.IGNORECASE,
)


def is_valid_url(value: str) -> bool:
    """Absolute http(s), file or data URL."""
    return isinstance(value, str) and bool(URL_PATTERN.match(value))


def is_valid_html(value: str) -> bool:
    """Sniff whether a string is an HTML document or fragment."""
    return isinstance(value, str) and bool(HTML_PATTERN.search(value))


def is_valid_path(value: str) -> bool:
    """Whether a string is syntactically usable as a filesystem path."""
    if not isinstance(value, str) or not value.strip():
        return False

    candidate = WINDOWS_DRIVE.sub("", value)
    if ":" in candidate:
        return False
    return not INVALID_PATH_CHARS.search(candidate)


def is_existing_file(value: str) -> bool:
    return is_valid_path(value) and Path(value).expanduser().is_file()


def is_valid_base64(value: str) -> bool:
    """Check standard base64 alphabet and padding rules."""
    if not isinstance(value, str):
        return False

    length = len(value)
    if not length or length % 4 != 0 or BASE64_INVALID_CHARS.search(value):
        return False

    first_padding = value.find("=")
    return (
        first_padding == -1
        or first_padding == length - 1
        or (first_padding == length - 2 and value[-1] == "=")
    )
