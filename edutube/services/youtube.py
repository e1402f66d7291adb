import re
from urllib.parse import parse_qs, urlencode, urlparse


_YT_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{11}$")


def _is_youtube_host(host: str) -> bool:
    return host == "youtube.com" or host.endswith(".youtube.com")


def _is_short_host(host: str) -> bool:
    return host in ("youtu.be", "www.youtu.be")


def _valid(vid: str) -> str | None:
    vid = (vid or "").strip()
    return vid if _YT_ID_RE.match(vid) else None


def extract_youtube_video_id(url: str) -> str | None:
    """
    Supports:
    - https://www.youtube.com/watch?v=VIDEOID
    - https://youtu.be/VIDEOID
    - https://www.youtube.com/embed/VIDEOID
    - https://www.youtube.com/shorts/VIDEOID
    Scheme-less forms (youtu.be/VIDEOID) and m./music. hosts work too.
    """
    url = (url or "").strip()
    if not url:
        return None
    if "://" not in url:
        url = "https://" + url

    try:
        u = urlparse(url)
        host = (u.hostname or "").lower()
    except ValueError:
        return None

    path = (u.path or "").strip("/")

    # youtu.be/VIDEOID
    if _is_short_host(host):
        vid = path.split("/")[0] if path else ""
        return _valid(vid)

    if not _is_youtube_host(host):
        return None

    # youtube.com/watch?v=VIDEOID
    if path == "watch":
        q = parse_qs(u.query or "")
        return _valid(q.get("v", [""])[0])

    # youtube.com/embed/VIDEOID, youtube.com/shorts/VIDEOID
    parts = path.split("/")
    if len(parts) >= 2 and parts[0] in ("embed", "shorts"):
        return _valid(parts[1])

    return None


def build_video_url(video_id: str, *, start_seconds: float | None = None) -> str:
    params = {"v": video_id}
    if start_seconds is not None:
        params["t"] = f"{int(max(0, start_seconds))}s"
    return f"https://www.youtube.com/watch?{urlencode(params)}"
