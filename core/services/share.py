# core/services/share.py
from typing import Optional
from urllib.parse import quote

from core import config

SHARE_PLATFORMS = ("x", "facebook", "reddit", "linkedin")


def generate_share_url(platform: str, share_url: str, title: Optional[str] = None) -> str:
    """Build a social share link for a public page.

    Args:
        platform: One of x, facebook, reddit, linkedin
        share_url: The absolute URL being shared
        title: Optional text used by X and Reddit

    Returns:
        The platform's share URL, or share_url itself for an unknown platform
    """
    encoded_url = quote(share_url, safe="!~*'()")
    encoded_title = quote(title, safe="!~*'()") if title else ""

    if platform == "x":
        if title:
            return f"https://twitter.com/intent/tweet?text={encoded_title}&url={encoded_url}"
        return f"https://twitter.com/intent/tweet?url={encoded_url}"
    if platform == "facebook":
        return f"https://www.facebook.com/sharer/sharer.php?u={encoded_url}"
    if platform == "reddit":
        if title:
            return f"https://www.reddit.com/submit?url={encoded_url}&title={encoded_title}"
        return f"https://www.reddit.com/submit?url={encoded_url}"
    if platform == "linkedin":
        return f"https://www.linkedin.com/shareArticle?mini=true&url={encoded_url}"
    return share_url


def share_urls(share_url: str, title: Optional[str] = None) -> dict:
    return {platform: generate_share_url(platform, share_url, title) for platform in SHARE_PLATFORMS}


def public_list_url(username: str, list_id: str) -> str:
    return f"{config.PUBLIC_BASE_URL.rstrip('/')}/{username}/lists/{list_id}"
