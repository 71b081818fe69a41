# core/validation/username.py
import re
from .result import ValidationResult, VALID, invalid

USERNAME_RULES = {
    "min_length": 3,
    "max_length": 30,
    # Lowercase alphanumerics and single hyphens, never at either end
    "pattern": re.compile(r'^[a-z0-9]([a-z0-9-]*[a-z0-9])?$'),
    # Paths the public profile routes would otherwise shadow
    "reserved": [
        "api",
        "admin",
        "auth",
        "signin",
        "login",
        "register",
        "dashboard",
        "library",
        "lists",
        "settings",
        "_next",
        "favicon.ico",
        "robots.txt",
        "sitemap.xml",
    ],
}

def is_reserved_username(username: str) -> bool:
    return username.lower() in USERNAME_RULES["reserved"]

def validate_username(username) -> ValidationResult:
    if not isinstance(username, str) or len(username) == 0:
        return invalid("Username is required")

    if username != username.lower():
        return invalid("Username must be lowercase")

    if len(username) < USERNAME_RULES["min_length"]:
        return invalid(f"Username must be at least {USERNAME_RULES['min_length']} characters")

    if len(username) > USERNAME_RULES["max_length"]:
        return invalid(f"Username must be {USERNAME_RULES['max_length']} characters or fewer")

    if not USERNAME_RULES["pattern"].match(username):
        return invalid(
            "Username may only contain lowercase letters, numbers, and hyphens, "
            "and must not start or end with a hyphen or contain consecutive hyphens"
        )

    if "--" in username:
        return invalid("Username must not contain consecutive hyphens")

    if is_reserved_username(username):
        return invalid("This username is reserved")

    return VALID
