# Ananta Sync Platform Detection Utilities
# Operating system and browser detection for the device fingerprint

import platform
import re

# Platform name mapping: system name -> fingerprint OS name
_PLATFORM_MAP: dict[str, str] = {
    "Darwin": "macos",
    "Linux": "linux",
    "Windows": "windows",
}

# Ordered user-agent markers; Android and iOS must be tested before their desktop hosts
_UA_OS_MARKERS: list[tuple[str, str]] = [
    ("Android", "android"),
    ("iPhone", "ios"),
    ("iPad", "ios"),
    ("CrOS", "chromeos"),
    ("Windows NT", "windows"),
    ("Macintosh", "macos"),
    ("Mac OS X", "macos"),
    ("Linux", "linux"),
]

_VERSION_PATTERNS: dict[str, str] = {
    "edge": r"Edg/([\d.]+)",
    "firefox": r"Firefox/([\d.]+)",
    "safari": r"Version/([\d.]+)",
    "chrome": r"Chrome/([\d.]+)",
    "brave": r"Chrome/([\d.]+)",
}


def get_current_platform() -> str:
    """
    Get the current platform identifier.

    Returns:
        Platform string: "macos", "linux", or "windows".
    """
    system = platform.system()
    return _PLATFORM_MAP.get(system, system.lower())


def detect_os(user_agent: str) -> str:
    """
    Detect the operating system named by a user-agent string.

    Falls back to the host platform when the user agent names none.

    Args:
        user_agent: Browser user-agent string.

    Returns:
        OS identifier such as "windows", "macos", "android".
    """
    for marker, name in _UA_OS_MARKERS:
        if marker in user_agent:
            return name
    return get_current_platform()


def detect_browser(user_agent: str) -> str:
    """
    Detect the browser brand from a user-agent string.

    Args:
        user_agent: Browser user-agent string.

    Returns:
        One of "brave", "edge", "firefox", "safari", "chrome", "other".
    """
    if "Brave" in user_agent:
        return "brave"
    if "Edg/" in user_agent:
        return "edge"
    if "Firefox" in user_agent:
        return "firefox"
    if "Safari" in user_agent and "Chrome" not in user_agent:
        return "safari"
    if "Chrome" in user_agent:
        return "chrome"
    return "other"


def detect_browser_version(user_agent: str, browser: str | None = None) -> str | None:
    """
    Extract the browser version from a user-agent string.

    Args:
        user_agent: Browser user-agent string.
        browser: Already detected brand (detected when omitted).

    Returns:
        Version string, or None if the user agent carries none.
    """
    brand = browser or detect_browser(user_agent)
    pattern = _VERSION_PATTERNS.get(brand)
    if pattern is None:
        return None
    match = re.search(pattern, user_agent)
    return match.group(1) if match else None
