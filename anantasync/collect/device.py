# Ananta Sync Device Fingerprint
# Device and browser metadata pushed as telemetry on every run

import locale
import os
from dataclasses import dataclass
from typing import Optional

from anantasync.category import DeviceInfo, ScreenInfo
from anantasync.utils.platform import detect_browser, detect_browser_version, detect_os


@dataclass(frozen=True)
class DeviceEnvironment:
    """Raw host facts the fingerprint is computed from."""

    user_agent: str = ""
    screen_width: int = 0
    screen_height: int = 0
    pixel_ratio: float = 1.0
    color_depth: int = 24
    language: str = "en-US"
    hardware_concurrency: int = 1
    max_touch_points: int = 0

    @classmethod
    def from_host(cls, user_agent: Optional[str] = None) -> "DeviceEnvironment":
        """Describe the machine this process runs on."""
        lang, _ = locale.getlocale()
        return cls(
            user_agent=user_agent or "",
            language=(lang or "en_US").replace("_", "-"),
            hardware_concurrency=os.cpu_count() or 1,
        )


def compute_fingerprint(env: DeviceEnvironment) -> DeviceInfo:
    """
    Compute the device fingerprint.

    Args:
        env: Host facts (user agent, screen, locale, CPU count, touch points).

    Returns:
        DeviceInfo payload with OS and browser parsed from the user agent.
    """
    browser = detect_browser(env.user_agent)
    return DeviceInfo(
        os=detect_os(env.user_agent),
        browser=browser,
        browser_version=detect_browser_version(env.user_agent, browser),
        screen=ScreenInfo(
            width=env.screen_width,
            height=env.screen_height,
            pixel_ratio=env.pixel_ratio,
            color_depth=env.color_depth,
        ),
        language=env.language,
        hardware_concurrency=env.hardware_concurrency,
        touch_support=env.max_touch_points > 0,
    )
