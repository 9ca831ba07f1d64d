"""Mobile/desktop classification and the recognition capabilities it implies.

Some mobile recognizers end the audio stream as soon as the speaker pauses,
whatever configuration was requested, so on those devices the engine is run
non-continuous and final-only and staleness is left to the watchdog.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from typing import Optional

from models import PlatformProfile

MOBILE_MARKERS = ("android", "iphone", "ipad", "ipod", "ios", "mobile")
PLATFORM_ENV_VAR = "VOICE_NOTES_PLATFORM"

PROFILE_AUTO = "auto"
PROFILE_MOBILE = "mobile"
PROFILE_DESKTOP = "desktop"


def identification_string() -> str:
    """Describe the running environment, the way a user agent would."""
    override = os.getenv(PLATFORM_ENV_VAR, "")
    if override:
        return override
    return f"{sys.platform} {platform.platform()}"


def is_mobile_identification(identification: str) -> bool:
    low = identification.lower()
    return any(marker in low for marker in MOBILE_MARKERS)


def detect_profile(
    identification: Optional[str] = None,
    override: str = PROFILE_AUTO,
) -> PlatformProfile:
    override = (override or PROFILE_AUTO).strip().lower()
    if override == PROFILE_MOBILE:
        is_mobile = True
    elif override == PROFILE_DESKTOP:
        is_mobile = False
    else:
        if override != PROFILE_AUTO:
            logging.warning("Unknown profile override %r, detecting instead", override)
        if identification is None:
            identification = identification_string()
        is_mobile = is_mobile_identification(identification)

    profile = PlatformProfile.for_device(is_mobile)
    logging.info(
        "Platform profile: %s (continuous=%s, interim=%s)",
        "mobile" if profile.is_mobile else "desktop",
        profile.supports_continuous,
        profile.supports_interim_results,
    )
    return profile
