from __future__ import annotations

import pytest

import platform_profile
from models import PlatformProfile
from platform_profile import detect_profile, identification_string, is_mobile_identification


@pytest.mark.parametrize(
    "identification",
    [
        "android Linux-5.10-aarch64",
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)",
        "ios iPadOS-17.2-iPad13,4",
        "Mozilla/5.0 (Linux; Android 14) Mobile Safari",
    ],
)
def test_mobile_markers(identification: str) -> None:
    assert is_mobile_identification(identification) is True


@pytest.mark.parametrize(
    "identification",
    [
        "linux Linux-6.8.0-x86_64-with-glibc2.39",
        "darwin macOS-14.4-arm64-arm-64bit",
        "win32 Windows-11-10.0.22631-SP0",
    ],
)
def test_desktop_identifications(identification: str) -> None:
    assert is_mobile_identification(identification) is False


def test_mobile_profile_disables_continuous_and_interim() -> None:
    profile = detect_profile("android Linux-5.10-aarch64")
    assert profile == PlatformProfile(is_mobile=True, supports_continuous=False, supports_interim_results=False)


def test_desktop_profile_enables_continuous_and_interim() -> None:
    profile = detect_profile("linux Linux-6.8.0-x86_64")
    assert profile == PlatformProfile(is_mobile=False, supports_continuous=True, supports_interim_results=True)


def test_override_wins_over_identification() -> None:
    assert detect_profile("linux Linux-6.8.0-x86_64", override="mobile").is_mobile is True
    assert detect_profile("Android 14", override="Desktop").is_mobile is False


def test_unknown_override_falls_back_to_detection() -> None:
    assert detect_profile("Android 14", override="tablet").is_mobile is True


def test_environment_variable_overrides_identification(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setenv(platform_profile.PLATFORM_ENV_VAR, "iPhone")
    assert identification_string() == "iPhone"
    assert detect_profile().is_mobile is True


def test_identification_defaults_to_interpreter_platform(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.delenv(platform_profile.PLATFORM_ENV_VAR, raising=False)
    monkeypatch.setattr(platform_profile.sys, "platform", "linux")
    monkeypatch.setattr(platform_profile.platform, "platform", lambda: "Linux-6.8.0-x86_64")
    assert identification_string() == "linux Linux-6.8.0-x86_64"
