"""Reference call shapes for the supported analytics SDKs."""

from .registry import SDK_NAMES, CallKind, Platform, SdkTarget, get_target, list_targets
from .rendering import render_call, render_instrument_guide, render_sdk_reference

__all__ = [
    "SDK_NAMES",
    "CallKind",
    "Platform",
    "SdkTarget",
    "get_target",
    "list_targets",
    "render_call",
    "render_instrument_guide",
    "render_sdk_reference",
]
