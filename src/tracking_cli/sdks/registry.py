"""Call shapes for the supported analytics SDKs.

Each SDK has a browser and a Node variant. Templates use ``string.Template``
placeholders so the JavaScript braces need no escaping:

- ``$event``: event name
- ``$properties`` / ``$traits``: object literal, e.g. ``{ plan, seats }``
- ``$properties_tail``: the same keys as a trailing ``, plan, seats`` list
- ``$trait_sets``: one ``identifyEvent.set('key', key)`` line per trait
- ``$group_type``: group/account type
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from tracking_cli.errors import UnknownSdkError


class CallKind(str, Enum):
    IDENTIFY = "identify"
    GROUP = "group"
    TRACK = "track"


class Platform(str, Enum):
    BROWSER = "browser"
    NODE = "node"


@dataclass(frozen=True)
class SdkTarget:
    """One SDK/platform pair."""

    sdk: str
    platform: Platform
    label: str
    package: str
    init: str
    templates: Dict[CallKind, str]
    supports_event_properties: bool = True
    notes: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def key(self) -> str:
        return f"{self.sdk}/{self.platform.value}"

    @property
    def install(self) -> str:
        if not self.package:
            return "No package required"
        return f"npm install {self.package}"


_TARGETS: List[SdkTarget] = [
    SdkTarget(
        sdk="segment",
        platform=Platform.BROWSER,
        label="Segment (Analytics.js)",
        package="@segment/analytics-next",
        init=(
            "import { AnalyticsBrowser } from '@segment/analytics-next'\n\n"
            "export const analytics = AnalyticsBrowser.load({ writeKey: '<WRITE_KEY>' })"
        ),
        templates={
            CallKind.IDENTIFY: "analytics.identify(userId, $traits)",
            CallKind.GROUP: "analytics.group(accountId, $traits)",
            CallKind.TRACK: "analytics.track('$event', $properties)",
        },
    ),
    SdkTarget(
        sdk="segment",
        platform=Platform.NODE,
        label="Segment (analytics-node)",
        package="@segment/analytics-node",
        init=(
            "import { Analytics } from '@segment/analytics-node'\n\n"
            "export const analytics = new Analytics({ writeKey: '<WRITE_KEY>' })"
        ),
        templates={
            CallKind.IDENTIFY: "analytics.identify({ userId, traits: $traits })",
            CallKind.GROUP: "analytics.group({ userId, groupId: accountId, traits: $traits })",
            CallKind.TRACK: "analytics.track({ userId, event: '$event', properties: $properties })",
        },
        notes=("Call analytics.closeAndFlush() before a short-lived process exits.",),
    ),
    SdkTarget(
        sdk="amplitude",
        platform=Platform.BROWSER,
        label="Amplitude (Browser SDK 2)",
        package="@amplitude/analytics-browser",
        init="import * as amplitude from '@amplitude/analytics-browser'\n\namplitude.init('<API_KEY>')",
        templates={
            CallKind.IDENTIFY: (
                "amplitude.setUserId(userId)\n"
                "const identifyEvent = new amplitude.Identify()\n"
                "$trait_sets\n"
                "amplitude.identify(identifyEvent)"
            ),
            CallKind.GROUP: (
                "amplitude.setGroup('$group_type', accountId)\n"
                "const identifyEvent = new amplitude.Identify()\n"
                "$trait_sets\n"
                "amplitude.groupIdentify('$group_type', accountId, identifyEvent)"
            ),
            CallKind.TRACK: "amplitude.track('$event', $properties)",
        },
    ),
    SdkTarget(
        sdk="amplitude",
        platform=Platform.NODE,
        label="Amplitude (Node SDK)",
        package="@amplitude/analytics-node",
        init="import * as amplitude from '@amplitude/analytics-node'\n\namplitude.init('<API_KEY>')",
        templates={
            CallKind.IDENTIFY: (
                "const identifyEvent = new amplitude.Identify()\n"
                "$trait_sets\n"
                "amplitude.identify(identifyEvent, { user_id: userId })"
            ),
            CallKind.GROUP: (
                "const identifyEvent = new amplitude.Identify()\n"
                "$trait_sets\n"
                "amplitude.groupIdentify('$group_type', accountId, identifyEvent, { user_id: userId })"
            ),
            CallKind.TRACK: "amplitude.track('$event', $properties, { user_id: userId })",
        },
        notes=("Call amplitude.flush() before a short-lived process exits.",),
    ),
    SdkTarget(
        sdk="mixpanel",
        platform=Platform.BROWSER,
        label="Mixpanel (mixpanel-browser)",
        package="mixpanel-browser",
        init="import mixpanel from 'mixpanel-browser'\n\nmixpanel.init('<PROJECT_TOKEN>')",
        templates={
            CallKind.IDENTIFY: "mixpanel.identify(userId)\nmixpanel.people.set($traits)",
            CallKind.GROUP: (
                "mixpanel.set_group('$group_type', accountId)\n"
                "mixpanel.get_group('$group_type', accountId).set($traits)"
            ),
            CallKind.TRACK: "mixpanel.track('$event', $properties)",
        },
        notes=("Group analytics must be enabled on the Mixpanel project for group calls.",),
    ),
    SdkTarget(
        sdk="mixpanel",
        platform=Platform.NODE,
        label="Mixpanel (mixpanel-node)",
        package="mixpanel",
        init="const Mixpanel = require('mixpanel')\n\nconst mixpanel = Mixpanel.init('<PROJECT_TOKEN>')",
        templates={
            CallKind.IDENTIFY: "mixpanel.people.set(userId, $traits)",
            CallKind.GROUP: "mixpanel.groups.set('$group_type', accountId, $traits)",
            CallKind.TRACK: "mixpanel.track('$event', { distinct_id: userId$properties_tail })",
        },
    ),
    SdkTarget(
        sdk="posthog",
        platform=Platform.BROWSER,
        label="PostHog (posthog-js)",
        package="posthog-js",
        init=(
            "import posthog from 'posthog-js'\n\n"
            "posthog.init('<PROJECT_API_KEY>', { api_host: 'https://us.i.posthog.com' })"
        ),
        templates={
            CallKind.IDENTIFY: "posthog.identify(userId, $traits)",
            CallKind.GROUP: "posthog.group('$group_type', accountId, $traits)",
            CallKind.TRACK: "posthog.capture('$event', $properties)",
        },
    ),
    SdkTarget(
        sdk="posthog",
        platform=Platform.NODE,
        label="PostHog (posthog-node)",
        package="posthog-node",
        init=(
            "import { PostHog } from 'posthog-node'\n\n"
            "const posthog = new PostHog('<PROJECT_API_KEY>', { host: 'https://us.i.posthog.com' })"
        ),
        templates={
            CallKind.IDENTIFY: "posthog.identify({ distinctId: userId, properties: $traits })",
            CallKind.GROUP: (
                "posthog.groupIdentify({ groupType: '$group_type', groupKey: accountId, properties: $traits })"
            ),
            CallKind.TRACK: "posthog.capture({ distinctId: userId, event: '$event', properties: $properties })",
        },
        notes=("Call posthog.shutdown() before a short-lived process exits.",),
    ),
    SdkTarget(
        sdk="accoil",
        platform=Platform.BROWSER,
        label="Accoil (tracker script)",
        package="",
        init="// Add the Accoil tracker snippet to the page head, then:\naccoil.load('<API_KEY>')",
        templates={
            CallKind.IDENTIFY: "accoil.identify(userId, $traits)",
            CallKind.GROUP: "accoil.group(accountId, $traits)",
            CallKind.TRACK: "accoil.track('$event')",
        },
        supports_event_properties=False,
        notes=("Accoil records event names only; event properties are not stored.",),
    ),
    SdkTarget(
        sdk="accoil",
        platform=Platform.NODE,
        label="Accoil (HTTP API)",
        package="",
        init="const ACCOIL_API_KEY = process.env.ACCOIL_API_KEY",
        templates={
            CallKind.IDENTIFY: (
                "await fetch('https://in.accoil.com/v1/users', {\n"
                "  method: 'POST',\n"
                "  headers: { 'Content-Type': 'application/json' },\n"
                "  body: JSON.stringify({ api_key: ACCOIL_API_KEY, user_id: userId, traits: $traits }),\n"
                "})"
            ),
            CallKind.GROUP: (
                "await fetch('https://in.accoil.com/v1/groups', {\n"
                "  method: 'POST',\n"
                "  headers: { 'Content-Type': 'application/json' },\n"
                "  body: JSON.stringify({ api_key: ACCOIL_API_KEY, user_id: userId, group_id: accountId, traits: $traits }),\n"
                "})"
            ),
            CallKind.TRACK: (
                "await fetch('https://in.accoil.com/v1/events', {\n"
                "  method: 'POST',\n"
                "  headers: { 'Content-Type': 'application/json' },\n"
                "  body: JSON.stringify({ api_key: ACCOIL_API_KEY, user_id: userId, event: '$event', timestamp: Date.now() }),\n"
                "})"
            ),
        },
        supports_event_properties=False,
        notes=(
            "Accoil records event names only; event properties are not stored.",
            "Wrap sends in try/catch so analytics failures never break the request.",
        ),
    ),
    SdkTarget(
        sdk="rudderstack",
        platform=Platform.BROWSER,
        label="RudderStack (JavaScript SDK v3)",
        package="@rudderstack/analytics-js",
        init=(
            "import { RudderAnalytics } from '@rudderstack/analytics-js'\n\n"
            "export const rudderAnalytics = new RudderAnalytics()\n"
            "rudderAnalytics.load('<WRITE_KEY>', '<DATA_PLANE_URL>')"
        ),
        templates={
            CallKind.IDENTIFY: "rudderAnalytics.identify(userId, $traits)",
            CallKind.GROUP: "rudderAnalytics.group(accountId, $traits)",
            CallKind.TRACK: "rudderAnalytics.track('$event', $properties)",
        },
    ),
    SdkTarget(
        sdk="rudderstack",
        platform=Platform.NODE,
        label="RudderStack (Node SDK)",
        package="@rudderstack/rudder-sdk-node",
        init=(
            "import Analytics from '@rudderstack/rudder-sdk-node'\n\n"
            "const client = new Analytics('<WRITE_KEY>', { dataPlaneUrl: '<DATA_PLANE_URL>' })"
        ),
        templates={
            CallKind.IDENTIFY: "client.identify({ userId, traits: $traits })",
            CallKind.GROUP: "client.group({ userId, groupId: accountId, traits: $traits })",
            CallKind.TRACK: "client.track({ userId, event: '$event', properties: $properties })",
        },
        notes=("Call client.flush() before a short-lived process exits.",),
    ),
]

SDK_TARGETS: Dict[Tuple[str, Platform], SdkTarget] = {
    (target.sdk, target.platform): target for target in _TARGETS
}

SDK_NAMES: Tuple[str, ...] = tuple(dict.fromkeys(target.sdk for target in _TARGETS))


def list_targets() -> List[SdkTarget]:
    return list(_TARGETS)


def get_target(sdk: str, platform: str | Platform = Platform.BROWSER) -> SdkTarget:
    """Look up an SDK target.

    Raises:
        UnknownSdkError: If the SDK or platform is not supported
    """
    normalized_sdk = sdk.strip().lower()
    try:
        normalized_platform = Platform(platform.strip().lower() if isinstance(platform, str) else platform)
    except ValueError as exc:
        raise UnknownSdkError(normalized_sdk, str(platform)) from exc

    target = SDK_TARGETS.get((normalized_sdk, normalized_platform))
    if target is None:
        raise UnknownSdkError(normalized_sdk, normalized_platform.value)
    return target
