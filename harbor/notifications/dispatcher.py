"""Notification construction and click routing."""

import json
from collections.abc import Mapping
from typing import Any
from uuid import uuid4

import httpx
from pydantic import ValidationError

from harbor.config.models.notifications import NotificationsConfig
from harbor.notifications.models import (
    ClickResolution,
    NotificationAction,
    NotificationData,
    NotificationPayload,
)
from harbor.notifications.surface import NotificationSurface
from harbor.observability.logging import get_logger
from harbor.observability.metrics import NOTIFICATIONS_SHOWN
from harbor.timeutils import epoch_ms

logger = get_logger(__name__)

DEFAULT_ACTION = "default"


def _specified(value: Any) -> bool:
    """A caller value counts only when it is present and non-empty."""
    return value is not None and value != "" and value != []


def _pick(*candidates: Any) -> Any:
    for candidate in candidates:
        if _specified(candidate):
            return candidate
    return None


class NotificationDispatcher:
    """Builds notification payloads and resolves clicks on them.

    Caller input is merged over the configured defaults field by field, so
    a partial push payload still yields a complete notification.
    """

    def __init__(
        self,
        config: NotificationsConfig,
        surface: NotificationSurface | None = None,
    ) -> None:
        self._config = config
        self._surface = surface

    def build(self, data: Mapping[str, Any] | None = None) -> NotificationPayload:
        """Merge caller fields over defaults.

        Raises:
            ValidationError: If a caller field has the wrong shape
        """
        data = data or {}
        extra = data.get("data")
        bag: dict[str, Any] = dict(extra) if isinstance(extra, Mapping) else {}
        defaults = self._config

        actions = data.get("actions")
        if _specified(actions):
            resolved_actions = [NotificationAction.model_validate(a) for a in actions]
        else:
            resolved_actions = [
                NotificationAction(action=a.action, title=a.title) for a in defaults.actions
            ]

        bag.update(
            url=_pick(data.get("url"), bag.get("url"), defaults.url),
            id=str(_pick(data.get("id"), bag.get("id")) or uuid4().hex),
            action=_pick(data.get("action"), bag.get("action"), DEFAULT_ACTION),
            timestamp=epoch_ms(),
        )

        return NotificationPayload(
            title=_pick(data.get("title"), defaults.title),
            body=_pick(data.get("body"), defaults.body),
            icon=_pick(data.get("icon"), defaults.icon),
            badge=_pick(data.get("badge"), defaults.badge),
            tag=_pick(data.get("tag"), defaults.tag),
            vibrate=_pick(data.get("vibrate"), defaults.vibrate),
            actions=resolved_actions,
            data=NotificationData.model_validate(bag),
        )

    def minimal(self) -> NotificationPayload:
        """Fixed notification used when a push payload is unusable."""
        return NotificationPayload(
            title=self._config.title,
            body=self._config.body,
            icon=self._config.icon,
            badge=self._config.badge,
            tag=self._config.tag,
            vibrate=list(self._config.vibrate),
            data=NotificationData(url=self._config.url, id=uuid4().hex, timestamp=epoch_ms()),
        )

    def from_push(self, raw: bytes | str | None) -> NotificationPayload:
        """Build a payload from a push message. Never raises."""
        payload, _ = self._parse_push(raw)
        return payload

    def _parse_push(self, raw: bytes | str | None) -> tuple[NotificationPayload, str]:
        """Return the payload and the kind of input it came from."""
        if raw is None:
            return self._safe_build({}, "rich")

        try:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        except UnicodeDecodeError:
            logger.warning("push_payload_undecodable", size=len(raw))
            return self.minimal(), "minimal"

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            body = text
        else:
            if isinstance(parsed, dict):
                return self._safe_build(parsed, "rich")
            body = text if parsed is None else str(parsed)

        logger.debug("push_payload_plain_text", length=len(body))
        return self._safe_build({"body": body.strip()}, "text")

    def _safe_build(self, data: Mapping[str, Any], kind: str) -> tuple[NotificationPayload, str]:
        try:
            return self.build(data), kind
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning("push_payload_invalid", kind=kind, error=str(e))
            return self.minimal(), "minimal"

    def resolve_click(
        self,
        action: str | None,
        data: NotificationData | Mapping[str, Any],
    ) -> ClickResolution:
        """Decide where a click on a notification (or one of its actions) leads."""
        bag = data.model_dump() if isinstance(data, NotificationData) else dict(data)
        action = action or DEFAULT_ACTION
        url = bag.get("url") or self._config.url
        try:
            httpx.URL(url)
        except httpx.InvalidURL as e:
            logger.warning("notification_url_invalid", url=url, error=str(e))
            url = self._config.url

        if action == "dismiss":
            return ClickResolution(action=action, url=None, data=bag)

        if action == "view":
            target = httpx.URL(url).copy_merge_params(
                {"source": self._config.tracking_source, "action": "view"}
            )
            return ClickResolution(action=action, url=str(target), data=bag)

        if action == "extend":
            target = httpx.URL(self._config.extend_path)
            if bag.get("id"):
                target = target.copy_set_param("id", str(bag["id"]))
            return ClickResolution(action=action, url=str(target), data=bag)

        return ClickResolution(action=action, url=url, data=bag)

    async def show(self, payload: NotificationPayload, kind: str = "rich") -> bool:
        """Display through the surface. Display errors are logged."""
        if self._surface is None:
            logger.warning("notification_surface_missing", tag=payload.tag)
            return False
        try:
            await self._surface.show(payload)
        except Exception as e:
            logger.error(
                "notification_show_failed",
                tag=payload.tag,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
        NOTIFICATIONS_SHOWN.labels(kind=kind).inc()
        logger.info("notification_shown", tag=payload.tag, notification_id=payload.data.id)
        return True

    async def handle_push(self, raw: bytes | str | None) -> NotificationPayload:
        """Parse a push message and display the result."""
        payload, kind = self._parse_push(raw)
        await self.show(payload, kind=kind)
        return payload
