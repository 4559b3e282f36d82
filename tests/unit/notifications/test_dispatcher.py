"""Unit tests for NotificationDispatcher."""

import json
from unittest.mock import AsyncMock

import pytest

from harbor.config.models.notifications import NotificationsConfig
from harbor.notifications.dispatcher import NotificationDispatcher
from harbor.notifications.models import NotificationData
from harbor.notifications.surface import InMemoryNotificationSurface


@pytest.fixture
def surface() -> InMemoryNotificationSurface:
    return InMemoryNotificationSurface()


@pytest.fixture
def dispatcher(surface: InMemoryNotificationSurface) -> NotificationDispatcher:
    return NotificationDispatcher(NotificationsConfig(), surface)


class TestBuild:
    """Tests for merging caller input over defaults."""

    def test_empty_input_uses_defaults(self, dispatcher: NotificationDispatcher) -> None:
        payload = dispatcher.build({})

        assert payload.title == "停车提醒"
        assert payload.body == "您的停车时间即将结束"
        assert payload.icon == "/icon-192x192.png"
        assert payload.badge == "/icon-72x72.png"
        assert payload.tag == "parking-reminder"
        assert payload.vibrate == [500, 200, 500]
        assert [a.action for a in payload.actions] == ["view", "extend", "dismiss"]
        assert payload.data.url == "/"
        assert payload.data.action == "default"
        assert payload.data.id
        assert payload.data.timestamp > 0

    def test_caller_fields_override_field_by_field(
        self, dispatcher: NotificationDispatcher
    ) -> None:
        payload = dispatcher.build({"title": "Custom", "url": "/parking/42"})

        assert payload.title == "Custom"
        assert payload.data.url == "/parking/42"
        assert payload.body == "您的停车时间即将结束"
        assert payload.icon == "/icon-192x192.png"

    def test_empty_strings_fall_back_to_defaults(
        self, dispatcher: NotificationDispatcher
    ) -> None:
        payload = dispatcher.build({"title": "", "body": None, "vibrate": []})

        assert payload.title == "停车提醒"
        assert payload.body == "您的停车时间即将结束"
        assert payload.vibrate == [500, 200, 500]

    def test_supplied_id_is_kept(self, dispatcher: NotificationDispatcher) -> None:
        payload = dispatcher.build({"id": "session-9"})
        assert payload.data.id == "session-9"

    def test_generated_ids_are_unique(self, dispatcher: NotificationDispatcher) -> None:
        assert dispatcher.build({}).data.id != dispatcher.build({}).data.id

    def test_custom_actions(self, dispatcher: NotificationDispatcher) -> None:
        payload = dispatcher.build({"actions": [{"action": "view", "title": "Open"}]})
        assert [(a.action, a.title) for a in payload.actions] == [("view", "Open")]

    def test_extra_data_preserved(self, dispatcher: NotificationDispatcher) -> None:
        payload = dispatcher.build({"data": {"url": "/a", "spot": "B2"}})
        assert payload.data.url == "/a"
        assert payload.data.model_dump()["spot"] == "B2"

    def test_config_defaults_are_used(self) -> None:
        dispatcher = NotificationDispatcher(NotificationsConfig(title="Reminder", url="/home"))
        payload = dispatcher.build({})
        assert payload.title == "Reminder"
        assert payload.data.url == "/home"


class TestFromPush:
    """Tests for push payload parsing."""

    def test_none_builds_defaults(self, dispatcher: NotificationDispatcher) -> None:
        assert dispatcher.from_push(None).title == "停车提醒"

    def test_json_object(self, dispatcher: NotificationDispatcher) -> None:
        raw = json.dumps({"title": "剩余10分钟", "url": "/extend"}).encode("utf-8")
        payload = dispatcher.from_push(raw)
        assert payload.title == "剩余10分钟"
        assert payload.data.url == "/extend"

    def test_plain_text_becomes_body(self, dispatcher: NotificationDispatcher) -> None:
        payload = dispatcher.from_push(b"Your meter expires soon")
        assert payload.body == "Your meter expires soon"
        assert payload.title == "停车提醒"

    def test_json_scalar_treated_as_text(self, dispatcher: NotificationDispatcher) -> None:
        assert dispatcher.from_push('"hello"').body == "hello"

    def test_undecodable_bytes_give_minimal(self, dispatcher: NotificationDispatcher) -> None:
        payload = dispatcher.from_push(b"\xff\xfe\xfa")
        assert payload.title == "停车提醒"
        assert payload.body == "您的停车时间即将结束"
        assert payload.actions == []

    def test_invalid_fields_give_minimal(self, dispatcher: NotificationDispatcher) -> None:
        payload = dispatcher.from_push(json.dumps({"vibrate": "buzz"}))
        assert payload.title == "停车提醒"
        assert payload.actions == []


class TestResolveClick:
    """Tests for click routing."""

    def data(self, **overrides) -> NotificationData:
        values = {"url": "/parking/42", "id": "n-1", "timestamp": 1}
        values.update(overrides)
        return NotificationData(**values)

    def test_default_click_navigates_to_url(self, dispatcher: NotificationDispatcher) -> None:
        resolution = dispatcher.resolve_click(None, self.data())
        assert resolution.action == "default"
        assert resolution.url == "/parking/42"
        assert resolution.navigates

    def test_view_adds_tracking_params(self, dispatcher: NotificationDispatcher) -> None:
        resolution = dispatcher.resolve_click("view", self.data())
        assert resolution.url == "/parking/42?source=notification&action=view"

    def test_view_keeps_existing_query(self, dispatcher: NotificationDispatcher) -> None:
        resolution = dispatcher.resolve_click("view", self.data(url="/p?lot=3"))
        assert resolution.url == "/p?lot=3&source=notification&action=view"

    def test_extend_routes_to_extend_path(self, dispatcher: NotificationDispatcher) -> None:
        resolution = dispatcher.resolve_click("extend", self.data())
        assert resolution.url == "/extend?id=n-1"

    def test_dismiss_does_not_navigate(self, dispatcher: NotificationDispatcher) -> None:
        resolution = dispatcher.resolve_click("dismiss", self.data())
        assert resolution.url is None
        assert not resolution.navigates

    def test_malformed_url_falls_back_to_default(
        self, dispatcher: NotificationDispatcher
    ) -> None:
        resolution = dispatcher.resolve_click("view", self.data(url="http://[::1"))
        assert resolution.url == "/?source=notification&action=view"

        assert dispatcher.resolve_click(None, self.data(url="http://[::1")).url == "/"

    def test_accepts_plain_mapping(self, dispatcher: NotificationDispatcher) -> None:
        resolution = dispatcher.resolve_click("", {"url": "/x"})
        assert resolution.url == "/x"


class TestShow:
    """Tests for display through the surface."""

    @pytest.mark.asyncio
    async def test_handle_push_shows_notification(
        self, dispatcher: NotificationDispatcher, surface: InMemoryNotificationSurface
    ) -> None:
        payload = await dispatcher.handle_push(b'{"body": "5 minutes left"}')

        assert surface.shown == [payload]
        assert payload.body == "5 minutes left"

    @pytest.mark.asyncio
    async def test_display_error_is_logged_not_raised(self) -> None:
        surface = AsyncMock()
        surface.show.side_effect = RuntimeError("permission denied")
        dispatcher = NotificationDispatcher(NotificationsConfig(), surface)

        assert await dispatcher.show(dispatcher.build({})) is False

    @pytest.mark.asyncio
    async def test_missing_surface(self) -> None:
        dispatcher = NotificationDispatcher(NotificationsConfig())
        assert await dispatcher.show(dispatcher.build({})) is False
