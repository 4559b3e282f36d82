"""Notification default configuration."""

from pydantic import BaseModel, Field


class NotificationActionConfig(BaseModel):
    """One action button on a notification."""

    action: str = Field(..., description="Action identifier")
    title: str = Field(..., description="Button label")


class NotificationsConfig(BaseModel):
    """Defaults merged under every notification payload."""

    title: str = Field(default="停车提醒", description="Default title")
    body: str = Field(default="您的停车时间即将结束", description="Default body")
    icon: str = Field(default="/icon-192x192.png", description="Default icon path")
    badge: str = Field(default="/icon-72x72.png", description="Default badge path")
    tag: str = Field(default="parking-reminder", description="Default notification tag")
    url: str = Field(default="/", description="Default click-through URL")
    vibrate: list[int] = Field(
        default_factory=lambda: [500, 200, 500],
        description="Vibration pattern in milliseconds",
    )
    actions: list[NotificationActionConfig] = Field(
        default_factory=lambda: [
            NotificationActionConfig(action="view", title="查看详情"),
            NotificationActionConfig(action="extend", title="延长停车"),
            NotificationActionConfig(action="dismiss", title="忽略"),
        ],
        description="Default action buttons",
    )
    extend_path: str = Field(
        default="/extend",
        description="Path the 'extend' action navigates to",
    )
    tracking_source: str = Field(
        default="notification",
        description="Value of the 'source' query parameter added on 'view'",
    )
