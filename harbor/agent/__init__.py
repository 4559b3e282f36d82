"""Lifecycle event dispatch."""

from harbor.agent.agent import HarborAgent
from harbor.agent.events import (
    ActivateEvent,
    AgentEvent,
    ExtendableEvent,
    FetchEvent,
    InstallEvent,
    MessageEvent,
    NotificationClickEvent,
    PushEvent,
    SyncEvent,
)
from harbor.agent.factory import create_agent
from harbor.agent.state import AgentState, LifecyclePhase

__all__ = [
    "ActivateEvent",
    "AgentEvent",
    "AgentState",
    "ExtendableEvent",
    "FetchEvent",
    "HarborAgent",
    "InstallEvent",
    "LifecyclePhase",
    "MessageEvent",
    "NotificationClickEvent",
    "PushEvent",
    "SyncEvent",
    "create_agent",
]
