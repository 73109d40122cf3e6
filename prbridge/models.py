"""Typed models for webhook configuration and outbound notifications."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Member:
    github_id: str
    chatwork_id: str


@dataclass(frozen=True)
class Room:
    room_id: str
    members: tuple[Member, ...] = ()


@dataclass(frozen=True)
class BotCredentials:
    chatwork_token: str | None = None
    slack_token: str | None = None


@dataclass(frozen=True)
class WebhookConfig:
    """Tenant configuration selected by the service key of an inbound webhook.

    ``room`` is None when the stored room is missing, empty or malformed.
    """

    service_key: str
    bot: BotCredentials | None = None
    room: Room | None = None

    @property
    def chatwork_token(self) -> str | None:
        return self.bot.chatwork_token if self.bot else None


@dataclass(frozen=True)
class RecipientSet:
    sender: str
    receivers: str = ""


@dataclass(frozen=True)
class OutboundMessage:
    room_id: str
    body: str
