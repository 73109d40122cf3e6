"""Webhook pipeline: config lookup → classify → recipients → compose → dispatch."""

from __future__ import annotations

from typing import Any, Protocol

from prbridge.core.classifier import AppEvent, classify
from prbridge.core.composer import MessageComposer
from prbridge.core.dispatcher import Dispatcher
from prbridge.core.errors import (
    REQUEST_BODY_REQUIRED,
    ROOM_UNDEFINED,
    WEBHOOK_NOT_FOUND,
    ConfigurationError,
    ValidationError,
)
from prbridge.core.recipients import resolve_recipients
from prbridge.models import OutboundMessage, Room, WebhookConfig
from prbridge.utils.logging import get_logger
from prbridge.webhooks.payloads import PullRequestEvent, ReviewCommentEvent

log = get_logger(__name__)


class WebhookLookup(Protocol):
    async def find_by_key(self, service_key: str) -> WebhookConfig | None: ...


class WebhookService:
    """Turns one GitHub event into at most one Chatwork message."""

    def __init__(
        self,
        store: WebhookLookup,
        dispatcher: Dispatcher,
        composer: MessageComposer | None = None,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._composer = composer or MessageComposer()

    async def github(
        self,
        service_key: str,
        event: PullRequestEvent | ReviewCommentEvent | None,
    ) -> dict[str, Any] | None:
        """Notify the room configured for ``service_key`` about ``event``.

        Returns the Chatwork response, or None when the event needs no
        notification (unrecognized event, or nobody to tag).
        """
        if not event:
            raise ValidationError(REQUEST_BODY_REQUIRED)

        webhook = await self.find_by_key(service_key)
        room = self.get_room(webhook)

        app_event = classify(event)
        if app_event is AppEvent.UNRECOGNIZED:
            log.debug("event_ignored", github_event=event.event, action=event.action)
            return None

        recipients = resolve_recipients(app_event, event, room.members)
        if not recipients.receivers:
            log.info(
                "notification_suppressed",
                app_event=app_event.value,
                sender=recipients.sender,
            )
            return None

        message = OutboundMessage(
            room_id=room.room_id,
            body=self._composer.compose(app_event, event, room.members, recipients.receivers),
        )
        log.debug("notification_composed", app_event=app_event.value, body=message.body)

        return await self._dispatcher.send(message.room_id, message.body, webhook.chatwork_token)

    async def find_by_key(self, service_key: str) -> WebhookConfig:
        webhook = await self._store.find_by_key(service_key)
        if webhook is None:
            raise ConfigurationError(WEBHOOK_NOT_FOUND)
        return webhook

    @staticmethod
    def get_room(webhook: WebhookConfig) -> Room:
        if webhook.room is None:
            raise ConfigurationError(ROOM_UNDEFINED)
        return webhook.room
