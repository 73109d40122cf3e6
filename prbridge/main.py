"""prbridge entry point: runs the webhook server and manages webhook configs."""

from __future__ import annotations

import asyncio
import json
import signal
import sys
from typing import Any, Awaitable, Callable

import click

from prbridge import __version__
from prbridge.chatwork.client import ChatworkClient
from prbridge.config import Settings, load_settings
from prbridge.core.composer import MessageComposer
from prbridge.core.dispatcher import Dispatcher
from prbridge.core.service import WebhookService
from prbridge.core.templates import load_templates
from prbridge.models import BotCredentials, Member, Room
from prbridge.store import WebhookStore, bot_to_dict, room_to_dict
from prbridge.utils.logging import get_logger, setup_logging
from prbridge.webhooks.server import WebhookServer

log = get_logger(__name__)


class PRBridge:
    """Main application: owns the store and the webhook server."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.store = WebhookStore(settings.get_database_path())

        chatwork = settings.chatwork

        def client_factory(token: str | None) -> ChatworkClient:
            return ChatworkClient(token, api_url=chatwork.api_url, timeout=chatwork.timeout)

        self.service = WebhookService(
            store=self.store,
            dispatcher=Dispatcher(client_factory),
            composer=MessageComposer(load_templates(settings.templates)),
        )
        self.server = WebhookServer(settings.server, self.service)

    async def start(self) -> None:
        log.info("prbridge_starting", version=__version__)
        await self.store.start()
        await self.server.start()
        log.info("prbridge_ready")

    async def stop(self) -> None:
        log.info("prbridge_stopping")
        await self.server.stop()
        await self.store.stop()
        log.info("prbridge_stopped")


async def run(settings: Settings) -> None:
    app = PRBridge(settings)

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        log.info("shutdown_signal")
        stop_event.set()

    if sys.platform != "win32":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _signal_handler)

    await app.start()

    try:
        if sys.platform == "win32":
            while not stop_event.is_set():
                await asyncio.sleep(1)
        else:
            await stop_event.wait()
    except KeyboardInterrupt:
        pass
    finally:
        await app.stop()


def _with_store(settings: Settings, action: Callable[[WebhookStore], Awaitable[Any]]) -> Any:
    async def _run() -> Any:
        store = WebhookStore(settings.get_database_path())
        await store.start()
        try:
            return await action(store)
        finally:
            await store.stop()

    return asyncio.run(_run())


def _parse_member(value: str) -> Member:
    github_id, sep, chatwork_id = value.partition(":")
    if not sep or not github_id or not chatwork_id:
        raise click.BadParameter(f"expected GITHUB_ID:CHATWORK_ID, got {value!r}")
    return Member(github_id=github_id, chatwork_id=chatwork_id)


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.version_option(__version__, prog_name="prbridge")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str | None) -> None:
    """GitHub pull request notifications for Chatwork."""
    settings = load_settings(config_path)
    if log_level:
        settings.log_level = log_level
    setup_logging(level=settings.log_level, json_output=settings.log_json)
    ctx.obj = settings


@cli.command()
@click.option("--port", type=int, default=None, help="Port to listen on")
@click.pass_obj
def serve(settings: Settings, port: int | None) -> None:
    """Run the webhook server."""
    if port is not None:
        settings.server.port = port
    asyncio.run(run(settings))


@cli.group()
def webhook() -> None:
    """Manage webhook configurations."""


@webhook.command("add")
@click.argument("service_key")
@click.option("--room-id", required=True, help="Chatwork room id")
@click.option("--token", default=None, help="Chatwork API token of the bot account")
@click.option(
    "--member", "members", multiple=True,
    help="Room member as GITHUB_ID:CHATWORK_ID (repeatable, order is kept)",
)
@click.pass_obj
def webhook_add(
    settings: Settings,
    service_key: str,
    room_id: str,
    token: str | None,
    members: tuple[str, ...],
) -> None:
    """Create or replace the webhook for SERVICE_KEY."""
    room = Room(room_id=room_id, members=tuple(_parse_member(m) for m in members))
    bot = BotCredentials(chatwork_token=token)
    _with_store(settings, lambda store: store.upsert(service_key, bot, room))
    click.echo(f"Saved webhook {service_key} ({len(room.members)} members)")


@webhook.command("remove")
@click.argument("service_key")
@click.pass_obj
def webhook_remove(settings: Settings, service_key: str) -> None:
    """Delete the webhook for SERVICE_KEY."""
    deleted = _with_store(settings, lambda store: store.delete(service_key))
    if not deleted:
        raise click.ClickException(f"Webhook not found: {service_key}")
    click.echo(f"Removed webhook {service_key}")


@webhook.command("list")
@click.pass_obj
def webhook_list(settings: Settings) -> None:
    """List configured service keys."""
    keys = _with_store(settings, lambda store: store.list_keys())
    if not keys:
        click.echo("No webhooks configured.")
        return
    for key in keys:
        click.echo(key)


@webhook.command("show")
@click.argument("service_key")
@click.pass_obj
def webhook_show(settings: Settings, service_key: str) -> None:
    """Print the configuration for SERVICE_KEY as JSON (token hidden)."""
    config = _with_store(settings, lambda store: store.find_by_key(service_key))
    if config is None:
        raise click.ClickException(f"Webhook not found: {service_key}")
    bot = bot_to_dict(config.bot) if config.bot else None
    if bot:
        bot = {k: ("***" if v else v) for k, v in bot.items()}
    data = {
        "service_key": config.service_key,
        "bot": bot,
        "room": room_to_dict(config.room) if config.room else None,
    }
    click.echo(json.dumps(data, indent=2))


if __name__ == "__main__":
    cli()
