"""Chatwork message templates and placeholder rendering.

Templates use ``{placeholder}`` fields. Rendering treats a None value, or a
placeholder with no field at all, as the empty string.
"""

from __future__ import annotations

from collections.abc import Mapping

from prbridge.core.classifier import AppEvent

_PULL_REQUEST_TEMPLATE = (
    "{receivers}\n"
    "[info][title][{repository_name}] {heading} by [piconname:{pull_request_owner}][/title]"
    "{pull_request_title}\n"
    "{pull_request_url}\n"
    "[hr]{pull_request_body}\n"
    "[hr]Changed files: {pull_request_edited_files} "
    "(+{pull_request_added_lines} / -{pull_request_deleted_lines})[/info]"
)

_COMMENT_TEMPLATE = (
    "{receivers}\n"
    "[info][title][{repository_name}] [piconname:{commentator}] {heading} "
    "on {pull_request_title}[/title]"
    "{comment_body}\n"
    "[hr]{comment_url}[/info]"
)

DEFAULT_TEMPLATES: dict[AppEvent, str] = {
    AppEvent.PULL_REQUEST_OPENED: _PULL_REQUEST_TEMPLATE.replace("{heading}", "Pull request opened"),
    AppEvent.PULL_REQUEST_MERGED: _PULL_REQUEST_TEMPLATE.replace("{heading}", "Pull request merged"),
    AppEvent.PULL_REQUEST_CLOSED: _PULL_REQUEST_TEMPLATE.replace("{heading}", "Pull request closed"),
    AppEvent.PULL_REQUEST_REOPENED: _PULL_REQUEST_TEMPLATE.replace("{heading}", "Pull request reopened"),
    AppEvent.COMMENT_CREATED: _COMMENT_TEMPLATE.replace("{heading}", "commented"),
    AppEvent.COMMENT_EDITED: _COMMENT_TEMPLATE.replace("{heading}", "edited a comment"),
}


class _Fields(dict):
    def __missing__(self, key: str) -> str:
        return ""


def render(template: str, fields: Mapping[str, str | None]) -> str:
    """Substitute ``fields`` into ``template``."""
    values = _Fields({k: "" if v is None else v for k, v in fields.items()})
    return template.format_map(values)


def load_templates(overrides: Mapping[str, str] | None = None) -> dict[AppEvent, str]:
    """Merge configured overrides, keyed by AppEvent value, over the defaults."""
    templates = dict(DEFAULT_TEMPLATES)
    for key, template in (overrides or {}).items():
        try:
            app_event = AppEvent(key)
        except ValueError:
            raise ValueError(f"Unknown template key: {key}") from None
        if app_event is AppEvent.UNRECOGNIZED:
            raise ValueError("Unrecognized events have no template")
        try:
            render(template, {})
        except (ValueError, KeyError, IndexError, AttributeError, TypeError) as e:
            raise ValueError(f"Invalid template for {key}: {e}") from e
        templates[app_event] = template
    return templates
