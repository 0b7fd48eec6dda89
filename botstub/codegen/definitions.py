"""Canonical definition shapes and the normalizers that produce them.

``normalize_integration`` and ``normalize_bot`` accept the authoring models
from ``botstub.sdk``, plain mappings with the same keys, or already
canonical specs, and return frozen dataclasses in which:

- every optional section is present (empty tuple, empty object schema or
  disabled creation rule),
- every schema has been translated to a ``SchemaNode``,
- every mapping section is an ordered tuple of ``(name, value)`` pairs in
  declared order.

Tags and creation rules follow one default everywhere: absent tags are
``()`` and an absent creation rule is ``CreationSpec()``, whether they belong
to the user, a channel conversation or a channel message.

Normalizing a canonical spec returns an equal spec.
"""

import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any

from botstub.codegen.schema import SchemaKind, SchemaNode, _plain, translate

__all__ = [
    'CreationSpec',
    'UserSpec',
    'SchemaSpec',
    'ActionSpec',
    'ConversationSpec',
    'MessageSpec',
    'ChannelSpec',
    'IntegrationSpec',
    'InstalledIntegrationSpec',
    'BotSpec',
    'normalize_integration',
    'normalize_bot',
]

EMPTY_OBJECT = SchemaNode(SchemaKind.OBJECT)


@dataclasses.dataclass(frozen=True)
class CreationSpec:
    enabled: bool = False
    required_tags: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class UserSpec:
    tags: tuple[str, ...] = ()
    creation: CreationSpec = dataclasses.field(default_factory=CreationSpec)


@dataclasses.dataclass(frozen=True)
class SchemaSpec:
    schema: SchemaNode = EMPTY_OBJECT
    title: str | None = None
    description: str | None = None


@dataclasses.dataclass(frozen=True)
class ActionSpec:
    input: SchemaSpec = dataclasses.field(default_factory=SchemaSpec)
    output: SchemaSpec = dataclasses.field(default_factory=SchemaSpec)
    title: str | None = None
    description: str | None = None


@dataclasses.dataclass(frozen=True)
class ConversationSpec:
    tags: tuple[str, ...] = ()
    creation: CreationSpec = dataclasses.field(default_factory=CreationSpec)


@dataclasses.dataclass(frozen=True)
class MessageSpec:
    tags: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class ChannelSpec:
    messages: tuple[tuple[str, SchemaSpec], ...] = ()
    conversation: ConversationSpec = dataclasses.field(default_factory=ConversationSpec)
    message: MessageSpec = dataclasses.field(default_factory=MessageSpec)
    title: str | None = None
    description: str | None = None


@dataclasses.dataclass(frozen=True)
class IntegrationSpec:
    """Canonical integration definition."""

    name: str
    version: str
    user: UserSpec = dataclasses.field(default_factory=UserSpec)
    configuration: SchemaSpec = dataclasses.field(default_factory=SchemaSpec)
    actions: tuple[tuple[str, ActionSpec], ...] = ()
    channels: tuple[tuple[str, ChannelSpec], ...] = ()
    events: tuple[tuple[str, SchemaSpec], ...] = ()
    states: tuple[tuple[str, SchemaSpec], ...] = ()
    secrets: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class InstalledIntegrationSpec:
    enabled: bool = True
    configuration: Mapping[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class BotSpec:
    """Canonical bot definition."""

    configuration: SchemaSpec = dataclasses.field(default_factory=SchemaSpec)
    events: tuple[tuple[str, SchemaSpec], ...] = ()
    states: tuple[tuple[str, SchemaSpec], ...] = ()
    integrations: tuple[tuple[str, InstalledIntegrationSpec], ...] = ()


def _get(raw: Any, key: str, default: Any = None) -> Any:
    if raw is None:
        return default
    value = raw.get(key) if isinstance(raw, Mapping) else getattr(raw, key, None)
    return default if value is None else value


def _entries(raw: Mapping | Iterable[tuple[str, Any]] | None) -> list[tuple[str, Any]]:
    if not raw:
        return []
    items = raw.items() if isinstance(raw, Mapping) else raw
    return [(str(name), value) for name, value in items]


def _names(raw: Mapping | Iterable[str] | None) -> tuple[str, ...]:
    if not raw:
        return ()
    names = raw.keys() if isinstance(raw, Mapping) else raw
    return tuple(dict.fromkeys(str(name) for name in names))


def _creation(raw: Any) -> CreationSpec:
    return CreationSpec(
        enabled=bool(_get(raw, 'enabled', False)),
        required_tags=_names(_get(raw, 'required_tags')),
    )


def _schema(raw: Any) -> SchemaSpec:
    if raw is None:
        return SchemaSpec()

    if isinstance(raw, SchemaSpec):
        schema = raw.schema
    elif isinstance(raw, Mapping) and 'schema' in raw:
        schema = raw['schema']
    elif not isinstance(raw, type) and hasattr(raw, 'schema_'):
        schema = raw.schema_
    else:
        return SchemaSpec(schema=translate(raw))

    return SchemaSpec(
        schema=translate(schema),
        title=_get(raw, 'title'),
        description=_get(raw, 'description'),
    )


def _schemas(raw: Any) -> tuple[tuple[str, SchemaSpec], ...]:
    return tuple((name, _schema(value)) for name, value in _entries(raw))


def _action(raw: Any) -> ActionSpec:
    return ActionSpec(
        input=_schema(_get(raw, 'input')),
        output=_schema(_get(raw, 'output')),
        title=_get(raw, 'title'),
        description=_get(raw, 'description'),
    )


def _channel(raw: Any) -> ChannelSpec:
    conversation = _get(raw, 'conversation')
    message = _get(raw, 'message')
    return ChannelSpec(
        messages=_schemas(_get(raw, 'messages')),
        conversation=ConversationSpec(
            tags=_names(_get(conversation, 'tags')),
            creation=_creation(_get(conversation, 'creation')),
        ),
        message=MessageSpec(tags=_names(_get(message, 'tags'))),
        title=_get(raw, 'title'),
        description=_get(raw, 'description'),
    )


def normalize_integration(raw: Any) -> IntegrationSpec:
    """Materialize every optional section of an integration definition.

    Args:
        raw: An ``IntegrationDefinition``, a mapping with the same keys or an
            ``IntegrationSpec``.

    Returns:
        The canonical ``IntegrationSpec``.
    """
    user = _get(raw, 'user')
    return IntegrationSpec(
        name=str(_get(raw, 'name', '')),
        version=str(_get(raw, 'version', '')),
        user=UserSpec(
            tags=_names(_get(user, 'tags')),
            creation=_creation(_get(user, 'creation')),
        ),
        configuration=_schema(_get(raw, 'configuration')),
        actions=tuple(
            (name, _action(value)) for name, value in _entries(_get(raw, 'actions'))
        ),
        channels=tuple(
            (name, _channel(value)) for name, value in _entries(_get(raw, 'channels'))
        ),
        events=_schemas(_get(raw, 'events')),
        states=_schemas(_get(raw, 'states')),
        secrets=_names(_get(raw, 'secrets')),
    )


def normalize_bot(raw: Any) -> BotSpec:
    """Materialize every optional section of a bot definition."""
    return BotSpec(
        configuration=_schema(_get(raw, 'configuration')),
        events=_schemas(_get(raw, 'events')),
        states=_schemas(_get(raw, 'states')),
        integrations=tuple(
            (
                name,
                InstalledIntegrationSpec(
                    enabled=bool(_get(value, 'enabled', True)),
                    configuration=_plain(dict(_get(value, 'configuration', {}))),
                ),
            )
            for name, value in _entries(_get(raw, 'integrations'))
        ),
    )
