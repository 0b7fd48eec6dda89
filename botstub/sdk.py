"""Authoring models and runtime base classes for integrations and bots.

Definitions are written with the pydantic models below. Every optional
section defaults to ``None``; filling in the empty forms is the job of
``botstub.codegen.definitions``. Schemas can be given as pydantic models,
typing annotations, TypedDicts, enums, dataclasses or JSON-Schema dicts.

Example:
    >>> from pydantic import BaseModel
    >>> from botstub.sdk import ActionDefinition, IntegrationDefinition
    >>>
    >>> class PingOutput(BaseModel):
    ...     message: str
    >>>
    >>> definition = IntegrationDefinition(
    ...     name='demo',
    ...     version='1.0.0',
    ...     actions={'ping': ActionDefinition(input={}, output=PingOutput)},
    ... )

The generated package subclasses ``Integration``/``Bot`` with its own
composed definition type as the type parameter.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = [
    'SchemaDefinition',
    'ActionDefinition',
    'TagDefinition',
    'CreationDefinition',
    'UserDefinition',
    'ConversationDefinition',
    'MessageDefinition',
    'ChannelDefinition',
    'IntegrationDefinition',
    'InstalledIntegration',
    'BotDefinition',
    'IntegrationProps',
    'Integration',
    'BotProps',
    'Bot',
]


class _Definition(BaseModel):
    model_config = ConfigDict(
        arbitrary_types_allowed=True, frozen=True, populate_by_name=True
    )


class SchemaDefinition(_Definition):
    """A schema-bearing leaf: a schema plus optional display metadata.

    A bare schema is accepted wherever a ``SchemaDefinition`` is expected.
    """

    schema_: Any = Field(
        default_factory=dict,
        alias='schema',
        description='Pydantic model, annotation or JSON-Schema dict.',
    )
    title: str | None = None
    description: str | None = None

    @model_validator(mode='before')
    @classmethod
    def _wrap_bare_schema(cls, data: Any) -> Any:
        if isinstance(data, SchemaDefinition):
            return data
        if isinstance(data, Mapping) and ('schema' in data or 'schema_' in data):
            return data
        return {'schema': data}


class ActionDefinition(_Definition):
    title: str | None = None
    description: str | None = None
    input: SchemaDefinition
    output: SchemaDefinition


class TagDefinition(_Definition):
    title: str | None = None
    description: str | None = None


class CreationDefinition(_Definition):
    enabled: bool = False
    required_tags: list[str] = Field(default_factory=list)


class UserDefinition(_Definition):
    tags: dict[str, TagDefinition] | list[str] | None = None
    creation: CreationDefinition | None = None


class ConversationDefinition(_Definition):
    tags: dict[str, TagDefinition] | list[str] | None = None
    creation: CreationDefinition | None = None


class MessageDefinition(_Definition):
    tags: dict[str, TagDefinition] | list[str] | None = None


class ChannelDefinition(_Definition):
    title: str | None = None
    description: str | None = None
    messages: dict[str, SchemaDefinition] = Field(default_factory=dict)
    conversation: ConversationDefinition | None = None
    message: MessageDefinition | None = None


class IntegrationDefinition(_Definition):
    """Declarative description of an integration."""

    name: str
    version: str
    title: str | None = None
    description: str | None = None
    user: UserDefinition | None = None
    configuration: SchemaDefinition | None = None
    actions: dict[str, ActionDefinition] | None = None
    channels: dict[str, ChannelDefinition] | None = None
    events: dict[str, SchemaDefinition] | None = None
    states: dict[str, SchemaDefinition] | None = None
    secrets: list[str] | None = None


class InstalledIntegration(_Definition):
    enabled: bool = True
    configuration: dict[str, Any] = Field(default_factory=dict)


class BotDefinition(_Definition):
    """Declarative description of a bot."""

    configuration: SchemaDefinition | None = None
    events: dict[str, SchemaDefinition] | None = None
    states: dict[str, SchemaDefinition] | None = None
    integrations: dict[str, InstalledIntegration] | None = None


# =============================================================================
# Runtime base classes
# =============================================================================

TDefinition = TypeVar('TDefinition')

Handler = Callable[..., Any]


@dataclass
class IntegrationProps(Generic[TDefinition]):
    register: Handler | None = None
    unregister: Handler | None = None
    actions: dict[str, Handler] = field(default_factory=dict)
    channels: dict[str, dict[str, Handler]] = field(default_factory=dict)
    handler: Handler | None = None


class Integration(Generic[TDefinition]):
    """Base class of generated integrations.

    The type parameter is the composed definition type emitted in the
    generated index module; it only serves static type checking.
    """

    def __init__(
        self, props: IntegrationProps[TDefinition] | None = None, **handlers: Any
    ):
        self.props = props if props is not None else IntegrationProps(**handlers)

    def action(self, name: str) -> Handler:
        try:
            return self.props.actions[name]
        except KeyError:
            raise KeyError(f"No handler registered for action '{name}'") from None

    def message_handler(self, channel: str, message: str) -> Handler:
        try:
            return self.props.channels[channel][message]
        except KeyError:
            raise KeyError(
                f"No handler registered for message '{message}' of channel '{channel}'"
            ) from None


@dataclass
class BotProps(Generic[TDefinition]):
    events: dict[str, Handler] = field(default_factory=dict)
    messages: list[Handler] = field(default_factory=list)


class Bot(Generic[TDefinition]):
    """Base class of generated bots."""

    def __init__(self, props: BotProps[TDefinition] | None = None, **handlers: Any):
        self.props = props if props is not None else BotProps(**handlers)

    def event_handler(self, name: str) -> Handler:
        try:
            return self.props.events[name]
        except KeyError:
            raise KeyError(f"No handler registered for event '{name}'") from None
