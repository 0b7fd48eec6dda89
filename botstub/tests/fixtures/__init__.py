"""Test fixtures for botstub tests.

This module provides sample definitions, in their raw mapping form and as
``botstub.sdk`` models, and the schema classes they refer to.
"""

import dataclasses
import enum
from typing import Literal, Required, TypedDict

from pydantic import BaseModel, Field

from botstub.codegen.ast_utils import _assign, _constant, _name, _tuple
from botstub.codegen.module import Module
from botstub.sdk import (
    ActionDefinition,
    BotDefinition,
    ChannelDefinition,
    ConversationDefinition,
    CreationDefinition,
    InstalledIntegration,
    IntegrationDefinition,
    MessageDefinition,
    SchemaDefinition,
    TagDefinition,
    UserDefinition,
)


class Address(BaseModel):
    """A postal address."""

    street: str
    zip_code: str | None = None


class Customer(BaseModel):
    user_id: int = Field(alias='userId', description='Identifier of the customer.')
    name: str
    address: Address
    tags: list[str] = []
    status: Literal['active', 'blocked'] = 'active'


class TreeNode(BaseModel):
    label: str
    children: list['TreeNode'] = []


class Color(str, enum.Enum):
    RED = 'red'
    GREEN = 'green'


class Payload(TypedDict, total=False):
    id: Required[int]
    note: str


@dataclasses.dataclass
class Point:
    x: int
    y: int = 0


class PingOutput(BaseModel):
    message: str


class CreateTaskInput(BaseModel):
    title: str
    due: str | None = None


class CreateTaskOutput(BaseModel):
    id: str


class Settings(BaseModel):
    """Settings of the demo integration."""

    api_url: str
    timeout: float = 10.0


# The smallest valid integration
MINIMAL_INTEGRATION = {'name': 'demo', 'version': '1.0.0'}

# Scenario: one ping action with an empty input and a message output
PING_INTEGRATION = {
    'name': 'demo',
    'version': '1.0.0',
    'actions': {
        'ping': {
            'input': {'schema': {}},
            'output': {'schema': {'message': str}},
        }
    },
}

# Scenario: two channels declaring a message with the same name
TWO_CHANNELS_INTEGRATION = {
    'name': 'chat',
    'version': '0.1.0',
    'channels': {
        'dm': {'messages': {'text': {'schema': {'text': str}}}},
        'group': {'messages': {'text': {'schema': {'text': str, 'mention': str}}}},
    },
}

FULL_INTEGRATION = IntegrationDefinition(
    name='todo',
    version='2.1.0',
    title='Todo',
    description='Manage tasks.',
    user=UserDefinition(
        tags={'email': TagDefinition(title='Email')},
        creation=CreationDefinition(enabled=True, required_tags=['email']),
    ),
    configuration=SchemaDefinition(schema=Settings),
    actions={
        'createTask': ActionDefinition(
            title='Create task',
            input=CreateTaskInput,
            output=CreateTaskOutput,
        ),
        'ping': ActionDefinition(input={}, output=PingOutput),
    },
    channels={
        'comments': ChannelDefinition(
            messages={'text': {'text': str}, 'image': {'image_url': str}},
            conversation=ConversationDefinition(tags=['taskId']),
            message=MessageDefinition(tags=['commentId']),
        ),
    },
    events={'taskCreated': {'task_id': str}},
    states={'lastSync': {'timestamp': str}},
    secrets=['apiKey'],
)

FULL_BOT = BotDefinition(
    configuration={'greeting': str},
    events={'reminder': {'task_id': str}},
    states={'conversation': {'step': int}},
    integrations={
        'todo': InstalledIntegration(configuration={'api_url': 'https://todo.test'}),
        'chat': InstalledIntegration(enabled=False),
    },
)


class Leaf(Module):
    """Module exporting a single constant."""

    def build(self, imports, aliases):
        return [_assign(_name(self.export_name), _constant(self.path))]


class Consumer(Module):
    """Module exporting a tuple of everything it imports."""

    def build(self, imports, aliases):
        return [
            _assign(
                _name(self.export_name),
                _tuple([_name(alias) for alias in aliases.values()]),
            )
        ]


DEFINITION_FILE = '''
from pydantic import BaseModel

from botstub.sdk import ActionDefinition, IntegrationDefinition


class PingOutput(BaseModel):
    message: str


definition = IntegrationDefinition(
    name='demo',
    version='1.0.0',
    actions={'ping': ActionDefinition(input={}, output=PingOutput)},
)
'''

BOT_DEFINITION_FILE = '''
from botstub.sdk import BotDefinition, InstalledIntegration

definition = BotDefinition(
    events={'reminder': {'task_id': str}},
    integrations={'demo': InstalledIntegration()},
)
'''
