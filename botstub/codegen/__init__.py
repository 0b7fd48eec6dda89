"""Code generation module for botstub.

This module turns integration and bot definitions into typed Python
packages.

Main Components:
    - translate: Converts schema objects into portable SchemaNode trees
    - normalize_integration / normalize_bot: Materialize canonical definitions
    - Module / ModuleGraph: Generation units and their dependency graph
    - IntegrationIndexModule / BotIndexModule: Roots of the generated packages
    - ModuleEmitter: Renders and writes a module graph
    - Codegen: The orchestrator used by the command line

Example:
    >>> from botstub.codegen import generate_integration_files
    >>>
    >>> files = generate_integration_files(
    ...     {'name': 'demo', 'version': '1.0.0'}, format_code=False
    ... )
    >>> [file.path for file in files][-1]
    '__init__.py'
"""

from botstub.codegen.actions import ActionModule, ActionsModule
from botstub.codegen.ast_utils import ImportCollector
from botstub.codegen.bot import BotIndexModule
from botstub.codegen.channels import ChannelModule, ChannelsModule
from botstub.codegen.codegen import (
    Codegen,
    build_bot_module,
    build_integration_module,
    generate_bot_files,
    generate_integration_files,
)
from botstub.codegen.configuration import ConfigurationModule
from botstub.codegen.definitions import (
    ActionSpec,
    BotSpec,
    ChannelSpec,
    ConversationSpec,
    CreationSpec,
    InstalledIntegrationSpec,
    IntegrationSpec,
    MessageSpec,
    SchemaSpec,
    UserSpec,
    normalize_bot,
    normalize_integration,
)
from botstub.codegen.emitter import File, ModuleEmitter
from botstub.codegen.events import EventsModule
from botstub.codegen.graph import ModuleGraph
from botstub.codegen.integration import IntegrationIndexModule
from botstub.codegen.loader import DefinitionLoader
from botstub.codegen.module import Module
from botstub.codegen.schema import SchemaKind, SchemaNode, translate
from botstub.codegen.secrets import SecretsModule
from botstub.codegen.sections import AggregateModule, IndexModule, SchemaModule
from botstub.codegen.states import StatesModule
from botstub.codegen.types import ModelRenderer

__all__ = [
    # Orchestration
    'Codegen',
    'build_integration_module',
    'build_bot_module',
    'generate_integration_files',
    'generate_bot_files',
    'DefinitionLoader',
    # Schema translation
    'SchemaKind',
    'SchemaNode',
    'translate',
    # Canonical definitions
    'ActionSpec',
    'BotSpec',
    'ChannelSpec',
    'ConversationSpec',
    'CreationSpec',
    'InstalledIntegrationSpec',
    'IntegrationSpec',
    'MessageSpec',
    'SchemaSpec',
    'UserSpec',
    'normalize_integration',
    'normalize_bot',
    # Module graph
    'Module',
    'ModuleGraph',
    'SchemaModule',
    'AggregateModule',
    'IndexModule',
    'ModelRenderer',
    'ImportCollector',
    # Sections
    'ConfigurationModule',
    'ActionModule',
    'ActionsModule',
    'ChannelModule',
    'ChannelsModule',
    'EventsModule',
    'StatesModule',
    'SecretsModule',
    'IntegrationIndexModule',
    'BotIndexModule',
    # Emission
    'File',
    'ModuleEmitter',
]
