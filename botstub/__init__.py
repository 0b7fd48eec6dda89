"""botstub - Generate typed Python stubs for integration and bot definitions.

botstub reads a declarative definition (actions, channels, events, states,
configuration, each described by a schema) and generates a Python package
with a pydantic model per schema and TypedDicts composing them.

Quick Start:
    >>> from botstub import Codegen, ProjectConfig
    >>>
    >>> config = ProjectConfig(
    ...     entry_point='integration.definition.py',
    ...     out_dir='generated',
    ... )
    >>> Codegen(config).generate()

CLI Usage:
    $ botstub generate
    $ botstub generate --entry-point bot.definition.py --out-dir generated
"""

from importlib.metadata import PackageNotFoundError, version

from botstub import sdk
from botstub.codegen.codegen import (
    Codegen,
    generate_bot_files,
    generate_integration_files,
)
from botstub.codegen.definitions import normalize_bot, normalize_integration
from botstub.codegen.schema import SchemaNode, translate
from botstub.config import ProjectConfig, ProjectPaths, get_config
from botstub.exceptions import (
    BotstubError,
    ConfigurationError,
    GraphError,
    LoadError,
    WriteError,
)

__all__ = [
    # Main classes
    'Codegen',
    'generate_integration_files',
    'generate_bot_files',
    'normalize_integration',
    'normalize_bot',
    'translate',
    'SchemaNode',
    'sdk',
    # Configuration
    'ProjectConfig',
    'ProjectPaths',
    'get_config',
    # Exceptions
    'BotstubError',
    'LoadError',
    'GraphError',
    'WriteError',
    'ConfigurationError',
]

try:
    __version__ = version('botstub')
except PackageNotFoundError:
    __version__ = 'unknown'
