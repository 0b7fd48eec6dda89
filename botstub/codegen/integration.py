"""The index module of a generated integration package.

The index composes the section exports into ``TIntegration`` and declares
the typed wrappers a developer builds the integration with::

    from .generated import Integration

    integration = Integration(actions={'ping': ping})

Its content only depends on the section export names and on the name,
version and user of the definition.
"""

import ast
import asyncio
import logging

from botstub.codegen.actions import ActionsModule
from botstub.codegen.ast_utils import (
    ImportCollector,
    _assign,
    _attr,
    _class,
    _constant,
    _literal_expr,
    _name,
    _subscript,
    _typed_dict,
)
from botstub.codegen.channels import ChannelsModule
from botstub.codegen.configuration import ConfigurationModule
from botstub.codegen.definitions import IntegrationSpec
from botstub.codegen.events import EventsModule
from botstub.codegen.module import Module
from botstub.codegen.secrets import SecretsModule
from botstub.codegen.sections import IndexModule
from botstub.codegen.states import StatesModule

logger = logging.getLogger(__name__)

__all__ = ['IntegrationIndexModule']

_DECLARED_NAMES = frozenset(
    {
        'NAME',
        'VERSION',
        'USER',
        'UserTags',
        'User',
        'TIntegration',
        'IntegrationProps',
    }
)


class IntegrationIndexModule(IndexModule):
    def __init__(
        self,
        integration: IntegrationSpec,
        configuration: Module,
        actions: Module,
        channels: Module,
        events: Module,
        states: Module,
        secrets: Module,
    ):
        super().__init__(
            'Integration',
            [
                ('configuration', configuration),
                ('actions', actions),
                ('channels', channels),
                ('events', events),
                ('states', states),
                ('secrets', secrets),
            ],
        )
        self.integration = integration

    @classmethod
    async def create(cls, integration: IntegrationSpec) -> 'IntegrationIndexModule':
        """Create every section module concurrently and compose them."""
        sections = await asyncio.gather(
            ConfigurationModule.create(integration.configuration),
            ActionsModule.create(integration.actions),
            ChannelsModule.create(integration.channels),
            EventsModule.create(integration.events),
            StatesModule.create(integration.states),
            SecretsModule.create(integration.secrets),
        )
        logger.debug(
            'Composed integration %s %s', integration.name, integration.version
        )
        return cls(integration, *sections)

    def reserved_names(self) -> set[str]:
        return super().reserved_names() | _DECLARED_NAMES

    def build_index(
        self, imports: ImportCollector, aliases: dict[Module, str]
    ) -> list[ast.stmt]:
        imports.add_import('typing', 'Literal')
        imports.add_import('typing', 'TypedDict')
        imports.add_import('botstub', 'sdk')

        integration = self.integration
        user = integration.user
        t_integration = _name('TIntegration')

        return [
            _assign(_name('NAME'), ast.Constant(value=integration.name)),
            _assign(_name('VERSION'), ast.Constant(value=integration.version)),
            _assign(
                _name('USER'),
                _constant(
                    {
                        'tags': list(user.tags),
                        'creation': {
                            'enabled': user.creation.enabled,
                            'required_tags': list(user.creation.required_tags),
                        },
                    }
                ),
            ),
            _typed_dict(
                'UserTags', [(tag, _name('str')) for tag in user.tags], total=False
            ),
            _typed_dict('User', [('tags', _name('UserTags'))]),
            _typed_dict(
                'TIntegration',
                [
                    ('name', _literal_expr([integration.name])),
                    ('version', _literal_expr([integration.version])),
                    ('configuration', self.section(aliases, 'configuration')),
                    ('actions', self.section(aliases, 'actions')),
                    ('channels', self.section(aliases, 'channels')),
                    ('events', self.section(aliases, 'events')),
                    ('states', self.section(aliases, 'states')),
                    ('user', _name('User')),
                ],
            ),
            _assign(
                _name('IntegrationProps'),
                _subscript(_attr('sdk', 'IntegrationProps'), t_integration),
            ),
            _class(
                self.export_name,
                bases=[_subscript(_attr('sdk', 'Integration'), t_integration)],
                body=[
                    _assign(_name('name'), _name('NAME')),
                    _assign(_name('version'), _name('VERSION')),
                ],
                docstring=f'The {integration.name} integration.',
            ),
        ]
