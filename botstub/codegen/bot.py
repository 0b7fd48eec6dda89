"""The index module of a generated bot package."""

import ast
import asyncio
import logging

from botstub.codegen.ast_utils import (
    ImportCollector,
    _assign,
    _attr,
    _class,
    _constant,
    _name,
    _subscript,
    _typed_dict,
)
from botstub.codegen.configuration import ConfigurationModule
from botstub.codegen.definitions import BotSpec
from botstub.codegen.events import EventsModule
from botstub.codegen.module import Module
from botstub.codegen.sections import IndexModule
from botstub.codegen.states import StatesModule

logger = logging.getLogger(__name__)

__all__ = ['BotIndexModule']


class BotIndexModule(IndexModule):
    """Composes the bot sections into ``TBot``.

    ``INTEGRATIONS`` records the integrations installed in the bot with
    their configuration, in declared order.
    """

    def __init__(
        self,
        bot: BotSpec,
        configuration: Module,
        events: Module,
        states: Module,
    ):
        super().__init__(
            'Bot',
            [
                ('configuration', configuration),
                ('events', events),
                ('states', states),
            ],
        )
        self.bot = bot

    @classmethod
    async def create(cls, bot: BotSpec) -> 'BotIndexModule':
        sections = await asyncio.gather(
            ConfigurationModule.create(bot.configuration),
            EventsModule.create(bot.events),
            StatesModule.create(bot.states),
        )
        logger.debug('Composed bot with %d integrations', len(bot.integrations))
        return cls(bot, *sections)

    def reserved_names(self) -> set[str]:
        return super().reserved_names() | {'INTEGRATIONS', 'TBot', 'BotProps'}

    def build_index(
        self, imports: ImportCollector, aliases: dict[Module, str]
    ) -> list[ast.stmt]:
        imports.add_import('typing', 'TypedDict')
        imports.add_import('botstub', 'sdk')

        integrations = {
            name: {
                'enabled': installed.enabled,
                'configuration': dict(installed.configuration),
            }
            for name, installed in self.bot.integrations
        }
        t_bot = _name('TBot')

        return [
            _assign(_name('INTEGRATIONS'), _constant(integrations)),
            _typed_dict(
                'TBot',
                [
                    ('configuration', self.section(aliases, 'configuration')),
                    ('events', self.section(aliases, 'events')),
                    ('states', self.section(aliases, 'states')),
                ],
            ),
            _assign(_name('BotProps'), _subscript(_attr('sdk', 'BotProps'), t_bot)),
            _class(
                self.export_name,
                bases=[_subscript(_attr('sdk', 'Bot'), t_bot)],
                body=[_assign(_name('integrations'), _name('INTEGRATIONS'))],
            ),
        ]
