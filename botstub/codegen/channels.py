"""Generation of the ``channels`` section.

Layout, relative to the section directory::

    __init__.py                       class Channels(TypedDict)
    <channel>/__init__.py             <Channel>Messages, <Channel>ConversationTags,
                                      <Channel>MessageTags and <Channel>
    <channel>/messages/<message>.py   class <Message>(BaseModel)

Message files of different channels live in different packages, so two
channels may declare a message with the same name.
"""

import ast
import asyncio

from botstub.codegen.ast_utils import ImportCollector, _name, _typed_dict
from botstub.codegen.definitions import ChannelSpec
from botstub.codegen.module import INIT_FILE, Module
from botstub.codegen.sections import AggregateModule, SchemaModule
from botstub.codegen.utils import class_name, module_name

__all__ = ['ChannelModule', 'ChannelsModule']


class ChannelModule(Module):
    """The composed type of one channel and its message models."""

    def __init__(self, name: str, channel: ChannelSpec):
        super().__init__(INIT_FILE, class_name(name))
        self.name = name
        self.channel = channel
        self.messages: list[tuple[str, Module]] = []

    @classmethod
    async def create(cls, name: str, channel: ChannelSpec) -> 'ChannelModule':
        module = cls(name, channel)
        for message_name, message in channel.messages:
            message_module = SchemaModule(
                f'messages/{module_name(message_name)}.py',
                class_name(message_name),
                message,
            )
            module.push_dep(message_module)
            module.messages.append((message_name, message_module))
        module.unshift(module_name(name))
        return module

    @property
    def messages_name(self) -> str:
        return f'{self.export_name}Messages'

    @property
    def conversation_tags_name(self) -> str:
        return f'{self.export_name}ConversationTags'

    @property
    def message_tags_name(self) -> str:
        return f'{self.export_name}MessageTags'

    def reserved_names(self) -> set[str]:
        return super().reserved_names() | {
            self.messages_name,
            self.conversation_tags_name,
            self.message_tags_name,
        }

    def build(
        self, imports: ImportCollector, aliases: dict[Module, str]
    ) -> list[ast.stmt]:
        imports.add_import('typing', 'TypedDict')
        return [
            _typed_dict(
                self.messages_name,
                [(name, _name(aliases[module])) for name, module in self.messages],
            ),
            _typed_dict(
                self.conversation_tags_name,
                [(tag, _name('str')) for tag in self.channel.conversation.tags],
                total=False,
            ),
            _typed_dict(
                self.message_tags_name,
                [(tag, _name('str')) for tag in self.channel.message.tags],
                total=False,
            ),
            _typed_dict(
                self.export_name,
                [
                    ('messages', _name(self.messages_name)),
                    ('conversation_tags', _name(self.conversation_tags_name)),
                    ('message_tags', _name(self.message_tags_name)),
                ],
                docstring=self.channel.description or self.channel.title,
            ),
        ]


class ChannelsModule(AggregateModule):
    def __init__(self):
        super().__init__(INIT_FILE, 'Channels')

    @classmethod
    async def create(
        cls, channels: tuple[tuple[str, ChannelSpec], ...]
    ) -> 'ChannelsModule':
        module = cls()
        children = await asyncio.gather(
            *(ChannelModule.create(name, channel) for name, channel in channels)
        )
        for (name, _), child in zip(channels, children):
            module.add_entry(name, child)
        return module
