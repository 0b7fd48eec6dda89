"""Generation of the ``actions`` section.

Layout, relative to the section directory::

    __init__.py           class Actions(TypedDict)
    <action>/__init__.py  class <Action>(TypedDict): input, output
    <action>/input.py     class Input(BaseModel)
    <action>/output.py    class Output(BaseModel)
"""

import asyncio

from botstub.codegen.definitions import ActionSpec
from botstub.codegen.module import INIT_FILE
from botstub.codegen.sections import AggregateModule, SchemaModule
from botstub.codegen.utils import class_name, module_name

__all__ = ['ActionModule', 'ActionsModule']


class ActionModule(AggregateModule):
    def __init__(self, name: str, action: ActionSpec):
        super().__init__(
            INIT_FILE,
            class_name(name),
            docstring=action.description or action.title,
        )
        self.name = name
        self.add_entry('input', SchemaModule('input.py', 'Input', action.input))
        self.add_entry('output', SchemaModule('output.py', 'Output', action.output))

    @classmethod
    async def create(cls, name: str, action: ActionSpec) -> 'ActionModule':
        module = cls(name, action)
        module.unshift(module_name(name))
        return module


class ActionsModule(AggregateModule):
    def __init__(self):
        super().__init__(INIT_FILE, 'Actions')

    @classmethod
    async def create(
        cls, actions: tuple[tuple[str, ActionSpec], ...]
    ) -> 'ActionsModule':
        module = cls()
        children = await asyncio.gather(
            *(ActionModule.create(name, action) for name, action in actions)
        )
        for (name, _), child in zip(actions, children):
            module.add_entry(name, child)
        return module
