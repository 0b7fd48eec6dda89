from botstub.codegen.definitions import SchemaSpec
from botstub.codegen.module import INIT_FILE
from botstub.codegen.sections import AggregateModule, SchemaModule
from botstub.codegen.utils import class_name, module_name

__all__ = ['StatesModule']


class StatesModule(AggregateModule):
    def __init__(self):
        super().__init__(INIT_FILE, 'States')

    @classmethod
    async def create(
        cls, states: tuple[tuple[str, SchemaSpec], ...]
    ) -> 'StatesModule':
        module = cls()
        for name, state in states:
            module.add_entry(
                name, SchemaModule(f'{module_name(name)}.py', class_name(name), state)
            )
        return module
