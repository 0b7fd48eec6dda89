from botstub.codegen.definitions import SchemaSpec
from botstub.codegen.module import INIT_FILE
from botstub.codegen.sections import AggregateModule, SchemaModule
from botstub.codegen.utils import class_name, module_name

__all__ = ['EventsModule']


class EventsModule(AggregateModule):
    """``Events`` TypedDict over one payload model per event."""

    def __init__(self):
        super().__init__(INIT_FILE, 'Events')

    @classmethod
    async def create(
        cls, events: tuple[tuple[str, SchemaSpec], ...]
    ) -> 'EventsModule':
        module = cls()
        for name, event in events:
            module.add_entry(
                name, SchemaModule(f'{module_name(name)}.py', class_name(name), event)
            )
        return module
