from botstub.codegen.definitions import SchemaSpec
from botstub.codegen.module import INIT_FILE
from botstub.codegen.sections import SchemaModule

__all__ = ['ConfigurationModule']


class ConfigurationModule(SchemaModule):
    """The ``Configuration`` model users fill in when installing."""

    def __init__(self, configuration: SchemaSpec):
        super().__init__(INIT_FILE, 'Configuration', configuration)

    @classmethod
    async def create(cls, configuration: SchemaSpec) -> 'ConfigurationModule':
        return cls(configuration)
