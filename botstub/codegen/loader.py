"""Loading of user-authored definition files.

A definition file is a Python module exposing its definition as a module
level ``definition`` attribute (or ``default``)::

    from botstub.sdk import IntegrationDefinition

    definition = IntegrationDefinition(name='demo', version='1.0.0')
"""

import importlib.util
import logging
import sys
from pathlib import Path
from typing import Any

from botstub.exceptions import LoadError

logger = logging.getLogger(__name__)

__all__ = ['DefinitionLoader']

DEFINITION_ATTRIBUTES = ('definition', 'default')


class DefinitionLoader:
    """Imports a definition file and extracts its definition object."""

    def load(self, entry_point: str | Path) -> Any:
        """Load the definition exposed by ``entry_point``.

        The directory of the file is on ``sys.path`` while it is executed, so
        it can import its sibling modules.

        Raises:
            LoadError: If the file is missing, fails while being executed or
                exposes no definition.
        """
        path = Path(entry_point).resolve()
        if not path.is_file():
            raise LoadError(str(entry_point), 'file not found')

        module_name = f'_botstub_definition_{path.stem.replace(".", "_")}'
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise LoadError(str(entry_point), 'not a Python module')

        module = importlib.util.module_from_spec(spec)
        directory = str(path.parent)
        sys.path.insert(0, directory)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise LoadError(str(entry_point), e) from e
        finally:
            sys.modules.pop(module_name, None)
            if directory in sys.path:
                sys.path.remove(directory)

        for attribute in DEFINITION_ATTRIBUTES:
            definition = getattr(module, attribute, None)
            if definition is not None:
                logger.debug('Loaded %s from %s', attribute, path)
                return definition

        raise LoadError(
            str(entry_point),
            f"no '{DEFINITION_ATTRIBUTES[0]}' or '{DEFINITION_ATTRIBUTES[1]}' attribute",
        )
