"""Emission of a module graph as Python source files.

This module provides the ModuleEmitter, which renders every module reachable
from a root module in dependency order and writes the results to an output
directory, creating packages as needed.
"""

import dataclasses
import logging
from pathlib import Path

from upath import UPath

from botstub.codegen.graph import ModuleGraph
from botstub.codegen.module import INIT_FILE, Module
from botstub.codegen.utils import GENERATED_HEADER, format_source
from botstub.exceptions import WriteError

logger = logging.getLogger(__name__)

__all__ = ['File', 'ModuleEmitter']


@dataclasses.dataclass(frozen=True)
class File:
    """A rendered file, ``path`` being posix and relative to the output."""

    path: str
    content: str


class ModuleEmitter:
    """Renders and writes the files of a module graph.

    Example:
        >>> emitter = ModuleEmitter(format_code=False)
        >>> files = emitter.write(index_module, 'generated')
    """

    def __init__(self, format_code: bool = True):
        """Initialize the emitter.

        Args:
            format_code: Whether to format the rendered sources with black.
        """
        self.format_code = format_code

    def render(self, root: Module) -> list[File]:
        """Render every module reachable from ``root``, dependencies first.

        Package directories without a module of their own get an
        ``__init__.py`` holding only the generated-file header.
        """
        graph = ModuleGraph(root)

        files = []
        for module in graph:
            source = module.content
            if self.format_code:
                source = format_source(source)
            files.append(File(module.path, source))

        return files + self._package_files(files)

    def _package_files(self, files: list[File]) -> list[File]:
        existing = {file.path for file in files}
        packages: list[File] = []
        for file in files:
            parts = file.path.split('/')[:-1]
            for end in range(len(parts) + 1):
                init_path = '/'.join(parts[:end] + [INIT_FILE])
                if init_path not in existing:
                    existing.add(init_path)
                    packages.append(File(init_path, f'{GENERATED_HEADER}\n'))
        return packages

    def write(self, root: Module, output_dir: str | Path | UPath) -> list[File]:
        """Render the graph of ``root`` and write it below ``output_dir``.

        Writing is not transactional: files written before a failure are
        left in place.

        Returns:
            The files that were written.

        Raises:
            WriteError: If a directory or a file cannot be written.
        """
        output_dir = UPath(output_dir)
        files = self.render(root)

        for file in files:
            target = output_dir.joinpath(*file.path.split('/'))
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(file.content, encoding='utf-8')
            except OSError as e:
                raise WriteError(str(target), e) from e
            logger.debug('Wrote %s', target)

        logger.info('Wrote %d files to %s', len(files), output_dir)
        return files
