"""Generation units and the import resolution between them.

A ``Module`` is one generated source file: a posix path relative to the
output directory, the name of the symbol it exports and the modules whose
exports it imports. Paths start out relative to the module's owner and grow
as the owner is nested under section directories (``unshift``).

The first consumer a module is registered with owns it: unshifting the
consumer moves the module along, and path or export name collisions between
owned modules are resolved when they are registered.
"""

import ast
import logging
from collections.abc import Iterator, Sequence

from botstub.codegen.ast_utils import ImportCollector
from botstub.codegen.types import unique_name
from botstub.codegen.utils import render_module, sanitize_field_name
from botstub.exceptions import GraphError

logger = logging.getLogger(__name__)

__all__ = ['Module']

INIT_FILE = '__init__.py'


def _split(path: str | Sequence[str]) -> list[str]:
    parts = path.split('/') if isinstance(path, str) else list(path)
    return [part for part in parts if part and part != '.']


def _stem(segment: str) -> str:
    return segment[: -len('.py')] if segment.endswith('.py') else segment


class Module:
    """A generated source file and its dependency edges.

    Subclasses implement ``build`` to produce the statements of the file and
    may extend ``reserved_names`` with every name the file defines.

    Attributes:
        export_name: Name of the symbol consumers import from this module.
    """

    def __init__(self, path: str | Sequence[str], export_name: str | None):
        self._segments = _split(path)
        if not self._segments or not self._segments[-1].endswith('.py'):
            raise GraphError('A module path must end with a python file', str(path))
        self._export_name = export_name
        self._deps: list[Module] = []
        self._owned: list[Module] = []
        self._owner: Module | None = None
        self._frozen = False

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.path!r}, {self.export_name!r})'

    # -- paths ---------------------------------------------------------------

    @property
    def path(self) -> str:
        return '/'.join(self._segments)

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(self._segments)

    @property
    def directory(self) -> tuple[str, ...]:
        return tuple(self._segments[:-1])

    @property
    def module_segments(self) -> tuple[str, ...]:
        """Dotted module path, the package itself for ``__init__.py``."""
        if self._segments[-1] == INIT_FILE:
            return self.directory
        return self.directory + (_stem(self._segments[-1]),)

    @property
    def export_name(self) -> str | None:
        return self._export_name

    @property
    def deps(self) -> tuple['Module', ...]:
        return tuple(self._deps)

    def subtree(self) -> Iterator['Module']:
        """Yield this module and every module it transitively owns."""
        yield self
        for module in self._owned:
            yield from module.subtree()

    def unshift(self, *segments: str) -> None:
        """Prefix this module and every module it owns with ``segments``."""
        prefix = _split(list(segments))
        for module in self.subtree():
            module._check_mutable()
            module._segments[:0] = prefix

    def _check_mutable(self) -> None:
        if self._frozen:
            raise GraphError('Module is frozen and can no longer move', self.path)

    def freeze(self) -> None:
        self._frozen = True

    # -- edges ---------------------------------------------------------------

    def reaches(self, target: 'Module') -> bool:
        seen: set[int] = set()
        stack = [self]
        while stack:
            module = stack.pop()
            if module is target:
                return True
            if id(module) in seen:
                continue
            seen.add(id(module))
            stack.extend(module._deps)
        return False

    def push_dep(self, dep: 'Module') -> 'Module':
        """Register ``dep`` as a module this module imports from.

        Raises:
            GraphError: If the edge would close a cycle.
        """
        self._check_mutable()
        if dep.reaches(self):
            raise GraphError(
                f"Dependency on '{dep.path}' would create a cycle", self.path
            )
        if any(existing is dep for existing in self._deps):
            return dep

        if dep._owner is None:
            dep._owner = self
            self._resolve_path_collision(dep)
            self._resolve_export_collision(dep)
            self._owned.append(dep)

        self._deps.append(dep)
        logger.debug('Registered %s -> %s', self.path, dep.path)
        return dep

    def _resolve_path_collision(self, dep: 'Module') -> None:
        # A file ``x.py`` and a package ``x/`` collide as well, so every
        # package prefix of an owned module is taken too.
        taken: set[tuple[str, ...]] = set()
        for module in self.subtree():
            segments = module.module_segments
            taken.update(segments[:end] for end in range(1, len(segments) + 1))

        target = dep.module_segments
        if target not in taken:
            return
        if not target:
            raise GraphError('Two modules share the same output path', dep.path)

        stem = target[-1]
        counter = 2
        while target[:-1] + (f'{stem}_{counter}',) in taken:
            counter += 1
        renamed = f'{stem}_{counter}'

        index = len(target) - 1
        for module in dep.subtree():
            module._check_mutable()
            suffix = '.py' if module._segments[index].endswith('.py') else ''
            module._segments[index] = renamed + suffix
        logger.debug('Renamed colliding module %s to %s', stem, renamed)

    def _resolve_export_collision(self, dep: 'Module') -> None:
        if dep.export_name is None:
            return
        siblings = [
            module
            for module in self._owned + [self]
            if module.directory == dep.directory and module.export_name
        ]
        taken = {module.export_name for module in siblings}
        if dep.export_name in taken:
            renamed = unique_name(dep.export_name, taken)
            logger.debug('Renamed colliding export %s to %s', dep.export_name, renamed)
            dep._export_name = renamed

    # -- imports -------------------------------------------------------------

    def import_(self, from_module: 'Module') -> str:
        """Relative import reference from ``from_module`` to this module.

        Example:
            ``'.ping'`` from ``actions/__init__.py`` to
            ``actions/ping/__init__.py`` and ``'..configuration'`` from
            ``actions/__init__.py`` to ``configuration/__init__.py``.
        """
        source = from_module.directory
        target = self.module_segments
        common = 0
        for left, right in zip(source, target):
            if left != right:
                break
            common += 1
        dots = 1 + len(source) - common
        return '.' * dots + '.'.join(target[common:])

    def reserved_names(self) -> set[str]:
        """Names defined by this file that imports must not shadow."""
        return {self._export_name} if self._export_name else set()

    def _qualified_alias(self, dep: 'Module') -> str:
        relative = dep.import_(self).lstrip('.')
        parts = [part for part in relative.split('.') if part]
        if not parts:
            parts = list(dep.module_segments[-1:]) or ['parent']
        prefix = '_'.join(sanitize_field_name(part).strip('_') for part in parts)
        return f'{prefix}_{dep.export_name}'

    def import_aliases(self) -> dict['Module', str]:
        """Assign every dependency a local name that is unique in this file.

        Raises:
            GraphError: If two dependencies still share a name after being
                qualified by their module path.
        """
        deps = [dep for dep in self._deps if dep.export_name]
        reserved = self.reserved_names()
        counts: dict[str, int] = {}
        for dep in deps:
            counts[dep.export_name] = counts.get(dep.export_name, 0) + 1

        aliases: dict[Module, str] = {}
        for dep in deps:
            alias = dep.export_name
            if counts[alias] > 1 or alias in reserved:
                alias = self._qualified_alias(dep)
            if alias in aliases.values() or alias in reserved:
                raise GraphError(
                    f"Cannot import '{dep.export_name}' from '{dep.path}' "
                    f"without shadowing '{alias}'",
                    self.path,
                )
            aliases[dep] = alias
        return aliases

    # -- content -------------------------------------------------------------

    def build(
        self, imports: ImportCollector, aliases: dict['Module', str]
    ) -> list[ast.stmt]:
        """Statements of this file, excluding imports of its dependencies."""
        raise NotImplementedError

    @property
    def content(self) -> str:
        """Unformatted source text of this file."""
        aliases = self.import_aliases()
        imports = ImportCollector()
        body = self.build(imports, aliases)
        for dep, alias in aliases.items():
            imports.add_import(dep.import_(self), dep.export_name, alias)
        return render_module(imports.to_ast() + body, self.path)
