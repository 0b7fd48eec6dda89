"""Frozen arena of the modules reachable from a root module."""

import logging
from collections.abc import Iterator

from botstub.codegen.module import Module
from botstub.exceptions import GraphError

logger = logging.getLogger(__name__)

__all__ = ['ModuleGraph']


class ModuleGraph:
    """Every module reachable from ``root``, keyed by output path.

    Building the graph freezes its modules, so paths and export names can
    no longer change. Iteration yields modules dependency-first: a module is
    always preceded by every module it imports from. Ties are broken by the
    order in which dependencies were registered, which keeps traversal
    deterministic.

    Attributes:
        root: The module the graph was built from.
        edges: Output path of each module mapped to the output paths of its
            dependencies, in registration order.
    """

    def __init__(self, root: Module):
        self.root = root
        self._nodes: dict[str, Module] = {}
        self._order: list[str] = []
        self.edges: dict[str, tuple[str, ...]] = {}
        self._build()

    def _build(self) -> None:
        visiting: set[int] = set()
        done: set[int] = set()

        def visit(module: Module) -> None:
            if id(module) in done:
                return
            if id(module) in visiting:
                raise GraphError('Dependency cycle detected', module.path)
            visiting.add(id(module))

            for dep in module.deps:
                visit(dep)

            existing = self._nodes.get(module.path)
            if existing is not None and existing is not module:
                raise GraphError('Two modules share the same output path', module.path)

            visiting.discard(id(module))
            done.add(id(module))
            self._nodes[module.path] = module
            self._order.append(module.path)
            self.edges[module.path] = tuple(dep.path for dep in module.deps)

        visit(self.root)
        for module in self._nodes.values():
            module.freeze()
        logger.debug('Built module graph with %d modules', len(self._order))

    def __iter__(self) -> Iterator[Module]:
        return (self._nodes[path] for path in self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, path: str) -> bool:
        return path in self._nodes

    def get(self, path: str) -> Module | None:
        return self._nodes.get(path)

    @property
    def paths(self) -> list[str]:
        return list(self._order)
