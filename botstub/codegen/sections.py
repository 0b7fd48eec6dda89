"""Building blocks shared by the section generators.

``SchemaModule`` renders one schema-bearing leaf as a pydantic model,
``AggregateModule`` composes the exports of other modules into a
``TypedDict`` keyed by definition entry names and ``IndexModule`` is the
base of the package roots.
"""

import ast
from collections.abc import Iterable

from botstub.codegen.ast_utils import ImportCollector, _all, _name, _typed_dict
from botstub.codegen.definitions import SchemaSpec
from botstub.codegen.module import INIT_FILE, Module
from botstub.codegen.types import ModelRenderer

__all__ = ['SchemaModule', 'AggregateModule', 'IndexModule']


class SchemaModule(Module):
    """A file holding the pydantic model of one schema."""

    def __init__(self, path: str, export_name: str, spec: SchemaSpec):
        super().__init__(path, export_name)
        self.spec = spec

    def build(
        self, imports: ImportCollector, aliases: dict[Module, str]
    ) -> list[ast.stmt]:
        renderer = ModelRenderer(reserved=self.reserved_names(), imports=imports)
        renderer.add_model(
            self.export_name,
            self.spec.schema,
            description=self.spec.description or self.spec.title,
        )
        return renderer.body


class AggregateModule(Module):
    """A file composing its dependencies' exports into one ``TypedDict``.

    Each entry maps a definition name to the module whose export describes
    it; the modules are registered as dependencies in entry order.
    """

    def __init__(
        self,
        path: str,
        export_name: str,
        entries: Iterable[tuple[str, Module]] = (),
        docstring: str | None = None,
    ):
        super().__init__(path, export_name)
        self.docstring = docstring
        self.entries: list[tuple[str, Module]] = []
        for key, module in entries:
            self.add_entry(key, module)

    def add_entry(self, key: str, module: Module) -> Module:
        self.push_dep(module)
        self.entries.append((key, module))
        return module

    def build(
        self, imports: ImportCollector, aliases: dict[Module, str]
    ) -> list[ast.stmt]:
        imports.add_import('typing', 'TypedDict')
        return [
            _typed_dict(
                self.export_name,
                [(key, _name(aliases[module])) for key, module in self.entries],
                docstring=self.docstring,
            )
        ]


def _defined_names(body: list[ast.stmt]) -> list[str]:
    names = []
    for stmt in body:
        if isinstance(stmt, ast.ClassDef):
            names.append(stmt.name)
        elif isinstance(stmt, ast.Assign):
            names.extend(t.id for t in stmt.targets if isinstance(t, ast.Name))
        elif isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
            names.append(stmt.target.id)
    return names


class IndexModule(Module):
    """Root ``__init__.py`` of a generated package.

    Every section module is moved into the directory named after its section
    and its namespace is re-exported next to the declarations produced by
    ``build_index``.
    """

    def __init__(self, export_name: str, sections: Iterable[tuple[str, Module]]):
        super().__init__(INIT_FILE, export_name)
        self.sections: dict[str, Module] = {}
        for name, module in sections:
            module.unshift(name)
            self.push_dep(module)
            self.sections[name] = module

    def reserved_names(self) -> set[str]:
        return super().reserved_names() | set(self.sections) | {'sdk'}

    def section(self, aliases: dict[Module, str], name: str) -> ast.Name:
        return _name(aliases[self.sections[name]])

    def build_index(
        self, imports: ImportCollector, aliases: dict[Module, str]
    ) -> list[ast.stmt]:
        raise NotImplementedError

    def build(
        self, imports: ImportCollector, aliases: dict[Module, str]
    ) -> list[ast.stmt]:
        for name in self.sections:
            imports.add_import('.', name)
        body = self.build_index(imports, aliases)
        return body + [_all(sorted(self.sections) + _defined_names(body))]
