"""AST utilities and import collection for code generation.

This module provides helper functions for building Python AST nodes
and utilities for collecting and organizing imports during code generation.
"""

import ast
import keyword
import sys
from collections.abc import Iterable

__all__ = [
    # AST helpers
    '_name',
    '_attr',
    '_subscript',
    '_tuple',
    '_union_expr',
    '_literal_expr',
    '_constant',
    '_call',
    '_assign',
    '_ann_assign',
    '_class',
    '_docstring',
    '_typed_dict',
    '_all',
    # Import collection
    'ImportCollector',
]


def _name(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _attr(value: str | ast.expr, attr: str) -> ast.Attribute:
    return ast.Attribute(
        value=_name(value) if isinstance(value, str) else value,
        attr=attr,
        ctx=ast.Load(),
    )


def _subscript(generic: str | ast.expr, inner: ast.expr) -> ast.Subscript:
    return ast.Subscript(
        value=_name(generic) if isinstance(generic, str) else generic,
        slice=inner,
        ctx=ast.Load(),
    )


def _tuple(elts: list[ast.expr]) -> ast.Tuple:
    return ast.Tuple(elts=elts, ctx=ast.Load())


def _union_expr(types: list[ast.expr]) -> ast.expr:
    # A | B | C (using pipe operator instead of Union[A, B, C])
    if not types:
        raise ValueError('_union_expr requires at least one type')
    result = types[0]
    for t in types[1:]:
        result = ast.BinOp(left=result, op=ast.BitOr(), right=t)
    return result


def _literal_expr(values: list) -> ast.Subscript:
    elts = [_constant(value) for value in values]
    return _subscript('Literal', elts[0] if len(elts) == 1 else _tuple(elts))


def _constant(value) -> ast.expr:
    """Build the expression for a JSON compatible value."""
    if isinstance(value, dict):
        return ast.Dict(
            keys=[ast.Constant(value=str(k)) for k in value],
            values=[_constant(v) for v in value.values()],
        )
    if isinstance(value, (list, tuple)):
        return ast.List(elts=[_constant(v) for v in value], ctx=ast.Load())
    return ast.Constant(value=value)


def _call(
    func: ast.expr,
    args: list[ast.expr] | None = None,
    keywords: list[ast.keyword] | None = None,
) -> ast.Call:
    return ast.Call(
        func=func,
        args=args or [],
        keywords=keywords or [],
    )


def _assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    # Ensure target has Store context
    if isinstance(target, ast.Name):
        target = ast.Name(id=target.id, ctx=ast.Store())
    elif isinstance(target, ast.Attribute):
        target.ctx = ast.Store()
    return ast.Assign(
        targets=[target],
        value=value,
    )


def _ann_assign(
    name: str, annotation: ast.expr, value: ast.expr | None = None
) -> ast.AnnAssign:
    return ast.AnnAssign(
        target=ast.Name(id=name, ctx=ast.Store()),
        annotation=annotation,
        value=value,
        simple=1,
    )


def _docstring(text: str) -> ast.Expr:
    return ast.Expr(value=ast.Constant(value=text))


def _class(
    name: str,
    bases: list[ast.expr],
    body: list[ast.stmt],
    keywords: list[ast.keyword] | None = None,
    docstring: str | None = None,
) -> ast.ClassDef:
    if docstring:
        body = [_docstring(docstring)] + body
    return ast.ClassDef(
        name=name,
        bases=bases,
        keywords=keywords or [],
        body=body or [ast.Pass()],
        decorator_list=[],
        type_params=[],
    )


def _is_identifier(name: str) -> bool:
    # Dunder-prefixed names would be mangled inside a class body.
    return (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and not name.startswith('__')
    )


def _typed_dict(
    name: str,
    fields: list[tuple[str, ast.expr]],
    total: bool = True,
    docstring: str | None = None,
) -> ast.stmt:
    """Build a TypedDict declaration.

    The class syntax is used when every key is a valid identifier, the
    functional syntax (which cannot carry a docstring) otherwise.
    """
    keywords = [] if total else [ast.keyword(arg='total', value=ast.Constant(False))]

    if all(_is_identifier(key) for key, _ in fields):
        return _class(
            name,
            bases=[_name('TypedDict')],
            keywords=keywords,
            body=[_ann_assign(key, annotation) for key, annotation in fields],
            docstring=docstring,
        )

    mapping = ast.Dict(
        keys=[ast.Constant(value=key) for key, _ in fields],
        values=[annotation for _, annotation in fields],
    )
    return _assign(
        _name(name),
        _call(
            _name('TypedDict'),
            args=[ast.Constant(value=name), mapping],
            keywords=keywords,
        ),
    )


def _all(names: Iterable[str]) -> ast.Assign:
    return _assign(
        target=_name('__all__'),
        value=ast.List(
            elts=[ast.Constant(value=name) for name in names], ctx=ast.Load()
        ),
    )


# =============================================================================
# Import Collection
# =============================================================================


class ImportCollector:
    """Collects and manages imports for generated Python code.

    This class provides a centralized way to collect imports from various
    sources during code generation and convert them to AST import statements.
    It automatically deduplicates imports and sorts them for consistent output.

    Example:
        >>> collector = ImportCollector()
        >>> collector.add_imports({'typing': {'Any', 'Literal'}})
        >>> collector.add_import('.ping', 'Ping', alias='actions_Ping')
        >>> imports = collector.to_ast()
        >>> # [from typing import Any, Literal, from .ping import Ping as actions_Ping]
    """

    def __init__(self):
        """Initialize an empty import collector."""
        self._imports: dict[str, set[tuple[str, str | None]]] = {}

    def add_imports(self, imports: dict[str, set[str]]) -> None:
        """Add imports from a dictionary mapping modules to sets of names.

        Args:
            imports: Dictionary mapping module names to sets of imported names.
                    Example: {'typing': {'Any'}, 'pydantic': {'BaseModel'}}
        """
        for module, names in imports.items():
            for name in names:
                self.add_import(module, name)

    def add_import(self, module: str, name: str, alias: str | None = None) -> None:
        """Add a single import.

        Args:
            module: The module to import from, relative modules start with dots.
            name: The name to import.
            alias: Optional local name for the import.
        """
        if module == 'builtins':
            return
        if alias == name:
            alias = None
        self._imports.setdefault(module, set()).add((name, alias))

    def _get_import_category(self, module: str) -> int:
        """Get the sort category for a module.

        Uses sys.stdlib_module_names to dynamically detect standard library modules.

        Returns:
            0 for standard library, 1 for third-party, 2 for local/relative imports.
        """
        if module.startswith('.'):
            return 2

        base_module = module.split('.')[0]
        if base_module in sys.stdlib_module_names:
            return 0

        return 1

    def to_ast(self) -> list[ast.ImportFrom]:
        """Convert collected imports to AST ImportFrom statements.

        Imports are sorted according to Python conventions:
        1. Standard library imports
        2. Third-party imports
        3. Local/relative imports

        Within each category, imports are sorted alphabetically by module name.
        Names within each import are also sorted alphabetically.

        Returns:
            List of ast.ImportFrom statements, properly sorted.
        """
        import_stmts = []

        sorted_modules = sorted(
            self._imports.items(),
            key=lambda x: (self._get_import_category(x[0]), x[0]),
        )

        for module, names in sorted_modules:
            if module.startswith('.'):
                level = len(module) - len(module.lstrip('.'))
                import_module = module.lstrip('.') or None
            else:
                level = 0
                import_module = module

            import_stmts.append(
                ast.ImportFrom(
                    module=import_module,
                    names=[
                        ast.alias(name=name, asname=alias)
                        for name, alias in sorted(names, key=lambda n: (n[0], n[1] or ''))
                    ],
                    level=level,
                )
            )
        return import_stmts
