"""Rendering of schema trees as pydantic models.

This module provides:
- ModelRenderer for turning a SchemaNode into pydantic class definitions
- unique_name for deterministic, counter based name de-duplication
"""

import ast
import dataclasses
import datetime
import uuid
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field, RootModel

from botstub.codegen.ast_utils import (
    ImportCollector,
    _call,
    _class,
    _constant,
    _literal_expr,
    _name,
    _subscript,
    _tuple,
    _union_expr,
)
from botstub.codegen.schema import SchemaKind, SchemaNode
from botstub.codegen.utils import RESERVED_NAMES, class_name, sanitize_field_name

__all__ = [
    'ModelRenderer',
    'unique_name',
]

_STRING_FORMATS: dict[str, Any] = {
    'date-time': datetime.datetime,
    'date': datetime.date,
    'time': datetime.time,
    'uuid': uuid.UUID,
    'binary': bytes,
}

# Names an annotation may refer to; a field named like one of them would
# shadow it for the following fields of the class body.
_ANNOTATION_NAMES = frozenset(
    {'str', 'int', 'float', 'bool', 'bytes', 'list', 'dict', 'None'}
) | RESERVED_NAMES


def unique_name(name: str, taken: Iterable[str]) -> str:
    """Return ``name`` or the first of ``name2``, ``name3``... not in ``taken``."""
    taken = set(taken)
    if name not in taken:
        return name
    counter = 2
    while f'{name}{counter}' in taken:
        counter += 1
    return f'{name}{counter}'


def _is_literal_value(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, bool))


def _is_plain(value: Any) -> bool:
    if value is None or isinstance(value, (str, int, float, bool)):
        return True
    if isinstance(value, dict):
        return all(isinstance(k, str) and _is_plain(v) for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return all(_is_plain(v) for v in value)
    return False


def _is_nullable(annotation: ast.expr) -> bool:
    if isinstance(annotation, ast.Constant) and annotation.value is None:
        return True
    if isinstance(annotation, ast.Name) and annotation.id == 'Any':
        return True
    if isinstance(annotation, ast.BinOp):
        return _is_nullable(annotation.left) or _is_nullable(annotation.right)
    return False


class ModelRenderer:
    """Renders schema trees of one generated file as pydantic classes.

    Nested object schemas are hoisted into their own classes, named after
    the schema title or after the owning class and field. Hoisted classes
    are emitted before the classes that use them.

    Example:
        >>> renderer = ModelRenderer()
        >>> renderer.add_model('Output', translate({'message': str}))
        'Output'
        >>> body = renderer.imports.to_ast() + renderer.body
    """

    def __init__(
        self, reserved: Iterable[str] = (), imports: ImportCollector | None = None
    ):
        self.imports = imports if imports is not None else ImportCollector()
        self.body: list[ast.stmt] = []
        self._names: set[str] = set(RESERVED_NAMES) | set(reserved)
        # field attributes of every class in the file; hoisted classes must
        # not be named like one of them
        self._attributes: set[str] = set()
        self._hoisted: list[tuple[str, SchemaNode, str]] = []

    def add_model(
        self, name: str, schema: SchemaNode, description: str | None = None
    ) -> str:
        """Render ``schema`` as a class called exactly ``name``.

        Objects become ``BaseModel`` subclasses, anything else a
        ``RootModel`` over the schema's annotation.

        Returns:
            The class name.
        """
        self._names.add(name)
        docstring = description or schema.description

        if schema.kind is SchemaKind.OBJECT and not schema.is_record:
            self.body.append(self._model_class(name, schema, docstring))
        else:
            annotation = self.annotation(schema, owner=name)
            self._import(RootModel)
            self.body.append(
                _class(
                    name,
                    bases=[_subscript(RootModel.__name__, annotation)],
                    body=[],
                    docstring=docstring,
                )
            )
        return name

    def annotation(
        self, node: SchemaNode, owner: str, field: str | None = None
    ) -> ast.expr:
        """Build the annotation of ``node``, hoisting nested models."""
        kind = node.kind

        if kind is SchemaKind.OBJECT:
            if node.children:
                return _name(self._hoist(node, owner, field))
            value = (
                self.annotation(node.additional, owner, field)
                if node.additional is not None
                else self._any()
            )
            return _subscript('dict', _tuple([_name('str'), value]))
        if kind is SchemaKind.ARRAY:
            element = (
                self.annotation(node.element, owner, field)
                if node.element is not None
                else self._any()
            )
            return _subscript('list', element)
        if kind is SchemaKind.UNION:
            variants: dict[str, ast.expr] = {}
            for variant in node.variants:
                expr = self.annotation(variant, owner, field)
                variants.setdefault(ast.unparse(expr), expr)
            if not variants:
                return self._any()
            if 'Any' in variants:
                return variants['Any']
            return _union_expr(list(variants.values()))
        if kind in (SchemaKind.ENUM, SchemaKind.LITERAL):
            values = (
                [variant.value for variant in node.variants]
                if kind is SchemaKind.ENUM
                else [node.value]
            )
            if not values or not all(_is_literal_value(v) for v in values):
                return self._any()
            # keyed by type so that True and 1 stay distinct
            values = list({(type(v), v): v for v in values}.values())
            self.imports.add_import('typing', 'Literal')
            return _literal_expr(values)
        if kind is SchemaKind.STRING:
            mapped = _STRING_FORMATS.get(node.format or '', str)
            self._import(mapped)
            return _name(mapped.__name__)
        if kind is SchemaKind.NUMBER:
            return _name('int' if node.format == 'integer' else 'float')
        if kind is SchemaKind.BOOLEAN:
            return _name('bool')
        if kind is SchemaKind.NULL:
            return ast.Constant(value=None)
        return self._any()

    def _any(self) -> ast.Name:
        self._import(Any)
        return _name(Any.__name__)

    def _import(self, obj: Any) -> None:
        # pydantic objects are imported from the public package
        module = obj.__module__
        if module.startswith('pydantic.'):
            module = 'pydantic'
        self.imports.add_import(module, obj.__name__)

    def _hoist(self, node: SchemaNode, owner: str, field: str | None) -> str:
        base = class_name(node.title) if node.title else None
        if not base or base == owner:
            base = owner + class_name(field or 'Item')

        # the same model used by several fields is rendered once
        shape = dataclasses.replace(node, optional=False, has_default=False, default=None)
        for hoisted_base, hoisted_shape, hoisted_name in self._hoisted:
            if hoisted_base == base and hoisted_shape == shape:
                return hoisted_name

        name = unique_name(base, self._names | self._attributes)
        self._names.add(name)
        self._hoisted.append((base, shape, name))
        self.body.append(self._model_class(name, node, node.description))
        return name

    def _model_class(
        self, name: str, schema: SchemaNode, docstring: str | None
    ) -> ast.ClassDef:
        self._import(BaseModel)
        # attributes are chosen before nested classes are hoisted
        attributes = self._field_attributes(schema)
        self._attributes.update(attributes)
        body = [
            self._create_pydantic_field(name, field_name, attribute, child)
            for (field_name, child), attribute in zip(schema.children, attributes)
        ]
        return _class(
            name,
            bases=[_name(BaseModel.__name__)],
            body=body,
            docstring=docstring,
        )

    def _field_attributes(self, schema: SchemaNode) -> list[str]:
        attributes: list[str] = []
        for field_name, _ in schema.children:
            attribute = sanitize_field_name(field_name)
            if attribute.startswith('_'):
                attribute = f'field{attribute}'
            if (
                hasattr(BaseModel, attribute)
                or attribute in _ANNOTATION_NAMES
                or attribute in self._names
            ):
                attribute = f'{attribute}_'
            attributes.append(unique_name(attribute, attributes))
        return attributes

    def _create_pydantic_field(
        self, owner: str, field_name: str, attribute: str, node: SchemaNode
    ) -> ast.AnnAssign:
        annotation = self.annotation(node, owner, field_name)

        field_keywords = []
        if node.has_default and _is_plain(node.default):
            field_keywords.append(
                ast.keyword(arg='default', value=_constant(node.default))
            )
        elif node.optional:
            if not _is_nullable(annotation):
                annotation = _union_expr([annotation, ast.Constant(value=None)])
            field_keywords.append(ast.keyword(arg='default', value=ast.Constant(None)))

        if attribute != field_name:
            field_keywords.append(
                ast.keyword(arg='alias', value=ast.Constant(field_name))
            )
        if node.description:
            field_keywords.append(
                ast.keyword(arg='description', value=ast.Constant(node.description))
            )

        value = None
        if field_keywords:
            self._import(Field)
            value = _call(func=_name(Field.__name__), keywords=field_keywords)

        return ast.AnnAssign(
            target=ast.Name(id=attribute, ctx=ast.Store()),
            annotation=annotation,
            value=value,
            simple=1,
        )
