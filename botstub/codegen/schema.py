"""Portable schema trees and the translator that builds them.

This module is the single adapter between the objects users describe their
definitions with (pydantic models, typing annotations, TypedDicts, enums,
dataclasses and JSON-Schema dictionaries) and the library-neutral
``SchemaNode`` tree consumed by the generators.

Translation is total: any construct that cannot be classified becomes an
``unknown`` node, keeping its description when one is available.
"""

import dataclasses
import datetime
import enum
import inspect
import logging
import types
import typing
import uuid
from collections import abc
from typing import Any, Literal, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel, RootModel
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

logger = logging.getLogger(__name__)

__all__ = [
    'SchemaKind',
    'SchemaNode',
    'translate',
]


class SchemaKind(str, enum.Enum):
    OBJECT = 'object'
    ARRAY = 'array'
    UNION = 'union'
    LITERAL = 'literal'
    ENUM = 'enum'
    STRING = 'string'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    NULL = 'null'
    UNKNOWN = 'unknown'


@dataclasses.dataclass(frozen=True)
class SchemaNode:
    """One node of a portable schema tree.

    Object fields are stored as an ordered tuple of ``(name, node)`` pairs so
    the declared order is part of the value, not a property of a container.

    Attributes:
        kind: The kind of value this node describes.
        optional: Whether the value may be absent from its parent object.
        description: Human readable description, if any.
        has_default: Whether ``default`` carries a declared default value.
        default: The default value (JSON compatible), meaningful only when
            ``has_default`` is true.
        title: Name of the originating type (model or enum class), if any.
        format: Refinement of a primitive kind (``date-time``, ``integer``...).
        children: Ordered object fields.
        additional: Value schema of a string-keyed record.
        element: Item schema of an array.
        variants: Ordered variants of a union or enum.
        value: The literal value of a ``literal`` node.
    """

    kind: SchemaKind
    optional: bool = False
    description: str | None = None
    has_default: bool = False
    default: Any = None
    title: str | None = None
    format: str | None = None
    children: tuple[tuple[str, 'SchemaNode'], ...] = ()
    additional: 'SchemaNode | None' = None
    element: 'SchemaNode | None' = None
    variants: tuple['SchemaNode', ...] = ()
    value: Any = None

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.children)

    @property
    def is_record(self) -> bool:
        """True for ``dict[str, X]`` shaped objects without declared fields."""
        return (
            self.kind is SchemaKind.OBJECT
            and not self.children
            and self.additional is not None
        )

    def child(self, name: str) -> 'SchemaNode | None':
        for child_name, node in self.children:
            if child_name == name:
                return node
        return None

    def to_json_schema(self) -> dict[str, Any]:
        """Render this node as a JSON-Schema dictionary."""
        result: dict[str, Any] = {}

        if self.kind is SchemaKind.OBJECT:
            result['type'] = 'object'
            if self.children:
                result['properties'] = {
                    name: node.to_json_schema() for name, node in self.children
                }
                required = [name for name, node in self.children if not node.optional]
                if required:
                    result['required'] = required
            if self.additional is not None:
                result['additionalProperties'] = self.additional.to_json_schema()
        elif self.kind is SchemaKind.ARRAY:
            result['type'] = 'array'
            if self.element is not None:
                result['items'] = self.element.to_json_schema()
        elif self.kind is SchemaKind.UNION:
            result['anyOf'] = [variant.to_json_schema() for variant in self.variants]
        elif self.kind is SchemaKind.ENUM:
            result['enum'] = [variant.value for variant in self.variants]
        elif self.kind is SchemaKind.LITERAL:
            result['const'] = self.value
        elif self.kind is SchemaKind.NUMBER:
            result['type'] = 'integer' if self.format == 'integer' else 'number'
        elif self.kind is not SchemaKind.UNKNOWN:
            result['type'] = self.kind.value
            if self.format:
                result['format'] = self.format

        if self.title:
            result['title'] = self.title
        if self.description:
            result['description'] = self.description
        if self.has_default:
            result['default'] = self.default
        return result


_PRIMITIVES: dict[Any, tuple[SchemaKind, str | None]] = {
    str: (SchemaKind.STRING, None),
    bytes: (SchemaKind.STRING, 'binary'),
    bool: (SchemaKind.BOOLEAN, None),
    int: (SchemaKind.NUMBER, 'integer'),
    float: (SchemaKind.NUMBER, None),
    datetime.datetime: (SchemaKind.STRING, 'date-time'),
    datetime.date: (SchemaKind.STRING, 'date'),
    datetime.time: (SchemaKind.STRING, 'time'),
    uuid.UUID: (SchemaKind.STRING, 'uuid'),
}

_JSON_TYPES: dict[str, tuple[SchemaKind, str | None]] = {
    'string': (SchemaKind.STRING, None),
    'integer': (SchemaKind.NUMBER, 'integer'),
    'number': (SchemaKind.NUMBER, None),
    'boolean': (SchemaKind.BOOLEAN, None),
    'null': (SchemaKind.NULL, None),
}

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    abc.Sequence,
    abc.MutableSequence,
    abc.Set,
    abc.MutableSet,
    abc.Iterable,
    abc.Collection,
)
_MAPPING_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)
_WRAPPER_ORIGINS = (typing.Required, typing.NotRequired, typing.ClassVar, typing.Final)

_JSON_SCHEMA_KEYWORDS = frozenset(
    {
        'type',
        'properties',
        'items',
        'anyOf',
        'oneOf',
        'allOf',
        'enum',
        'const',
        '$ref',
        'additionalProperties',
    }
)

# Deeper schemas are cut and degrade to unknown.
MAX_DEPTH = 64


def translate(schema: Any) -> SchemaNode:
    """Translate a schema object into a ``SchemaNode``.

    Args:
        schema: A pydantic model class, TypedDict, dataclass, Enum class,
            typing annotation, JSON-Schema dictionary, field mapping or an
            already translated ``SchemaNode``.

    Returns:
        The translated tree. Never raises; unsupported constructs become
        ``unknown`` nodes.
    """
    return _Translator().translate(schema)


def _plain(value: Any) -> Any:
    """Convert a default value into its JSON compatible form."""
    if isinstance(value, enum.Enum):
        return _plain(value.value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode='json')
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, abc.Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(v) for v in value]
    return value


def _describe(schema: Any) -> str | None:
    description = getattr(schema, 'description', None)
    return description if isinstance(description, str) else None


def _docstring(cls: type) -> str | None:
    doc = cls.__dict__.get('__doc__')
    return inspect.cleandoc(doc) if isinstance(doc, str) and doc.strip() else None


def _with_meta(node: SchemaNode, **meta: Any) -> SchemaNode:
    changes = {key: value for key, value in meta.items() if value is not None}
    return dataclasses.replace(node, **changes) if changes else node


def _looks_like_annotation(value: Any) -> bool:
    return (
        value is None
        or value is Any
        or isinstance(value, (type, SchemaNode))
        or get_origin(value) is not None
    )


class _Translator:
    """Stateful walk over one schema; tracks classes and refs being expanded."""

    def __init__(self):
        self._stack: list[Any] = []
        self._depth = 0

    def translate(self, schema: Any) -> SchemaNode:
        try:
            return self._nested(lambda: self._dispatch(schema))
        except (
            AttributeError,
            KeyError,
            NameError,
            RecursionError,
            TypeError,
            ValueError,
        ) as e:
            logger.debug('Could not translate %r (%s), using unknown', schema, e)
            return SchemaNode(SchemaKind.UNKNOWN, description=_describe(schema))

    def _nested(self, build: abc.Callable[[], SchemaNode]) -> SchemaNode:
        if self._depth >= MAX_DEPTH:
            logger.debug('Schema nested deeper than %d levels, using unknown', MAX_DEPTH)
            return SchemaNode(SchemaKind.UNKNOWN)
        self._depth += 1
        try:
            return build()
        finally:
            self._depth -= 1

    def _dispatch(self, schema: Any) -> SchemaNode:
        if isinstance(schema, SchemaNode):
            return schema
        if schema is None or schema is type(None):
            return SchemaNode(SchemaKind.NULL)
        if isinstance(schema, abc.Mapping):
            return self._from_mapping(schema)
        if isinstance(schema, type) and get_origin(schema) is None:
            if issubclass(schema, RootModel):
                root = schema.model_fields['root']
                return _with_meta(
                    self._guarded(schema, lambda: self.translate(root.annotation)),
                    title=schema.__name__,
                    description=_docstring(schema),
                )
            if issubclass(schema, BaseModel):
                return self._guarded(schema, lambda: self._from_model(schema))
            if typing.is_typeddict(schema):
                return self._guarded(schema, lambda: self._from_typed_dict(schema))
            if dataclasses.is_dataclass(schema):
                return self._guarded(schema, lambda: self._from_dataclass(schema))
            if issubclass(schema, enum.Enum):
                return self._from_enum(schema)
        return self._from_annotation(schema)

    def _guarded(self, key: Any, build: abc.Callable[[], SchemaNode]) -> SchemaNode:
        if key in self._stack:
            name = getattr(key, '__name__', str(key))
            logger.debug('Recursive reference to %s, using unknown', name)
            return SchemaNode(
                SchemaKind.UNKNOWN,
                title=name if isinstance(key, type) else None,
                description=_docstring(key) if isinstance(key, type) else None,
            )
        self._stack.append(key)
        try:
            return build()
        finally:
            self._stack.pop()

    # -- classes -------------------------------------------------------------

    def _from_model(self, model: type[BaseModel]) -> SchemaNode:
        children = []
        for name, field in model.model_fields.items():
            node = self.translate(field.annotation)
            has_default = field.default is not PydanticUndefined
            node = dataclasses.replace(
                node,
                optional=not field.is_required(),
                description=field.description or node.description,
                has_default=has_default,
                default=_plain(field.default) if has_default else None,
            )
            children.append((field.alias or name, node))

        return SchemaNode(
            SchemaKind.OBJECT,
            title=model.__name__,
            description=_docstring(model),
            children=tuple(children),
        )

    def _from_typed_dict(self, typed_dict: type) -> SchemaNode:
        hints = get_type_hints(typed_dict, include_extras=True)
        required = getattr(typed_dict, '__required_keys__', frozenset(hints))
        children = tuple(
            (
                name,
                dataclasses.replace(self.translate(hint), optional=name not in required),
            )
            for name, hint in hints.items()
        )
        return SchemaNode(
            SchemaKind.OBJECT,
            title=typed_dict.__name__,
            description=_docstring(typed_dict),
            children=children,
        )

    def _from_dataclass(self, cls: type) -> SchemaNode:
        hints = get_type_hints(cls, include_extras=True)
        children = []
        for field in dataclasses.fields(cls):
            node = self.translate(hints.get(field.name, Any))
            has_default = field.default is not dataclasses.MISSING
            has_factory = field.default_factory is not dataclasses.MISSING
            node = dataclasses.replace(
                node,
                optional=has_default or has_factory,
                has_default=has_default,
                default=_plain(field.default) if has_default else None,
            )
            children.append((field.name, node))
        return SchemaNode(
            SchemaKind.OBJECT,
            title=cls.__name__,
            description=_docstring(cls),
            children=tuple(children),
        )

    def _from_enum(self, cls: type[enum.Enum]) -> SchemaNode:
        return SchemaNode(
            SchemaKind.ENUM,
            title=cls.__name__,
            description=_docstring(cls),
            variants=tuple(
                SchemaNode(SchemaKind.LITERAL, value=_plain(member.value))
                for member in cls
            ),
        )

    # -- annotations ---------------------------------------------------------

    def _from_annotation(self, annotation: Any) -> SchemaNode:
        origin = get_origin(annotation)
        args = get_args(annotation)

        if origin is typing.Annotated:
            node = self.translate(args[0])
            for meta in args[1:]:
                if isinstance(meta, FieldInfo) and meta.description:
                    node = dataclasses.replace(node, description=meta.description)
            return node
        if origin in _WRAPPER_ORIGINS:
            return self.translate(args[0]) if args else SchemaNode(SchemaKind.UNKNOWN)
        if origin is Literal:
            literals = tuple(
                SchemaNode(SchemaKind.LITERAL, value=_plain(value)) for value in args
            )
            if len(literals) == 1:
                return literals[0]
            return SchemaNode(SchemaKind.ENUM, variants=literals)
        if origin is Union or origin is types.UnionType:
            return SchemaNode(
                SchemaKind.UNION, variants=tuple(self.translate(arg) for arg in args)
            )
        if origin in _SEQUENCE_ORIGINS or annotation in (list, tuple, set, frozenset):
            items = [arg for arg in args if arg is not Ellipsis]
            if not items:
                element = SchemaNode(SchemaKind.UNKNOWN)
            elif len(set(items)) == 1:
                element = self.translate(items[0])
            else:
                element = SchemaNode(
                    SchemaKind.UNION,
                    variants=tuple(self.translate(item) for item in dict.fromkeys(items)),
                )
            return SchemaNode(SchemaKind.ARRAY, element=element)
        if origin in _MAPPING_ORIGINS or annotation is dict:
            value = args[1] if len(args) == 2 else Any
            return SchemaNode(SchemaKind.OBJECT, additional=self.translate(value))

        if annotation in _PRIMITIVES:
            kind, format_ = _PRIMITIVES[annotation]
            return SchemaNode(kind, format=format_)
        if annotation is Any or annotation is object:
            return SchemaNode(SchemaKind.UNKNOWN)
        if isinstance(annotation, typing.TypeAliasType):
            return self._guarded(annotation, lambda: self.translate(annotation.__value__))
        if isinstance(annotation, typing.NewType):
            return self.translate(annotation.__supertype__)

        logger.debug('Unsupported schema construct %r, using unknown', annotation)
        return SchemaNode(SchemaKind.UNKNOWN, description=_describe(annotation))

    # -- mappings ------------------------------------------------------------

    def _from_mapping(self, schema: abc.Mapping) -> SchemaNode:
        if not schema:
            return SchemaNode(SchemaKind.OBJECT)

        is_json_schema = any(
            key in _JSON_SCHEMA_KEYWORDS and not _looks_like_annotation(value)
            for key, value in schema.items()
        )
        if is_json_schema:
            return self._from_json_schema(schema, root=schema)

        return SchemaNode(
            SchemaKind.OBJECT,
            children=tuple((str(key), self.translate(value)) for key, value in schema.items()),
        )

    def _from_json_schema(self, schema: abc.Mapping, root: abc.Mapping) -> SchemaNode:
        node = _with_meta(
            self._json_body(schema, root),
            title=schema.get('title'),
            description=schema.get('description'),
        )
        if 'default' in schema:
            node = dataclasses.replace(node, has_default=True, default=schema['default'])
        return node

    def _json_child(self, schema: Any, root: abc.Mapping) -> SchemaNode:
        if isinstance(schema, abc.Mapping):
            return self._nested(lambda: self._from_json_schema(schema, root))
        return SchemaNode(SchemaKind.UNKNOWN)

    def _json_body(self, schema: abc.Mapping, root: abc.Mapping) -> SchemaNode:
        if '$ref' in schema:
            ref = schema['$ref']
            target = self._resolve_ref(ref, root)
            if target is None:
                logger.debug('Unresolvable reference %s, using unknown', ref)
                return SchemaNode(SchemaKind.UNKNOWN)
            return self._guarded(ref, lambda: self._from_json_schema(target, root))

        if 'const' in schema:
            return SchemaNode(SchemaKind.LITERAL, value=schema['const'])
        if 'enum' in schema:
            return SchemaNode(
                SchemaKind.ENUM,
                variants=tuple(
                    SchemaNode(SchemaKind.LITERAL, value=value) for value in schema['enum']
                ),
            )
        for keyword in ('anyOf', 'oneOf'):
            if keyword in schema:
                return SchemaNode(
                    SchemaKind.UNION,
                    variants=tuple(self._json_child(s, root) for s in schema[keyword]),
                )
        if 'allOf' in schema:
            parts = [self._json_child(s, root) for s in schema['allOf']]
            if len(parts) == 1:
                return parts[0]
            if parts and all(part.kind is SchemaKind.OBJECT for part in parts):
                merged: dict[str, SchemaNode] = {}
                for part in parts:
                    for name, child in part.children:
                        merged.setdefault(name, child)
                return SchemaNode(SchemaKind.OBJECT, children=tuple(merged.items()))
            return SchemaNode(SchemaKind.UNKNOWN)

        type_ = schema.get('type')
        if isinstance(type_, list):
            variants = tuple(
                self._json_body({**schema, 'type': single}, root) for single in type_
            )
            if len(variants) == 1:
                return variants[0]
            return SchemaNode(SchemaKind.UNION, variants=variants)
        if type_ == 'object' or (type_ is None and 'properties' in schema):
            required = set(schema.get('required', ()))
            children = tuple(
                (
                    name,
                    dataclasses.replace(
                        self._json_child(child, root), optional=name not in required
                    ),
                )
                for name, child in schema.get('properties', {}).items()
            )
            additional = schema.get('additionalProperties')
            return SchemaNode(
                SchemaKind.OBJECT,
                children=children,
                additional=self._json_child(additional, root)
                if isinstance(additional, abc.Mapping)
                else None,
            )
        if type_ == 'array':
            return SchemaNode(
                SchemaKind.ARRAY, element=self._json_child(schema.get('items'), root)
            )
        if type_ in _JSON_TYPES:
            kind, format_ = _JSON_TYPES[type_]
            return SchemaNode(kind, format=schema.get('format', format_))

        return SchemaNode(SchemaKind.UNKNOWN)

    @staticmethod
    def _resolve_ref(ref: str, root: abc.Mapping) -> abc.Mapping | None:
        if not isinstance(ref, str) or not ref.startswith('#/'):
            return None
        target: Any = root
        for part in ref[2:].split('/'):
            if not isinstance(target, abc.Mapping) or part not in target:
                return None
            target = target[part]
        return target if isinstance(target, abc.Mapping) else None
