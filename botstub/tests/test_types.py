"""Test suite for rendering schema trees as pydantic models.

This module tests ModelRenderer: class and field generation, hoisting of
nested models, naming of attributes that would be invalid or shadow other
names, and that the rendered code defines working pydantic models.
"""

import ast

import pytest

from botstub.codegen.schema import translate
from botstub.codegen.types import ModelRenderer, unique_name
from botstub.codegen.utils import render_module

from .fixtures import Address, Customer

TASK_SCHEMA = {
    'type': 'object',
    'properties': {'title': {'type': 'string'}, 'due': {'type': 'string'}},
    'required': ['title'],
}

# a field and a nested model sharing the name 'Inner'
NESTED_TITLE_SCHEMA = {
    'type': 'object',
    'properties': {
        'Inner': {'type': 'integer', 'default': 1},
        'item': {
            'title': 'Inner',
            'type': 'object',
            'properties': {'x': {'type': 'integer'}},
            'required': ['x'],
        },
    },
    'required': ['item'],
}


def render(name, schema, description=None):
    renderer = ModelRenderer()
    renderer.add_model(name, translate(schema), description=description)
    return render_module(renderer.imports.to_ast() + renderer.body)


def load(name, schema):
    namespace = {}
    exec(render(name, schema), namespace)
    return namespace[name]


def class_names(source):
    return [node.name for node in ast.parse(source).body if isinstance(node, ast.ClassDef)]


class TestUniqueName:
    """Tests for unique_name()."""

    def test_free_name(self):
        assert unique_name('Text', {'Other'}) == 'Text'

    def test_counter(self):
        assert unique_name('Text', {'Text'}) == 'Text2'
        assert unique_name('Text', {'Text', 'Text2', 'Text3'}) == 'Text4'


class TestModelRenderer:
    """Tests for ModelRenderer class generation."""

    def test_simple_model(self):
        """Test that an object becomes a BaseModel subclass."""
        source = render('Output', {'message': str})
        assert 'from pydantic import BaseModel' in source
        assert 'class Output(BaseModel):\n    message: str' in source

    def test_empty_object(self):
        """Test that an empty object becomes an empty model."""
        source = render('Input', {})
        assert 'class Input(BaseModel):\n    pass' in source

    def test_docstring(self):
        """Test that the description becomes the class docstring."""
        source = render('Output', {'message': str}, description='Ping result.')
        assert ast.get_docstring(ast.parse(source).body[-1]) == 'Ping result.'

    def test_non_object_becomes_root_model(self):
        """Test that arrays and records become RootModel subclasses."""
        assert 'class Names(RootModel[list[str]]):' in render('Names', list[str])
        assert 'class Scores(RootModel[dict[str, int]]):' in render(
            'Scores', dict[str, int]
        )

    def test_optional_field_defaults_to_none(self):
        """Test that optional fields are nullable with a None default."""
        source = render('Task', TASK_SCHEMA)
        assert 'due: str | None = Field(default=None)' in source

    def test_field_metadata(self):
        """Test that declared defaults and descriptions are rendered."""
        source = render('Customer', Customer)
        assert (
            "userId: int = Field(description='Identifier of the customer.')" in source
        )
        assert "status: Literal['active', 'blocked'] = Field(default='active')" in source
        assert 'tags: list[str] = Field(default=[])' in source

    def test_string_formats_are_imported(self):
        """Test that formatted strings map to their Python types."""
        source = render(
            'Event',
            {
                'type': 'object',
                'properties': {
                    'at': {'type': 'string', 'format': 'date-time'},
                    'id': {'type': 'string', 'format': 'uuid'},
                },
                'required': ['at', 'id'],
            },
        )
        assert 'from datetime import datetime' in source
        assert 'from uuid import UUID' in source
        assert 'at: datetime' in source
        assert 'id: UUID' in source

    def test_unknown_is_any(self):
        """Test that unknown schemas become Any."""
        source = render('Blob', {'data': object})
        assert 'from typing import Any' in source
        assert 'data: Any' in source

    def test_enum_of_non_literal_values_is_any(self):
        """Test that enums Literal cannot express fall back to Any."""
        source = render('Ratio', {'value': {'enum': [0.5, 1.5]}})
        assert 'value: Any' in source

    def test_enum_keeps_booleans_apart_from_integers(self):
        """Test that True and 1 are distinct enum members."""
        source = render('Flag', {'value': {'enum': [1, True, 1]}})
        assert 'Literal[1, True]' in source

    def test_union_variants_are_deduplicated(self):
        """Test that equal union variants are rendered once."""
        source = render(
            'Holder',
            {'value': {'anyOf': [{'type': 'string'}, {'type': 'string'}]}},
        )
        assert 'value: str' in source


class TestHoisting:
    """Tests for nested object hoisting."""

    def test_nested_titled_model(self):
        """Test that titled nested models keep their name and come first."""
        source = render('Customer', Customer)
        assert class_names(source) == ['Address', 'Customer']
        assert 'address: Address' in source

    def test_nested_untitled_model(self):
        """Test that untitled nested objects are named after owner and field."""
        source = render('Output', {'meta': {'page': int}})
        assert class_names(source) == ['OutputMeta', 'Output']
        assert 'meta: OutputMeta' in source

    def test_array_of_objects(self):
        """Test that array items are hoisted too."""
        source = render('Output', {'items': list[Address]})
        assert 'items: list[Address]' in source

    def test_shared_model_is_rendered_once(self):
        """Test that a model used by several fields becomes one class."""
        source = render('Customer', {'home': Address, 'work': Address})
        assert class_names(source) == ['Address', 'Customer']
        assert 'home: Address' in source
        assert 'work: Address' in source

    def test_repeated_title_is_made_unique(self):
        """Test that two different models with one title never share a name."""
        source = render(
            'Holder',
            {
                'type': 'object',
                'properties': {
                    'home': {
                        'title': 'Address',
                        'type': 'object',
                        'properties': {'street': {'type': 'string'}},
                    },
                    'work': {
                        'title': 'Address',
                        'type': 'object',
                        'properties': {'city': {'type': 'string'}},
                    },
                },
            },
        )
        assert class_names(source) == ['Address', 'Address2', 'Holder']

    def test_hoisted_class_avoids_field_names(self):
        """Test that a hoisted class is never named like a field of its owner."""
        source = render('Output', NESTED_TITLE_SCHEMA)
        assert class_names(source) == ['Inner2', 'Output']
        assert 'Inner: int = Field(default=1)' in source
        assert 'item: Inner2' in source

    def test_reserved_names_are_avoided(self):
        """Test that hoisted classes never shadow reserved names."""
        renderer = ModelRenderer(reserved={'OutputMeta'})
        renderer.add_model('Output', translate({'meta': {'page': int}}))
        source = render_module(renderer.imports.to_ast() + renderer.body)
        assert class_names(source) == ['OutputMeta2', 'Output']


class TestFieldNames:
    """Tests for attribute naming and aliases."""

    @pytest.mark.parametrize(
        'field,attribute',
        [
            ('class', 'class_'),
            ('my-field', 'my_field'),
            ('_private', 'field_private'),
            ('json', 'json_'),
            ('str', 'str_'),
            ('2fa', 'field_2fa'),
        ],
    )
    def test_attribute_and_alias(self, field, attribute):
        """Test that invalid or shadowing names get an alias."""
        source = render('Model', {field: str})
        assert f"{attribute}: str = Field(alias='{field}')" in source

    def test_sanitized_names_are_unique(self):
        """Test that two fields sanitizing to one name stay distinct."""
        source = render('Model', {'a-b': str, 'a b': str})
        assert "a_b: str = Field(alias='a-b')" in source
        assert "a_b2: str = Field(alias='a b')" in source


class TestGeneratedModels:
    """Tests that execute the rendered code."""

    def test_model_validates(self):
        """Test that a generated model validates data."""
        model = load('Output', {'message': str})
        assert model.model_validate({'message': 'pong'}).message == 'pong'

    def test_aliases_are_used_for_validation(self):
        """Test that aliased fields are populated from the declared names."""
        model = load('Model', {'class': str, 'my-field': int})
        instance = model.model_validate({'class': 'a', 'my-field': 1})
        assert instance.class_ == 'a'
        assert instance.my_field == 1
        assert instance.model_dump(by_alias=True) == {'class': 'a', 'my-field': 1}

    def test_nested_model(self):
        """Test that nested models and defaults work at runtime."""
        model = load('Customer', Customer)
        customer = model.model_validate(
            {'userId': 1, 'name': 'Ada', 'address': {'street': 'Main'}}
        )
        assert customer.address.street == 'Main'
        assert customer.address.zip_code is None
        assert customer.tags == []
        assert customer.status == 'active'

    def test_field_sharing_a_name_with_a_nested_model(self):
        """Test that the annotation of a later field still binds to the class."""
        model = load('Output', NESTED_TITLE_SCHEMA)
        output = model.model_validate({'item': {'x': 2}})
        assert output.item.x == 2
        assert output.Inner == 1
