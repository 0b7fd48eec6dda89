"""Test suite for naming and rendering utilities."""

import ast

import pytest

from botstub.codegen.utils import (
    GENERATED_HEADER,
    class_name,
    format_source,
    module_name,
    render_module,
    sanitize_field_name,
    sanitize_identifier,
    secret_env_variable_name,
    to_snake_case,
    validate_python_syntax,
)


class TestNaming:
    """Tests for the identifier helpers."""

    @pytest.mark.parametrize(
        'name,expected',
        [
            ('ping', 'Ping'),
            ('createTask', 'CreateTask'),
            ('create-task', 'CreateTask'),
            ('create task', 'CreateTask'),
            ('2fa', '_2fa'),
            ('', 'UnnamedType'),
            ('éclair', 'Eclair'),
        ],
    )
    def test_sanitize_identifier(self, name, expected):
        assert sanitize_identifier(name) == expected

    @pytest.mark.parametrize(
        'name,expected',
        [
            ('text', 'Text'),
            ('none', 'None_'),
            ('any', 'Any_'),
            ('base model', 'BaseModel_'),
        ],
    )
    def test_class_name_avoids_keywords_and_imports(self, name, expected):
        assert class_name(name) == expected

    @pytest.mark.parametrize(
        'name,expected',
        [
            ('sendMessage', 'send_message'),
            ('send-message', 'send_message'),
            ('Send Message', 'send_message'),
            ('HTTPRequest', 'http_request'),
            ('lastSync', 'last_sync'),
        ],
    )
    def test_to_snake_case(self, name, expected):
        assert to_snake_case(name) == expected

    @pytest.mark.parametrize(
        'name,expected',
        [
            ('createTask', 'create_task'),
            ('import', 'import_'),
            ('3d', '_3d'),
            ('!!!', 'unnamed'),
        ],
    )
    def test_module_name(self, name, expected):
        assert module_name(name) == expected

    @pytest.mark.parametrize(
        'name,expected',
        [
            ('my-field', 'my_field'),
            ('my.field', 'my_field'),
            ('class', 'class_'),
            ('9lives', '_9lives'),
            ('$$', '_'),
        ],
    )
    def test_sanitize_field_name(self, name, expected):
        assert sanitize_field_name(name) == expected

    def test_sanitize_field_name_rejects_empty(self):
        with pytest.raises(ValueError):
            sanitize_field_name('')

    def test_secret_env_variable_name(self):
        assert secret_env_variable_name('apiKey') == 'SECRET_API_KEY'
        assert secret_env_variable_name('webhook-secret') == 'SECRET_WEBHOOK_SECRET'


class TestRendering:
    """Tests for source rendering helpers."""

    def test_render_module_adds_header(self):
        """Test that rendered modules start with the generated-file header."""
        body = [ast.parse('x = 1').body[0]]
        assert render_module(body) == f'{GENERATED_HEADER}\n\nx = 1\n'

    def test_render_empty_module(self):
        """Test that an empty body renders the header only."""
        assert render_module([]) == f'{GENERATED_HEADER}\n'

    def test_validate_python_syntax(self):
        """Test that invalid code raises SyntaxError."""
        validate_python_syntax('x = 1')
        with pytest.raises(SyntaxError):
            validate_python_syntax('x = (')

    def test_format_source(self):
        """Test that black formatting is applied and stable."""
        formatted = format_source("x = {'a':1}\n")
        assert formatted == 'x = {"a": 1}\n'
        assert format_source(formatted) == formatted
