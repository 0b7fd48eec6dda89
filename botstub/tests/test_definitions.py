"""Test suite for definition normalization.

This module tests that normalize_integration and normalize_bot materialize
every optional section, translate schemas and keep declared order.
"""

import dataclasses

import pytest

from botstub.codegen.definitions import (
    CreationSpec,
    IntegrationSpec,
    SchemaSpec,
    normalize_bot,
    normalize_integration,
)
from botstub.codegen.schema import SchemaKind, translate
from botstub.sdk import IntegrationDefinition, SchemaDefinition

from .fixtures import (
    FULL_BOT,
    FULL_INTEGRATION,
    MINIMAL_INTEGRATION,
    PING_INTEGRATION,
    Settings,
)


class TestNormalizeIntegration:
    """Tests for normalize_integration()."""

    def test_minimal_definition_gets_every_section(self):
        """Test that absent sections become their empty forms."""
        spec = normalize_integration(MINIMAL_INTEGRATION)

        assert spec.name == 'demo'
        assert spec.version == '1.0.0'
        assert spec.user.tags == ()
        assert spec.user.creation == CreationSpec(enabled=False, required_tags=())
        assert spec.configuration.schema.kind is SchemaKind.OBJECT
        assert spec.configuration.schema.children == ()
        assert spec.actions == ()
        assert spec.channels == ()
        assert spec.events == ()
        assert spec.states == ()
        assert spec.secrets == ()

    def test_sdk_model_and_mapping_agree(self):
        """Test that an sdk model and the equivalent mapping normalize equally."""
        from_mapping = normalize_integration(MINIMAL_INTEGRATION)
        from_model = normalize_integration(IntegrationDefinition(**MINIMAL_INTEGRATION))
        assert from_mapping == from_model

    def test_action_schemas_are_translated(self):
        """Test that action input and output schemas become SchemaNodes."""
        spec = normalize_integration(PING_INTEGRATION)

        ((name, action),) = spec.actions
        assert name == 'ping'
        assert action.input.schema.kind is SchemaKind.OBJECT
        assert action.input.schema.children == ()
        assert action.output.schema.field_names == ('message',)

    def test_declared_order_is_kept(self):
        """Test that mapping sections keep their declared order."""
        spec = normalize_integration(FULL_INTEGRATION)

        assert [name for name, _ in spec.actions] == ['createTask', 'ping']
        ((channel_name, channel),) = spec.channels
        assert channel_name == 'comments'
        assert [name for name, _ in channel.messages] == ['text', 'image']

    def test_full_definition(self):
        """Test the normalized form of a definition using every section."""
        spec = normalize_integration(FULL_INTEGRATION)

        assert spec.user.tags == ('email',)
        assert spec.user.creation == CreationSpec(enabled=True, required_tags=('email',))
        assert spec.configuration.schema.title == 'Settings'
        assert spec.secrets == ('apiKey',)

        channel = spec.channels[0][1]
        assert channel.conversation.tags == ('taskId',)
        assert channel.conversation.creation == CreationSpec()
        assert channel.message.tags == ('commentId',)

        action = dict(spec.actions)['createTask']
        assert action.title == 'Create task'
        assert action.input.schema.title == 'CreateTaskInput'

    def test_schema_metadata(self):
        """Test that schema titles and descriptions are carried over."""
        spec = normalize_integration(
            {
                'name': 'demo',
                'version': '1.0.0',
                'configuration': SchemaDefinition(
                    schema=Settings, title='Settings', description='How to connect.'
                ),
            }
        )
        assert spec.configuration.title == 'Settings'
        assert spec.configuration.description == 'How to connect.'

    def test_tags_given_as_mapping_or_list(self):
        """Test that tags may be given as a mapping or a list of names."""
        as_list = normalize_integration(
            {'name': 'a', 'version': '1', 'user': {'tags': ['email', 'email', 'id']}}
        )
        as_mapping = normalize_integration(
            {'name': 'a', 'version': '1', 'user': {'tags': {'email': {}, 'id': {}}}}
        )
        assert as_list.user.tags == ('email', 'id')
        assert as_mapping.user.tags == ('email', 'id')

    @pytest.mark.parametrize(
        'raw',
        [MINIMAL_INTEGRATION, PING_INTEGRATION, FULL_INTEGRATION],
    )
    def test_normalization_is_idempotent(self, raw):
        """Test that normalizing a canonical spec returns an equal spec."""
        spec = normalize_integration(raw)
        assert normalize_integration(spec) == spec

    def test_specs_are_frozen(self):
        """Test that canonical specs cannot be mutated."""
        spec = normalize_integration(MINIMAL_INTEGRATION)
        with pytest.raises(dataclasses.FrozenInstanceError):
            spec.name = 'other'

    def test_prebuilt_spec_is_accepted(self):
        """Test that an IntegrationSpec built by hand is normalized as is."""
        spec = IntegrationSpec(
            name='demo',
            version='1.0.0',
            events=(('ping', SchemaSpec(schema=translate({'at': str}))),),
        )
        assert normalize_integration(spec) == spec


class TestNormalizeBot:
    """Tests for normalize_bot()."""

    def test_empty_bot(self):
        """Test that an empty bot definition gets every section."""
        spec = normalize_bot({})
        assert spec.configuration.schema.children == ()
        assert spec.events == ()
        assert spec.states == ()
        assert spec.integrations == ()

    def test_full_bot(self):
        """Test that installed integrations keep their settings."""
        spec = normalize_bot(FULL_BOT)

        assert spec.configuration.schema.field_names == ('greeting',)
        assert [name for name, _ in spec.events] == ['reminder']
        assert [name for name, _ in spec.states] == ['conversation']

        integrations = dict(spec.integrations)
        assert integrations['todo'].enabled is True
        assert integrations['todo'].configuration == {'api_url': 'https://todo.test'}
        assert integrations['chat'].enabled is False
        assert integrations['chat'].configuration == {}

    def test_normalization_is_idempotent(self):
        """Test that normalizing a canonical bot returns an equal spec."""
        spec = normalize_bot(FULL_BOT)
        assert normalize_bot(spec) == spec
