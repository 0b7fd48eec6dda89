"""Test suite for the authoring models and runtime base classes."""

import pytest
from pydantic import ValidationError

from botstub.sdk import (
    ActionDefinition,
    Bot,
    BotProps,
    ChannelDefinition,
    Integration,
    IntegrationDefinition,
    IntegrationProps,
    SchemaDefinition,
)

from .fixtures import PingOutput


class TestDefinitions:
    """Tests for the authoring models."""

    def test_bare_schema_is_wrapped(self):
        """Test that a bare schema is accepted where a SchemaDefinition is expected."""
        action = ActionDefinition(input={}, output=PingOutput)
        assert isinstance(action.output, SchemaDefinition)
        assert action.output.schema_ is PingOutput
        assert action.input.schema_ == {}

    def test_schema_with_metadata(self):
        definition = SchemaDefinition(schema={'a': str}, title='A', description='An a.')
        assert definition.schema_ == {'a': str}
        assert definition.title == 'A'

    def test_channel_messages(self):
        channel = ChannelDefinition(messages={'text': {'text': str}})
        assert channel.messages['text'].schema_ == {'text': str}

    def test_optional_sections_default_to_none(self):
        definition = IntegrationDefinition(name='demo', version='1.0.0')
        assert definition.actions is None
        assert definition.user is None
        assert definition.secrets is None

    def test_name_and_version_are_required(self):
        with pytest.raises(ValidationError):
            IntegrationDefinition(name='demo')

    def test_definitions_are_frozen(self):
        definition = IntegrationDefinition(name='demo', version='1.0.0')
        with pytest.raises(ValidationError):
            definition.name = 'other'


class TestRuntime:
    """Tests for the Integration and Bot base classes."""

    def test_integration_handlers(self):
        def ping(**kwargs):
            return {'message': 'pong'}

        integration = Integration(actions={'ping': ping})
        assert integration.action('ping')() == {'message': 'pong'}

    def test_integration_props(self):
        props = IntegrationProps(channels={'dm': {'text': print}})
        integration = Integration(props)
        assert integration.message_handler('dm', 'text') is print

    def test_missing_handlers(self):
        integration = Integration()
        with pytest.raises(KeyError, match="action 'ping'"):
            integration.action('ping')
        with pytest.raises(KeyError, match="message 'text' of channel 'dm'"):
            integration.message_handler('dm', 'text')

    def test_bot_handlers(self):
        bot = Bot(BotProps(events={'reminder': print}))
        assert bot.event_handler('reminder') is print
        with pytest.raises(KeyError, match="event 'other'"):
            bot.event_handler('other')
