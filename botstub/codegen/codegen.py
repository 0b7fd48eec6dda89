import asyncio
import logging
from typing import Any

from botstub import sdk
from botstub.codegen.bot import BotIndexModule
from botstub.codegen.definitions import (
    BotSpec,
    normalize_bot,
    normalize_integration,
)
from botstub.codegen.emitter import File, ModuleEmitter
from botstub.codegen.integration import IntegrationIndexModule
from botstub.codegen.loader import DefinitionLoader
from botstub.config import ProjectConfig

logger = logging.getLogger(__name__)

__all__ = [
    'Codegen',
    'build_integration_module',
    'build_bot_module',
    'generate_integration_files',
    'generate_bot_files',
]


async def build_integration_module(raw: Any) -> IntegrationIndexModule:
    """Normalize an integration definition and compose its module graph."""
    return await IntegrationIndexModule.create(normalize_integration(raw))


async def build_bot_module(raw: Any) -> BotIndexModule:
    """Normalize a bot definition and compose its module graph."""
    return await BotIndexModule.create(normalize_bot(raw))


def generate_integration_files(raw: Any, format_code: bool = True) -> list[File]:
    """Render the package of an integration definition without writing it."""
    root = asyncio.run(build_integration_module(raw))
    return ModuleEmitter(format_code=format_code).render(root)


def generate_bot_files(raw: Any, format_code: bool = True) -> list[File]:
    """Render the package of a bot definition without writing it."""
    root = asyncio.run(build_bot_module(raw))
    return ModuleEmitter(format_code=format_code).render(root)


def _is_bot(definition: Any) -> bool:
    return isinstance(definition, (sdk.BotDefinition, BotSpec))


class Codegen:
    """Generates the typed package of the definition a project points at.

    Every run regenerates the whole output tree from the definition.
    """

    def __init__(
        self,
        config: ProjectConfig,
        loader: DefinitionLoader | None = None,
        emitter: ModuleEmitter | None = None,
    ):
        self.config = config
        self.paths = config.resolve_paths()
        self._loader = loader or DefinitionLoader()
        self._emitter = emitter or ModuleEmitter(format_code=config.format_code)

    async def agenerate(self) -> list[File]:
        definition = self._loader.load(self.paths.entry_point)

        if _is_bot(definition):
            logger.info('Generating bot package in %s', self.paths.out_dir)
            root = await build_bot_module(definition)
        else:
            logger.info('Generating integration package in %s', self.paths.out_dir)
            root = await build_integration_module(definition)

        return self._emitter.write(root, self.paths.out_dir)

    def generate(self) -> list[File]:
        return asyncio.run(self.agenerate())
