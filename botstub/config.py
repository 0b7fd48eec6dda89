import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from botstub.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['botstub.yaml', 'botstub.yml']


@dataclass(frozen=True)
class ProjectPaths:
    """Absolute paths of one generation run."""

    work_dir: Path
    entry_point: Path
    out_dir: Path


class ProjectConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='BOTSTUB_')

    entry_point: str = Field(
        'integration.definition.py',
        description='Python file exposing the integration or bot definition.',
    )

    out_dir: str = Field(
        'generated', description='Output directory for the generated package.'
    )

    work_dir: str = Field(
        '.', description='Directory the entry point and output are relative to.'
    )

    format_code: bool = Field(
        True, description='Whether to format the generated code with black.'
    )

    def resolve_paths(self) -> ProjectPaths:
        work_dir = Path(self.work_dir).expanduser().resolve()
        return ProjectPaths(
            work_dir=work_dir,
            entry_point=(work_dir / self.entry_point).resolve(),
            out_dir=(work_dir / self.out_dir).resolve(),
        )


def load_yaml(path: str | Path) -> dict:
    import yaml

    return yaml.load(Path(path).read_text(), Loader=yaml.FullLoader)


def _load_file(path: str | Path) -> dict:
    # JSON documents are valid YAML.
    import yaml

    if not Path(path).is_file():
        raise ConfigurationError('Configuration file not found', str(path))
    try:
        data = load_yaml(path)
    except yaml.YAMLError as e:
        raise ConfigurationError(f'Invalid configuration: {e}', str(path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError('Configuration must be a mapping', str(path))
    return data


def _validate(data: dict, source: str | None = None) -> ProjectConfig:
    try:
        return ProjectConfig(**data)
    except ValidationError as e:
        error = e.errors()[0]
        field = '.'.join(str(part) for part in error['loc']) or None
        raise ConfigurationError(error['msg'], source, field)


def get_config(path: str | None = None) -> ProjectConfig:
    """Load configuration from a file or return default config.

    Looks, in order, at ``path``, ``botstub.yaml``/``botstub.yml`` in the
    current directory and the ``[tool.botstub]`` table of ``pyproject.toml``.
    Environment variables prefixed with ``BOTSTUB_`` apply in every case.

    Raises:
        ConfigurationError: If the configuration cannot be read or is invalid.
    """
    if path:
        return _validate(_load_file(path), str(path))

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        candidate = Path(cwd) / filename
        if candidate.exists():
            return _validate(_load_file(candidate), str(candidate))

    pyproject_path = Path(cwd) / 'pyproject.toml'

    if pyproject_path.exists():
        import tomllib

        try:
            pyproject = tomllib.loads(pyproject_path.read_text())
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f'Invalid TOML: {e}', str(pyproject_path))
        tools = pyproject.get('tool', {})

        if 'botstub' in tools:
            return _validate(tools['botstub'], str(pyproject_path))

    return ProjectConfig()
