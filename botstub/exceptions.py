"""Custom exceptions for botstub.

This module defines the exceptions raised at the boundaries of the code
generation pipeline: loading a definition, composing the module graph and
writing the generated tree. Schema translation and definition normalization
never raise.
"""


class BotstubError(Exception):
    """Base exception for all botstub errors.

    All exceptions raised by botstub inherit from this class, making it easy
    to catch every generation failure with a single except clause.

    Example:
        try:
            codegen.generate()
        except BotstubError as e:
            print(f"botstub error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class LoadError(BotstubError):
    """The definition entry point could not be loaded.

    Raised when the definition file is missing, fails while being imported,
    or does not expose a usable definition object.

    Attributes:
        source: The path of the definition entry point.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | str | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load definition from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class GraphError(BotstubError):
    """The module graph is malformed.

    Raised eagerly when a dependency cycle is registered, when two modules
    resolve to the same output path, or when an import alias cannot be made
    unique. It always points at an internal composition bug.

    Attributes:
        module_path: The path of the module being registered, if known.
    """

    def __init__(self, message: str, module_path: str | None = None):
        self.module_path = module_path
        full_message = message
        if module_path:
            full_message = f"{message} (module '{module_path}')"
        super().__init__(full_message)


class WriteError(BotstubError):
    """Error writing generated output.

    Files written before the failure are left in place; a later successful
    run overwrites the whole tree.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class ConfigurationError(BotstubError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)
