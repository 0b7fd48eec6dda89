import ast
import keyword
import re
import unicodedata

import black

__all__ = (
    'GENERATED_HEADER',
    'RESERVED_NAMES',
    'class_name',
    'format_source',
    'module_name',
    'render_module',
    'sanitize_field_name',
    'sanitize_identifier',
    'secret_env_variable_name',
    'to_snake_case',
    'validate_python_syntax',
)

GENERATED_HEADER = '# This file was generated by botstub. Do not edit it manually.'

# Names imported by generated files; generated classes must not shadow them.
RESERVED_NAMES = frozenset(
    {
        'Any',
        'BaseModel',
        'Field',
        'Literal',
        'RootModel',
        'TypedDict',
        'UUID',
        'date',
        'datetime',
        'environ',
        'sdk',
        'time',
    }
)


def capitalize(input_string):
    if not input_string:
        return ''
    return input_string[0].upper() + input_string[1:]


def remove_accents(input_str):
    nfkd_form = unicodedata.normalize('NFKD', input_str)
    return ''.join(c for c in nfkd_form if not unicodedata.combining(c))


def sanitize_name_python_keywords(name: str) -> str:
    if keyword.iskeyword(name):
        return f'{name}_'
    return name


def sanitize_field_name(name: str) -> str:
    """Sanitize field names to be valid Python identifiers.

    - Replace spaces and hyphens with underscores
    - Remove other invalid characters
    - Ensure it doesn't start with a digit
    """
    if not name:
        raise ValueError('Name cannot be empty')

    sanitized = sanitize_name_python_keywords(name)
    sanitized = re.sub(r'[-\s.]+', '_', remove_accents(sanitized))
    sanitized = re.sub(r'[^A-Za-z0-9_]', '', sanitized)

    if sanitized and sanitized[0].isdigit():
        sanitized = '_' + sanitized
    return sanitized or '_'


def sanitize_identifier(name: str) -> str:
    """Convert a string into a PascalCase Python identifier.

    - Split on every character that is not a letter or a digit
    - Capitalize each part and join them
    - Ensure it doesn't start with a digit
    """
    if not name:
        return 'UnnamedType'

    parts = re.sub(r'[^A-Za-z0-9]+', '_', remove_accents(name)).split('_')
    sanitized = ''.join(capitalize(part) for part in parts if part)

    if sanitized and sanitized[0].isdigit():
        sanitized = '_' + sanitized

    return sanitized or 'UnnamedType'


def class_name(name: str) -> str:
    """PascalCase class name that is neither a keyword nor a reserved import."""
    sanitized = sanitize_identifier(name)
    if keyword.iskeyword(sanitized) or sanitized in RESERVED_NAMES:
        return f'{sanitized}_'
    return sanitized


def to_snake_case(name: str) -> str:
    """Convert ``sendMessage``, ``send-message`` or ``Send Message`` to
    ``send_message``."""
    name = remove_accents(name)
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
    name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    return re.sub(r'[^A-Za-z0-9]+', '_', name).strip('_').lower()


def module_name(name: str) -> str:
    """Importable module or package name for a definition entry."""
    sanitized = to_snake_case(name) or 'unnamed'
    if sanitized[0].isdigit():
        sanitized = f'_{sanitized}'
    return sanitize_name_python_keywords(sanitized)


def secret_env_variable_name(name: str) -> str:
    """Environment variable holding the value of a secret.

    Example:
        >>> secret_env_variable_name('apiKey')
        'SECRET_API_KEY'
    """
    return f'SECRET_{to_snake_case(name).upper()}'


def validate_python_syntax(content: str, filename: str = '<generated>') -> None:
    """Validate that the content is valid Python code.

    Args:
        content: Python source code as a string.
        filename: Name reported in the SyntaxError.

    Raises:
        SyntaxError: If the code is not valid Python.
    """
    compile(content, filename, 'exec')


def format_source(source: str) -> str:
    """Format source code using black."""
    return black.format_str(source, mode=black.Mode())


def render_module(body: list[ast.stmt], filename: str = '<generated>') -> str:
    """Render a list of AST statements to Python source.

    This method:
    1. Creates an AST Module from the statements
    2. Fixes missing locations in the AST
    3. Unparses the AST to Python source code
    4. Validates the code by compiling it
    5. Prepends the generated-file header

    Args:
        body: List of AST statement nodes to render.
        filename: Name used in syntax error reports.

    Returns:
        The source text, terminated by a newline.

    Raises:
        SyntaxError: If the generated code is not valid Python.
    """
    mod = ast.Module(body=body, type_ignores=[])
    ast.fix_missing_locations(mod)

    file_content = ast.unparse(mod)
    validate_python_syntax(file_content, filename)

    if file_content:
        return f'{GENERATED_HEADER}\n\n{file_content}\n'
    return f'{GENERATED_HEADER}\n'
