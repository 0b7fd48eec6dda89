import ast

from botstub.codegen.ast_utils import (
    ImportCollector,
    _ann_assign,
    _attr,
    _call,
    _name,
    _subscript,
    _tuple,
)
from botstub.codegen.module import INIT_FILE, Module
from botstub.codegen.types import unique_name
from botstub.codegen.utils import (
    sanitize_field_name,
    secret_env_variable_name,
    to_snake_case,
)

__all__ = ['SecretsModule']


class SecretsModule(Module):
    """One module level string per secret, read from ``SECRET_<NAME>``.

    ``SECRETS`` maps every declared secret name to its value. Unset
    variables read as an empty string.
    """

    def __init__(self, secrets: tuple[str, ...]):
        super().__init__(INIT_FILE, 'SECRETS')
        self.secrets = secrets

    @classmethod
    async def create(cls, secrets: tuple[str, ...]) -> 'SecretsModule':
        return cls(secrets)

    def constants(self) -> list[tuple[str, str]]:
        """``(secret name, constant name)`` pairs in declared order.

        Secrets read from the same environment variable (``apiKey`` and
        ``api_key``) share one constant.
        """
        taken = {self.export_name, 'environ'}
        by_variable: dict[str, str] = {}
        result = []
        for secret in self.secrets:
            variable = secret_env_variable_name(secret)
            constant = by_variable.get(variable)
            if constant is None:
                constant = sanitize_field_name(to_snake_case(secret).upper() or 'SECRET')
                constant = unique_name(constant, taken)
                taken.add(constant)
                by_variable[variable] = constant
            result.append((secret, constant))
        return result

    def build(
        self, imports: ImportCollector, aliases: dict[Module, str]
    ) -> list[ast.stmt]:
        body: list[ast.stmt] = []
        constants = self.constants()
        if constants:
            imports.add_import('os', 'environ')

        declared: set[str] = set()
        for secret, constant in constants:
            if constant in declared:
                continue
            declared.add(constant)
            body.append(
                _ann_assign(
                    constant,
                    _name('str'),
                    _call(
                        _attr('environ', 'get'),
                        args=[
                            ast.Constant(value=secret_env_variable_name(secret)),
                            ast.Constant(value=''),
                        ],
                    ),
                )
            )

        body.append(
            _ann_assign(
                self.export_name,
                _subscript('dict', _tuple([_name('str'), _name('str')])),
                ast.Dict(
                    keys=[ast.Constant(value=secret) for secret, _ in constants],
                    values=[_name(constant) for _, constant in constants],
                ),
            )
        )
        return body
