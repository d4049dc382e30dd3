"""
Per-command field rules.

Every command's required fields live in one declarative table consumed by
a single validation routine.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from repogate.envelope import Command
from repogate.exceptions import MissingParameterError
from repogate.types.repos import DEFAULT_BRANCH, RepoKind


def _normalize_kind(value: str) -> str:
    return RepoKind.normalize(value).value


def _default_branch(value: str) -> str:
    return value if value.strip() else DEFAULT_BRANCH


@dataclass(frozen=True)
class FieldRule:
    """
    Presence and normalization rule for one parameter.

    Attributes:
        name: Query parameter name
        allow_blank: Accept an empty or whitespace value as long as the
            parameter is present
        normalize: Optional transform applied to the accepted value
    """

    name: str
    allow_blank: bool = False
    normalize: Callable[[str], str] | None = None

    def apply(self, params: Mapping[str, str | None]) -> str:
        value = params.get(self.name)
        if value is None or (not self.allow_blank and not value.strip()):
            raise MissingParameterError(self.name)
        return self.normalize(value) if self.normalize else value


COMMAND_FIELDS: dict[Command, tuple[FieldRule, ...]] = {
    Command.REINDEX: (),
    Command.INDEX: (FieldRule("repoUrl"),),
    Command.LIST: (),
    Command.DELETE: (FieldRule("reponame"),),
    Command.ADD: (
        FieldRule("reponame"),
        FieldRule("repourl"),
        FieldRule("repotype", allow_blank=True, normalize=_normalize_kind),
        FieldRule("repousername", allow_blank=True),
        FieldRule("repopassword", allow_blank=True),
        FieldRule("reposource", allow_blank=True),
        FieldRule("repobranch", allow_blank=True, normalize=_default_branch),
    ),
}


def validate_fields(
    command: Command, params: Mapping[str, str | None]
) -> dict[str, str]:
    """
    Check and normalize the fields of a command.

    Stops at the first violation, in table order.

    Args:
        command: Command being validated
        params: Raw query parameters

    Returns:
        Normalized values keyed by parameter name

    Raises:
        MissingParameterError: On the first absent or blank required field
    """
    return {rule.name: rule.apply(params) for rule in COMMAND_FIELDS[command]}
