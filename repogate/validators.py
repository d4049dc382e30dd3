"""Default business rules for new repository descriptors."""

import re

from repogate.types.repos import RepoDescriptor, RepoKind
from repogate.types.results import ValidationOutcome

_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+$")
_REMOTE_URL_PATTERN = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.-]*://|[^@\s]+@[^:\s]+:)\S+$")


class RepoDescriptorValidator:
    """
    Checks a descriptor before it is persisted.

    - name: letters, digits, ``.``, ``_`` and ``-`` only
    - url: non-blank; for git and svn a URL or scp-style remote,
      for file an absolute path
    - a password is only accepted together with a username
    """

    def validate(self, descriptor: RepoDescriptor) -> ValidationOutcome:
        if not descriptor.name.strip():
            return ValidationOutcome.fail("Repository Name cannot be empty")

        if not _NAME_PATTERN.match(descriptor.name):
            return ValidationOutcome.fail(
                "Repository Name must contain only letters, digits, '.', '_' or '-'"
            )

        url = descriptor.url.strip()
        if not url:
            return ValidationOutcome.fail("Repository Location cannot be empty")

        if descriptor.kind is RepoKind.FILE:
            if not url.startswith("/"):
                return ValidationOutcome.fail(
                    "Repository Location must be an absolute path for file repositories"
                )
        elif not _REMOTE_URL_PATTERN.match(url):
            return ValidationOutcome.fail(
                f"Repository Location is not a valid {descriptor.kind.value} remote"
            )

        if descriptor.password and not descriptor.username:
            return ValidationOutcome.fail(
                "Repository Username is required when a password is supplied"
            )

        return ValidationOutcome.ok()
