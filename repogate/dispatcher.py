"""
Command dispatcher for the repository management API.

Every command runs the same gate sequence and stops at the first failure:

    API flag -> pub/sig presence -> signature (+ one %20 retry)
    -> field validation -> business rule -> collaborator call -> audit

Failures are returned as CommandResult values; nothing raised by a gate or
a collaborator crosses this boundary.
"""

from collections.abc import Callable, Mapping
from datetime import datetime, timezone

from repogate.canonicalize import canonical_forms
from repogate.collaborators import (
    AuditSink,
    DescriptorValidator,
    IndexService,
    JobQueue,
    RepositoryStore,
)
from repogate.config import ApiConfig
from repogate.credentials import CredentialStore
from repogate.envelope import Command, SignedCommand
from repogate.exceptions import (
    AuthenticationError,
    ConflictError,
    DisabledError,
    MissingParameterError,
    NotFoundError,
    RepoGateError,
    ValidationError,
)
from repogate.logging import LoggingAuditSink, get_logger, log_command
from repogate.signing import verify_signature
from repogate.types.repos import FileTree, RepoDescriptor, RepoKind
from repogate.types.results import CommandResult
from repogate.validation import validate_fields
from repogate.validators import RepoDescriptorValidator

OPERATIONAL_FAILURE = "unable to complete request, please try again later"

_logger = get_logger()
_auth_logger = get_logger("auth")

_TIME_UNITS = (("day", 86400), ("hour", 3600), ("minute", 60), ("second", 1))


def time_ago(moment: datetime, now: datetime | None = None) -> str:
    """
    Describe moment relative to now in its largest whole unit.

    Naive datetimes are taken as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    elapsed = int((now - moment).total_seconds())
    for unit, seconds in _TIME_UNITS:
        if elapsed >= seconds:
            count = elapsed // seconds
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return "just now"


class CommandDispatcher:
    """
    Authenticates, validates and executes management commands.

    Example:
        ```python
        dispatcher = CommandDispatcher(
            config=ApiConfig(api_enabled=True),
            credentials=credential_store,
            repositories=repository_store,
            jobs=job_queue,
            index=index_service,
        )
        result = dispatcher.handle("delete", request.query_params)
        ```
    """

    def __init__(
        self,
        config: ApiConfig,
        credentials: CredentialStore,
        repositories: RepositoryStore,
        jobs: JobQueue,
        index: IndexService,
        validator: DescriptorValidator | None = None,
        audit: AuditSink | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            config: Feature flags
            credentials: Public key to secret lookup
            repositories: Repository descriptor store
            jobs: Crawler job queue
            index: Search index service
            validator: Descriptor business rules (default: RepoDescriptorValidator)
            audit: Audit sink (default: LoggingAuditSink)
        """
        self.config = config
        self._credentials = credentials
        self._repositories = repositories
        self._jobs = jobs
        self._index = index
        self._validator = validator or RepoDescriptorValidator()
        self._audit = audit or LoggingAuditSink()

        self._handlers: dict[Command, Callable[[dict[str, str]], CommandResult]] = {
            Command.REINDEX: self._reindex,
            Command.INDEX: self._enqueue,
            Command.LIST: self._list,
            Command.DELETE: self._delete,
            Command.ADD: self._add,
        }

    # Commands

    def reindex_all(
        self, pub: str | None = None, sig: str | None = None, hmac: str | None = None
    ) -> CommandResult:
        """Trigger a full reindex of every repository."""
        return self.handle(Command.REINDEX, {"pub": pub, "sig": sig, "hmac": hmac})

    def enqueue(
        self,
        repo_url: str | None = None,
        pub: str | None = None,
        sig: str | None = None,
        hmac: str | None = None,
    ) -> CommandResult:
        """Force a crawl job for the repository registered under repo_url."""
        return self.handle(
            Command.INDEX, {"repoUrl": repo_url, "pub": pub, "sig": sig, "hmac": hmac}
        )

    def list_all(
        self, pub: str | None = None, sig: str | None = None, hmac: str | None = None
    ) -> CommandResult:
        """Return every repository descriptor, as stored, in the payload."""
        return self.handle(Command.LIST, {"pub": pub, "sig": sig, "hmac": hmac})

    def delete(
        self,
        pub: str | None = None,
        sig: str | None = None,
        hmac: str | None = None,
        reponame: str | None = None,
    ) -> CommandResult:
        """Queue a repository for deletion."""
        return self.handle(
            Command.DELETE, {"pub": pub, "sig": sig, "hmac": hmac, "reponame": reponame}
        )

    def add(
        self,
        pub: str | None = None,
        sig: str | None = None,
        hmac: str | None = None,
        reponame: str | None = None,
        repourl: str | None = None,
        repotype: str | None = None,
        repousername: str | None = None,
        repopassword: str | None = None,
        reposource: str | None = None,
        repobranch: str | None = None,
    ) -> CommandResult:
        """Register a new repository."""
        return self.handle(
            Command.ADD,
            {
                "pub": pub,
                "sig": sig,
                "hmac": hmac,
                "reponame": reponame,
                "repourl": repourl,
                "repotype": repotype,
                "repousername": repousername,
                "repopassword": repopassword,
                "reposource": reposource,
                "repobranch": repobranch,
            },
        )

    def handle(
        self, command: Command | str, params: Mapping[str, str | None]
    ) -> CommandResult:
        """
        Run a command from its raw query parameters.

        Args:
            command: Command or its name ("reindex", "index", "list", "delete", "add")
            params: Raw query parameters of the request

        Returns:
            CommandResult describing the outcome
        """
        if not self.config.api_enabled:
            return CommandResult.fail(DisabledError().message)

        try:
            command = Command(command)
        except ValueError:
            return CommandResult.fail(f"unknown command {command}")

        log_command(command.value, dict(params))

        signed: SignedCommand | None = None
        try:
            signed = self._authenticate(command, params)
            fields = validate_fields(command, params)
            result = self._handlers[command](fields)
            if signed is not None:
                self._audit.log(
                    f"Valid signed {command.value} API call using publicKey={signed.public_key}"
                )
            return result
        except RepoGateError as e:
            if signed is not None:
                self._audit.log(
                    f"Rejected signed {command.value} API call using "
                    f"publicKey={signed.public_key}: {e.message}"
                )
            return CommandResult.fail(e.message)
        except Exception:
            _logger.exception(f"{command.value} command failed in a collaborator")
            if signed is not None:
                self._audit.log(
                    f"Rejected signed {command.value} API call using "
                    f"publicKey={signed.public_key}: {OPERATIONAL_FAILURE}"
                )
            return CommandResult.fail(OPERATIONAL_FAILURE)

    # Display lookups (not gated by the API flag)

    def get_repo(self, reponame: str | None) -> RepoDescriptor | None:
        """Look up a repository for display, with its credentials removed."""
        if reponame is None:
            return None
        descriptor = self._repositories.get_by_name(reponame)
        return descriptor.redacted() if descriptor is not None else None

    def get_file_count(self, reponame: str | None) -> str:
        """Number of indexed files of a repository as text, or "" without a name."""
        if reponame is None:
            return ""
        return str(self._index.get_project_stats(reponame).total_files)

    def repo_tree(self, reponame: str | None) -> FileTree | None:
        if reponame is None:
            return None
        return self._index.get_file_tree(reponame)

    def get_index_time(self, reponame: str | None, now: datetime | None = None) -> str:
        """How long ago the repository was last crawled, e.g. "5 minutes ago"."""
        if reponame is None:
            return ""
        descriptor = self._repositories.get_by_name(reponame)
        if descriptor is None or descriptor.job_run_time is None:
            return ""
        return time_ago(descriptor.job_run_time, now)

    def get_average_index_time_seconds(self, reponame: str | None) -> str:
        """Average crawl duration, rounded up to at least one second."""
        if reponame is None:
            return ""
        descriptor = self._repositories.get_by_name(reponame)
        if descriptor is None:
            return ""
        return str(descriptor.average_index_time_seconds + 1)

    # Gates

    def _authenticate(
        self, command: Command, params: Mapping[str, str | None]
    ) -> SignedCommand | None:
        """
        Verify the signature of a command.

        Returns:
            The verified envelope, or None when authentication is disabled

        Raises:
            MissingParameterError: If pub or sig is blank
            AuthenticationError: If the key is unknown or neither canonical
                form matches the signature
        """
        if not self.config.api_auth:
            return None

        signed = SignedCommand.from_params(command, params)

        if not signed.public_key.strip():
            raise MissingParameterError("pub")
        if not signed.signature.strip():
            raise MissingParameterError("sig")

        secret = self._credentials.resolve_secret(signed.public_key)
        if secret is None or not self._verify(signed, secret):
            self._audit.log(
                f"Invalid signed {command.value} API call using publicKey={signed.public_key}"
            )
            raise AuthenticationError()

        return signed

    def _verify(self, signed: SignedCommand, secret: bytes) -> bool:
        primary, alternate = canonical_forms(signed.parameters)
        if verify_signature(primary, signed.signature, secret, signed.algorithm):
            return True

        _auth_logger.debug(
            f"{signed.command.value}: '+' form rejected for publicKey={signed.public_key}, "
            f"retrying with '%20' spaces"
        )
        return verify_signature(alternate, signed.signature, secret, signed.algorithm)

    # Business rules and collaborator calls

    def _reindex(self, fields: dict[str, str]) -> CommandResult:
        self._index.reindex_all()
        return CommandResult.ok("reindex forced")

    def _enqueue(self, fields: dict[str, str]) -> CommandResult:
        repo_url = fields["repoUrl"]
        descriptor = self._repositories.get_by_url(repo_url)
        if descriptor is None:
            raise NotFoundError(f"Was unable to find repository {repo_url}")

        self._jobs.force_enqueue(descriptor)
        return CommandResult.ok(f"Enqueued repository {repo_url}")

    def _list(self, fields: dict[str, str]) -> CommandResult:
        return CommandResult.ok(payload=self._repositories.get_all())

    def _delete(self, fields: dict[str, str]) -> CommandResult:
        name = fields["reponame"]
        if self._repositories.get_by_name(name) is None:
            raise NotFoundError("repository already deleted")

        self._repositories.queue_delete(name)
        return CommandResult.ok("repository queued for deletion")

    def _add(self, fields: dict[str, str]) -> CommandResult:
        name = fields["reponame"]
        if self._repositories.get_by_name(name) is not None:
            raise ConflictError()

        descriptor = RepoDescriptor(
            name=name,
            url=fields["repourl"],
            kind=RepoKind(fields["repotype"]),
            username=fields["repousername"],
            password=fields["repopassword"],
            source=fields["reposource"],
            branch=fields["repobranch"],
        )

        outcome = self._validator.validate(descriptor)
        if not outcome.valid:
            raise ValidationError(outcome.reason)

        self._repositories.save(descriptor)
        return CommandResult.ok("added repository successfully")
