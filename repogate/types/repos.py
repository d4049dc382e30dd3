"""Repository-related data models."""

from dataclasses import asdict, dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any

DEFAULT_BRANCH = "master"


class RepoKind(str, Enum):
    """Source control kind of a tracked repository."""

    GIT = "git"
    SVN = "svn"
    FILE = "file"

    @classmethod
    def normalize(cls, value: str | None) -> "RepoKind":
        """
        Map a free-text repository type onto a known kind.

        The value is trimmed and lowercased; anything that is not a known
        kind falls back to git.
        """
        token = (value or "").strip().lower()
        for kind in cls:
            if kind.value == token:
                return kind
        return cls.GIT


@dataclass(frozen=True)
class RepoDescriptor:
    """A tracked repository as persisted by the repository store."""

    name: str
    url: str
    kind: RepoKind = RepoKind.GIT
    username: str | None = ""
    password: str | None = ""
    source: str = ""
    branch: str = DEFAULT_BRANCH
    extra_config: str = "{}"
    id: int = -1  # -1 until the store assigns one
    job_run_time: datetime | None = None  # end of the last crawl, None if never crawled
    average_index_time_seconds: int = 0

    def redacted(self) -> "RepoDescriptor":
        """Return a copy safe for display, with credentials removed."""
        return replace(self, username=None, password=None)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        if self.job_run_time is not None:
            data["job_run_time"] = self.job_run_time.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RepoDescriptor":
        job_run_time = data.get("job_run_time")
        return cls(
            id=data.get("id", -1),
            name=data["name"],
            url=data["url"],
            kind=RepoKind.normalize(data.get("kind")),
            username=data.get("username"),
            password=data.get("password"),
            source=data.get("source", ""),
            branch=data.get("branch") or DEFAULT_BRANCH,
            extra_config=data.get("extra_config", "{}"),
            job_run_time=datetime.fromisoformat(job_run_time.rstrip("Z")) if job_run_time else None,
            average_index_time_seconds=data.get("average_index_time_seconds", 0),
        )


@dataclass(frozen=True)
class ProjectStats:
    """Index statistics for a single repository."""

    name: str
    total_files: int


@dataclass(frozen=True)
class FileTree:
    """Indexed file paths of a single repository."""

    name: str
    paths: tuple[str, ...] = ()
