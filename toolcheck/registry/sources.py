"""Registry sources — where tool definitions are installed from.

Ids:
  github:<owner>/<repo>[@ref]   installed once its info.json has been fetched
  file:<path>                   installed if the directory exists
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..config import Settings
from ..report import Reporter, ReportLevel

logger = logging.getLogger(__name__)


class RegistrySource(Protocol):
    def get_display_name(self) -> str: ...

    def is_installed(self) -> bool: ...


@dataclass(frozen=True)
class GitHubRegistrySource:
    namespace: str
    name: str
    ref: str | None
    root: Path

    @property
    def info_file(self) -> Path:
        return self.root / "registries" / "github" / self.namespace / self.name / "info.json"

    def get_display_name(self) -> str:
        repo = f"{self.namespace}/{self.name}"
        return f"{repo} version: {self.ref}" if self.ref else repo

    def is_installed(self) -> bool:
        return self.info_file.is_file()


@dataclass(frozen=True)
class FileRegistrySource:
    path: Path

    def get_display_name(self) -> str:
        return f"{self.path} [local]"

    def is_installed(self) -> bool:
        return self.path.is_dir()


def parse_registry_id(registry_id: str, root: Path) -> RegistrySource:
    """Build a source from its id. Raises ValueError on an unknown scheme."""
    scheme, _, rest = registry_id.partition(":")
    if scheme == "github" and rest:
        repo, _, ref = rest.partition("@")
        namespace, _, name = repo.partition("/")
        if not namespace or not name:
            raise ValueError(f"Malformed GitHub registry id: {registry_id}")
        return GitHubRegistrySource(namespace=namespace, name=name, ref=ref or None, root=root)
    if scheme == "file" and rest:
        return FileRegistrySource(path=Path(rest).expanduser())
    raise ValueError(f"Unknown registry id: {registry_id}")


def iter_sources(settings: Settings) -> Iterator[RegistrySource]:
    """Configured sources, in order. Unparsable ids are skipped with a warning."""
    root = Path(settings.data_dir).expanduser()
    for registry_id in settings.registries:
        try:
            yield parse_registry_id(registry_id, root)
        except ValueError as e:
            logger.warning("Ignoring registry: %s", e)


def report_registries(sources: Iterator[RegistrySource], reporter: Reporter) -> None:
    for source in sources:
        if source.is_installed():
            reporter.report(ReportLevel.OK, f"Registry {source.get_display_name()} is installed.")
        else:
            reporter.report(
                ReportLevel.ERROR,
                f"Registry {source.get_display_name()} is not installed.",
            )
