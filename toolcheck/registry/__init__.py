"""Registry sources — listing and installed state."""

from .sources import (
    FileRegistrySource,
    GitHubRegistrySource,
    RegistrySource,
    iter_sources,
    parse_registry_id,
    report_registries,
)
