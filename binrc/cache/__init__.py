"""Binary cache: resolution, store layout, download and installation.

This package provides:
- Version ranges and naming templates (versions.py, templates.py)
- Project resolution (project.py)
- Store layout (store.py)
- Artifact download (http.py) and installation (installer.py)
- The orchestrator tying them together (cache.py)
"""

from binrc.cache.cache import Cache, release_url
from binrc.cache.errors import (
    BinaryNotFoundInArchive,
    CacheError,
    CorruptArchive,
    DownloadFailed,
    InstallError,
    InstallFailed,
    InvalidVersion,
    NoMatchingTemplate,
    ResolveError,
    UnknownProject,
    UnknownVersion,
)
from binrc.cache.http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from binrc.cache.installer import Installer
from binrc.cache.project import Project, ProjectResolver
from binrc.cache.store import CacheStore, target_path
from binrc.cache.templates import (
    DEFAULT_RULE,
    Catalog,
    NamingPattern,
    TemplateRule,
    TemplateTable,
    bundled_catalog_path,
    load_catalog,
)
from binrc.cache.versions import VersionRange

__all__ = [
    # Orchestrator
    "Cache",
    "release_url",
    # Resolution
    "Project",
    "ProjectResolver",
    "VersionRange",
    # Templates
    "Catalog",
    "DEFAULT_RULE",
    "NamingPattern",
    "TemplateRule",
    "TemplateTable",
    "bundled_catalog_path",
    "load_catalog",
    # Store
    "CacheStore",
    "target_path",
    # HTTP
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # Install
    "Installer",
    # Errors
    "BinaryNotFoundInArchive",
    "CacheError",
    "CorruptArchive",
    "DownloadFailed",
    "InstallError",
    "InstallFailed",
    "InvalidVersion",
    "NoMatchingTemplate",
    "ResolveError",
    "UnknownProject",
    "UnknownVersion",
]
