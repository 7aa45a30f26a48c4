from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Dict, Optional
from packaging.version import Version

ARCHIVE_SUFFIX = ".tar.gz"

class KibanaAssetType(str, Enum):
    """asset types the kibana platform knows how to load."""
    DASHBOARD = "dashboard"
    VISUALIZATION = "visualization"
    SEARCH = "search"
    INDEX_PATTERN = "index-pattern"
    MAP = "map"

KIBANA_ASSET_TYPES = frozenset(t.value for t in KibanaAssetType)

class RegistryPackage(BaseModel):
    """package metadata as served by the registry's /package endpoint."""
    model_config = ConfigDict(extra="allow")

    name: str
    version: str
    download: str
    title: Optional[str] = None
    description: str = ""
    type: Optional[str] = None
    path: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    assets: List[str] = Field(default_factory=list)
    icons: List[dict] = Field(default_factory=list)

    @property
    def pkgkey(self) -> str:
        return pkg_to_pkgkey(self)

    @property
    def parsed_version(self) -> Version:
        return Version(self.version)

class RegistrySearchResult(BaseModel):
    """one hit from the registry's /search endpoint."""
    model_config = ConfigDict(extra="allow")

    name: str
    version: str
    title: Optional[str] = None
    description: str = ""
    download: Optional[str] = None
    path: Optional[str] = None

RegistrySearchResults = List[RegistrySearchResult]

class CategorySummaryItem(BaseModel):
    id: str
    title: str
    count: int = 0

CategorySummaryList = List[CategorySummaryItem]

class AssetParts(BaseModel):
    """
    an archive path broken into its parts.

    derived from the path string alone, never stored or mutated.
    """
    model_config = ConfigDict(frozen=True)

    pkgkey: str
    service: str
    type: Optional[str] = None
    file: Optional[str] = None
    dataset: Optional[str] = None
    path: str

class ArchiveEntry(BaseModel):
    """a single member of an archive. buffer is None for directories and for unread entries."""
    path: str
    buffer: Optional[bytes] = None

AssetsGroupedByServiceByType = Dict[str, Dict[str, List[AssetParts]]]

def pkg_to_pkgkey(pkg: RegistryPackage) -> str:
    """build the `name-version` key for a package."""
    return f"{pkg.name}-{pkg.version}"

def archive_key(pkgkey: str) -> str:
    """cache key for the raw archive of a package."""
    # assume .tar.gz for now. add .zip if the registry starts serving it
    return f"{pkgkey}{ARCHIVE_SUFFIX}"
