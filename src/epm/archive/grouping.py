import re
from typing import Dict, Iterable, List
from ..domain.models import AssetParts, AssetsGroupedByServiceByType, KIBANA_ASSET_TYPES
from .paths import parse_path

PACKAGE_PREFIX = re.compile(r"^/package/")

def group_paths_by_service(paths: Iterable[str]) -> AssetsGroupedByServiceByType:
    """
    group asset paths by service, then by asset type.

    only kibana asset types are kept, everything else is dropped. groups keep
    the order in which paths were given.
    """
    assets: Dict[str, Dict[str, List[AssetParts]]] = {}
    for path in paths:
        parts = parse_path(PACKAGE_PREFIX.sub("", path))
        if parts.type not in KIBANA_ASSET_TYPES:
            continue
        assets.setdefault(parts.service, {}).setdefault(parts.type, []).append(parts)

    # elasticsearch assets are not grouped yet
    return {
        "kibana": assets.get("kibana", {}),
    }
