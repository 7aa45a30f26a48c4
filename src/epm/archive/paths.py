from typing import List, Optional
from ..domain.models import AssetParts

DATASET_MARKER = "dataset"
FIELDS_TYPE = "fields"

def _split(path: str) -> List[Optional[str]]:
    """split into exactly four segments, padding with None."""
    segments: List[Optional[str]] = path.split("/")[:4]
    return segments + [None] * (4 - len(segments))

def parse_path(path: str) -> AssetParts:
    """
    derive the asset parts of an archive path.

    handles three layouts:
      pkgkey/service/type/file
      pkgkey/dataset/<name>/service/type/file
      pkgkey/service/fields.yml (no type, treated as a fields definition)
    """
    dataset = None
    pkgkey, service, type_, file = _split(path)

    if service == DATASET_MARKER:
        dataset = type_
        # drop the `dataset/<name>/` portion and re-parse
        if dataset:
            pkgkey, service, type_, file = _split(path.replace(f"{DATASET_MARKER}/{dataset}/", "", 1))

    # fields.yml files sit directly under the service directory
    if file is None:
        file = type_
        type_ = FIELDS_TYPE
        service = ""

    return AssetParts(
        pkgkey=pkgkey,
        service=service,
        type=type_,
        file=file,
        dataset=dataset,
        path=path,
    )
