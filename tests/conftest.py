"""shared fixtures: in-memory tar.gz archives."""
import io
import sys
import tarfile
from pathlib import Path
from typing import Dict, Optional

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def build_archive(entries: Dict[str, Optional[bytes]]) -> bytes:
    """build a .tar.gz in memory. a None value makes the path a directory."""
    out = io.BytesIO()
    with tarfile.open(fileobj=out, mode="w:gz") as tar:
        for name, data in entries.items():
            info = tarfile.TarInfo(name)
            if data is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            else:
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))
    return out.getvalue()


@pytest.fixture
def make_archive():
    return build_archive


@pytest.fixture
def system_archive():
    """archive from the registry's system-1.2.0 package."""
    return build_archive({
        "system-1.2.0/kibana/dashboard/": None,
        "system-1.2.0/kibana/dashboard/sample.json": b'{"title": "sample"}',
    })
