import io
import logging
import tarfile
import zlib
from typing import Callable, Iterator, Optional
from ..domain.errors import DecodeError
from ..domain.models import ArchiveEntry

logger = logging.getLogger(__name__)

EntryFilter = Callable[[ArchiveEntry], bool]
EntryCallback = Callable[[ArchiveEntry], None]

def accept_all(entry: ArchiveEntry) -> bool:
    return True

def iter_entries(buffer: bytes, filter: Optional[EntryFilter] = None) -> Iterator[ArchiveEntry]:
    """
    lazily walk a tar.gz buffer.

    the filter sees each entry before its content is read. content is only
    read for regular files the filter accepts; other accepted entries are
    yielded with buffer set to None.

    args:
        buffer: raw .tar.gz bytes
        filter: optional predicate, defaults to accepting everything

    yields:
        ArchiveEntry for every accepted member, in archive order

    raises:
        DecodeError: if the buffer is not a readable gzip/tar stream
    """
    filter = filter or accept_all
    try:
        # stream mode: members are read in order and skipped content is never decompressed into memory
        with tarfile.open(fileobj=io.BytesIO(buffer), mode="r|gz") as tar:
            for member in tar:
                path = member.name
                if member.isdir():
                    # tarfile strips the trailing slash, restore it so directories stay distinguishable
                    path = f"{path}/"

                if not filter(ArchiveEntry(path=path)):
                    continue

                if member.isfile():
                    fileobj = tar.extractfile(member)
                    yield ArchiveEntry(path=path, buffer=fileobj.read())
                else:
                    yield ArchiveEntry(path=path)
    except (tarfile.TarError, EOFError, zlib.error) as e:
        raise DecodeError(f"Could not read archive: {e}", cause=e) from e

async def untar_buffer(
    buffer: bytes,
    filter: Optional[EntryFilter] = None,
    on_entry: Optional[EntryCallback] = None,
) -> None:
    """decompress and walk a tar.gz buffer, calling on_entry for each entry the filter accepts."""
    count = 0
    for entry in iter_entries(buffer, filter):
        count += 1
        if on_entry:
            on_entry(entry)
    logger.debug(f"walked archive of {len(buffer)} bytes, {count} entries accepted")
