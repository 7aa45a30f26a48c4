from typing import Optional

class EpmError(Exception):
    """base class for exceptions in epm."""
    pass

class RegistryUnavailable(EpmError):
    """raised when the registry cannot be reached or answers with a non-2xx status."""
    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        message = f"Registry request to {url} failed"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)

class RegistryResponseInvalid(EpmError):
    """raised when a registry response is not valid JSON or has the wrong shape."""
    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        super().__init__(f"Invalid response from {url}: {cause}")

class ArchiveUnavailable(EpmError):
    """raised when no archive bytes can be obtained for a package."""
    def __init__(self, pkgkey: str, cause: Optional[BaseException] = None):
        self.pkgkey = pkgkey
        self.cause = cause
        super().__init__(f"No archive buffer for {pkgkey}")

class AssetNotFound(EpmError):
    """raised when an asset is not in the content cache."""
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Cannot find asset {key}")

class DecodeError(EpmError):
    """raised when an archive is not a readable gzip/tar stream."""
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)
