from __future__ import annotations

import errno
from pathlib import Path


class PageLoaderError(RuntimeError):
    """Base class for every terminal pipeline failure."""


class FetchError(PageLoaderError):
    label = "Request failed"

    def __init__(self, url: str, *, target: str = "page", detail: str | None = None) -> None:
        self.url = url
        self.target = target
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        if self.detail:
            return f"{self.label} ({self.detail}): {self.url}"
        return f"{self.label}: {self.url}"


class NotFoundError(FetchError):
    def _format(self) -> str:
        return f"{self.target.capitalize()} not found (404): {self.url}"


class ForbiddenError(FetchError):
    def _format(self) -> str:
        return f"Access forbidden (403): {self.url}"


class ServerError(FetchError):
    def __init__(self, url: str, status: int, *, target: str = "page") -> None:
        self.status = status
        super().__init__(url, target=target)

    def _format(self) -> str:
        return f"Server error ({self.status}): {self.url}"


class HostUnresolvedError(FetchError):
    label = "Host could not be resolved"


class ConnectionRefusedFetchError(FetchError):
    label = "Connection refused"


class FetchTimeoutError(FetchError):
    label = "Request timed out"


class NetworkError(FetchError):
    label = "Network error"


class FilesystemError(PageLoaderError):
    def __init__(self, path: Path, *, operation: str, detail: str) -> None:
        self.path = path
        self.operation = operation
        super().__init__(f"Failed to {operation} {path}: {detail}")


class PermissionDeniedError(FilesystemError):
    pass


class DiskFullError(FilesystemError):
    pass


class DirectoryMissingError(FilesystemError):
    pass


_ERRNO_TO_FS_ERROR: dict[int, type[FilesystemError]] = {
    errno.EACCES: PermissionDeniedError,
    errno.EPERM: PermissionDeniedError,
    errno.EROFS: PermissionDeniedError,
    errno.ENOSPC: DiskFullError,
    errno.ENOENT: DirectoryMissingError,
    errno.ENOTDIR: DirectoryMissingError,
}


def filesystem_error(exc: OSError, path: Path, *, operation: str) -> FilesystemError:
    """Translate an OSError raised while touching `path` into the pipeline taxonomy."""

    cls = _ERRNO_TO_FS_ERROR.get(exc.errno or 0, FilesystemError)
    code = errno.errorcode.get(exc.errno or 0, "")
    detail = f"{code} {exc.strerror or exc}".strip()
    return cls(path, operation=operation, detail=detail)
