"""Application-level errors surfaced to adapters."""


class SnapshotRebuildError(RuntimeError):
    """Raised when snapshots could not be rebuilt from the balance store.

    A mutation may already be stored when this is raised; callers recover by
    retrying ``SnapshotCache.invalidate()``. The cache keeps serving the last
    sequence that was built successfully.
    """


__all__ = ["SnapshotRebuildError"]
