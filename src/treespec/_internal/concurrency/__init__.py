from treespec._internal.concurrency.rwlock import ReadWriteLock

__all__ = ["ReadWriteLock"]
