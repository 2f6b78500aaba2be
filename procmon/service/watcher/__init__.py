from .process_watcher import ProcessWatcher, WatcherLease

__all__ = ["ProcessWatcher", "WatcherLease"]
