# Infrastructure Adapters Package
from .signal_loader import load_signals
from .snapshot_store import InMemorySnapshotRepository, JsonSnapshotRepository

__all__ = ["InMemorySnapshotRepository", "JsonSnapshotRepository", "load_signals"]
