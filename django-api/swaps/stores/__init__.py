from swaps.stores.interfaces import (
    EventStore,
    SwapRequestStore,
    SwapStorage,
    SwapTransaction,
)

__all__ = ["EventStore", "SwapRequestStore", "SwapStorage", "SwapTransaction"]
