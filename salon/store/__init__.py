from salon.store.base import BookingStore, Transaction
from salon.store.memory import InMemoryStore

__all__ = ["BookingStore", "Transaction", "InMemoryStore"]
