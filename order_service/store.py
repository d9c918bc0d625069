"""
In-memory order store: keyed by id, monotonic id assignment.
One lock guards the sequence and the map so id assignment + write is a single unit.
Records are copied on the way in and out; callers never share the stored object.
"""
import dataclasses
import logging
import threading
from typing import Callable

from order_service.models import Order

logger = logging.getLogger(__name__)

INITIAL_SEQUENCE = 1


def _copy(order: Order) -> Order:
    return dataclasses.replace(order)


class OrderStore:
    def __init__(self) -> None:
        self._orders: dict[int, Order] = {}
        self._next_id = INITIAL_SEQUENCE
        self._lock = threading.Lock()

    def save(self, order: Order) -> Order:
        """
        Persist order. id None/0 -> assign next id; otherwise overwrite the record at that id.
        Sets the id on the passed object and returns a copy of what was stored.
        """
        with self._lock:
            if not order.id:
                order.id = self._next_id
                self._next_id += 1
            elif order.id >= self._next_id:
                # explicit ids never collide with a later assignment
                self._next_id = order.id + 1
            stored = _copy(order)
            self._orders[stored.id] = stored
            return _copy(stored)

    def find_by_id(self, order_id: int) -> Order | None:
        with self._lock:
            order = self._orders.get(order_id)
            return _copy(order) if order is not None else None

    def find_all(self) -> list[Order]:
        with self._lock:
            return [_copy(self._orders[k]) for k in sorted(self._orders)]

    def exists_by_id(self, order_id: int) -> bool:
        with self._lock:
            return order_id in self._orders

    def count(self) -> int:
        with self._lock:
            return len(self._orders)

    def update(self, order_id: int, mutate: Callable[[Order], None]) -> Order | None:
        """
        Single-record transaction: read, mutate a private copy, write back.
        Returns None if order_id is absent. If mutate raises, nothing is written.
        """
        with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                return None
            working = _copy(current)
            mutate(working)
            working.id = order_id
            self._orders[order_id] = working
            return _copy(working)

    def clear(self) -> int:
        """Drop every record and reset the id sequence. Returns number of records removed."""
        with self._lock:
            removed = len(self._orders)
            self._orders.clear()
            self._next_id = INITIAL_SEQUENCE
        logger.info("Order store cleared (%d record(s) removed)", removed)
        return removed
