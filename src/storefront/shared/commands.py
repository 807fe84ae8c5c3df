"""Command dispatch for writes that must not interleave.

Stock reservations, order status moves and coupon redemptions read a row,
check it and write it back. Within one process those commands run one at a
time, commit included: the memory provider commits whole snapshots, so two
overlapping units of work would drop one another's writes. Across processes
the inventory rows are locked by ``InventoryRepository.lock_for_products``.
"""

import threading

from protean.utils.globals import current_domain

_write_lock = threading.RLock()


def process_exclusively(command):
    """Process ``command`` synchronously while holding the process-wide write lock."""
    with _write_lock:
        return current_domain.process(command, asynchronous=False)
