from contextlib import contextmanager

from sqlalchemy.orm import Session

import agency.repositories.customer as customer_repo
from agency.core.locking import customer_locks
from agency.errors import NotFoundError


@contextmanager
def locked_customer(db: Session, customer_id: int):
    """Hold the customer aggregate for a read-check-write cycle.

    Takes the in-process lock for the customer, drops everything the session
    has cached so later reads see committed state, and reads the customer row
    ``FOR UPDATE`` (a no-op on SQLite). Callers must call ``customer.touch()``
    inside their transaction so the version token is checked on commit.
    """
    with customer_locks.hold(customer_id):
        db.expire_all()
        customer = customer_repo.get_customer_for_update(db, customer_id)
        if not customer:
            raise NotFoundError(f"Customer with id {customer_id} not found")
        yield customer
