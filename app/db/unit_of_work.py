"""
All-or-nothing unit of work on top of a SQLAlchemy session.

    with unit_of_work(db):
        user.membership_tier = MembershipTier.BASIC
        db.query(UserMetadata).filter(...).delete()

Everything done on the session inside the block is committed together when
the block exits normally. Any exception rolls the whole transaction back and
is re-raised to the caller.
"""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    if not db.in_transaction():
        db.begin()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
