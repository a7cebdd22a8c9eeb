"""Credential store: account lookup and persistence behind a narrow interface."""

import logging
from typing import Protocol

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bookcircle.core.errors import ConflictError, InternalError
from bookcircle.models import Account

logger = logging.getLogger(__name__)


class AccountRepository(Protocol):
    """What the auth service needs from a credential store."""

    def find_by_identifier(self, identifier: str) -> Account | None: ...

    def find_by_id(self, account_id: int) -> Account | None: ...

    def exists(self, username: str, email: str | None) -> bool: ...

    def insert(self, account: Account) -> Account: ...

    def update_role(self, account: Account, role: str) -> Account: ...

    def list_all(self) -> list[Account]: ...


class SqlAccountRepository:
    """
    AccountRepository backed by a SQLAlchemy session.

    Store failures are logged and re-raised as InternalError; unique index
    violations on insert (e.g. two concurrent registrations) become ConflictError.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_identifier(self, identifier: str) -> Account | None:
        """Match on username, or on email (case-insensitive) when the identifier looks like one."""
        conditions = [Account.username == identifier]
        if "@" in identifier:
            conditions.append(Account.email == identifier.lower())
        try:
            return self.session.query(Account).filter(or_(*conditions)).first()
        except SQLAlchemyError as e:
            logger.exception("Account lookup by identifier failed")
            raise InternalError() from e

    def find_by_id(self, account_id: int) -> Account | None:
        try:
            return self.session.get(Account, account_id)
        except SQLAlchemyError as e:
            logger.exception("Account lookup by id failed", extra={"account_id": account_id})
            raise InternalError() from e

    def exists(self, username: str, email: str | None) -> bool:
        conditions = [Account.username == username]
        if email:
            conditions.append(Account.email == email)
        try:
            count = (
                self.session.query(func.count(Account.id))
                .filter(or_(*conditions))
                .scalar()
            )
        except SQLAlchemyError as e:
            logger.exception("Account existence check failed")
            raise InternalError() from e
        return bool(count)

    def insert(self, account: Account) -> Account:
        try:
            self.session.add(account)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ConflictError() from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Account insert failed")
            raise InternalError() from e
        self.session.refresh(account)
        return account

    def update_role(self, account: Account, role: str) -> Account:
        try:
            account.role = role
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Account role update failed", extra={"account_id": account.id})
            raise InternalError() from e
        self.session.refresh(account)
        return account

    def list_all(self) -> list[Account]:
        try:
            return self.session.query(Account).order_by(Account.id).all()
        except SQLAlchemyError as e:
            logger.exception("Account listing failed")
            raise InternalError() from e
