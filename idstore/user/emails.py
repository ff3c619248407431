"""Secondary email addresses of users."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from idstore.core.exceptions import ValidationError
from idstore.user.exceptions import EmailAddressNotExistError, EmailAlreadyUsedError
from idstore.user.models import EmailAddress
from idstore.user.names import normalize_email
from idstore.user.store import UsersStore

logger = logging.getLogger(__name__)


class UserEmailsStore:
    def __init__(self, session: Session, users: UsersStore | None = None):
        self.session = session
        self.users = users or UsersStore(session)

    def create(self, owner_id: int, email: str, activated: bool = False) -> EmailAddress:
        """Attach a secondary email address to a user.

        Raises:
            UserNotExistError: If the owner is absent
            ValidationError: If the address is empty
            EmailAlreadyUsedError: If the address is taken
        """
        self.users.get_by_id(owner_id)

        key = normalize_email(email)
        if not key:
            raise ValidationError("Email address must not be empty", {"email": email})

        if self._find(key) is not None or self.users.find_by_email(key) is not None:
            raise EmailAlreadyUsedError(email=key)

        address = EmailAddress(owner_id=owner_id, email=key, is_activated=activated)
        self.session.add(address)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise EmailAlreadyUsedError(email=key) from e

        self.session.refresh(address)
        return address

    def verify(self, email: str) -> EmailAddress:
        """Activate a secondary address so it resolves in email lookups.

        Activation is one-way; verifying an activated address is a no-op.

        Raises:
            EmailAddressNotExistError: If the address is unknown
            EmailAlreadyUsedError: If another account now owns the address
        """
        address = self._find(email)
        if address is None:
            raise EmailAddressNotExistError(email=email)
        if address.is_activated:
            return address

        owner = self.users.find_by_email(address.email)
        if owner is not None and owner.id != address.owner_id:
            raise EmailAlreadyUsedError(email=address.email)

        address.is_activated = True
        self.session.add(address)
        self.session.commit()
        self.session.refresh(address)
        logger.info(
            "Activated email address", extra={"user_id": address.owner_id}
        )
        return address

    def list_by_owner(self, owner_id: int) -> list[EmailAddress]:
        return list(
            self.session.exec(
                select(EmailAddress)
                .where(EmailAddress.owner_id == owner_id)
                .order_by(col(EmailAddress.id))
            ).all()
        )

    def _find(self, email: str) -> EmailAddress | None:
        key = normalize_email(email)
        if not key:
            return None
        return self.session.exec(
            select(EmailAddress).where(EmailAddress.email == key)
        ).first()
