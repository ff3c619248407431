"""User store.

Create and look up users with case-insensitive name uniqueness and
email uniqueness among accounts that are resolvable by email.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from idstore.core.mixins import Clock, utc_now
from idstore.user.exceptions import (
    EmailAlreadyUsedError,
    UserAlreadyExistError,
    UserNotExistError,
)
from idstore.user.models import EmailAddress, User, UserType
from idstore.user.names import ensure_name_allowed, normalize_email, normalize_name
from idstore.user.password import DEFAULT_ROUNDS, generate_salt, hash_password
from idstore.user.schemas import CreateUserOptions

logger = logging.getLogger(__name__)


class UsersStore:
    """Database-backed store for User rows.

    Uniqueness is checked up front for clear errors and enforced again
    by the database's unique indexes at commit time, so concurrent
    creations of the same identity fail instead of producing duplicates.
    """

    def __init__(
        self,
        session: Session,
        now_func: Clock = utc_now,
        password_rounds: int = DEFAULT_ROUNDS,
    ):
        self.session = session
        self.now_func = now_func
        self.password_rounds = password_rounds

    def create(
        self, name: str, email: str, options: CreateUserOptions | None = None
    ) -> User:
        """Create a new user.

        Validation order: reserved name, name uniqueness, email
        uniqueness. Nothing is written unless all three pass.

        Raises:
            NameNotAllowedError: If the name is empty or reserved
            UserAlreadyExistError: If the name is taken
            EmailAlreadyUsedError: If the email belongs to an eligible account
            ValidationError: If the password cannot be hashed
        """
        options = options or CreateUserOptions()

        ensure_name_allowed(name)

        if self.find_by_username(name) is not None:
            raise UserAlreadyExistError(name=name)

        email = normalize_email(email)
        if email and self.find_by_email(email) is not None:
            raise EmailAlreadyUsedError(email=email)

        now = self.now_func()
        salt = generate_salt(self.password_rounds)
        user = User(
            name=name,
            lower_name=normalize_name(name),
            full_name=options.full_name,
            email=email,
            password_hash=hash_password(options.password, salt),
            salt=salt,
            login_source_id=options.login_source_id,
            login_name=options.login_name,
            location=options.location,
            website=options.website,
            is_active=options.activated,
            type=UserType.individual,
            created_at=now,
            updated_at=now,
        )

        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info("User creation lost a uniqueness race", extra={"login": name})
            if self.find_by_username(name) is not None:
                raise UserAlreadyExistError(name=name) from e
            raise EmailAlreadyUsedError(email=email) from e

        self.session.refresh(user)
        logger.info(
            "Created user %s",
            user.name,
            extra={"user_id": user.id, "login_source_id": user.login_source_id},
        )
        return user

    def get_by_id(self, user_id: int) -> User:
        """Get a user by id.

        Raises:
            UserNotExistError: With ``userID`` if absent
        """
        user = self.session.get(User, user_id)
        if user is None:
            raise UserNotExistError(userID=user_id)
        return user

    def find_by_username(self, name: str) -> User | None:
        return self.session.exec(
            select(User).where(User.lower_name == normalize_name(name))
        ).first()

    def get_by_username(self, name: str) -> User:
        """Get a user by name, case-insensitively.

        Raises:
            UserNotExistError: With ``name`` if absent
        """
        user = self.find_by_username(name)
        if user is None:
            raise UserNotExistError(name=name)
        return user

    def find_by_email(self, email: str) -> User | None:
        """Resolve an email to an individual user, or None.

        The primary email of an active user wins; otherwise an activated
        secondary address resolves to its owner.
        """
        key = normalize_email(email)
        if not key:
            return None

        user = self.session.exec(
            select(User).where(
                User.email == key,
                col(User.is_active).is_(True),
                User.type == UserType.individual,
            )
        ).first()
        if user is not None:
            return user

        return self.session.exec(
            select(User)
            .join(EmailAddress, col(EmailAddress.owner_id) == col(User.id))
            .where(
                EmailAddress.email == key,
                col(EmailAddress.is_activated).is_(True),
                User.type == UserType.individual,
            )
        ).first()

    def get_by_email(self, email: str) -> User:
        """Get a user by primary or activated secondary email.

        Organization accounts and unactivated emails never match.

        Raises:
            UserNotExistError: With ``email`` if nothing matches
        """
        user = self.find_by_email(email)
        if user is None:
            raise UserNotExistError(email=email)
        return user

    def find_by_login(self, login: str) -> User | None:
        """Resolve a sign-in identifier (email or username) to a user.

        Email resolution as in ``find_by_email`` wins. Failing that, a
        user's own primary email matches even before the account is
        activated. The username is tried last.
        """
        user = self.find_by_email(login)
        if user is not None:
            return user

        key = normalize_email(login)
        if key:
            user = self.session.exec(
                select(User)
                .where(User.email == key, User.type == UserType.individual)
                .order_by(col(User.id))
            ).first()
            if user is not None:
                return user

        return self.find_by_username(login)

    def activate(self, user_id: int) -> User:
        """Mark a user as active.

        Raises:
            UserNotExistError: If the user is absent
            EmailAlreadyUsedError: If another eligible account owns the email
        """
        user = self.get_by_id(user_id)
        if user.is_active:
            return user

        email = user.email
        if email and not user.is_organization:
            owner = self.find_by_email(email)
            if owner is not None and owner.id != user.id:
                raise EmailAlreadyUsedError(email=email)

        user.is_active = True
        user.updated_at = self.now_func()
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise EmailAlreadyUsedError(email=email) from e

        self.session.refresh(user)
        return user
