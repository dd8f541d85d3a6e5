"""Account use cases: registration, email verification and profiles.

Passwords are hashed here, before a User is built; the store only ever sees
the encoded hash.
"""

from typing import Iterable, List, Optional, Tuple, Union

from email_validator import EmailNotValidError, validate_email

from job_matching.config.models import AccountsConfig
from job_matching.domain.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidVerificationCodeError,
    PreconditionFailedError,
    UserNotFoundError,
)
from job_matching.domain.models import User, UserProfile, UserRole, normalize_skills
from job_matching.logging import get_logger
from job_matching.notifications import NotificationService
from job_matching.persistence import Database, DuplicateRecordError, UserRepository
from job_matching.persistence.schema import new_id
from job_matching.utils.hashing import (
    codes_match,
    generate_verification_code,
    hash_password,
    verify_password,
)
from job_matching.utils.timestamps import utc_now

logger = get_logger(__name__, component="accounts")


def _require_text(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _parse_skills(skills: Optional[Iterable[str]]) -> List[str]:
    if isinstance(skills, str):
        raise PreconditionFailedError("Skills must be a list of strings")
    try:
        return normalize_skills(skills)
    except (TypeError, ValueError) as e:
        raise PreconditionFailedError("Skills must be a list of strings") from e


def _parse_role(role: Union[UserRole, str, None]) -> UserRole:
    if role is None or role == "":
        return UserRole.TALENT
    try:
        return UserRole(role)
    except ValueError as e:
        raise PreconditionFailedError(
            "Role must be one of: " + ", ".join(r.value for r in UserRole), role=str(role)
        ) from e


class AccountService:
    """Registration, verification and profile management.

    Example:
        >>> accounts = AccountService(database, notifications)
        >>> profile, code = accounts.register_user("Ada", "ada@example.com", "secret1", "Austin")
        >>> accounts.verify_email(profile.id, code).is_email_verified
        True
    """

    def __init__(
        self,
        database: Database,
        notification_service: Optional[NotificationService] = None,
        config: Optional[AccountsConfig] = None,
    ):
        """Initialize AccountService.

        Args:
            database: Initialized entity store
            notification_service: Sends verification emails (defaults to a
                NotificationService with the logging sender)
            config: Password and verification settings
        """
        self.database = database
        self.config = config or AccountsConfig()
        self.notifications = notification_service or NotificationService(
            code_ttl=self.config.verification_code_ttl_delta
        )

    def register_user(
        self,
        name: str,
        email: str,
        password: str,
        location: str,
        role: Union[UserRole, str, None] = UserRole.TALENT,
        skills: Optional[Iterable[str]] = (),
    ) -> Tuple[UserProfile, str]:
        """Create an unverified account and email it a verification code.

        Returns:
            (profile, verification_code)

        Raises:
            PreconditionFailedError: If a required field is missing or invalid
            DuplicateEmailError: If the email is already registered
        """
        if not all(_require_text(value) for value in (name, email, password, location)):
            raise PreconditionFailedError("Please provide all required fields")

        if len(password) < self.config.min_password_length:
            raise PreconditionFailedError(
                f"Password must be at least {self.config.min_password_length} characters"
            )

        try:
            normalized_email = validate_email(
                email.strip(), check_deliverability=False
            ).normalized.lower()
        except EmailNotValidError as e:
            raise PreconditionFailedError(f"Invalid email address: {e}") from e

        user_role = _parse_role(role)
        user_skills = _parse_skills(skills)

        password_hash = hash_password(password)
        code = generate_verification_code()
        now = utc_now()

        user = User(
            id=new_id(),
            name=name,
            email=normalized_email,
            password_hash=password_hash,
            role=user_role,
            skills=user_skills,
            location=location,
            is_email_verified=False,
            email_verification_code=code,
            email_verification_expires_at=now + self.config.verification_code_ttl_delta,
            created_at=now,
            updated_at=now,
        )

        try:
            with self.database.session(immediate=True) as session:
                users = UserRepository(session)
                if users.get_by_email(normalized_email) is not None:
                    raise DuplicateEmailError()
                created = users.add(user)
        except DuplicateRecordError as e:
            raise DuplicateEmailError() from e

        logger.info(
            f"Registered user {created.id}",
            extra={"event": "user.registered", "user_id": created.id, "role": created.role.value},
        )

        result = self.notifications.send_verification_email(created.email, created.name, code)
        if not result.is_success():
            logger.warning(
                f"Verification email for user {created.id} was not sent: {result.error}",
                extra={"event": "user.verification_email_failed", "user_id": created.id},
            )

        return created.to_profile(), code

    def verify_email(self, user_id: str, code: str) -> UserProfile:
        """Confirm a user's email with the code they were sent.

        An already verified user is returned unchanged.

        Raises:
            PreconditionFailedError: If the code is missing
            UserNotFoundError: If the user does not exist
            InvalidVerificationCodeError: If the code is wrong or expired
        """
        if not _require_text(code):
            raise PreconditionFailedError("Verification code is required")

        with self.database.session() as session:
            users = UserRepository(session)
            user = users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            if user.is_email_verified:
                return user.to_profile()

            if not user.email_verification_code or not codes_match(
                user.email_verification_code, code.strip()
            ):
                raise InvalidVerificationCodeError("Invalid verification code")

            now = utc_now()
            expires_at = user.email_verification_expires_at
            if expires_at is not None and expires_at < now:
                raise InvalidVerificationCodeError("Verification code has expired")

            verified = users.save(
                user.model_copy(
                    update={
                        "is_email_verified": True,
                        "email_verification_code": None,
                        "email_verification_expires_at": None,
                        "updated_at": now,
                    }
                )
            )

        logger.info(
            f"Verified email for user {verified.id}",
            extra={"event": "user.email_verified", "user_id": verified.id},
        )
        return verified.to_profile()

    def resend_verification(self, user_id: str) -> str:
        """Issue a fresh verification code and email it.

        Returns:
            The new code

        Raises:
            UserNotFoundError: If the user does not exist
            PreconditionFailedError: If the email is already verified
        """
        code = generate_verification_code()
        now = utc_now()

        with self.database.session() as session:
            users = UserRepository(session)
            user = users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            if user.is_email_verified:
                raise PreconditionFailedError("Email already verified")

            user = users.save(
                user.model_copy(
                    update={
                        "email_verification_code": code,
                        "email_verification_expires_at": now
                        + self.config.verification_code_ttl_delta,
                        "updated_at": now,
                    }
                )
            )

        logger.info(
            f"Issued new verification code for user {user.id}",
            extra={"event": "user.verification_resent", "user_id": user.id},
        )
        self.notifications.send_verification_email(user.email, user.name, code)
        return code

    def authenticate(self, email: str, password: str) -> UserProfile:
        """Check credentials.

        Raises:
            PreconditionFailedError: If email or password is missing or not a string
            InvalidCredentialsError: If they do not identify a user
        """
        if not _require_text(email) or not isinstance(password, str) or not password:
            raise PreconditionFailedError("Please provide email and password")

        with self.database.session() as session:
            user = UserRepository(session).get_by_email(email)

        if user is None or not verify_password(password, user.password_hash):
            logger.info("Rejected login", extra={"event": "user.login_failed"})
            raise InvalidCredentialsError()

        return user.to_profile()

    def get_profile(self, user_id: str) -> UserProfile:
        """Raises UserNotFoundError when the user does not exist."""
        with self.database.session() as session:
            user = UserRepository(session).get_by_id(user_id)

        if user is None:
            raise UserNotFoundError(user_id)
        return user.to_profile()

    def update_profile(
        self,
        user_id: str,
        name: Optional[str] = None,
        skills: Optional[Iterable[str]] = None,
        location: Optional[str] = None,
    ) -> UserProfile:
        """Update name, skills and location. Role and email never change.

        Blank or omitted values leave the field as it is.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        updates = {}
        if _require_text(name):
            updates["name"] = name.strip()
        if _require_text(location):
            updates["location"] = location.strip()
        if skills is not None:
            updates["skills"] = _parse_skills(skills)

        with self.database.session() as session:
            users = UserRepository(session)
            user = users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            if updates:
                user = users.save(user.model_copy(update={**updates, "updated_at": utc_now()}))

        logger.info(
            f"Updated profile for user {user_id}",
            extra={"event": "user.profile_updated", "user_id": user_id, "fields": sorted(updates)},
        )
        return user.to_profile()

    def list_users(self) -> List[UserProfile]:
        """All users without credentials, oldest first."""
        with self.database.session() as session:
            return [user.to_profile() for user in UserRepository(session).list_all()]
