from loguru import logger

from src.user_registry.core.exceptions import (
    DuplicateKeyError,
    MissingRecordError,
    StorageError,
)
from src.user_registry.core.results import (
    DuplicateEmail,
    NotFound,
    Ok,
    StorageFailure,
)
from src.user_registry.entities.core.user.entity import User, UserPatch
from src.user_registry.entities.core.user.repository import UserRepository

ListResult = Ok[list[User]] | StorageFailure
ReadResult = Ok[User] | NotFound | StorageFailure
CreateResult = Ok[User] | DuplicateEmail | StorageFailure
UpdateResult = Ok[User] | NotFound | DuplicateEmail | StorageFailure
DeleteResult = Ok[bool] | StorageFailure


class UserService:
    """Business rules for users on top of a ``UserRepository``.

    The service keeps no state between calls. Business outcomes are returned
    as result values; storage failures are converted to ``StorageFailure``
    and never retried.
    """

    def __init__(self, repository: UserRepository):
        self._repository = repository

    def find_all(self) -> ListResult:
        try:
            return Ok(self._repository.find_all())
        except StorageError as e:
            return StorageFailure(e.message)

    def find_by_id(self, user_id: int) -> ReadResult:
        try:
            user = self._repository.find_by_id(user_id)
        except StorageError as e:
            return StorageFailure(e.message)

        if user is None:
            return NotFound(user_id)
        return Ok(user)

    def create(self, candidate: User) -> CreateResult:
        """Persist a new user whose email is not yet in use.

        The pre-check and the insert are not atomic; a concurrent create with
        the same email is caught by the unique index and reported the same way.
        """
        try:
            if self._repository.exists_by_email(candidate.email):
                logger.info("Rejected user create: email already registered")
                return DuplicateEmail(candidate.email)

            # Storage assigns the id
            transient = candidate.model_copy(update={"id": None})
            created = self._repository.save(transient)
        except DuplicateKeyError:
            logger.info("Rejected user create: unique index caught duplicate email")
            return DuplicateEmail(candidate.email)
        except StorageError as e:
            return StorageFailure(e.message)

        logger.info("Created user {}", created.id)
        return Ok(created)

    def update(self, user_id: int, patch: UserPatch) -> UpdateResult:
        """Overwrite ``name`` and ``email`` of an existing user.

        A missing id leaves storage untouched. Moving to an email that another
        user already holds is rejected.
        """
        try:
            existing = self._repository.find_by_id(user_id)
            if existing is None:
                return NotFound(user_id)

            merged = existing.merged_with(patch)
            if merged.email != existing.email and self._repository.exists_by_email(
                merged.email
            ):
                logger.info("Rejected update of user {}: email already registered", user_id)
                return DuplicateEmail(merged.email)

            updated = self._repository.save(merged)
        except MissingRecordError:
            # Deleted between the lookup and the save
            return NotFound(user_id)
        except DuplicateKeyError:
            logger.info("Rejected update of user {}: unique index caught duplicate email", user_id)
            return DuplicateEmail(patch.email)
        except StorageError as e:
            return StorageFailure(e.message)

        logger.info("Updated user {}", user_id)
        return Ok(updated)

    def delete(self, user_id: int) -> DeleteResult:
        """Delete a user; ``Ok(False)`` when the id is absent."""
        try:
            if not self._repository.exists_by_id(user_id):
                return Ok(False)
            deleted = self._repository.delete_by_id(user_id)
        except StorageError as e:
            return StorageFailure(e.message)

        if deleted:
            logger.info("Deleted user {}", user_id)
        return Ok(deleted)
