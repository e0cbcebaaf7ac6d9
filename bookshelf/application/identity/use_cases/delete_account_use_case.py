"""Delete account use case."""

import structlog

from bookshelf.application.common.result import Failure, Result, Success
from bookshelf.application.identity.protocols.account_service import AccountServiceProtocol
from bookshelf.application.library.errors import BookErrorCode, classify_book_error
from bookshelf.application.library.protocols.book_repository import BookRepositoryProtocol
from bookshelf.domain.common.exceptions import DomainError
from bookshelf.domain.common.value_objects import OwnerId

logger = structlog.get_logger(__name__)


class DeleteAccountUseCase:
    """Use case for removing an account together with everything it owns."""

    def __init__(
        self,
        account_service: AccountServiceProtocol,
        book_repository: BookRepositoryProtocol,
    ) -> None:
        self.account_service = account_service
        self.book_repository = book_repository

    def delete_account(self, owner_id: str | None) -> Result[None, BookErrorCode]:
        """
        Delete the owner's books, then the account record itself.

        The books go first so a failure never leaves orphaned per-user data
        behind a deleted account. If the cascade fails the account is kept and
        the call can be retried; the cascade picks up whatever remains.

        Args:
            owner_id: Identity of the account being deleted

        Returns:
            Success(None), or Failure with a BookErrorCode
        """
        if not owner_id:
            return Failure(BookErrorCode.GENERIC)
        try:
            owner_id_vo = OwnerId(owner_id)
        except DomainError:
            return Failure(BookErrorCode.GENERIC)

        try:
            self.book_repository.delete_all(owner_id_vo)
        except Exception as exc:
            code = classify_book_error(exc)
            logger.error(
                "account_cascade_failed", owner_id=owner_id, error_code=str(code), exc_info=True
            )
            return Failure(code)

        try:
            self.account_service.delete_account(owner_id_vo)
        except Exception as exc:
            code = classify_book_error(exc)
            logger.error(
                "account_deletion_failed", owner_id=owner_id, error_code=str(code), exc_info=True
            )
            return Failure(code)

        logger.info("account_deleted", owner_id=owner_id)
        return Success(None)
