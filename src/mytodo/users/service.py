from __future__ import annotations

import logging
import uuid

from ..errors import DuplicateEmailError, InvalidCredentialsError, NotFoundError
from .models import User
from .repositories import UserRepository

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class UserService:
    """Use cases for registering, authenticating and maintaining users."""

    def __init__(self, user_repository: UserRepository) -> None:
        self.user_repository = user_repository

    def create_user(self, email: str, password: str) -> User:
        """
        Register a new user.

        Raises:
            DuplicateEmailError: if a user with this email already exists.
                Nothing is persisted in that case.
            HashingError: if the password cannot be hashed.
        """
        if self.user_repository.get_by_email(email) is not None:
            raise DuplicateEmailError()

        user = User.new(str(uuid.uuid4()), email, password)
        self.user_repository.create(user)
        logger.info("Created user %s", user.id)
        return user

    def get_user(self, user_id: str) -> User:
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def authenticate_user(self, email: str, password: str) -> User:
        """
        Return the user owning `email` if `password` matches.

        Unknown email and wrong password raise the same InvalidCredentialsError.
        """
        user = self.user_repository.get_by_email(email)
        if user is None or not user.check_password(password):
            raise InvalidCredentialsError()
        return user

    def update_user(self, user_id: str, email: str, password: str) -> User:
        """
        Change email and/or password. Empty arguments leave the field as is;
        the user is written back once either way.
        """
        user = self.get_user(user_id)

        if email:
            other = self.user_repository.get_by_email(email)
            if other is not None and other.id != user.id:
                raise DuplicateEmailError()
            user.update_email(email)

        if password:
            user.update_password(password)

        self.user_repository.update(user)
        return user

    def delete_user(self, user_id: str) -> None:
        self.user_repository.delete(user_id)
        logger.info("Deleted user %s", user_id)
