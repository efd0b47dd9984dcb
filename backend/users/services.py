import logging

from django.contrib.auth import authenticate
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework_simplejwt.tokens import AccessToken

from tableside.exceptions import BusinessRuleViolation
from .models import SetupLock, User

logger = logging.getLogger(__name__)


class UserService:
    """Staff authentication, bootstrap and directory management."""

    @staticmethod
    def authenticate_staff(request, username: str, password: str) -> User | None:
        """
        Check a username/password pair.

        Returns None for unknown users, wrong passwords and deactivated
        accounts alike so callers cannot tell them apart.
        """
        user = authenticate(request, username=username, password=password)
        if user is None:
            logger.warning(f"Failed staff login for username '{username}'")
            return None

        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])
        logger.info(f"Staff login: {user.username} ({user.role})")
        return user

    @staticmethod
    def generate_access_token(user: User) -> str:
        """Issue a signed access token carrying the user's id, username and role."""
        token = AccessToken.for_user(user)
        token["username"] = user.username
        token["role"] = user.role
        return str(token)

    @staticmethod
    @transaction.atomic
    def bootstrap_admin(username: str, password: str) -> User:
        """
        Create the first admin account.

        Only succeeds while the staff directory is empty. Concurrent calls
        queue on the setup lock row, so at most one of them sees the empty
        directory.
        """
        SetupLock.acquire()

        if User.objects.exists():
            logger.warning("Rejected setup call: staff accounts already exist")
            raise BusinessRuleViolation("Setup already completed")

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=username,
                    password=password,
                    role=User.Role.ADMIN,
                    permissions=list(User.Permission.values),
                )
        except IntegrityError:
            logger.warning(f"Rejected setup call: account '{username}' was created concurrently")
            raise BusinessRuleViolation("Setup already completed")

        logger.info(f"Bootstrap admin '{user.username}' created")
        return user

    @staticmethod
    def delete_staff(user: User, acting_user: User) -> None:
        if user.pk == acting_user.pk:
            raise BusinessRuleViolation("You cannot delete your own account")

        logger.info(f"Staff account '{user.username}' deleted by {acting_user.username}")
        user.delete()
