import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken

User = get_user_model()

logger = logging.getLogger(__name__)


class StaffJWTAuthentication(JWTAuthentication):
    """
    Bearer-token authentication for staff accounts.

    The token must resolve to an existing, active user. Deactivating an
    account revokes every token issued to it.
    """

    def get_user(self, validated_token):
        try:
            user_id = validated_token[settings.SIMPLE_JWT.get('USER_ID_CLAIM', 'user_id')]
        except KeyError:
            raise InvalidToken('Token contained no recognizable user identification')

        try:
            user = User.objects.get(**{settings.SIMPLE_JWT.get('USER_ID_FIELD', 'id'): user_id})
        except User.DoesNotExist:
            raise AuthenticationFailed('User not found', code='user_not_found')

        if not user.is_active:
            logger.warning(f"Rejected token for deactivated user {user.username}")
            raise AuthenticationFailed('User is inactive', code='user_inactive')

        return user
