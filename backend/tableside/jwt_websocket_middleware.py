"""
JWT WebSocket Authentication Middleware for Django Channels.

Authenticates WebSocket connections with the same access tokens the HTTP API
issues. Browsers cannot set headers on a WebSocket handshake, so the token is
read from the `token` query parameter first and the Authorization header
second.
"""
import jwt
import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ObjectDoesNotExist

logger = logging.getLogger(__name__)


@database_sync_to_async
def get_active_user(user_id):
    from users.models import User

    return User.objects.get(id=user_id, is_active=True)


class JWTAuthMiddleware(BaseMiddleware):
    """
    Resolve scope['user'] from a staff access token.

    Connections without a usable token get AnonymousUser; consumers decide
    which actions need an authenticated staff member.
    """

    async def __call__(self, scope, receive, send):
        if scope['type'] != 'websocket':
            return await super().__call__(scope, receive, send)

        scope['user'] = await self.get_user_from_jwt(scope)

        return await super().__call__(scope, receive, send)

    def extract_token(self, scope):
        query_string = scope.get('query_string', b'').decode('utf-8')
        token = parse_qs(query_string).get('token', [None])[0]
        if token:
            return token

        headers = dict(scope.get('headers', []))
        auth_header = headers.get(b'authorization', b'').decode('utf-8')
        parts = auth_header.split()
        if len(parts) == 2 and parts[0] in settings.SIMPLE_JWT.get('AUTH_HEADER_TYPES', ('Bearer',)):
            return parts[1]

        return None

    async def get_user_from_jwt(self, scope):
        access_token = self.extract_token(scope)

        if not access_token:
            logger.debug("No JWT access token found in WebSocket handshake")
            return AnonymousUser()

        jwt_config = settings.SIMPLE_JWT
        user_id = None

        try:
            payload = jwt.decode(
                access_token,
                jwt_config.get('SIGNING_KEY', settings.SECRET_KEY),
                algorithms=[jwt_config.get('ALGORITHM', 'HS256')],
                options={
                    'verify_signature': True,
                    'verify_exp': True,
                }
            )

            if payload.get('token_type') != 'access':
                logger.warning("Non-access token presented on WebSocket handshake")
                return AnonymousUser()

            user_id = payload.get(jwt_config.get('USER_ID_CLAIM', 'user_id'))
            if not user_id:
                logger.warning("JWT payload missing user_id")
                return AnonymousUser()

            user = await get_active_user(user_id)

            logger.info(f"WebSocket authenticated: user={user.username}, role={user.role}")
            return user

        except jwt.ExpiredSignatureError:
            logger.warning("Expired JWT token in WebSocket connection")
            return AnonymousUser()
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid JWT token in WebSocket connection: {e}")
            return AnonymousUser()
        except ObjectDoesNotExist:
            logger.warning(f"User {user_id} from JWT not found or inactive")
            return AnonymousUser()
