"""
Cookbook Services — Bearer Token Authentication
=================================================

What:  Verifies OIDC access tokens issued by the identity provider (Keycloak)
       and asserts that the caller holds a role.
How:   ``OidcAuthenticator.require_role(role)`` returns a FastAPI dependency
       attached to every resource route. It:
           1. reads ``Authorization: Bearer <jwt>``
           2. verifies the RS256 signature against the realm's JWKS, plus
              issuer and expiry (PyJWT)
           3. builds a ``User`` from the claims and stores it on
              ``request.state.user``
           4. raises AuthorizationError unless the role is present

    Handlers read the principal back with ``user_from_context(request)``.

Outcomes:
    no / malformed / invalid / expired token   → AuthenticationError (401)
    valid token without the role               → AuthorizationError  (403)

Roles are collected from ``realm_access.roles`` and from
``resource_access.<Service>.roles``.

With ``Oauth.DisableSecurityCheck`` set, signatures are not verified and
the role is not asserted; a token that is present is still decoded so the
principal is available to handlers.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Optional

import jwt
from fastapi import Request
from jwt import PyJWKClient
from jwt.exceptions import PyJWKClientError

from cookbook.config import OauthConfig
from cookbook.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

ADMINISTRATOR_ROLE = "administrator"
ALGORITHMS = ["RS256"]


def _roles_of(access: Any) -> FrozenSet[str]:
    """Role names from a ``{"roles": [...]}`` claim object, ignoring anything else."""
    if not isinstance(access, dict):
        return frozenset()
    roles = access.get("roles")
    if not isinstance(roles, list):
        return frozenset()
    return frozenset(role for role in roles if isinstance(role, str))


@dataclass(frozen=True)
class User:
    """Authenticated principal extracted from a verified token."""

    user_id: str
    username: Optional[str] = None
    email: Optional[str] = None
    roles: FrozenSet[str] = field(default_factory=frozenset)

    def has_role(self, role: str) -> bool:
        return role in self.roles

    @classmethod
    def from_claims(cls, claims: Dict[str, Any], service: Optional[str] = None) -> "User":
        """Build the principal; malformed role claims contribute no roles."""
        roles = set(_roles_of(claims.get("realm_access")))
        if service:
            resource_access = claims.get("resource_access")
            if isinstance(resource_access, dict):
                roles.update(_roles_of(resource_access.get(service)))
        return cls(
            user_id=claims["sub"],
            username=claims.get("preferred_username"),
            email=claims.get("email"),
            roles=frozenset(roles),
        )


def user_from_context(request: Request) -> User:
    """Return the principal established by the auth dependency for this request."""
    user = getattr(request.state, "user", None)
    if not isinstance(user, User):
        raise AuthenticationError("no authenticated user found in context")
    return user


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an Authorization header, None if the header is absent."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("no valid token found")
    return token.strip()


class OidcAuthenticator:
    """
    Token verification against one realm of the identity provider.

    Args:
        oauth:        The Oauth config section.
        jwks_client:  Signing-key source; defaults to a caching PyJWKClient
                      for the realm's certs endpoint.
    """

    def __init__(self, oauth: OauthConfig, jwks_client: Optional[PyJWKClient] = None):
        self.oauth = oauth
        self._jwks_client = jwks_client

    @property
    def jwks_client(self) -> PyJWKClient:
        # Created lazily so building an app never touches the network
        if self._jwks_client is None:
            self._jwks_client = PyJWKClient(self.oauth.certs_url, cache_keys=True)
        return self._jwks_client

    def decode(self, token: str) -> Dict[str, Any]:
        """Verify a token and return its claims."""
        if self.oauth.disable_security_check:
            try:
                return jwt.decode(token, options={"verify_signature": False})
            except jwt.InvalidTokenError as e:
                raise AuthenticationError("invalid token") from e

        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(token)
            return jwt.decode(
                token,
                signing_key.key,
                algorithms=ALGORITHMS,
                issuer=self.oauth.issuer,
                options={"verify_aud": False, "require": ["exp", "iss", "sub"]},
            )
        except PyJWKClientError as e:
            logger.warning("Unable to obtain signing key from %s: %s", self.oauth.certs_url, e)
            raise AuthenticationError("unable to verify token") from e
        except jwt.InvalidTokenError as e:
            logger.debug("Token rejected: %s", e)
            raise AuthenticationError("invalid token") from e

    def authenticate(self, authorization: Optional[str]) -> Optional[User]:
        """
        Resolve the caller from an Authorization header value.

        Returns None only when security checks are disabled and no token was
        sent; otherwise a missing token is an AuthenticationError.
        """
        token = _bearer_token(authorization)
        if token is None:
            if self.oauth.disable_security_check:
                return None
            raise AuthenticationError("no valid token found")

        claims = self.decode(token)
        if "sub" not in claims:
            raise AuthenticationError("token has no subject")
        return User.from_claims(claims, self.oauth.service)

    def require_role(self, role: str) -> Callable[[Request], Optional[User]]:
        """Build a route dependency that authenticates and asserts ``role``."""

        def dependency(request: Request) -> Optional[User]:
            user = self.authenticate(request.headers.get("Authorization"))
            if user is not None:
                request.state.user = user

            if self.oauth.disable_security_check:
                logger.debug("Security check disabled, skipping role %s", role)
                return user

            if not user.has_role(role):
                logger.debug("User %s lacks role %s", user.user_id, role)
                raise AuthorizationError(f"missing role {role}", role=role)

            logger.debug("User %s authorized with role %s", user.user_id, role)
            return user

        return dependency
