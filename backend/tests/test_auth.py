"""
Cookbook Services — Authentication Tests
==========================================

What:  OidcAuthenticator and its role-assertion dependency, using tokens
       signed with a test RSA key and a fake JWKS client.

What we test:
    ✅ Valid tokens produce a User with realm and client roles
    ✅ Missing, malformed, expired, foreign-issuer and foreign-key tokens ⇒ 401
    ✅ Missing role ⇒ 403
    ✅ Null or malformed role claims ⇒ 403, never a crash
    ✅ DisableSecurityCheck skips verification and the role check
    ✅ Issuer and JWKS URL derivation from the Oauth config
"""

import time

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from starlette.requests import Request

from cookbook.auth import ADMINISTRATOR_ROLE, OidcAuthenticator, User, user_from_context
from cookbook.config import OauthConfig
from cookbook.exceptions import AuthenticationError, AuthorizationError


def make_request(authorization: str = None) -> Request:
    headers = []
    if authorization is not None:
        headers.append((b"authorization", authorization.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


class TestTokenVerification:

    def test_valid_token_yields_user(self, authenticator, make_token):
        """Claims map onto the principal; realm and client roles are merged."""
        token = make_token(sub="abc-123", roles=["administrator"], client_roles=["editor"])

        user = authenticator.authenticate(f"Bearer {token}")

        assert user == User(
            user_id="abc-123",
            username="chef",
            email="chef@example.com",
            roles=frozenset({"administrator", "editor"}),
        )

    def test_missing_header_is_unauthenticated(self, authenticator):
        with pytest.raises(AuthenticationError):
            authenticator.authenticate(None)

    @pytest.mark.parametrize("header", ["Basic dXNlcjpwYXNz", "Bearer", "Bearer   ", "token"])
    def test_malformed_header_is_unauthenticated(self, authenticator, header):
        with pytest.raises(AuthenticationError):
            authenticator.authenticate(header)

    def test_garbage_token_is_unauthenticated(self, authenticator):
        with pytest.raises(AuthenticationError):
            authenticator.authenticate("Bearer not.a.jwt")

    def test_expired_token_is_unauthenticated(self, authenticator, make_token):
        with pytest.raises(AuthenticationError):
            authenticator.authenticate(f"Bearer {make_token(expires_in=-60)}")

    def test_foreign_issuer_is_unauthenticated(self, authenticator, make_token):
        token = make_token(issuer="https://id.example.com/realms/other")
        with pytest.raises(AuthenticationError):
            authenticator.authenticate(f"Bearer {token}")

    def test_token_signed_by_another_key_is_unauthenticated(self, authenticator, make_token):
        other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        with pytest.raises(AuthenticationError):
            authenticator.authenticate(f"Bearer {make_token(key=other_key)}")


class TestRoleAssertion:

    def test_administrator_passes_and_is_stored_on_request(self, authenticator, make_token):
        dependency = authenticator.require_role(ADMINISTRATOR_ROLE)
        request = make_request(f"Bearer {make_token()}")

        user = dependency(request)

        assert user.user_id == "user-1"
        assert user_from_context(request) is user

    def test_client_role_is_accepted(self, authenticator, make_token):
        dependency = authenticator.require_role(ADMINISTRATOR_ROLE)
        token = make_token(roles=[], client_roles=[ADMINISTRATOR_ROLE])

        assert dependency(make_request(f"Bearer {token}")).has_role(ADMINISTRATOR_ROLE)

    def test_missing_role_is_forbidden(self, authenticator, make_token):
        dependency = authenticator.require_role(ADMINISTRATOR_ROLE)
        request = make_request(f"Bearer {make_token(roles=['user'])}")

        with pytest.raises(AuthorizationError) as exc_info:
            dependency(request)
        assert exc_info.value.role == ADMINISTRATOR_ROLE

    @pytest.mark.parametrize(
        "realm_access, resource_access",
        [
            (None, None),
            ("administrator", ["administrator"]),
            ({"roles": None}, {"recipe-service": None}),
            ({"roles": "administrator"}, {"recipe-service": {"roles": [1, None]}}),
        ],
    )
    def test_malformed_role_claims_are_forbidden(
        self, authenticator, oauth_config, rsa_private_key, realm_access, resource_access
    ):
        """Null or oddly shaped role claims grant nothing instead of crashing."""
        now = int(time.time())
        claims = {
            "sub": "user-1",
            "iss": oauth_config.issuer,
            "exp": now + 300,
            "realm_access": realm_access,
            "resource_access": resource_access,
        }
        token = jwt.encode(claims, rsa_private_key, algorithm="RS256")
        dependency = authenticator.require_role(ADMINISTRATOR_ROLE)

        with pytest.raises(AuthorizationError):
            dependency(make_request(f"Bearer {token}"))

    def test_from_claims_ignores_missing_role_objects(self):
        user = User.from_claims({"sub": "abc", "realm_access": None}, service="recipe-service")
        assert user.roles == frozenset()

    def test_missing_token_is_unauthenticated(self, authenticator):
        dependency = authenticator.require_role(ADMINISTRATOR_ROLE)
        with pytest.raises(AuthenticationError):
            dependency(make_request())

    def test_user_from_context_without_principal(self):
        with pytest.raises(AuthenticationError) as exc_info:
            user_from_context(make_request())
        assert exc_info.value.message == "no authenticated user found in context"


class TestSecurityCheckDisabled:

    def setup_method(self):
        self.oauth = OauthConfig(
            url="https://id.example.com",
            realm="cookbook",
            disable_security_check=True,
        )

    def test_no_token_is_allowed(self):
        dependency = OidcAuthenticator(self.oauth).require_role(ADMINISTRATOR_ROLE)
        assert dependency(make_request()) is None

    def test_token_is_decoded_without_verification(self, make_token):
        """Unverifiable token still yields the principal; the role is not required."""
        other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        token = make_token(sub="dev", roles=[], key=other_key)
        dependency = OidcAuthenticator(self.oauth).require_role(ADMINISTRATOR_ROLE)
        request = make_request(f"Bearer {token}")

        user = dependency(request)

        assert user.user_id == "dev"
        assert user_from_context(request).user_id == "dev"


class TestOauthConfig:

    def test_issuer_and_default_certs_url(self):
        oauth = OauthConfig(url="https://id.example.com/", realm="cookbook")
        assert oauth.issuer == "https://id.example.com/realms/cookbook"
        assert oauth.certs_url == (
            "https://id.example.com/realms/cookbook/protocol/openid-connect/certs"
        )

    def test_full_certs_path_overrides(self):
        oauth = OauthConfig(
            url="https://id.example.com",
            realm="cookbook",
            full_certs_path="http://keycloak:8080/certs",
        )
        assert oauth.certs_url == "http://keycloak:8080/certs"

    def test_jwks_client_is_created_lazily(self):
        authenticator = OidcAuthenticator(OauthConfig(full_certs_path="http://keycloak/certs"))
        assert authenticator._jwks_client is None
        assert authenticator.jwks_client.uri == "http://keycloak/certs"
