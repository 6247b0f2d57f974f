"""Tests for Heketi request signing."""

import hashlib

import jwt
import pytest

from glustervol.core.errors import AuthError
from glustervol.heketi.signer import RequestSigner, compute_qsh

SECRET = "signer-secret-with-at-least-32-bytes"


class TestComputeQsh:
    """compute_qsh() tests."""

    def test_post_volumes(self) -> None:
        """QSH is the hex SHA-256 of the literal METHOD&endpoint bytes."""
        expected = hashlib.sha256(b"POST&/volumes").hexdigest()
        assert compute_qsh("POST", "/volumes") == expected

    def test_lowercase_hex(self) -> None:
        qsh = compute_qsh("GET", "/volumes/abc")
        assert len(qsh) == 64
        assert qsh == qsh.lower()

    def test_method_and_endpoint_bound(self) -> None:
        """Different method or endpoint yields a different hash."""
        assert compute_qsh("GET", "/volumes") != compute_qsh("POST", "/volumes")
        assert compute_qsh("GET", "/volumes") != compute_qsh("GET", "/volumes/1")


class TestRequestSigner:
    """RequestSigner tests."""

    @pytest.fixture
    def signer(self) -> RequestSigner:
        return RequestSigner(SECRET, issuer="admin", clock=lambda: 1_700_000_000.7)

    def test_claims(self, signer: RequestSigner) -> None:
        """Token expires 30 seconds after issue and names the issuer."""
        claims = signer.claims("POST", "/volumes")

        assert claims["iss"] == "admin"
        assert claims["iat"] == 1_700_000_000
        assert claims["exp"] - claims["iat"] == 30
        assert claims["qsh"] == compute_qsh("POST", "/volumes")

    def test_token_is_hs256_signed(self, signer: RequestSigner) -> None:
        token = signer.token("DELETE", "/volumes/abc")

        assert jwt.get_unverified_header(token)["alg"] == "HS256"
        claims = jwt.decode(
            token,
            SECRET,
            algorithms=["HS256"],
            options={"verify_exp": False, "verify_iat": False},
        )
        assert claims["qsh"] == compute_qsh("DELETE", "/volumes/abc")
        assert claims["exp"] - claims["iat"] == 30

    def test_headers(self, signer: RequestSigner) -> None:
        headers = signer.headers("GET", "/volumes")

        assert headers["Authorization"].startswith("Bearer ")

    def test_fresh_claims_per_request(self) -> None:
        """Each token uses the clock at signing time."""
        now = iter([100.0, 200.0])
        signer = RequestSigner(SECRET, clock=lambda: next(now))

        first = signer.claims("GET", "/volumes")
        second = signer.claims("GET", "/volumes")

        assert first["iat"] == 100
        assert second["iat"] == 200

    def test_custom_ttl(self) -> None:
        signer = RequestSigner(SECRET, ttl=5, clock=lambda: 10.0)
        claims = signer.claims("GET", "/volumes")
        assert claims["exp"] == 15

    def test_missing_secret_raises_auth_error(self) -> None:
        signer = RequestSigner("")

        with pytest.raises(AuthError):
            signer.token("GET", "/volumes")
