"""Tests for role resolution and token claims."""

from __future__ import annotations

import time

import jwt
import pytest

from ideaflow.auth.jwt import TokenExpiredError, TokenInvalidError, role_from_claims, verify_token
from ideaflow.auth.roles import (
    Capabilities,
    can_evaluate,
    can_submit,
    capabilities,
    has_admin_capability,
    has_evaluate_capability,
    is_exact_submitter,
    normalize,
    role_label,
)

SECRET = "test-secret-key-do-not-use"


def _token(claims: dict, exp_minutes: int = 60) -> str:
    payload = {"sub": "user-123", "exp": int(time.time()) + exp_minutes * 60, **claims}
    return jwt.encode(payload, SECRET, algorithm="HS256")


class TestNormalize:
    def test_trims_and_lowercases(self) -> None:
        assert normalize("  Evaluator/ADMIN ") == "evaluator/admin"

    @pytest.mark.parametrize("value", [None, "", 42, ["admin"], {"role": "admin"}])
    def test_missing_or_non_string(self, value) -> None:
        assert normalize(value) == ""


class TestCapabilities:
    """Substring-based capability checks."""

    def test_can_evaluate(self) -> None:
        assert not can_evaluate("submitter")
        assert can_evaluate("evaluator/admin")
        assert can_evaluate("EVALUATOR/ADMIN")
        assert can_evaluate("evaluator")
        assert can_evaluate("admin")
        assert can_evaluate("  Evaluator ")
        assert not can_evaluate(None)
        assert not can_evaluate("")

    def test_can_submit(self) -> None:
        assert can_submit("submitter")
        assert can_submit(" SUBMITTER ")
        assert not can_submit("evaluator")
        assert can_submit("admin")
        assert can_submit("evaluator/admin")
        assert not can_submit("submitters")
        assert not can_submit(None)

    def test_primitive_checks(self) -> None:
        assert has_admin_capability("super-ADMIN")
        assert not has_admin_capability("evaluator")
        assert has_evaluate_capability("lead evaluator")
        assert is_exact_submitter("Submitter")
        assert not is_exact_submitter("submitter/evaluator")

    def test_compound_role_without_admin(self) -> None:
        assert can_evaluate("evaluator/submitter")
        assert not can_submit("evaluator/submitter")

    def test_capabilities_tuple(self) -> None:
        assert capabilities("evaluator/admin") == Capabilities(can_submit=True, can_evaluate=True)
        assert capabilities("submitter") == Capabilities(can_submit=True, can_evaluate=False)
        assert capabilities(None) == Capabilities(can_submit=False, can_evaluate=False)


class TestRoleLabel:
    @pytest.mark.parametrize(
        ("role", "label"),
        [
            ("evaluator/admin", "Admin (Evaluator)"),
            ("ADMIN/Evaluator", "Admin (Evaluator)"),
            ("evaluator", "Evaluator"),
            ("admin", "Admin"),
            ("submitter", "Submitter"),
            (" Submitter ", "Submitter"),
            ("reviewer", "Reviewer"),
            ("gUEST", "Guest"),
            (None, "Unknown"),
            ("", "Unknown"),
        ],
    )
    def test_labels(self, role, label) -> None:
        assert role_label(role) == label


class TestTokenClaims:
    def test_verify_and_read_role(self) -> None:
        payload = verify_token(_token({"role": "evaluator/admin"}), SECRET)
        assert payload["sub"] == "user-123"
        assert role_from_claims(payload) == "evaluator/admin"

    def test_missing_role_claim(self) -> None:
        assert role_from_claims(verify_token(_token({}), SECRET)) is None

    def test_non_string_role_claim(self) -> None:
        assert role_from_claims({"role": ["admin"]}) is None

    def test_expired(self) -> None:
        with pytest.raises(TokenExpiredError):
            verify_token(_token({"role": "admin"}, exp_minutes=-1), SECRET)

    def test_invalid_signature(self) -> None:
        with pytest.raises(TokenInvalidError):
            verify_token(_token({"role": "admin"}), "wrong-secret")

    def test_malformed(self) -> None:
        with pytest.raises(TokenInvalidError):
            verify_token("not.a.valid.jwt", SECRET)
