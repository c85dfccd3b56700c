"""
tests/test_jwt_startup.py — JWT Secret Validation & Token Tests
=================================================================
The API must refuse to start when JWT_SECRET is missing, blank, too short,
or a known weak default.
"""

from __future__ import annotations

import os
from unittest.mock import patch

import jwt
import pytest

from toastx.api.deps import JWT_ALGORITHM, JWT_SECRET, _load_jwt_secret, create_access_token


class TestJWTSecretValidation:
    def test_rejects_missing_secret(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("JWT_SECRET", None)
            with pytest.raises(RuntimeError, match="JWT_SECRET environment variable is not set"):
                _load_jwt_secret()

    def test_rejects_known_weak_default(self):
        with patch.dict(os.environ, {"JWT_SECRET": "toastx-dev-secret-change-me"}):
            with pytest.raises(RuntimeError, match="known weak default"):
                _load_jwt_secret()

    def test_rejects_short_secret(self):
        with patch.dict(os.environ, {"JWT_SECRET": "tooshort"}):
            with pytest.raises(RuntimeError, match="too short"):
                _load_jwt_secret()

    def test_accepts_strong_secret(self):
        with patch.dict(os.environ, {"JWT_SECRET": "a" * 64}):
            assert _load_jwt_secret() == "a" * 64


class TestAccessToken:
    def test_subject_is_user_id(self):
        payload = jwt.decode(create_access_token("user-1"), JWT_SECRET, algorithms=[JWT_ALGORITHM])
        assert payload["sub"] == "user-1"
        assert "exp" in payload
