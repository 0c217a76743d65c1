from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI

from artify.auth.verifier import SupabaseIdentityVerifier
from artify.main import build_resources
from artify.repositories.memory import MemoryDocumentStore
from artify.repositories.supabase_repository import SupabaseDocumentStore


@pytest.fixture
def bare_app():
    return FastAPI()


def test_memory_backend_without_credentials(bare_app):
    """접속 정보가 없어도 서버는 시작되고, 인증 공급자만 비어 있음"""
    with patch("artify.main.config.STORE_BACKEND", "memory"), \
         patch("artify.main.config.load_supabase_credentials", return_value=None):
        build_resources(bare_app)

    assert isinstance(bare_app.state.store, MemoryDocumentStore)
    assert bare_app.state.identity_verifier is None


def test_supabase_backend_with_credentials(bare_app):
    fake_client = MagicMock()
    with patch("artify.main.config.STORE_BACKEND", "supabase"), \
         patch("artify.main.config.load_supabase_credentials", return_value=("https://x.supabase.co", "key")), \
         patch("artify.main.create_supabase_client", return_value=fake_client) as factory:
        build_resources(bare_app)

    factory.assert_called_once_with("https://x.supabase.co", "key")
    assert isinstance(bare_app.state.store, SupabaseDocumentStore)
    assert isinstance(bare_app.state.identity_verifier, SupabaseIdentityVerifier)
    assert bare_app.state.identity_verifier.client is fake_client


def test_supabase_backend_requires_credentials(bare_app):
    with patch("artify.main.config.STORE_BACKEND", "supabase"), \
         patch("artify.main.config.load_supabase_credentials", return_value=None):
        with pytest.raises(ValueError):
            build_resources(bare_app)


def test_unknown_backend(bare_app):
    with patch("artify.main.config.STORE_BACKEND", "mongo"), \
         patch("artify.main.config.load_supabase_credentials", return_value=None):
        with pytest.raises(ValueError):
            build_resources(bare_app)
