"""
Pytest configuration and shared fixtures for govproof tests.

Testing Standards:
- Async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
- Load tests go in tests/load/ and are marked @pytest.mark.load
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from govproof.bootstrap.signing import reset_signer
from govproof.infrastructure.adapters.persistence.in_memory_proof_registry import (
    InMemoryProofRegistry,
)
from govproof.infrastructure.adapters.persistence.in_memory_share_token_registry import (
    InMemoryShareTokenRegistry,
)
from govproof.infrastructure.adapters.security.ed25519_signer import (
    Ed25519ProofSigner,
)
from tests.helpers.fake_time_authority import FakeTimeAuthority


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from govproof import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    return FakeTimeAuthority()


@pytest.fixture
def signer() -> Ed25519ProofSigner:
    return Ed25519ProofSigner.generate()


@pytest.fixture
def proof_registry() -> InMemoryProofRegistry:
    return InMemoryProofRegistry()


@pytest.fixture
def token_registry() -> InMemoryShareTokenRegistry:
    return InMemoryShareTokenRegistry()


@pytest.fixture(autouse=True)
def _reset_process_signer() -> Iterator[None]:
    yield
    reset_signer()
