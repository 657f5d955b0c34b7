"""
Smoke tests to verify all critical dependencies are installed correctly.

These tests confirm that:
1. Python 3.11+ is installed
2. All core dependencies are importable
3. Project version is accessible

Run with: pytest tests/unit/test_smoke.py -v
"""

import sys


class TestPythonVersion:
    """Verify Python version requirements."""

    def test_python_311_or_higher(self) -> None:
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required, "
            f"got {sys.version_info.major}.{sys.version_info.minor}"
        )


class TestCoreFramework:
    """Verify core framework dependencies."""

    def test_fastapi_import(self) -> None:
        from fastapi import FastAPI

        assert FastAPI() is not None

    def test_pydantic_v2(self) -> None:
        """Pydantic v2 is required for the boundary models."""
        import pydantic

        major_version = int(pydantic.VERSION.split(".")[0])
        assert major_version >= 2, f"Pydantic v2 required, got {pydantic.VERSION}"

    def test_uvicorn_import(self) -> None:
        import uvicorn

        assert uvicorn is not None


class TestSupportingLibraries:
    """Verify logging, crypto, metrics and HTTP client dependencies."""

    def test_structlog_import(self) -> None:
        import structlog

        assert structlog.get_logger() is not None

    def test_ed25519_available(self) -> None:
        from cryptography.hazmat.primitives.asymmetric.ed25519 import (
            Ed25519PrivateKey,
        )

        assert Ed25519PrivateKey.generate() is not None

    def test_prometheus_client_import(self) -> None:
        from prometheus_client import CollectorRegistry

        assert CollectorRegistry() is not None

    def test_httpx_import(self) -> None:
        import httpx

        assert httpx.AsyncClient is not None


class TestProject:
    def test_version(self, project_version: str) -> None:
        assert project_version.count(".") == 2

    def test_app_importable(self) -> None:
        from govproof.api.main import app

        assert app.title == "Governance Consensus & Proof Engine"
