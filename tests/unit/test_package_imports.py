"""
Test suite for package import order.

Each entry module is imported in a fresh interpreter so that a cycle
between the provider boundary and the core packages cannot be hidden by
modules already cached in the test process.

System role: Verification of package wiring
"""

import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]


class TestPackageImports:
    """Entry modules import cleanly on their own."""

    @pytest.mark.parametrize(
        "module",
        [
            "ragchat.api.main",
            "ragchat.core",
            "ragchat.core.exceptions",
            "ragchat.core.rag.history_compressor",
            "ragchat.core.rag.rag_orchestrator",
            "ragchat.core.voice",
            "ragchat.core.document_processing",
            "ragchat.boundary.llm",
            "ragchat.boundary.llm.gemini_client",
            "ragchat.application.services",
        ],
    )
    def test_import_should_succeed_in_fresh_interpreter(self, module: str) -> None:
        # Act
        result = subprocess.run(
            [sys.executable, "-c", f"import {module}"],
            cwd=REPO_ROOT,
            capture_output=True,
            text=True,
        )

        # Assert
        assert result.returncode == 0, result.stderr
