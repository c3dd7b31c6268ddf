"""Smoke tests for the top-level package."""

from __future__ import annotations

import memo_ai


def test_version() -> None:
    assert memo_ai.__version__ == "0.1.0"


def test_public_exports() -> None:
    for name in memo_ai.__all__:
        assert hasattr(memo_ai, name), name


def test_errors_share_base() -> None:
    assert issubclass(memo_ai.RemoteServiceError, memo_ai.MemoAIError)
    assert issubclass(memo_ai.ProcessingCancelledError, memo_ai.MemoAIError)
    assert issubclass(memo_ai.StorageError, memo_ai.MemoAIError)
    assert issubclass(memo_ai.InvalidInputError, ValueError)
