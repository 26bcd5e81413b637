from __future__ import annotations

from agrocal.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL


def test_exit_code_values():
    assert EXIT_SUCCESS_ALL == 0
    assert EXIT_FATAL == 1
    assert EXIT_PARTIAL_FAILURE == 2
