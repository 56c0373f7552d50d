"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from cli_test_helpers import build_export, chat_message, words, write_export

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config file at a temporary path for every test."""
    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setenv("EXPARSE_CONFIG", str(config_path))
    monkeypatch.delenv("EXPARSE_LOG_LEVEL", raising=False)
    return config_path


@pytest.fixture
def scenario_messages() -> list[dict[str, object]]:
    """Four-turn exchange: human 12, assistant 149, human 8, assistant 262."""
    return [
        chat_message("human", words(12)),
        chat_message("assistant", words(149)),
        chat_message("human", words(8)),
        chat_message("assistant", words(262)),
    ]


@pytest.fixture
def export_file(tmp_path: Path, scenario_messages: list[dict[str, object]]) -> Path:
    """Write an export with three conversations and return its path.

    1. "Scenario" - the four-turn exchange
    2. "Empty chat" - no messages
    3. "Long answer" - human 5, assistant 100000
    """
    data = build_export(
        [
            ("Scenario", scenario_messages),
            ("Empty chat", []),
            (
                "Long answer",
                [
                    chat_message("human", words(5)),
                    chat_message("assistant", words(100_000)),
                ],
            ),
        ],
    )
    return write_export(tmp_path / "conversations.json", data)
