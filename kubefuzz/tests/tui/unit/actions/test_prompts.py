"""Tests for delete confirmation and port validation."""

from __future__ import annotations

import pytest

from kubefuzz.actions.prompts import (
    InvalidPortError,
    confirm_delete,
    delete_confirmation_word,
    delete_prompt,
    is_privileged_port,
    parse_port,
)


class TestDeleteConfirmation:
    """Test the bulk delete threshold."""

    @pytest.mark.parametrize("answer", ["y", "Y", " y "])
    def test_small_batch_accepts_y(self, answer: str) -> None:
        assert confirm_delete(10, answer) is True

    @pytest.mark.parametrize("answer", ["", "n", "yes", "Yes"])
    def test_small_batch_rejects_others(self, answer: str) -> None:
        assert confirm_delete(1, answer) is False

    def test_bulk_requires_yes(self) -> None:
        assert confirm_delete(11, "y") is False
        assert confirm_delete(11, "YES") is False
        assert confirm_delete(11, "yes") is True

    def test_prompt_wording(self) -> None:
        assert delete_confirmation_word(10) == "y"
        assert delete_confirmation_word(11) == "yes"
        assert "[y/N]" in delete_prompt(1)
        assert "'yes'" in delete_prompt(11)


class TestPorts:
    """Test port parsing."""

    @pytest.mark.parametrize(("text", "port"), [("1", 1), ("80", 80), (" 8080 ", 8080), ("65535", 65535)])
    def test_valid(self, text: str, port: int) -> None:
        assert parse_port(text) == port

    @pytest.mark.parametrize("text", ["0", "65536", "-1", "http", "80.5", "", "８０"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(InvalidPortError):
            parse_port(text)

    def test_privileged(self) -> None:
        assert is_privileged_port(80)
        assert is_privileged_port(1023)
        assert not is_privileged_port(1024)
