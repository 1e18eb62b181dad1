"""Tests for kubectl argv construction and name validation."""

from __future__ import annotations

import io
import subprocess

import pytest
from rich.console import Console

from kubefuzz.actions.commands import (
    CommandBuilder,
    UnsafeNameError,
    ensure_safe_items,
    ensure_safe_name,
)
from kubefuzz.actions.dispatcher import ActionDispatcher, SubprocessRunner
from kubefuzz.constants.enums import PreviewMode, ResourceKind, TriggerKey


class TestNameValidation:
    """Test rejection of names kubectl could read as flags."""

    @pytest.mark.parametrize("name", ["-rf", "--all", "-", ""])
    def test_unsafe(self, name: str) -> None:
        with pytest.raises(UnsafeNameError) as excinfo:
            ensure_safe_name(name)
        assert excinfo.value.name == name

    def test_safe_name_returned(self) -> None:
        assert ensure_safe_name("web-1") == "web-1"

    def test_items_validate_namespace_too(self, make_item) -> None:
        with pytest.raises(UnsafeNameError):
            ensure_safe_items([make_item("ok", namespace="-n")])


class TestCommandBuilder:
    """Test argv layouts per action."""

    def test_describe(self, make_item) -> None:
        argv = CommandBuilder().describe(make_item("web", namespace="shop"))
        assert argv == ["kubectl", "describe", "-n", "shop", "pod", "--", "web"]

    def test_yaml_cluster_scoped(self, make_item) -> None:
        argv = CommandBuilder().yaml(make_item("node-1", kind=ResourceKind.NODE, namespace=""))
        assert argv == ["kubectl", "get", "-o", "yaml", "node", "--", "node-1"]

    def test_delete(self, make_item) -> None:
        argv = CommandBuilder().delete(make_item("web"))
        assert argv[-2:] == ["--", "web"]
        assert argv[1] == "delete"

    def test_logs(self, make_item) -> None:
        argv = CommandBuilder().logs(make_item("web"), tail=50)
        assert argv == ["kubectl", "logs", "-n", "default", "--tail=50", "--", "web"]

    def test_exec_keeps_name_before_command_separator(self, make_item) -> None:
        argv = CommandBuilder().exec_shell(make_item("web"), "/bin/sh")
        assert argv == ["kubectl", "exec", "-it", "-n", "default", "web", "--", "/bin/sh"]

    def test_exec_rejects_unsafe_name(self, make_item) -> None:
        with pytest.raises(UnsafeNameError):
            CommandBuilder().exec_shell(make_item("-c"), "/bin/sh")

    def test_port_forward(self, make_item) -> None:
        argv = CommandBuilder().port_forward(
            make_item("api", kind=ResourceKind.SERVICE), 8080, 80
        )
        assert argv[-3:] == ["--", "svc/api", "8080:80"]

    def test_rollout(self, make_item) -> None:
        item = make_item("api", kind=ResourceKind.DEPLOYMENT, status="1/1")
        builder = CommandBuilder()
        assert builder.rollout_restart(item)[1:3] == ["rollout", "restart"]
        assert builder.rollout_status(item)[-2:] == ["--", "deploy/api"]

    def test_context_and_kubeconfig_flags(self, make_item) -> None:
        argv = CommandBuilder(context="prod", kubeconfig="/tmp/kc").describe(make_item("web"))
        assert argv[:5] == ["kubectl", "--kubeconfig", "/tmp/kc", "--context", "prod"]

    def test_item_context_wins(self, make_item) -> None:
        argv = CommandBuilder(context="prod").describe(make_item("web", context="dev"))
        assert argv[1:3] == ["--context", "dev"]

    @pytest.mark.parametrize(
        ("mode", "kind", "verb"),
        [
            (PreviewMode.DESCRIBE, ResourceKind.POD, "describe"),
            (PreviewMode.YAML, ResourceKind.POD, "get"),
            (PreviewMode.LOGS, ResourceKind.POD, "logs"),
            (PreviewMode.LOGS, ResourceKind.SERVICE, "describe"),
        ],
    )
    def test_preview(self, make_item, mode: PreviewMode, kind: ResourceKind, verb: str) -> None:
        argv = CommandBuilder().preview(make_item("web", kind=kind), mode)
        assert argv[1] == verb


class TestShellMetacharacters:
    """Names are passed as one argv element, never through a shell."""

    NAMES = ["web;rm -rf /", "$(id)", "a b", "`reboot`", "x|y&&z", "name'\"quote"]

    @pytest.mark.parametrize("name", NAMES)
    @pytest.mark.parametrize("action", ["describe", "yaml", "delete", "logs"])
    def test_name_is_single_element_after_separator(
        self, make_item, action: str, name: str
    ) -> None:
        argv = getattr(CommandBuilder(), action)(make_item(name, namespace="shop"))

        assert argv[-1] == name
        assert argv[-2] == "--"
        assert argv.count(name) == 1
        assert all(isinstance(part, str) for part in argv)

    @pytest.mark.parametrize("name", NAMES)
    def test_dispatch_hands_argv_list_to_runner(self, make_item, name: str) -> None:
        captured: list[list[str]] = []

        class _Runner(SubprocessRunner):
            def capture(self, argv, timeout=None):
                captured.append(argv)
                return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")

        console = Console(file=io.StringIO(), force_terminal=False)
        dispatcher = ActionDispatcher(console=console, runner=_Runner())

        dispatcher.dispatch([make_item(name)], TriggerKey.DESCRIBE)

        assert captured == [["kubectl", "describe", "-n", "default", "pod", "--", name]]
