"""Action dispatcher - turns a selection and trigger key into kubectl runs.

Actions run synchronously on the UI thread while the UI is suspended. They
report failures on the console and in the returned ActionResult; nothing
here raises into the selection loop.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from rich.console import Console

from kubefuzz.actions.commands import (
    Argv,
    CommandBuilder,
    UnsafeNameError,
    ensure_safe_items,
)
from kubefuzz.actions.prompts import (
    InvalidPortError,
    confirm_delete,
    delete_prompt,
    is_privileged_port,
    parse_port,
)
from kubefuzz.constants.defaults import EXEC_SHELLS
from kubefuzz.constants.enums import (
    PORT_FORWARD_KINDS,
    RESTARTABLE_KINDS,
    ResourceKind,
    TriggerKey,
)
from kubefuzz.constants.timeouts import KUBECTL_COMMAND_TIMEOUT
from kubefuzz.models.core.item import Item
from kubefuzz.utils.runtime_dir import PreviewState

logger = logging.getLogger(__name__)

# Triggers whose output stays on screen until the operator presses Enter.
PAUSE_AFTER: frozenset[TriggerKey] = frozenset(
    {
        TriggerKey.DESCRIBE,
        TriggerKey.YAML,
        TriggerKey.LOGS,
        TriggerKey.DELETE,
        TriggerKey.RESTART,
        TriggerKey.PORT_FORWARD,
    }
)


@dataclass(frozen=True)
class Selection:
    """What the selection UI hands back: chosen items and the ending key."""

    items: tuple[Item, ...]
    trigger: TriggerKey


@dataclass
class ActionResult:
    """Outcome of one dispatch; ``commands`` lists every argv that was run."""

    ok: bool
    message: str = ""
    commands: list[Argv] = field(default_factory=list)


class SubprocessRunner:
    """Runs kubectl either captured or attached to the terminal."""

    def capture(
        self, argv: Argv, timeout: float | None = KUBECTL_COMMAND_TIMEOUT
    ) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            argv, capture_output=True, text=True, timeout=timeout, check=False
        )

    def interactive(self, argv: Argv) -> int | None:
        """Run attached to the terminal; returns None if the operator interrupted."""
        process = subprocess.Popen(argv)
        try:
            return process.wait()
        except KeyboardInterrupt:
            process.terminate()
            try:
                process.wait(timeout=2)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
            return None


class ActionDispatcher:
    """Executes operator actions against selected items."""

    def __init__(
        self,
        *,
        context: str | None = None,
        kubeconfig: str | None = None,
        console: Console | None = None,
        runner: SubprocessRunner | None = None,
        input_func: Callable[[str], str] | None = None,
    ) -> None:
        self.commands = CommandBuilder(context=context, kubeconfig=kubeconfig)
        self.console = console or Console()
        self.runner = runner or SubprocessRunner()
        self._input = input_func or self._console_input
        self._handlers: dict[TriggerKey, Callable[[Sequence[Item], ActionResult], None]] = {
            TriggerKey.DESCRIBE: self._describe,
            TriggerKey.YAML: self._yaml,
            TriggerKey.LOGS: self._logs,
            TriggerKey.EXEC: self._exec,
            TriggerKey.DELETE: self._delete,
            TriggerKey.PORT_FORWARD: self._port_forward,
            TriggerKey.RESTART: self._restart,
        }

    @property
    def context(self) -> str | None:
        return self.commands.context

    @context.setter
    def context(self, value: str | None) -> None:
        self.commands.context = value

    def _console_input(self, prompt: str) -> str:
        return self.console.input(prompt)

    def _ask(self, prompt: str) -> str | None:
        """Read a line from the operator; None on EOF or interrupt."""
        try:
            return self._input(prompt)
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            return None

    def _error(self, message: str) -> None:
        logger.warning(message)
        self.console.print(f"[red]✗[/red] {message}", highlight=False)

    # Entry point ---------------------------------------------------------------

    def dispatch(
        self,
        items: Sequence[Item],
        trigger: TriggerKey,
        read_only: bool = False,
        preview_state: PreviewState | None = None,
    ) -> ActionResult:
        """Run the action bound to ``trigger`` on ``items``."""
        if trigger is TriggerKey.PREVIEW_CYCLE:
            state = preview_state or PreviewState()
            mode = state.cycle()
            return ActionResult(ok=True, message=f"Preview: {mode.label}")
        if trigger is TriggerKey.SWITCH_CONTEXT:
            return ActionResult(ok=True, message="Context switching is handled by the selection UI")

        if read_only and trigger.is_mutating:
            message = f"Read-only mode: {trigger.name.lower().replace('_', '-')} is disabled"
            logger.info(message)
            return ActionResult(ok=False, message=message)
        if not items:
            return ActionResult(ok=False, message="Nothing selected")

        try:
            ensure_safe_items(items)
        except UnsafeNameError as exc:
            self._error(str(exc))
            return ActionResult(ok=False, message=str(exc))

        result = ActionResult(ok=True)
        logger.info("Dispatching %s on %d item(s)", trigger.name, len(items))
        try:
            self._handlers[trigger](items, result)
        except OSError as exc:
            # Missing kubectl binary, permission denied.
            result.ok = False
            result.message = f"Could not run kubectl: {exc}"
            self._error(result.message)
        except subprocess.TimeoutExpired as exc:
            result.ok = False
            result.message = f"kubectl timed out after {exc.timeout}s"
            self._error(result.message)
        return result

    # Captured helpers ----------------------------------------------------------

    def _capture(self, argv: Argv, result: ActionResult) -> subprocess.CompletedProcess[str]:
        result.commands.append(argv)
        logger.debug("Running %s", argv)
        return self.runner.capture(argv)

    def _interactive(self, argv: Argv, result: ActionResult) -> int | None:
        result.commands.append(argv)
        logger.debug("Running interactively %s", argv)
        return self.runner.interactive(argv)

    # Handlers ------------------------------------------------------------------

    def _describe(self, items: Sequence[Item], result: ActionResult) -> None:
        for item in items:
            completed = self._capture(self.commands.describe(item), result)
            if completed.returncode == 0:
                self.console.out(completed.stdout, end="", highlight=False)
            else:
                logger.info("describe failed for %s: %s", item.output_str(), completed.stderr.strip())
                self.console.out(item.output_str(), highlight=False)

    def _yaml(self, items: Sequence[Item], result: ActionResult) -> None:
        for item in items:
            completed = self._capture(self.commands.yaml(item), result)
            if completed.returncode == 0:
                self.console.out(completed.stdout, end="", highlight=False)
            else:
                result.ok = False
                self._error(f"kubectl get yaml failed: {completed.stderr.strip()}")

    def _logs(self, items: Sequence[Item], result: ActionResult) -> None:
        pods = 0
        for item in items:
            if item.kind is not ResourceKind.POD:
                self.console.print(
                    f"[yellow]logs only available for pods (got {item.kind.alias})[/yellow]",
                    highlight=False,
                )
                continue
            pods += 1
            self.console.rule(f"logs: {item.namespace}/{item.name}")
            returncode = self._interactive(self.commands.logs(item), result)
            if returncode is None:
                result.message = "Interrupted"
                return
            if returncode != 0:
                result.ok = False
                self._error(f"kubectl logs exited with {returncode}")
        if not pods:
            result.ok = False
            result.message = "Logs are only available for pods"

    def _exec(self, items: Sequence[Item], result: ActionResult) -> None:
        pod = next((item for item in items if item.kind is ResourceKind.POD), None)
        if pod is None:
            result.ok = False
            result.message = "Exec is only available for pods"
            self.console.print(f"[yellow]{result.message}[/yellow]")
            return
        self.console.print(f"Dropping into shell: {pod.namespace}/{pod.name}", highlight=False)
        for shell in EXEC_SHELLS:
            returncode = self._interactive(self.commands.exec_shell(pod, shell), result)
            if returncode is None:
                result.message = "Interrupted"
                return
            if returncode == 0:
                return
        result.ok = False
        result.message = f"exec failed for {pod.name}"
        self._error(result.message)

    def _delete(self, items: Sequence[Item], result: ActionResult) -> None:
        for item in items:
            location = f"ns/{item.namespace}" if item.namespace else "(cluster-scoped)"
            self.console.print(f"  • {item.kind.alias}/{item.name} [{location}]", markup=False)

        answer = self._ask(f"\n{delete_prompt(len(items))}")
        if answer is None or not confirm_delete(len(items), answer):
            result.ok = False
            result.message = "Cancelled"
            self.console.print("Cancelled.")
            return

        failures = 0
        for item in items:
            completed = self._capture(self.commands.delete(item), result)
            if completed.returncode == 0:
                self.console.print(f"[green]✓[/green] deleted {item.kind.alias}/{item.name}", highlight=False)
            else:
                failures += 1
                self._error(
                    f"delete failed {item.kind.alias}/{item.name}: {completed.stderr.strip()}"
                )
        if failures:
            result.ok = False
            result.message = f"{failures} of {len(items)} deletions failed"
        else:
            result.message = f"Deleted {len(items)} resource(s)"

    def _port_forward(self, items: Sequence[Item], result: ActionResult) -> None:
        item = items[0]
        if item.kind not in PORT_FORWARD_KINDS:
            result.message = (
                f"port-forward only works with pods and services (got {item.kind.alias})"
            )
            self.console.print(f"[yellow]{result.message}[/yellow]", highlight=False)
            return

        local_text = self._ask("Local port: ")
        if not local_text or not local_text.strip():
            result.ok = False
            result.message = "Cancelled"
            self.console.print("Cancelled.")
            return
        remote_text = self._ask(f"Remote port [{local_text.strip()}]: ")
        if remote_text is None:
            result.ok = False
            result.message = "Cancelled"
            self.console.print("Cancelled.")
            return
        try:
            local_port = parse_port(local_text)
            remote_port = parse_port(remote_text) if remote_text.strip() else local_port
        except InvalidPortError as exc:
            result.ok = False
            result.message = str(exc)
            self._error(result.message)
            return

        if is_privileged_port(local_port):
            self.console.print(
                f"[yellow]warning:[/yellow] local port {local_port} is privileged and may require elevated permissions",
                highlight=False,
            )
        target = f"{item.kind.alias}/{item.name}"
        self.console.print(
            f"Forwarding localhost:{local_port} → {target} port {remote_port}  (Ctrl-C to stop)",
            highlight=False,
        )
        returncode = self._interactive(
            self.commands.port_forward(item, local_port, remote_port), result
        )
        if returncode is None:
            result.message = "Port-forward stopped"
        elif returncode != 0:
            result.ok = False
            result.message = f"port-forward exited with {returncode}"
            self._error(result.message)

    def _restart(self, items: Sequence[Item], result: ActionResult) -> None:
        restarted = 0
        for item in items:
            if item.kind not in RESTARTABLE_KINDS:
                self.console.print(
                    f"[yellow]rollout restart only works with deploy/sts/ds (got {item.kind.alias})[/yellow]",
                    highlight=False,
                )
                continue
            target = f"{item.kind.alias}/{item.name}"
            completed = self._capture(self.commands.rollout_restart(item), result)
            if completed.returncode != 0:
                result.ok = False
                self._error(f"rollout restart failed: {completed.stderr.strip()}")
                continue
            restarted += 1
            self.console.print(f"↺ restarting {target}", highlight=False)
            if self._interactive(self.commands.rollout_status(item), result) is None:
                result.message = "Interrupted"
                return
        if not restarted and result.ok:
            result.ok = False
            result.message = "Nothing restartable in the selection"


__all__ = [
    "PAUSE_AFTER",
    "ActionDispatcher",
    "ActionResult",
    "Selection",
    "SubprocessRunner",
]
