"""Command-line entry point (``kf``)."""

from __future__ import annotations

import logging
import shutil

import click

from kubefuzz import __version__
from kubefuzz.app import NavigatorApp
from kubefuzz.constants.defaults import KUBECTL_BINARY
from kubefuzz.constants.enums import ALL_KINDS, ResourceKind
from kubefuzz.controllers.cluster import ContextManager, WatchRuntime
from kubefuzz.models.state import NavigatorSettings
from kubefuzz.utils import RuntimeDir, RuntimeDirError, configure_logging

logger = logging.getLogger(__name__)


def _resolve_kinds(resource: str | None) -> list[ResourceKind]:
    if not resource:
        return list(ALL_KINDS)
    kind = ResourceKind.from_alias(resource)
    if kind is None:
        raise click.BadParameter(
            f"unknown resource type {resource!r}", param_hint="RESOURCE"
        )
    return [kind]


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("resource", required=False)
@click.option("--context", "context", default=None, help="Kubeconfig context to open.")
@click.option(
    "-n", "--namespace", "namespace", default=None, help="Only watch this namespace."
)
@click.option(
    "--kubeconfig",
    "kubeconfig",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to the kubeconfig file.",
)
@click.option(
    "--all-contexts",
    "all_contexts",
    is_flag=True,
    help="Watch every kubeconfig context in one merged list.",
)
@click.option(
    "--read-only",
    "read_only",
    is_flag=True,
    help="Disable exec, delete, port-forward and restart.",
)
@click.option(
    "--log-file",
    "log_file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Write logs here instead of the default state directory.",
)
@click.option("--debug", "debug", is_flag=True, help="Enable debug logging.")
@click.version_option(__version__, prog_name="kf")
def main(
    resource: str | None,
    context: str | None,
    namespace: str | None,
    kubeconfig: str | None,
    all_contexts: bool,
    read_only: bool,
    log_file: str | None,
    debug: bool,
) -> None:
    """Browse Kubernetes RESOURCE objects (default: all kinds), worst health first."""
    if context and all_contexts:
        raise click.UsageError("--context and --all-contexts are mutually exclusive")

    settings = NavigatorSettings(
        context=context,
        namespace=namespace,
        kubeconfig=kubeconfig,
        all_contexts=all_contexts,
        kinds=_resolve_kinds(resource),
        read_only=read_only,
        log_file=log_file,
        debug=debug,
    )
    configure_logging(settings.log_file, settings.debug)
    logger.info("Starting kf %s (kinds=%s)", __version__, settings.kind_label)

    if shutil.which(KUBECTL_BINARY) is None:
        click.echo(
            f"kf: {KUBECTL_BINARY} not found on PATH; showing demo data", err=True
        )

    runtime_dir = RuntimeDir()
    try:
        runtime_dir.create()
    except RuntimeDirError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        with WatchRuntime() as runtime:
            manager = ContextManager(
                runtime,
                kubeconfig=settings.kubeconfig,
                namespace=settings.namespace,
                kinds=settings.kinds,
            )
            app = NavigatorApp(settings, manager, runtime_dir=runtime_dir)
            try:
                app.run()
            finally:
                manager.stop()
    finally:
        runtime_dir.cleanup()
    logger.info("kf exited")


__all__ = ["main"]
