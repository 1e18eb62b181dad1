"""Resource fetcher - lists and watches objects of one kind through kubectl."""

from __future__ import annotations

import asyncio
import codecs
import json
import logging
from collections import deque
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import suppress
from typing import Any
from urllib.parse import urlencode

from kubefuzz.constants.enums import ResourceKind, WatchEventType
from kubefuzz.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    WATCH_PROCESS_KILL_GRACE,
)
from kubefuzz.controllers.base import Listing, WatchEvent

logger = logging.getLogger(__name__)

RunKubectl = Callable[[tuple[str, ...]], Awaitable[str]]
OpenStream = Callable[[tuple[str, ...]], Awaitable[asyncio.subprocess.Process]]


class WatchStreamError(Exception):
    """Raised when a watch stream fails or ends; the watcher reconnects."""


class JsonStreamDecoder:
    """Incrementally decodes a stream of concatenated JSON documents.

    ``kubectl get --watch -o json`` prints one pretty-printed document per
    event with no delimiter, so documents are split with ``raw_decode``.
    """

    MAX_BUFFER_CHARS = 64 * 1024 * 1024

    def __init__(self) -> None:
        self._decoder = json.JSONDecoder()
        self._text = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[Any]:
        """Add ``chunk`` and return every document completed by it."""
        self._buffer += self._text.decode(chunk)
        documents: list[Any] = []
        while True:
            stripped = self._buffer.lstrip()
            if not stripped:
                self._buffer = ""
                break
            try:
                document, end = self._decoder.raw_decode(stripped)
            except json.JSONDecodeError:
                # Incomplete document: wait for more data.
                self._buffer = stripped
                if len(self._buffer) > self.MAX_BUFFER_CHARS:
                    raise WatchStreamError("Watch stream produced undecodable output")
                break
            documents.append(document)
            self._buffer = stripped[end:]
        return documents


class ResourceFetcher:
    """Builds kubectl list/watch invocations for a resource kind."""

    _READ_CHUNK_SIZE = 64 * 1024
    _STDERR_TAIL_LINES = 20

    def __init__(self, run_kubectl_func: RunKubectl, open_stream_func: OpenStream) -> None:
        """Initialize with kubectl runner functions.

        Args:
            run_kubectl_func: Async function running kubectl and returning stdout
            open_stream_func: Async function spawning a long-lived kubectl process
        """
        self._run_kubectl = run_kubectl_func
        self._open_stream = open_stream_func

    @staticmethod
    def _scope_args(kind: ResourceKind, namespace: str | None) -> list[str]:
        """Namespace scope; cluster-scoped kinds ignore the namespace filter."""
        if kind.cluster_scoped:
            return []
        if namespace:
            return ["-n", namespace]
        return ["--all-namespaces"]

    def build_list_args(
        self,
        kind: ResourceKind,
        namespace: str | None = None,
        request_timeout: str = CLUSTER_REQUEST_TIMEOUT,
    ) -> tuple[str, ...]:
        return (
            "get",
            kind.resource,
            *self._scope_args(kind, namespace),
            "-o",
            "json",
            f"--request-timeout={request_timeout}",
        )

    def build_watch_args(
        self,
        kind: ResourceKind,
        namespace: str | None = None,
        resource_version: str | None = None,
    ) -> tuple[str, ...]:
        """Watch invocation; resumes after ``resource_version`` when one is known.

        ``kubectl get --watch`` cannot start from a given version, so a resumed
        watch talks to the API path directly. The server then replays every
        change made since the listing and answers 410 Gone with an ERROR event
        when that version has already been compacted away.
        """
        if resource_version:
            query = urlencode({"watch": "1", "resourceVersion": resource_version})
            return (
                "get",
                "--raw",
                f"{kind.api_path(namespace)}?{query}",
                "--request-timeout=0",
            )
        return (
            "get",
            kind.resource,
            *self._scope_args(kind, namespace),
            "--watch-only",
            "--output-watch-events",
            "-o",
            "json",
            "--request-timeout=0",
        )

    async def list_objects(
        self, kind: ResourceKind, namespace: str | None = None
    ) -> Listing:
        """Fetch the full current listing of ``kind`` and its resource version."""
        output = await self._run_kubectl(self.build_list_args(kind, namespace))
        if not output.strip():
            return Listing()
        try:
            data = json.loads(output)
        except json.JSONDecodeError as exc:
            raise WatchStreamError(f"Unparseable {kind.alias} listing: {exc}") from exc
        if not isinstance(data, dict):
            return Listing()
        items = data.get("items") or []
        metadata = data.get("metadata")
        resource_version = metadata.get("resourceVersion") if isinstance(metadata, dict) else None
        return Listing(
            objects=[item for item in items if isinstance(item, dict)],
            resource_version=str(resource_version) if resource_version else None,
        )

    @staticmethod
    def parse_event(document: Any) -> WatchEvent | None:
        """Convert one decoded watch document into a WatchEvent.

        Raises:
            WatchStreamError: For ERROR events (e.g. expired resource version).
        """
        if not isinstance(document, dict):
            return None
        try:
            event_type = WatchEventType(document.get("type"))
        except ValueError:
            logger.debug("Ignoring watch document with type %r", document.get("type"))
            return None
        obj = document.get("object")
        obj = obj if isinstance(obj, dict) else {}
        if event_type is WatchEventType.ERROR:
            message = obj.get("message") or obj.get("reason") or "watch error event"
            raise WatchStreamError(str(message))
        if event_type is WatchEventType.BOOKMARK:
            return None
        return WatchEvent(type=event_type, object=obj)

    async def _drain_stderr(
        self, stream: asyncio.StreamReader, tail: deque[str], kind: ResourceKind
    ) -> None:
        """Consume stderr until EOF, keeping the last lines for the error message.

        Left unread, a chatty stderr fills the pipe and kubectl blocks before
        writing the next event to stdout.
        """
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        pending = ""
        while True:
            chunk = await stream.read(self._READ_CHUNK_SIZE)
            if not chunk:
                break
            lines = (pending + decoder.decode(chunk)).split("\n")
            pending = lines.pop()
            for line in lines:
                self._record_stderr_line(line, tail, kind)
        self._record_stderr_line(pending + decoder.decode(b"", final=True), tail, kind)

    @staticmethod
    def _record_stderr_line(line: str, tail: deque[str], kind: ResourceKind) -> None:
        line = line.strip()
        if line:
            logger.debug("%s watch stderr: %s", kind.alias, line)
            tail.append(line)

    async def watch_objects(
        self,
        kind: ResourceKind,
        namespace: str | None = None,
        resource_version: str | None = None,
    ) -> AsyncIterator[WatchEvent]:
        """Stream watch events for ``kind``.

        Always ends by raising WatchStreamError (stream closed or failed) unless
        cancelled; the kubectl process is killed on exit either way.
        """
        process = await self._open_stream(
            self.build_watch_args(kind, namespace, resource_version)
        )
        decoder = JsonStreamDecoder()
        stderr_tail: deque[str] = deque(maxlen=self._STDERR_TAIL_LINES)
        drain: asyncio.Task[None] | None = None
        if process.stderr is not None:
            drain = asyncio.create_task(self._drain_stderr(process.stderr, stderr_tail, kind))
        try:
            assert process.stdout is not None
            while True:
                chunk = await process.stdout.read(self._READ_CHUNK_SIZE)
                if not chunk:
                    break
                for document in decoder.feed(chunk):
                    event = self.parse_event(document)
                    if event is not None:
                        yield event

            returncode = await process.wait()
            if drain is not None:
                with suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(asyncio.shield(drain), WATCH_PROCESS_KILL_GRACE)
            detail = "\n".join(stderr_tail)
            raise WatchStreamError(
                detail or f"{kind.alias} watch stream closed (exit {returncode})"
            )
        finally:
            await terminate_process(process)
            if drain is not None:
                drain.cancel()
                await asyncio.gather(drain, return_exceptions=True)


async def terminate_process(process: asyncio.subprocess.Process) -> None:
    """Terminate a child process and reap it, escalating to kill."""
    if process.returncode is not None:
        return
    with suppress(ProcessLookupError):
        process.terminate()
    try:
        await asyncio.wait_for(process.wait(), timeout=WATCH_PROCESS_KILL_GRACE)
    except asyncio.TimeoutError:
        with suppress(ProcessLookupError):
            process.kill()
        with suppress(Exception):
            await process.wait()


__all__ = [
    "JsonStreamDecoder",
    "ResourceFetcher",
    "WatchStreamError",
    "terminate_process",
]
