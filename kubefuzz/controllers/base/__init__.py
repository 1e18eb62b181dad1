"""Base controller classes."""

from kubefuzz.controllers.base.base_controller import (
    BaseController,
    Listing,
    WatchEvent,
    WorkerResult,
)

__all__ = ["BaseController", "Listing", "WatchEvent", "WorkerResult"]
