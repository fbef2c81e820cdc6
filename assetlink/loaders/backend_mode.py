"""Backend selection for asset byte access."""

from enum import Enum


class BackendMode(Enum):
    """How asset bytes reach the loader during one scene load."""

    # Host bridge reads files straight from the project directory
    NATIVE_IPC = "native_ipc"
    # Assets are requested from the project server's asset API
    HTTP_API = "http_api"
    # No project: paths are handed to the loader as they are
    PASS_THROUGH = "pass_through"
