"""
This module contains the handler functions for the CLI commands.
"""
from .attach import attach_devpod
from .delete import delete_devpod
from .list import list_devpods_in_namespace
from .up import up_devpod

__all__ = [
    "attach_devpod",
    "delete_devpod",
    "list_devpods_in_namespace",
    "up_devpod",
]
