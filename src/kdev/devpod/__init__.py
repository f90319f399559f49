"""
Building, creating, listing and deleting devpods.
"""
from .builder import DevpodResources, build_resources
from .listing import DevpodSummary, list_devpods
from .reconciler import DevpodReconciler
from .spec import DevpodSpec, parse_pairs

__all__ = [
    "DevpodResources",
    "DevpodReconciler",
    "DevpodSpec",
    "DevpodSummary",
    "build_resources",
    "list_devpods",
    "parse_pairs",
]
