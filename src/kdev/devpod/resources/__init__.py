"""
Manifest builders for the resources that make up a devpod.
"""
from .pod import build_pod
from .pvc import build_persistent_volume_claim
from .serviceaccount import build_service_account

__all__ = [
    "build_pod",
    "build_persistent_volume_claim",
    "build_service_account",
]
