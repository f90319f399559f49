"""kdev: spin up, attach to, and clean up dev pods in Kubernetes."""

__version__ = "0.1.0"
