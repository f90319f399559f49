"""
This file contains shared fixtures for all tests.
"""

from unittest.mock import MagicMock

import pytest
from kubernetes import client

from kdev.devpod.spec import DevpodSpec
from tests.helpers import Pipe


@pytest.fixture
def core_v1() -> MagicMock:
    """A CoreV1Api double; every call succeeds unless a test says otherwise."""
    api = MagicMock(spec=client.CoreV1Api)
    api.list_namespaced_pod.return_value = MagicMock(items=[])
    return api


@pytest.fixture
def minimal_spec() -> DevpodSpec:
    return DevpodSpec(name="mydev", image="registry.local/img:latest", namespace="dev")


@pytest.fixture
def config_path(tmp_path):
    """Points the CLI at a config file that does not exist, so defaults apply."""
    return str(tmp_path / "config.yml")


@pytest.fixture
def stdin_pipe():
    """A pipe standing in for the caller's stdin."""
    pipe = Pipe()
    yield pipe
    pipe.close()
