"""
tests/conftest.py - shared pytest fixtures

Provides an isolated profile store, scripted prompts, a recording session
launcher and helpers to build fake boto3 sessions.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from ec2ssh.core.interfaces import PromptProvider, SessionLauncher
from ec2ssh.domain.profiles import ProfileStore
from ec2ssh.infrastructure.state import JsonFileBackend


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Fake AWS credentials and no inherited ec2-ssh settings"""
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    for key in list(os.environ):
        if key.startswith("EC2SSH_") or key in ("COMP_LINE", "COMP_POINT"):
            monkeypatch.delenv(key, raising=False)
    yield


# =============================================================================
# Store
# =============================================================================


@pytest.fixture
def store_path(tmp_path) -> Path:
    return tmp_path / "ec2.json"


@pytest.fixture
def store(store_path) -> ProfileStore:
    return ProfileStore(JsonFileBackend(store_path))


def reload(store: ProfileStore) -> ProfileStore:
    """Open a fresh store on the same backing file"""
    return ProfileStore(JsonFileBackend(store.backend.path))


# =============================================================================
# Prompts and sessions
# =============================================================================


class ScriptedPrompts(PromptProvider):
    """Answers prompts from a script and records what was asked"""

    def __init__(self, answers: Optional[Dict[str, str]] = None, confirm_answer: bool = False):
        self.answers = answers or {}
        self.confirm_answer = confirm_answer
        self.asked: List[tuple] = []
        self.confirmations: List[str] = []
        self.messages: List[str] = []

    def prompt(self, message: str, default: Optional[str] = None) -> str:
        self.asked.append((message, default))
        return self.answers.get(message, default)

    def confirm(self, message: str, default: bool = False) -> bool:
        self.confirmations.append(message)
        return self.confirm_answer

    def info(self, message: str) -> None:
        self.messages.append(message)

    def error(self, message: str) -> None:
        self.messages.append(message)


class RecordingLauncher(SessionLauncher):
    """Returns a fixed exit status and records launches"""

    def __init__(self, code: int = 0):
        self.code = code
        self.launches: List[tuple] = []

    def launch(self, address: str, user: str, key_path: str) -> int:
        self.launches.append((address, user, key_path))
        return self.code


@pytest.fixture
def prompts() -> ScriptedPrompts:
    return ScriptedPrompts()


@pytest.fixture
def launcher() -> RecordingLauncher:
    return RecordingLauncher()


# =============================================================================
# AWS helpers
# =============================================================================


def make_instance(instance_id: str, address: Optional[str], name: Optional[str] = None) -> Dict[str, Any]:
    """describe_instances entry"""
    raw: Dict[str, Any] = {
        "InstanceId": instance_id,
        "State": {"Name": "running"},
        "Tags": [],
    }
    if address:
        raw["PublicIpAddress"] = address
    if name is not None:
        raw["Tags"].append({"Key": "Name", "Value": name})
    return raw


def make_session_factory(instances_by_region: Dict[str, List[Dict[str, Any]]], failing: tuple = ()):
    """
    Build a boto3.Session stand-in.

    Regions listed in failing raise a ClientError from describe_instances.
    """
    from botocore.exceptions import ClientError

    calls: List[Dict[str, Any]] = []

    def client(service, region_name=None):
        mock_client = MagicMock()
        if service == "ec2":
            paginator = MagicMock()
            if region_name in failing:
                paginator.paginate.side_effect = ClientError(
                    {"Error": {"Code": "UnauthorizedOperation", "Message": "denied"}},
                    "DescribeInstances",
                )
            else:
                paginator.paginate.return_value = [
                    {"Reservations": [{"Instances": instances_by_region.get(region_name, [])}]}
                ]
            mock_client.get_paginator.return_value = paginator
        return mock_client

    def factory(**kwargs):
        calls.append(kwargs)
        session = MagicMock()
        session.region_name = "eu-west-1"
        session.client.side_effect = client
        return session

    factory.calls = calls
    return factory
