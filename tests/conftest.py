"""
Shared pytest fixtures for k8sexec tests.

This module provides:
- Builders for kubernetes.client model objects (pods, deployments, stateful sets)
- FakeCluster: in-memory CoreV1Api/AppsV1Api stand-in with label selector filtering
- FakeExecStream: stand-in for the websocket client returned by kubernetes.stream
"""

import json
from typing import Dict, List, Optional
from unittest.mock import patch

import pytest
from kubernetes import client as k8s
from kubernetes.client.rest import ApiException

from k8sexec.kube_client import KubeClient


# =============================================================================
# Kubernetes object builders
# =============================================================================

def make_pod(name: str, phase: str = "Running", containers=("app",),
             labels: Optional[Dict[str, str]] = None, namespace: str = "default") -> k8s.V1Pod:
    return k8s.V1Pod(
        metadata=k8s.V1ObjectMeta(name=name, namespace=namespace, labels=labels or {}),
        spec=k8s.V1PodSpec(containers=[k8s.V1Container(name=c) for c in containers]),
        status=k8s.V1PodStatus(phase=phase),
    )


def make_deployment(name: str, match_labels: Dict[str, str], namespace: str = "default") -> k8s.V1Deployment:
    return k8s.V1Deployment(
        metadata=k8s.V1ObjectMeta(name=name, namespace=namespace),
        spec=k8s.V1DeploymentSpec(
            selector=k8s.V1LabelSelector(match_labels=match_labels),
            template=k8s.V1PodTemplateSpec(),
        ),
    )


def make_stateful_set(name: str, match_labels: Dict[str, str], namespace: str = "default") -> k8s.V1StatefulSet:
    return k8s.V1StatefulSet(
        metadata=k8s.V1ObjectMeta(name=name, namespace=namespace),
        spec=k8s.V1StatefulSetSpec(
            selector=k8s.V1LabelSelector(match_labels=match_labels),
            service_name=name,
            template=k8s.V1PodTemplateSpec(),
        ),
    )


# =============================================================================
# Fake cluster API
# =============================================================================

class FakeCluster:
    """
    Minimal CoreV1Api + AppsV1Api replacement.

    Pods are returned in insertion order. Selectors listed in
    failing_selectors raise ApiException, like a rejected list call.
    """

    def __init__(self):
        self.pods: List[k8s.V1Pod] = []
        self.deployments: List[k8s.V1Deployment] = []
        self.stateful_sets: List[k8s.V1StatefulSet] = []
        self.failing_selectors: set = set()
        self.selector_calls: List[Optional[str]] = []

    @staticmethod
    def _matches(pod: k8s.V1Pod, selector: Optional[str]) -> bool:
        if not selector:
            return True
        labels = pod.metadata.labels or {}
        for part in selector.split(","):
            key, value = part.split("=", 1)
            if labels.get(key) != value:
                return False
        return True

    # CoreV1Api
    def list_namespaced_pod(self, namespace: str, label_selector: Optional[str] = None):
        self.selector_calls.append(label_selector)
        if label_selector in self.failing_selectors:
            raise ApiException(status=500, reason="Internal Server Error")
        return k8s.V1PodList(items=[p for p in self.pods if self._matches(p, label_selector)])

    def read_namespaced_pod(self, name: str, namespace: str):
        for pod in self.pods:
            if pod.metadata.name == name:
                return pod
        raise ApiException(status=404, reason="Not Found")

    def connect_get_namespaced_pod_exec(self, name: str, namespace: str, **kwargs):
        raise NotImplementedError("exec goes through kubernetes.stream")

    # AppsV1Api
    def list_namespaced_deployment(self, namespace: str):
        return k8s.V1DeploymentList(items=self.deployments)

    def list_namespaced_stateful_set(self, namespace: str):
        return k8s.V1StatefulSetList(items=self.stateful_sets)


@pytest.fixture
def cluster():
    """Empty fake cluster."""
    return FakeCluster()


@pytest.fixture
def kube_client(cluster):
    """KubeClient wired to the fake cluster instead of a kubeconfig."""
    with patch("k8sexec.kube_client.config"), patch("k8sexec.kube_client.client") as api:
        api.CoreV1Api.return_value = cluster
        api.AppsV1Api.return_value = cluster
        yield KubeClient(namespace="default")


# =============================================================================
# Fake exec stream
# =============================================================================

SUCCESS_STATUS = json.dumps({"metadata": {}, "status": "Success"})


def exit_status(code: int) -> str:
    return json.dumps({
        "metadata": {},
        "status": "Failure",
        "message": f"command terminated with non-zero exit code: error executing command, exit code {code}",
        "reason": "NonZeroExitCode",
        "details": {"causes": [{"reason": "ExitCode", "message": str(code)}]},
    })


class FakeExecStream:
    """Delivers canned output over a fixed number of update() rounds."""

    def __init__(self, stdout: str = "", stderr: str = "", error_channel: str = SUCCESS_STATUS,
                 rounds: int = 2, fail_with: Optional[Exception] = None, fail_after: int = 0,
                 reads_stdin: bool = False):
        self._pending = [(1, stdout), (2, stderr)]
        self._channels: Dict[int, str] = {}
        self._rounds = rounds
        self._fail_with = fail_with
        self._fail_after = fail_after
        self._reads_stdin = reads_stdin
        self._updates = 0
        self.stdin_closed = False
        self.error_channel = error_channel
        self.written: List[bytes] = []
        self.closed = False

    def is_open(self) -> bool:
        return self._rounds > 0 and not self.closed

    def update(self, timeout=0):
        self._updates += 1
        if self._reads_stdin and not self.stdin_closed:
            # like sh reading a script: nothing happens until stdin hits EOF
            if self._updates > 50:
                raise AssertionError("remote command still waiting for stdin EOF")
            return
        self._rounds -= 1
        if self._fail_with is not None and self._updates > self._fail_after:
            raise self._fail_with
        # one pending chunk per round
        if self._pending:
            channel, data = self._pending.pop(0)
            if data:
                self._channels[channel] = self._channels.get(channel, "") + data

    def peek_stdout(self):
        return self._channels.get(1, "")

    def read_stdout(self):
        return self._channels.pop(1, "")

    def peek_stderr(self):
        return self._channels.get(2, "")

    def read_stderr(self):
        return self._channels.pop(2, "")

    def read_channel(self, channel, timeout=0):
        assert channel == 3
        return self.error_channel

    def write_stdin(self, data):
        self.written.append(data)

    def close_channel(self, channel, timeout=None):
        assert channel == 0
        self.stdin_closed = True

    def close(self):
        self.closed = True
