"""
Run orchestration: pick targets, execute sequentially, aggregate results.
"""
import io
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from kubernetes.client.rest import ApiException

from k8sexec.adapters import TargetAdapters
from k8sexec.config import settings
from k8sexec.executor import RemoteExecutor
from k8sexec.kube_client import KubeClient
from k8sexec.kube_types import ExecutionTarget
from k8sexec.models import EnumerationStatus

logger = logging.getLogger(__name__)


class RunError(Exception):
    """Fatal error that aborts a run before any result is produced."""


@dataclass(frozen=True)
class Selection:
    """Which pods and containers a run targets."""
    namespace: str
    pod: str = ""
    container: str = ""


class Runner:
    """Executes one command across the selected containers of a namespace."""

    def __init__(self, kube_client: KubeClient, default_shell: Optional[str] = None):
        self.kube_client = kube_client
        self.adapters = TargetAdapters(kube_client)
        self.executor = RemoteExecutor(kube_client)
        self.default_shell = default_shell or settings.DEFAULT_SHELL

    def _targets(self, selection: Selection) -> List[ExecutionTarget]:
        if selection.pod and not selection.container:
            pod = self._get_pod(selection.pod)
            if not pod.is_running:
                # silently empty, unlike the pod+container case
                logger.info(f"Pod {pod.name} is in phase {pod.status or 'Unknown'}, nothing to execute")
                return []
            return self.adapters.container_targets(pod)

        if selection.pod and selection.container:
            pod = self._get_pod(selection.pod)
            if not pod.is_running:
                raise RunError(f"Pod {selection.pod} is not in Running phase")
            return [ExecutionTarget(pod=selection.pod, container=selection.container)]

        if selection.container:
            logger.warning(f"Container {selection.container} given without a pod, nothing to execute")
            return []

        try:
            return self.adapters.running_targets()
        except ApiException as e:
            raise RunError(f"Failed to list workloads in namespace {selection.namespace}: {e}") from e

    def _get_pod(self, name: str):
        try:
            return self.kube_client.get_pod(name)
        except ApiException as e:
            raise RunError(f"Failed to get pod {name}: {e}") from e

    def run(self, selection: Selection, args: Sequence[str], stdin: bytes = b"") -> EnumerationStatus:
        """
        Execute a command in every selected container, one at a time.

        Args:
            selection: Namespace and optional pod/container
            args: Command argument vector (may be empty when stdin is given)
            stdin: Captured standard input, replayed for every target

        Returns:
            EnumerationStatus with one ExecutionStatus per target

        Raises:
            RunError: no command and no stdin, or the named pod is unusable
        """
        args = list(args)
        if not stdin and not args:
            raise RunError("No commands provided either by stdin or arguments.")
        if stdin and not args:
            args = [self.default_shell]

        result = EnumerationStatus.create(stdin.decode("utf-8", errors="replace"), args, selection.namespace)
        targets = self._targets(selection)
        logger.info(f"Executing {args} in {len(targets)} containers")

        for target in targets:
            # every target needs its own cursor over the same buffer
            status = self.executor.execute(target, args, io.BytesIO(stdin))
            result.statuses.append(status)

        return result
