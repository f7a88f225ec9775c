"""
Adapters that reduce namespace pods to unique execution targets.
"""
import logging
from collections import Counter
from typing import List

from kubernetes.client.rest import ApiException

from k8sexec.kube_client import KubeClient, to_label_selector
from k8sexec.kube_types import ExecutionTarget, Pod, Workload

logger = logging.getLogger(__name__)


class TargetAdapters:
    """Resolve which pods and containers a run should execute against."""

    def __init__(self, kube_client: KubeClient):
        self.kube_client = kube_client

    def _claim(self, workloads: List[Workload], unique_pods: List[Pod], claimed: Counter) -> None:
        for workload in workloads:
            # only the selector ties pods to their controller
            selector = to_label_selector(workload.match_labels)
            try:
                pods = self.kube_client.get_pods(label_selector=selector)
            except ApiException as e:
                logger.warning(f"Skipping {workload.kind} {workload.name}: {e}")
                continue

            representative = next((pod for pod in pods if pod.name not in claimed), None)
            if representative is not None:
                unique_pods.append(representative)
            for pod in pods:
                claimed[pod.name] += 1

    def unique_pods(self) -> List[Pod]:
        """
        Get one representative pod per workload plus every standalone pod.

        Deployments are processed before stateful sets, then the remaining
        pods of the namespace follow in API order. The representative of a
        workload is its first pod not already matched by an earlier
        selector, so no pod is added twice.

        Returns:
            Ordered list of unique Pod objects
        """
        unique_pods: List[Pod] = []
        claimed: Counter = Counter()

        deployments = self.kube_client.get_deployments()
        self._claim(deployments, unique_pods, claimed)
        logger.debug(f"Found {len(claimed)} pods in {len(deployments)} deployments")

        stateful_sets = self.kube_client.get_stateful_sets()
        self._claim(stateful_sets, unique_pods, claimed)
        logger.debug(f"Found {len(claimed)} pods in deployments and {len(stateful_sets)} stateful sets")

        for pod in self.kube_client.get_pods():
            if pod.name not in claimed:
                unique_pods.append(pod)

        logger.info(f"Resolved {len(unique_pods)} unique pods in namespace {self.kube_client.namespace}")
        return unique_pods

    @staticmethod
    def container_targets(pod: Pod) -> List[ExecutionTarget]:
        """Targets for every container of a pod, in declared order."""
        return [ExecutionTarget(pod=pod.name, container=name) for name in pod.containers]

    def running_targets(self) -> List[ExecutionTarget]:
        """Targets for every container of every running unique pod."""
        targets: List[ExecutionTarget] = []
        for pod in self.unique_pods():
            if pod.is_running:
                targets.extend(self.container_targets(pod))
        return targets
