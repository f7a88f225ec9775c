"""
Kubernetes client for pod enumeration and exec operations.
"""
import logging
from typing import Dict, List, Optional
from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.stream import stream

from k8sexec.kube_types import Pod, Workload

logger = logging.getLogger(__name__)


def to_label_selector(match_labels: Optional[Dict[str, str]]) -> str:
    """
    Convert match labels to a Kubernetes label selector string.

    Args:
        match_labels: Label key/value pairs (may be None)

    Returns:
        Selector such as "app=web,tier=front"; empty when there are no labels
    """
    return ",".join(f"{key}={value}" for key, value in (match_labels or {}).items())


class KubeClient:
    """Kubernetes client bound to a single namespace."""

    def __init__(
        self,
        namespace: str,
        kubeconfig: str | None = None,
        in_cluster: bool = False,
        context: str | None = None,
    ):
        """
        Initialize Kubernetes client.

        Args:
            namespace: Target Kubernetes namespace
            kubeconfig: Path to the kubeconfig file (optional)
            in_cluster: Whether running inside cluster (default: False)
            context: Kubernetes context name (optional)
        """
        self.namespace = namespace
        self.in_cluster = in_cluster

        try:
            if in_cluster:
                config.load_incluster_config()
            else:
                config.load_kube_config(config_file=kubeconfig, context=context)

            self.v1 = client.CoreV1Api()
            self.apps_v1 = client.AppsV1Api()
            logger.info(f"✅ Kubernetes client initialized for namespace: {namespace}")

        except Exception as e:
            logger.error(f"❌ Failed to initialize Kubernetes client: {e}")
            raise

    @staticmethod
    def _to_pod(pod) -> Pod:
        return Pod(
            name=pod.metadata.name,
            namespace=pod.metadata.namespace,
            status=(pod.status.phase if pod.status else None) or "",
            labels=pod.metadata.labels or {},
            containers=[c.name for c in (pod.spec.containers or [])] if pod.spec else [],
            creation_timestamp=pod.metadata.creation_timestamp
        )

    def _to_workload(self, kind: str, obj) -> Workload:
        selector = obj.spec.selector if obj.spec else None
        return Workload(
            kind=kind,
            name=obj.metadata.name,
            namespace=obj.metadata.namespace or self.namespace,
            match_labels=(selector.match_labels if selector else None) or {}
        )

    def get_pods(self, label_selector: str | None = None) -> List[Pod]:
        """
        Get pods in the namespace.

        Args:
            label_selector: Optional label selector for filtering

        Returns:
            List of Pod objects, in the order the API returned them
        """
        try:
            kwargs = {}
            if label_selector is not None:
                kwargs["label_selector"] = label_selector
            pods = self.v1.list_namespaced_pod(namespace=self.namespace, **kwargs)

            pod_list = [self._to_pod(pod) for pod in pods.items]

            logger.info(f"Retrieved {len(pod_list)} pods from namespace {self.namespace}")
            return pod_list

        except ApiException as e:
            logger.error(f"Failed to get pods: {e}")
            raise

    def get_pod(self, name: str) -> Pod:
        """
        Get a single pod by name.

        Args:
            name: Pod name

        Returns:
            Pod object
        """
        try:
            pod = self.v1.read_namespaced_pod(name=name, namespace=self.namespace)
            return self._to_pod(pod)
        except ApiException as e:
            logger.error(f"Failed to get pod {name}: {e}")
            raise

    def get_deployments(self) -> List[Workload]:
        """Get deployments in the namespace."""
        try:
            deployments = self.apps_v1.list_namespaced_deployment(namespace=self.namespace)
            return [self._to_workload("Deployment", d) for d in deployments.items]
        except ApiException as e:
            logger.error(f"Failed to get deployments: {e}")
            raise

    def get_stateful_sets(self) -> List[Workload]:
        """Get stateful sets in the namespace."""
        try:
            stateful_sets = self.apps_v1.list_namespaced_stateful_set(namespace=self.namespace)
            return [self._to_workload("StatefulSet", s) for s in stateful_sets.items]
        except ApiException as e:
            logger.error(f"Failed to get stateful sets: {e}")
            raise

    def open_exec(self, pod: str, container: str, command: List[str], stdin: bool = False):
        """
        Open an exec stream against a pod container.

        No pseudo-terminal is allocated. The returned websocket client is
        not preloaded; the caller drives it and must close it.

        Args:
            pod: Pod name
            container: Container name
            command: Argument vector to run
            stdin: Whether to attach a standard input channel

        Returns:
            kubernetes.stream.ws_client.WSClient
        """
        return stream(
            self.v1.connect_get_namespaced_pod_exec,
            pod,
            self.namespace,
            container=container,
            command=command,
            stdin=stdin,
            stdout=True,
            stderr=True,
            tty=False,
            _preload_content=False
        )
