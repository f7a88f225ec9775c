"""
Type definitions for Kubernetes objects.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from datetime import datetime

RUNNING = "Running"


@dataclass
class Pod:
    """Kubernetes Pod representation."""
    name: str
    namespace: str
    status: str
    labels: Dict[str, str]
    containers: List[str] = field(default_factory=list)
    creation_timestamp: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return self.status == RUNNING


@dataclass
class Workload:
    """Deployment or StatefulSet, reduced to what pod matching needs."""
    kind: str  # "Deployment", "StatefulSet"
    name: str
    namespace: str
    match_labels: Dict[str, str]


@dataclass(frozen=True)
class ExecutionTarget:
    """One exec destination."""
    pod: str
    container: str
