from __future__ import annotations

from typing import Any, Literal, Optional

import pydantic as pd

from kk.utils.duration import get_age

KindLiteral = Literal["DaemonSet", "Deployment", "Pod", "Node", "ConfigMap", "Secret", "StatefulSet", "Service"]

# NOTE: Node is the only cluster-scoped kind we list
CLUSTER_SCOPED_KINDS: frozenset[str] = frozenset({"Node"})


class ResourceRow(pd.BaseModel):
    name: str
    namespace: Optional[str] = None
    age: Optional[str] = None
    labels: dict[str, str] = pd.Field(default_factory=dict)

    @classmethod
    def from_api_object(cls, item: Any) -> ResourceRow:
        # Only metadata is read, so Secret payloads never end up in the output
        metadata = item.metadata
        return cls(
            name=metadata.name,
            namespace=metadata.namespace,
            age=get_age(metadata.creation_timestamp) if metadata.creation_timestamp is not None else None,
            labels=metadata.labels or {},
        )

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}" if self.namespace else self.name
