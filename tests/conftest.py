from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import patch

import pytest
from kubernetes.client import ApiException
from kubernetes.client.models import V1ObjectMeta, V1Pod, V1PodList

from kk import formatters as concrete_formatters  # noqa: F401
from kk.core.models.config import Config

KUBECONFIG = """
apiVersion: v1
kind: Config
current-context: dev
contexts:
- name: dev
  context:
    cluster: mock-cluster
    user: mock-user
    namespace: team-a
- name: prod
  context:
    cluster: mock-cluster
    user: mock-user
clusters:
- name: mock-cluster
  cluster:
    server: https://127.0.0.1:6443
users:
- name: mock-user
  user:
    token: mock-token
"""


def make_pod(name: str, namespace: Optional[str] = "default", labels: Optional[dict[str, str]] = None) -> V1Pod:
    return V1Pod(
        metadata=V1ObjectMeta(
            name=name,
            namespace=namespace,
            labels=labels,
            creation_timestamp=datetime.now(timezone.utc) - timedelta(hours=3, minutes=12),
        )
    )


@pytest.fixture
def pod_list() -> V1PodList:
    return V1PodList(
        items=[
            make_pod("mock-pod-1", labels={"app": "mock"}),
            make_pod("mock-pod-2", namespace="kube-system"),
        ]
    )


@pytest.fixture
def kubeconfig(tmp_path) -> str:
    path = tmp_path / "kubeconfig"
    path.write_text(KUBECONFIG)
    return str(path)


@pytest.fixture(autouse=True)
def mock_get_kube_client():
    with patch.object(Config, "get_kube_client", return_value=None):
        yield


@pytest.fixture
def api_error() -> ApiException:
    return ApiException(status=403, reason="Forbidden")
