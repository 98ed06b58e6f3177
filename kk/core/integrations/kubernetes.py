import logging
import os
from typing import Any, Callable, Optional

import yaml
from kubernetes import client, config  # type: ignore
from kubernetes.client import ApiException
from kubernetes.client.models import (
    V1ConfigMapList,
    V1DaemonSetList,
    V1DeploymentList,
    V1NodeList,
    V1PodList,
    V1SecretList,
    V1ServiceList,
    V1StatefulSetList,
)
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

from kk.core.exceptions import ResourceListError
from kk.core.models.objects import KindLiteral
from kk.core.models.options import ListOptions, SearchOptions

logger = logging.getLogger("kk")

DEFAULT_NAMESPACE = "default"
SERVICE_ACCOUNT_NAMESPACE_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/namespace"


class ClusterClient:
    """Read-only access to the cluster's list endpoints.

    Create one per process and share it, every call only reads from the API server.

    By default a failed list call raises `ResourceListError`. With `suppress_errors` the failure is logged
    at debug level and `None` is returned instead, which the caller cannot tell apart from an empty list.
    """

    def __init__(
        self,
        api_client: Optional[client.ApiClient] = None,
        *,
        kubeconfig: Optional[str] = None,
        context: Optional[str] = None,
        suppress_errors: bool = False,
    ) -> None:
        self.api_client = api_client
        self.kubeconfig = kubeconfig
        self.context = context
        self.suppress_errors = suppress_errors
        self.apps = client.AppsV1Api(api_client=self.api_client)
        self.core = client.CoreV1Api(api_client=self.api_client)

    def _kubeconfig_namespace(self) -> str:
        try:
            contexts, active_context = config.list_kube_config_contexts(config_file=self.kubeconfig)
        except ConfigException:
            # Not having a kubeconfig is fine inside of a pod, the namespace comes from the service account
            if os.path.isfile(SERVICE_ACCOUNT_NAMESPACE_PATH):
                with open(SERVICE_ACCOUNT_NAMESPACE_PATH) as f:
                    return f.read().strip() or DEFAULT_NAMESPACE
            raise

        if self.context is not None:
            selected = next((c for c in contexts if c["name"] == self.context), None)
            if selected is None:
                raise ConfigException(f"Context {self.context} not found in kubeconfig")
        else:
            selected = active_context

        return (selected.get("context") or {}).get("namespace") or DEFAULT_NAMESPACE

    def default_namespace(self) -> str:
        """The namespace of the current kubeconfig context, or "default" if it can not be resolved."""

        try:
            return self._kubeconfig_namespace()
        except (ConfigException, OSError, yaml.YAMLError) as e:
            logger.debug(f"Failed to resolve namespace: {e}")
            return DEFAULT_NAMESPACE

    def resolve_options(self, options: SearchOptions) -> tuple[str, ListOptions]:
        """Turn search options into the namespace to query and the list options to pass.

        Returns:
            An empty namespace when all namespaces should be listed.
        """

        if options.all_namespaces:
            namespace = ""
        elif options.namespace:
            namespace = options.namespace
        else:
            namespace = self.default_namespace()

        return namespace, ListOptions(label_selector=options.selector, field_selector=options.field_selector)

    def _requests(self, kind: KindLiteral) -> tuple[Callable[..., Any], Optional[Callable[..., Any]]]:
        # NOTE: Cluster-scoped kinds have no namespaced request
        requests: dict[str, tuple[Callable[..., Any], Optional[Callable[..., Any]]]] = {
            "DaemonSet": (self.apps.list_daemon_set_for_all_namespaces, self.apps.list_namespaced_daemon_set),
            "Deployment": (self.apps.list_deployment_for_all_namespaces, self.apps.list_namespaced_deployment),
            "Pod": (self.core.list_pod_for_all_namespaces, self.core.list_namespaced_pod),
            "Node": (self.core.list_node, None),
            "ConfigMap": (self.core.list_config_map_for_all_namespaces, self.core.list_namespaced_config_map),
            "Secret": (self.core.list_secret_for_all_namespaces, self.core.list_namespaced_secret),
            "StatefulSet": (self.apps.list_stateful_set_for_all_namespaces, self.apps.list_namespaced_stateful_set),
            "Service": (self.core.list_service_for_all_namespaces, self.core.list_namespaced_service),
        }
        try:
            return requests[kind]
        except KeyError as e:
            raise ValueError(f"Unknown kind '{kind}'") from e

    def list_resolved(self, kind: KindLiteral, namespace: str, list_options: ListOptions) -> Any:
        """List `kind` with options already passed through `resolve_options`."""

        all_namespaces_request, namespaced_request = self._requests(kind)
        if namespaced_request is None:
            namespace = ""

        logger.debug(f"Listing {kind}s in {namespace or 'all namespaces'} ({list_options.as_kwargs()})")
        try:
            if namespace == "":
                return all_namespaces_request(**list_options.as_kwargs())
            return namespaced_request(namespace, **list_options.as_kwargs())  # type: ignore
        except (ApiException, HTTPError) as e:
            reason = f"{e.status} {e.reason}" if isinstance(e, ApiException) else str(e)
            if not self.suppress_errors:
                raise ResourceListError(kind, namespace, reason) from e

            logger.debug(f"Unable to get {kind} list: {reason}")
            return None

    def list(self, kind: KindLiteral, options: SearchOptions) -> Any:
        self._requests(kind)  # NOTE: raises on an unknown kind before touching the kubeconfig
        return self.list_resolved(kind, *self.resolve_options(options))

    def list_daemonsets(self, options: SearchOptions) -> Optional[V1DaemonSetList]:
        return self.list("DaemonSet", options)

    def list_deployments(self, options: SearchOptions) -> Optional[V1DeploymentList]:
        return self.list("Deployment", options)

    def list_pods(self, options: SearchOptions) -> Optional[V1PodList]:
        return self.list("Pod", options)

    def list_nodes(self, options: SearchOptions) -> Optional[V1NodeList]:
        return self.list("Node", options)

    def list_configmaps(self, options: SearchOptions) -> Optional[V1ConfigMapList]:
        return self.list("ConfigMap", options)

    def list_secrets(self, options: SearchOptions) -> Optional[V1SecretList]:
        return self.list("Secret", options)

    def list_statefulsets(self, options: SearchOptions) -> Optional[V1StatefulSetList]:
        return self.list("StatefulSet", options)

    def list_services(self, options: SearchOptions) -> Optional[V1ServiceList]:
        return self.list("Service", options)
