import json
import subprocess
from unittest.mock import patch

import pytest
from kubernetes.client import AppsV1Api, CoreV1Api
from kubernetes.client.models import V1DeploymentList, V1Node, V1NodeList, V1ObjectMeta
from typer.testing import CliRunner

from kk.core.integrations.kubernetes import ClusterClient
from kk.main import KIND_COMMANDS, app, load_commands

runner = CliRunner()
load_commands()


def _assert_exit_code(result, expected: int = 0) -> None:
    try:
        assert result.exit_code == expected, result.stdout
    except AssertionError as e:
        raise e from result.exception


@pytest.mark.parametrize("command", list(KIND_COMMANDS))
def test_help(command: str):
    result = runner.invoke(app, [command, "--help"])
    _assert_exit_code(result)


def test_version():
    result = runner.invoke(app, ["version"])
    _assert_exit_code(result)
    assert result.stdout.strip() != ""


def test_list_pods_in_namespace(pod_list):
    with patch.object(CoreV1Api, "list_namespaced_pod", return_value=pod_list) as list_pods:
        result = runner.invoke(app, ["pods", "-q", "-n", "default", "-f", "json"])

    _assert_exit_code(result)
    list_pods.assert_called_once_with("default")
    data = json.loads(result.stdout)
    assert data["namespace"] == "default"
    assert [item["name"] for item in data["items"]] == ["mock-pod-1", "mock-pod-2"]


def test_list_pods_in_all_namespaces(pod_list):
    with patch.object(CoreV1Api, "list_pod_for_all_namespaces", return_value=pod_list) as list_pods:
        result = runner.invoke(app, ["pods", "-q", "-A", "-n", "ignored", "-l", "app=mock", "-f", "name"])

    _assert_exit_code(result)
    list_pods.assert_called_once_with(label_selector="app=mock")
    assert result.stdout.splitlines() == ["pod/mock-pod-1", "pod/mock-pod-2"]


def test_list_uses_kubeconfig_namespace(kubeconfig):
    deployments = V1DeploymentList(items=[])
    with patch.object(AppsV1Api, "list_namespaced_deployment", return_value=deployments) as list_deployments:
        result = runner.invoke(app, ["deployments", "-q", "-k", kubeconfig, "-f", "json"])

    _assert_exit_code(result)
    list_deployments.assert_called_once_with("team-a")
    assert json.loads(result.stdout) == {"kind": "Deployment", "namespace": "team-a", "items": []}


def test_list_nodes():
    nodes = V1NodeList(items=[V1Node(metadata=V1ObjectMeta(name="mock-node-1"))])
    with patch.object(CoreV1Api, "list_node", return_value=nodes) as list_node:
        result = runner.invoke(
            app, ["nodes", "-q", "-n", "ignored", "--field-selector", "spec.unschedulable=false", "-f", "json"]
        )

    _assert_exit_code(result)
    list_node.assert_called_once_with(field_selector="spec.unschedulable=false")
    data = json.loads(result.stdout)
    assert data["namespace"] == ""
    assert data["items"] == [{"name": "mock-node-1", "namespace": None, "age": None, "labels": {}}]


def test_table_output(pod_list):
    with patch.object(CoreV1Api, "list_pod_for_all_namespaces", return_value=pod_list):
        result = runner.invoke(app, ["pods", "-q", "-A", "--width", "200"])

    _assert_exit_code(result)
    assert "mock-pod-1" in result.stdout
    assert "kube-system" in result.stdout


def test_file_output(pod_list, tmp_path):
    target = tmp_path / "pods.json"
    with patch.object(CoreV1Api, "list_namespaced_pod", return_value=pod_list):
        result = runner.invoke(app, ["pods", "-q", "-n", "default", "-f", "json", "--fileoutput", str(target)])

    _assert_exit_code(result)
    assert json.loads(target.read_text())["kind"] == "Pod"


def test_list_error_exit_code(api_error):
    with patch.object(CoreV1Api, "list_namespaced_secret", side_effect=api_error):
        result = runner.invoke(app, ["secrets", "-q", "-n", "default", "-f", "json"])

    _assert_exit_code(result, 1)


def test_list_error_suppressed(api_error):
    with patch.object(CoreV1Api, "list_namespaced_secret", side_effect=api_error):
        result = runner.invoke(app, ["secrets", "-q", "-n", "default", "-f", "json", "--suppress-errors"])

    _assert_exit_code(result)
    assert json.loads(result.stdout)["items"] == []


def test_unknown_formatter():
    result = runner.invoke(app, ["pods", "-q", "-n", "default", "-f", "csv"])
    _assert_exit_code(result, 1)


def test_kubeconfig_error_exit_code():
    with patch("kk.core.models.config.Config.get_kube_client", side_effect=Exception("no kubeconfig")):
        result = runner.invoke(app, ["pods", "-q", "-n", "default"])

    _assert_exit_code(result, 1)


def test_raw():
    completed = subprocess.CompletedProcess(["kubectl"], 0, stdout=b"NAME\nmock-pod-1\n")
    with patch("kk.core.integrations.kubectl.subprocess.run", return_value=completed) as run:
        result = runner.invoke(
            app, ["raw", "get", "pods", "-o", "wide", "-n", "ns1", "--context", "ctx1", "-l", "app=x"]
        )

    _assert_exit_code(result)
    assert run.call_args.args[0] == [
        "kubectl",
        "get",
        "pods",
        "-o",
        "wide",
        "--namespace=ns1",
        "--context=ctx1",
        "--selector=app=x",
    ]
    assert result.stdout.splitlines() == ["NAME", "mock-pod-1"]


def test_raw_failure():
    completed = subprocess.CompletedProcess(["kubectl"], 1, stdout=b"error: the server doesn't have a resource type\n")
    with patch("kk.core.integrations.kubectl.subprocess.run", return_value=completed):
        result = runner.invoke(app, ["raw", "--kubectl", "/opt/kubectl", "get", "foo"])

    _assert_exit_code(result, 1)
    assert "error running command: /opt/kubectl ['get', 'foo']" in result.stdout
    assert "error: the server doesn't have a resource type" in result.stdout


def test_namespace_is_resolved_once(pod_list):
    with patch.object(ClusterClient, "default_namespace", return_value="team-b") as default_namespace:
        with patch.object(CoreV1Api, "list_namespaced_pod", return_value=pod_list) as list_pods:
            result = runner.invoke(app, ["pods", "-q", "-f", "json"])

    _assert_exit_code(result)
    assert default_namespace.call_count == 1
    list_pods.assert_called_once_with("team-b")
    assert json.loads(result.stdout)["namespace"] == "team-b"


def test_suppress_errors_from_env(api_error, monkeypatch):
    monkeypatch.setenv("KK_SUPPRESS_ERRORS", "true")
    with patch.object(CoreV1Api, "list_namespaced_secret", side_effect=api_error):
        result = runner.invoke(app, ["secrets", "-q", "-n", "default", "-f", "json"])

    _assert_exit_code(result)
    assert json.loads(result.stdout)["items"] == []


def test_format_and_all_namespaces_from_env(pod_list, monkeypatch):
    monkeypatch.setenv("KK_FORMAT", "name")
    monkeypatch.setenv("KK_ALL_NAMESPACES", "1")
    with patch.object(CoreV1Api, "list_pod_for_all_namespaces", return_value=pod_list) as list_pods:
        result = runner.invoke(app, ["pods", "-q"])

    _assert_exit_code(result)
    list_pods.assert_called_once_with()
    assert result.stdout.splitlines() == ["pod/mock-pod-1", "pod/mock-pod-2"]


def test_raw_missing_binary():
    with patch("kk.core.integrations.kubectl.subprocess.run", side_effect=FileNotFoundError("kubectl")):
        result = runner.invoke(app, ["raw", "get", "pods"])

    _assert_exit_code(result, 1)
    assert "error running command: kubectl ['get', 'pods']" in result.stdout


def test_raw_passes_short_verbose_to_kubectl():
    completed = subprocess.CompletedProcess(["kubectl"], 0, stdout=b"")
    with patch("kk.core.integrations.kubectl.subprocess.run", return_value=completed) as run:
        result = runner.invoke(app, ["raw", "get", "pods", "-v", "6"])

    _assert_exit_code(result)
    assert run.call_args.args[0] == ["kubectl", "get", "pods", "-v", "6"]
