from __future__ import annotations

import logging
from typing import List, Optional

import typer
import urllib3
from pydantic import ValidationError

from kk import formatters as concrete_formatters  # noqa: F401
from kk.core.abstract import formatters
from kk.core.models.config import Config
from kk.core.models.objects import KindLiteral
from kk.core.runner import Runner
from kk.utils.version import get_version

app = typer.Typer(
    pretty_exceptions_show_locals=False,
    pretty_exceptions_short=True,
    no_args_is_help=True,
    help="Query a Kubernetes cluster for common resources, or pass arguments through to kubectl.",
)

# NOTE: Disable insecure request warnings, as it might be expected to use self-signed certificates inside the cluster
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

logger = logging.getLogger("kk")

KIND_COMMANDS: dict[str, KindLiteral] = {
    "daemonsets": "DaemonSet",
    "deployments": "Deployment",
    "pods": "Pod",
    "nodes": "Node",
    "configmaps": "ConfigMap",
    "secrets": "Secret",
    "statefulsets": "StatefulSet",
    "services": "Service",
}


@app.command(rich_help_panel="Utils")
def version() -> None:
    typer.echo(get_version())


def _set_config(**kwargs) -> bool:
    try:
        Config.set_config(Config(**{k: v for k, v in kwargs.items() if v is not None}))
    except ValidationError:
        logger.exception("Error occured while parsing arguments")
        return False
    return True


def load_commands() -> None:
    for command_name, kind in KIND_COMMANDS.items():
        # NOTE: This wrapper here is needed to avoid the kind being overwritten in the loop
        def kind_wrapper(_command_name: str = command_name, _kind: KindLiteral = kind):
            def list_kind(
                namespace: Optional[str] = typer.Option(
                    None,
                    "--namespace",
                    "-n",
                    help="Namespace to list in. By default, the namespace of the current kubeconfig context.",
                    rich_help_panel="Search Settings",
                ),
                all_namespaces: bool = typer.Option(
                    False,
                    "--all-namespaces",
                    "-A",
                    envvar="KK_ALL_NAMESPACES",
                    help="List across all namespaces. Overrides --namespace.",
                    rich_help_panel="Search Settings",
                ),
                selector: Optional[str] = typer.Option(
                    None,
                    "--selector",
                    "-l",
                    help="Label selector to filter on, supports '=', '==', and '!=' (e.g. -l key1=value1,key2=value2).",
                    rich_help_panel="Search Settings",
                ),
                field_selector: Optional[str] = typer.Option(
                    None,
                    "--field-selector",
                    help="Field selector to filter on (e.g. --field-selector status.phase=Running).",
                    rich_help_panel="Search Settings",
                ),
                kubeconfig: Optional[str] = typer.Option(
                    None,
                    "--kubeconfig",
                    "-k",
                    help="Path to kubeconfig file. If not provided, will attempt to find it.",
                    rich_help_panel="Kubernetes Settings",
                ),
                context: Optional[str] = typer.Option(
                    None,
                    "--context",
                    help="The kubeconfig context to use. By default, the current context.",
                    rich_help_panel="Kubernetes Settings",
                ),
                impersonate_user: Optional[str] = typer.Option(
                    None,
                    "--as",
                    help="Impersonate a user, just like `kubectl --as`. For example, system:serviceaccount:default:kk.",
                    rich_help_panel="Kubernetes Settings",
                ),
                impersonate_group: Optional[str] = typer.Option(
                    None,
                    "--as-group",
                    help="Impersonate a user inside of a group, just like `kubectl --as-group`. For example, system:authenticated.",
                    rich_help_panel="Kubernetes Settings",
                ),
                suppress_errors: bool = typer.Option(
                    False,
                    "--suppress-errors",
                    envvar="KK_SUPPRESS_ERRORS",
                    help="Treat a failed list call as an empty list instead of exiting with an error.",
                    rich_help_panel="Kubernetes Settings",
                ),
                format: str = typer.Option(
                    "table",
                    "--formatter",
                    "-f",
                    envvar="KK_FORMAT",
                    help=f"Output formatter ({', '.join(formatters.list_available())})",
                    rich_help_panel="Output Settings",
                ),
                file_output: Optional[str] = typer.Option(
                    None,
                    "--fileoutput",
                    help="Filename to write output to (if not specified, file output is disabled)",
                    rich_help_panel="Output Settings",
                ),
                width: Optional[int] = typer.Option(
                    None,
                    "--width",
                    help="Width of the output. Will use console width by default.",
                    rich_help_panel="Output Settings",
                ),
                verbose: bool = typer.Option(
                    False,
                    "--verbose",
                    "-v",
                    envvar="KK_VERBOSE",
                    help="Enable verbose mode",
                    rich_help_panel="Logging Settings",
                ),
                quiet: bool = typer.Option(
                    False,
                    "--quiet",
                    "-q",
                    envvar="KK_QUIET",
                    help="Enable quiet mode",
                    rich_help_panel="Logging Settings",
                ),
                log_to_stderr: bool = typer.Option(
                    False,
                    "--logtostderr",
                    envvar="KK_LOG_TO_STDERR",
                    help="Pass logs to stderr",
                    rich_help_panel="Logging Settings",
                ),
            ) -> None:
                ok = _set_config(
                    namespace=namespace,
                    all_namespaces=all_namespaces,
                    selector=selector,
                    field_selector=field_selector,
                    kubeconfig=kubeconfig,
                    context=context,
                    impersonate_user=impersonate_user,
                    impersonate_group=impersonate_group,
                    suppress_errors=suppress_errors,
                    format=format,
                    file_output=file_output,
                    width=width,
                    verbose=verbose,
                    quiet=quiet,
                    log_to_stderr=log_to_stderr,
                )
                if not ok:
                    raise typer.Exit(code=1)

                runner = Runner()
                raise typer.Exit(code=runner.list_resources(_kind))

            list_kind.__name__ = _command_name
            list_kind.__doc__ = f"List {_kind}s"
            app.command(name=_command_name, rich_help_panel="Resources")(list_kind)

        kind_wrapper()


@app.command(
    rich_help_panel="Utils",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def raw(
    ctx: typer.Context,
    namespace: Optional[str] = typer.Option(None, "--namespace", "-n", help="Namespace to pass to kubectl."),
    context: Optional[str] = typer.Option(None, "--context", help="The kubeconfig context to pass to kubectl."),
    selector: Optional[str] = typer.Option(None, "--selector", "-l", help="Label selector to pass to kubectl."),
    kubectl_path: Optional[str] = typer.Option(
        None, "--kubectl", envvar="KK_KUBECTL", help="kubectl binary to run. Defaults to `kubectl` on the PATH."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", envvar="KK_VERBOSE", help="Enable verbose mode. Short -v is passed through to kubectl."
    ),
) -> None:
    """Run kubectl with the given arguments, e.g. `kk raw get pods -n kube-system`"""
    args: List[str] = list(ctx.args)
    ok = _set_config(
        namespace=namespace,
        context=context,
        selector=selector,
        kubectl_path=kubectl_path,
        verbose=verbose,
    )
    if not ok:
        raise typer.Exit(code=1)

    runner = Runner()
    raise typer.Exit(code=runner.run_kubectl(args))


def run() -> None:
    load_commands()
    app()


if __name__ == "__main__":
    run()
