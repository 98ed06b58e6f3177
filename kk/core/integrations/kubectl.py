import logging
import subprocess
from collections.abc import Sequence

from kk.core.exceptions import KubectlError

logger = logging.getLogger("kk")

KUBECTL = "kubectl"


def kubectl_command_args(
    args: Sequence[str], namespace: str = "", context: str = "", labels: str = ""
) -> list[str]:
    """Append the namespace, context and selector flags to `args`, skipping the empty ones."""

    cmd_args = list(args)
    if namespace:
        cmd_args.append(f"--namespace={namespace}")
    if context:
        cmd_args.append(f"--context={context}")
    if labels:
        cmd_args.append(f"--selector={labels}")
    return cmd_args


def run_command(name: str, *args: str, check: bool = False) -> list[str]:
    """Run a command and return its combined stdout and stderr split into lines.

    On failure a diagnostic line is printed to stdout and whatever output was produced is still returned,
    unless `check` is set, in which case `KubectlError` is raised.
    """

    logger.debug(f"Running: {name} {' '.join(args)}")
    try:
        result = subprocess.run([name, *args], stdout=subprocess.PIPE, stderr=subprocess.STDOUT)
        output, returncode = result.stdout, result.returncode
    except OSError as e:
        logger.debug(f"Could not start {name}: {e}")
        output, returncode = b"", 1

    lines = output.decode("utf-8", errors="replace").split("\n")
    if returncode != 0:
        print(f"error running command: {name} {list(args)}")
        if check:
            raise KubectlError(returncode, lines)

    return lines


def raw_kubectl_output(
    namespace: str, context: str, labels: str, *args: str, kubectl: str = KUBECTL, check: bool = False
) -> list[str]:
    cmd_args = kubectl_command_args(args, namespace, context, labels)
    return run_command(kubectl, *cmd_args, check=check)
