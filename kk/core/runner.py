import logging
from typing import Optional

from rich.console import Console

from kk.core.exceptions import KubectlError, ResourceListError
from kk.core.integrations.kubectl import raw_kubectl_output
from kk.core.integrations.kubernetes import ClusterClient
from kk.core.models.config import settings
from kk.core.models.objects import KindLiteral
from kk.core.models.result import Result
from kk.utils.print import print

logger = logging.getLogger("kk")


class Runner:
    # NOTE: These formats are written to files as plain text, the rest go through a rich console
    PLAIN_TEXT_FORMATS = ("json", "yaml", "name")

    def __init__(self, client: Optional[ClusterClient] = None) -> None:
        self._client = client

    def _get_client(self) -> ClusterClient:
        if self._client is None:
            self._client = ClusterClient(
                settings.get_kube_client(),
                kubeconfig=settings.kubeconfig,
                context=settings.context,
                suppress_errors=settings.suppress_errors,
            )
        return self._client

    def _process_result(self, result: Result) -> None:
        Formatter = settings.Formatter
        formatted = result.format(Formatter)
        rich = getattr(Formatter, "__rich_console__", False)

        print(formatted, rich=rich, force=True)

        if settings.file_output:
            logger.info(f"Writing output to file: {settings.file_output}")
            with open(settings.file_output, "w") as target_file:
                if settings.format in self.PLAIN_TEXT_FORMATS:
                    target_file.write(formatted)
                else:
                    console = Console(file=target_file, width=settings.width)
                    console.print(formatted)

    def list_resources(self, kind: KindLiteral) -> int:
        """List one kind of resource and print it. The return value is the exit code of the program."""

        try:
            client = self._get_client()
        except Exception as e:
            logger.error(f"Could not load kubernetes configuration: {e}")
            logger.error("Try to explicitly set --context and/or --kubeconfig flags.")
            return 1

        try:
            namespace, list_options = client.resolve_options(settings.search_options)
            resource_list = client.list_resolved(kind, namespace, list_options)
            if kind == "Node":
                namespace = ""
            result = Result.from_resource_list(kind, namespace, resource_list)
            logger.debug(f"Found {len(result.items)} {kind}s")
            self._process_result(result)
        except ResourceListError as e:
            logger.error(str(e))
            return 1
        except Exception:
            logger.exception("An unexpected error occurred")
            return 1
        else:
            return 0

    def run_kubectl(self, args: list[str]) -> int:
        """Pass `args` through to kubectl and print its output. The return value is kubectl's exit code."""

        try:
            lines = raw_kubectl_output(
                settings.namespace or "",
                settings.context or "",
                settings.selector,
                *args,
                kubectl=settings.kubectl_path,
                check=True,
            )
        except KubectlError as e:
            print("\n".join(e.lines).rstrip("\n"), rich=False, force=True)
            return e.returncode
        else:
            print("\n".join(lines).rstrip("\n"), rich=False, force=True)
            return 0
