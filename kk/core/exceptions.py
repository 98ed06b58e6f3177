from typing import Optional


class KKException(Exception):
    """Base class for all kk errors."""


class ResourceListError(KKException):
    """A cluster list call failed."""

    def __init__(self, kind: str, namespace: Optional[str], reason: str) -> None:
        self.kind = kind
        self.namespace = namespace
        self.reason = reason
        where = "all namespaces" if not namespace else f"namespace {namespace}"
        super().__init__(f"Unable to get {kind} list in {where}: {reason}")


class KubectlError(KKException):
    """kubectl could not be run or exited with a non-zero code."""

    def __init__(self, returncode: int, lines: list[str]) -> None:
        self.returncode = returncode
        self.lines = lines
        super().__init__(f"kubectl exited with code {returncode}")
