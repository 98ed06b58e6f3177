from kk.core.abstract import formatters
from kk.core.models.result import Result


@formatters.register()
def name(result: Result) -> str:
    """One `kind/name` line per object, like `kubectl get -o name`."""
    return "\n".join(f"{result.kind.lower()}/{item.name}" for item in result.items)
