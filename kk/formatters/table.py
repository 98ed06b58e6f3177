from rich.table import Table

from kk.core.abstract import formatters
from kk.core.models.result import Result
from kk.utils.strings import keys_string

NONE_LITERAL = "<none>"


@formatters.register(rich_console=True)
def table(result: Result) -> Table:
    """Format the result as a table.

    The NAMESPACE column is only shown when listing across all namespaces.
    """

    if result.cluster_scoped:
        title = f"{result.kind}s"
    elif result.all_namespaces:
        title = f"{result.kind}s in all namespaces"
    else:
        title = f"{result.kind}s in namespace {result.namespace}"

    table = Table(
        show_header=True,
        header_style="bold magenta",
        title=title,
        title_justify="left",
        title_style="",
        caption=f"{len(result.items)} found",
    )

    if result.all_namespaces:
        table.add_column("Namespace", style="cyan")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Age", justify="right")
    table.add_column("Labels")

    for item in result.items:
        cells = [item.name, item.age or NONE_LITERAL, keys_string(item.labels) or NONE_LITERAL]
        if result.all_namespaces:
            cells.insert(0, item.namespace or NONE_LITERAL)
        table.add_row(*cells)

    return table
