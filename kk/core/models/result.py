from __future__ import annotations

from typing import Any, Optional, Union

import pydantic as pd

from kk.core.abstract import formatters
from kk.core.models.objects import CLUSTER_SCOPED_KINDS, KindLiteral, ResourceRow


class Result(pd.BaseModel):
    kind: KindLiteral
    # NOTE: An empty string here means the list was made across all namespaces
    namespace: str = ""
    items: list[ResourceRow] = pd.Field(default_factory=list)

    @property
    def cluster_scoped(self) -> bool:
        return self.kind in CLUSTER_SCOPED_KINDS

    @property
    def all_namespaces(self) -> bool:
        return not self.cluster_scoped and self.namespace == ""

    @classmethod
    def from_resource_list(cls, kind: KindLiteral, namespace: str, resource_list: Optional[Any]) -> Result:
        """Build a result from a raw kubernetes client list object.

        A `None` list (a suppressed failure) gives an empty result.
        """

        items = [] if resource_list is None else resource_list.items or []
        return cls(
            kind=kind,
            namespace=namespace,
            items=[ResourceRow.from_api_object(item) for item in items],
        )

    def format(self, formatter: Union[formatters.FormatterFunc, str]) -> Any:
        """Format the result.

        Args:
            formatter: The formatter to use.

        Returns:
            The formatted result.
        """

        formatter = formatters.find(formatter) if isinstance(formatter, str) else formatter
        return formatter(self)
