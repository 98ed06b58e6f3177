from __future__ import annotations

from typing import Any, Optional

import pydantic as pd


class SearchOptions(pd.BaseModel):
    """User-supplied filters for a list call.

    `all_namespaces` overrides `namespace`.
    """

    model_config = pd.ConfigDict(frozen=True)

    namespace: Optional[str] = None
    all_namespaces: bool = False
    selector: str = ""
    field_selector: str = ""


class ListOptions(pd.BaseModel):
    model_config = pd.ConfigDict(frozen=True)

    label_selector: str = ""
    field_selector: str = ""

    def as_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the kubernetes client `list_*` calls. Empty selectors are left out."""

        kwargs: dict[str, Any] = {}
        if self.label_selector:
            kwargs["label_selector"] = self.label_selector
        if self.field_selector:
            kwargs["field_selector"] = self.field_selector
        return kwargs
