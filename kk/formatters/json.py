from kk.core.abstract import formatters
from kk.core.models.result import Result


@formatters.register()
def json(result: Result) -> str:
    return result.model_dump_json(indent=2)
