import yaml as yaml_module

from kk.core.abstract import formatters
from kk.core.models.result import Result


@formatters.register()
def yaml(result: Result) -> str:
    return yaml_module.dump(result.model_dump(mode="json"), sort_keys=False)
