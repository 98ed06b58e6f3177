from .json import json
from .name import name
from .table import table
from .yaml import yaml

__all__ = ["json", "name", "table", "yaml"]
