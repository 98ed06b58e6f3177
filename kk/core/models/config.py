from __future__ import annotations

import logging
import sys
from typing import Optional

import pydantic as pd
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.console import Console
from rich.logging import RichHandler

from kk.core.abstract import formatters
from kk.core.models.options import SearchOptions

logger = logging.getLogger("kk")


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="KK_")

    quiet: bool = pd.Field(False)
    verbose: bool = pd.Field(False)

    # Kubernetes Settings
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    impersonate_user: Optional[str] = None
    impersonate_group: Optional[str] = None

    # Search Settings
    namespace: Optional[str] = None
    all_namespaces: bool = False
    selector: str = ""
    field_selector: str = ""

    # NOTE: When set, failed list calls are logged at debug level and give an empty result instead of an error
    suppress_errors: bool = False

    kubectl_path: str = "kubectl"

    # Logging Settings
    format: str = "table"
    log_to_stderr: bool = False
    width: Optional[int] = pd.Field(None, ge=1)

    # Output Settings
    file_output: Optional[str] = pd.Field(None)

    # Internal
    inside_cluster: bool = False
    _logging_console: Optional[Console] = pd.PrivateAttr(None)

    @property
    def Formatter(self) -> formatters.FormatterFunc:
        return formatters.find(self.format)

    @pd.field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        formatters.find(v)  # NOTE: raises if formatter is not found
        return v

    @pd.field_validator("kubectl_path")
    @classmethod
    def validate_kubectl_path(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("--kubectl must not be empty")
        return v

    @pd.field_validator("selector", "field_selector", mode="before")
    @classmethod
    def validate_selector(cls, v: Optional[str]) -> str:
        return v or ""

    @property
    def search_options(self) -> SearchOptions:
        return SearchOptions(
            namespace=self.namespace,
            all_namespaces=self.all_namespaces,
            selector=self.selector,
            field_selector=self.field_selector,
        )

    @property
    def logging_console(self) -> Console:
        if getattr(self, "_logging_console") is None:
            self._logging_console = Console(file=sys.stderr if self.log_to_stderr else sys.stdout, width=self.width)
        return self._logging_console

    def get_kube_client(self) -> client.ApiClient:
        try:
            api_client = config.new_client_from_config(config_file=self.kubeconfig, context=self.context)
            self.inside_cluster = False
        except ConfigException:
            configuration = client.Configuration()
            config.load_incluster_config(client_configuration=configuration)
            api_client = client.ApiClient(configuration)
            self.inside_cluster = True

        if self.impersonate_user is not None:
            # trick copied from https://github.com/kubernetes-client/python/issues/362
            api_client.set_default_header("Impersonate-User", self.impersonate_user)
        if self.impersonate_group is not None:
            api_client.set_default_header("Impersonate-Group", self.impersonate_group)
        return api_client

    @staticmethod
    def set_config(config: Config) -> None:
        global _config

        _config = config
        logging.basicConfig(
            level="NOTSET",
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=config.logging_console)],
            force=True,
        )
        logging.getLogger("").setLevel(logging.CRITICAL)
        logger.setLevel(logging.DEBUG if config.verbose else logging.CRITICAL if config.quiet else logging.INFO)

    @staticmethod
    def get_config() -> Optional[Config]:
        return _config


# NOTE: This class is just a proxy for _config.
# Import settings from this module and use it like it is just a config object.
class _Settings:
    def __getattr__(self, name: str):
        if _config is None:
            raise AttributeError("Config is not set")

        return getattr(_config, name)


_config: Optional[Config] = None
settings: Config = _Settings()  # type: ignore
