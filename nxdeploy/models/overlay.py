"""Models for the configuration bundle fetched from the config repository."""
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProxyOverlay(BaseModel):
    """Overrides for the proxy tier settings."""

    model_config = ConfigDict(extra='forbid')

    api_domain: Optional[str] = None
    api_conf: Optional[str] = None
    site_domain: Optional[str] = None
    site_conf: Optional[str] = None
    site_path: Optional[str] = None
    https_api: Optional[bool] = None
    http_api_redirect: Optional[bool] = None
    https_site: Optional[bool] = None
    http_site_redirect: Optional[bool] = None

    @field_validator('api_conf', 'site_conf')
    @classmethod
    def validate_file_name(cls, v):
        """Config file names must not escape their layout directory."""
        if v is not None and ('/' in v or v in {'', '.', '..'}):
            raise ValueError(f"Config file name '{v}' must be a plain file name")
        return v

    def overrides(self) -> Dict[str, object]:
        """Return only the fields the bundle actually set."""
        return self.model_dump(exclude_none=True)


class CommandOverlay(BaseModel):
    """Launch settings for service and node deployments."""

    model_config = ConfigDict(extra='forbid')

    command: Optional[Union[str, List[str]]] = None
    workdir: Optional[str] = None
    env: Dict[str, str] = Field(default_factory=dict, description="Extra environment for the launched process")


class ConfigOverlay(BaseModel):
    """Top-level shape of ``config.json`` in the configuration repository.

    Unknown top-level keys are kept; only the deployment subtrees are typed.
    """

    model_config = ConfigDict(extra='allow')

    proxy: Optional[ProxyOverlay] = None
    service: Optional[CommandOverlay] = None
    node: Optional[CommandOverlay] = None
