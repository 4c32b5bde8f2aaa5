# === FILE: help_view/config.py ===
"""
Loading and validation of the help viewer configuration.
The schema is described and checked with Pydantic.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from help_view.models import Credentials

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class CredentialsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    user: str
    password: str = Field("", repr=False)

    def to_credentials(self) -> Credentials:
        return Credentials(user=self.user, password=self.password)


class ViewerConfig(BaseModel):
    """Settings for one help viewer session."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_page: Optional[str] = Field(None, description="Page opened when the viewer starts.")
    home_page: Optional[str] = Field(None, description="Target of Home when history is empty.")
    timeout: float = Field(10.0, gt=0, description="Timeout for a single fetch (seconds).")
    user_agent: str = Field("HelpView/1.0", min_length=1, description="User-Agent header.")
    max_connections: int = Field(6, ge=1, description="Concurrent transport fetches.")
    chunk_size: int = Field(16 * 1024, ge=1, description="Read size between progress reports.")
    placeholder_size: int = Field(24, ge=1, description="Edge of the image placeholder (px).")
    placeholder_color: str = Field("#C0C0C0", description="Fill of the image placeholder.")
    discard_stale_navigations: bool = Field(
        False, description="Drop a page load that finishes after a newer one was shown."
    )
    credentials: Dict[str, CredentialsConfig] = Field(
        default_factory=dict, description="Static answers to auth challenges, keyed by host."
    )
    external_schemes: List[str] = Field(
        default_factory=lambda: ["mailto", "ftp"],
        description="URL schemes handed to an external browser.",
    )

    @field_validator("placeholder_color")
    def _check_color(cls, v: str) -> str:
        if not _HEX_COLOR.match(v):
            raise ValueError(f"placeholder_color must look like #RRGGBB, got {v!r}")
        return v.upper()

    @field_validator("external_schemes")
    def _lower_schemes(cls, v: List[str]) -> List[str]:
        return [s.lower().rstrip(":") for s in v]

    def credentials_for(self, host: str) -> Optional[Credentials]:
        entry = self.credentials.get(host)
        return entry.to_credentials() if entry else None


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ViewerConfig:
    """
    Read YAML or JSON and return a validated ViewerConfig.

    With *path* None the default config file is used when it exists,
    otherwise built-in defaults. An explicit missing path raises
    FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ViewerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return ViewerConfig(**data)


__all__ = ["CredentialsConfig", "ViewerConfig", "load_config"]
