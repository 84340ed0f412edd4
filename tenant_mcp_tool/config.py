from __future__ import annotations

import json
import os
import pathlib
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import yaml


DEFAULT_CLUSTER_SCOPED_KINDS = (
    "Organization",
    "DataPlane",
    "BuildPlane",
    "ComponentTypeDefinition",
    "Addon",
    "ServiceClass",
    "WebApplicationClass",
    "ScheduledTaskClass",
    "APIClass",
    "ConfigurationGroup",
    "ClusterWorkflowTemplate",
    "CustomResourceDefinition",
)


# -------------------------------
# Configuration loading & merging
# -------------------------------

@dataclass
class Settings:
    log_level: str = "INFO"

    # Tenant boundary
    tenant_group: str = "tenant.dev"
    default_version: str = "v1alpha1"
    default_namespace: str = "default"
    field_manager: str = "tenant-mcp"

    # Scope table; kept in lockstep with the CRDs' declared scope
    cluster_scoped_kinds: List[str] = field(
        default_factory=lambda: list(DEFAULT_CLUSTER_SCOPED_KINDS)
    )
    scope_table_version: str = "builtin"
    strict_scope: bool = False

    # Cluster access
    kubeconfig: Optional[str] = None
    non_destructive: bool = False

    # Internal: where we loaded file config from
    _config_file: Optional[str] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _read_file_config(explicit_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load YAML/JSON config for the server. Search order:
      1) explicit_path (if provided)
      2) ./tenant-mcp.yaml / ./tenant-mcp.json
      3) ~/.tenant-mcp/config.yaml or config.json
    An explicit path that does not exist or does not parse is an error;
    implicit candidates are skipped when absent.
    """
    if explicit_path:
        path = pathlib.Path(explicit_path).expanduser()
        data = _parse_config_file(path)
        data["_config_file"] = str(path)
        return data

    cwd = pathlib.Path.cwd()
    candidates = [
        cwd / "tenant-mcp.yaml",
        cwd / "tenant-mcp.json",
        pathlib.Path.home() / ".tenant-mcp" / "config.yaml",
        pathlib.Path.home() / ".tenant-mcp" / "config.json",
    ]
    for p in candidates:
        if not p.is_file():
            continue
        data = _parse_config_file(p)
        data["_config_file"] = str(p)
        return data
    return {}


def _parse_config_file(path: pathlib.Path) -> Dict[str, Any]:
    text = path.read_text()
    if path.suffix.lower() in (".yml", ".yaml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def _overlay(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in extra.items():
        if v is not None:
            out[k] = v
    return out


def _split_kinds(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [k.strip() for k in value.split(",") if k.strip()]
    return [str(k).strip() for k in value if str(k).strip()]


def _env_bool(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_config() -> Dict[str, Any]:
    # Mirror Settings fields from environment; None if not present
    log_level = os.getenv("LOG_LEVEL")
    return {
        "log_level": log_level.upper() if log_level else None,
        "tenant_group": os.getenv("TENANT_GROUP"),
        "default_version": os.getenv("TENANT_DEFAULT_VERSION"),
        "default_namespace": os.getenv("TENANT_DEFAULT_NAMESPACE"),
        "field_manager": os.getenv("TENANT_FIELD_MANAGER"),
        "cluster_scoped_kinds": _split_kinds(os.getenv("TENANT_CLUSTER_SCOPED_KINDS")),
        "scope_table_version": os.getenv("TENANT_SCOPE_TABLE_VERSION"),
        "strict_scope": _env_bool("TENANT_STRICT_SCOPE"),
        "kubeconfig": os.getenv("TENANT_KUBECONFIG"),
        "non_destructive": _env_bool("TENANT_NON_DESTRUCTIVE"),
    }


def resolve_settings(explicit_config_path: Optional[str] = None,
                     cli_overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Build a Settings object by merging:
      defaults (Settings()) <- file config <- env vars <- CLI overrides
    """
    defaults = Settings()
    file_cfg = _read_file_config(explicit_config_path)
    if "cluster_scoped_kinds" in file_cfg:
        file_cfg["cluster_scoped_kinds"] = _split_kinds(file_cfg["cluster_scoped_kinds"])
    merged = _overlay(defaults.to_dict(), file_cfg)
    merged = _overlay(merged, _env_config())
    merged = _overlay(merged, cli_overrides or {})
    s = Settings(**{k: v for k, v in merged.items() if k in Settings.__dataclass_fields__})
    s.log_level = str(s.log_level).upper()
    s._config_file = file_cfg.get("_config_file")
    return s


# A module-level settings instance.
# Other modules import `from tenant_mcp_tool import config` and read `config.settings`.
settings = resolve_settings()


def refresh_settings(explicit_config_path: Optional[str] = None,
                     cli_overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """Recompute settings from disk/env/overrides at runtime."""
    global settings
    settings = resolve_settings(explicit_config_path=explicit_config_path, cli_overrides=cli_overrides)
    return settings
