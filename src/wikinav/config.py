"""Configuration helpers for wikinav."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, HttpUrl, ValidationError


class SourceSettings(BaseModel):
    """Where template pages are read from."""

    workspace: Optional[Path] = Field(None, description="Directory of local .wiki page files")
    api_url: Optional[HttpUrl] = Field(None, description="URL of a MediaWiki api.php endpoint")
    timeout: float = Field(30.0, gt=0, description="HTTP timeout in seconds")


class TitleSettings(BaseModel):
    """Title normalization rules of the wiki."""

    capital_links: bool = Field(False, description="Uppercase the first letter of page titles")
    extra_namespaces: list[str] = Field(default_factory=list, description="Additional namespace names")


class LookupDefaults(BaseModel):
    """Default context for parser function calls."""

    page: Optional[str] = Field(None, description="Title of the page functions are rendered on")


class WikinavConfig(BaseModel):
    """Aggregate configuration for the CLI."""

    source: SourceSettings = Field(default_factory=SourceSettings)
    titles: TitleSettings = Field(default_factory=TitleSettings)
    defaults: LookupDefaults = Field(default_factory=LookupDefaults)


ENV_PREFIX = "WIKINAV"
DEFAULT_CONFIG_PATHS = (
    Path.cwd() / "wikinav.toml",
    Path.home() / ".config" / "wikinav" / "config.toml",
)


@dataclasses.dataclass
class ConfigSource:
    """Result of attempting to resolve configuration data."""

    config: Optional[WikinavConfig]
    path: Optional[Path]
    error: Optional[Exception]


def _load_from_env() -> dict[str, object]:
    """Return configuration values extracted from ``WIKINAV_*`` environment variables."""

    def _get(name: str) -> Optional[str]:
        return os.getenv(f"{ENV_PREFIX}_{name}")

    source: dict[str, object] = {}
    for key in ("WORKSPACE", "API_URL", "TIMEOUT"):
        value = _get(key)
        if value:
            source[key.lower()] = value

    titles: dict[str, object] = {}
    capital_links = _get("CAPITAL_LINKS")
    if capital_links:
        titles["capital_links"] = capital_links

    defaults: dict[str, object] = {}
    page = _get("PAGE")
    if page:
        defaults["page"] = page

    if not (source or titles or defaults):
        return {}
    return {"source": source, "titles": titles, "defaults": defaults}


def _load_toml(path: Path) -> Optional[dict]:
    if not path.exists():
        return None

    try:  # Python 3.11+
        import tomllib  # type: ignore
    except ModuleNotFoundError:  # pragma: no cover - Python <3.11 fallback
        import tomli as tomllib  # type: ignore

    with path.open("rb") as handle:
        return tomllib.load(handle)


def resolve_config(explicit_path: Optional[Path] = None) -> ConfigSource:
    """Load settings from `explicit_path`, a default TOML file or `WIKINAV_*` variables.

    An explicit path wins and must exist; a missing one is returned as the
    error. Otherwise the first readable default file is used, and the
    environment is consulted only when no file is found.
    """

    errors: list[Exception] = []
    sources: list[tuple[Optional[Path], Optional[dict]]] = []

    if explicit_path:
        try:
            data = _load_toml(explicit_path)
            if data is None:
                raise FileNotFoundError(f"Configuration file {explicit_path} does not exist")
            sources.append((explicit_path, data))
        except Exception as exc:
            errors.append(exc)

    if not sources and not errors:
        for path in DEFAULT_CONFIG_PATHS:
            try:
                data = _load_toml(path)
            except Exception as exc:  # pragma: no cover
                errors.append(exc)
                continue
            if data is not None:
                sources.append((path, data))
                break

    if not sources and not errors:
        env_data = _load_from_env()
        if env_data:
            sources.append((None, env_data))

    for path, data in sources:
        if data is None:
            continue
        try:
            config = WikinavConfig.model_validate(data)
            return ConfigSource(config=config, path=path, error=None)
        except ValidationError as exc:
            errors.append(exc)

    error = errors[0] if errors else None
    return ConfigSource(config=None, path=None, error=error)


def ensure_config(
    *,
    workspace: Optional[Path] = None,
    api_url: Optional[str] = None,
    page: Optional[str] = None,
    capital_links: Optional[bool] = None,
    config_path: Optional[Path] = None,
    require_source: bool = True,
) -> WikinavConfig:
    """Resolve configuration from precedence order and apply explicit CLI options on top."""

    source = resolve_config(config_path)
    if source.error is not None:
        raise RuntimeError(f"Invalid configuration: {source.error}") from source.error

    config = source.config.model_copy(deep=True) if source.config else WikinavConfig()

    if workspace:
        config.source.workspace = workspace
    if api_url:
        config.source = SourceSettings.model_validate(
            {**config.source.model_dump(), "api_url": api_url}
        )
    if page:
        config.defaults.page = page
    if capital_links is not None:
        config.titles.capital_links = capital_links

    if require_source and not (config.source.workspace or config.source.api_url):
        hint = " or configuration file" if config_path else ""
        raise RuntimeError(
            "Missing page source. Provide --workspace or --api-url via CLI options, environment variables" + hint
        )

    return config
