"""Logic for loading and merging configuration files."""

import logging
from pathlib import Path
from typing import Any

import yaml

from sdl_transpiler.deep_merge import deep_merge
from sdl_transpiler.generic_alias import AliasFunction, format_alias
from sdl_transpiler.resolution_context import DEFAULT_MAX_GENERIC_DEPTH
from sdl_transpiler.schema_transpiler import SchemaTranspiler
from sdl_transpiler.serializer import RenderOptions

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "output": {
        "indent": 4,
        "implements_separator": ", ",
        "ast_format": "json",
    },
    "generics": {
        "max_depth": DEFAULT_MAX_GENERIC_DEPTH,
        # key -> format string, e.g. {"plural": "{0}s"}
        "aliases": {},
    },
}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = DEFAULT_CONFIG.copy()
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            config = deep_merge(config, user_config)
        else:
            logger.warning("Config file %s not found, using defaults", path)
    return config


def transpiler_from_config(config: dict[str, Any]) -> SchemaTranspiler:
    """Build a SchemaTranspiler from a loaded configuration."""
    output = config.get("output", {})
    generics = config.get("generics", {})
    aliases: dict[str, AliasFunction] = {
        key: format_alias(template)
        for key, template in (generics.get("aliases") or {}).items()
    }
    options = RenderOptions(
        indent=int(output.get("indent", 4)),
        implements_separator=str(output.get("implements_separator", ", ")),
    )
    return SchemaTranspiler(
        named_aliases=aliases,
        render_options=options,
        max_generic_depth=int(generics.get("max_depth", DEFAULT_MAX_GENERIC_DEPTH)),
    )
