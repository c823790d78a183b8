# Optional sources configuration file.
# String values may reference environment variables as ${ENV:NAME}; unset
# variables become empty strings. A missing or unreadable file is treated
# as an empty config.

from __future__ import annotations
import logging
import os
import re
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

_ENV_PLACEHOLDER = re.compile(r"\$\{ENV:([A-Z0-9_]+)\}")


def substitute_env(value: Any) -> Any:
    """Replace ${ENV:NAME} placeholders recursively through maps and lists."""
    if isinstance(value, dict):
        return {k: substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_env(v) for v in value]
    if isinstance(value, str):
        return _ENV_PLACEHOLDER.sub(lambda m: os.environ.get(m.group(1), ""), value)
    return value


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def validate_sources_config(data: Dict[str, Any], path: str = "<config>") -> Dict[str, Any]:
    """
    Keep only well-typed keys: max_sources and search.num as positive ints,
    extra_domains as a list of strings (a single string becomes a one-item
    list), search.engine and search.api_key as strings. Anything else is
    dropped with a warning so the defaults apply.
    """
    out: Dict[str, Any] = {}

    if "max_sources" in data:
        max_sources = _positive_int(data["max_sources"])
        if max_sources is None:
            logger.warning("Ignoring max_sources=%r in %s", data["max_sources"], path)
        else:
            out["max_sources"] = max_sources

    domains = data.get("extra_domains")
    if isinstance(domains, str):
        domains = [domains]
    if isinstance(domains, list):
        out["extra_domains"] = [d.strip() for d in domains if isinstance(d, str) and d.strip()]
    elif domains is not None:
        logger.warning("Ignoring extra_domains=%r in %s", domains, path)

    search = data.get("search")
    if isinstance(search, dict):
        s_out: Dict[str, Any] = {}
        for key in ("engine", "api_key"):
            if isinstance(search.get(key), str) and search[key].strip():
                s_out[key] = search[key].strip()
        if "num" in search:
            num = _positive_int(search["num"])
            if num is None:
                logger.warning("Ignoring search.num=%r in %s", search["num"], path)
            else:
                s_out["num"] = num
        out["search"] = s_out
    elif search is not None:
        logger.warning("Ignoring search=%r in %s", search, path)

    return out


def load_sources_config(path: Optional[str]) -> Dict[str, Any]:
    if not path or not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable sources config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring sources config %s: top level is not a mapping", path)
        return {}
    return validate_sources_config(substitute_env(data), path)
