"""Configuration for the IP daily metrics module."""

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)
else:
    # Fall back to template for defaults
    template_path = Path(__file__).parent.parent / ".env.template"
    if template_path.exists():
        load_dotenv(template_path)


def _keyword_list(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _parse_hours(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


class IPMetricsConfig:
    """Process-level defaults for metric derivation."""

    # Antibiotic time-out window
    _env_hours = _parse_hours(os.getenv("IP_METRICS_TIMEOUT_HOURS", "72"))
    DEFAULT_TIMEOUT_HOURS: int = 72 if _env_hours is None else max(0, math.floor(_env_hours))

    # Keyword matching (case-insensitive substring)
    DEFAULT_MDRO_KEYWORDS: tuple[str, ...] = _keyword_list(
        "IP_METRICS_MDRO_KEYWORDS", "MRSA,VRE,ESBL,CRE,C. diff,MDR,MDRO"
    )
    DEFAULT_EBP_KEYWORDS: tuple[str, ...] = _keyword_list(
        "IP_METRICS_EBP_KEYWORDS", "EBP,Enhanced Barrier"
    )

    LOG_LEVEL: str = os.getenv("IP_METRICS_LOG_LEVEL", "INFO")


config = IPMetricsConfig()


def clamp_timeout_hours(value: Any) -> int:
    """Floor to a non-negative integer; unparseable values use the default."""
    parsed = _parse_hours(value)
    if parsed is None:
        return config.DEFAULT_TIMEOUT_HOURS
    return max(0, math.floor(parsed))


@dataclass(frozen=True)
class DeriveOptions:
    """Caller-supplied derivation options.

    Unset fields fall back to IPMetricsConfig when resolved.
    """
    timeout_hours: Any = None
    mdro_keywords: tuple[str, ...] | None = None
    ebp_keywords: tuple[str, ...] | None = None
    unit_aliases: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "DeriveOptions":
        """Build options from camelCase or snake_case keys."""
        data = data if isinstance(data, Mapping) else {}

        def pick(*keys):
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        mdro = pick("mdroKeywords", "mdro_keywords")
        ebp = pick("ebpKeywords", "ebp_keywords")
        aliases = pick("unitAliases", "unit_aliases")
        return cls(
            timeout_hours=pick("timeoutHours", "timeout_hours"),
            mdro_keywords=tuple(mdro) if isinstance(mdro, (list, tuple)) else None,
            ebp_keywords=tuple(ebp) if isinstance(ebp, (list, tuple)) else None,
            unit_aliases=dict(aliases) if isinstance(aliases, Mapping) else {},
        )


def _keywords(value: Any, default: tuple[str, ...]) -> tuple[str, ...]:
    if not value or isinstance(value, str):
        return default
    keywords = tuple(k for k in value if isinstance(k, str) and k)
    return keywords or default


def resolve_options(options: DeriveOptions | Mapping[str, Any] | None = None) -> DeriveOptions:
    """Return a fresh, fully-populated copy of the options."""
    if options is None:
        options = DeriveOptions()
    elif not isinstance(options, DeriveOptions):
        options = DeriveOptions.from_dict(options)

    aliases = options.unit_aliases if isinstance(options.unit_aliases, Mapping) else {}
    return DeriveOptions(
        timeout_hours=clamp_timeout_hours(options.timeout_hours),
        mdro_keywords=_keywords(options.mdro_keywords, config.DEFAULT_MDRO_KEYWORDS),
        ebp_keywords=_keywords(options.ebp_keywords, config.DEFAULT_EBP_KEYWORDS),
        unit_aliases=dict(aliases),
    )
