"""
Config file loading.

The config is a JSON document, for example:

    {
        "listen": ":8080",
        "html": "html",
        "rtc": {
            "access_key_id": "...",
            "access_key_secret": "...",
            "region_endpoint": "...",
            "region": "cn-hangzhou",
            "gslb": "..."
        }
    }

``listen`` and ``html`` are required. ``rtc`` may be missing or null; it is
kept on the loaded config but nothing reads it yet.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from talks.errors import ConfigOpenError, ConfigParseError

logger = logging.getLogger(__name__)

RTC_FIELDS = ("access_key_id", "access_key_secret", "region_endpoint", "region", "gslb")


@dataclass(frozen=True)
class RTCConfig:
    access_key_id: str = ""
    access_key_secret: str = ""
    region_endpoint: str = ""
    region: str = ""
    gslb: str = ""


@dataclass(frozen=True)
class Config:
    listen: str
    html: str
    rtc: Optional[RTCConfig] = None


def _require_str(doc: Dict[str, Any], key: str, source: str, section: str = "") -> str:
    name = f"{section}.{key}" if section else key
    if key not in doc:
        raise ConfigParseError(f"parse {source}: missing {name}")
    value = doc[key]
    if not isinstance(value, str):
        raise ConfigParseError(f"parse {source}: {name} must be a string, got {type(value).__name__}")
    return value


def _parse_rtc(value: Any, source: str) -> Optional[RTCConfig]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigParseError(f"parse {source}: rtc must be an object, got {type(value).__name__}")
    # null fields load as empty strings, like missing ones
    fields = {key: _require_str(value, key, source, "rtc") for key in RTC_FIELDS if value.get(key) is not None}
    return RTCConfig(**fields)


def parse_config(text: str, source: str = "<config>") -> Config:
    """Parse an already-read config document. ``source`` only shows up in errors."""
    try:
        doc = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise ConfigParseError(f"parse {source}: {e}") from e
    if not isinstance(doc, dict):
        raise ConfigParseError(f"parse {source}: expected a JSON object, got {type(doc).__name__}")

    return Config(
        listen=_require_str(doc, "listen", source),
        html=_require_str(doc, "html", source),
        rtc=_parse_rtc(doc.get("rtc"), source),
    )


def load_config(path: str) -> Config:
    logger.info("Parse config %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise ConfigParseError(f"parse {path}: {e}") from e
    except OSError as e:
        raise ConfigOpenError(f"open {path}: {e}") from e
    return parse_config(text, path)
