"""
YAML multiplex descriptions (ensemble + services + settings).

Deutsch:
    YAML-Beschreibung eines Multiplex (Ensemble, Services, Einstellungen),
    validiert gegen das mitgelieferte JSON-Schema.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Union

import yaml
from jsonschema import Draft7Validator

from .codes import COUNTRIES, LANGUAGES
from .models import (
    AdvancedServiceSettings,
    AudioType,
    DecodedConfig,
    Ensemble,
    GlobalSettings,
    OutputVariant,
    ProtectionLevel,
    Service,
)
from .schemas import load_schema

log = logging.getLogger(__name__)

_VALIDATOR = Draft7Validator(load_schema())


class DescriptionError(ValueError):
    """Raised for unreadable or invalid descriptions. / Ungültige Beschreibung."""


@dataclass(frozen=True)
class MultiplexDescription:
    ensemble: Ensemble
    services: Tuple[Service, ...]
    settings: GlobalSettings
    variant: OutputVariant = OutputVariant.INFO


def load_description(path: Union[str, Path]) -> MultiplexDescription:
    """
    Read and validate a YAML multiplex description.

    Deutsch:
        Liest und validiert eine YAML-Multiplex-Beschreibung.
    """

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise DescriptionError(f"{path} is not valid YAML: {exc}") from exc
    description = parse_description(data)
    log.info("loaded description %s with %d services", path, len(description.services))
    return description


def parse_description(data: Any) -> MultiplexDescription:
    if not isinstance(data, dict):
        raise DescriptionError("description must be a mapping with 'ensemble' and 'services'")
    errors = sorted(_VALIDATOR.iter_errors(data), key=lambda err: list(err.path))
    if errors:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in error.path) or '<root>'} -> {error.message}" for error in errors
        )
        raise DescriptionError(f"description failed schema validation: {messages}")

    return MultiplexDescription(
        ensemble=_ensemble_from(data["ensemble"]),
        services=tuple(_service_from(item) for item in data["services"]),
        settings=GlobalSettings(**data.get("settings", {})),
        variant=OutputVariant(data.get("variant", OutputVariant.INFO.value)),
    )


def dump_description(config: DecodedConfig, variant: OutputVariant = OutputVariant.INFO) -> str:
    """
    Serialise decoded configuration as a YAML description.

    Deutsch:
        Serialisiert eine dekodierte Konfiguration als YAML-Beschreibung.
    """

    payload: Dict[str, Any] = {
        "variant": variant.value,
        "ensemble": asdict(config.ensemble),
        "settings": asdict(config.settings),
        "services": [_service_to(service) for service in config.services],
    }
    return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)


def _ensemble_from(data: Mapping[str, Any]) -> Ensemble:
    values = dict(data)
    values["eid"] = str(values["eid"]).upper()
    if "country" in values:
        values["country"] = _code_or_name(values["country"], COUNTRIES)
    for key in ("local_time_offset", "reconfig_counter"):
        if key in values:
            values[key] = str(values[key])
    return Ensemble(**values)


def _service_from(data: Mapping[str, Any]) -> Service:
    values = dict(data)
    values["sid"] = str(values["sid"]).upper()
    if "country" in values:
        values["country"] = _code_or_name(values["country"], COUNTRIES)
    if "language" in values:
        values["language"] = _code_or_name(values["language"], LANGUAGES)
    values["protection"] = ProtectionLevel(values["protection"])
    if "audio_type" in values:
        values["audio_type"] = AudioType(values["audio_type"])
    values["advanced"] = AdvancedServiceSettings(**values.get("advanced", {}))
    return Service(**values)


def _service_to(service: Service) -> Dict[str, Any]:
    payload = asdict(service)
    payload["audio_type"] = service.audio_type.value
    payload["protection"] = service.protection.value
    return payload


def _code_or_name(value: str, table: Mapping[str, str]) -> str:
    # table names stay as written, literal hex codes are stored upper case
    if value in table:
        return value
    return value.upper()
