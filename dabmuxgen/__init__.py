"""
dabmuxgen: capacity calculator and configuration codec for ODR-DabMux.

Deutsch:
    Kapazitätsrechner und Konfigurations-Codec für ODR-DabMux.
"""

from __future__ import annotations

__version__ = "1.0.0"

from .capacity import MAX_CU, capacity_units, total_capacity_units
from .compliance import is_b_bitrate_well_defined, is_compliant
from .decoder import decode
from .encoder import encode
from .grammar import ConfigSyntaxError
from .models import (
    AdvancedServiceSettings,
    AudioType,
    DecodedConfig,
    Ensemble,
    GlobalSettings,
    OutputVariant,
    ProtectionFamily,
    ProtectionLevel,
    Service,
)

__all__ = [
    "MAX_CU",
    "AdvancedServiceSettings",
    "AudioType",
    "ConfigSyntaxError",
    "DecodedConfig",
    "Ensemble",
    "GlobalSettings",
    "OutputVariant",
    "ProtectionFamily",
    "ProtectionLevel",
    "Service",
    "__version__",
    "capacity_units",
    "decode",
    "encode",
    "is_b_bitrate_well_defined",
    "is_compliant",
    "total_capacity_units",
]
