"""
Shared data models for the dabmuxgen toolchain.

Deutsch:
    Gemeinsame Datenmodelle für Kapazitätsberechnung und Konfigurations-Codec.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

UNDEFINED_NAME = "None / Undefined"


class ProtectionFamily(Enum):
    EEP_A = "EEP-A"
    EEP_B = "EEP-B"
    UEP = "UEP"


class ProtectionLevel(Enum):
    """
    Forward error correction profile of a subchannel.

    Deutsch:
        Fehlerschutz-Profil eines Subchannels (EEP-A, EEP-B oder UEP).
    """

    EEP_1A = "EEP-1A"
    EEP_2A = "EEP-2A"
    EEP_3A = "EEP-3A"
    EEP_4A = "EEP-4A"
    EEP_1B = "EEP-1B"
    EEP_2B = "EEP-2B"
    EEP_3B = "EEP-3B"
    EEP_4B = "EEP-4B"
    UEP_1 = "UEP-1"
    UEP_2 = "UEP-2"
    UEP_3 = "UEP-3"
    UEP_4 = "UEP-4"
    UEP_5 = "UEP-5"

    @property
    def family(self) -> ProtectionFamily:
        if self.value.startswith("UEP"):
            return ProtectionFamily.UEP
        if self.value.endswith("B"):
            return ProtectionFamily.EEP_B
        return ProtectionFamily.EEP_A

    @property
    def level(self) -> int:
        if self.family is ProtectionFamily.UEP:
            return int(self.value[-1])
        return int(self.value[4])

    @classmethod
    def from_parts(cls, level: int, family: ProtectionFamily) -> Optional["ProtectionLevel"]:
        for member in cls:
            if member.family is family and member.level == level:
                return member
        return None


class AudioType(Enum):
    DAB_PLUS = "dabplus"  # AAC
    DAB_MP2 = "dab"


class OutputVariant(Enum):
    """Textual dialect of the multiplexer configuration."""

    INFO = "info"
    MUX = "mux"


@dataclass(frozen=True)
class Ensemble:
    """
    The multiplex itself: identifier, country and labels.

    Deutsch:
        Das Ensemble (Multiplex) mit Kennung, Land und Labels.
    """

    eid: str = ""
    country: str = UNDEFINED_NAME
    label: str = ""
    short_label: str = ""
    local_time_offset: str = "auto"
    international_table: int = 1
    reconfig_counter: str = "hash"


@dataclass(frozen=True)
class AdvancedServiceSettings:
    pty_sd: str = "static"  # static|dynamic
    buffer_management: str = "prebuffering"  # prebuffering|timestamped
    buffer_size: int = 40
    prebuffering_size: int = 20


@dataclass(frozen=True)
class Service:
    """
    Audio service definition including its subchannel parameters.

    Deutsch:
        Audio-Service inklusive Subchannel-Parametern.
    """

    sid: str = ""
    label: str = ""
    short_label: str = ""
    pty: int = 0
    audio_type: AudioType = AudioType.DAB_PLUS
    bitrate: int = 96
    protection: ProtectionLevel = ProtectionLevel.EEP_3A
    country: str = UNDEFINED_NAME
    language: str = UNDEFINED_NAME
    port: int = 9001
    advanced: AdvancedServiceSettings = field(default_factory=AdvancedServiceSettings)


@dataclass(frozen=True)
class GlobalSettings:
    """
    Multiplexer-wide settings: transmission mode, timestamps and endpoints.

    Deutsch:
        Globale Einstellungen des Multiplexers (Modus, Zeitstempel, Ports).
    """

    dab_mode: int = 1
    nb_frames: int = 0  # 0 = unlimited
    syslog: bool = False
    tist: bool = False
    tist_offset: float = 0
    management_port: int = 12720
    telnet_port: int = 12721
    zmq_endpoint: str = "tcp://lo:12722"
    edi_port: int = 9201


@dataclass(frozen=True)
class DecodedConfig:
    ensemble: Ensemble
    services: Tuple[Service, ...]
    settings: GlobalSettings
