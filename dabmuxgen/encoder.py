"""
ODR-DabMux configuration output.

Deutsch:
    Erzeugt die Konfigurationsdatei für ODR-DabMux (.info / .mux).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .codes import ecc_code, language_code
from .models import Ensemble, GlobalSettings, OutputVariant, ProtectionFamily, ProtectionLevel, Service

log = logging.getLogger(__name__)

INDENT = "    "
INPUT_HOST = "127.0.0.1"
USER_APPLICATION = "slideshow"

PROFILE_TAGS: Dict[ProtectionFamily, Optional[str]] = {
    ProtectionFamily.EEP_A: None,
    ProtectionFamily.EEP_B: "EEP_B",
    ProtectionFamily.UEP: "UEP",
}


@dataclass(frozen=True)
class VariantRules:
    """
    Structural differences between the two output dialects.

    Deutsch:
        Strukturelle Unterschiede zwischen den beiden Ausgabeformaten.
    """

    variant: OutputVariant
    filename: str
    streaming_output: Optional[str]


VARIANT_RULES: Dict[OutputVariant, VariantRules] = {
    OutputVariant.INFO: VariantRules(
        variant=OutputVariant.INFO,
        filename="odr-dabmux.info",
        streaming_output=None,
    ),
    OutputVariant.MUX: VariantRules(
        variant=OutputVariant.MUX,
        filename="conf.mux",
        streaming_output="zmq+tcp://*:18081",
    ),
}


def variant_for_path(path: Union[str, Path]) -> OutputVariant:
    """A ``.mux`` extension selects MUX, everything else INFO."""
    if Path(path).suffix.lower() == ".mux":
        return OutputVariant.MUX
    return OutputVariant.INFO


def ordinal(prefix: str, index: int) -> str:
    """Block name for the 0-based list position ``index`` (srv-01, sub-01, ...)."""
    return f"{prefix}-{index + 1:02d}"


def protection_parts(protection: ProtectionLevel) -> Tuple[int, Optional[str]]:
    """Split a protection level into (integer level, optional profile tag)."""
    return protection.level, PROFILE_TAGS[protection.family]


def encode(
    ensemble: Ensemble,
    services: Sequence[Service],
    settings: GlobalSettings,
    variant: OutputVariant = OutputVariant.INFO,
) -> str:
    """
    Render the complete multiplexer configuration.

    Blocks are written in fixed order: general, remotecontrol, ensemble,
    services, subchannels, components, outputs. Service N gets the block
    names srv-NN, sub-NN and comp-NN.

    Deutsch:
        Erzeugt die vollständige Multiplexer-Konfiguration als Text.
    """

    rules = VARIANT_RULES[variant]
    lines: List[str] = []
    _write_general(lines, settings)
    _write_remote_control(lines, settings)
    _write_ensemble(lines, ensemble)
    _write_services(lines, services)
    _write_subchannels(lines, services)
    _write_components(lines, services)
    _write_outputs(lines, settings, rules)
    log.debug("encoded %d services as %s", len(services), variant.value)
    return "\n".join(lines)


def _write_general(lines: List[str], settings: GlobalSettings) -> None:
    lines.append("general {")
    lines.append(f"{INDENT}dabmode {settings.dab_mode}")
    lines.append(f"{INDENT}nbframes {settings.nb_frames}")
    lines.append(f"{INDENT}syslog {_bool(settings.syslog)}")
    if settings.tist:
        lines.append(f"{INDENT}tist {_number(settings.tist_offset)}")
    else:
        lines.append(f"{INDENT}tist false")
    lines.append(f"{INDENT}managementport {settings.management_port}")
    lines.append("}")
    lines.append("")


def _write_remote_control(lines: List[str], settings: GlobalSettings) -> None:
    lines.append("remotecontrol {")
    lines.append(f"{INDENT}telnetport {settings.telnet_port}")
    lines.append(f"{INDENT}zmqendpoint {settings.zmq_endpoint}")
    lines.append("}")
    lines.append("")


def _write_ensemble(lines: List[str], ensemble: Ensemble) -> None:
    lines.append("ensemble {")
    lines.append(f"{INDENT}id 0x{ensemble.eid.lower()}")
    lines.append(f"{INDENT}ecc 0x{ecc_code(ensemble.country).lower()}")
    lines.append(f"{INDENT}local-time-offset {ensemble.local_time_offset}")
    lines.append(f"{INDENT}international-table {ensemble.international_table}")
    lines.append(f"{INDENT}reconfig-counter {ensemble.reconfig_counter}")
    lines.append(f'{INDENT}label "{ensemble.label}"')
    lines.append(f'{INDENT}shortlabel "{ensemble.short_label}"')
    lines.append("}")
    lines.append("")


def _write_services(lines: List[str], services: Sequence[Service]) -> None:
    inner = INDENT * 2
    lines.append("services {")
    for index, service in enumerate(services):
        lines.append(f"{INDENT}{ordinal('srv', index)} {{")
        lines.append(f"{inner}id 0x{service.sid.lower()}")
        lines.append(f"{inner}ecc 0x{ecc_code(service.country).lower()}")
        lines.append(f'{inner}label "{service.label}"')
        lines.append(f'{inner}shortlabel "{service.short_label}"')
        lines.append(f"{inner}pty {service.pty}")
        lines.append(f"{inner}pty-sd {service.advanced.pty_sd}")
        lines.append(f"{inner}language 0x{language_code(service.language).lower()}")
        lines.append(f"{INDENT}}}")
    lines.append("}")
    lines.append("")


def _write_subchannels(lines: List[str], services: Sequence[Service]) -> None:
    inner = INDENT * 2
    lines.append("subchannels {")
    for index, service in enumerate(services):
        level, profile = protection_parts(service.protection)
        advanced = service.advanced
        lines.append(f"{INDENT}{ordinal('sub', index)} {{")
        lines.append(f"{inner}type {service.audio_type.value}")
        lines.append(f"{inner}bitrate {service.bitrate}")
        lines.append(f"{inner}id {index + 1}")
        if profile:
            lines.append(f"{inner}protection-profile {profile}")
        lines.append(f"{inner}protection {level}")
        lines.append(f"{inner}inputproto edi")
        lines.append(f'{inner}inputuri "tcp://{INPUT_HOST}:{service.port}"')
        lines.append(f"{inner}buffer-management {advanced.buffer_management}")
        lines.append(f"{inner}buffer {advanced.buffer_size}")
        lines.append(f"{inner}prebuffering {advanced.prebuffering_size}")
        lines.append(f"{INDENT}}}")
    lines.append("}")
    lines.append("")


def _write_components(lines: List[str], services: Sequence[Service]) -> None:
    inner = INDENT * 2
    lines.append("components {")
    for index in range(len(services)):
        lines.append(f"{INDENT}{ordinal('comp', index)} {{")
        lines.append(f"{inner}service {ordinal('srv', index)}")
        lines.append(f"{inner}subchannel {ordinal('sub', index)}")
        lines.append(f"{inner}user-applications {{")
        lines.append(f'{inner}{INDENT}userapp "{USER_APPLICATION}"')
        lines.append(f"{inner}}}")
        lines.append(f"{INDENT}}}")
    lines.append("}")
    lines.append("")


def _write_outputs(lines: List[str], settings: GlobalSettings, rules: VariantRules) -> None:
    lines.append("outputs {")
    lines.append(f"{INDENT}edi {{")
    lines.append(f"{INDENT * 2}destinations {{")
    lines.append(f"{INDENT * 3}edi_tcp {{")
    lines.append(f"{INDENT * 4}protocol tcp")
    lines.append(f"{INDENT * 4}listenport {settings.edi_port}")
    lines.append(f"{INDENT * 3}}}")
    lines.append(f"{INDENT * 2}}}")
    lines.append(f"{INDENT}}}")
    lines.append("")
    lines.append(f"{INDENT}; Throttle output to real-time (one ETI frame every 24ms)")
    if rules.streaming_output:
        lines.append(f'{INDENT}zmq "{rules.streaming_output}"')
    lines.append(f'{INDENT}throttle "simul://"')
    lines.append("}")


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)
