"""
ODR-DabMux configuration input.

Decoding is lenient: absent blocks and fields fall back to the defaults of a
freshly created configuration, and components pointing at unknown services or
subchannels are dropped. Only text that cannot be split into balanced blocks
raises (``ConfigSyntaxError``).

Deutsch:
    Liest ODR-DabMux-Konfigurationen tolerant ein. Nur unbalancierte
    Klammern führen zu einem Fehler.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from .grammar import Block, parse
from .models import (
    UNDEFINED_NAME,
    AdvancedServiceSettings,
    AudioType,
    DecodedConfig,
    Ensemble,
    GlobalSettings,
    ProtectionFamily,
    ProtectionLevel,
    Service,
)

log = logging.getLogger(__name__)

PORT_PATTERN = re.compile(r":(\d+)\"?$")
HEX_LETTERS = re.compile(r"[a-fA-F]")
DIGITS = re.compile(r"^\d+$")
LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
# longest digit run converted with int(), matching CPython's default str limit
MAX_INT_DIGITS = 4300

PROFILE_FAMILIES: Dict[str, ProtectionFamily] = {
    "EEP_B": ProtectionFamily.EEP_B,
    "UEP": ProtectionFamily.UEP,
}

_BASE_SETTINGS = GlobalSettings()
_BASE_ENSEMBLE = Ensemble()
_BASE_SERVICE = Service()
_BASE_ADVANCED = AdvancedServiceSettings()


def decode(text: str) -> DecodedConfig:
    """
    Translate configuration text back into ensemble, services and settings.

    Deutsch:
        Übersetzt Konfigurationstext zurück in Ensemble, Services und
        globale Einstellungen.
    """

    root = parse(text)
    settings = _decode_settings(root)
    ensemble = _decode_ensemble(root.find("ensemble"))

    services_block = root.find("services")
    subchannels_block = root.find("subchannels")
    components_block = root.find("components")

    raw_services = {block.name: block for block in _children(services_block)}
    raw_subchannels = {block.name: block for block in _children(subchannels_block)}

    services: List[Service] = []
    for component in _children(components_block):
        srv_ref = component.get("service")
        sub_ref = component.get("subchannel")
        srv_block = raw_services.get(srv_ref)
        sub_block = raw_subchannels.get(sub_ref)
        if srv_block is None or sub_block is None:
            log.debug(
                "dropping component %s: unresolved reference (service=%r, subchannel=%r)",
                component.name,
                srv_ref,
                sub_ref,
            )
            continue
        services.append(_join_service(srv_block, sub_block))

    log.info("decoded ensemble %s with %d services", ensemble.eid or "<unset>", len(services))
    return DecodedConfig(ensemble=ensemble, services=tuple(services), settings=settings)


def parse_hex_code(value: str) -> str:
    """
    Normalise an id/ECC/language field to upper-case hex without prefix.

    ``0x`` prefix or any letter a-f means hex; a purely decimal string is read
    as decimal and converted, so ``21`` becomes ``15``.
    """

    value = value.strip()
    if not value:
        return ""
    if value.lower().startswith("0x"):
        return value[2:].upper().rjust(2, "0")
    if HEX_LETTERS.search(value):
        return value.upper().rjust(2, "0")
    if DIGITS.match(value) and len(value) <= MAX_INT_DIGITS:
        return f"{int(value, 10):02X}"
    return value.upper()


def parse_port(uri: str, default: int = _BASE_SERVICE.port) -> int:
    match = PORT_PATTERN.search(uri.strip())
    if match is None:
        return default
    return _int(match.group(1), default)


def parse_protection(level_text: str, profile: str) -> ProtectionLevel:
    level = _int(level_text, 0)
    family = PROFILE_FAMILIES.get(profile.strip())
    if family is None:
        # EEP only goes up to 4, a bare 5 can only be UEP
        family = ProtectionFamily.UEP if level == 5 else ProtectionFamily.EEP_A
    return ProtectionLevel.from_parts(level, family) or _BASE_SERVICE.protection


def _decode_settings(root: Block) -> GlobalSettings:
    general = root.find("general") or Block(name="general")
    remote = root.find("remotecontrol") or Block(name="remotecontrol")

    edi_port = _BASE_SETTINGS.edi_port
    outputs = root.find("outputs")
    if outputs is not None:
        edi_tcp = outputs.find_path("edi", "destinations", "edi_tcp")
        if edi_tcp is not None and edi_tcp.get("listenport"):
            edi_port = _int(edi_tcp.get("listenport"), edi_port)

    tist_value = general.get("tist")
    tist = bool(tist_value) and tist_value.lower() != "false"
    tist_offset = _float(tist_value, 0) if tist else 0

    return GlobalSettings(
        dab_mode=_int(general.get("dabmode"), 0) or _BASE_SETTINGS.dab_mode,
        nb_frames=_int(general.get("nbframes"), _BASE_SETTINGS.nb_frames),
        syslog=general.get("syslog").lower() == "true",
        tist=tist,
        tist_offset=tist_offset,
        management_port=_int(general.get("managementport"), 0) or _BASE_SETTINGS.management_port,
        telnet_port=_int(remote.get("telnetport"), 0) or _BASE_SETTINGS.telnet_port,
        zmq_endpoint=remote.get("zmqendpoint") or _BASE_SETTINGS.zmq_endpoint,
        edi_port=edi_port,
    )


def _decode_ensemble(block: Optional[Block]) -> Ensemble:
    if block is None:
        return _BASE_ENSEMBLE
    return Ensemble(
        eid=parse_hex_code(block.get("id")),
        country=parse_hex_code(block.get("ecc")) or UNDEFINED_NAME,
        label=block.get("label"),
        short_label=block.get("shortlabel"),
        local_time_offset=block.get("local-time-offset") or _BASE_ENSEMBLE.local_time_offset,
        international_table=_int(block.get("international-table"), 0) or _BASE_ENSEMBLE.international_table,
        reconfig_counter=block.get("reconfig-counter") or _BASE_ENSEMBLE.reconfig_counter,
    )


def _join_service(srv: Block, sub: Block) -> Service:
    advanced = AdvancedServiceSettings(
        pty_sd="dynamic" if srv.get("pty-sd") == "dynamic" else "static",
        buffer_management="timestamped" if sub.get("buffer-management") == "timestamped" else "prebuffering",
        buffer_size=_int(sub.get("buffer"), 0) or _BASE_ADVANCED.buffer_size,
        prebuffering_size=_int(sub.get("prebuffering"), 0) or _BASE_ADVANCED.prebuffering_size,
    )
    return Service(
        sid=parse_hex_code(srv.get("id")),
        label=srv.get("label"),
        short_label=srv.get("shortlabel"),
        pty=_int(srv.get("pty"), _BASE_SERVICE.pty),
        audio_type=AudioType.DAB_PLUS if sub.get("type") == AudioType.DAB_PLUS.value else AudioType.DAB_MP2,
        bitrate=_int(sub.get("bitrate"), 0) or _BASE_SERVICE.bitrate,
        protection=parse_protection(sub.get("protection"), sub.get("protection-profile")),
        country=parse_hex_code(srv.get("ecc")) or UNDEFINED_NAME,
        language=parse_hex_code(srv.get("language")) or UNDEFINED_NAME,
        port=parse_port(sub.get("inputuri")),
        advanced=advanced,
    )


def _children(block: Optional[Block]) -> List[Block]:
    if block is None:
        return []
    return list(block.iter_blocks())


def _int(value: str, default: int) -> int:
    match = LEADING_INT.match(value)
    if match is None:
        return default
    digits = match.group(1)
    if len(digits.lstrip("+-")) > MAX_INT_DIGITS:
        return default
    return int(digits)


def _float(value: str, default: float) -> float:
    match = LEADING_FLOAT.match(value)
    if match is None:
        return default
    number = float(match.group(1))
    return int(number) if number.is_integer() else number
