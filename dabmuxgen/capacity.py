"""
Capacity Unit (CU) calculation for DAB subchannels.

Each subchannel consumes a number of Capacity Units of the 864 CU available in
a DAB multiplex (transmission mode I). The cost depends on the protection
family:

* UEP: fixed lookup table (DAB MP2 only)
* EEP-B: linear in 32 kbps chunks
* EEP-A: exact table for DAB+ standard bitrates, code-rate formula otherwise

Deutsch:
    Berechnung der Capacity Units (CU) pro Subchannel, abhängig von Bitrate,
    Fehlerschutz-Profil und Audiotyp.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List

from .models import AudioType, ProtectionFamily, ProtectionLevel, Service

MAX_CU = 864

# Bitrate -> CU for UEP levels 1-5 (index 0 is UEP-1)
UEP_CU_TABLE: Dict[int, List[int]] = {
    32: [27, 24, 21, 18, 16],
    48: [42, 36, 32, 27, 24],
    56: [48, 42, 39, 32, 27],
    64: [54, 48, 42, 36, 32],
    80: [70, 60, 54, 45, 40],
    96: [84, 72, 64, 54, 48],
    112: [96, 84, 75, 63, 56],
    128: [112, 96, 84, 72, 64],
    160: [140, 120, 108, 90, 80],
    192: [168, 144, 128, 108, 96],
    224: [198, 168, 150, 126, 112],
    256: [224, 192, 168, 144, 128],
    320: [280, 240, 216, 180, 160],
    384: [336, 288, 256, 216, 192],
}

# CU per 32 kbps for EEP-B levels 1-4
EEP_B_FACTORS: Dict[ProtectionLevel, int] = {
    ProtectionLevel.EEP_1B: 27,
    ProtectionLevel.EEP_2B: 21,
    ProtectionLevel.EEP_3B: 18,
    ProtectionLevel.EEP_4B: 15,
}

# Exact DAB+ allocations for EEP-A (level -> bitrate -> CU)
EEP_A_DABPLUS_TABLE: Dict[ProtectionLevel, Dict[int, int]] = {
    ProtectionLevel.EEP_1A: {32: 48, 48: 72, 64: 96, 72: 108, 88: 132, 96: 144, 128: 192},
    ProtectionLevel.EEP_2A: {32: 32, 48: 48, 64: 64, 72: 72, 88: 88, 96: 96, 128: 128},
    ProtectionLevel.EEP_3A: {
        32: 24,
        40: 30,
        48: 36,
        56: 42,
        64: 48,
        72: 54,
        80: 60,
        88: 66,
        96: 72,
        112: 84,
        128: 96,
        160: 120,
        192: 144,
    },
    ProtectionLevel.EEP_4A: {32: 16, 48: 24, 64: 32, 72: 36, 88: 44, 96: 48, 128: 64},
}

# Convolutional code rate for EEP-A levels 1-4
EEP_A_CODE_RATES: Dict[ProtectionLevel, float] = {
    ProtectionLevel.EEP_1A: 0.25,
    ProtectionLevel.EEP_2A: 0.375,
    ProtectionLevel.EEP_3A: 0.5,
    ProtectionLevel.EEP_4A: 0.75,
}


def capacity_units(bitrate: int, protection: ProtectionLevel, audio_type: AudioType) -> int:
    """
    Return the Capacity Units consumed by a subchannel.

    Never raises. An undefined UEP bitrate yields 0; an EEP-B bitrate that is
    not a multiple of 32 yields a pro-rata estimate (see
    ``compliance.is_b_bitrate_well_defined``).

    Deutsch:
        Liefert die CU eines Subchannels; undefinierte UEP-Kombinationen
        ergeben 0.
    """

    family = protection.family
    if family is ProtectionFamily.UEP:
        row = UEP_CU_TABLE.get(bitrate)
        if row is None:
            return 0
        return row[protection.level - 1]
    if family is ProtectionFamily.EEP_B:
        return math.ceil(bitrate / 32 * EEP_B_FACTORS[protection])
    if audio_type is AudioType.DAB_PLUS:
        exact = EEP_A_DABPLUS_TABLE[protection].get(bitrate)
        if exact is not None:
            return exact
    return _eep_a_formula(bitrate, protection)


def service_capacity_units(service: Service) -> int:
    return capacity_units(service.bitrate, service.protection, service.audio_type)


def total_capacity_units(services: Iterable[Service]) -> int:
    return sum(service_capacity_units(service) for service in services)


def remaining_capacity_units(services: Iterable[Service]) -> int:
    """CU still free in the multiplex; negative when over-allocated."""
    return MAX_CU - total_capacity_units(services)


def _eep_a_formula(bitrate: int, protection: ProtectionLevel) -> int:
    gross_bits = bitrate * 24 / EEP_A_CODE_RATES[protection]
    return math.ceil(gross_bits / 64)
