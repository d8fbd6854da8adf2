"""
ETSI compliance checks for bitrate / protection / audio type combinations.

Deutsch:
    Prüft Kombinationen aus Bitrate, Fehlerschutz und Audiotyp gegen die
    Grenzwerte des Übertragungsstandards.
"""

from __future__ import annotations

from typing import Dict, Tuple

from .capacity import UEP_CU_TABLE
from .models import AudioType, ProtectionFamily, ProtectionLevel

MIN_BITRATE = 8
EEP_B_MIN_BITRATE = 32

# (audio type, level) -> highest allowed bitrate in kbps
EEP_A_CEILINGS: Dict[Tuple[AudioType, ProtectionLevel], int] = {
    (AudioType.DAB_PLUS, ProtectionLevel.EEP_1A): 96,
    (AudioType.DAB_PLUS, ProtectionLevel.EEP_2A): 144,
    (AudioType.DAB_PLUS, ProtectionLevel.EEP_3A): 192,
    (AudioType.DAB_PLUS, ProtectionLevel.EEP_4A): 288,
    (AudioType.DAB_MP2, ProtectionLevel.EEP_1A): 136,
    (AudioType.DAB_MP2, ProtectionLevel.EEP_2A): 208,
    (AudioType.DAB_MP2, ProtectionLevel.EEP_3A): 272,
    (AudioType.DAB_MP2, ProtectionLevel.EEP_4A): 384,
}

EEP_B_CEILINGS: Dict[Tuple[AudioType, ProtectionLevel], int] = {
    (AudioType.DAB_PLUS, ProtectionLevel.EEP_1B): 160,
    (AudioType.DAB_PLUS, ProtectionLevel.EEP_2B): 192,
    (AudioType.DAB_PLUS, ProtectionLevel.EEP_3B): 256,
    (AudioType.DAB_PLUS, ProtectionLevel.EEP_4B): 288,
    (AudioType.DAB_MP2, ProtectionLevel.EEP_1B): 224,
    (AudioType.DAB_MP2, ProtectionLevel.EEP_2B): 288,
    (AudioType.DAB_MP2, ProtectionLevel.EEP_3B): 352,
    (AudioType.DAB_MP2, ProtectionLevel.EEP_4B): 384,
}


def is_compliant(audio_type: AudioType, protection: ProtectionLevel, bitrate: int) -> bool:
    """
    Return True when the combination stays within the standard's limits.

    Rules are evaluated in order: absolute floor, UEP (MP2 only, table
    bitrates only), EEP-B (minimum and ceiling), EEP-A (ceiling).

    Deutsch:
        Liefert True, wenn die Kombination die Grenzwerte einhält.
    """

    if bitrate < MIN_BITRATE:
        return False

    family = protection.family
    if family is ProtectionFamily.UEP:
        if audio_type is not AudioType.DAB_MP2:
            return False
        return bitrate in UEP_CU_TABLE
    if family is ProtectionFamily.EEP_B:
        if bitrate < EEP_B_MIN_BITRATE:
            return False
        return bitrate <= EEP_B_CEILINGS[(audio_type, protection)]
    return bitrate <= EEP_A_CEILINGS[(audio_type, protection)]


def is_b_bitrate_well_defined(protection: ProtectionLevel, bitrate: int) -> bool:
    """
    EEP-B capacity is only exact for multiples of 32 kbps.

    This is reported separately from ``is_compliant``: 100 kbps at EEP-3B is
    within the ceiling yet has no exact CU allocation.
    """

    if protection.family is not ProtectionFamily.EEP_B:
        return True
    return bitrate % 32 == 0
