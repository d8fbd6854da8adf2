from __future__ import annotations

import pytest

from dabmuxgen.capacity import capacity_units
from dabmuxgen.compliance import is_b_bitrate_well_defined, is_compliant
from dabmuxgen.models import AudioType, ProtectionLevel


def test_eep_a_ceiling_boundary() -> None:
    assert is_compliant(AudioType.DAB_PLUS, ProtectionLevel.EEP_2A, 144)
    assert not is_compliant(AudioType.DAB_PLUS, ProtectionLevel.EEP_2A, 145)
    assert is_compliant(AudioType.DAB_MP2, ProtectionLevel.EEP_1A, 136)
    assert not is_compliant(AudioType.DAB_MP2, ProtectionLevel.EEP_1A, 137)


def test_uep_requires_table_bitrate_and_mp2() -> None:
    assert not is_compliant(AudioType.DAB_MP2, ProtectionLevel.UEP_1, 33)
    assert not is_compliant(AudioType.DAB_PLUS, ProtectionLevel.UEP_1, 32)
    assert is_compliant(AudioType.DAB_MP2, ProtectionLevel.UEP_1, 32)
    assert is_compliant(AudioType.DAB_MP2, ProtectionLevel.UEP_5, 384)


@pytest.mark.parametrize("protection", list(ProtectionLevel))
def test_absolute_floor(protection: ProtectionLevel) -> None:
    for audio_type in AudioType:
        assert not is_compliant(audio_type, protection, 7)


def test_eep_b_minimum_and_ceilings() -> None:
    assert not is_compliant(AudioType.DAB_PLUS, ProtectionLevel.EEP_4B, 24)
    assert is_compliant(AudioType.DAB_PLUS, ProtectionLevel.EEP_4B, 32)
    assert is_compliant(AudioType.DAB_PLUS, ProtectionLevel.EEP_1B, 160)
    assert not is_compliant(AudioType.DAB_PLUS, ProtectionLevel.EEP_1B, 192)
    assert is_compliant(AudioType.DAB_MP2, ProtectionLevel.EEP_1B, 224)
    assert is_compliant(AudioType.DAB_MP2, ProtectionLevel.EEP_3B, 352)
    assert not is_compliant(AudioType.DAB_MP2, ProtectionLevel.EEP_3B, 384)


def test_eep_a_allows_low_bitrates() -> None:
    assert is_compliant(AudioType.DAB_PLUS, ProtectionLevel.EEP_3A, 8)
    assert is_compliant(AudioType.DAB_PLUS, ProtectionLevel.EEP_3A, 24)


def test_b_well_definedness_is_a_separate_signal() -> None:
    # within the 3B ceiling but not a multiple of 32
    assert is_compliant(AudioType.DAB_PLUS, ProtectionLevel.EEP_3B, 100)
    assert not is_b_bitrate_well_defined(ProtectionLevel.EEP_3B, 100)
    cu = capacity_units(100, ProtectionLevel.EEP_3B, AudioType.DAB_PLUS)
    assert cu > 0

    assert is_b_bitrate_well_defined(ProtectionLevel.EEP_3B, 96)
    assert is_b_bitrate_well_defined(ProtectionLevel.EEP_3A, 100)
    assert is_b_bitrate_well_defined(ProtectionLevel.UEP_2, 100)
