from __future__ import annotations

import pytest

from dabmuxgen.capacity import (
    EEP_A_DABPLUS_TABLE,
    MAX_CU,
    UEP_CU_TABLE,
    capacity_units,
    remaining_capacity_units,
    total_capacity_units,
)
from dabmuxgen.models import AudioType, ProtectionLevel, Service


@pytest.mark.parametrize(
    ("bitrate", "protection", "audio_type", "expected"),
    [
        (96, ProtectionLevel.EEP_3A, AudioType.DAB_PLUS, 72),
        (128, ProtectionLevel.EEP_1A, AudioType.DAB_PLUS, 192),
        (40, ProtectionLevel.EEP_3A, AudioType.DAB_PLUS, 30),
        (88, ProtectionLevel.EEP_4A, AudioType.DAB_PLUS, 44),
        (64, ProtectionLevel.UEP_3, AudioType.DAB_MP2, 42),
        (384, ProtectionLevel.UEP_1, AudioType.DAB_MP2, 336),
        (32, ProtectionLevel.UEP_5, AudioType.DAB_MP2, 16),
    ],
)
def test_table_values_are_returned_exactly(
    bitrate: int, protection: ProtectionLevel, audio_type: AudioType, expected: int
) -> None:
    assert capacity_units(bitrate, protection, audio_type) == expected


def test_every_dabplus_table_entry_matches() -> None:
    for protection, row in EEP_A_DABPLUS_TABLE.items():
        for bitrate, expected in row.items():
            assert capacity_units(bitrate, protection, AudioType.DAB_PLUS) == expected


def test_uep_unknown_bitrate_is_zero() -> None:
    assert 33 not in UEP_CU_TABLE
    assert capacity_units(33, ProtectionLevel.UEP_2, AudioType.DAB_MP2) == 0


def test_eep_b_uses_32k_chunks() -> None:
    assert capacity_units(64, ProtectionLevel.EEP_1B, AudioType.DAB_PLUS) == 54
    assert capacity_units(96, ProtectionLevel.EEP_2B, AudioType.DAB_MP2) == 63
    assert capacity_units(128, ProtectionLevel.EEP_3B, AudioType.DAB_PLUS) == 72
    assert capacity_units(192, ProtectionLevel.EEP_4B, AudioType.DAB_MP2) == 90


def test_eep_b_off_grid_bitrate_is_pro_rata() -> None:
    # 100 / 32 * 18 = 56.25
    assert capacity_units(100, ProtectionLevel.EEP_3B, AudioType.DAB_PLUS) == 57


def test_dabplus_falls_back_to_formula_outside_table() -> None:
    # 2A has no 80 kbps entry: 80 * 24 / 0.375 / 64 = 80
    assert capacity_units(80, ProtectionLevel.EEP_2A, AudioType.DAB_PLUS) == 80
    # 1A at 100 kbps: 100 * 24 / 0.25 / 64 = 150
    assert capacity_units(100, ProtectionLevel.EEP_1A, AudioType.DAB_PLUS) == 150


def test_mp2_eep_a_always_uses_formula() -> None:
    assert capacity_units(128, ProtectionLevel.EEP_3A, AudioType.DAB_MP2) == 96
    assert capacity_units(192, ProtectionLevel.EEP_4A, AudioType.DAB_MP2) == 96
    # 56 * 24 / 0.375 / 64 = 56
    assert capacity_units(56, ProtectionLevel.EEP_2A, AudioType.DAB_MP2) == 56
    # 100 * 24 / 0.75 / 64 = 50
    assert capacity_units(100, ProtectionLevel.EEP_4A, AudioType.DAB_MP2) == 50


def test_totals_and_remaining_capacity() -> None:
    services = [
        Service(sid="C1A0", bitrate=96, protection=ProtectionLevel.EEP_3A),
        Service(sid="C1A1", bitrate=128, protection=ProtectionLevel.UEP_3, audio_type=AudioType.DAB_MP2),
    ]
    assert total_capacity_units(services) == 72 + 84
    assert remaining_capacity_units(services) == MAX_CU - 156
    assert total_capacity_units([]) == 0
