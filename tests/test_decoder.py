from __future__ import annotations

from pathlib import Path

import pytest

from dabmuxgen.decoder import decode, parse_hex_code, parse_port, parse_protection
from dabmuxgen.encoder import encode
from dabmuxgen.grammar import ConfigSyntaxError
from dabmuxgen.models import (
    UNDEFINED_NAME,
    AdvancedServiceSettings,
    AudioType,
    Ensemble,
    GlobalSettings,
    OutputVariant,
    ProtectionLevel,
    Service,
)

FIXTURE_DIR = Path(__file__).parent / "fixtures"

ROUND_TRIP_FIELDS = (
    "sid",
    "label",
    "short_label",
    "pty",
    "audio_type",
    "bitrate",
    "protection",
    "port",
    "advanced",
)


def _sample_services() -> list[Service]:
    return [
        Service(sid="C1A0", label="Radio One", short_label="Radio1", pty=10, country="Germany", language="German"),
        Service(
            sid="C1A1",
            label="Classic FM",
            short_label="Classic",
            pty=14,
            audio_type=AudioType.DAB_MP2,
            bitrate=128,
            protection=ProtectionLevel.UEP_3,
            country="E1",
            language="English",
            port=9002,
            advanced=AdvancedServiceSettings(
                pty_sd="dynamic", buffer_management="timestamped", buffer_size=60, prebuffering_size=30
            ),
        ),
        Service(sid="C1A2", label="News", short_label="News", pty=1, bitrate=64, protection=ProtectionLevel.EEP_2B),
    ] + [
        Service(sid=f"D{index:03X}", label=f"Extra {index}", protection=protection, port=9100 + index)
        for index, protection in enumerate(ProtectionLevel)
    ]


@pytest.mark.parametrize("variant", list(OutputVariant))
def test_round_trip_reproduces_services(variant: OutputVariant) -> None:
    ensemble = Ensemble(eid="4FFF", country="Germany", label="Sample Mux", short_label="Sample")
    settings = GlobalSettings(syslog=True, tist=True, tist_offset=1.5, edi_port=9300, management_port=12800)
    services = _sample_services()

    decoded = decode(encode(ensemble, services, settings, variant))

    assert len(decoded.services) == len(services)
    for original, restored in zip(services, decoded.services):
        for name in ROUND_TRIP_FIELDS:
            assert getattr(restored, name) == getattr(original, name), name
    assert decoded.settings == settings
    assert decoded.ensemble.eid == "4FFF"
    assert decoded.ensemble.label == "Sample Mux"
    assert decoded.ensemble.short_label == "Sample"


def test_round_trip_returns_codes_not_names() -> None:
    services = [Service(sid="C1A0", country="Germany", language="German")]
    decoded = decode(encode(Ensemble(eid="4FFF", country="Germany"), services, GlobalSettings(), OutputVariant.INFO))
    assert decoded.ensemble.country == "E0"
    assert decoded.services[0].country == "E0"
    assert decoded.services[0].language == "08"


def test_missing_subchannel_reference_is_dropped() -> None:
    text = (
        "services {\n"
        "    srv-01 {\n        id 0xc1a0\n    }\n"
        "    srv-02 {\n        id 0xc1a1\n    }\n"
        "}\n"
        "subchannels {\n"
        "    sub-01 {\n        type dabplus\n        bitrate 96\n    }\n"
        "}\n"
        "components {\n"
        "    comp-01 {\n        service srv-01\n        subchannel sub-01\n    }\n"
        "    comp-02 {\n        service srv-02\n        subchannel sub-02\n    }\n"
        "}\n"
    )
    decoded = decode(text)
    assert [service.sid for service in decoded.services] == ["C1A0"]


def test_links_follow_components_not_positions() -> None:
    text = (
        "services {\n    b {\n        id 0x2\n    }\n    a {\n        id 0x1\n    }\n}\n"
        "subchannels {\n    x {\n        bitrate 64\n    }\n    y {\n        bitrate 128\n    }\n}\n"
        "components {\n"
        "    c1 {\n        service a\n        subchannel y\n    }\n"
        "    c2 {\n        service b\n        subchannel x\n    }\n"
        "}\n"
    )
    decoded = decode(text)
    assert [(service.sid, service.bitrate) for service in decoded.services] == [("01", 128), ("02", 64)]


def test_empty_input_yields_from_scratch_defaults() -> None:
    decoded = decode("")
    assert decoded.settings == GlobalSettings()
    assert decoded.ensemble == Ensemble()
    assert decoded.services == ()


def test_handwritten_configuration() -> None:
    decoded = decode((FIXTURE_DIR / "handwritten.mux").read_text(encoding="utf-8"))

    settings = decoded.settings
    assert settings.syslog is True
    assert settings.tist is False
    assert settings.tist_offset == 0
    assert settings.management_port == 12800
    assert settings.telnet_port == 12801
    assert settings.zmq_endpoint == "tcp://lo:12802"
    assert settings.edi_port == 9301

    ensemble = decoded.ensemble
    assert ensemble.eid == "4FFE"
    assert ensemble.country == "E1"
    assert ensemble.local_time_offset == "1"
    assert ensemble.reconfig_counter == "3"
    assert ensemble.short_label == "Hand"

    # talk-comp points at a subchannel that does not exist
    assert len(decoded.services) == 1
    jazz = decoded.services[0]
    assert jazz.sid == "C2B0"
    assert jazz.label == "Jazz Radio"
    assert jazz.pty == 24
    assert jazz.country == "E1"
    assert jazz.language == "09"
    assert jazz.audio_type is AudioType.DAB_MP2
    assert jazz.bitrate == 192
    assert jazz.protection is ProtectionLevel.UEP_5
    assert jazz.port == 9101
    assert jazz.advanced == AdvancedServiceSettings()


def test_service_defaults_for_sparse_blocks() -> None:
    text = (
        "services {\n    s {\n    }\n}\n"
        "subchannels {\n    t {\n    }\n}\n"
        "components {\n    c {\n        service s\n        subchannel t\n    }\n}\n"
    )
    (service,) = decode(text).services
    assert service.sid == ""
    assert service.pty == 0
    assert service.bitrate == 96
    assert service.protection is ProtectionLevel.EEP_3A
    assert service.port == 9001
    assert service.audio_type is AudioType.DAB_MP2
    assert service.country == UNDEFINED_NAME
    assert service.language == UNDEFINED_NAME


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0xE1", "E1"),
        ("0x4fff", "4FFF"),
        ("0x1", "01"),
        ("e1", "E1"),
        ("F", "0F"),
        ("21", "15"),
        ("9", "09"),
        ("", ""),
    ],
)
def test_hex_code_heuristic(raw: str, expected: str) -> None:
    assert parse_hex_code(raw) == expected


def test_port_from_input_uri() -> None:
    assert parse_port("tcp://127.0.0.1:9005") == 9005
    assert parse_port("zmq+tcp://*:18081") == 18081
    assert parse_port("file:///dev/null") == 9001
    assert parse_port("") == 9001


def test_protection_resolution() -> None:
    assert parse_protection("2", "EEP_B") is ProtectionLevel.EEP_2B
    assert parse_protection("5", "UEP") is ProtectionLevel.UEP_5
    assert parse_protection("1", "") is ProtectionLevel.EEP_1A
    assert parse_protection("5", "") is ProtectionLevel.UEP_5
    assert parse_protection("6", "") is ProtectionLevel.EEP_3A
    assert parse_protection("5", "EEP_B") is ProtectionLevel.EEP_3A
    assert parse_protection("", "") is ProtectionLevel.EEP_3A


def test_unbalanced_input_is_the_only_failure() -> None:
    with pytest.raises(ConfigSyntaxError):
        decode("general {\n    dabmode 1\n")


def test_overlong_digit_runs_fall_back_instead_of_failing() -> None:
    digits = "9" * 5000
    decoded = decode(
        f"general {{\n    nbframes {digits}\n    managementport {digits}\n}}\n"
        f"ensemble {{\n    id 0x4fff\n    ecc {digits}\n}}\n"
    )
    assert decoded.settings.nb_frames == 0
    assert decoded.settings.management_port == 12720
    assert decoded.ensemble.eid == "4FFF"
    assert decoded.ensemble.country == digits
    assert parse_port(f"tcp://127.0.0.1:{digits}") == 9001


def test_deeply_nested_input_decodes() -> None:
    depth = 3000
    decoded = decode("general {\n" + "a {\n" * depth + "}\n" * depth + "    dabmode 2\n}\n")
    assert decoded.settings.dab_mode == 2
    assert decoded.services == ()
