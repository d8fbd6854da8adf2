"""
Validation helpers for a multiplex composition.

Deutsch:
    Validierungshilfen für die Zusammenstellung eines Multiplex
    (Kapazität, doppelte Service-IDs, ETSI-Konformität).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from .capacity import MAX_CU, capacity_units
from .compliance import is_b_bitrate_well_defined, is_compliant
from .models import Ensemble, Service

log = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when validation fails. / Wird geworfen, wenn die Validierung scheitert."""


@dataclass
class ServiceCapacity:
    ordinal: int
    sid: str
    label: str
    capacity_units: int
    compliant: bool
    b_bitrate_well_defined: bool

    def to_dict(self) -> Dict[str, object]:
        return {
            "ordinal": self.ordinal,
            "sid": self.sid,
            "label": self.label,
            "capacity_units": self.capacity_units,
            "compliant": self.compliant,
            "b_bitrate_well_defined": self.b_bitrate_well_defined,
        }


@dataclass
class MultiplexReport:
    rows: List[ServiceCapacity]
    total_cu: int
    max_cu: int
    duplicate_sids: List[str]
    warnings: List[str]
    missing_fields: List[str] = field(default_factory=list)

    @property
    def over_capacity(self) -> bool:
        return self.total_cu > self.max_cu

    @property
    def non_compliant(self) -> List[ServiceCapacity]:
        return [row for row in self.rows if not row.compliant]


def build_report(
    services: Sequence[Service],
    max_cu: int = MAX_CU,
    ensemble: Optional[Ensemble] = None,
) -> MultiplexReport:
    """
    Collect per-service CU rows, totals and warnings.

    The ensemble's mandatory fields are checked only when ``ensemble`` is given.

    Deutsch:
        Sammelt CU-Zeilen, Summen und Warnungen für alle Services.
    """

    rows: List[ServiceCapacity] = []
    warnings: List[str] = []
    for index, service in enumerate(services, start=1):
        row = ServiceCapacity(
            ordinal=index,
            sid=service.sid,
            label=service.label,
            capacity_units=capacity_units(service.bitrate, service.protection, service.audio_type),
            compliant=is_compliant(service.audio_type, service.protection, service.bitrate),
            b_bitrate_well_defined=is_b_bitrate_well_defined(service.protection, service.bitrate),
        )
        rows.append(row)
        if not row.b_bitrate_well_defined:
            warnings.append(
                f"service #{index} ({service.sid or 'no sid'}): {service.protection.value} "
                f"needs a bitrate that is a multiple of 32, got {service.bitrate}"
            )
        elif not row.compliant:
            warnings.append(
                f"service #{index} ({service.sid or 'no sid'}): {service.audio_type.value} "
                f"{service.bitrate} kbps at {service.protection.value} is outside ETSI limits"
            )

    total = sum(row.capacity_units for row in rows)
    if total > max_cu:
        warnings.append(f"multiplex uses {total} CU, exceeding the limit of {max_cu}")

    duplicates = _detect_duplicate_sids(services)
    if duplicates:
        warnings.append(f"duplicate service ids: {', '.join(duplicates)}")

    for warning in warnings:
        log.debug("report: %s", warning)
    return MultiplexReport(
        rows=rows,
        total_cu=total,
        max_cu=max_cu,
        duplicate_sids=duplicates,
        warnings=warnings,
        missing_fields=_detect_missing_fields(services, ensemble),
    )


def assert_required_fields(report: MultiplexReport) -> None:
    if report.missing_fields:
        header = "mandatory field is missing" if len(report.missing_fields) == 1 else "mandatory fields are missing"
        raise ValidationError(f"{header}: {', '.join(report.missing_fields)}")


def assert_capacity(report: MultiplexReport) -> None:
    if report.over_capacity:
        raise ValidationError(
            f"Capacity Units count {report.total_cu} exceeds the allowed limit of {report.max_cu}"
        )


def assert_no_duplicate_sids(report: MultiplexReport) -> None:
    if report.duplicate_sids:
        raise ValidationError(f"duplicate service ids remain: {', '.join(report.duplicate_sids[:5])}")


def assert_compliant(report: MultiplexReport) -> None:
    offending = report.non_compliant
    if offending:
        details = ", ".join(f"#{row.ordinal} ({row.sid or 'no sid'})" for row in offending)
        raise ValidationError(f"services outside ETSI limits: {details}")


def _detect_duplicate_sids(services: Iterable[Service]) -> List[str]:
    seen: Dict[str, Service] = {}
    duplicates: List[str] = []
    for service in services:
        identity = service.sid.strip().upper()
        if not identity:
            continue
        if identity in seen:
            if identity not in duplicates:
                duplicates.append(identity)
        else:
            seen[identity] = service
    return duplicates


def _detect_missing_fields(services: Sequence[Service], ensemble: Optional[Ensemble]) -> List[str]:
    missing: List[str] = []
    if ensemble is not None:
        if not ensemble.eid.strip():
            missing.append("ensemble: eid")
        if not ensemble.label.strip():
            missing.append("ensemble: label")
        if not ensemble.short_label.strip():
            missing.append("ensemble: short_label")
    for index, service in enumerate(services, start=1):
        prefix = f"service #{index}"
        if not service.sid.strip():
            missing.append(f"{prefix}: sid")
        if not service.label.strip():
            missing.append(f"{prefix}: label")
        if not service.short_label.strip():
            missing.append(f"{prefix}: short_label")
        if not service.port:
            missing.append(f"{prefix}: port")
    return missing
