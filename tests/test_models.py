"""Tests for selloutctl models."""

from __future__ import annotations

from pathlib import Path

import pytest

from selloutctl.models import (
    DiagnosticArtifact,
    FileDescriptor,
    IncidentRecord,
    ServerResult,
    TimerState,
    UploadOutcome,
    UploadStatus,
    Venta,
)
from selloutctl.models.base import to_int

# =============================================================================
# Coercion Helpers
# =============================================================================


class TestToInt:
    """Tests for to_int coercion."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (12, 12),
            ("12", 12),
            (" 7 ", 7),
            ("12.9", 12),
            (3.7, 3),
        ],
    )
    def test_numeric_values(self, value, expected):
        assert to_int(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", True, float("nan"), float("inf"), [1]])
    def test_non_numeric_uses_default(self, value):
        assert to_int(value, -1) == -1


# =============================================================================
# Server Result
# =============================================================================


class TestServerResult:
    """Tests for ServerResult parsing."""

    def test_full_report(self, partial_payload):
        result = ServerResult.model_validate(partial_payload)

        assert result.ok is False
        assert result.file_name == "ventas.xlsx"
        assert result.cod_cliente == "0001"
        assert result.read_counts_by_dataset == {"ventas": 120, "stock": 80}
        assert result.processed_counts_by_dataset == {"ventas": 118, "stock": 80}
        assert result.unmatched_keys == ["7861001234567"]
        assert len(result.incident_records) == 2
        assert result.incident_records[0].row == 14
        assert result.incident_records[0].sheet == "VENTAS"
        assert result.elapsed_seconds == 4.2

    def test_totals_and_datasets(self, partial_payload):
        result = ServerResult.model_validate(partial_payload)
        assert result.datasets == ["ventas", "stock"]
        assert result.total_read == 200
        assert result.total_processed == 198
        assert result.has_incidents is True

    def test_clean_report_has_no_incidents(self, upload_payload):
        result = ServerResult.model_validate(upload_payload)
        assert result.ok is True
        assert result.has_incidents is False

    def test_string_counts_are_coerced(self):
        result = ServerResult.model_validate(
            {"ok": 1, "filasLeidasVentas": "42", "filasProcesadasVentas": "n/a"}
        )
        assert result.ok is True
        assert result.read_counts_by_dataset == {"ventas": 42}
        assert result.processed_counts_by_dataset == {"ventas": 0}

    def test_missing_fields_default(self):
        result = ServerResult.model_validate({})
        assert result.ok is False
        assert result.read_counts_by_dataset == {}
        assert result.unmatched_keys == []
        assert result.incident_records == []
        assert result.elapsed_seconds is None

    def test_non_list_collections_become_empty(self):
        result = ServerResult.model_validate(
            {"ok": True, "codigosNoEncontrados": None, "incidencias": "none"}
        )
        assert result.unmatched_keys == []
        assert result.incident_records == []

    def test_plain_incident_entries_become_reasons(self):
        result = ServerResult.model_validate({"incidencias": ["Hoja STOCK vacia"]})
        incident = result.incident_records[0]
        assert incident.reason == "Hoja STOCK vacia"
        assert incident.row == -1
        assert incident.sheet == ""

    def test_null_unmatched_keys_dropped(self):
        result = ServerResult.model_validate({"codigosNoEncontrados": ["A", None, 123]})
        assert result.unmatched_keys == ["A", "123"]

    def test_unparseable_elapsed_is_none(self):
        result = ServerResult.model_validate({"tiempoSegundos": "pronto"})
        assert result.elapsed_seconds is None

    def test_incidents_by_sheet(self):
        result = ServerResult.model_validate(
            {
                "incidencias": [
                    {"motivo": "a", "hoja": "VENTAS"},
                    {"motivo": "b", "hoja": "VENTAS"},
                    {"motivo": "c"},
                ]
            }
        )
        assert result.incidents_by_sheet() == {"VENTAS": 2, "GENERAL": 1}


class TestIncidentRecord:
    """Tests for IncidentRecord."""

    def test_aliases(self):
        record = IncidentRecord.model_validate(
            {"codigo": "X1", "motivo": "Sin precio", "fila": "9", "hoja": "STOCK"}
        )
        assert record.code == "X1"
        assert record.reason == "Sin precio"
        assert record.row == 9
        assert record.sheet == "STOCK"

    def test_nulls(self):
        record = IncidentRecord.model_validate(
            {"codigo": None, "motivo": None, "fila": None, "hoja": None}
        )
        assert record.code == ""
        assert record.row == -1


# =============================================================================
# Files and Outcomes
# =============================================================================


class TestFileDescriptor:
    """Tests for FileDescriptor."""

    def test_from_path(self, xlsx_file: Path):
        descriptor = FileDescriptor.from_path(xlsx_file)
        assert descriptor.name == "ventas.xlsx"
        assert descriptor.extension == ".xlsx"
        assert descriptor.size_bytes == xlsx_file.stat().st_size
        assert descriptor.read_bytes() == xlsx_file.read_bytes()

    def test_from_bytes_lowercases_extension(self):
        descriptor = FileDescriptor.from_bytes("VENTAS.XLS", b"abc")
        assert descriptor.extension == ".xls"
        assert descriptor.size_bytes == 3
        assert descriptor.read_bytes() == b"abc"

    def test_read_without_source(self):
        with pytest.raises(ValueError):
            FileDescriptor(name="x.xlsx", size_bytes=0, extension=".xlsx").read_bytes()


class TestUploadStatus:
    """Tests for UploadStatus."""

    def test_terminal_states(self):
        assert not UploadStatus.IDLE.is_terminal
        assert not UploadStatus.UPLOADING.is_terminal
        assert UploadStatus.CANCELLED.is_terminal
        assert UploadStatus.SUCCEEDED.is_terminal
        assert UploadStatus.PARTIALLY_FAILED.is_terminal
        assert UploadStatus.FAILED.is_terminal


class TestUploadOutcome:
    """Tests for UploadOutcome."""

    def test_completed_summary(self, partial_payload):
        outcome = UploadOutcome(
            status=UploadStatus.PARTIALLY_FAILED,
            file_name="ventas.xlsx",
            result=ServerResult.model_validate(partial_payload),
            elapsed_ms=3000,
            estimate_ms=15000,
            reloaded=True,
        )
        summary = outcome.summary()

        assert outcome.completed
        assert not outcome.failed
        assert summary["status"] == "partially_failed"
        assert summary["incidents"] == 2
        assert summary["unmatched"] == 1
        assert summary["read"] == {"ventas": 120, "stock": 80}
        assert summary["reloaded"] is True
        assert "error" not in summary

    def test_failed_summary(self):
        outcome = UploadOutcome(
            status=UploadStatus.FAILED, file_name="ventas.xlsx", error="Server error (500)"
        )
        summary = outcome.summary()
        assert outcome.failed
        assert summary["error"] == "Server error (500)"
        assert "incidents" not in summary

    def test_cancelled(self):
        outcome = UploadOutcome(status=UploadStatus.CANCELLED, file_name="ventas.xlsx")
        assert outcome.cancelled
        assert not outcome.completed


class TestDiagnosticArtifact:
    """Tests for DiagnosticArtifact."""

    def test_save_creates_directory(self, tmp_path: Path):
        artifact = DiagnosticArtifact(content=b"fila 14", filename="incidencias.txt")
        target = artifact.save(tmp_path / "reports")
        assert target == tmp_path / "reports" / "incidencias.txt"
        assert target.read_bytes() == b"fila 14"

    def test_save_ignores_directory_components(self, tmp_path: Path):
        artifact = DiagnosticArtifact(content=b"x", filename="../../etc/incidencias.txt")
        target = artifact.save(tmp_path)
        assert target.parent == tmp_path
        assert target.name == "incidencias.txt"


class TestTimerState:
    """Tests for TimerState."""

    def test_unseeded(self):
        state = TimerState()
        assert not state.is_seeded
        assert not state.overrun

    def test_overrun_and_snapshot(self):
        state = TimerState(remaining_ms=0, elapsed_ms=5000)
        copy = state.snapshot()
        state.elapsed_ms = 6000
        assert state.overrun
        assert copy.elapsed_ms == 5000


class TestVenta:
    """Tests for Venta."""

    def test_parse_row(self):
        venta = Venta.model_validate(
            {
                "id": 10,
                "anio": 2025,
                "mes": 3,
                "marca": "ACME",
                "codBarra": 7861001234567,
                "nombreProducto": "Galletas",
                "ventaDolares": "12.5",
                "ventaUnidad": 4,
                "codCliente": "0001",
            }
        )
        assert venta.cod_barra == "7861001234567"
        assert venta.nombre_producto == "Galletas"
        assert venta.venta_dolares == 12.5
        assert venta.cod_cliente == "0001"

    def test_to_row(self):
        venta = Venta.model_validate({"id": 1, "marca": "ACME"})
        assert venta.to_row(["id", "marca", "pdv"]) == {"id": 1, "marca": "ACME", "pdv": ""}
