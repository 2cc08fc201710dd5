"""Pytest configuration and fixtures for selloutctl tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from selloutctl.core.client import SelloutClient

BASE_URL = "https://sellout.example.com/api-sellout/rm"

ENV_VARS = (
    "SELLOUT_URL",
    "SELLOUT_PROFILE",
    "SELLOUT_VERIFY_SSL",
    "SELLOUT_TIMEOUT",
    "SELLOUT_UPLOAD_TIMEOUT",
    "SELLOUT_COD_CLIENTE",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Keep tests away from the user's config file and environment."""
    config_file = tmp_path / "selloutctl" / "config.yaml"
    monkeypatch.setattr("selloutctl.core.config.CONFIG_FILE", config_file)
    monkeypatch.setattr("selloutctl.cli.config_cmd.CONFIG_FILE", config_file)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return config_file


@pytest.fixture
def sample_config_yaml() -> str:
    """Sample config YAML content."""
    return """
default_profile: test
output_format: table

profiles:
  test:
    url: https://sellout-test.example.com/api-sellout/rm
    verify_ssl: false
    timeout: 30
    cod_cliente: "0001"

  production:
    url: https://sellout.example.com/api-sellout/rm
    verify_ssl: true
    timeout: 60
    upload_timeout: 900
"""


@pytest.fixture
def upload_payload() -> dict[str, Any]:
    """Report returned by the upload endpoint for a clean import."""
    return {
        "ok": True,
        "archivo": "ventas.xlsx",
        "codCliente": "0001",
        "filasLeidasVentas": 120,
        "filasLeidasStock": 80,
        "filasProcesadasVentas": 120,
        "filasProcesadasStock": 80,
        "codigosNoEncontrados": [],
        "incidencias": [],
        "tiempoSegundos": 4.2,
    }


@pytest.fixture
def partial_payload(upload_payload: dict[str, Any]) -> dict[str, Any]:
    """Report for an import that finished with incidents."""
    return {
        **upload_payload,
        "ok": False,
        "filasProcesadasVentas": 118,
        "codigosNoEncontrados": ["7861001234567"],
        "incidencias": [
            {
                "codigo": "7861001234567",
                "motivo": "Codigo de barra no encontrado",
                "fila": 14,
                "hoja": "VENTAS",
            },
            {"codigo": "PDV-9", "motivo": "PDV sin homologar", "fila": 33, "hoja": "VENTAS"},
        ],
    }


@pytest.fixture
def xlsx_file(tmp_path: Path) -> Path:
    """A small spreadsheet on disk (content is opaque to the client)."""
    path = tmp_path / "ventas.xlsx"
    path.write_bytes(b"PK\x03\x04" + b"\x00" * 2048)
    return path


@pytest.fixture
def make_client() -> Callable[..., SelloutClient]:
    """Build a client whose requests are answered by ``handler``."""

    def _make(handler: Callable[[httpx.Request], Any], **kwargs: Any) -> SelloutClient:
        kwargs.setdefault("max_retries", 0)
        return SelloutClient(
            base_url=BASE_URL,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )

    return _make
