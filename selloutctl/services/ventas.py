"""Dataset read service for loaded sellout sales."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError as PayloadValidationError

from selloutctl.core.exceptions import MalformedResponseError
from selloutctl.core.timeouts import DEFAULT_RELOAD_TIMEOUT_SECONDS
from selloutctl.models.venta import Venta

from .base import BaseService

logger = logging.getLogger(__name__)

VENTAS_PATH = "/ventas"
DEFAULT_LIMIT = 10000


class VentaService(BaseService):
    """Reads the sales dataset that uploads feed into."""

    async def list_ventas(
        self,
        *,
        cod_cliente: Optional[str] = None,
        anio: Optional[int] = None,
        mes: Optional[int] = None,
        marca: Optional[str] = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> list[Venta]:
        """List sales, optionally filtered.

        Args:
            cod_cliente: Client code (backend default when omitted).
            anio: Year filter.
            mes: Month filter (1-12).
            marca: Brand filter.
            limit: Maximum rows.
            offset: Rows to skip.

        Returns:
            Sale rows.

        Raises:
            MalformedResponseError: If the body is not a list of rows.
        """
        params = self._build_params(
            codCliente=cod_cliente,
            anio=anio,
            mes=mes,
            marca=marca,
            limit=limit,
            offset=offset,
        )
        data = await self._get(VENTAS_PATH, params=params, timeout=DEFAULT_RELOAD_TIMEOUT_SECONDS)
        if not isinstance(data, list):
            raise MalformedResponseError(f"expected a list of sales, got {type(data).__name__}")

        try:
            ventas = [Venta.model_validate(row) for row in data if isinstance(row, dict)]
        except PayloadValidationError as e:
            raise MalformedResponseError(f"unexpected sale row ({e.error_count()} errors)") from e

        logger.debug("Loaded %d sales (params=%s)", len(ventas), params)
        return ventas
