"""Sales dataset commands for selloutctl."""

from __future__ import annotations

import asyncio
from typing import Optional

import click

from selloutctl.cli.common import Context, global_options, handle_errors
from selloutctl.core.output import OutputFormat, print_output
from selloutctl.models.venta import Venta
from selloutctl.services.ventas import DEFAULT_LIMIT, VentaService

TABLE_COLUMNS = [
    "anio",
    "mes",
    "marca",
    "cod_barra",
    "descripcion",
    "pdv",
    "ciudad",
    "venta_unidad",
    "venta_dolares",
]


@click.group()
def ventas() -> None:
    """Browse the loaded sellout sales."""
    pass


@ventas.command("list")
@click.option("--anio", type=int, default=None, help="Year")
@click.option("--mes", type=click.IntRange(1, 12), default=None, help="Month (1-12)")
@click.option("--marca", default=None, help="Brand")
@click.option("--cod-cliente", default=None, help="Client code (defaults to the profile's)")
@click.option("--limit", type=int, default=DEFAULT_LIMIT, show_default=True, help="Maximum rows")
@global_options
@handle_errors
def ventas_list(
    ctx: Context,
    anio: Optional[int],
    mes: Optional[int],
    marca: Optional[str],
    cod_cliente: Optional[str],
    limit: int,
) -> None:
    """List loaded sales.

    Example:
        selloutctl ventas list --anio 2025 --mes 3
        selloutctl ventas list --marca ACME -o json
    """
    profile = ctx.get_profile()

    async def _fetch() -> list[Venta]:
        async with ctx.get_client() as client:
            return await VentaService(client).list_ventas(
                cod_cliente=cod_cliente or profile.cod_cliente,
                anio=anio,
                mes=mes,
                marca=marca,
                limit=limit,
            )

    rows = asyncio.run(_fetch())

    if ctx.output_format == OutputFormat.JSON:
        data = [v.to_dict() for v in rows]
    else:
        data = [v.to_row(TABLE_COLUMNS + ["id"]) for v in rows]

    print_output(
        data,
        format=ctx.output_format,
        columns=TABLE_COLUMNS,
        column_labels={
            "anio": "Year",
            "mes": "Month",
            "marca": "Brand",
            "cod_barra": "Barcode",
            "descripcion": "Description",
            "pdv": "Point of Sale",
            "ciudad": "City",
            "venta_unidad": "Units",
            "venta_dolares": "USD",
        },
        quiet=ctx.quiet,
        id_field="id",
    )
