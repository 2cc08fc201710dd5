"""Sale row returned by the dataset read endpoint."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from .base import BaseModel


class Venta(BaseModel):
    """Summary row of a loaded sellout sale."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: int | None = None
    anio: int | None = None
    mes: int | None = None
    dia: int | None = None
    marca: str | None = None
    nombre_producto: str | None = Field(None, alias="nombreProducto")
    cod_barra: str | None = Field(None, alias="codBarra")
    codigo_sap: str | None = Field(None, alias="codigoSap")
    descripcion: str | None = None
    cod_pdv: str | None = Field(None, alias="codPdv")
    pdv: str | None = None
    ciudad: str | None = None
    stock_dolares: float | None = Field(None, alias="stockDolares")
    stock_unidades: float | None = Field(None, alias="stockUnidades")
    venta_dolares: float | None = Field(None, alias="ventaDolares")
    venta_unidad: float | None = Field(None, alias="ventaUnidad")
    cod_cliente: str | None = Field(None, alias="codCliente")
    nombre_cliente: str | None = Field(None, alias="nombreCliente")
