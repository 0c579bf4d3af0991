# conversor/core/units.py
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from conversor.core.models import ConversionEdge, ConversionFn, ConversionResult


class DuplicateEdgeError(ValueError):
    """Mesma aresta (origem, destino) registrada duas vezes."""


def _mul(factor: float) -> ConversionFn:
    return lambda v: v * factor


def _div(factor: float) -> ConversionFn:
    return lambda v: v / factor


# --- Temperatura (afim, não cabe em fator simples) ---
def _celsius_to_fahrenheit(c):
    return (c * 9 / 5) + 32


def _fahrenheit_to_celsius(f):
    return (f - 32) * 5 / 9


def _celsius_to_kelvin(c):
    return c + 273.15


def _kelvin_to_celsius(k):
    return k - 273.15


def _fahrenheit_to_kelvin(f):
    return (f - 32) * 5 / 9 + 273.15


def _kelvin_to_fahrenheit(k):
    return (k - 273.15) * 9 / 5 + 32


# Unidades preferidas como pivô (uma por categoria)
BASE_UNITS = ("Metros", "Kilogramos", "Litros", "Celsius")

# Arestas diretas. Cada sentido é registrado explicitamente.
DEFAULT_EDGES: Tuple[Tuple[str, str, ConversionFn], ...] = (
    # Longitud - Base: Metros
    ("Metros", "Pies", _mul(3.28084)),
    ("Pies", "Metros", _div(3.28084)),
    ("Metros", "Yardas", _mul(1.09361)),
    ("Yardas", "Metros", _div(1.09361)),
    ("Metros", "Kilómetros", _div(1000.0)),
    ("Kilómetros", "Metros", _mul(1000.0)),
    ("Metros", "Centímetros", _mul(100.0)),
    ("Centímetros", "Metros", _div(100.0)),
    ("Metros", "Milímetros", _mul(1000.0)),
    ("Milímetros", "Metros", _div(1000.0)),
    ("Millas", "Metros", _mul(1609.34)),
    ("Metros", "Millas", _div(1609.34)),
    ("Pulgadas", "Metros", _mul(0.0254)),
    ("Metros", "Pulgadas", _div(0.0254)),
    ("Kilómetros", "Millas", _mul(0.621371)),
    ("Millas", "Kilómetros", _div(0.621371)),
    ("Centímetros", "Pulgadas", _div(2.54)),
    ("Pulgadas", "Centímetros", _mul(2.54)),
    ("Kilómetros", "Yardas", _mul(1093.61)),
    ("Yardas", "Kilómetros", _div(1093.61)),
    ("Milímetros", "Pulgadas", _div(25.4)),
    ("Pulgadas", "Milímetros", _mul(25.4)),

    # Peso - Base: Kilogramos
    ("Kilogramos", "Libras", _mul(2.20462)),
    ("Libras", "Kilogramos", _div(2.20462)),
    ("Kilogramos", "Gramos", _mul(1000.0)),
    ("Gramos", "Kilogramos", _div(1000.0)),
    ("Kilogramos", "Toneladas Métricas", _div(1000.0)),
    ("Toneladas Métricas", "Kilogramos", _mul(1000.0)),
    ("Onzas", "Kilogramos", _mul(0.0283495)),
    ("Kilogramos", "Onzas", _div(0.0283495)),
    ("Toneladas USA", "Kilogramos", _mul(907.185)),
    ("Kilogramos", "Toneladas USA", _div(907.185)),
    ("Gramos", "Onzas", _div(28.3495)),
    ("Onzas", "Gramos", _mul(28.3495)),
    ("Toneladas Métricas", "Toneladas USA", _mul(1.10231)),
    ("Toneladas USA", "Toneladas Métricas", _div(1.10231)),

    # Volumen - Base: Litros
    ("Litros", "Galones", _div(3.78541)),
    ("Galones", "Litros", _mul(3.78541)),
    ("Litros", "Pintas", _mul(2.11338)),
    ("Pintas", "Litros", _div(2.11338)),
    ("Litros", "Cuartos", _mul(1.05669)),
    ("Cuartos", "Litros", _div(1.05669)),
    ("Litros", "Mililitros", _mul(1000.0)),
    ("Mililitros", "Litros", _div(1000.0)),
    ("Onzas Líquidas", "Litros", _mul(0.0295735)),
    ("Litros", "Onzas Líquidas", _div(0.0295735)),
    ("Mililitros", "Onzas Líquidas", _div(29.5735)),
    ("Onzas Líquidas", "Mililitros", _mul(29.5735)),

    # Temperatura - Base: Celsius
    ("Celsius", "Fahrenheit", _celsius_to_fahrenheit),
    ("Fahrenheit", "Celsius", _fahrenheit_to_celsius),
    ("Celsius", "Kelvin", _celsius_to_kelvin),
    ("Kelvin", "Celsius", _kelvin_to_celsius),
    ("Fahrenheit", "Kelvin", _fahrenheit_to_kelvin),
    ("Kelvin", "Fahrenheit", _kelvin_to_fahrenheit),
)


class UnitConverter:
    """
    Resolve conversões entre unidades a partir de uma tabela de arestas diretas.

    Se não existe aresta (origem, destino), tenta um único pivô P com
    (origem, P) e (P, destino). Pivôs são testados com as unidades base
    primeiro e depois na ordem de registro. Não existe busca com dois ou
    mais pivôs.

    Caminho inexistente não é erro: convert() devolve None e
    can_convert() devolve False. Nome de unidade desconhecido cai no mesmo caso.
    """

    def __init__(self, edges: Optional[Iterable[Tuple[str, str, ConversionFn]]] = None,
                 base_units: Sequence[str] = BASE_UNITS):
        table: Dict[ConversionEdge, ConversionFn] = {}
        outgoing: Dict[str, List[str]] = {}

        for from_unit, to_unit, fn in (DEFAULT_EDGES if edges is None else edges):
            key = ConversionEdge(from_unit, to_unit)
            if key in table:
                raise DuplicateEdgeError(f"Conversion {from_unit} -> {to_unit} registered twice.")
            table[key] = fn
            outgoing.setdefault(from_unit, []).append(to_unit)

        # Reordena os candidatos a pivô: unidades base na frente, resto na ordem de registro
        rank = {unit: i for i, unit in enumerate(base_units)}
        for from_unit, targets in outgoing.items():
            targets.sort(key=lambda u: rank.get(u, len(rank)))

        self._table = MappingProxyType(table)
        self._outgoing = {k: tuple(v) for k, v in outgoing.items()}
        self._units = sorted({u for key in table for u in key})

    @property
    def edges(self) -> Mapping[ConversionEdge, ConversionFn]:
        return self._table

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, pair) -> bool:
        return isinstance(pair, tuple) and len(pair) == 2 and pair in self._table

    def find_path(self, from_unit: str, to_unit: str) -> Optional[Tuple[str, ...]]:
        if from_unit == to_unit:
            return (from_unit,)

        # 1. Direto
        if (from_unit, to_unit) in self._table:
            return (from_unit, to_unit)

        # 2. Um passo intermediário
        for pivot in self._outgoing.get(from_unit, ()):
            if (pivot, to_unit) in self._table:
                return (from_unit, pivot, to_unit)

        return None

    def _apply(self, path: Tuple[str, ...], value):
        for a, b in zip(path, path[1:]):
            value = self._table[(a, b)](value)
        return value

    def convert(self, value: float, from_unit: str, to_unit: str) -> Optional[float]:
        if from_unit == to_unit:
            return value

        path = self.find_path(from_unit, to_unit)
        if path is None:
            return None
        return self._apply(path, value)

    def can_convert(self, from_unit: str, to_unit: str) -> bool:
        return self.find_path(from_unit, to_unit) is not None

    def list_units(self) -> List[str]:
        return list(self._units)

    def describe(self, value: float, from_unit: str, to_unit: str) -> Optional[ConversionResult]:
        """Converte e devolve também a taxa unitária e o caminho usado (para a UI)."""
        path = self.find_path(from_unit, to_unit)
        if path is None:
            return None

        return ConversionResult(
            value=value,
            from_unit=from_unit,
            to_unit=to_unit,
            result=self._apply(path, value),
            unit_rate=self._apply(path, 1.0),
            path=path,
        )

    def convert_many(self, values, from_unit: str, to_unit: str) -> Optional[np.ndarray]:
        """Versão vetorizada de convert() (todas as funções da tabela são aritméticas)."""
        path = self.find_path(from_unit, to_unit)
        if path is None:
            return None
        return self._apply(path, np.asarray(values, dtype=float))


@lru_cache(maxsize=None)
def default_converter() -> UnitConverter:
    """Instância compartilhada com a tabela padrão (imutável, segura para leitura)."""
    return UnitConverter()
