# conversor/core/presenter.py
"""
Lógica de exibição da tela principal, separada do Tk para poder ser testada.

A UI chama ConversionPresenter.present() a cada tecla ou troca de unidade e
só copia os textos do DisplayState para os labels.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from conversor.config import DECIMAL_SEPARATOR, DETAIL_DECIMALS, RESULT_DECIMALS
from conversor.core.units import UnitConverter

PLACEHOLDER_INVALID = "---"
MSG_UNAVAILABLE = "Conversión no disponible"
DETAIL_TEMPLATE = "Basado en conversión estándar · 1 {from_unit} = {rate} {to_unit}"


@dataclass
class DisplayState:
    result_text: str
    detail_text: str = ""
    available: bool = True


def parse_value(text: Optional[str]) -> Optional[float]:
    """Aceita '12.5' ou '12,5'. Devolve None para texto inválido ou não finito."""
    if text is None:
        return None
    cleaned = text.strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def format_number(value: float, places: int, decimal_sep: str = DECIMAL_SEPARATOR) -> str:
    text = f"{value:.{places}f}"
    if decimal_sep != ".":
        text = text.replace(".", decimal_sep)
    return text


def default_selection(units: Sequence[str]) -> Tuple[int, int]:
    """Índices (origem, destino) iniciais: destino diferente quando possível."""
    if len(units) > 1:
        return 0, 1
    return 0, 0


class ConversionPresenter:
    def __init__(self, converter: UnitConverter, decimal_sep: str = DECIMAL_SEPARATOR):
        self.converter = converter
        self.decimal_sep = decimal_sep

    def present(self, text: Optional[str], from_unit: Optional[str], to_unit: Optional[str]) -> DisplayState:
        if not text or not from_unit or not to_unit:
            return DisplayState(format_number(0.0, RESULT_DECIMALS, self.decimal_sep))

        value = parse_value(text)
        if value is None:
            return DisplayState(PLACEHOLDER_INVALID)

        res = self.converter.describe(value, from_unit, to_unit)
        if res is None:
            return DisplayState(PLACEHOLDER_INVALID, MSG_UNAVAILABLE, available=False)

        # Entrada finita pode estourar na conversão (ex: 1e306 km -> mm)
        if not math.isfinite(res.result):
            return DisplayState(PLACEHOLDER_INVALID)

        detail = DETAIL_TEMPLATE.format(
            from_unit=from_unit,
            rate=format_number(res.unit_rate, DETAIL_DECIMALS, self.decimal_sep),
            to_unit=to_unit,
        )
        return DisplayState(format_number(res.result, RESULT_DECIMALS, self.decimal_sep), detail)
