# conversor/core/table.py
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from conversor.core.units import UnitConverter


class InvalidRangeError(ValueError):
    pass


# Cada linha vira um label na janela da tabela
MAX_STEPS = 1000


@dataclass
class ConversionTable:
    from_unit: str
    to_unit: str
    values: np.ndarray
    results: np.ndarray

    def rows(self) -> List[Tuple[float, float]]:
        return [(float(v), float(r)) for v, r in zip(self.values, self.results)]


def build_table(converter: UnitConverter, from_unit: str, to_unit: str,
                start: float = 1.0, stop: float = 10.0, steps: int = 10) -> Optional[ConversionTable]:
    """
    Tabela de equivalências (start..stop, inclusive) para o par escolhido.
    Devolve None se não houver caminho de conversão.
    """
    if steps < 1:
        raise InvalidRangeError(f"steps must be >= 1 (got {steps})")
    if steps > MAX_STEPS:
        raise InvalidRangeError(f"steps must be <= {MAX_STEPS} (got {steps})")

    values = np.linspace(start, stop, steps)
    results = converter.convert_many(values, from_unit, to_unit)
    if results is None:
        return None
    return ConversionTable(from_unit, to_unit, values, results)


def to_csv(table: ConversionTable, use_dot: bool = True) -> str:
    # Com vírgula decimal o separador de coluna vira ';' (padrão Excel BR/ES)
    col_sep = "," if use_dot else ";"
    lines = [f"{table.from_unit}{col_sep}{table.to_unit}"]

    for v, r in table.rows():
        v_str, r_str = f"{v:.6f}", f"{r:.6f}"
        if not use_dot:
            v_str = v_str.replace('.', ',')
            r_str = r_str.replace('.', ',')
        lines.append(f"{v_str}{col_sep}{r_str}")
    return "\n".join(lines) + "\n"


def export_csv(table: ConversionTable, file_path: str, use_dot: bool = True) -> None:
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(to_csv(table, use_dot))
