# conversor/core/models.py
from dataclasses import dataclass
from typing import Callable, NamedTuple, Tuple

ConversionFn = Callable[[float], float]


class ConversionEdge(NamedTuple):
    """Chave direcional da tabela: (origem, destino)."""
    from_unit: str
    to_unit: str


@dataclass(frozen=True)
class ConversionResult:
    value: float
    from_unit: str
    to_unit: str
    result: float
    unit_rate: float  # 1 <from_unit> em <to_unit>
    path: Tuple[str, ...] = ()

    @property
    def pivot(self):
        # Só existe pivô quando a conversão precisou de dois passos
        if len(self.path) == 3:
            return self.path[1]
        return None
