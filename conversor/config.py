# conversor/config.py
import os
import sys

# Esta variável será atualizada pelo seu script release.py
CURRENT_VERSION = "1.2.0"

APP_TITLE = "Conversor de Medidas"
RELEASE_API_URL = "https://api.github.com/repos/chema/ConversorMedidas/releases/latest"

# Agrupamento de unidades por categoria (só para a UI, o conversor ignora categorias)
UNITS_BY_CATEGORY = {
    "Longitud": ("Metros", "Pies", "Kilómetros", "Millas", "Yardas", "Centímetros", "Pulgadas", "Milímetros"),
    "Peso": ("Kilogramos", "Libras", "Gramos", "Onzas", "Toneladas Métricas", "Toneladas USA"),
    "Volumen": ("Litros", "Galones", "Mililitros", "Onzas Líquidas", "Pintas", "Cuartos"),
    "Temperatura": ("Celsius", "Fahrenheit", "Kelvin"),
}
DEFAULT_CATEGORY = "Longitud"

# Formatação de exibição
RESULT_DECIMALS = 2
DETAIL_DECIMALS = 4
DECIMAL_SEPARATOR = ","

def resource_path(relative_path: str) -> str:
    """Obtém o caminho absoluto para recursos (funciona no PyInstaller)."""
    base_path = getattr(sys, "_MEIPASS", os.path.abspath("."))
    return os.path.join(base_path, relative_path)
