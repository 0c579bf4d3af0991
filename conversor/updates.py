# conversor/updates.py
from typing import Optional, Tuple

import requests
from packaging import version

from conversor.config import CURRENT_VERSION, RELEASE_API_URL


def fetch_latest_release(url: str = RELEASE_API_URL, timeout: float = 5) -> Optional[Tuple[str, str]]:
    """Consulta a API de releases. Devolve (tag sem 'v', url da página) ou None."""
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        print(f"Update check failed: {e}")
        return None

    if response.status_code != 200:
        print(f"Update check failed: HTTP {response.status_code}")
        return None

    try:
        data = response.json()
        latest_tag = data['tag_name'].strip().removeprefix('v')
        return latest_tag, data['html_url']
    except (ValueError, KeyError, AttributeError) as e:
        print(f"Update check failed: unexpected payload ({e})")
        return None


def is_newer(latest: str, current: str = CURRENT_VERSION) -> bool:
    try:
        return version.parse(latest) > version.parse(current)
    except version.InvalidVersion:
        return False
