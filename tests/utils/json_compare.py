from typing import Dict, Set

VOLATILE_KEYS = {"id", "created_at", "updated_at", "last_login_at"}


def exclude_keys(data: Dict, keys: Set[str] = VOLATILE_KEYS) -> Dict:
    return {k: v for k, v in data.items() if k not in keys}
