"""Identifier generation for tasks, contexts and views."""

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


def generate_id(prefix: str) -> str:
    """Generate a collision-resistant identifier.

    Format is `{prefix}_{epoch_millis}_{random base36}`, e.g.
    `task_1718000000000_k3j9x0q2a`.

    Args:
        prefix: Entity kind (`task`, `context`, `view`)

    Returns:
        New identifier string
    """
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{prefix}_{millis}_{suffix}"
