from typing import Dict


def params_from_path(path: str) -> Dict[str, str]:
    """Read ``key/value/key/value`` segments into a dict.

    A trailing key without a value is ignored; later duplicates win.
    """
    parts = path.split("/")
    return dict(zip(parts[0::2], parts[1::2]))
