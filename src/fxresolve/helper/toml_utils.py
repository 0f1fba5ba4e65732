from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import tomli
import tomli_w


def load_toml_file(path: str | Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomli.load(f)


def load_toml_text(text: str) -> dict[str, Any]:
    return tomli.loads(text)


def _drop_none(value: Any) -> Any:
    # TOML has no null
    if isinstance(value, Mapping):
        return {str(k): _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_drop_none(v) for v in value if v is not None]
    return value


def dump_toml_to_str(data: Mapping[str, Any], indent: int = 2) -> str:
    return tomli_w.dumps(_drop_none(data), indent=indent)
