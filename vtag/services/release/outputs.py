"""GitHub Actions step outputs.

Replaces the deprecated ``::set-output`` command: values are appended to the
file named by ``$GITHUB_OUTPUT`` so later steps can read
``steps.<id>.outputs.version``.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from uuid import uuid4

GITHUB_OUTPUT_ENV = "GITHUB_OUTPUT"


def format_output(key: str, value: str) -> str:
    if "\n" not in value:
        return f"{key}={value}\n"
    delimiter = f"VTAG_{uuid4().hex}"
    return f"{key}<<{delimiter}\n{value}\n{delimiter}\n"


def write_step_outputs(
    values: Mapping[str, str | None],
    *,
    environ: Mapping[str, str],
) -> Path | None:
    """Append ``values`` (skipping None) to $GITHUB_OUTPUT.

    Returns:
        The output file written to, or None outside of GitHub Actions.

    Raises:
        OSError: If the output file cannot be written.
    """
    target = environ.get(GITHUB_OUTPUT_ENV, "").strip()
    if not target:
        return None

    path = Path(target)
    with path.open("a", encoding="utf-8") as handle:
        for key, value in values.items():
            if value is None:
                continue
            handle.write(format_output(key, value))
    return path
