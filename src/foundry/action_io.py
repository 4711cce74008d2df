"""GitHub Actions workflow I/O: inputs, outputs and failure annotations."""

from __future__ import annotations

import os
import sys
import uuid


def get_input(name: str) -> str:
    """Read action input *name* from ``INPUT_<NAME>``, trimmed. Missing inputs are ``""``."""
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    return os.environ.get(key, "").strip()


def to_bool(value: str | None) -> bool:
    """Coerce an action input string to a boolean: only ``"true"`` is true."""
    return (value or "").strip().lower() == "true"


def set_output(name: str, value: str) -> None:
    """Publish a step output via ``$GITHUB_OUTPUT``, or stdout outside Actions."""
    output_file = os.environ.get("GITHUB_OUTPUT")
    if not output_file:
        print(f"{name}={value}")
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(output_file, "a", encoding="utf-8") as fh:
        fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def set_failed(message: str) -> None:
    """Emit an error annotation for the workflow run."""
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    print(f"::error::{escaped}", file=sys.stdout, flush=True)
