"""Helper utilities for launching a text editor."""

from __future__ import annotations

import os
import shlex
import subprocess
import tempfile
from typing import Optional

from .config import get_settings
from .errors import EditorError


def launch_editor(initial_text: str, suffix: str = ".md", editor: Optional[str] = None) -> str:
    """Open the user's preferred editor and return the edited text."""

    command = editor or get_settings().editor
    if not command:
        raise EditorError("No editor available. Set the EDITOR environment variable.")

    with tempfile.NamedTemporaryFile("w+", suffix=suffix, delete=False, encoding="utf-8") as tmp:
        tmp.write(initial_text)
        tmp_path = tmp.name

    try:
        try:
            result = subprocess.run([*shlex.split(command), tmp_path], check=False)
        except OSError as exc:
            raise EditorError(f"Failed to open editor '{command}': {exc}") from exc
        if result.returncode != 0:
            raise EditorError(f"Editor exited with non-zero status ({result.returncode})")
        with open(tmp_path, "r", encoding="utf-8") as handle:
            return handle.read()
    finally:
        try:
            os.remove(tmp_path)
        except OSError:
            pass


__all__ = ["launch_editor"]
