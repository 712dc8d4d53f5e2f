"""Load a GenerateRequest from a YAML or JSON file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from genbridge.core.interface.errors import RequestFileError
from genbridge.core.interface.models import GenerateRequest


class RequestLoader:
    """Load and validate a request file into a :class:`GenerateRequest`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> GenerateRequest:
        """Read the file, interpolate env vars, and validate.

        JSON is valid YAML, so both formats go through ``yaml.safe_load``.

        Raises:
            RequestFileError: On read, parse or validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RequestFileError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise RequestFileError(f"YAML parse error: {exc}") from exc

        if not isinstance(data, dict):
            raise RequestFileError("Request file must contain a mapping")

        try:
            request = GenerateRequest.model_validate(data)
        except ValidationError as exc:
            raise RequestFileError(str(exc)) from exc
        return request
