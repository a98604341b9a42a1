# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Load constraint bindings from YAML or JSON files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import yaml

from ..exceptions import ConfigurationError
from .bundle import ConstraintBindings

logger = logging.getLogger(__name__)


def load_bindings_file(path: Union[str, Path]) -> ConstraintBindings:
    """Read a bindings file. JSON is accepted since it is a subset of YAML."""

    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Cannot read constraint bindings file %s: %s", file_path, exc)
        raise ConfigurationError(f"Cannot read constraint bindings file {file_path}: {exc}") from exc

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        logger.error("Malformed constraint bindings file %s", file_path)
        raise ConfigurationError(f"Malformed constraint bindings file {file_path}: {exc}") from exc

    if raw is None:
        raw = {}

    bindings = ConstraintBindings(raw, source=str(file_path))
    logger.info(
        "Loaded constraint bindings for %d schema coordinate(s) from %s",
        len(bindings.by_coordinate),
        file_path,
    )
    return bindings


__all__ = ["load_bindings_file"]
