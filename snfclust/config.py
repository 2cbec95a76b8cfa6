"""
Run parameters for affinity construction and network fusion.

The numerical routines take these values as explicit keyword arguments;
``SNFConfig`` only bundles them so a run can be described, stored next to
its results and reloaded.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .errors import InvalidInputError


PathLike = Union[str, Path]


@dataclass(frozen=True)
class SNFConfig:
    """
    Parameters consumed by the affinity builder and the fusion loop.

    Attributes
    ----------
    mu:
        Bandwidth of the scaled exponential kernel.
    K:
        Neighbourhood size (including the entity itself).
    t:
        Number of fusion sweeps.
    tol:
        Optional Frobenius-norm tolerance for stopping the fusion early.
    """

    mu: float = 0.5
    K: int = 20
    t: int = 20
    tol: Optional[float] = None

    def __post_init__(self) -> None:
        if self.mu <= 0:
            raise InvalidInputError("mu must be strictly positive.")
        if self.K < 1:
            raise InvalidInputError("K must be at least 1.")
        if self.t < 0:
            raise InvalidInputError("t must be non-negative.")
        if self.tol is not None and self.tol <= 0:
            raise InvalidInputError("tol must be strictly positive when given.")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "SNFConfig":
        unknown = set(values).difference(cls.__dataclass_fields__)
        if unknown:
            raise InvalidInputError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**dict(values))

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path: PathLike) -> SNFConfig:
    """Read an ``SNFConfig`` from a JSON file."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return SNFConfig.from_mapping(json.loads(path.read_text()))


def save_config(config: SNFConfig, path: PathLike) -> Path:
    """Write ``config`` as JSON and return the path written."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=2))
    return path
