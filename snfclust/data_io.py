"""
Feature matrix container and loaders for per-source omics matrices.

Cleaning, deduplication and sample harmonisation happen upstream. The
helpers here only read already prepared matrices and check that several
sources describe the same entities in the same order.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .errors import InvalidInputError


PathLike = Union[str, Path]
MatrixLike = Union["DataMatrix", np.ndarray, pd.DataFrame]


@dataclass(frozen=True)
class DataMatrix:
    """
    Container for one source's feature matrix and optional axis labels.

    Attributes
    ----------
    values:
        Two-dimensional NumPy array with shape (n_entities, n_features).
    sample_ids:
        Optional entity identifiers aligned with the rows.
    feature_names:
        Optional feature identifiers aligned with the columns.
    name:
        Optional label for the source (e.g. ``"mRNA"``).
    """

    values: np.ndarray
    sample_ids: Optional[Tuple[str, ...]] = None
    feature_names: Optional[Tuple[str, ...]] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.values.ndim != 2:
            raise InvalidInputError("DataMatrix.values must be two-dimensional.")
        if self.sample_ids is not None and len(self.sample_ids) != self.values.shape[0]:
            raise InvalidInputError("sample_ids length must match number of rows.")
        if self.feature_names is not None and len(self.feature_names) != self.values.shape[1]:
            raise InvalidInputError("feature_names length must match number of columns.")

    @property
    def n_entities(self) -> int:
        return self.values.shape[0]

    def as_numpy(self) -> np.ndarray:
        """Return the underlying numeric matrix."""
        return self.values

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, *, name: Optional[str] = None) -> "DataMatrix":
        """Wrap a DataFrame indexed by entity with one column per feature."""

        values = frame.apply(pd.to_numeric, errors="coerce").to_numpy(dtype=np.float64)
        return cls(
            values=values,
            sample_ids=tuple(str(idx) for idx in frame.index),
            feature_names=tuple(str(col) for col in frame.columns),
            name=name,
        )


def as_feature_array(data: MatrixLike) -> np.ndarray:
    """
    Return ``data`` as a finite float64 array of shape (n_entities, n_features).
    """

    if isinstance(data, DataMatrix):
        values = data.values
    elif isinstance(data, pd.DataFrame):
        values = data.to_numpy()
    else:
        values = data
    array = np.asarray(values, dtype=np.float64)
    if array.ndim != 2:
        raise InvalidInputError(f"Feature matrix must be 2-D, got shape {array.shape}.")
    if not np.all(np.isfinite(array)):
        raise InvalidInputError("Feature matrix contains missing or non-finite values.")
    return array


def check_aligned(sources: Sequence[MatrixLike]) -> int:
    """
    Verify that all sources share the entity count and, when known, the ids.

    Returns
    -------
    int
        The shared number of entities.
    """

    if len(sources) == 0:
        raise InvalidInputError("At least one source is required.")

    counts = [as_feature_array(source).shape[0] for source in sources]
    if len(set(counts)) != 1:
        raise InvalidInputError(f"Sources disagree on the number of entities: {counts}.")

    reference_ids = None
    for source in sources:
        ids = _sample_ids(source)
        if ids is None:
            continue
        if reference_ids is None:
            reference_ids = ids
        elif ids != reference_ids:
            raise InvalidInputError("Sources list entities in a different order.")
    return counts[0]


def load_matrix(
    path: PathLike,
    *,
    name: Optional[str] = None,
    index_col: Optional[int] = 0,
    dtype: np.dtype = np.float64,
) -> DataMatrix:
    """
    Load a feature matrix from ``.csv``, ``.tsv`` or ``.npy`` files.

    Parameters
    ----------
    path:
        Path to the file on disk. Delimited files are read with a header row;
        rows are entities and columns features.
    name:
        Source label stored on the returned matrix. Defaults to the file stem.
    index_col:
        Column holding the entity identifiers in delimited files, or ``None``
        when the file has no identifier column.
    dtype:
        Target numeric dtype.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    name = name if name is not None else path.stem

    suffix = path.suffix.lower()
    if suffix in (".csv", ".tsv"):
        sep = "\t" if suffix == ".tsv" else ","
        frame = pd.read_csv(path, sep=sep, index_col=index_col)
        matrix = DataMatrix.from_frame(frame, name=name)
        return DataMatrix(
            values=matrix.values.astype(dtype, copy=False),
            sample_ids=matrix.sample_ids,
            feature_names=matrix.feature_names,
            name=name,
        )

    if suffix == ".npy":
        array = np.atleast_2d(np.load(path, allow_pickle=False)).astype(dtype, copy=False)
        return DataMatrix(values=array, name=name)

    raise InvalidInputError(f"Unsupported file extension: {path.suffix}")


def _sample_ids(source: MatrixLike) -> Optional[Tuple[str, ...]]:
    if isinstance(source, DataMatrix):
        return source.sample_ids
    if isinstance(source, pd.DataFrame):
        return tuple(str(idx) for idx in source.index)
    return None
