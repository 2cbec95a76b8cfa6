"""
Tests for feature matrix containers and loaders.
"""

import numpy as np
import pandas as pd
import pytest

from snfclust.data_io import DataMatrix, check_aligned, load_matrix
from snfclust.errors import InvalidInputError


def test_data_matrix_validation():
    with pytest.raises(InvalidInputError):
        DataMatrix(np.arange(3.0))
    with pytest.raises(InvalidInputError):
        DataMatrix(np.zeros((2, 3)), sample_ids=("a",))
    with pytest.raises(InvalidInputError):
        DataMatrix(np.zeros((2, 3)), feature_names=("x", "y"))


def test_from_frame_keeps_labels():
    frame = pd.DataFrame({"g1": [1.0, 2.0], "g2": [3.0, 4.0]}, index=["p1", "p2"])
    matrix = DataMatrix.from_frame(frame, name="mRNA")
    assert matrix.sample_ids == ("p1", "p2")
    assert matrix.feature_names == ("g1", "g2")
    assert matrix.name == "mRNA"
    assert matrix.n_entities == 2


def test_load_csv(tmp_path):
    frame = pd.DataFrame({"g1": [1.0, 2.0, 3.0], "g2": [0.5, 0.1, 0.2]}, index=["a", "b", "c"])
    path = tmp_path / "methylation.csv"
    frame.to_csv(path)

    matrix = load_matrix(path)
    assert matrix.name == "methylation"
    assert matrix.sample_ids == ("a", "b", "c")
    np.testing.assert_allclose(matrix.values, frame.to_numpy())


def test_load_npy(tmp_path):
    path = tmp_path / "mirna.npy"
    np.save(path, np.arange(6.0).reshape(3, 2))
    matrix = load_matrix(path, name="miRNA")
    assert matrix.values.shape == (3, 2)
    assert matrix.name == "miRNA"


def test_load_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_matrix(tmp_path / "missing.csv")
    path = tmp_path / "data.parquet"
    path.write_text("")
    with pytest.raises(InvalidInputError):
        load_matrix(path)


def test_check_aligned():
    a = DataMatrix(np.zeros((3, 2)), sample_ids=("p1", "p2", "p3"))
    b = DataMatrix(np.ones((3, 5)), sample_ids=("p1", "p2", "p3"))
    assert check_aligned([a, b, np.zeros((3, 1))]) == 3

    shuffled = DataMatrix(np.ones((3, 5)), sample_ids=("p2", "p1", "p3"))
    with pytest.raises(InvalidInputError):
        check_aligned([a, shuffled])
    with pytest.raises(InvalidInputError):
        check_aligned([a, np.zeros((4, 2))])
    with pytest.raises(InvalidInputError):
        check_aligned([])


def test_check_aligned_rejects_missing_values():
    values = np.ones((3, 2))
    values[1, 1] = np.nan
    with pytest.raises(InvalidInputError):
        check_aligned([values])
