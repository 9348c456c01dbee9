"""Tests for vector file loading, dataset utils and neighbor files."""

import numpy as np
import pytest

from knndata.datasets.loader import load_vector_sets, load_vectors, write_vectors
from knndata.datasets.neighbors import NeighborWriter, read_neighbors
from knndata.datasets.utils import check_vector_sets, dataset_stats
from knndata.errors import DataFormatError


@pytest.fixture
def vector_file(tmp_path):
    rng = np.random.default_rng(42)
    X = rng.standard_normal((20, 3))
    path = write_vectors(tmp_path / "reference.pts", X)
    return path, X


class TestLoadVectors:
    def test_load_written_file(self, vector_file):
        path, X = vector_file
        loaded = load_vectors(path, 3)
        assert loaded.shape == (20, 3)
        assert loaded.dtype == np.float64
        np.testing.assert_array_equal(loaded, X)

    def test_raw_native_layout(self, tmp_path):
        """The file is a plain dump of native doubles, no header."""
        path = tmp_path / "raw.pts"
        path.write_bytes(np.array([1.0, 2.0, 3.0, 4.0]).tobytes())
        loaded = load_vectors(path, 2)
        np.testing.assert_array_equal(loaded, [[1.0, 2.0], [3.0, 4.0]])
        assert path.stat().st_size == 4 * 8

    def test_read_only(self, vector_file):
        path, _ = vector_file
        loaded = load_vectors(path, 3)
        assert not loaded.flags.writeable
        assert loaded.flags.c_contiguous

    def test_trailing_partial_record(self, vector_file):
        path, _ = vector_file
        with open(path, "ab") as f:
            f.write(b"\x00" * 5)
        with pytest.raises(DataFormatError, match="not a multiple"):
            load_vectors(path, 3)

    def test_wrong_dimension(self, vector_file):
        """20 * 3 doubles do not split into records of 7."""
        path, _ = vector_file
        with pytest.raises(DataFormatError):
            load_vectors(path, 7)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataFormatError, match="Cannot read"):
            load_vectors(tmp_path / "nope.pts", 3)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.pts"
        path.write_bytes(b"")
        loaded = load_vectors(path, 3)
        assert loaded.shape == (0, 3)

    @pytest.mark.parametrize("dim", [0, -2, 1.5])
    def test_invalid_dimension(self, vector_file, dim):
        path, _ = vector_file
        with pytest.raises(DataFormatError, match="positive integer"):
            load_vectors(path, dim)

    def test_write_rejects_1d(self, tmp_path):
        with pytest.raises(ValueError, match="2-D"):
            write_vectors(tmp_path / "x.pts", np.zeros(4))


class TestLoadVectorSets:
    def test_self_comparison(self, vector_file):
        path, _ = vector_file
        reference, fitting = load_vector_sets(path, 3)
        assert fitting is reference

    def test_same_path_given(self, vector_file):
        path, _ = vector_file
        reference, fitting = load_vector_sets(path, 3, str(path))
        assert fitting is reference

    def test_separate_fitting_file(self, vector_file, tmp_path):
        path, _ = vector_file
        Y = np.ones((4, 3))
        fit_path = write_vectors(tmp_path / "fit.pts", Y)
        reference, fitting = load_vector_sets(path, 3, fit_path)
        assert reference.shape == (20, 3)
        np.testing.assert_array_equal(fitting, Y)

    def test_empty_reference(self, tmp_path):
        path = tmp_path / "empty.pts"
        path.write_bytes(b"")
        with pytest.raises(DataFormatError, match="no vectors"):
            load_vector_sets(path, 3)

    def test_bad_fitting_file(self, vector_file, tmp_path):
        path, _ = vector_file
        bad = tmp_path / "bad.pts"
        bad.write_bytes(b"\x01" * 12)
        with pytest.raises(DataFormatError):
            load_vector_sets(path, 3, bad)


class TestDatasetUtils:
    def test_dataset_stats(self):
        X = np.random.randn(100, 10)
        stats = dataset_stats(X)
        assert stats["n"] == 100
        assert stats["D"] == 10
        assert stats["mean_norm"] > 0
        assert stats["min_norm"] <= stats["mean_norm"] <= stats["max_norm"]

    def test_dataset_stats_empty(self):
        stats = dataset_stats(np.zeros((0, 4)))
        assert stats["n"] == 0
        assert stats["mean_norm"] == 0.0

    def test_dimension_mismatch(self):
        with pytest.raises(DataFormatError, match="Dimension mismatch"):
            check_vector_sets(np.zeros((2, 3)), np.zeros((2, 4)))

    def test_empty_reference(self):
        with pytest.raises(DataFormatError):
            check_vector_sets(np.zeros((2, 3)), np.zeros((0, 3)))

    def test_empty_fitting_is_fine(self):
        check_vector_sets(np.zeros((0, 3)), np.zeros((2, 3)))


class TestNeighborFiles:
    def test_write_and_read(self, tmp_path):
        d_path, i_path = tmp_path / "d.dat", tmp_path / "i.dat"
        with NeighborWriter(d_path, i_path, k=2) as writer:
            writer.write(np.array([1.0, 2.0]), np.array([3, 4]))
            writer.write(np.array([0.5, 0.5]), np.array([0, 1]))
            assert writer.records == 2

        assert d_path.stat().st_size == 2 * 2 * 8
        assert i_path.stat().st_size == 2 * 2 * np.dtype(np.intc).itemsize

        distances, indices = read_neighbors(d_path, i_path, 2)
        np.testing.assert_array_equal(distances, [[1.0, 2.0], [0.5, 0.5]])
        np.testing.assert_array_equal(indices, [[3, 4], [0, 1]])
        assert indices.dtype == np.intc

    def test_truncates_existing_files(self, tmp_path):
        d_path, i_path = tmp_path / "d.dat", tmp_path / "i.dat"
        d_path.write_bytes(b"x" * 100)
        i_path.write_bytes(b"x" * 100)
        with NeighborWriter(d_path, i_path, k=1) as writer:
            writer.write(np.array([1.0]), np.array([0]))
        assert d_path.stat().st_size == 8

    def test_wrong_width(self, tmp_path):
        with NeighborWriter(tmp_path / "d.dat", tmp_path / "i.dat", k=3) as writer:
            with pytest.raises(ValueError, match="width 3"):
                writer.write(np.array([1.0, 2.0]), np.array([0, 1]))

    def test_write_when_closed(self, tmp_path):
        writer = NeighborWriter(tmp_path / "d.dat", tmp_path / "i.dat", k=1)
        with pytest.raises(RuntimeError, match="not open"):
            writer.write(np.array([1.0]), np.array([0]))

    def test_records_kept_on_error(self, tmp_path):
        d_path, i_path = tmp_path / "d.dat", tmp_path / "i.dat"
        with pytest.raises(KeyError):
            with NeighborWriter(d_path, i_path, k=1) as writer:
                writer.write(np.array([1.0]), np.array([0]))
                raise KeyError("boom")
        distances, indices = read_neighbors(d_path, i_path, 1)
        assert distances.shape == (1, 1)

    def test_zero_width(self, tmp_path):
        d_path, i_path = tmp_path / "d.dat", tmp_path / "i.dat"
        with NeighborWriter(d_path, i_path, k=0) as writer:
            writer.write(np.empty(0), np.empty(0, dtype=np.intc))
        assert d_path.stat().st_size == 0
        distances, indices = read_neighbors(d_path, i_path, 0)
        assert distances.size == 0 and indices.size == 0

    def test_read_record_count_mismatch(self, tmp_path):
        d_path, i_path = tmp_path / "d.dat", tmp_path / "i.dat"
        d_path.write_bytes(np.zeros(4).tobytes())
        i_path.write_bytes(np.zeros(2, dtype=np.intc).tobytes())
        with pytest.raises(DataFormatError, match="records"):
            read_neighbors(d_path, i_path, 2)

    def test_read_partial_record(self, tmp_path):
        d_path, i_path = tmp_path / "d.dat", tmp_path / "i.dat"
        d_path.write_bytes(np.zeros(3).tobytes())
        i_path.write_bytes(np.zeros(3, dtype=np.intc).tobytes())
        with pytest.raises(DataFormatError, match="whole records"):
            read_neighbors(d_path, i_path, 2)

    def test_read_missing(self, tmp_path):
        with pytest.raises(DataFormatError):
            read_neighbors(tmp_path / "d.dat", tmp_path / "i.dat", 2)
