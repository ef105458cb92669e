# ==============================================
# Tests for the Upload Queue
# ==============================================

import numpy as np
import pytest

from utils.upload_queue import (
    UNKNOWN_PREDICTION,
    accept_uploads,
    build_queue_rows,
    is_system_noise,
    random_prediction,
)


class TestAcceptUploads:
    """Tests for filtering dropped files."""

    def test_only_executables_kept(self):
        names = ["a.exe", "notes.txt", "B.EXE", "archive.exe.zip", "c.exe"]

        assert accept_uploads(names) == ["a.exe", "B.EXE", "c.exe"]

    @pytest.mark.parametrize("name", ["desktop.ini", ".DS_Store", "Thumbs.db"])
    def test_system_noise(self, name):
        assert is_system_noise(name)
        assert accept_uploads([name]) == []

    def test_empty_and_missing(self):
        assert accept_uploads(None) == []
        assert accept_uploads(["", None, "x.exe"]) == ["x.exe"]


class TestQueueRows:
    """Tests for simulated predictions and queue rows."""

    def test_prediction_comes_from_catalog(self):
        rng = np.random.default_rng(0)
        labels = ["A", "B", "C"]

        assert all(random_prediction(labels, rng) in labels for _ in range(20))

    def test_empty_catalog_gives_unknown(self):
        assert random_prediction([], np.random.default_rng(0)) == UNKNOWN_PREDICTION

    def test_rows_numbered_from_start_id(self):
        rows = build_queue_rows(["a.exe", "b.exe"], ["A"], np.random.default_rng(1), start_id=4)

        assert rows == [
            {"id": 4, "filename": "a.exe", "predicted_label": "A"},
            {"id": 5, "filename": "b.exe", "predicted_label": "A"},
        ]

    def test_seeded_rows_repeat(self):
        labels = ["A", "B", "C", "D"]

        first = build_queue_rows(["a.exe", "b.exe", "c.exe"], labels, np.random.default_rng(9))
        second = build_queue_rows(["a.exe", "b.exe", "c.exe"], labels, np.random.default_rng(9))

        assert first == second
