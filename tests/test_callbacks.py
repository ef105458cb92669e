# ==============================================
# Tests for Page Callback Helpers
# ==============================================

import numpy as np
import pytest

from callbacks.evaluation_callbacks import frame_from_records, range_summary, relabel_records
from callbacks.home_callbacks import enqueue_uploads
from callbacks.report_callbacks import roll_query_points, step_index
from utils.data_processing import points_from_frame, prepare_embedding_frame
from utils.knn import UNKNOWN_LABEL
from utils.som_normalizer import GridCell


@pytest.fixture
def embedding_df():
    return prepare_embedding_frame([
        {"filename": "a.exe", "x": 0, "y": 0, "true_label": "A", "accuracy": 0.2},
        {"filename": "b.exe", "x": 1, "y": 1, "true_label": "A", "accuracy": 0.5},
        {"filename": "c.exe", "x": 2, "y": 0, "true_label": "B", "accuracy": 0.9},
    ])


# ==============================================
# Report Page
# ==============================================

class TestRollQueryPoints:
    """Tests for generating and classifying test points."""

    def test_one_query_per_som(self, embedding_df):
        grids = [
            [GridCell(0, 0, {"A": 1}), GridCell(2, 2, {"B": 1})],
            [GridCell(0, 0, {"C": 1})],
        ]

        queries = roll_query_points(grids, embedding_df, points_from_frame(embedding_df),
                                    np.random.default_rng(1), grid_k=5, point_k=7)

        assert len(queries["som"]) == 2
        assert queries["som"][0]["label"] in {"A", "B"}
        assert queries["som"][1]["label"] == "C"
        assert 0 <= queries["som"][0]["x"] <= 2
        assert queries["scatter"]["label"] == "A"

    def test_empty_inputs(self, embedding_df):
        empty = embedding_df.iloc[0:0]

        queries = roll_query_points([[]], empty, [], np.random.default_rng(1), 5, 7)

        assert queries["som"][0]["label"] == UNKNOWN_LABEL
        assert queries["scatter"] is None

    def test_seeded_rolls_repeat(self, embedding_df):
        grids = [[GridCell(0, 0, {"A": 1}), GridCell(3, 3, {"B": 1})]]
        points = points_from_frame(embedding_df)

        first = roll_query_points(grids, embedding_df, points, np.random.default_rng(4), 5, 7)
        second = roll_query_points(grids, embedding_df, points, np.random.default_rng(4), 5, 7)

        assert first == second

    @pytest.mark.parametrize("index, step, count, expected", [
        (0, 1, 2, 1),
        (1, 1, 2, 0),
        (0, -1, 2, 1),
        (None, 1, 3, 1),
        (5, 0, 2, 1),
        (0, 1, 0, 0),
    ])
    def test_step_index_wraps(self, index, step, count, expected):
        assert step_index(index, step, count) == expected


# ==============================================
# Evaluation Page
# ==============================================

class TestEvaluationHelpers:
    """Tests for the evaluation page helpers."""

    def test_range_summary(self):
        assert range_summary(25, 200) == "25 / 200 samples (12%)"
        assert range_summary(0, 0) == "0 / 0 samples (0%)"

    def test_relabel_records(self, embedding_df):
        records = embedding_df.to_dict("records")

        updated = relabel_records(records, records[0]["key"], "B")

        assert updated[0]["true_label"] == "B"
        assert updated[0]["label"] == "B"
        assert updated[1] == records[1]
        assert records[0]["true_label"] == "A"

    def test_frame_from_empty_store(self):
        assert frame_from_records(None).empty


# ==============================================
# Home Page
# ==============================================

class TestEnqueueUploads:
    """Tests for queueing uploaded files."""

    def test_accepted_files_appended(self):
        existing = [{"id": 1, "filename": "old.exe", "predicted_label": "A"}]

        rows, notice = enqueue_uploads(["new.exe", "desktop.ini", "readme.md"], existing,
                                       ["A"], np.random.default_rng(0))

        assert rows[1] == {"id": 2, "filename": "new.exe", "predicted_label": "A"}
        assert notice == "Queued 1 file(s). Ignored 2 file(s)."
        assert len(existing) == 1

    def test_single_filename_string(self):
        rows, _ = enqueue_uploads("one.exe", None, ["A"], np.random.default_rng(0))

        assert [row["filename"] for row in rows] == ["one.exe"]

    def test_nothing_accepted(self):
        rows, notice = enqueue_uploads(["Thumbs.db"], [], ["A"], np.random.default_rng(0))

        assert rows == []
        assert notice.startswith("No files to process")
