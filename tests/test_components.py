# ==============================================
# Tests for Plot and Report Components
# ==============================================

import pandas as pd
import pytest

from components.data_tables import create_uncertain_samples_section, uncertain_table_records
from components.embedding_plots import (
    create_class_count_chart,
    create_embedding_figure,
    ordered_labels,
)
from components.report_cards import build_summary
from components.som_plots import OTHER_KEY, cell_wedges, create_cell_shapes, create_som_figure
from utils.data_processing import prepare_embedding_frame, uncertain_samples
from utils.label_colors import ColorAssigner
from utils.som_normalizer import GridCell


@pytest.fixture
def colors():
    return ColorAssigner(["TROJAN", "WORM", "ADWARE"])


# ==============================================
# SOM Figures
# ==============================================

class TestCellWedges:
    """Tests for splitting cell proportions into pie wedges."""

    def test_top_labels_plus_other(self):
        wedges = cell_wedges({"A": 0.4, "B": 0.3, "C": 0.2, "D": 0.1}, top_k=2)

        assert [label for label, _ in wedges] == ["A", "B", OTHER_KEY]
        assert sum(fraction for _, fraction in wedges) == pytest.approx(1.0)
        assert dict(wedges)[OTHER_KEY] == pytest.approx(0.3)

    def test_without_other_wedge_renormalizes(self):
        wedges = cell_wedges({"A": 0.6, "B": 0.2, "C": 0.2}, top_k=2, show_other=False)

        assert dict(wedges) == pytest.approx({"A": 0.75, "B": 0.25})

    def test_zero_and_invalid_values_skipped(self):
        assert cell_wedges({"A": 1, "B": 0, "C": "x"}) == [("A", 1.0)]

    def test_empty(self):
        assert cell_wedges({}) == []


class TestSomFigure:
    """Tests for the pie-per-cell SOM figure."""

    def test_empty_grid(self, colors):
        fig = create_som_figure([], colors)

        assert fig.layout.title.text == "Empty SOM"
        assert len(fig.data) == 0

    def test_one_circle_and_wedge_per_label(self, colors):
        cell = GridCell(1, 2, {"TROJAN": 0.5, "WORM": 0.5})

        shapes = create_cell_shapes(cell, colors)

        assert [shape["type"] for shape in shapes] == ["circle", "path", "path"]
        assert shapes[1]["fillcolor"] == colors.color_for("TROJAN")

    def test_traces_and_test_point(self, colors):
        cells = [GridCell(0, 0, {"TROJAN": 1}), GridCell(0, 1, {"WORM": 0.7, "ADWARE": 0.3})]

        fig = create_som_figure(cells, colors, test_point=(0.5, 0.2))

        names = [trace.name for trace in fig.data]
        assert names[1:] == ["TROJAN", "WORM", "ADWARE", "test point"]
        assert fig.data[-1].marker.color == "black"
        assert len(fig.layout.shapes) == 2 + 3

    def test_rows_grow_downwards(self, colors):
        fig = create_som_figure([GridCell(3, 4, {"WORM": 1})], colors)

        low, high = fig.layout.yaxis.range
        assert low > high


# ==============================================
# Embedding Figures
# ==============================================

class TestEmbeddingFigure:
    """Tests for the t-SNE scatter and class counts."""

    def test_ordered_labels_follow_catalog(self):
        assert ordered_labels(["WORM", "X", "TROJAN", "WORM"], ["TROJAN", "ADWARE", "WORM"]) == \
            ["TROJAN", "WORM", "X"]

    def test_one_trace_per_label(self, colors):
        frame = prepare_embedding_frame([
            {"x": 0, "y": 0, "true_label": "WORM"},
            {"x": 1, "y": 1, "true_label": "TROJAN"},
            {"x": 2, "y": 2, "true_label": "WORM"},
            {"x": 3, "y": 3, "true_label": "UNLISTED"},
        ])

        fig = create_embedding_figure(frame, colors, colors.labels, test_point=(1, 2))

        assert [trace.name for trace in fig.data] == ["TROJAN", "WORM", "UNLISTED", "test point"]
        assert fig.data[1].marker.color == colors.color_for("WORM")
        assert len(fig.data[1].x) == 2

    def test_empty_frame(self, colors):
        fig = create_embedding_figure(prepare_embedding_frame([]), colors, colors.labels)

        assert len(fig.data) == 0

    def test_class_count_chart(self, colors):
        counts = pd.DataFrame({"label": ["WORM", "TROJAN"], "count": [3, 1]})

        fig = create_class_count_chart(counts, colors)

        assert list(fig.data[0].y) == [3, 1]


# ==============================================
# Report Summary
# ==============================================

class TestBuildSummary:
    """Tests for the JSON summary of an analyzed file."""

    def test_malware_verdict(self):
        scores = [{"label": "TROJAN.GENERIC", "score": 0.62}, {"label": "GOODWARE", "score": 0.16}]

        summary = build_summary("sample.exe", scores, 0.78)

        assert summary == {
            "filename": "sample.exe",
            "is_malware": True,
            "top1_family": "TROJAN.GENERIC",
            "apt30": {"probability": 0.78, "is_APT30": True},
        }

    def test_goodware_is_not_malware(self):
        summary = build_summary("ok.exe", [{"label": "GOODWARE", "score": 0.9}], 0.1)

        assert summary["is_malware"] is False
        assert summary["apt30"]["is_APT30"] is False

    def test_no_scores(self):
        summary = build_summary("x.exe", [], 0.5)

        assert summary["top1_family"] is None
        assert summary["is_malware"] is False
        assert summary["apt30"]["is_APT30"] is True


# ==============================================
# Uncertain Samples Table
# ==============================================

class TestUncertainSamplesTable:
    """Tests for the uncertain samples table rows and columns."""

    def test_rows_link_to_report(self):
        frame = prepare_embedding_frame([
            {"filename": "a.exe", "x": 0, "y": 0, "accuracy": 0.123456},
            {"filename": "b.exe", "x": 1, "y": 1, "accuracy": 0.9, "detail_url": "/report?f=b"},
        ])

        records = uncertain_table_records(uncertain_samples(frame))

        assert [r["report_link"] for r in records] == ["[Report](/report)", "[Report](/report?f=b)"]
        assert records[0]["accuracy"] == 0.1235

    def test_link_column_renders_markdown(self, colors):
        section = create_uncertain_samples_section(
            uncertain_samples(prepare_embedding_frame([{"x": 0, "y": 0}])), colors.labels)

        table = section.children[0]
        link_column = [c for c in table.columns if c["id"] == "report_link"]

        assert link_column == [{"name": "Details", "id": "report_link", "presentation": "markdown"}]
