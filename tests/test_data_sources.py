# ==============================================
# Tests for Dashboard Data Sources
# ==============================================

import json

import pytest
import requests

from content import data_sources
from content.data_sources import load_sources, som_title
from utils.som_normalizer import GridCell


class FakeResponse:
    def __init__(self, body, status_code=200):
        self.text = json.dumps(body)
        self.status_code = status_code
        self.ok = 200 <= status_code < 300


LABELS_URL = "http://data/labels.json"
POINTS_URL = "http://data/points.json"
SOM_A_URL = "http://data/som_a.json"
SOM_B_URL = "http://data/som_b.json"


@pytest.fixture
def routes(monkeypatch):
    monkeypatch.setattr(data_sources, "IS_LOCAL", True)
    table = {
        LABELS_URL: FakeResponse({"labels": ["TROJAN", "WORM"]}),
        POINTS_URL: FakeResponse([{"x": 0, "y": 1, "true_label": "WORM"}]),
        SOM_A_URL: FakeResponse({"title": "From document",
                                 "cells": [{"row": 0, "col": 1, "proportions": {"WORM": 1}}]}),
        SOM_B_URL: FakeResponse({}, status_code=500),
    }

    def fake_get(url, timeout=None):
        return table[url]

    monkeypatch.setattr(requests, "get", fake_get)
    return table


def load(titles=None):
    return load_sources(LABELS_URL, POINTS_URL, [SOM_A_URL, SOM_B_URL],
                        [] if titles is None else titles)


class TestLoadSources:
    """Tests for fetching and normalizing every dashboard document."""

    def test_documents_are_parsed(self, routes):
        sources = load()

        assert sources.labels == ["TROJAN", "WORM"]
        assert sources.embedding_records == [{"x": 0, "y": 1, "true_label": "WORM"}]
        assert sources.som_grids == [[GridCell(row=0, col=1, proportions={"WORM": 1}, counts={})]]
        assert sources.load_error == ""

    def test_failed_som_is_reported_and_skipped(self, routes):
        sources = load()

        assert sources.som_error == "SOM[1] HTTP 500"
        assert len(sources.som_grids) == 1

    def test_title_from_document_when_not_configured(self, routes):
        assert load().som_titles == ["From document"]

    def test_configured_titles_win(self, routes):
        assert load(["SOM-APT30", "SOM-dropper"]).som_titles == ["SOM-APT30"]

    def test_label_failure_keeps_other_documents(self, routes):
        routes[LABELS_URL] = FakeResponse([], status_code=404)

        sources = load()

        assert sources.labels == []
        assert sources.load_error == "labelList HTTP 404"
        assert len(sources.embedding_records) == 1

    def test_non_list_points_document(self, routes):
        routes[POINTS_URL] = FakeResponse({"points": []})

        assert load().embedding_records == []


class TestSomTitle:
    """Tests for choosing a SOM caption."""

    def test_configured(self):
        assert som_title(0, {"title": "doc"}, ["configured"]) == "configured"

    def test_document_title(self):
        assert som_title(1, {"meta": {"title": "doc"}}, ["configured"]) == "doc"

    def test_numbered_fallback(self):
        assert som_title(2, [], []) == "SOM #3"
