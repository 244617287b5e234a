# tests/test_bench_logic.py
import csv
import json

import numpy as np
import pytest

import bench_logic
from bench_logic import main, random_table, run_trial
from cover_solver import CoverError, CoverResult
from plot_cover_bench import load_rows, plot, summarize

def test_random_table_shape_and_extremes():
    rng = np.random.default_rng(0)
    t = random_table(5, 0.4, 0.1, rng)
    assert t.n_vars == 5 and len(t) == 32
    assert random_table(3, 1.0, 0.0, rng).minterms() == set(range(8))
    assert random_table(3, 0.0, 1.0, rng).dont_cares() == set(range(8))
    with pytest.raises(ValueError):
        random_table(3, 0.8, 0.4, rng)

def test_run_trial_row():
    rng = np.random.default_rng(1)
    row = run_trial(random_table(5, 0.5, 0.1, rng))
    assert row["n_vars"] == 5
    assert row["primes"] >= row["exact_terms"]
    assert row["greedy_terms"] >= row["exact_terms"]
    assert row["exact_fell_back"] is False

def test_bench_writes_csv_json_and_plot(tmp_path):
    main(["--out", str(tmp_path), "--timestamp", "t", "--vars", "3", "4", "--trials", "3"])
    csv_path = tmp_path / "cover_bench_t.csv"
    with open(csv_path) as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 6
    assert len(json.loads((tmp_path / "cover_bench_t.json").read_text())) == 6

    loaded = load_rows(str(csv_path))
    s = summarize(loaded)
    assert list(s["n_vars"]) == [3, 4]
    assert np.all(s["greedy_terms"] >= s["exact_terms"])
    png = tmp_path / "bench.png"
    plot(loaded, str(png))
    assert png.exists() and png.stat().st_size > 0

def test_run_trial_rejects_incomplete_cover(monkeypatch):
    monkeypatch.setattr(bench_logic, "select_cover",
                        lambda *a, **kw: CoverResult([], "exact"))
    with pytest.raises(CoverError):
        run_trial(bench_logic.Table.from_string("0111"))
