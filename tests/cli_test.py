# tests/cli_test.py
from __future__ import annotations

import argparse
import json
import sys

import pandas as pd
import pytest

from depot_allocation.cli import init_db, rebalance, recommend
from depot_allocation.cli.recommend import read_container_file
from depot_allocation.data.containers import get_containers, insert_container
from depot_allocation.data.depots import get_depots


def _write_csv(path):
    pd.DataFrame(
        [
            {"Container_Number": "C1", "Activity": "stripping luar", "Logistics": "no", "Size_TEU": "1"},
            {"Container_Number": "C2", "Activity": "stuffing dalam", "Logistics": "yes", "Size_TEU": None},
        ]
    ).to_csv(path, index=False)


def test_read_csv_normalizes_headers_and_blanks(tmp_path):
    path = tmp_path / "arrivals.csv"
    _write_csv(path)

    rows = read_container_file(path)

    assert rows[0] == {"container_number": "C1", "activity": "stripping luar", "logistics": "no", "size_teu": "1"}
    assert rows[1]["size_teu"] is None


def test_read_json(tmp_path):
    path = tmp_path / "arrivals.json"
    path.write_text(json.dumps([{"container_number": "J1", "size_teu": 2}]))
    assert read_container_file(path) == [{"container_number": "J1", "size_teu": 2}]


def test_read_unsupported_file(tmp_path):
    with pytest.raises(ValueError):
        read_container_file(tmp_path / "arrivals.txt")


def test_recommend_cli_preview_and_apply(db, tmp_path, monkeypatch, capsys):
    path = tmp_path / "arrivals.csv"
    out = tmp_path / "recommendations.csv"
    _write_csv(path)

    monkeypatch.setattr(sys, "argv", ["depot-recommend", str(path), "--seed", "1", "--output", str(out)])
    recommend.main()

    printed = capsys.readouterr().out
    assert "DEPOT RECOMMENDATIONS" in printed
    assert "Placed: 2" in printed
    assert list(pd.read_csv(out)["container_number"]) == ["C1", "C2"]
    assert get_containers() == []

    monkeypatch.setattr(sys, "argv", ["depot-recommend", str(path), "--seed", "1", "--apply"])
    recommend.main()

    assert "Imported 2 containers (2 created, 0 updated)" in capsys.readouterr().out
    placed = {c["container_number"]: c["depot_id"] for c in get_containers()}
    assert placed == {"C1": db["Depo Yon"], "C2": db["Depo 4"]}


def test_rebalance_cli(db, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["depot-rebalance"])
    rebalance.main()
    assert "No rebalancing needed." in capsys.readouterr().out

    for i in range(9):
        insert_container({"container_number": f"Y{i}", "depot_id": db["Depo Yon"], "size_teu": 10})
    monkeypatch.setattr(sys, "argv", ["depot-rebalance", "--limit", "1"])
    rebalance.main()
    assert "HIGH" in capsys.readouterr().out


def test_parse_depot_argument():
    assert init_db._parse_depot("Depo Yon:500:Padang") == ("Depo Yon", 500.0, "Padang")
    assert init_db._parse_depot("Depo 4:250") == ("Depo 4", 250.0, None)
    with pytest.raises(argparse.ArgumentTypeError):
        init_db._parse_depot("Depo 4")
    with pytest.raises(argparse.ArgumentTypeError):
        init_db._parse_depot("Depo 4:big")


def test_init_db_seeds_each_depot_once(db, monkeypatch, capsys):
    monkeypatch.setattr(
        sys,
        "argv",
        ["depot-init-db", "--database-url", "sqlite://", "--depot", "Depo Sungai:300", "--depot", "Depo Sungai:500:Padang"],
    )
    init_db.main()

    # a fresh in-memory engine replaced the fixture's database
    depots = get_depots()
    assert [(d.name, d.capacity) for d in depots] == [("Depo Sungai", 300.0)]
    assert "Database ready (sqlite)" in capsys.readouterr().out
