"""
Tests for the recommendation debug CLI.
"""
import importlib.util
import json
import logging
from pathlib import Path

import pytest

SCRIPT = Path(__file__).parent.parent / "debug" / "debug_recommendations.py"


@pytest.fixture
def debug_cli():
    spec = importlib.util.spec_from_file_location("debug_recommendations", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield module
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def articles_dir(tmp_path):
    records = [
        {"id": "hooks", "title": "Hooks", "tags": ["react", "hooks"], "publishDate": "2024-01-01",
         "content": "react hooks explained"},
        {"id": "state", "title": "State", "tags": ["react"], "publishDate": "2024-01-02",
         "content": "managing react state", "likes": 40},
        {"id": "bread", "title": "Bread", "tags": ["baking"], "category": "food", "publishDate": "2023-06-01"},
    ]
    for record in records:
        (tmp_path / f"{record['id']}.json").write_text(json.dumps(record), encoding="utf-8")
    return tmp_path


def test_prints_ranking_with_breakdown(debug_cli, articles_dir, capsys):
    exit_code = debug_cli.main(["--articles-dir", str(articles_dir), "--current", "hooks", "--tags", "react"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Articles loaded: 3" in output
    assert "Strategies: freshness, popularity, relevance, similarity, tag_match, reading_length" in output
    assert "#1 state" in output
    assert "#1 hooks" not in output
    assert "tag_match" in output


def test_disabled_signals_are_not_listed(debug_cli, articles_dir, capsys):
    debug_cli.main(["--articles-dir", str(articles_dir), "--no-popular", "--no-fresh", "--diversify"])
    output = capsys.readouterr().out
    assert "Strategies: relevance, similarity, tag_match, reading_length" in output


def test_empty_directory(debug_cli, tmp_path, capsys):
    assert debug_cli.main(["--articles-dir", str(tmp_path)]) == 1
    assert "No articles found" in capsys.readouterr().out


def test_negative_limit_is_rejected(debug_cli, articles_dir, capsys):
    assert debug_cli.main(["--articles-dir", str(articles_dir), "--limit", "-1"]) == 2
    assert "max_results" in capsys.readouterr().err


@pytest.fixture
def react_heavy_dir(tmp_path):
    records = [
        {"id": "r1", "title": "Hooks", "tags": ["react"], "publishDate": "2024-01-01", "likes": 100},
        {"id": "r2", "title": "State", "tags": ["react"], "publishDate": "2024-01-01", "likes": 90},
        {"id": "bake", "title": "Bread", "tags": ["baking"], "category": "food", "publishDate": "2024-01-01"},
    ]
    for record in records:
        (tmp_path / f"{record['id']}.json").write_text(json.dumps(record), encoding="utf-8")
    return tmp_path


def test_diversify_changes_the_ranking(debug_cli, react_heavy_dir, capsys):
    debug_cli.main(["--articles-dir", str(react_heavy_dir), "--limit", "2"])
    plain = capsys.readouterr().out
    assert "#1 r1" in plain
    assert "#2 r2" in plain
    assert "bake" not in plain.split("Ranking", 1)[1]

    debug_cli.main(["--articles-dir", str(react_heavy_dir), "--limit", "2", "--diversify"])
    diverse = capsys.readouterr().out
    assert "#1 r1" in diverse
    assert "#2 bake" in diverse
    assert "#3" not in diverse
