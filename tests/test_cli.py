"""Tests for the rpm-life command line."""

import json

import pytest

from rpm_life import cli


def _run(config, *argv):
    return cli.main(list(argv), config=config)


class TestCli:
    def test_init_creates_stores(self, config, data_dir, capsys):
        assert _run(config, "init") == 0
        assert (data_dir / "rpmBlocks.json").exists()
        assert "categories: 0 record(s)" in capsys.readouterr().out

    def test_seed_then_list(self, config, capsys):
        _run(config, "seed")
        assert "Seeded 2 categories." in capsys.readouterr().out
        _run(config, "seed")
        assert "nothing seeded" in capsys.readouterr().out
        _run(config, "list", "categories")
        out = capsys.readouterr().out
        assert "health | Health" in out
        assert "(2 categories)" in out

    def test_add_update_delete(self, config, data_dir, capsys):
        _run(config, "add", "categories", '{"name": "Finance"}')
        out = capsys.readouterr().out
        assert out.startswith("Added Category (id=")
        rid = json.loads((data_dir / "categories.json").read_text())[0]["id"]

        _run(config, "update", "categories", rid, '{"name": "Money"}')
        assert json.loads(capsys.readouterr().out) == {"name": "Money", "id": rid}

        _run(config, "delete", "categories", rid)
        assert capsys.readouterr().out.strip() == "Category deleted"

    def test_missing_record_returns_error_code(self, config, capsys):
        assert _run(config, "delete", "rpmblocks", "nope") == 1
        assert "RPM Block not found" in capsys.readouterr().err

    def test_invalid_json_argument_exits(self, config):
        with pytest.raises(SystemExit):
            _run(config, "add", "categories", "{nope")

    def test_summary(self, config, data_dir, capsys):
        _run(config, "init")
        (data_dir / "rpmBlocks.json").write_text(
            json.dumps([{
                "id": "b1",
                "result": "Get fit",
                "massiveActions": [{"durationAmount": 90, "durationUnit": "min", "key": "✔"}],
            }]),
            encoding="utf-8",
        )
        capsys.readouterr()
        assert _run(config, "summary", "b1") == 0
        out = capsys.readouterr().out
        assert "=== Get fit ===" in out
        assert "total: 1h30m" in out
        assert "must: 1h30m" in out
