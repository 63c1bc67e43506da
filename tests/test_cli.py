"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from rankbot.clients.base import MemberPage
from rankbot.errors import RateLimited
from rankbot.main import main, run_sync
from tests.conftest import GROUP_ROLES, FakeGroupAPI, make_config

CONFIG = {
    "groupId": 42,
    "roblosecurity": "super-secret-cookie",
    "scannedRoles": ["Member"],
    "roleYearPairs": {"Vintage": [2006, 2007], "Modern": [2020]},
    "wildcardRole": "Member",
}


def _config_file(tmp_path, data=CONFIG):
    path = tmp_path / "config.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return str(path)


def _fake_platform():
    api = FakeGroupAPI(roles=GROUP_ROLES)
    api.members[10] = [MemberPage([101, 102], None)]
    api.created.update({101: "2006-03-01T00:00:00Z", 102: "2015-03-01T00:00:00Z"})
    return api


class TestArguments:
    def test_missing_config_argument(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code != 0
        assert "usage" in capsys.readouterr().err.lower()


class TestConfigErrors:
    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing.json"), "--no-banner"])
        assert exc_info.value.code == 1
        assert "Could not read config file" in capsys.readouterr().out

    def test_malformed_json(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([_config_file(tmp_path, "{oops"), "--no-banner"])
        assert exc_info.value.code == 1
        assert "Invalid JSON" in capsys.readouterr().out

    def test_invalid_utf8(self, tmp_path, capsys):
        path = tmp_path / "config.json"
        path.write_bytes(b'{"groupId": 1, "x": "\xff\xfe"}')
        with pytest.raises(SystemExit) as exc_info:
            main([str(path), "--no-banner"])
        assert exc_info.value.code == 1
        assert "Configuration error" in capsys.readouterr().out


class TestRun:
    def test_successful_run(self, tmp_path, capsys):
        api = _fake_platform()
        with patch("rankbot.main.RobloxClient", return_value=api) as client_cls:
            main([_config_file(tmp_path), "--no-banner"])

        out = capsys.readouterr().out
        assert "Assigned role Vintage to user 101 (account age: 2006)" in out
        assert "Assigned role Member to user 102 (account age: 2015)" in out
        assert "Rank sync complete" in out
        assert "super-secret-cookie" not in out
        assert client_cls.call_args.args[0].reveal() == "super-secret-cookie"

    def test_missing_role_exits_nonzero(self, tmp_path, capsys):
        data = dict(CONFIG, roleYearPairs={"Champion": [2006]})
        api = _fake_platform()
        with patch("rankbot.main.RobloxClient", return_value=api):
            with pytest.raises(SystemExit) as exc_info:
                main([_config_file(tmp_path, data), "--no-banner"])
        assert exc_info.value.code == 1
        assert "Role Champion not found" in capsys.readouterr().out
        assert api.count("group_role_members") == 0

    def test_interrupt_exits_130(self, tmp_path):
        with patch("rankbot.main.RobloxClient"), \
                patch("rankbot.main.run_sync", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                main([_config_file(tmp_path), "--no-banner"])
        assert exc_info.value.code == 130

    def test_banner_printed_by_default(self, tmp_path, capsys):
        with patch("rankbot.main.RobloxClient", return_value=_fake_platform()):
            main([_config_file(tmp_path)])
        assert "C L A S S I C S" in capsys.readouterr().out


class TestRunSync:
    def test_injected_sleep_and_stats(self, capsys):
        api = _fake_platform()
        api.user_details_script.append(RateLimited())
        sleeps = []
        stats = run_sync(make_config(), api, sleep=sleeps.append)
        assert sleeps == [60.0]
        assert stats.retry.cooldown_waits == 1
        assert stats.total_assigned == 2
        assert "Cooldown waits: 1" in capsys.readouterr().out
