"""Tests for the command-line runner."""

import json

import pytest

from token_audit import cli

TOKEN = "0x" + "ab" * 20
OWNER = "0x1234567890123456789012345678901234567890"


@pytest.fixture
def patched(monkeypatch, auditor_factory, probe_factory):
    def _patch(**kwargs):
        kwargs.setdefault("probe", probe_factory(owner=OWNER))
        auditor = auditor_factory(**kwargs)

        async def _create():
            return auditor

        async def _noop():
            return None

        monkeypatch.setattr(cli, "create_auditor", _create)
        monkeypatch.setattr(cli, "close_redis", _noop)
        return auditor

    return _patch


@pytest.mark.asyncio
async def test_text_output(patched, capsys):
    patched(source="function mint(")
    code = await cli.run(TOKEN, as_json=False, output=None)
    out = capsys.readouterr().out
    assert code == 0
    assert "=== SECURITY CHECKS ===" in out
    assert "Mintable: ⚠️ Yes" in out


@pytest.mark.asyncio
async def test_json_output_and_save(patched, capsys, tmp_path):
    auditor = patched()
    target = tmp_path / "report.json"
    code = await cli.run(TOKEN, as_json=True, output=str(target))

    printed = json.loads(capsys.readouterr().out)
    assert code == 0
    assert printed["ownership"]["ownerAddress"] == OWNER
    assert json.loads(target.read_text(encoding="utf-8")) == printed
    assert auditor._chain.closed


@pytest.mark.asyncio
async def test_invalid_address_exit_code(patched, capsys):
    patched()
    code = await cli.run("0x12", as_json=False, output=None)
    assert code == 2
    assert "Invalid token address" in capsys.readouterr().err


@pytest.mark.parametrize(("flag", "level"), [([], "WARNING"), (["--verbose"], "DEBUG")])
def test_main_log_level_ignores_env(monkeypatch, flag, level):
    seen: dict = {}

    async def _run(address, *, as_json, output):
        return 0

    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    monkeypatch.setattr(cli, "setup_logger", lambda **kwargs: seen.update(kwargs))
    monkeypatch.setattr(cli, "run", _run)
    monkeypatch.setattr("sys.argv", ["token-audit", TOKEN, *flag])

    with pytest.raises(SystemExit) as exc:
        cli.main()

    assert exc.value.code == 0
    assert seen["level"] == level
    assert seen["respect_env"] is False
