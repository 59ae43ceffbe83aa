from __future__ import annotations

import json


def test_pool_demo_default_session(capsys) -> None:
    from tools.pool_demo import main

    assert main([]) == 0
    out = capsys.readouterr().out
    assert "swap_a_to_b in=100 out=166 reserves=(600, 834)" in out
    assert "[pool-demo] OK" in out


def test_pool_demo_json_snapshot(capsys) -> None:
    from tools.pool_demo import main

    assert main(["--swap-a", "0", "--provide", "100", "--json"]) == 0
    out = capsys.readouterr().out
    start = out.index("{")
    end = out.rindex("}") + 1
    data = json.loads(out[start:end])
    assert data["total_shares"] == 600
    assert data["native_reserve"] == 600
    assert data["token_reserve"] == 1201


def test_pool_demo_reports_pool_errors(capsys) -> None:
    from tools.pool_demo import main

    assert main(["--withdraw", "501"]) == 1
    assert "FAIL: InsufficientShares" in capsys.readouterr().out
