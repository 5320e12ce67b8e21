import json

import pandas as pd
import pytest

from address_query.__main__ import main
from address_query.pipelines.batch_decompose import COMPONENT_COLUMNS, decompose_frame, run

# ─────────────────────────────────────────────────────────
# decompose_frame
# ─────────────────────────────────────────────────────────


def test_decompose_frame_adds_component_columns():
    df = pd.DataFrame(
        {
            "id": [1, 2, 3],
            "address": [
                "20 Overbrook Ct #F, Monroe, OH 45050",
                "7 westerfield dr",
                None,
            ],
        }
    )
    out = decompose_frame(df, "address")

    assert list(out.columns) == ["id", "address"] + COMPONENT_COLUMNS
    assert out.loc[0, "house_number"] == "20"
    assert out.loc[0, "street"] == "Overbrook Ct #F"
    assert out.loc[0, "unit_free_street"] == "Overbrook Ct"
    assert out.loc[0, "state"] == "OH"
    assert out.loc[1, "street"] == "westerfield dr"
    assert out.loc[2, COMPONENT_COLUMNS].isna().all()
    # input frame is untouched
    assert "street" not in df.columns


def test_decompose_frame_missing_column():
    with pytest.raises(ValueError):
        decompose_frame(pd.DataFrame({"addr": ["1 Main St"]}), "address")


def test_decompose_frame_empty():
    out = decompose_frame(pd.DataFrame({"address": []}), "address")
    assert out.empty
    assert set(COMPONENT_COLUMNS) <= set(out.columns)


def test_run_reads_and_writes_csv(tmp_path):
    src = tmp_path / "in.csv"
    dst = tmp_path / "out.csv"
    pd.DataFrame({"address": ["123 Main St Columbus OH 43215", ""]}).to_csv(src, index=False)

    run(str(src), str(dst), "address")

    written = pd.read_csv(dst, dtype=str)
    assert written.loc[0, "city"] == "Columbus"
    assert written.loc[0, "zip"] == "43215"
    assert pd.isna(written.loc[1, "street"])


# ─────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────


def test_cli_parse(capsys):
    main(["parse", "123 Main Ct CT 06001"])
    out = json.loads(capsys.readouterr().out)
    assert out["state"] == "CT"
    assert out["zip"] == "06001"
    assert out["street"] == "Main Ct"


def test_cli_variants_and_strip(capsys):
    main(["variants", "7 westerfield dr"])
    assert "7 westerfield drive" in json.loads(capsys.readouterr().out)

    main(["strip", "20 Overbrook Ct #F, Monroe, OH 45050"])
    assert json.loads(capsys.readouterr().out) == "20 Overbrook Ct, Monroe, OH 45050"


def test_cli_predicate(capsys):
    main(["predicate", "Oakley 2525"])
    out = json.loads(capsys.readouterr().out)
    assert out["params"][0] == "%Oakley%"
    assert "Oakley" not in out["sql"]
