import io

import pytest

from moria_overlay.entrypoints.cli import main, render_report


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "keybindings.txt").write_text("0|112\n9|121\nmod|17\n", encoding="utf-8")
    (tmp_path / "MoriaCppMod.ini").write_text("[Keybindings]\nQuickBuild2 = Num5\n", encoding="utf-8")
    (tmp_path / "quickbuild_slots.txt").write_text(
        "0|Wall Stone|T_Wall\nrotation|15\n", encoding="utf-8"
    )
    (tmp_path / "removed_instances.txt").write_text(
        "PWM_Quarry_2x2-Wall|1.5|2.5|3.5\n@PWM_Rock_Large\n", encoding="utf-8"
    )
    return tmp_path


def test_render_report(config_dir, table):
    lines = render_report(config_dir, table)
    assert lines[0] == "Set Modifier Key:  CTRL"
    assert "Quick Build 1:  F1" in lines
    assert "Quick Build 2:  Num5" in lines
    assert "Target:  F10" in lines
    assert "Undo Last:  -" in lines
    assert "Quick Build 1:  Wall Stone (T_Wall)" in lines
    assert "Rotation:  15\u00b0" in lines
    assert lines[-3:] == [
        "Saved Removals (2 entries)",
        "  PWM_Quarry_2x2 (1.5, 2.5, 3.5)",
        "  PWM_Rock_Large [TYPE RULE]",
    ]


def test_render_report_empty_folder(tmp_path, empty_table):
    lines = render_report(tmp_path, empty_table)
    assert lines[0] == "Modifier: SHIFT"
    assert "QuickBuild1: -" in lines
    assert lines[-1] == "Saved Removals (0 entries)"


def test_render_report_wraps_long_values(config_dir, table):
    lines = render_report(config_dir, table, width=12)
    for line in lines[:-3]:
        assert all(len(part) <= 12 for part in line.split("\n"))


def test_main_prints_report(config_dir):
    out = io.StringIO()
    assert main(["--config-dir", str(config_dir)], out=out) == 0
    assert out.getvalue().splitlines()[0] == "Set Modifier Key:  CTRL"


def test_main_loads_language_file(config_dir):
    loc_dir = config_dir / "Localization"
    loc_dir.mkdir()
    (loc_dir / "de.json").write_text('{"key.ctrl": "STRG", "bind.target": "Ziel"}', encoding="utf-8")
    out = io.StringIO()
    assert main(["--config-dir", str(config_dir), "--lang", "de"], out=out) == 0
    text = out.getvalue()
    assert "Set Modifier Key:  STRG" in text
    assert "Ziel:  F10" in text


def test_main_rejects_bad_width(config_dir):
    out = io.StringIO()
    assert main(["--config-dir", str(config_dir), "--width", "0"], out=out) == 2
    assert out.getvalue() == ""
