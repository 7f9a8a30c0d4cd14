import pytest

from moria_overlay.core.keycodes import VK_CONTROL, VK_RMENU, VK_SHIFT
from moria_overlay.importing.config_files import (
    ConfigFileError,
    load_ini,
    load_ini_keybindings,
    load_keybindings,
    load_quickbuild_slots,
    load_removals,
    save_keybindings,
    save_quickbuild_slots,
    save_removals,
)
from moria_overlay.models.schema import KeybindConfig, QuickBuildConfig, QuickBuildSlot, RemovalEntry


def test_missing_files_load_empty(tmp_path):
    assert load_removals(tmp_path / "removed_instances.txt") == []
    quickbuild = load_quickbuild_slots(tmp_path / "quickbuild_slots.txt")
    assert quickbuild.slots == {} and quickbuild.rotation_step is None
    keybinds = load_keybindings(tmp_path / "keybindings.txt")
    assert keybinds.binds == {} and keybinds.modifier == VK_SHIFT
    assert load_ini(tmp_path / "MoriaCppMod.ini") == {}


def test_directory_path_loads_empty(tmp_path):
    assert load_removals(tmp_path) == []


def test_load_removals_skips_bad_lines(write_file):
    path = write_file(
        "# MoriaCppMod removed instances\n"
        "PWM_Quarry_2x2-Wall|1.5|2.5|3.5\n"
        "broken|line\n"
        "\n"
        "@PWM_Rock_Large\r\n",
        "removed_instances.txt",
    )
    assert load_removals(path) == [
        RemovalEntry("PWM_Quarry_2x2-Wall", 1.5, 2.5, 3.5),
        RemovalEntry("PWM_Rock_Large", is_type_rule=True),
    ]


def test_removals_round_trip_with_headers(tmp_path, table):
    path = tmp_path / "removed_instances.txt"
    entries = [
        RemovalEntry("PWM_Quarry_2x2-Wall_Stone", 100.25, -3.5, 0.0),
        RemovalEntry("PWM_Rock_Large", is_type_rule=True),
    ]
    save_removals(path, entries, table)
    text = path.read_text(encoding="utf-8")
    assert text.startswith("# MoriaCppMod removed instances\n")
    assert "@PWM_Rock_Large\n" in text
    assert load_removals(path) == entries


def test_save_without_table_has_no_header(tmp_path):
    path = tmp_path / "removed_instances.txt"
    save_removals(path, [RemovalEntry("Mesh", 1.0, 2.0, 3.0)])
    assert path.read_text(encoding="utf-8") == "Mesh|1.0|2.0|3.0\n"


def test_quickbuild_round_trip(tmp_path, table):
    path = tmp_path / "nested" / "quickbuild_slots.txt"
    config = QuickBuildConfig(
        slots={
            3: QuickBuildSlot(3, "Adorned Door", "T_UI_BuildIcon_AdornedDoor"),
            0: QuickBuildSlot(0, "Wall Stone"),
        },
        rotation_step=15,
    )
    save_quickbuild_slots(path, config, table)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[-3:] == ["0|Wall Stone|", "3|Adorned Door|T_UI_BuildIcon_AdornedDoor", "rotation|15"]
    assert load_quickbuild_slots(path) == config


def test_quickbuild_later_lines_win(write_file):
    path = write_file("0|Old|\n0|New|Tex\nrotation|5\nrotation|999\n", "quickbuild_slots.txt")
    config = load_quickbuild_slots(path)
    assert config.slots == {0: QuickBuildSlot(0, "New", "Tex")}
    assert config.rotation_step == 5


def test_keybindings_round_trip(tmp_path, table):
    path = tmp_path / "keybindings.txt"
    config = KeybindConfig(binds={0: 0x70, 9: 0x79, 16: 0x0D}, modifier=VK_RMENU)
    save_keybindings(path, config, table)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert lines[-1] == "mod|165"
    assert load_keybindings(path) == config


def test_keybindings_apply_on_top_of_base(write_file):
    base = KeybindConfig(binds={0: 0x70, 1: 0x71}, modifier=VK_CONTROL)
    path = write_file("1|65\nmod|99\n17|66\n", "keybindings.txt")
    config = load_keybindings(path, base)
    assert config.binds == {0: 0x70, 1: 0x41}
    assert config.modifier == VK_CONTROL
    assert base.binds == {0: 0x70, 1: 0x71}


def test_load_ini_sections(write_file):
    path = write_file(
        "; MoriaCppMod settings\n"
        "Version = 3\n"
        "[Keybindings]\n"
        "QuickBuild1 = F1 ; first slot\n"
        "Target = ;\n"
        "\n"
        "[Display]\n"
        "# hidden\n"
        "Language = de\n",
        "MoriaCppMod.ini",
    )
    assert load_ini(path) == {
        "": {"Version": "3"},
        "Keybindings": {"QuickBuild1": "F1", "Target": ";"},
        "Display": {"Language": "de"},
    }


def test_ini_keybindings(write_file):
    path = write_file(
        "[keybindings]\n"
        "QuickBuild1 = F5\n"
        "rotation = Num+\n"
        "Modifier = ctrl\n"
        "Bogus = F1\n"
        "Target = NotAKey\n"
        "[Other]\n"
        "QuickBuild2 = F6\n",
        "MoriaCppMod.ini",
    )
    base = KeybindConfig(binds={9: 0x79})
    config = load_ini_keybindings(path, base)
    assert config.binds == {0: 0x74, 8: 0x6B, 9: 0x79}
    assert config.modifier == VK_CONTROL


def test_ini_unknown_modifier_keeps_base(write_file):
    path = write_file("[Keybindings]\nModifier = Hyper\nUndoLast = 0x5A\n", "MoriaCppMod.ini")
    config = load_ini_keybindings(path, KeybindConfig(modifier=VK_RMENU))
    assert config.modifier == VK_RMENU
    assert config.binds == {13: 0x5A}


def test_write_failure_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(ConfigFileError):
        save_keybindings(blocker / "keybindings.txt", KeybindConfig())
