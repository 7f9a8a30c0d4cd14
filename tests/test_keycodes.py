import pytest

from moria_overlay.core import keycodes
from moria_overlay.core.keycodes import (
    BIND_INI_KEYS,
    MODIFIERS,
    VK_CONTROL,
    VK_MENU,
    VK_RMENU,
    VK_SHIFT,
    bind_index_to_ini_key,
    bind_label,
    code_to_name,
    hex_key_name,
    ini_key_to_bind_index,
    modifier_name,
    modifier_to_persisted_form,
    name_to_code,
    name_to_modifier_code,
    next_modifier,
)


@pytest.mark.parametrize("n", range(1, 13))
def test_function_keys(n):
    assert code_to_name(0x70 + n - 1) == f"F{n}"


@pytest.mark.parametrize("d", range(10))
def test_numpad_digits(d):
    assert code_to_name(0x60 + d) == f"Num{d}"


@pytest.mark.parametrize(
    "code,name",
    [
        (0x6A, "Num*"),
        (0x6B, "Num+"),
        (0x6C, "NumSep"),
        (0x6D, "Num-"),
        (0x6E, "Num."),
        (0x6F, "Num/"),
        (0xDC, "\\"),
        (0xC0, "`"),
        (0xBA, ";"),
        (0xBB, "="),
        (0xBC, ","),
        (0xBD, "-"),
        (0xBE, "."),
        (0xBF, "/"),
        (0xDB, "["),
        (0xDD, "]"),
        (0xDE, "'"),
        (0x20, "Space"),
        (0x09, "Tab"),
        (0x0D, "Enter"),
        (0x2D, "Ins"),
        (0x2E, "Del"),
        (0x24, "Home"),
        (0x23, "End"),
        (0x21, "PgUp"),
        (0x22, "PgDn"),
        (0x41, "A"),
        (0x4D, "M"),
        (0x5A, "Z"),
        (0x30, "0"),
        (0x39, "9"),
    ],
)
def test_named_keys_with_defaults(table, code, name):
    assert code_to_name(code, table) == name
    assert code_to_name(code) == name


@pytest.mark.parametrize("code,name", [(0xFF, "0xFF"), (0x01, "0x01"), (0xA0, "0xA0")])
def test_unknown_codes_use_hex(code, name):
    assert code_to_name(code) == name


def test_localized_labels_follow_the_table(table):
    table.merge({"key.space": "Leertaste", "key.num_add": "Num Plus"})
    assert code_to_name(0x20, table) == "Leertaste"
    assert code_to_name(0x6B, table) == "Num Plus"


def test_punctuation_is_never_localized(table):
    table.merge({"key.semicolon": "Semikolon"})
    assert code_to_name(0xBA, table) == ";"


def test_cleared_table_falls_back_to_canonical_names(empty_table):
    assert code_to_name(0x20, empty_table) == "Space"
    assert modifier_name(VK_CONTROL, empty_table) == "CTRL"


@pytest.mark.parametrize("code", range(1, 255))
def test_name_round_trip(table, code):
    name = code_to_name(code, table)
    if name == hex_key_name(code):
        assert name_to_code(name) == code
    else:
        assert name_to_code(name) == code, name


def test_every_key_def_round_trips():
    for key in keycodes.KEY_DEFS:
        assert name_to_code(key.name) == key.code


@pytest.mark.parametrize(
    "name,code",
    [
        ("f1", 0x70),
        ("F12", 0x7B),
        ("F24", 0x87),
        ("F01", 0x70),
        ("num5", 0x65),
        ("NUMSEP", 0x6C),
        ("space", 0x20),
        ("PGDN", 0x22),
        ("a", 0x41),
        ("z", 0x5A),
        ("0xFF", 0xFF),
        ("0x0a", 0x0A),
        ("0X7c", 0x7C),
    ],
)
def test_name_to_code_variants(name, code):
    assert name_to_code(name) == code


@pytest.mark.parametrize(
    "name",
    ["", "F0", "F25", "F100", "Num10", "NumX", "0x00", "0x1G", "0x100", "Foo", "Spacebar", "AB"],
)
def test_name_to_code_rejects(name):
    assert name_to_code(name) is None


@pytest.mark.parametrize(
    "code,label",
    [(VK_SHIFT, "SHIFT"), (VK_CONTROL, "CTRL"), (VK_MENU, "ALT"), (VK_RMENU, "RALT")],
)
def test_modifier_names(table, code, label):
    assert modifier_name(code, table) == label
    assert modifier_to_persisted_form(code) == label


@pytest.mark.parametrize("code", [0x00, 0xFF, 0x41])
def test_unknown_modifier_reads_as_shift(table, code):
    assert modifier_name(code, table) == "SHIFT"
    assert modifier_to_persisted_form(code) == "SHIFT"
    assert next_modifier(code) == VK_SHIFT


def test_modifier_name_is_localized_but_persisted_form_is_not(table):
    table.merge({"key.shift": "MAYUS"})
    assert modifier_name(VK_SHIFT, table) == "MAYUS"
    assert modifier_to_persisted_form(VK_SHIFT) == "SHIFT"


@pytest.mark.parametrize("mod", MODIFIERS)
def test_modifier_persisted_form_round_trip(mod):
    assert name_to_modifier_code(modifier_to_persisted_form(mod.code)) == mod.code


@pytest.mark.parametrize("name", ["shift", "Ctrl", "alt", "rAlt"])
def test_modifier_names_case_insensitive(name):
    assert name_to_modifier_code(name) is not None


@pytest.mark.parametrize("name", ["", "CONTROL", "LALT", "Win"])
def test_modifier_name_rejects(name):
    assert name_to_modifier_code(name) is None


def test_next_modifier_full_cycle():
    assert next_modifier(VK_SHIFT) == VK_CONTROL
    assert next_modifier(VK_CONTROL) == VK_MENU
    assert next_modifier(VK_MENU) == VK_RMENU
    assert next_modifier(VK_RMENU) == VK_SHIFT


@pytest.mark.parametrize("index", range(17))
def test_bind_index_round_trip(index):
    key = bind_index_to_ini_key(index)
    assert key is not None
    assert ini_key_to_bind_index(key) == index
    assert ini_key_to_bind_index(key.lower()) == index
    assert ini_key_to_bind_index(key.upper()) == index


def test_bind_ini_key_ends():
    assert BIND_INI_KEYS[0] == "QuickBuild1"
    assert BIND_INI_KEYS[16] == "AdvancedBuilderOpen"
    assert bind_index_to_ini_key(-1) is None
    assert bind_index_to_ini_key(17) is None
    assert ini_key_to_bind_index("QuickBuild9") is None


def test_bind_labels(table, empty_table):
    assert bind_label(11, table) == "Super Dwarf"
    assert bind_label(11, empty_table) == "SuperDwarf"
    assert bind_label(17, table) == ""


def test_is_modifier_code():
    assert all(keycodes.is_modifier_code(mod.code) for mod in MODIFIERS)
    assert not keycodes.is_modifier_code(0x70)
