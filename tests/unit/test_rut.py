from contapyme.utils.rut import clean_rut, compute_check_digit, format_rut, is_valid_rut


def test_clean_rut_strips_punctuation():
    assert clean_rut("18.209.442-0") == "182094420"
    assert clean_rut(" 17.238.098-0 ") == "172380980"
    assert clean_rut("9.876.543-k") == "9876543K"


def test_compute_check_digit():
    assert compute_check_digit("18209442") == "0"
    assert compute_check_digit("12345678") == "5"


def test_is_valid_rut():
    assert is_valid_rut("18209442-0")
    assert is_valid_rut("12.345.678-5")
    assert not is_valid_rut("12.345.678-9")
    assert not is_valid_rut("1")
    assert not is_valid_rut("ABC-1")


def test_format_rut():
    assert format_rut("182094420") == "18.209.442-0"
    assert format_rut("12345678-5") == "12.345.678-5"
