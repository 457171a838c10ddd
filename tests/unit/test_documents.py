import pytest

from vagasrmc.core.documents import is_valid_cnpj, is_valid_cpf, only_digits


@pytest.mark.parametrize("value", ["529.982.247-25", "52998224725", "111.444.777-35"])
def test_valid_cpf_accepts_formatted_and_bare_digits(value: str) -> None:
    assert is_valid_cpf(value)


@pytest.mark.parametrize(
    "value",
    [
        "529.982.247-24",  # wrong second digit
        "529.982.247-15",  # wrong first digit
        "111.111.111-11",
        "000.000.000-00",
        "5299822472",
        "529982247255",
        "",
    ],
)
def test_invalid_cpf_is_rejected(value: str) -> None:
    assert not is_valid_cpf(value)


@pytest.mark.parametrize("value", ["11.222.333/0001-81", "11444777000161", "12.345.678/0001-95"])
def test_valid_cnpj(value: str) -> None:
    assert is_valid_cnpj(value)


@pytest.mark.parametrize(
    "value",
    ["11.222.333/0001-80", "11.222.333/0001-91", "00000000000000", "99.999.999/9999-99", "1122233300018", ""],
)
def test_invalid_cnpj_is_rejected(value: str) -> None:
    assert not is_valid_cnpj(value)


def test_only_digits_strips_punctuation() -> None:
    assert only_digits("11.222.333/0001-81") == "11222333000181"
    assert only_digits("") == ""
