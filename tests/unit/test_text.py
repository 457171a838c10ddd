import pytest

from vagasrmc.core.text import collapse_whitespace, slugify, strip_accents


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Desenvolvedor Python Pleno", "desenvolvedor-python-pleno"),
        ("Auxiliar de Produção", "auxiliar-de-producao"),
        ("  Analista   Sênior  ", "analista-senior"),
        ("Técnico(a) de Manutenção - 1º turno", "tecnicoa-de-manutencao-1-turno"),
        ("C++ / C# Developer", "c-c-developer"),
    ],
)
def test_slugify(title: str, expected: str) -> None:
    assert slugify(title) == expected


def test_strip_accents() -> None:
    assert strip_accents("Hortolândia, Paulínia e Sumaré") == "Hortolandia, Paulinia e Sumare"


def test_collapse_whitespace() -> None:
    assert collapse_whitespace("  a \n b\tc ") == "a b c"
