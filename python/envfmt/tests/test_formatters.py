import pytest

from envfmt.formatters import (
    format_dot_env,
    format_php_fpm,
    get_formatter,
    parse_dot_env,
    parse_php_fpm,
)
from envfmt.models.params import Param

PARAMS = [Param(key="ALPHA", value="the"), Param(key="BETA", value="quick fox")]


def test_dot_env_output():
    assert format_dot_env(PARAMS) == 'ALPHA="the"\nBETA="quick fox"'


def test_php_fpm_output():
    assert format_php_fpm(PARAMS) == 'env[ALPHA]="the"\nenv[BETA]="quick fox"'


def test_empty_output_has_no_newline():
    assert format_dot_env([]) == ""
    assert format_php_fpm([]) == ""


@pytest.mark.parametrize(
    "fmt, parse",
    [(format_dot_env, parse_dot_env), (format_php_fpm, parse_php_fpm)],
)
def test_output_parses_back_under_its_own_grammar(fmt, parse):
    assert parse(fmt(PARAMS)) == [(p.key, p.value) for p in PARAMS]


def test_dot_env_escapes_quotes_and_newlines():
    params = [Param(key="JSON", value='{"a": "b\\c"}\nnext')]

    text = format_dot_env(params)

    assert "\n" not in text
    assert parse_dot_env(text) == [("JSON", '{"a": "b\\c"}\nnext')]


def test_php_fpm_parser_skips_other_lines():
    text = '; comment\nenv[A]="1"\n[www]\nenv[B]=""'
    assert parse_php_fpm(text) == [("A", "1"), ("B", "")]


def test_get_formatter_by_cli_name():
    assert get_formatter("dot-env") is format_dot_env
    assert get_formatter("php-fpm") is format_php_fpm


def test_get_formatter_rejects_unknown_name():
    with pytest.raises(ValueError, match="not a valid output format"):
        get_formatter("yaml")


@pytest.mark.parametrize("value", ["line1\nline2", "cr\rhere"])
def test_php_fpm_rejects_line_breaks(value):
    with pytest.raises(ValueError, match="K contains a line break"):
        format_php_fpm([Param(key="K", value=value)])


def test_php_fpm_round_trips_quotes_and_brackets():
    params = [Param(key="K", value='say "hi" [now]')]
    assert parse_php_fpm(format_php_fpm(params)) == [("K", 'say "hi" [now]')]
