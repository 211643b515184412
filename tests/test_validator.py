import os
import sys
from unittest.mock import MagicMock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../')))

from formlet.form.validator import Validator, is_blank
from formlet.i18n import Translators
from formlet.result import Err, Ok


def test_empty_chain_accepts_anything():
    assert Validator()("") == Ok("")
    assert Validator()(None) == Ok(None)


def test_required_treats_whitespace_and_empty_collections_as_blank():
    required = Validator().required()
    assert required("   ") == Err("This field is required.")
    assert required([]) == Err("This field is required.")
    assert required(0) == Ok(0)
    assert is_blank(None)
    assert not is_blank(False)


def test_trim_feeds_trimmed_value_forward():
    parser = Validator().trim().min_length(3)
    assert parser("  ab  ") == Err("Must be at least 3 characters long.")
    assert parser("  abc  ") == Ok("abc")
    assert Validator().max_length(2)("abc") == Err("Must be at most 2 characters long.")


def test_int_conversion_changes_later_steps():
    age = Validator().required().int().min_value(18).max_value(130)
    assert age("20") == Ok(20)
    assert age(" 42 ") == Ok(42)
    assert age("17") == Err("Must be at least 18.")
    assert age("200") == Err("Must be at most 130.")
    assert age("twenty") == Err("Must be a whole number.")


def test_float_conversion():
    assert Validator().float()("2.5") == Ok(2.5)
    assert Validator().float()("two") == Err("Must be a valid number.")


def test_format_checks_skip_empty_input():
    assert Validator().email()("") == Ok("")
    assert Validator().url()("") == Ok("")
    assert Validator().regex(r"[A-Z]{3}")("") == Ok("")


def test_format_checks():
    assert Validator().email()("ana@example.com") == Ok("ana@example.com")
    assert Validator().email()("ana@") == Err("Must be a valid email address.")
    assert Validator().url()("https://example.com/path") == Ok("https://example.com/path")
    assert Validator().url()("example") == Err("Must be a valid URL.")
    assert Validator().regex(r"[A-Z]{3}")("ABC") == Ok("ABC")
    assert Validator().regex(r"[A-Z]{3}")("ABCD") == Err("Invalid format.")


def test_custom_message_overrides_default():
    assert Validator().required("Name please")("") == Err("Name please")


def test_custom_step_can_check_or_convert():
    not_admin = Validator().custom(lambda value: "Reserved name" if value == "admin" else None)
    assert not_admin("admin") == Err("Reserved name")
    assert not_admin("ana") == Ok("ana")

    assert Validator().custom(lambda value: Ok(len(value)))("abcd") == Ok(4)
    assert Validator().map(str.title)("ana maria") == Ok("Ana Maria")


def test_custom_step_that_raises_fails_the_field():
    def broken(value):
        raise KeyError("lookup")

    assert Validator().custom(broken)("x") == Err("Validation failed due to an internal error.")


def test_chain_stops_at_first_failure():
    spy = MagicMock(return_value=None)
    parser = Validator().required().custom(spy)
    assert parser("") == Err("This field is required.")
    spy.assert_not_called()


def test_chains_are_immutable():
    base = Validator().required()
    numeric = base.int()
    assert base("abc") == Ok("abc")
    assert numeric("abc") == Err("Must be a whole number.")


def test_messages_come_from_translators():
    translators = Translators.from_catalog({
        "form.error.required": "Campo obrigatório.",
        "form.error.min_length": "Mínimo de {{length}} caracteres.",
    })
    parser = Validator(translators).required().min_length(4)
    assert parser("") == Err("Campo obrigatório.")
    assert parser("abc") == Err("Mínimo de 4 caracteres.")
    # Keys missing from the catalog fall back to English
    assert Validator(translators).int()("x") == Err("Must be a whole number.")
