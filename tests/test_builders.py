import os
import sys
from datetime import date

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../')))

from formlet.exceptions import FieldConfigurationError
from formlet.form import builders
from formlet.form.base import curried, succeed
from formlet.form.fields import (
    CheckboxOptions,
    DatePickerOptions,
    FieldKind,
    FileOptions,
    RadioOptions,
    RichTextOptions,
    SelectOptions,
    TextOptions,
    ToggleOptions,
    UserPickerOptions,
)
from formlet.form.mask import NumberMask, StringMask
from formlet.form.picker import MultipleUserPickerModel, Profile, UserPickerModel, search
from formlet.form.remote import Failure, Loading, NotAsked, Success, is_success, with_default
from formlet.form.rich_text import RichTextDocument
from formlet.form.validator import Validator
from formlet.i18n import Translators
from formlet.result import Err, Ok

ALICE = Profile(account="alice", name="Alice Doe", avatar="https://cdn.test/alice.png")
BOB = Profile(account="bob")


def key_accessors(key):
    return {
        "value": lambda values: values[key],
        "update": lambda raw, values: {**values, key: raw},
    }


def only_field(filled):
    assert len(filled.fields) == 1
    return filled.fields[0]


# -- File uploads ---

def avatar_form(**kwargs):
    return builders.file(FileOptions(id="avatar", label="Avatar", accept="image/*"), **key_accessors("avatar"), **kwargs)


def test_file_parses_only_a_finished_upload():
    form = avatar_form()
    assert form.fill({"avatar": Success("https://cdn.test/a.png")}).result == Ok("https://cdn.test/a.png")


def test_file_reports_each_unfinished_state():
    form = avatar_form()
    assert only_field(form.fill({"avatar": NotAsked()})).error == "Choose a file to upload."
    assert only_field(form.fill({"avatar": Loading()})).error == "The file is still uploading."
    assert only_field(form.fill({"avatar": Failure(RuntimeError("503"))})).error == "The file could not be uploaded."


def test_file_messages_can_be_overridden():
    form = avatar_form(loading_error_message="Hold on", not_asked_error_message="Pick a picture")
    assert only_field(form.fill({"avatar": Loading()})).error == "Hold on"
    assert only_field(form.fill({"avatar": NotAsked()})).error == "Pick a picture"


def test_file_messages_use_translators():
    translators = Translators.from_catalog({"form.file.failure": "Falha no envio"})
    form = avatar_form(translators=translators)
    assert only_field(form.fill({"avatar": Failure("boom")})).error == "Falha no envio"


def test_file_parser_receives_url():
    https_only = Validator().custom(lambda url: None if url.startswith("https://") else "Must be secure")
    form = avatar_form(parser=https_only)
    assert form.fill({"avatar": Success("http://cdn.test/a.png")}).result == Err(("avatar", ()))


def test_optional_file_without_upload_is_none():
    form = succeed(curried(lambda avatar: avatar)).with_optional(avatar_form())
    assert form.fill({"avatar": NotAsked()}).result == Ok(None)


def test_remote_data_helpers():
    assert is_success(Success(1))
    assert not is_success(Loading())
    assert with_default("none", Success("url")) == "url"
    assert with_default("none", Failure("x")) == "none"


# -- Text and masks ---

def test_text_mask_formats_every_update():
    form = builders.text(TextOptions(id="document", mask=StringMask("###.###.###-##")), **key_accessors("document"))
    base = only_field(form.fill({"document": ""})).state.base

    assert base.update("12345678901") == {"document": "123.456.789-01"}
    assert base.update("123.4") == {"document": "123.4"}


def test_string_mask_stops_at_last_digit():
    mask = StringMask("(##) #####-####")
    assert mask.apply("11") == "(11"
    assert mask.apply("119") == "(11) 9"
    assert mask.apply("") == ""
    assert mask.unmask("(11) 98765-4321") == "11987654321"


def test_number_mask_groups_thousands_and_limits_decimals():
    mask = NumberMask()
    assert mask.apply("1234567.891") == "1,234,567.89"
    assert mask.apply("0012") == "12"
    assert mask.apply("12.") == "12."
    assert mask.apply("abc") == ""
    assert mask.apply("-1000") == "-1,000"


def test_number_mask_with_local_separators():
    mask = NumberMask(decimal_separator=",", thousands_separator=".")
    assert mask.apply("1234,5") == "1.234,5"
    assert mask.unmask("1.234,50") == "1234.50"


def test_masked_amount_parses_as_float():
    parser = Validator().required().unmask(NumberMask()).float().min_value(1)
    assert parser("1,234.50") == Ok(1234.5)
    assert parser("0.50") == Err("Must be at least 1.")


# -- Rich text ---

def test_rich_text_parser_receives_markdown():
    form = builders.rich_text(
        RichTextOptions(id="description"),
        **key_accessors("description"),
        parser=Validator().required(),
    )
    document = RichTextDocument.from_ops([
        {"insert": "Title"},
        {"insert": "\n", "attributes": {"header": 1}},
        {"insert": "bold", "attributes": {"bold": True}},
        {"insert": " text\n"},
    ])
    assert form.fill({"description": document}).result == Ok("# Title\n**bold** text")
    assert form.fill({"description": RichTextDocument()}).result == Err(("description", ()))


def test_rich_text_lists_and_links():
    document = RichTextDocument.from_ops([
        {"insert": "one"},
        {"insert": "\n", "attributes": {"list": "ordered"}},
        {"insert": "two"},
        {"insert": "\n", "attributes": {"list": "ordered"}},
        {"insert": "dot"},
        {"insert": "\n", "attributes": {"list": "bullet"}},
        {"insert": "site", "attributes": {"link": "https://example.com"}},
        {"insert": "\n"},
    ])
    assert document.to_markdown() == "1. one\n2. two\n- dot\n[site](https://example.com)"


def test_rich_text_emptiness_ignores_whitespace_and_embeds():
    assert RichTextDocument().is_empty()
    assert RichTextDocument.from_text("  ").is_empty()
    assert RichTextDocument.from_ops([{"insert": {"image": "x.png"}}, {"insert": "\n"}]).is_empty()
    assert not RichTextDocument.from_text("Hello").is_empty()
    assert RichTextDocument.from_text("Hello").to_markdown() == "Hello"


# -- Choices ---

def test_radio_and_select_need_choices():
    with pytest.raises(FieldConfigurationError):
        builders.radio(RadioOptions(id="color"), **key_accessors("color"))
    with pytest.raises(FieldConfigurationError):
        builders.select(SelectOptions(id="country"), **key_accessors("country"))


def test_select_parses_with_one_of():
    choices = (("br", "Brazil"), ("pt", "Portugal"))
    form = builders.select(
        SelectOptions(id="country", choices=choices),
        **key_accessors("country"),
        parser=Validator().one_of(value for value, _ in choices),
    )
    assert form.fill({"country": "pt"}).result == Ok("pt")
    assert only_field(form.fill({"country": "xx"})).error == "Choose one of the available options."


def test_checkbox_must_be_ticked():
    form = builders.checkbox(
        CheckboxOptions(id="terms", label="I accept the terms"),
        **key_accessors("terms"),
        parser=lambda ticked: Ok(True) if ticked else Err("You must accept the terms"),
    )
    assert form.fill({"terms": True}).result == Ok(True)
    assert only_field(form.fill({"terms": False})).error == "You must accept the terms"
    assert not only_field(form.fill({"terms": False})).state.is_empty()


# -- Dates ---

def test_date_picker_bounds():
    form = builders.date_picker(
        DatePickerOptions(id="starts_at", min_date=date(2024, 1, 1)),
        **key_accessors("starts_at"),
        parser=Validator().required().date_min(date(2024, 1, 1)),
    )
    assert form.fill({"starts_at": date(2024, 6, 1)}).result == Ok(date(2024, 6, 1))
    assert only_field(form.fill({"starts_at": date(2023, 5, 1)})).error == "Date must be on or after 2024-01-01."
    assert only_field(form.fill({"starts_at": None})).error == "This field is required."
    assert only_field(form.fill({"starts_at": None})).state.is_empty()


# -- User pickers ---

def test_search_matches_account_or_name():
    assert search([ALICE, BOB], "doe") == [ALICE]
    assert search([ALICE, BOB], "BO") == [BOB]
    assert search([ALICE, BOB], "", exclude=[ALICE]) == [BOB]


def test_user_picker_parser_receives_selected_profile():
    form = builders.user_picker(
        UserPickerOptions(id="reviewer", profiles=(ALICE, BOB)),
        **key_accessors("reviewer"),
        parser=lambda profile: Ok(profile.account) if profile else Err("Choose a reviewer"),
    )
    assert form.fill({"reviewer": UserPickerModel().select(ALICE)}).result == Ok("alice")

    empty = only_field(form.fill({"reviewer": UserPickerModel(query="al")}))
    assert empty.error == "Choose a reviewer"
    assert empty.state.kind is FieldKind.USER_PICKER
    assert empty.state.is_empty()


def test_multiple_user_picker_keeps_each_account_once():
    model = MultipleUserPickerModel().select(ALICE).select(BOB).select(ALICE)
    assert model.selected == (ALICE, BOB)
    assert model.remove(ALICE).selected == (BOB,)
    assert model.with_query("x").select(BOB).query == ""

    form = builders.user_picker_multiple(UserPickerOptions(id="members"), **key_accessors("members"))
    assert form.fill({"members": model}).result == Ok([ALICE, BOB])


def test_single_picker_clear_keeps_query():
    model = UserPickerModel(query="bo").select(BOB)
    assert model.query == ""
    assert model.with_query("a").clear() == UserPickerModel(query="a")
    assert ALICE.display_name == "Alice Doe"
    assert BOB.display_name == "bob"


# -- Emptiness inside optional groups ---

def optional(form):
    return succeed(curried(lambda value: value)).with_optional(form)


def test_optional_date_is_empty_when_unset():
    form = optional(builders.date_picker(
        DatePickerOptions(id="ends_at"),
        **key_accessors("ends_at"),
        parser=Validator().required(),
    ))
    assert form.fill({"ends_at": None}).result == Ok(None)
    assert form.fill({"ends_at": date(2024, 1, 1)}).result == Ok(date(2024, 1, 1))


def test_optional_rich_text_is_empty_without_visible_text():
    form = optional(builders.rich_text(
        RichTextOptions(id="bio"),
        **key_accessors("bio"),
        parser=Validator().min_length(10),
    ))
    assert form.fill({"bio": RichTextDocument.from_text("   ")}).result == Ok(None)
    assert form.fill({"bio": RichTextDocument.from_text("short")}).result == Err(("bio", ()))


def test_optional_pickers_are_empty_without_selection():
    single = optional(builders.user_picker(
        UserPickerOptions(id="reviewer"),
        **key_accessors("reviewer"),
        parser=lambda profile: Ok(profile.account) if profile else Err("Choose a reviewer"),
    ))
    assert single.fill({"reviewer": UserPickerModel(query="al")}).result == Ok(None)
    assert single.fill({"reviewer": UserPickerModel().select(ALICE)}).result == Ok("alice")

    multiple = optional(builders.user_picker_multiple(UserPickerOptions(id="members"), **key_accessors("members")))
    assert multiple.fill({"members": MultipleUserPickerModel()}).result == Ok(None)
    assert multiple.fill({"members": MultipleUserPickerModel().select(BOB)}).result == Ok([BOB])


def test_optional_toggle_is_never_empty():
    form = optional(builders.toggle(
        ToggleOptions(id="newsletter"),
        **key_accessors("newsletter"),
        parser=lambda on: Ok(on) if on else Err("Must be on"),
    ))
    filled = form.fill({"newsletter": False})
    assert filled.result == Err(("newsletter", ()))
    assert only_field(filled).error == "Must be on"
