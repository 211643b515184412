import os
import sys
import unittest
from datetime import date
from unittest.mock import MagicMock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../')))

from formlet.form import builders
from formlet.form.base import curried, succeed
from formlet.form.fields import (
    DatePickerOptions,
    FileOptions,
    RadioOptions,
    TextOptions,
    UserPickerOptions,
)
from formlet.form.model import FormController
from formlet.form.picker import Profile, UserPickerModel
from formlet.form.remote import NotAsked
from formlet.form.validator import Validator
from formlet.i18n import Translators
from formlet.view.dom import t
from formlet.view.render import mount, render

ALICE = Profile(account="alice", name="Alice Doe")
BOB = Profile(account="bob")


def accessors(key):
    return {
        "value": lambda values: values[key],
        "update": lambda raw, values: {**values, key: raw},
    }


person_form = (
    succeed(curried(lambda name, middle_name: (name, middle_name)))
    .with_decoration(t.h2({}, ["About you"]))
    .with_(builders.text(TextOptions(id="name", label="Name"), **accessors("name"), parser=Validator().required()))
    .with_optional(builders.text(TextOptions(id="middle_name", label="Middle name"), **accessors("middle_name")))
)


def by_class(tree, class_name):
    return tree.find_all(lambda e: e.props.get("class_name") == class_name)


def submit_button(tree):
    return tree.find_all(lambda e: e.tag == "button" and e.props.get("type") == "submit")[0]


class TestRender(unittest.TestCase):
    def setUp(self):
        self.focus = MagicMock()
        self.controller = FormController({"name": "", "middle_name": ""}, focus=self.focus)
        self.on_submit = MagicMock()

    def render(self, form=person_form, **kwargs):
        return render(form, self.controller, self.on_submit, **kwargs)

    def test_fields_render_in_declaration_order(self):
        tree = self.render()
        fields = tree.find_all(lambda e: "data-field" in e.props)
        self.assertEqual([e.props["data-field"] for e in fields], ["name", "middle_name"])
        self.assertEqual(tree.children[0].text(), "About you")

    def test_optional_fields_are_marked(self):
        tree = self.render()
        labels = {e.props["for"]: e.text() for e in tree.find_all(lambda e: e.tag == "label")}
        self.assertEqual(labels["name"], "Name")
        self.assertEqual(labels["middle_name"], "Middle name (optional)")

    def test_input_event_edits_values(self):
        tree = self.render()
        tree.find("name").dispatch("input", "Ana")
        self.assertEqual(self.controller.values, {"name": "Ana", "middle_name": ""})

    def test_error_appears_after_blur(self):
        tree = self.render()
        self.assertIsNone(tree.find("name-error"))

        tree.find("name").dispatch("blur")
        tree = self.render()
        error = tree.find("name-error")
        self.assertEqual(error.text(), "This field is required.")
        self.assertEqual(error.props["role"], "alert")
        self.assertIn('aria-invalid="true"', tree.find("name").to_html())
        self.assertEqual(tree.find("name").props["class_name"], "input with-error")

    def test_submit_event_goes_through_controller(self):
        tree = self.render()
        tree.dispatch("submit")
        self.on_submit.assert_not_called()
        self.focus.assert_called_once_with("name")
        self.assertIsNotNone(self.render().find("name-error"))

        self.controller.edit({"name": "Ana", "middle_name": ""})
        self.render().dispatch("submit")
        self.on_submit.assert_called_once_with(("Ana", None))

    def test_disabled_model_disables_inputs_and_submit(self):
        self.controller.set_disabled(True)
        tree = self.render()
        self.assertTrue(tree.find("name").props["disabled"])
        self.assertTrue(submit_button(tree).props["disabled"])

    def test_field_disabled_in_options_stays_disabled_when_form_is_enabled(self):
        form = builders.text(TextOptions(id="code", disabled=True), **accessors("code"))
        self.controller = FormController({"code": "ABC"})
        self.controller.set_disabled(True)
        self.controller.set_disabled(False)

        tree = self.render(form)
        self.assertTrue(tree.find("code").props["disabled"])
        self.assertIn(" disabled", tree.find("code").to_html())
        self.assertFalse(submit_button(tree).props["disabled"])

    def test_submit_label_and_translators(self):
        tree = self.render(submit_label="Create account")
        self.assertEqual(submit_button(tree).text(), "Create account")

        translated = self.render(translators=Translators.from_catalog({"form.submit": "Enviar"}))
        self.assertEqual(submit_button(translated).text(), "Enviar")

    def test_radio_choice_sets_value(self):
        form = builders.radio(
            RadioOptions(id="color", choices=(("red", "Red"), ("blue", "Blue"))),
            **accessors("color"),
        )
        self.controller = FormController({"color": "red"})
        tree = self.render(form)
        self.assertTrue(tree.find("color-0").props["checked"])

        tree.find("color-1").dispatch("change", True)
        self.assertEqual(self.controller.values["color"], "blue")

    def test_date_picker_parses_iso_dates_and_ignores_garbage(self):
        form = builders.date_picker(DatePickerOptions(id="starts_at"), **accessors("starts_at"))
        self.controller = FormController({"starts_at": None})
        tree = self.render(form)

        tree.find("starts_at").dispatch("change", "2024-05-01")
        self.assertEqual(self.controller.values["starts_at"], date(2024, 5, 1))

        tree.find("starts_at").dispatch("change", "not a date")
        self.assertEqual(self.controller.values["starts_at"], date(2024, 5, 1))

        self.render(form).find("starts_at").dispatch("change", "")
        self.assertIsNone(self.controller.values["starts_at"])

    def test_file_change_requests_upload(self):
        form = builders.file(FileOptions(id="avatar"), **accessors("avatar"))
        self.controller = FormController({"avatar": NotAsked()})
        self.controller.request_upload = MagicMock()

        self.render(form).find("avatar").dispatch("change", b"bytes")

        self.controller.request_upload.assert_called_once()
        base, content = self.controller.request_upload.call_args[0]
        self.assertEqual(content, b"bytes")
        self.assertEqual(base.value, NotAsked())

    def test_user_picker_search_and_select(self):
        form = builders.user_picker(
            UserPickerOptions(id="reviewer", profiles=(ALICE, BOB)),
            **accessors("reviewer"),
        )
        self.controller = FormController({"reviewer": UserPickerModel()})

        self.render(form).find("reviewer").dispatch("input", "ali")
        tree = self.render(form)
        results = by_class(tree, "picker-result")
        self.assertEqual([e.props["data-account"] for e in results], ["alice"])

        results[0].dispatch("click")
        self.assertEqual(self.controller.values["reviewer"], UserPickerModel(selected=ALICE))

        tree = self.render(form)
        self.assertEqual(by_class(tree, "picker-selected")[0].props["data-account"], "alice")
        by_class(tree, "picker-remove")[0].dispatch("click")
        self.assertTrue(self.controller.values["reviewer"].is_empty())

    def test_picker_without_matches_says_so(self):
        form = builders.user_picker(UserPickerOptions(id="reviewer", profiles=(ALICE,)), **accessors("reviewer"))
        self.controller = FormController({"reviewer": UserPickerModel(query="zzz")})
        tree = self.render(form)
        self.assertEqual(by_class(tree, "picker-empty")[0].text(), "No users found")


class TestMount(unittest.TestCase):
    def test_rerenders_on_every_model_change_until_unmounted(self):
        controller = FormController({"name": "", "middle_name": ""})
        on_render = MagicMock()

        mounted = mount(person_form, controller, MagicMock(), on_render)
        self.assertEqual(on_render.call_count, 1)

        controller.edit({"name": "Ana", "middle_name": ""})
        self.assertEqual(on_render.call_count, 2)
        latest = on_render.call_args[0][0]
        self.assertEqual(latest.find("name").props["value"], "Ana")

        controller.blur("name")
        self.assertEqual(on_render.call_count, 3)

        mounted["unmount"]()
        controller.edit({"name": "Bia", "middle_name": ""})
        self.assertEqual(on_render.call_count, 3)

    def test_unchanged_values_do_not_rerender(self):
        controller = FormController({"name": "Ana", "middle_name": ""})
        on_render = MagicMock()
        mount(person_form, controller, MagicMock(), on_render)

        controller.edit({"name": "Ana", "middle_name": ""})
        self.assertEqual(on_render.call_count, 1)


class TestElements(unittest.TestCase):
    def test_text_is_escaped(self):
        self.assertEqual(t.p({}, ["<b>hi</b>"]).to_html(), "<p>&lt;b&gt;hi&lt;/b&gt;</p>")

    def test_attributes(self):
        element = t.input({"class_name": "input", "disabled": True, "placeholder": None, "value": 'say "hi"'})
        self.assertEqual(element.to_html(), '<input class="input" disabled value="say &quot;hi&quot;">')
        self.assertEqual(t.div({"aria-busy": True, "aria-hidden": False}).to_html(), '<div aria-busy="true"></div>')

    def test_listeners_are_not_attributes(self):
        handler = MagicMock(return_value="handled")
        button = t.button({"onClick": handler}, ["Go"])
        self.assertEqual(button.to_html(), "<button>Go</button>")
        self.assertEqual(button.dispatch("click", 1), "handled")
        handler.assert_called_once_with(1)
        with self.assertRaises(KeyError):
            button.dispatch("submit")

    def test_children_are_flattened(self):
        element = t.ul({}, [[t.li({}, ["a"]), None], False, t.li({}, ["b"]), 3])
        self.assertEqual(element.to_html(), "<ul><li>a</li><li>b</li>3</ul>")

    def test_raw_html_is_sanitized(self):
        element = t.div({"html": "<b>ok</b><script>alert(1)</script>"})
        self.assertEqual(element.to_html(), "<div><b>ok</b></div>")

    def test_underscored_tags_become_dashed(self):
        self.assertEqual(t.rich_text_editor().tag, "rich-text-editor")


if __name__ == '__main__':
    unittest.main()
