"""Turns a filled form into an element tree.

The renderer knows nothing about validation: it fills the form with the
controller's values, then maps every field to the widget of its kind and wires
the widget's events back to the controller. ``WIDGETS`` is the dispatch table;
a new field kind needs one entry here.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from formlet.core import create_effect, untrack
from formlet.form.base import FilledField, Form
from formlet.form.fields import Field, FieldKind
from formlet.form.model import FormController
from formlet.form.picker import search
from formlet.form.remote import Failure, Loading, Success
from formlet.form.rich_text import RichTextDocument
from formlet.i18n import Translators
from formlet.log import get_logger
from formlet.view.dom import Element, t

logger = get_logger(__name__)


@dataclass(frozen=True)
class WidgetContext:
    controller: FormController
    disabled: bool
    has_error: bool
    translators: Translators

    def edit(self, values) -> None:
        self.controller.edit(values)

    def blur_handler(self, field_id: str) -> Callable:
        return lambda *_: self.controller.blur(field_id)

    def aria(self, field_id: str) -> Dict[str, Any]:
        return {
            "aria-invalid": self.has_error,
            "aria-describedby": f"{field_id}-error" if self.has_error else None,
        }


def _input_class(ctx: WidgetContext) -> str:
    return "input with-error" if ctx.has_error else "input"


def _text(field: Field, ctx: WidgetContext) -> Element:
    options = field.options
    base = field.base
    props = {
        "id": options.id,
        "class_name": _input_class(ctx),
        "placeholder": options.placeholder or None,
        "disabled": ctx.disabled,
        "maxlength": options.max_length,
        "onInput": lambda value: ctx.edit(base.update(value)),
        "onBlur": ctx.blur_handler(options.id),
        **ctx.aria(options.id),
    }
    if options.multiline:
        return t.textarea(props, [base.value])
    return t.input({**props, "type": options.input_type, "value": base.value})


def _rich_text(field: Field, ctx: WidgetContext) -> Element:
    options = field.options
    base = field.base
    return t.rich_text_editor({
        "id": options.id,
        "elm-placeholder": options.placeholder or None,
        "elm-disabled": ctx.disabled,
        "elm-has-error": ctx.has_error,
        "data-markdown": base.value.to_markdown(),
        "onTextChange": lambda ops: ctx.edit(base.update(RichTextDocument.from_ops(ops))),
        "onBlur": ctx.blur_handler(options.id),
    })


def _checkable(field: Field, ctx: WidgetContext, role: Optional[str]) -> Element:
    options = field.options
    base = field.base
    return t.input({
        "id": options.id,
        "type": "checkbox",
        "role": role,
        "class_name": "form-switch" if role else "form-checkbox",
        "checked": bool(base.value),
        "aria-checked": bool(base.value) if role else None,
        "disabled": ctx.disabled,
        "onChange": lambda checked: ctx.edit(base.update(bool(checked))),
        "onBlur": ctx.blur_handler(options.id),
    })


def _toggle(field: Field, ctx: WidgetContext) -> Element:
    return _checkable(field, ctx, role="switch")


def _checkbox(field: Field, ctx: WidgetContext) -> Element:
    return _checkable(field, ctx, role=None)


def _radio(field: Field, ctx: WidgetContext) -> Element:
    options = field.options
    base = field.base

    def choice(index, value, label):
        choice_id = f"{options.id}-{index}"
        return t.label({"class_name": "radio-choice", "for": choice_id}, [
            t.input({
                "id": choice_id,
                "type": "radio",
                "name": options.id,
                "checked": value == base.value,
                "disabled": ctx.disabled,
                "onChange": lambda *_: ctx.edit(base.update(value)),
                "onBlur": ctx.blur_handler(options.id),
            }),
            label,
        ])

    return t.fieldset({"id": options.id, "class_name": f"radio-group {options.direction}"}, [
        choice(index, value, label) for index, (value, label) in enumerate(options.choices)
    ])


def _select(field: Field, ctx: WidgetContext) -> Element:
    options = field.options
    base = field.base
    return t.select({
        "id": options.id,
        "class_name": _input_class(ctx),
        "disabled": ctx.disabled,
        "onChange": lambda value: ctx.edit(base.update(value)),
        "onBlur": ctx.blur_handler(options.id),
        **ctx.aria(options.id),
    }, [
        t.option({"value": value, "selected": value == base.value}, [label])
        for value, label in options.choices
    ])


def _file(field: Field, ctx: WidgetContext) -> Element:
    options = field.options
    base = field.base
    remote = base.value

    if isinstance(remote, Loading):
        status = t.span({"class_name": "file-status", "aria-busy": True}, ["…"])
    elif isinstance(remote, Success):
        status = t.a({"class_name": "file-status", "href": remote.value}, [remote.value])
    elif isinstance(remote, Failure):
        status = t.span({"class_name": "file-status with-error"}, [ctx.translators.t("form.file.failure")])
    else:
        status = None

    return t.div({"class_name": "file-input"}, [
        t.input({
            "id": options.id,
            "type": "file",
            "accept": options.accept,
            "disabled": ctx.disabled or isinstance(remote, Loading),
            "onChange": lambda content: ctx.controller.request_upload(base, content),
            "onBlur": ctx.blur_handler(options.id),
            **ctx.aria(options.id),
        }),
        status,
    ])


def _date_picker(field: Field, ctx: WidgetContext) -> Element:
    options = field.options
    base = field.base

    def on_change(raw: str):
        try:
            picked = date.fromisoformat(raw) if raw else None
        except ValueError:
            logger.debug("Ignoring malformed date from picker", field=options.id, raw=raw)
            return
        ctx.edit(base.update(picked))

    return t.input({
        "id": options.id,
        "type": "date",
        "class_name": _input_class(ctx),
        "value": base.value.isoformat() if base.value else "",
        "min": options.min_date.isoformat() if options.min_date else None,
        "max": options.max_date.isoformat() if options.max_date else None,
        "disabled": ctx.disabled,
        "onChange": on_change,
        "onBlur": ctx.blur_handler(options.id),
        **ctx.aria(options.id),
    })


def _picker_results(field: Field, ctx: WidgetContext, exclude) -> Optional[Element]:
    options = field.options
    base = field.base
    model = base.value
    if not model.query:
        return None
    found = search(options.profiles, model.query, exclude=exclude)
    if not found:
        return t.p({"class_name": "picker-empty"}, [ctx.translators.t("form.picker.no_results")])
    return t.ul({"class_name": "picker-results", "role": "listbox"}, [
        t.li({"role": "option"}, [
            t.button({
                "type": "button",
                "class_name": "picker-result",
                "data-account": profile.account,
                "disabled": ctx.disabled,
                "onClick": lambda *_, p=profile: ctx.edit(base.update(model.select(p))),
            }, [profile.display_name])
        ])
        for profile in found
    ])


def _picker_search(field: Field, ctx: WidgetContext) -> Element:
    options = field.options
    base = field.base
    return t.input({
        "id": options.id,
        "type": "search",
        "class_name": _input_class(ctx),
        "placeholder": options.placeholder or None,
        "value": base.value.query,
        "disabled": ctx.disabled,
        "onInput": lambda query: ctx.edit(base.update(base.value.with_query(query))),
        "onBlur": ctx.blur_handler(options.id),
        **ctx.aria(options.id),
    })


def _selected_profile(profile, ctx: WidgetContext, on_remove: Callable) -> Element:
    return t.div({"class_name": "picker-selected", "data-account": profile.account}, [
        t.img({"src": profile.avatar, "alt": ""}) if profile.avatar else None,
        t.span({}, [profile.display_name]),
        t.button({
            "type": "button",
            "class_name": "picker-remove",
            "disabled": ctx.disabled,
            "onClick": on_remove,
        }, ["×"]),
    ])


def _user_picker(field: Field, ctx: WidgetContext) -> Element:
    base = field.base
    model = base.value
    if model.selected is not None:
        return _selected_profile(model.selected, ctx, lambda *_: ctx.edit(base.update(model.clear())))
    return t.div({"class_name": "picker"}, [
        _picker_search(field, ctx),
        _picker_results(field, ctx, exclude=()),
    ])


def _user_picker_multiple(field: Field, ctx: WidgetContext) -> Element:
    base = field.base
    model = base.value
    return t.div({"class_name": "picker picker-multiple"}, [
        [
            _selected_profile(profile, ctx, lambda *_, p=profile: ctx.edit(base.update(model.remove(p))))
            for profile in model.selected
        ],
        _picker_search(field, ctx),
        _picker_results(field, ctx, exclude=model.selected),
    ])


WIDGETS: Dict[FieldKind, Callable[[Field, WidgetContext], Element]] = {
    FieldKind.TEXT: _text,
    FieldKind.RICH_TEXT: _rich_text,
    FieldKind.TOGGLE: _toggle,
    FieldKind.CHECKBOX: _checkbox,
    FieldKind.RADIO: _radio,
    FieldKind.SELECT: _select,
    FieldKind.FILE: _file,
    FieldKind.DATE_PICKER: _date_picker,
    FieldKind.USER_PICKER: _user_picker,
    FieldKind.USER_PICKER_MULTIPLE: _user_picker_multiple,
}


def _decoration(field: Field) -> Element:
    content = field.options.content
    if isinstance(content, Element):
        return content
    return t.div({"class_name": "formlet-decoration"}, [content])


def render_field(filled: FilledField, controller: FormController, translators: Translators) -> Element:
    field = filled.state
    if field.kind is FieldKind.DECORATION:
        return _decoration(field)

    options = field.options
    model = controller.model()
    show_error = filled.error is not None and controller.should_show_error(field.id)
    ctx = WidgetContext(
        controller=controller,
        disabled=field.is_disabled(model.disabled),
        has_error=show_error,
        translators=translators,
    )

    label = None
    if options.label:
        label = t.label({"for": options.id, "class_name": "label"}, [
            options.label,
            None if filled.is_required else t.span({"class_name": "optional"}, [f" ({translators.t('form.optional')})"]),
        ])

    classes = ["formlet-field", f"formlet-{field.kind.value}", options.container_class]
    return t.div({"class_name": " ".join(c for c in classes if c), "data-field": field.id}, [
        label,
        WIDGETS[field.kind](field, ctx),
        t.p({"id": f"{field.id}-error", "class_name": "form-error", "role": "alert"}, [filled.error]) if show_error else None,
    ])


def render(
    form: Form,
    controller: FormController,
    on_submit: Callable[[Any], Any],
    *,
    submit_label: Optional[str] = None,
    translators: Optional[Translators] = None,
) -> Element:
    """Renders ``form`` with the controller's current model.

    Submitting the returned ``<form>`` runs ``controller.submit``, so
    ``on_submit`` only ever receives a clean output.
    """
    translators = translators or controller.translators
    model = controller.model()
    filled = form.fill(model.values)

    rendered: List[Element] = [
        render_field(filled_field, controller, translators)
        for filled_field in filled.display_fields()
    ]

    return t.form({
        "class_name": "formlet-form",
        "novalidate": True,
        "onSubmit": lambda *_: controller.submit(form, on_submit),
    }, [
        rendered,
        t.button({
            "type": "submit",
            "class_name": "button button-primary",
            "disabled": model.disabled,
        }, [submit_label or translators.t("form.submit")]),
    ])


def mount(
    form: Form,
    controller: FormController,
    on_submit: Callable[[Any], Any],
    on_render: Callable[[Element], None],
    **render_options,
) -> Dict:
    """Renders now and again after every change to the controller's model."""
    def root_render():
        tree = render(form, controller, on_submit, **render_options)
        untrack(lambda: on_render(tree))

    root_effect = create_effect(root_render)

    return {
        "effect": root_effect,
        "unmount": root_effect.dispose,
    }
