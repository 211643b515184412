"""Composable forms.

A ``Form`` is a function from the form's raw values to a ``FilledForm``: the
fields to render, each with its current error, and the outcome of parsing
every field. Forms are built from single fields with ``field`` (or one of the
kind builders in ``formlet.form.builders``) and combined applicatively::

    form = (
        succeed(curried(User))
        .with_(name_field)
        .with_optional(middle_name_field)
        .with_(age_field)
    )
    filled = form.fill({"name": "Ana", "middle_name": "", "age": "20"})

Each combinator fills both sides against the same values. Errors are values,
recomputed on every fill; nothing here raises for invalid input.
"""
import inspect
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, Optional, Tuple, TypeVar

from formlet.form.accessor import BaseField, Lens
from formlet.form.fields import Field, decoration
from formlet.result import Err, Ok, Result

Values = TypeVar("Values")
Output = TypeVar("Output")
A = TypeVar("A")
B = TypeVar("B")

ErrorIds = Tuple[str, Tuple[str, ...]]


@dataclass(frozen=True)
class FilledField(Generic[Values]):
    state: Field
    error: Optional[str] = None
    is_required: bool = True


@dataclass(frozen=True)
class FilledForm(Generic[Values, Output]):
    """Outcome of filling a form with a set of values.

    ``fields`` is in reverse declaration order (each combinator prepends the
    fields it adds); use ``display_fields`` to get them in the order they were
    declared. ``result`` is ``Ok(output)`` or ``Err((first_error_id,
    other_error_ids))`` where the first error is the earliest declared field
    that failed.
    """
    fields: Tuple[FilledField, ...]
    result: Result[Output, ErrorIds]

    def display_fields(self) -> Tuple[FilledField, ...]:
        return tuple(reversed(self.fields))

    def error_ids(self) -> Tuple[str, ...]:
        if self.result.is_ok():
            return ()
        first, others = self.result.error
        return (first, *others)


class Form(Generic[Values, Output]):
    __slots__ = ("_fill",)

    def __init__(self, fill: Callable[[Values], FilledForm]):
        self._fill = fill

    def fill(self, values: Values) -> FilledForm:
        return self._fill(values)

    __call__ = fill

    def with_(self, new_form: "Form") -> "Form":
        return with_(new_form, self)

    def with_optional(self, new_form: "Form") -> "Form":
        return with_optional(new_form, self)

    def with_conditional(self, build: Callable[[Values], "Form"]) -> "Form":
        return with_conditional(build, self)

    def with_nesting(self, lens: Lens, child: "Form", id_prefix: Optional[str] = None) -> "Form":
        return with_nesting(lens, child, self, id_prefix=id_prefix)

    def with_no_output(self, aux_form: "Form") -> "Form":
        return with_no_output(aux_form, self)

    def with_decoration(self, content: Any) -> "Form":
        return with_decoration(content, self)

    def map(self, fn: Callable[[Output], Any]) -> "Form":
        return map(fn, self)


def fill(form: Form, values: Values) -> FilledForm:
    return form.fill(values)


def succeed(output: Output) -> Form:
    """A form with no fields that always parses to ``output``."""
    return Form(lambda values: FilledForm(fields=(), result=Ok(output)))


def field(
    build: Callable[[BaseField], Field],
    *,
    parser: Callable[[Any], Result],
    value: Callable[[Values], Any],
    update: Callable[[Any, Values], Values],
    external_error: Optional[Callable[[Values], Optional[str]]] = None,
) -> Form:
    """Form made of a single field.

    Args:
        build: Wraps the field's accessor into the ``Field`` of its kind
        parser: Turns the raw input into ``Ok(output)`` or ``Err(message)``
        value: Reads the raw input out of the form values
        update: Writes a raw input into the form values, returning new values
        external_error: Error supplied by the caller for the current values,
            such as a server-side rejection. It replaces a successful parse.
    """
    def fill_field(values):
        raw = value(values)
        base = BaseField(
            value=raw,
            get_value=value,
            update=lambda new_raw: update(new_raw, values),
            update_with_values=update,
        )
        state = build(base)

        parsed = parser(raw)
        if parsed.is_ok() and external_error is not None:
            message = external_error(values)
            if message:
                parsed = Err(message)

        error = parsed.error if parsed.is_err() else None
        return FilledForm(
            fields=(FilledField(state=state, error=error, is_required=True),),
            result=parsed.map_err(lambda _: (state.id, ())),
        )

    return Form(fill_field)


def _combine(
    current: Result,
    new: Result,
    apply: Callable[[Any, Any], Any],
) -> Result:
    if current.is_ok() and new.is_ok():
        return Ok(apply(current.value, new.value))
    if current.is_ok():
        return new
    if new.is_ok():
        return current
    first, others = current.error
    new_first, new_others = new.error
    return Err((first, (*others, new_first, *new_others)))


def _apply(fn, value):
    return fn(value)


def with_(new_form: Form, current_form: Form) -> Form:
    """Appends ``new_form``, feeding its output to the current output function."""
    def fill_with(values):
        current = current_form.fill(values)
        new = new_form.fill(values)
        return FilledForm(
            fields=new.fields + current.fields,
            result=_combine(current.result, new.result, _apply),
        )

    return Form(fill_with)


def with_optional(new_form: Form, current_form: Form) -> Form:
    """Like ``with_``, but an untouched ``new_form`` contributes ``None``.

    ``new_form`` counts as untouched when it has fields and every one of them
    is empty; its errors are then hidden and its parser result ignored. A
    sub-form without fields always contributes its own output.
    """
    def fill_optional(values):
        current = current_form.fill(values)
        new = new_form.fill(values)

        if new.fields and all(filled.state.is_empty() for filled in new.fields):
            fields = tuple(replace(f, error=None, is_required=False) for f in new.fields)
            result = Ok(None)
        else:
            fields = tuple(replace(f, is_required=False) for f in new.fields)
            result = new.result

        return FilledForm(
            fields=fields + current.fields,
            result=_combine(current.result, result, _apply),
        )

    return Form(fill_optional)


def with_conditional(build: Callable[[Values], Form], current_form: Form) -> Form:
    """Appends the form ``build`` picks for the current values."""
    return Form(lambda values: with_(build(values), current_form).fill(values))


def map_values(lens: Lens, form: Form, id_prefix: Optional[str] = None) -> Form:
    """Runs ``form`` on the slice of the values ``lens`` focuses on.

    Every field accessor is rewritten to read and write through the lens.
    With ``id_prefix``, field ids (and the error ids in the result) become
    ``"<prefix>.<id>"`` so a sub-form can be used twice in the same page.
    """
    def prefixed(field_id: str) -> str:
        return f"{id_prefix}.{field_id}" if id_prefix else field_id

    def fill_nested(parent):
        child = form.fill(lens.value(parent))
        fields = tuple(
            replace(f, state=f.state.map_values(lens, parent, id_prefix))
            for f in child.fields
        )
        result = child.result.map_err(
            lambda ids: (prefixed(ids[0]), tuple(prefixed(i) for i in ids[1]))
        )
        return FilledForm(fields=fields, result=result)

    return Form(fill_nested)


def with_nesting(lens: Lens, child_form: Form, parent_form: Form, id_prefix: Optional[str] = None) -> Form:
    """Appends ``child_form``, which works on the slice ``lens`` focuses on."""
    return with_(map_values(lens, child_form, id_prefix=id_prefix), parent_form)


def with_no_output(aux_form: Form, current_form: Form) -> Form:
    """Renders and validates ``aux_form`` without using its output."""
    def fill_no_output(values):
        current = current_form.fill(values)
        aux = aux_form.fill(values)
        return FilledForm(
            fields=aux.fields + current.fields,
            result=_combine(current.result, aux.result, lambda output, _: output),
        )

    return Form(fill_no_output)


def with_decoration(content: Any, current_form: Form) -> Form:
    """Inserts static content between fields."""
    decorated = FilledField(state=decoration(content), error=None, is_required=False)

    def fill_decorated(values):
        current = current_form.fill(values)
        return FilledForm(fields=(decorated,) + current.fields, result=current.result)

    return Form(fill_decorated)


def map(fn: Callable[[A], B], form: Form) -> Form:
    """Transforms the output of ``form``; fields and errors are unchanged."""
    def fill_mapped(values):
        filled = form.fill(values)
        return FilledForm(fields=filled.fields, result=filled.result.map(fn))

    return Form(fill_mapped)


def curried(fn: Callable, arity: Optional[int] = None) -> Callable:
    """One-argument-at-a-time version of ``fn`` for use with ``succeed``.

    ``arity`` defaults to the number of required positional parameters.
    """
    if arity is None:
        positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        arity = len([
            p for p in inspect.signature(fn).parameters.values()
            if p.kind in positional and p.default is inspect.Parameter.empty
        ])

    def collect(args):
        if len(args) == arity:
            return fn(*args)
        return lambda arg: collect(args + (arg,))

    return collect(())
