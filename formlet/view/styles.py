"""Default look for rendered forms.

The theme is SCSS compiled with libsass; callers override the variables
instead of copying the stylesheet.
"""
from typing import Dict, Optional

import sass

from formlet.log import get_logger
from formlet.view.dom import Element, t

logger = get_logger(__name__)

DEFAULT_VARIABLES: Dict[str, str] = {
    "primary": "#45469b",
    "error": "#db1b1b",
    "border": "#e6e6e6",
    "text": "#333333",
    "muted": "#999999",
    "radius": "4px",
    "spacing": "1rem",
}

THEME = """
@mixin focus-ring($color) {
  outline: none;
  box-shadow: 0 0 0 2px rgba($color, 0.35);
}

.formlet-form {
  display: flex;
  flex-direction: column;
  gap: $spacing;
  color: $text;
}

.formlet-field {
  display: flex;
  flex-direction: column;

  .label {
    font-weight: bold;
    margin-bottom: $spacing / 4;

    .optional {
      color: $muted;
      font-weight: normal;
    }
  }
}

.input {
  border: 1px solid $border;
  border-radius: $radius;
  padding: $spacing / 2;

  &:focus {
    @include focus-ring($primary);
  }

  &.with-error {
    border-color: $error;

    &:focus {
      @include focus-ring($error);
    }
  }

  &:disabled {
    background: lighten($border, 5%);
    cursor: not-allowed;
  }
}

.form-error {
  color: $error;
  font-size: 0.875rem;
  margin-top: $spacing / 4;
}

.file-status.with-error {
  color: $error;
}

.radio-group {
  border: none;
  display: flex;
  flex-direction: column;

  &.horizontal {
    flex-direction: row;
    gap: $spacing;
  }
}

.picker-selected {
  display: inline-flex;
  align-items: center;
  gap: $spacing / 2;
  border: 1px solid $border;
  border-radius: $radius * 4;
  padding: 0 $spacing / 2;

  img {
    width: 1.5rem;
    height: 1.5rem;
    border-radius: 50%;
  }
}

.button-primary {
  background: $primary;
  border-radius: $radius;
  color: white;

  &:disabled {
    background: $muted;
  }
}
"""


def compile_theme(variables: Optional[Dict[str, str]] = None, output_style: str = "compressed") -> str:
    """Compiles the default theme with ``variables`` overriding the defaults."""
    merged = {**DEFAULT_VARIABLES, **(variables or {})}
    unknown = set(merged) - set(DEFAULT_VARIABLES)
    if unknown:
        logger.warning("Unknown theme variables ignored by the stylesheet", variables=sorted(unknown))

    header = "".join(f"${name}: {value};\n" for name, value in merged.items())
    try:
        return sass.compile(string=header + THEME, output_style=output_style)
    except sass.CompileError as e:
        logger.error("Theme compilation failed", error=str(e))
        raise


def stylesheet(variables: Optional[Dict[str, str]] = None) -> Element:
    """``<style>`` element with the compiled theme, ready to put next to a rendered form."""
    return t.style({"data-formlet": "theme"}, [compile_theme(variables)])
