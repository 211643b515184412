from formlet.view.dom import Element, t
from formlet.view.render import mount, render
from formlet.view.styles import compile_theme, stylesheet
