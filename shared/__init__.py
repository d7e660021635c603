"""
Data structures shared by the instrument layer, the core and the GUI.
"""

from .models import (
    Form,
    GeneratorParameter,
    GeneratorSettings,
    InputSource,
    Source,
    TriggerParameter,
    TriggerSettings,
)

__all__ = [
    "Form",
    "GeneratorParameter",
    "GeneratorSettings",
    "InputSource",
    "Source",
    "TriggerParameter",
    "TriggerSettings",
]
