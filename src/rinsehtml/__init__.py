import logging

from .errors import ConfigurationError, RinseError
from .hooks import HookKind, Hooks
from .normalize import Normalizer
from .rules import (
    ACCEPTABLE_ATTRIBUTES,
    ACCEPTABLE_ELEMENTS,
    EMPTY_ELEMENTS,
    REBASE_TARGETS,
    UNACCEPTABLE_ELEMENTS,
    RuleSet,
)
from .sanitizer import CleaningRun, Sanitizer, SanitizerOpts, clean
from .tokens import Characters, Tag

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ACCEPTABLE_ATTRIBUTES",
    "ACCEPTABLE_ELEMENTS",
    "EMPTY_ELEMENTS",
    "REBASE_TARGETS",
    "UNACCEPTABLE_ELEMENTS",
    "Characters",
    "CleaningRun",
    "ConfigurationError",
    "HookKind",
    "Hooks",
    "Normalizer",
    "RinseError",
    "RuleSet",
    "Sanitizer",
    "SanitizerOpts",
    "Tag",
    "clean",
]
