from .models import (
    Base,
    DependentXref,
    PrimaryXref,
    Source,
    Species,
    Synonym,
    TranslationDirectXref,
    Xref,
)

__all__ = [
    "Base",
    "DependentXref",
    "PrimaryXref",
    "Source",
    "Species",
    "Synonym",
    "TranslationDirectXref",
    "Xref",
]
