"""authscaffold scaffolder -- renders and writes the Auth.js boilerplate.

Quick usage::

    from authscaffold.detector import detect_project_structure
    from authscaffold.providers import get_provider_configs
    from authscaffold.scaffolder import FileGenerator

    structure = detect_project_structure("/path/to/next-app")
    generator = FileGenerator(structure, get_provider_configs(["google"]))
    summary = await generator.generate_all()
"""

from authscaffold.scaffolder.generator import (
    FileGenerator,
    GenerationResult,
    GenerationStatus,
    GenerationSummary,
    sign_in_trigger,
)
from authscaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "FileGenerator",
    "GenerationResult",
    "GenerationStatus",
    "GenerationSummary",
    "TemplateRenderer",
    "sign_in_trigger",
]
