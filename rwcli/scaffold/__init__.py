"""Project scaffolding from published template releases.

Turns a release asset into a ready-to-run project directory.
"""

from .cache import TemplateCache
from .core import CreateOptions, ScaffoldPipeline, ScaffoldResult
from .materializer import ArchiveMaterializer
from .release import AssetDescriptor, ReleaseDescriptor, ReleaseResolver

__all__ = [
    "ArchiveMaterializer",
    "AssetDescriptor",
    "CreateOptions",
    "ReleaseDescriptor",
    "ReleaseResolver",
    "ScaffoldPipeline",
    "ScaffoldResult",
    "TemplateCache",
]
