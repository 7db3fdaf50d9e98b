"""
Data management submodule: project file loading and saving.
"""

from .core import DataCore, ProjectContext
from .io import atomic_write, load_model, data_type_for, DATA_JSON, DATA_YAML

__all__ = [
    'DataCore',
    'ProjectContext',
    'atomic_write',
    'load_model',
    'data_type_for',
    'DATA_JSON',
    'DATA_YAML',
]
