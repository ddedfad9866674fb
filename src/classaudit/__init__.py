"""
classaudit: compare constants and class-method results across Python classes.

    from classaudit import extract

    print(extract("constants", "class_methods").from_([ServiceA, ServiceB]).to_markdown())
"""

from classaudit.extractor import Extractor, extract
from classaudit.inventory.introspect import ClassNotFoundError
from classaudit.inventory.models import ErrorMarker, RawTable

__version__ = "1.0.0"

__all__ = [
    "ClassNotFoundError",
    "ErrorMarker",
    "Extractor",
    "RawTable",
    "__version__",
    "extract",
]
