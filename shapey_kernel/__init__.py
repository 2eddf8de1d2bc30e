"""
Shapey Kernel

The pure core of the shapey reshaping toolkit:
- Value predicates and callable arity helpers
- Spec normalisation into a closed tagged union
- Per-field transform failure isolation (error policies)
- Structured logging and the typed exception hierarchy
"""

import logging

__version__ = "0.1.0"

# Silent until the application calls configure_logging().
logging.getLogger("shapey").addHandler(logging.NullHandler())
