"""Import-string resolution: ``"module:attribute"`` to a Python object."""

import importlib
import sys
from typing import Any


def resolve_import(import_string: str, default_attr: str, *, reload: bool = False) -> Any:
    """Resolve an import string to the object it names.

    When the attribute portion is omitted it defaults to *default_attr*
    (``"myshop"`` with ``default_attr="render"`` resolves to
    ``myshop.render``). With *reload*, a module that was already imported
    is re-executed first.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = default_attr

    loaded = module_path in sys.modules
    module = importlib.import_module(module_path)
    if reload and loaded:
        module = importlib.reload(module)
    return getattr(module, attr_name)
