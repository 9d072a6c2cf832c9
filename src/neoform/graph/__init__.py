"""Graph backend: property codec, session capability and bootstrap.

Exports are loaded lazily so that importing the codec does not pull in
the driver-facing session module.
"""

from __future__ import annotations

from importlib import import_module

__all__ = [
    "GraphSession",
    "QuerySession",
    "RESERVED_KEY",
    "UNKNOWN",
    "connect",
    "decode_labels",
    "decode_properties",
    "encode_labels",
    "encode_properties",
    "format_scalar",
    "infer_scalar",
]


_EXPORT_TO_MODULE = {
    "RESERVED_KEY": "neoform.graph.codec",
    "UNKNOWN": "neoform.graph.codec",
    "decode_labels": "neoform.graph.codec",
    "decode_properties": "neoform.graph.codec",
    "encode_labels": "neoform.graph.codec",
    "encode_properties": "neoform.graph.codec",
    "format_scalar": "neoform.graph.codec",
    "infer_scalar": "neoform.graph.codec",
    "GraphSession": "neoform.graph.session",
    "QuerySession": "neoform.graph.session",
    "connect": "neoform.graph.session",
}


def __getattr__(name: str):
    module_name = _EXPORT_TO_MODULE.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(module_name)
    return getattr(module, name)
