"""Hydra error responses for FastAPI.

    from fastapi import FastAPI
    import hydra_error

    app = FastAPI()
    hydra_error.register(app, {"context": {"path": "/error.jsonld"}})
"""

from hydra_error.config import ContextOptions, HydraErrorOptions
from hydra_error.exceptions import PluginError, PluginNotRegisteredError, PluginRegistrationError
from hydra_error.plugin import PLUGIN_NAME, get_options, register
from hydra_error.rewriter import ErrorInfo, ErrorRewriter, Failure, Success, classify

__all__ = [
    "PLUGIN_NAME",
    "ContextOptions",
    "ErrorInfo",
    "ErrorRewriter",
    "Failure",
    "HydraErrorOptions",
    "PluginError",
    "PluginNotRegisteredError",
    "PluginRegistrationError",
    "Success",
    "classify",
    "get_options",
    "register",
]
