from .loader import inputs_from_env, load_inputs
from .types import ConfigError, Inputs, OmitOption, UnsupportedConfigFormatError

__all__ = [
    "load_inputs",
    "inputs_from_env",
    "Inputs",
    "OmitOption",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
