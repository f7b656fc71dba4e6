"""Wayland protocol code generator."""

from .parser import *
from .registry import GenerationContext as GenerationContext
from .registry import IdentifierRegistry as IdentifierRegistry
from .registry import RegistryError as RegistryError
from .registry import to_camel_case as to_camel_case
from .typemap import TypeMappingError as TypeMappingError
from .types import *
