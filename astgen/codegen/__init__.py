# astgen/codegen/__init__.py
from .types import AstType, Sum, Product, Ctor, Name, synthesize, from_rule
from .emit_ml import emit_ml_to_string
