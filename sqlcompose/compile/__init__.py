"""sqlcompose compilation layer: structural descriptions → dialect SQL."""
from sqlcompose.compile.base import MISSING, DialectCompiler
from sqlcompose.compile.generator import QueryGenerator
from sqlcompose.compile.oracle import OracleCompiler
from sqlcompose.compile.template import render

__all__ = [
    "MISSING",
    "DialectCompiler",
    "QueryGenerator",
    "OracleCompiler",
    "render",
]
