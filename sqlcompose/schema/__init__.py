"""sqlcompose schema models: attributes, tables, options."""
from sqlcompose.schema.attributes import (
    AttributeDefinition,
    ReferenceSpec,
    RuntimeDefault,
    default_value_schemable,
)
from sqlcompose.schema.options import (
    IsolationLevel,
    QueryOptions,
    SupportsSQL,
    Transaction,
    WhereClause,
)
from sqlcompose.schema.table import TableLike, TableReference

__all__ = [
    "AttributeDefinition",
    "ReferenceSpec",
    "RuntimeDefault",
    "default_value_schemable",
    "IsolationLevel",
    "QueryOptions",
    "SupportsSQL",
    "Transaction",
    "WhereClause",
    "TableLike",
    "TableReference",
]
