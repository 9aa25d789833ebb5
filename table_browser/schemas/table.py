"""
Table metadata models

Pydantic models describing a table's structure: names and their hierarchy,
column headers, key constraints and the composed TableMeta record handed to
the UI.
"""
from enum import Enum
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class TableTier(str, Enum):
    """Provenance/purpose of a table, used for UI grouping"""
    MANUAL = "manual"
    LOOKUP = "lookup"
    IMPORTED = "imported"
    COMPUTED = "computed"
    HIDDEN = "hidden"
    UNKNOWN = "unknown"


class TableDataType(str, Enum):
    """Canonical column kinds raw catalog types are normalized into"""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    ENUM = "enum"
    BLOB = "blob"


class ConstraintType(str, Enum):
    PRIMARY = "primary"
    UNIQUE = "unique"
    FOREIGN = "foreign"


class DefaultKind(str, Enum):
    NONE = "none"                        # Catalog reports no default
    NULL = "null"                        # Explicit NULL
    LITERAL = "literal"                  # Literal value, see `value`
    NAMED_CONSTANT = "named_constant"    # Store-computed, see `constant_name`


class DefaultValue(BaseModel):
    """Default value of a column"""
    kind: DefaultKind = Field(description="Which variant this default is")
    value: Any = Field(None, description="Literal value, only for kind=literal")
    constant_name: Optional[str] = Field(None, description="e.g. CURRENT_TIMESTAMP, only for kind=named_constant")

    @classmethod
    def none(cls) -> "DefaultValue":
        return cls(kind=DefaultKind.NONE)

    @classmethod
    def null(cls) -> "DefaultValue":
        return cls(kind=DefaultKind.NULL)

    @classmethod
    def literal(cls, value: Any) -> "DefaultValue":
        return cls(kind=DefaultKind.LITERAL, value=value)

    @classmethod
    def named_constant(cls, name: str) -> "DefaultValue":
        return cls(kind=DefaultKind.NAMED_CONSTANT, constant_name=name)

    @property
    def is_present(self) -> bool:
        """Whether the store fills the column in when it is omitted"""
        return self.kind != DefaultKind.NONE


class TableName(BaseModel):
    """A table name with its tier and, for masters, its part tables"""
    raw_name: str = Field(description="Name as it appears in the catalog")
    tier: TableTier = Field(description="Tier derived from the name's prefix")
    name: str = Field(description="Raw name without its tier prefix")
    master_raw_name: Optional[str] = Field(None, description="Raw name of the master, only for part tables")
    part_name: Optional[str] = Field(None, description="Text after the part marker, only for part tables")
    parts: List["TableName"] = Field(default_factory=list, description="Part tables, only populated on masters")

    @property
    def is_part(self) -> bool:
        return self.master_raw_name is not None


TableName.model_rebuild()


class TierGroup(BaseModel):
    """Master tables sharing one tier"""
    tier: TableTier
    names: List[TableName] = Field(default_factory=list)


class TableHeader(BaseModel):
    """Metadata of one column"""
    name: str = Field(description="Column name")
    type: TableDataType = Field(description="Canonical data type")
    raw_type: str = Field(description="Catalog type string, e.g. 'tinyint(1)'")
    is_numerical: bool = Field(description="type is integer or float")
    is_textual: bool = Field(description="Negation of is_numerical")
    signed: bool = Field(description="Numerical and not unsigned")
    ordinal_position: int = Field(description="1-based column position")
    nullable: bool
    max_characters: Optional[int] = None
    charset: Optional[str] = None
    numeric_precision: Optional[int] = None
    numeric_scale: Optional[int] = None
    enum_values: Optional[List[str]] = Field(None, description="Allowed values, only for type=enum")
    default_value: DefaultValue = Field(default_factory=DefaultValue.none)
    auto_increment: bool = Field(False, description="Store generates the value when omitted")
    comment: str = ""
    table_name: str = Field(description="Owning table")


class Constraint(BaseModel):
    type: ConstraintType
    local_column: str = Field(description="Constrained column in this table")
    foreign_table: Optional[str] = Field(None, description="Referenced table, only for foreign keys")
    foreign_column: Optional[str] = Field(None, description="Referenced column, only for foreign keys")


class TableMeta(BaseModel):
    """Everything the UI needs to render one table"""
    model_config = ConfigDict(frozen=True)

    name: str
    headers: List[TableHeader] = Field(default_factory=list)
    total_rows: int = 0
    constraints: List[Constraint] = Field(default_factory=list)
    comment: str = ""
    parts: List[TableName] = Field(default_factory=list)


class Sort(BaseModel):
    """How to order requested content"""
    by: str = Field(description="Column to sort by")
    direction: Literal["asc", "desc"] = "asc"
