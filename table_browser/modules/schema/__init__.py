"""
Relational metadata engine

- types: raw catalog types to TableDataType, enum values, default values
- table_name: tier classification and master/part hierarchy
- constraints: key constraints and transitive foreign key resolution
- catalog: catalog and content reads (TableDao)
- assembler: TableMeta assembly
- validator / inserter: validated, transactional multi-table inserts
"""
