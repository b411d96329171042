"""
Configuration constants for Rust surface extraction.

Defines the tree-sitter node type strings consulted by the visibility
classifier, the construct renderers and the file walker.
"""

# Root node of a parsed Rust file
ROOT_NODE: str = "source_file"

# Visibility
VISIBILITY_NODE: str = "visibility_modifier"
PUBLIC_MARKER: str = "pub"

# Top-level item node types (node type -> DeclarationKind member name)
DECLARATION_KIND_MAP: dict = {
    "struct_item": "STRUCT",
    "enum_item": "ENUM",
    "const_item": "CONST",
    "impl_item": "IMPL",
    "function_item": "FUNCTION",
    "mod_item": "MODULE",
    "type_item": "TYPE_ALIAS",
    "trait_item": "TRAIT",
    "use_declaration": "USE",
}

IMPL_NODE: str = "impl_item"

# Struct bodies
NAMED_FIELD_LIST: str = "field_declaration_list"
POSITIONAL_FIELD_LIST: str = "ordered_field_declaration_list"
FIELD_NODE: str = "field_declaration"

# Enum bodies
VARIANT_NODE: str = "enum_variant"

# Function pieces
FUNCTION_NODE: str = "function_item"
PARAMETER_NODE: str = "parameter"
RECEIVER_NODE: str = "self_parameter"
ASYNC_KEYWORD: str = "async"

# Trait members that declare a required method without a body
SIGNATURE_NODE: str = "function_signature_item"

# Node types carrying a path-qualified or generic type around a plain name
GENERIC_TYPE_NODE: str = "generic_type"
SCOPED_TYPE_NODE: str = "scoped_type_identifier"

# Member indentation inside rendered bodies
INDENT: str = "    "

# Separator between rendered top-level items
ITEM_SEPARATOR: str = "\n\n"

# Per-directory ignore rules honoured by the walker
GITIGNORE_FILE: str = ".gitignore"
