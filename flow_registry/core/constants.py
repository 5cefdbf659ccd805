"""Core constants: registry-level field vocabulary and shared literal values."""

# Flow fields valid for sorting/searching (GET /flows?sort=field:order).
FLOW_FIELD_IDENTIFIER = "identifier"
FLOW_FIELD_NAME = "name"
FLOW_FIELD_DESCRIPTION = "description"
FLOW_FIELD_BUCKET_IDENTIFIER = "bucket_identifier"
FLOW_FIELD_CREATED_AT = "created_at"
FLOW_FIELD_UPDATED_AT = "updated_at"

FLOW_FIELDS: frozenset[str] = frozenset(
    {
        FLOW_FIELD_IDENTIFIER,
        FLOW_FIELD_NAME,
        FLOW_FIELD_DESCRIPTION,
        FLOW_FIELD_BUCKET_IDENTIFIER,
        FLOW_FIELD_CREATED_AT,
        FLOW_FIELD_UPDATED_AT,
    }
)

# Separator in "field:order" sort parameters
SORT_PARAM_SEP = ":"
