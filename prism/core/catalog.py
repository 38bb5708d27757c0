# Static descriptions of the participating organizations and the privacy
# policies shown on the governance page. Read-only, never stored.

ORGANIZATIONS = (
    {
        "id": "org-bank",
        "name": "National Bank Corp",
        "type": "bank",
        "tables": ["bank_transactions"],
    },
    {
        "id": "org-insurance",
        "name": "SecureLife Insurance",
        "type": "insurance",
        "tables": ["insurance_claims"],
    },
    {
        "id": "org-gov",
        "name": "Dept. of Social Welfare",
        "type": "government",
        "tables": ["subsidy_usage"],
    },
)

PRIVACY_POLICIES = (
    {
        "id": "pp-001",
        "name": "SENSITIVE Tag",
        "type": "tag",
        "description": "Marks columns containing sensitive demographic data",
        "status": "active",
        "applies_to": ["age_group", "income_band", "region"],
    },
    {
        "id": "pp-002",
        "name": "AGGREGATED_ONLY Tag",
        "type": "tag",
        "description": "Ensures data is pre-aggregated before sharing",
        "status": "active",
        "applies_to": ["bank_transactions", "insurance_claims", "subsidy_usage"],
    },
    {
        "id": "pp-003",
        "name": "NO_PII Enforced",
        "type": "tag",
        "description": "Prevents any PII from being included in outputs",
        "status": "active",
        "applies_to": ["All tables"],
    },
    {
        "id": "pp-004",
        "name": "K-Anonymity Policy",
        "type": "row_access",
        "description": "Approved templates only return groups of at least 10 rows",
        "status": "active",
        "applies_to": ["All queries"],
    },
    {
        "id": "pp-005",
        "name": "Quasi-Identifier Masking",
        "type": "column_mask",
        "description": "Masks specific identifier combinations",
        "status": "active",
        "applies_to": ["age_group + region + income_band"],
    },
)
