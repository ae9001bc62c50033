TITLE = "Hive"

SUMMARY = "Tenant administration and data retention for the Hive chat backend"

TAGS_METADATA = [
    {
        "name": "retention",
        "description": (
            "Data retention. Purges old messages, model invocations and audit logs,"
            " and threads without messages. Orgs on **legal hold** are never purged."
        ),
    },
    {
        "name": "tenant-settings",
        "description": "Per-org settings: enabled model providers, retention window and legal hold.",
    },
]
