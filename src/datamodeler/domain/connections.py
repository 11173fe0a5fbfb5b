"""Connection templates and configuration default merging.

Every `SystemType` owns exactly one `ConnectionTemplate`: the default
configuration for that kind of system plus the form fields used to edit it.
`merge_connection_defaults` completes a (possibly partial) configuration with
the template of its type without ever overwriting an explicit value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

__all__ = [
    "CONNECTION_TYPE_OPTIONS",
    "ConnectionField",
    "ConnectionTemplate",
    "FieldKind",
    "SystemType",
    "get_connection_fields",
    "get_connection_template",
    "merge_connection_defaults",
    "resolve_system_type",
]


class SystemType(str, Enum):
    """Closed set of connection types a system can have."""

    SQL = "sql"
    POSTGRES = "postgres"
    MYSQL = "mysql"
    ORACLE = "oracle"
    SAP_HANA = "sap_hana"
    NOSQL = "nosql"
    FILE = "file"
    API = "api"
    ADLS = "adls"
    S3 = "s3"
    KAFKA = "kafka"
    SFTP = "sftp"


class FieldKind(str, Enum):
    """Input widget used to edit a connection field."""

    TEXT = "text"
    NUMBER = "number"
    PASSWORD = "password"
    TEXTAREA = "textarea"


@dataclass(frozen=True, slots=True)
class ConnectionField:
    """A single editable key of a connection configuration."""

    key: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    placeholder: str | None = None
    description: str | None = None
    required: bool = False


@dataclass(frozen=True, slots=True)
class ConnectionTemplate:
    """Default configuration and form fields for one `SystemType`.

    ``defaults`` is exposed read-only; callers always receive copies from
    `merge_connection_defaults`.
    """

    system_type: SystemType
    label: str
    defaults: Mapping[str, Any]
    fields: tuple[ConnectionField, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "defaults", MappingProxyType(dict(self.defaults)))


# --- Templates ---

_DATABASE_FIELDS = (
    ConnectionField("host", "Host", placeholder="db.company.local", required=True),
    ConnectionField(
        "port", "Port", FieldKind.NUMBER, placeholder="5432", required=True
    ),
    ConnectionField("database", "Database", placeholder="analytics", required=True),
    ConnectionField(
        "username", "Username", placeholder="service_account", required=True
    ),
    ConnectionField(
        "password", "Password", FieldKind.PASSWORD, placeholder="••••••••", required=True
    ),
)


def _database_fields(port: int) -> tuple[ConnectionField, ...]:
    return tuple(
        replace(f, placeholder=str(port)) if f.key == "port" else f
        for f in _DATABASE_FIELDS
    )


def _database_defaults(system_type: SystemType, port: int) -> dict[str, Any]:
    return {
        "type": system_type.value,
        "host": "",
        "port": port,
        "database": "",
        "username": "",
        "password": "",
    }


_TEMPLATES: dict[SystemType, ConnectionTemplate] = {
    SystemType.SQL: ConnectionTemplate(
        SystemType.SQL,
        "Microsoft SQL Server",
        {**_database_defaults(SystemType.SQL, 1433), "encrypt": True},
        (
            *_database_fields(1433),
            ConnectionField("encrypt", "Encrypt Connection", placeholder="true"),
        ),
    ),
    SystemType.POSTGRES: ConnectionTemplate(
        SystemType.POSTGRES,
        "PostgreSQL",
        {**_database_defaults(SystemType.POSTGRES, 5432), "sslMode": "prefer"},
        (
            *_database_fields(5432),
            ConnectionField(
                "sslMode", "SSL Mode", placeholder="disable | allow | prefer | require"
            ),
        ),
    ),
    SystemType.MYSQL: ConnectionTemplate(
        SystemType.MYSQL,
        "MySQL",
        _database_defaults(SystemType.MYSQL, 3306),
        _database_fields(3306),
    ),
    SystemType.ORACLE: ConnectionTemplate(
        SystemType.ORACLE,
        "Oracle Database",
        {
            "type": SystemType.ORACLE.value,
            "host": "",
            "port": 1521,
            "serviceName": "",
            "username": "",
            "password": "",
        },
        (
            ConnectionField(
                "host", "Host", placeholder="oracle.company.local", required=True
            ),
            ConnectionField(
                "port", "Port", FieldKind.NUMBER, placeholder="1521", required=True
            ),
            ConnectionField(
                "serviceName",
                "Service Name / SID",
                placeholder="ORCLCDB",
                required=True,
            ),
            ConnectionField(
                "username", "Username", placeholder="integration_user", required=True
            ),
            ConnectionField(
                "password",
                "Password",
                FieldKind.PASSWORD,
                placeholder="••••••••",
                required=True,
            ),
        ),
    ),
    SystemType.SAP_HANA: ConnectionTemplate(
        SystemType.SAP_HANA,
        "SAP HANA",
        _database_defaults(SystemType.SAP_HANA, 30015),
        _database_fields(30015),
    ),
    SystemType.NOSQL: ConnectionTemplate(
        SystemType.NOSQL,
        "NoSQL Database",
        {
            "type": SystemType.NOSQL.value,
            "connectionUri": "",
            "username": "",
            "password": "",
            "database": "",
        },
        (
            ConnectionField(
                "connectionUri",
                "Connection URI",
                placeholder="mongodb+srv://cluster.company.com",
                required=True,
            ),
            ConnectionField(
                "database", "Database / Keyspace", placeholder="analytics"
            ),
            ConnectionField("username", "Username", placeholder="service_account"),
            ConnectionField(
                "password", "Password", FieldKind.PASSWORD, placeholder="••••••••"
            ),
        ),
    ),
    SystemType.FILE: ConnectionTemplate(
        SystemType.FILE,
        "File System",
        {
            "type": SystemType.FILE.value,
            "rootPath": "",
            "filePattern": "*.csv",
            "delimiter": ",",
        },
        (
            ConnectionField(
                "rootPath", "Root Path", placeholder="/mnt/shared/data", required=True
            ),
            ConnectionField("filePattern", "File Pattern", placeholder="*.csv"),
            ConnectionField("delimiter", "Delimiter", placeholder=","),
        ),
    ),
    SystemType.API: ConnectionTemplate(
        SystemType.API,
        "REST API",
        {
            "type": SystemType.API.value,
            "baseUrl": "",
            "authType": "apiKey",
            "apiKey": "",
        },
        (
            ConnectionField(
                "baseUrl",
                "Base URL",
                placeholder="https://api.company.com/v1",
                required=True,
            ),
            ConnectionField("authType", "Auth Type", placeholder="apiKey | oauth | none"),
            ConnectionField("apiKey", "API Key / Token", placeholder="sk-..."),
        ),
    ),
    SystemType.ADLS: ConnectionTemplate(
        SystemType.ADLS,
        "Azure Data Lake Storage",
        {
            "type": SystemType.ADLS.value,
            "storageAccount": "",
            "containerName": "",
            "path": "",
            "sasToken": "",
        },
        (
            ConnectionField(
                "storageAccount",
                "Storage Account",
                placeholder="datalakeaccount",
                required=True,
            ),
            ConnectionField(
                "containerName", "Container Name", placeholder="datasets", required=True
            ),
            ConnectionField("path", "Path / Directory", placeholder="/"),
            ConnectionField("sasToken", "SAS Token", placeholder="?sv=..."),
        ),
    ),
    SystemType.S3: ConnectionTemplate(
        SystemType.S3,
        "Amazon S3",
        {
            "type": SystemType.S3.value,
            "bucketName": "",
            "region": "",
            "accessKeyId": "",
            "secretAccessKey": "",
            "prefix": "",
        },
        (
            ConnectionField(
                "bucketName", "Bucket Name", placeholder="company-data", required=True
            ),
            ConnectionField("region", "Region", placeholder="us-east-1"),
            ConnectionField("accessKeyId", "Access Key ID", placeholder="AKIAXXXXX"),
            ConnectionField(
                "secretAccessKey",
                "Secret Access Key",
                FieldKind.PASSWORD,
                placeholder="••••••••",
            ),
            ConnectionField("prefix", "Object Prefix", placeholder="exports/"),
        ),
    ),
    SystemType.KAFKA: ConnectionTemplate(
        SystemType.KAFKA,
        "Apache Kafka",
        {
            "type": SystemType.KAFKA.value,
            "brokers": "",
            "topic": "",
            "consumerGroup": "",
            "saslMechanism": "",
        },
        (
            ConnectionField(
                "brokers",
                "Bootstrap Servers",
                placeholder="broker1:9092,broker2:9092",
                required=True,
            ),
            ConnectionField("topic", "Topic", placeholder="events", required=True),
            ConnectionField(
                "consumerGroup", "Consumer Group", placeholder="modeler-sync"
            ),
            ConnectionField(
                "saslMechanism", "SASL Mechanism", placeholder="PLAIN | SCRAM-SHA-256"
            ),
        ),
    ),
    SystemType.SFTP: ConnectionTemplate(
        SystemType.SFTP,
        "SFTP Server",
        {
            "type": SystemType.SFTP.value,
            "host": "",
            "port": 22,
            "username": "",
            "password": "",
            "rootPath": "",
        },
        (
            ConnectionField(
                "host", "Host", placeholder="sftp.company.com", required=True
            ),
            ConnectionField("port", "Port", FieldKind.NUMBER, placeholder="22"),
            ConnectionField("username", "Username", placeholder="integration_user"),
            ConnectionField(
                "password", "Password", FieldKind.PASSWORD, placeholder="••••••••"
            ),
            ConnectionField("rootPath", "Root Path", placeholder="/uploads"),
        ),
    ),
}

# (value, label) pairs in display order
CONNECTION_TYPE_OPTIONS: tuple[tuple[str, str], ...] = tuple(
    (member.value, _TEMPLATES[member].label) for member in SystemType
)

_TYPE_SYNONYMS: dict[str, SystemType] = {
    "mssql": SystemType.SQL,
    "sqlserver": SystemType.SQL,
    "sql_server": SystemType.SQL,
    "ms-sql": SystemType.SQL,
    "hana": SystemType.SAP_HANA,
    "sap": SystemType.SAP_HANA,
}

# checked in order; first substring hit wins
_TYPE_HINTS: tuple[tuple[tuple[str, ...], SystemType], ...] = (
    (("postgres",), SystemType.POSTGRES),
    (("oracle",), SystemType.ORACLE),
    (("hana",), SystemType.SAP_HANA),
    (("mysql", "maria"), SystemType.MYSQL),
)


def resolve_system_type(system_type: str | SystemType | None) -> SystemType | None:
    """Resolve a free-form type string to a `SystemType`.

    Tries, in order: the exact (case-insensitive) member value, a synonym table
    (``mssql`` → ``sql``, ``hana`` → ``sap_hana``, ...), then substring hints
    (``"postgresql-15"`` → ``postgres``). Returns None when nothing matches.
    """
    if isinstance(system_type, SystemType):
        return system_type
    if not isinstance(system_type, str) or not system_type.strip():
        return None

    normalized = system_type.strip().lower()
    try:
        return SystemType(normalized)
    except ValueError:
        pass
    if normalized in _TYPE_SYNONYMS:
        return _TYPE_SYNONYMS[normalized]
    for needles, resolved in _TYPE_HINTS:
        if any(needle in normalized for needle in needles):
            return resolved
    return None


def get_connection_template(
    system_type: str | SystemType | None,
) -> ConnectionTemplate | None:
    """Return the template for ``system_type``, or None for unknown types."""
    if (resolved := resolve_system_type(system_type)) is None:
        return None
    return _TEMPLATES[resolved]


def get_connection_fields(
    system_type: str | SystemType | None,
) -> tuple[ConnectionField, ...]:
    """Return the form fields for ``system_type`` (empty for unknown types)."""
    if (template := get_connection_template(system_type)) is None:
        return ()
    return template.fields


def merge_connection_defaults(
    system_type: str | SystemType | None, partial: object = None
) -> dict[str, Any]:
    """Complete ``partial`` with the defaults of ``system_type``.

    Shallow merge: every key of ``partial`` whose value is not None wins,
    everything else comes from the type's template. Unknown types have no
    defaults. Keys the template does not know are kept as they are, so keys
    left over from a previous type survive a type change.

    Never raises: a ``partial`` that is not a mapping is treated as empty.

    Examples:
        >>> merge_connection_defaults("file", {})["filePattern"]
        '*.csv'
        >>> merge_connection_defaults("file", {"filePattern": "*.tsv"})["filePattern"]
        '*.tsv'
        >>> merge_connection_defaults("carrier-pigeon", {"a": 1})
        {'a': 1}
    """
    template = get_connection_template(system_type)
    merged: dict[str, Any] = dict(template.defaults) if template else {}
    if isinstance(partial, Mapping):
        merged.update({k: v for k, v in partial.items() if v is not None})
    return merged
