# for reference:
#   https://json-schema.org/understanding-json-schema/reference/object
#   https://github.com/spdx/spdx-spec/blob/development/v2.3.1/schemas/spdx-schema.json

from spdxoci.oras import defaults

schema_url = "http://json-schema.org/draft-07/schema"

spdxIdPattern = "^SPDXRef-[A-Za-z0-9.\\-]+$"

externalRefProperties = {
    "referenceCategory": {
        "type": "string",
        "enum": [
            "OTHER",
            "PERSISTENT-ID",
            "PERSISTENT_ID",
            "SECURITY",
            "PACKAGE-MANAGER",
            "PACKAGE_MANAGER",
        ],
    },
    "referenceType": {"type": "string"},
    "referenceLocator": {"type": "string"},
}

packageProperties = {
    "SPDXID": {"type": "string", "pattern": spdxIdPattern},
    "name": {"type": "string"},
    "versionInfo": {"type": "string"},
    "licenseDeclared": {"type": "string"},
    "externalRefs": {
        "type": "array",
        "items": {
            "type": "object",
            "required": ["referenceCategory", "referenceType", "referenceLocator"],
            "properties": externalRefProperties,
        },
    },
}

fileProperties = {
    "SPDXID": {"type": "string", "pattern": spdxIdPattern},
    "fileName": {"type": "string"},
}

creationInfoProperties = {
    "created": {
        "type": "string",
        "pattern": "^\\d{4}-\\d{2}-\\d{2}T\\d{2}:\\d{2}:\\d{2}Z$",
    },
    "creators": {
        "type": "array",
        "minItems": 1,
        "items": {
            "type": "string",
            "pattern": "^(Person|Organization|Tool): .+$",
        },
    },
    "licenseListVersion": {"type": "string"},
    "comment": {"type": "string"},
}

spdxDocumentProperties = {
    "SPDXID": {"type": "string", "const": "SPDXRef-DOCUMENT"},
    "spdxVersion": {"type": "string", "pattern": "^SPDX-2\\.[0-3]$"},
    "name": {"type": "string"},
    "documentNamespace": {"type": "string"},
    "dataLicense": {"type": "string", "const": "CC0-1.0"},
    "creationInfo": {
        "type": "object",
        "required": ["created", "creators"],
        "properties": creationInfoProperties,
    },
    "packages": {
        "type": "array",
        "items": {
            "type": "object",
            "required": ["SPDXID", "name"],
            "properties": packageProperties,
        },
    },
    "files": {
        "type": "array",
        "items": {
            "type": "object",
            "required": ["SPDXID", "fileName"],
            "properties": fileProperties,
        },
    },
}


spdxDocument = {
    "$schema": schema_url,
    "title": "SPDX 2.x Document Schema",
    "type": "object",
    "required": [
        "SPDXID",
        "spdxVersion",
        "name",
        "documentNamespace",
        "creationInfo",
    ],
    "properties": spdxDocumentProperties,
    "additionalProperties": True,
}

EmptyManifest = {
    "schemaVersion": 2,
    "mediaType": defaults.media_type_manifest,
    "artifactType": "",
    "config": {},
    "layers": [],
}

EmptySummary = {
    "sbomSummary": {
        "files": [],
        "packages": [],
    }
}
