import oras.defaults

user_agent = "spdxoci"
default_tag = "latest"

media_type_spdx = "application/spdx+json"
media_type_summary = "application/json"
media_type_manifest = "application/vnd.oci.image.manifest.v1+json"
media_type_index = "application/vnd.oci.image.index.v1+json"
media_type_empty = "application/vnd.oci.empty.v1+json"

manifest_media_types = [media_type_manifest, media_type_index]

annotation_title = oras.defaults.annotation_title
annotation_document_name = "org.spdx.name"
annotation_document_namespace = "org.spdx.namespace"
annotation_spdx_version = "org.spdx.version"
annotation_creation_date = "org.spdx.created"
annotation_creators = "org.spdx.creator"

# the empty JSON object "{}"
empty_json = b"{}"
empty_json_digest = (
    "sha256:44136fa355b3678a1146ad16f7e8649e94fb4fc21fe77e8310c060f61caaff8a"
)

plain_http_host = "localhost"
