# Elasticsearch wire formats and HTTP client

from .bulk import BULK_CONTENT_TYPE, build_batch
from .mappings import DOC_TYPE, TIMESTAMP_FORMAT, build_index_template
from .naming import IndexTemplate, InvalidIndexTemplateError, index
