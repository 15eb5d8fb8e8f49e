"""Prometheus metrics for the upload service."""

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST


class UploadMetrics:
    """Upload counters bound to their own registry, one per app instance."""

    def __init__(self, registry: CollectorRegistry = None):
        self.registry = registry or CollectorRegistry()
        self.requests = Counter(
            'upload_requests_total',
            'Upload requests grouped by outcome.',
            labelnames=('status',),
            registry=self.registry,
        )
        self.files = Counter(
            'upload_files_total',
            'Files stored on disk.',
            registry=self.registry,
        )
        self.bytes = Counter(
            'upload_bytes_total',
            'Bytes written to the upload directory.',
            registry=self.registry,
        )
        self.downloads = Counter(
            'uploaded_file_requests_total',
            'GET requests for uploaded files.',
            registry=self.registry,
        )
        self.duration = Histogram(
            'upload_duration_seconds',
            'Time spent handling an upload request.',
            registry=self.registry,
        )

    def record_file(self, size: int):
        self.files.inc()
        self.bytes.inc(size)

    def record_request(self, status_code: int):
        self.requests.labels(status=str(status_code)).inc()

    def render(self):
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
