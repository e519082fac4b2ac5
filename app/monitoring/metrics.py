"""Prometheus metrics for monitoring."""

from prometheus_client import Counter, Histogram

list_requests_total = Counter(
    "documents_list_requests_total", "Total number of list requests served")
documents_listed_total = Counter(
    "documents_listed_total", "Total number of documents returned by list requests")

insert_requests_total = Counter(
    "documents_insert_requests_total", "Total number of batch insert requests served")
documents_inserted_total = Counter(
    "documents_inserted_total", "Total number of documents persisted")
insert_batch_size = Histogram(
    "documents_insert_batch_size", "Records per batch insert", buckets=[1, 5, 10, 50, 100, 500, 1000])

request_errors_total = Counter(
    "documents_request_errors_total", "Total number of failed requests", ["kind"])

embedding_duration_seconds = Histogram(
    "documents_embedding_duration_seconds", "Embedding provider call duration", buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0])
storage_duration_seconds = Histogram(
    "documents_storage_duration_seconds", "Storage call duration", buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0])
