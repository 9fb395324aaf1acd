"""examingest — course document ingestion pipeline."""
