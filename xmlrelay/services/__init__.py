"""Domain services for the ingestion and storage pipeline."""
