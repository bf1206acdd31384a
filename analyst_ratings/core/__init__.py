"""Cross-cutting helpers: money values, logging and telemetry."""
