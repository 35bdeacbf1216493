"""Application logging and the data-quality problem log."""
