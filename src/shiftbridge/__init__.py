"""Schedule import engine: CSV format detection, column mappings and shift normalization."""
