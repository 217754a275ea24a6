"""Chemistry tables and nomenclature."""
