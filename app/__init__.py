"""Console frontend package."""
