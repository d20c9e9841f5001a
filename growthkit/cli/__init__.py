"""GrowthKit command line interface."""
