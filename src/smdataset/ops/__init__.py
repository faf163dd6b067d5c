"""Lower level operations for the dataset mutation workflow."""
