"""Mutation workflows exposed to callers."""
